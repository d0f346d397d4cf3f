# app/__init__.py

"""
TMS(Tag Management Service) FastAPI 애플리케이션의 메인 패키지입니다.

멸균/재처리 워크플로우에서 태그(번들, 바스켓, 이송 박스 등)와
그 안에 담긴 유닛/아이템의 이동을 추적합니다.

- core: 설정, 데이터베이스 연결, 공통 CRUD, 백그라운드 태스크
- domains: loc(위치), mst(기준 정보), tag(태그 및 태그 내용물)
- utils: 테스트 리포트 생성 등 도메인에 속하지 않는 유틸리티
"""

APP_NAME = "Tag Management Service"
APP_VERSION = "1.0.5"
API_PREFIX = "/api/v1"  # API 라우트의 공통 접두사 (main.py에서 적용)

# PEP 440 버전 정보 (pyproject.toml과 동일하게 유지)
__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Medical device inventory tagging service API backend."
__license__ = "MIT"
__all__ = []
