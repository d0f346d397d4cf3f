# app/domains/loc/__init__.py

"""
TMS 애플리케이션의 'loc' 도메인 패키지입니다.

PostgreSQL의 'loc' 스키마에 해당하며, 태그와 유닛이 놓이는
물리적 위치(세척실, 멸균실, 수술실 등)를 계층 구조로 관리합니다.

주요 서브모듈:
- `models.py`: 'loc' 스키마의 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청/응답 유효성 검사용 스키마.
- `crud.py`: 비동기 CRUD 로직.
- `routers.py`: FastAPI API 엔드포인트.
"""

__title__ = "TMS Location Domain"
__description__ = "Manages the hierarchy of physical locations where tags are processed."
__version__ = "1.0.5"
__all__ = []
