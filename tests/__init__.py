# tests/__init__.py

"""
태그 관리 서비스(FastAPI 애플리케이션)의 테스트 스위트 패키지입니다.

주요 구성:
- `conftest.py`: 메모리 SQLite 엔진, 세션, 테스트 클라이언트, 도메인 데이터 픽스처를 정의합니다.
- `test_main.py`: 루트/헬스 체크/앱 정보 엔드포인트 테스트.
- `domains/`: 비즈니스 도메인(loc, mst, tag)별 테스트.
- `utils/`: 테스트 보고서 생성 도구 테스트.
"""

__title__ = "Tag Management API Tests"
__description__ = "Test suite for the tag management FastAPI application."
__version__ = "0.1.0"
__all__ = []
