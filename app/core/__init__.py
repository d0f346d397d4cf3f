# app/core/__init__.py

"""
애플리케이션 전반에서 사용하는 핵심 구성 요소 패키지입니다.

- `config.py`: 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 비동기 엔진, 세션 관리 (SQLModel 및 AsyncSQLAlchemy).
- `crud_base.py`: 모든 도메인이 상속하는 공통 CRUD 클래스.
- `dependencies.py`: FastAPI 의존성 주입 함수.
- `tasks.py`: ARQ 워커가 실행하는 공통 태스크.
"""

__title__ = "TMS Core"
__description__ = "Core components for the Tag Management Service."
__version__ = "1.0.5"
__all__ = []
