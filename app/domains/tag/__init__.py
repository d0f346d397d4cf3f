# app/domains/tag/__init__.py

"""
TMS 애플리케이션의 'tag' 도메인 패키지입니다.

PostgreSQL의 'tag' 스키마에 해당하며, 멸균/재처리 공정에서 사용하는
태그(번들, 바스켓, 멸균 로드, 이송 박스 등)와 태그 내용물(유닛, 아이템,
하위 태그, 지시계)을 관리합니다.

주요 서브모듈:
- `models.py`: 태그 Enum 및 SQLModel 정의.
- `schemas.py`: 요청/응답 스키마.
- `crud.py`: 태그/태그 내용물 데이터 접근 로직.
- `services.py`: 자동 태그 예약, 내용물 상태 판정, 태그 중첩 등 업무 규칙.
- `routers.py`: FastAPI API 엔드포인트.
- `tasks.py`: ARQ 백그라운드 태스크.
"""

__title__ = "TMS Tag Domain"
__description__ = "Tracks tags and their contents through the sterilization workflow."
__version__ = "1.0.5"
__all__ = []
