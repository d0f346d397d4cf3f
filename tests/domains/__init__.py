# tests/domains/__init__.py

"""
FastAPI 애플리케이션의 도메인별 테스트 스위트 패키지입니다.

주요 테스트 모듈:
- `test_loc_n.py`: 'loc' 도메인 (장소 관리)에 대한 테스트.
- `test_mst_n.py`: 'mst' 도메인 (고객, 아이템, 유닛, 지시계)에 대한 테스트.
- `test_tag_n.py`: 'tag' 도메인 API 엔드포인트에 대한 테스트.
- `test_tag_services_n.py`: 'tag' 도메인 서비스 계층의 업무 규칙 테스트.
"""

__title__ = "Tag Management Domain Tests"
__description__ = "Categorized tests for each business domain in the tag management service."
__version__ = "0.1.0"
__all__ = []
