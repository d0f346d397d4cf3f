# app/domains/mst/__init__.py

"""
TMS 애플리케이션의 'mst'(Master data) 도메인 패키지입니다.

PostgreSQL의 'mst' 스키마에 해당하며, 태그에 담기는 대상인
고객(Customer), 아이템(Item, 제품/기구 세트 정의), 유닛(Unit, 개별 실물 세트),
멸균 지시계(Indicator)의 기준 정보를 관리합니다.
"""

__title__ = "TMS Master Data Domain"
__description__ = "Manages customers, items, units and sterilization indicators."
__version__ = "1.0.5"
__all__ = []
