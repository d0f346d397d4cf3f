# app/utils/__init__.py

"""
FastAPI 애플리케이션의 'utils' 패키지입니다.

특정 비즈니스 도메인에 속하지 않는 범용 유틸리티를 포함합니다.

주요 서브모듈:
- `test_report.py`: JUnit/Cobertura 결과로 의료기기 규격 대응 테스트 보고서를 생성.
"""

# flake8: noqa
from . import test_report

# 패키지 메타데이터
__title__ = "Tag Management Service Utilities"
__description__ = "Provides common, reusable utility functions for the application."
__version__ = "1.0.5"
__all__ = ["test_report"]
