# tests/utils/__init__.py

"""
app/utils 패키지(보고서 생성 도구 등)에 대한 테스트 모듈을 포함합니다.
"""
