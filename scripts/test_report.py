# flake8: noqa
# scripts/test_report.py

import asyncio
import logging
import subprocess
import sys
from pathlib import Path

import typer

from app.utils import test_report

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

cli = typer.Typer(help="Medical Device Test Report Generator")


@cli.command()
def generate(
    test_results: Path = typer.Option(..., "--test-results", help="JUnit XML 파일 또는 결과 디렉토리 경로"),
    coverage_report: Path = typer.Option(..., "--coverage-report", help="Cobertura 커버리지 XML 경로"),
    output_dir: Path = typer.Option(..., "--output-dir", help="보고서를 저장할 디렉토리"),
    project_name: str = typer.Option(test_report.DEFAULT_PROJECT_NAME, "--project-name", help="프로젝트 이름"),
    compliance_standard: str = typer.Option(
        test_report.DEFAULT_COMPLIANCE_STANDARD, "--compliance-standard", help="준수 표준"
    ),
    include_medical_validation: bool = typer.Option(
        True, "--include-medical-validation/--no-medical-validation", help="의료기기 검증 보고서 포함 여부"
    ),
):
    """
    테스트 결과와 커버리지로 규격 대응 보고서를 생성합니다.
    """
    options = test_report.ReportOptions(
        project_name=project_name,
        compliance_standard=compliance_standard,
        include_medical_validation=include_medical_validation,
    )
    try:
        asyncio.run(test_report.generate_reports(test_results, coverage_report, output_dir, options))
    except Exception:
        logger.exception("Failed to generate test report")
        raise typer.Exit(code=1)
    logger.info("Test report generation completed successfully")


@cli.command("run-tests")
def run_tests(
    tests_path: str = typer.Option("tests", "--tests-path", help="pytest로 실행할 테스트 경로"),
    output_dir: Path = typer.Option(Path("./TestResults"), "--output-dir", help="테스트 결과를 저장할 디렉토리"),
    coverage_threshold: int = typer.Option(95, "--coverage-threshold", help="의료기기 코드 커버리지 기준(%)"),
):
    """
    pytest를 커버리지와 함께 실행하고 보고서를 생성합니다. 테스트가 실패하면 종료 코드 1을 반환합니다.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    junit_path = output_dir / "test-results.xml"
    coverage_path = output_dir / "coverage.xml"
    command = [
        sys.executable, "-m", "pytest", tests_path,
        f"--junitxml={junit_path}",
        "--cov=app",
        f"--cov-report=xml:{coverage_path}",
        f"--cov-fail-under={coverage_threshold}",
    ]
    logger.info("Running: %s", " ".join(command))
    completed = subprocess.run(command)

    options = test_report.ReportOptions(threshold=coverage_threshold)
    asyncio.run(test_report.generate_reports(junit_path, coverage_path, output_dir, options))

    if completed.returncode != 0:
        logger.error("Tests failed with exit code %d", completed.returncode)
        raise typer.Exit(code=1)
    logger.info("Test execution and reporting completed successfully")


if __name__ == "__main__":
    cli()
