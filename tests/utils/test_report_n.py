# tests/utils/test_report_n.py

"""
테스트 보고서 생성 모듈(app/utils/test_report.py)에 대한 테스트입니다.

- JUnit XML / Cobertura XML 파싱
- 요구사항 ID 추출 및 규격 준수 판정
- 보고서 파일 작성
"""

import json
from datetime import datetime
from pathlib import Path

import pytest

from app.utils import test_report as report

JUNIT_XML = """<?xml version="1.0" encoding="utf-8"?>
<testsuites>
  <testsuite name="pytest" tests="4" timestamp="2024-05-01T10:30:00">
    <testcase classname="tests.domains.test_tag_n" name="MD-REQ-001: insert unit" time="0.250">
      <properties>
        <property name="Category" value="MedicalDevice"/>
        <property name="Compliance" value="ISO-13485"/>
      </properties>
    </testcase>
    <testcase classname="tests.domains.test_tag_n" name="test_Critical_auto_tag" time="0.100">
      <failure message="assert 400 == 200">Traceback ...</failure>
    </testcase>
    <testcase classname="tests.domains.test_tag_n" name="test_skipped" time="0">
      <skipped message="not ready"/>
    </testcase>
    <testcase classname="tests.test_main" name="test_health" time="0.010">
      <error message="boom"/>
    </testcase>
  </testsuite>
</testsuites>
"""

COVERAGE_XML = """<?xml version="1.0" ?>
<coverage line-rate="0.9712" branch-rate="0.8" version="7.4">
  <packages>
    <package name="app.domains.tag" line-rate="0.97" branch-rate="0.8">
      <classes>
        <class name="services.py" filename="app/domains/tag/services.py" line-rate="0.95" branch-rate="0.75"/>
      </classes>
    </package>
  </packages>
</coverage>
"""


@pytest.fixture
def junit_file(tmp_path: Path) -> Path:
    path = tmp_path / "results" / "junit.xml"
    path.parent.mkdir()
    path.write_text(JUNIT_XML, encoding="utf-8")
    return path


@pytest.fixture
def coverage_file(tmp_path: Path) -> Path:
    path = tmp_path / "coverage.xml"
    path.write_text(COVERAGE_XML, encoding="utf-8")
    return path


def test_parse_junit_outcomes_and_traits(junit_file: Path):
    cases = report.parse_junit_xml(junit_file)

    assert [case.outcome for case in cases] == [report.PASSED, report.FAILED, report.SKIPPED, report.FAILED]
    first = cases[0]
    assert first.display_name == "tests.domains.test_tag_n.MD-REQ-001: insert unit"
    assert first.duration_ms == pytest.approx(250.0)
    assert first.start_time == datetime(2024, 5, 1, 10, 30)
    assert first.category == "MedicalDevice"
    assert first.traits["Compliance"] == "ISO-13485"
    assert cases[1].error_message == "assert 400 == 200"
    assert cases[2].category == "General"


def test_parse_test_results_from_directory(junit_file: Path):
    (junit_file.parent / "broken.xml").write_text("<testsuite", encoding="utf-8")

    results = report.parse_test_results(junit_file.parent)

    assert results.total == 4
    assert results.count(report.PASSED) == 1
    assert results.pass_rate == pytest.approx(25.0)


def test_parse_coverage_report(coverage_file: Path):
    coverage = report.parse_coverage_report(coverage_file)

    assert coverage.line_coverage == pytest.approx(97.12)
    assert coverage.branch_coverage == pytest.approx(80.0)
    assert coverage.class_coverage["services.py"].package_name == "app.domains.tag"
    assert coverage.class_coverage["services.py"].line_coverage == pytest.approx(95.0)


def test_parse_missing_coverage_report(tmp_path: Path):
    coverage = report.parse_coverage_report(tmp_path / "missing.xml")
    assert coverage.line_coverage == 0.0
    assert coverage.class_coverage == {}


def test_extract_requirement_id():
    assert report.extract_requirement_id("MD-REQ-001: insert unit") == "MD-REQ-001"
    assert report.extract_requirement_id("test_plain_name") == "N/A"


def test_is_compliant():
    passing = report.RunResults(test_cases=[
        report.CaseResult(name="a", display_name="a", outcome=report.PASSED),
    ])
    assert report.is_compliant(passing, report.CoverageData(line_coverage=95.0)) is True
    assert report.is_compliant(passing, report.CoverageData(line_coverage=94.9)) is False

    failing = report.RunResults(test_cases=[
        report.CaseResult(name="a", display_name="a", outcome=report.FAILED),
    ])
    assert report.is_compliant(failing, report.CoverageData(line_coverage=100.0)) is False


def test_compliance_summary_lists_issues():
    results = report.RunResults(test_cases=[
        report.CaseResult(name="a", display_name="a", outcome=report.FAILED),
    ])
    summary = report.render_compliance_summary(
        results, report.CoverageData(line_coverage=50.0), report.ReportOptions(), datetime(2024, 5, 1)
    )

    assert "Standard: ISO-13485" in summary
    assert "- Overall Status: NON-COMPLIANT" in summary
    assert "  * Failed tests detected" in summary
    assert "  * Code coverage below 95% threshold" in summary


def test_validation_report_traceability(junit_file: Path):
    results = report.parse_test_results(junit_file)
    page = report.render_validation_report(results, report.ReportOptions(), datetime(2024, 5, 1))

    assert "<td>MD-REQ-001</td>" in page
    assert "Test executed on 2024-05-01 10:30" in page
    assert "test_health" not in page


def test_main_report_escapes_and_counts(junit_file: Path, coverage_file: Path):
    results = report.parse_test_results(junit_file)
    coverage = report.parse_coverage_report(coverage_file)
    options = report.ReportOptions(project_name="Tags <Dev>")

    page = report.render_main_report(results, coverage, options, datetime(2024, 5, 1))

    assert "Tags &lt;Dev&gt; - Test Report" in page
    assert "1/4 Passed (25.0%)" in page
    assert "Compliance-specific tests: 1" in page
    assert "Critical system tests: 1" in page


@pytest.mark.asyncio
async def test_generate_reports_writes_files(junit_file: Path, coverage_file: Path, tmp_path: Path):
    output_dir = tmp_path / "out"

    written = await report.generate_reports(junit_file, coverage_file, output_dir)

    assert sorted(path.name for path in written) == [
        "ComplianceSummary.txt",
        "CoverageReport.json",
        "MedicalDeviceValidation.html",
        "TestExecution.json",
        "TestReport.html",
    ]
    execution = json.loads((output_dir / "TestExecution.json").read_text(encoding="utf-8"))
    assert execution["TotalTests"] == 4
    assert execution["FailedTests"] == 2
    assert execution["SkippedTests"] == 1
    assert execution["TestsByCategory"] == {"MedicalDevice": 1, "General": 3}
    assert execution["TestResults"][0]["Outcome"] == "Passed"

    coverage = json.loads((output_dir / "CoverageReport.json").read_text(encoding="utf-8"))
    assert coverage["ClassCoverage"]["services.py"]["PackageName"] == "app.domains.tag"


@pytest.mark.asyncio
async def test_generate_reports_without_validation(junit_file: Path, coverage_file: Path, tmp_path: Path):
    options = report.ReportOptions(include_medical_validation=False)
    written = await report.generate_reports(junit_file, coverage_file, tmp_path / "out", options)

    assert len(written) == 4
    assert not (tmp_path / "out" / "MedicalDeviceValidation.html").exists()
