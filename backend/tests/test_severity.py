import pytest

from app.models.schemas import ReportType
from app.services.ranking.severity import (
    DEFAULT_SEVERITY, normalize_severity, report_severity, severity_label,
)
from factories import make_report


@pytest.mark.parametrize("level,expected", [
    ("NONE", 1), ("MINOR", 2), ("MODERATE", 4), ("SEVERE", 5),
])
def test_crime_injury_levels(level, expected):
    assert normalize_severity(ReportType.CRIME, level) == expected


@pytest.mark.parametrize("level,expected", [
    ("LOW", 1), ("MEDIUM", 2), ("HIGH", 4), ("CRITICAL", 5),
])
def test_facility_severity_levels(level, expected):
    assert normalize_severity(ReportType.FACILITY, level) == expected


@pytest.mark.parametrize("level", [None, "", "   ", "catastrophic", 42, ["HIGH"]])
def test_missing_or_garbage_defaults_to_minor(level):
    assert normalize_severity(ReportType.CRIME, level) == DEFAULT_SEVERITY
    assert normalize_severity(ReportType.FACILITY, level) == DEFAULT_SEVERITY


def test_case_and_whitespace_are_ignored():
    assert normalize_severity("crime", " severe ") == 5
    assert normalize_severity(ReportType.FACILITY, "critical") == 5


def test_unknown_report_type_defaults():
    assert normalize_severity("PARKING", "HIGH") == DEFAULT_SEVERITY
    assert normalize_severity(None, "HIGH") == DEFAULT_SEVERITY


def test_vocabularies_do_not_cross():
    # A facility word on a crime report is not understood
    assert normalize_severity(ReportType.CRIME, "CRITICAL") == DEFAULT_SEVERITY
    assert normalize_severity(ReportType.FACILITY, "SEVERE") == DEFAULT_SEVERITY


def test_report_severity_reads_the_field_for_its_type():
    crime = make_report(1, ReportType.CRIME, injury_level="SEVERE", severity_level="LOW")
    facility = make_report(2, ReportType.FACILITY, injury_level="SEVERE", severity_level="LOW")
    assert report_severity(crime) == 5
    assert report_severity(facility) == 1


@pytest.mark.parametrize("score,label", [
    (5, "Critical"), (4, "Severe"), (3, "Moderate"), (2, "Minor"), (1, "Low"),
])
def test_severity_label(score, label):
    assert severity_label(score) == label
