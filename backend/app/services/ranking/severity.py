"""
Severity normalization for incident reports.
Each report type carries its own severity vocabulary; this maps them all
onto a common 1-5 scale.
"""
from __future__ import annotations

from typing import Dict, Optional, Union

from app.models.schemas import Report, ReportType


DEFAULT_SEVERITY = 2
MIN_SEVERITY = 1
MAX_SEVERITY = 5

# CRIME reports: injuryLevel
INJURY_SEVERITY: Dict[str, int] = {
    "NONE": 1,
    "MINOR": 2,
    "MODERATE": 4,
    "SEVERE": 5,
}

# FACILITY reports: severityLevel
FACILITY_SEVERITY: Dict[str, int] = {
    "LOW": 1,
    "MEDIUM": 2,
    "HIGH": 4,
    "CRITICAL": 5,
}

SEVERITY_TABLES: Dict[ReportType, Dict[str, int]] = {
    ReportType.CRIME: INJURY_SEVERITY,
    ReportType.FACILITY: FACILITY_SEVERITY,
}


def _coerce_type(report_type: Union[ReportType, str, None]) -> Optional[ReportType]:
    if isinstance(report_type, ReportType):
        return report_type
    if not isinstance(report_type, str):
        return None
    try:
        return ReportType(report_type.strip().upper())
    except ValueError:
        return None


def normalize_severity(report_type: Union[ReportType, str, None], level: object) -> int:
    """
    Map a type-specific severity value to 1-5.

    Missing, unknown or non-string input yields DEFAULT_SEVERITY; a crime
    report never defaults below "minor".
    """
    table = SEVERITY_TABLES.get(_coerce_type(report_type))
    if table is None or not isinstance(level, str):
        return DEFAULT_SEVERITY
    return table.get(level.strip().upper(), DEFAULT_SEVERITY)


def report_severity(report: Report) -> int:
    """Severity score for a report, reading the field its type uses."""
    if report.type == ReportType.CRIME:
        return normalize_severity(report.type, report.injury_level)
    return normalize_severity(report.type, report.severity_level)


def severity_label(score: int) -> str:
    """Display label for a severity score."""
    if score >= 5:
        return "Critical"
    if score >= 4:
        return "Severe"
    if score >= 3:
        return "Moderate"
    if score >= 2:
        return "Minor"
    return "Low"
