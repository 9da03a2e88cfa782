# Ranking module - Severity normalization and unassigned report prioritization
from .severity import (
    DEFAULT_SEVERITY,
    FACILITY_SEVERITY,
    INJURY_SEVERITY,
    normalize_severity,
    report_severity,
    severity_label,
)
from .priority import (
    PrioritySignals,
    compute_signals,
    is_unassigned,
    paginate,
    rank_unassigned_reports,
    score_signals,
    staff_factor,
    summarize_ranking,
    type_weight,
)

__all__ = [
    "DEFAULT_SEVERITY",
    "FACILITY_SEVERITY",
    "INJURY_SEVERITY",
    "normalize_severity",
    "report_severity",
    "severity_label",
    "PrioritySignals",
    "compute_signals",
    "is_unassigned",
    "paginate",
    "rank_unassigned_reports",
    "score_signals",
    "staff_factor",
    "summarize_ranking",
    "type_weight",
]
