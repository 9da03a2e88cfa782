"""
Priority scoring for unassigned reports.

priority = round((waiting_days * 2 + severity * 6) * type_weight * staff_factor)
clamped to 0-100, where staff_factor = 1 + 1 / max(available_staff, 1).
Ranking is a total order: score desc, then older submission, then lower id.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from app.core.config import ScoringConfig
from app.models.schemas import (
    ACTIVE_STATUSES, PriorityReportPage, PrioritySummary, RankedReport,
    Report, ReportType,
)
from app.services.common import as_utc, round_half_up, whole_days_between
from app.services.ranking.severity import report_severity, severity_label
from app.services.workload.aggregator import WorkloadSnapshot


WAITING_DAY_POINTS = 2
SEVERITY_POINTS = 6
MIN_PRIORITY = 0
MAX_PRIORITY = 100
CRITICAL_SEVERITY = 5


@dataclass(frozen=True)
class PrioritySignals:
    """Transparent inputs to the priority formula."""
    waiting_days: int
    severity_score: int
    type_weight: float
    staff_factor: float

    @property
    def base_points(self) -> int:
        return self.waiting_days * WAITING_DAY_POINTS + self.severity_score * SEVERITY_POINTS


def type_weight(report_type: ReportType, config: ScoringConfig) -> float:
    if report_type == ReportType.CRIME:
        return config.crime_type_weight
    return config.facility_type_weight


def staff_factor(available_staff: int) -> float:
    """Fewer available staff means more urgency; 1 or none doubles it."""
    return 1.0 + 1.0 / max(available_staff, 1)


def compute_signals(
    report: Report,
    available_staff: int,
    config: ScoringConfig,
    now: datetime,
) -> PrioritySignals:
    return PrioritySignals(
        waiting_days=whole_days_between(report.submitted_at, now),
        severity_score=report_severity(report),
        type_weight=type_weight(report.type, config),
        staff_factor=staff_factor(available_staff),
    )


def score_signals(signals: PrioritySignals) -> int:
    raw = signals.base_points * signals.type_weight * signals.staff_factor
    return int(min(MAX_PRIORITY, max(MIN_PRIORITY, round_half_up(raw))))


def is_unassigned(report: Report, snapshot: WorkloadSnapshot) -> bool:
    return report.status in ACTIVE_STATUSES and snapshot.assignment_count(report.id) == 0


def _sort_key(item: RankedReport):
    return (-item.priority_score, as_utc(item.submitted_at), item.id)


def rank_unassigned_reports(
    snapshot: WorkloadSnapshot,
    available_staff: int,
    config: ScoringConfig,
    now: datetime,
    report_type: Optional[ReportType] = None,
) -> List[RankedReport]:
    """
    Score and order every eligible report.

    Input: aggregated snapshot, available staff count from the classifier.
    Output: full ranking with 1-based rank set; never paginated here.
    """
    ranked: List[RankedReport] = []

    for report in snapshot.reports.values():
        if report_type is not None and report.type != report_type:
            continue
        if not is_unassigned(report, snapshot):
            continue

        signals = compute_signals(report, available_staff, config, now)
        score = score_signals(signals)

        ranked.append(
            RankedReport(
                id=report.id,
                type=report.type,
                status=report.status,
                location=report.location,
                submitted_at=report.submitted_at,
                submitted_by=report.submitted_by,
                submitter_name=report.submitter_name,
                title=report.title,
                description=report.description,
                injury_level=report.injury_level,
                severity_level=report.severity_level,
                rank=0,
                waiting_days=signals.waiting_days,
                severity_score=signals.severity_score,
                severity_label=severity_label(signals.severity_score),
                assignment_count=snapshot.assignment_count(report.id),
                available_staff_count=available_staff,
                priority_score=score,
                requires_immediate_attention=score >= config.high_priority_threshold,
            )
        )

    ranked.sort(key=_sort_key)
    for i, item in enumerate(ranked, start=1):
        item.rank = i

    return ranked


def summarize_ranking(ranked: List[RankedReport], config: ScoringConfig) -> PrioritySummary:
    if not ranked:
        return PrioritySummary()
    return PrioritySummary(
        total=len(ranked),
        high_priority=sum(1 for r in ranked if r.priority_score >= config.high_priority_threshold),
        critical_severity=sum(1 for r in ranked if r.severity_score >= CRITICAL_SEVERITY),
        avg_waiting_days=round_half_up(sum(r.waiting_days for r in ranked) / len(ranked), 1),
    )


def paginate(
    ranked: List[RankedReport],
    page: int,
    page_size: int,
    config: ScoringConfig,
) -> PriorityReportPage:
    """Slice an already-ranked list; pages never re-sort."""
    page = max(1, page)
    page_size = max(1, page_size)
    start = (page - 1) * page_size
    return PriorityReportPage(
        data=ranked[start:start + page_size],
        total=len(ranked),
        page=page,
        page_size=page_size,
        summary=summarize_ranking(ranked, config),
    )
