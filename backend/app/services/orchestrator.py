import sqlite3
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional
from app.core.config import ScoringConfig, settings
from app.core.errors import InputFetchError
from app.core.logging import get_logger
from app.db import crud
from app.models.schemas import (
    Assignment, PriorityReportPage, Report, ReportType, Staff,
    StaffWorkloadDetail, TeamPerformanceMetrics, TeamPerformanceSummary,
)
from app.services.common import as_utc
from app.services.ranking import paginate, rank_unassigned_reports
from app.services.workload import (
    WorkloadSnapshot, aggregate_workload, available_staff_count,
    rank_teams, staff_workload_detail, summarize_teams,
)

logger = get_logger(__name__)


class PipelineTimings:
    """Track timing metrics for pipeline stages."""

    def __init__(self):
        self.start_time = time.time()
        self.fetch_ms: float = 0
        self.aggregate_ms: float = 0
        self.score_ms: float = 0
        self.total_ms: float = 0

    def log_summary(self, request_id: str, label: str):
        self.total_ms = (time.time() - self.start_time) * 1000
        logger.info(
            f"[{request_id}] {label} completed - "
            f"fetch: {self.fetch_ms:.1f}ms, "
            f"aggregate: {self.aggregate_ms:.1f}ms, "
            f"score: {self.score_ms:.1f}ms, "
            f"total: {self.total_ms:.1f}ms"
        )


@dataclass(frozen=True)
class Snapshot:
    """Immutable store contents fetched at request start."""
    reports: List[Report]
    assignments: List[Assignment]
    staff: List[Staff]


def current_time() -> datetime:
    """Request clock; FROZEN_NOW pins it for reproducible dashboards."""
    if settings.frozen_now:
        return as_utc(settings.frozen_now)
    return datetime.now(timezone.utc)


def load_snapshot(store=crud) -> Snapshot:
    """
    Fetch reports, assignments and staff in full.

    Any store failure aborts the request; nothing is computed from a
    partial snapshot.
    """
    fetches = (
        ("reports", store.list_reports),
        ("assignments", store.list_assignments),
        ("staff", store.list_staff),
    )
    results = {}
    for source, fetch in fetches:
        try:
            results[source] = fetch()
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Snapshot fetch failed for {source}: {e}")
            raise InputFetchError(source, e) from e

    return Snapshot(
        reports=results["reports"],
        assignments=results["assignments"],
        staff=results["staff"],
    )


def _prepare(request_id: str, timings: PipelineTimings, store) -> WorkloadSnapshot:
    t0 = time.time()
    snapshot = load_snapshot(store)
    timings.fetch_ms = (time.time() - t0) * 1000

    logger.info(
        f"[{request_id}] Snapshot: {len(snapshot.reports)} reports, "
        f"{len(snapshot.assignments)} assignments, {len(snapshot.staff)} staff"
    )

    t0 = time.time()
    workload = aggregate_workload(snapshot.reports, snapshot.assignments, snapshot.staff)
    timings.aggregate_ms = (time.time() - t0) * 1000

    if workload.integrity_issues:
        logger.warning(
            f"[{request_id}] {len(workload.integrity_issues)} integrity issue(s) excluded"
        )
    return workload


def get_unassigned_priority_reports(
    report_type: Optional[ReportType] = None,
    page: int = 1,
    page_size: Optional[int] = None,
    store=crud,
    now: Optional[datetime] = None,
) -> PriorityReportPage:
    """
    Rank unassigned reports and return one page of the ranking.

    Stages:
    1. Fetch the full snapshot
    2. Aggregate staff workload and count available staff
    3. Score and order every eligible report, then slice the page
    """
    request_id = str(uuid.uuid4())[:8]
    timings = PipelineTimings()
    config = ScoringConfig.from_settings()
    now = now or current_time()

    workload = _prepare(request_id, timings, store)

    t0 = time.time()
    available = available_staff_count(workload, config)
    ranked = rank_unassigned_reports(workload, available, config, now, report_type)
    result = paginate(ranked, page, page_size or settings.default_page_size, config)
    timings.score_ms = (time.time() - t0) * 1000

    logger.info(
        f"[{request_id}] Ranked {len(ranked)} unassigned report(s) "
        f"with {available} available staff"
    )
    timings.log_summary(request_id, "Priority ranking")
    return result


def get_team_performance_metrics(store=crud) -> List[TeamPerformanceMetrics]:
    """Performance rows for every team, best first."""
    request_id = str(uuid.uuid4())[:8]
    timings = PipelineTimings()

    workload = _prepare(request_id, timings, store)

    t0 = time.time()
    ranked = rank_teams(workload)
    timings.score_ms = (time.time() - t0) * 1000

    timings.log_summary(request_id, "Team performance")
    return ranked


def get_team_performance_summary(store=crud) -> TeamPerformanceSummary:
    return summarize_teams(get_team_performance_metrics(store))


def get_staff_workload(
    staff_id: int,
    store=crud,
    now: Optional[datetime] = None,
) -> Optional[StaffWorkloadDetail]:
    """Workload breakdown for one staff member; None if not in the snapshot."""
    request_id = str(uuid.uuid4())[:8]
    timings = PipelineTimings()
    config = ScoringConfig.from_settings()
    now = now or current_time()

    workload = _prepare(request_id, timings, store)

    t0 = time.time()
    detail = staff_workload_detail(workload, staff_id, config, now)
    timings.score_ms = (time.time() - t0) * 1000

    timings.log_summary(request_id, f"Staff {staff_id} workload")
    return detail
