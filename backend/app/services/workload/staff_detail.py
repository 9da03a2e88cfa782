"""Per-staff workload breakdown for the staff workload dialog."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from app.core.config import ScoringConfig
from app.models.schemas import ACTIVE_STATUSES, StaffWorkloadDetail
from app.services.common import days_between, round_half_up, round_or_none, whole_days_between
from app.services.ranking.severity import report_severity
from app.services.workload.aggregator import WorkloadSnapshot
from app.services.workload.availability import is_available, workload_status

URGENT_SEVERITY = 4


def staff_workload_detail(
    snapshot: WorkloadSnapshot,
    staff_id: int,
    config: ScoringConfig,
    now: datetime,
) -> Optional[StaffWorkloadDetail]:
    """Return the breakdown for one staff member, or None if unknown."""
    workload = snapshot.staff.get(staff_id)
    if workload is None:
        return None

    no_action = stale = urgent = overdue = recent = 0
    case_ages: list[int] = []

    for a in snapshot.assignments_by_staff.get(staff_id, []):
        since_assigned = days_between(a.assigned_at, now)
        if since_assigned <= config.recent_window_days:
            recent += 1

        report = snapshot.reports[a.report_id]
        if report.status not in ACTIVE_STATUSES:
            continue

        case_ages.append(whole_days_between(report.submitted_at, now))
        if report_severity(report) >= URGENT_SEVERITY:
            urgent += 1
        if since_assigned >= config.overdue_after_days:
            overdue += 1
        if not a.has_action:
            no_action += 1
            if since_assigned >= config.stale_after_days:
                stale += 1

    member = workload.staff
    return StaffWorkloadDetail(
        staff_id=member.id,
        staff_name=member.name,
        role=member.role,
        department=member.department,
        active_cases=workload.active_case_count,
        resolved_cases=workload.resolved_case_count,
        total_cases=workload.total_case_count,
        no_action_cases=no_action,
        stale_no_action_cases=stale,
        urgent_cases=urgent,
        overdue_cases=overdue,
        recent_assignments=recent,
        avg_case_age_days=round_half_up(sum(case_ages) / len(case_ages), 1) if case_ages else 0.0,
        oldest_case_days=max(case_ages) if case_ages else 0,
        avg_resolution_days=round_or_none(workload.avg_resolution_days, 1),
        avg_response_days=round_or_none(workload.avg_response_days, 1),
        is_available=is_available(workload, config.overload_threshold),
        workload_status=workload_status(workload.active_case_count, config.overload_threshold),
    )
