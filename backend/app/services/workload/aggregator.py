"""
Workload aggregation over a report/assignment/staff snapshot.

Produces per-staff and per-team case counts plus resolution and response
averages. Averages with no underlying data stay None; consumers decide
what None means for them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from app.core.errors import DataIntegrityWarning
from app.core.logging import get_logger
from app.models.schemas import (
    ACTIVE_STATUSES, Assignment, Report, ReportStatus, Role, Staff,
)
from app.services.common import as_utc, days_between, mean_or_none

logger = get_logger(__name__)


@dataclass
class StaffWorkload:
    """Case counts and averages for one staff member."""
    staff: Staff
    active_case_count: int = 0
    resolved_case_count: int = 0
    total_case_count: int = 0
    avg_resolution_days: Optional[float] = None
    avg_response_days: Optional[float] = None
    first_assignment_at: Optional[datetime] = None
    last_assignment_at: Optional[datetime] = None

    @property
    def staff_id(self) -> int:
        return self.staff.id


@dataclass
class TeamWorkload:
    """A supervisor and the summed workload of the staff reporting to them."""
    supervisor: Staff
    members: List[StaffWorkload] = field(default_factory=list)
    active_case_count: int = 0
    resolved_case_count: int = 0
    total_case_count: int = 0
    avg_resolution_days: Optional[float] = None
    avg_response_days: Optional[float] = None
    first_assignment_at: Optional[datetime] = None
    last_assignment_at: Optional[datetime] = None

    @property
    def team_id(self) -> int:
        return self.supervisor.id

    @property
    def team_size(self) -> int:
        return len(self.members)

    @property
    def workload_per_member(self) -> float:
        return self.active_case_count / max(self.team_size, 1)


@dataclass
class WorkloadSnapshot:
    """Everything the scorers need, derived once per request."""
    reports: Dict[int, Report]
    staff: Dict[int, StaffWorkload]
    teams: List[TeamWorkload]
    assignments_by_report: Dict[int, List[Assignment]]
    assignments_by_staff: Dict[int, List[Assignment]]
    integrity_issues: List[DataIntegrityWarning] = field(default_factory=list)

    def assignment_count(self, report_id: int) -> int:
        return len(self.assignments_by_report.get(report_id, []))


def _valid_assignments(
    assignments: Sequence[Assignment],
    reports: Dict[int, Report],
    staff: Dict[int, Staff],
) -> tuple[List[Assignment], List[DataIntegrityWarning]]:
    """Drop assignments pointing at reports or staff missing from the snapshot."""
    valid: List[Assignment] = []
    issues: List[DataIntegrityWarning] = []

    for a in assignments:
        issue = None
        if a.report_id not in reports:
            issue = DataIntegrityWarning("report", a.id, a.report_id)
        elif a.staff_id not in staff:
            issue = DataIntegrityWarning("staff", a.id, a.staff_id)

        if issue is not None:
            logger.warning(f"Excluding record from aggregation: {issue}")
            issues.append(issue)
            continue
        valid.append(a)

    return valid, issues


def _resolution_days(assignment: Assignment, report: Report) -> Optional[float]:
    resolved_at = report.resolved_at or report.updated_at
    if resolved_at is None:
        return None
    return days_between(assignment.assigned_at, resolved_at)


def _response_days(assignment: Assignment) -> Optional[float]:
    if not assignment.has_action or assignment.updated_at is None:
        return None
    return days_between(assignment.assigned_at, assignment.updated_at)


def summarize_staff(
    member: Staff,
    assignments: Sequence[Assignment],
    reports: Dict[int, Report],
) -> StaffWorkload:
    """Build the workload for one staff member from their valid assignments."""
    workload = StaffWorkload(staff=member)
    resolution_days: List[float] = []
    response_days: List[float] = []

    for a in assignments:
        report = reports[a.report_id]
        workload.total_case_count += 1

        if report.status in ACTIVE_STATUSES:
            workload.active_case_count += 1
        elif report.status == ReportStatus.RESOLVED:
            workload.resolved_case_count += 1
            days = _resolution_days(a, report)
            if days is not None:
                resolution_days.append(days)

        days = _response_days(a)
        if days is not None:
            response_days.append(days)

    if assignments:
        assigned = [as_utc(a.assigned_at) for a in assignments]
        workload.first_assignment_at = min(assigned)
        workload.last_assignment_at = max(assigned)

    workload.avg_resolution_days = mean_or_none(resolution_days)
    workload.avg_response_days = mean_or_none(response_days)
    return workload


def summarize_team(supervisor: Staff, members: List[StaffWorkload]) -> TeamWorkload:
    team = TeamWorkload(supervisor=supervisor, members=members)

    for m in members:
        team.active_case_count += m.active_case_count
        team.resolved_case_count += m.resolved_case_count
        team.total_case_count += m.total_case_count

    # Simple mean of member averages; members without data don't count
    team.avg_resolution_days = mean_or_none(m.avg_resolution_days for m in members)
    team.avg_response_days = mean_or_none(m.avg_response_days for m in members)

    firsts = [m.first_assignment_at for m in members if m.first_assignment_at]
    lasts = [m.last_assignment_at for m in members if m.last_assignment_at]
    team.first_assignment_at = min(firsts) if firsts else None
    team.last_assignment_at = max(lasts) if lasts else None
    return team


def aggregate_workload(
    reports: Sequence[Report],
    assignments: Sequence[Assignment],
    staff: Sequence[Staff],
) -> WorkloadSnapshot:
    """
    Aggregate workload for every staff member and every supervisor's team.

    Input: full snapshot lists from the store.
    Output: WorkloadSnapshot with staff and teams keyed/ordered by id.
    """
    reports_by_id = {r.id: r for r in reports}
    staff_by_id = {s.id: s for s in staff}

    valid, issues = _valid_assignments(assignments, reports_by_id, staff_by_id)
    if issues:
        logger.warning(f"Excluded {len(issues)} assignment(s) with dangling references")

    by_report: Dict[int, List[Assignment]] = {}
    by_staff: Dict[int, List[Assignment]] = {}
    for a in valid:
        by_report.setdefault(a.report_id, []).append(a)
        by_staff.setdefault(a.staff_id, []).append(a)

    staff_workloads: Dict[int, StaffWorkload] = {}
    for sid in sorted(staff_by_id):
        staff_workloads[sid] = summarize_staff(
            staff_by_id[sid], by_staff.get(sid, []), reports_by_id
        )

    teams: List[TeamWorkload] = []
    for sid, workload in staff_workloads.items():
        if workload.staff.role != Role.SUPERVISOR:
            continue
        members = [
            w for w in staff_workloads.values()
            if w.staff.supervisor_id == sid and w.staff_id != sid
        ]
        teams.append(summarize_team(workload.staff, members))

    return WorkloadSnapshot(
        reports=reports_by_id,
        staff=staff_workloads,
        teams=teams,
        assignments_by_report=by_report,
        assignments_by_staff=by_staff,
        integrity_issues=issues,
    )
