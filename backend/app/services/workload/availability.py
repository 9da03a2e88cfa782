"""
Staff availability classification.
Turns active case counts into availability flags and status labels.
"""
from __future__ import annotations

from typing import List, Tuple

from app.core.config import ScoringConfig
from app.models.schemas import Role, Staff, TeamStatus, WorkloadStatus
from app.services.workload.aggregator import StaffWorkload, WorkloadSnapshot


# Closed lower bounds on workload per member, heaviest bucket first
TEAM_STATUS_THRESHOLDS: List[Tuple[float, TeamStatus]] = [
    (8.0, TeamStatus.OVERLOADED),
    (5.0, TeamStatus.BUSY),
    (3.0, TeamStatus.MODERATE),
    (1.0, TeamStatus.LIGHT),
]


def is_available(workload: StaffWorkload, overload_threshold: int) -> bool:
    return workload.active_case_count < overload_threshold


def in_assignment_pool(member: Staff, config: ScoringConfig) -> bool:
    """Whether a staff member can be handed new reports."""
    if member.role == Role.STAFF:
        return True
    return member.role == Role.SUPERVISOR and config.supervisors_in_pool


def available_staff_count(snapshot: WorkloadSnapshot, config: ScoringConfig) -> int:
    """Count pool members still under the overload threshold."""
    return sum(
        1
        for w in snapshot.staff.values()
        if in_assignment_pool(w.staff, config)
        and is_available(w, config.overload_threshold)
    )


def team_status(workload_per_member: float) -> TeamStatus:
    for lower_bound, status in TEAM_STATUS_THRESHOLDS:
        if workload_per_member >= lower_bound:
            return status
    return TeamStatus.AVAILABLE


def workload_status(active_cases: int, overload_threshold: int) -> WorkloadStatus:
    """Individual label: at the threshold is HIGH, double it is CRITICAL."""
    if active_cases >= 2 * overload_threshold:
        return WorkloadStatus.CRITICAL
    if active_cases >= overload_threshold:
        return WorkloadStatus.HIGH
    if 2 * active_cases >= overload_threshold:
        return WorkloadStatus.MODERATE
    return WorkloadStatus.LOW
