# Workload module - Staff/team aggregation, availability and performance
from .aggregator import (
    StaffWorkload,
    TeamWorkload,
    WorkloadSnapshot,
    aggregate_workload,
)
from .availability import (
    available_staff_count,
    in_assignment_pool,
    is_available,
    team_status,
    workload_status,
)
from .performance import (
    PerformanceComponents,
    performance_components,
    performance_level,
    performance_score,
    rank_teams,
    summarize_teams,
    top_performers,
)
from .staff_detail import staff_workload_detail

__all__ = [
    "StaffWorkload",
    "TeamWorkload",
    "WorkloadSnapshot",
    "aggregate_workload",
    "available_staff_count",
    "in_assignment_pool",
    "is_available",
    "team_status",
    "workload_status",
    "PerformanceComponents",
    "performance_components",
    "performance_level",
    "performance_score",
    "rank_teams",
    "summarize_teams",
    "top_performers",
    "staff_workload_detail",
]
