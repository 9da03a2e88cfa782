"""
Team performance scoring.

performance_score = 0.5 * resolution + 0.3 * speed + 0.2 * balance
  - resolution: resolution rate in percent
  - speed:      100 - 5 per average resolution day, floored at 0;
                50 when the team has no resolved cases with timing
  - balance:    100 - 10 per active case per member, floored at 0
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from app.models.schemas import TeamPerformanceMetrics, TeamPerformanceSummary
from app.services.common import round_half_up, round_or_none
from app.services.workload.aggregator import TeamWorkload, WorkloadSnapshot
from app.services.workload.availability import team_status


PERFORMANCE_WEIGHTS: Dict[str, float] = {
    "resolution": 0.5,
    "speed": 0.3,
    "balance": 0.2,
}

NEUTRAL_SPEED = 50.0
DAYS_PENALTY = 5.0
LOAD_PENALTY = 10.0
TOP_PERFORMERS = 3


@dataclass(frozen=True)
class PerformanceComponents:
    """Sub-scores behind a team's performance score, each 0-100."""
    resolution: float
    speed: float
    balance: float

    def weighted(self, weights: Optional[Dict[str, float]] = None) -> float:
        w = weights or PERFORMANCE_WEIGHTS
        return (
            w["resolution"] * self.resolution
            + w["speed"] * self.speed
            + w["balance"] * self.balance
        )


def resolution_rate_pct(resolved: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return min(100.0, resolved / max(total, 1) * 100)


def speed_component(avg_resolution_days: Optional[float]) -> float:
    if avg_resolution_days is None:
        return NEUTRAL_SPEED
    return max(0.0, 100.0 - avg_resolution_days * DAYS_PENALTY)


def balance_component(workload_per_member: float) -> float:
    return 100.0 - min(workload_per_member * LOAD_PENALTY, 100.0)


def performance_components(team: TeamWorkload) -> PerformanceComponents:
    return PerformanceComponents(
        resolution=resolution_rate_pct(team.resolved_case_count, team.total_case_count),
        speed=speed_component(team.avg_resolution_days),
        balance=balance_component(team.workload_per_member),
    )


def performance_score(team: TeamWorkload) -> float:
    """Blended 0-100 score, one decimal."""
    return round_half_up(performance_components(team).weighted(), 1)


def performance_level(score: float) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Average"
    return "Needs Improvement"


def team_metrics(team: TeamWorkload) -> TeamPerformanceMetrics:
    supervisor = team.supervisor
    score = performance_score(team)
    return TeamPerformanceMetrics(
        team_id=team.team_id,
        supervisor_name=supervisor.name,
        department=supervisor.department,
        position=supervisor.position,
        supervisor_email=supervisor.email,
        team_size=team.team_size,
        total_cases=team.total_case_count,
        resolved_cases=team.resolved_case_count,
        active_cases=team.active_case_count,
        resolution_rate_pct=round_half_up(
            resolution_rate_pct(team.resolved_case_count, team.total_case_count), 1
        ),
        avg_resolution_days=round_or_none(team.avg_resolution_days, 1),
        avg_response_days=round_or_none(team.avg_response_days, 1),
        workload_per_member=round_half_up(team.workload_per_member, 2),
        performance_score=score,
        performance_level=performance_level(score),
        team_status=team_status(team.workload_per_member),
        first_assignment_date=team.first_assignment_at,
        last_assignment_date=team.last_assignment_at,
    )


def rank_teams(snapshot: WorkloadSnapshot) -> List[TeamPerformanceMetrics]:
    """Every team, best performance first; ties by team id."""
    metrics = [team_metrics(t) for t in snapshot.teams]
    metrics.sort(key=lambda m: (-m.performance_score, m.team_id))
    return metrics


def top_performers(
    ranked: List[TeamPerformanceMetrics], top_n: int = TOP_PERFORMERS
) -> List[TeamPerformanceMetrics]:
    return ranked[:max(0, int(top_n))]


def summarize_teams(ranked: List[TeamPerformanceMetrics]) -> TeamPerformanceSummary:
    count = len(ranked)
    if count == 0:
        return TeamPerformanceSummary()
    return TeamPerformanceSummary(
        total_teams=count,
        avg_performance_score=round_half_up(
            sum(m.performance_score for m in ranked) / count, 1
        ),
        total_active_cases=sum(m.active_cases for m in ranked),
        avg_resolution_rate_pct=round_half_up(
            sum(m.resolution_rate_pct for m in ranked) / count, 1
        ),
        top_performers=top_performers(ranked),
    )
