import pytest

from app.models.schemas import ReportStatus, Role, TeamStatus
from app.services.workload.aggregator import aggregate_workload
from app.services.workload.performance import (
    balance_component, performance_level, rank_teams, resolution_rate_pct,
    speed_component, summarize_teams, top_performers,
)
from factories import make_assignment, make_report, make_staff


def test_resolution_rate_guards_zero_total():
    assert resolution_rate_pct(0, 0) == 0.0
    assert resolution_rate_pct(3, 4) == 75.0
    assert resolution_rate_pct(4, 4) == 100.0


def test_speed_component():
    assert speed_component(None) == 50.0
    assert speed_component(0) == 100.0
    assert speed_component(4) == 80.0
    assert speed_component(30) == 0.0


def test_balance_component():
    assert balance_component(0) == 100.0
    assert balance_component(2.5) == 75.0
    assert balance_component(15) == 0.0


def test_empty_team_gets_neutral_score():
    metrics = rank_teams(aggregate_workload([], [], [make_staff(1, Role.SUPERVISOR)]))

    team = metrics[0]
    assert team.team_size == 0
    assert team.total_cases == 0
    assert team.resolution_rate_pct == 0.0
    assert team.avg_resolution_days is None
    assert team.avg_response_days is None
    assert team.workload_per_member == 0
    assert team.performance_score == 35.0
    assert team.team_status == TeamStatus.AVAILABLE


def test_team_performance_score():
    staff = [make_staff(1, Role.SUPERVISOR, name="Aminah"), make_staff(2, supervisor_id=1)]
    reports = [
        make_report(10, status=ReportStatus.RESOLVED, resolved_days_ago=0),
        make_report(11, status=ReportStatus.RESOLVED, resolved_days_ago=0),
        make_report(12, status=ReportStatus.RESOLVED, resolved_days_ago=0),
        make_report(13, status=ReportStatus.PENDING),
    ]
    assignments = [
        make_assignment(10, 2, assigned_days_ago=2),
        make_assignment(11, 2, assigned_days_ago=2),
        make_assignment(12, 2, assigned_days_ago=2),
        make_assignment(13, 2, assigned_days_ago=2),
    ]

    team = rank_teams(aggregate_workload(reports, assignments, staff))[0]

    # resolution 75, speed 100 - 2*5 = 90, balance 100 - 1*10 = 90
    assert team.resolution_rate_pct == 75.0
    assert team.avg_resolution_days == 2.0
    assert team.workload_per_member == 1.0
    assert team.performance_score == pytest.approx(0.5 * 75 + 0.3 * 90 + 0.2 * 90)
    assert team.performance_level == "Excellent"
    assert team.team_status == TeamStatus.LIGHT
    assert team.supervisor_name == "Aminah"
    assert team.department == "Security"


def test_teams_ranked_best_first_with_id_tiebreak():
    staff = [
        make_staff(3, Role.SUPERVISOR),
        make_staff(1, Role.SUPERVISOR),
        make_staff(2, Role.SUPERVISOR),
        make_staff(20, supervisor_id=2),
    ]
    reports = [make_report(10, status=ReportStatus.RESOLVED, resolved_days_ago=0)]
    assignments = [make_assignment(10, 20, assigned_days_ago=1)]

    ranked = rank_teams(aggregate_workload(reports, assignments, staff))

    assert [m.team_id for m in ranked] == [2, 1, 3]
    scores = [m.performance_score for m in ranked]
    assert scores == sorted(scores, reverse=True)


def test_top_performers_takes_at_most_three():
    staff = [make_staff(i, Role.SUPERVISOR) for i in range(1, 6)]
    ranked = rank_teams(aggregate_workload([], [], staff))

    assert len(top_performers(ranked)) == 3
    assert len(top_performers(ranked[:2])) == 2
    assert top_performers([]) == []


def test_resolution_rate_stays_in_bounds():
    staff = [make_staff(1, Role.SUPERVISOR), make_staff(2, supervisor_id=1)]
    reports = [
        make_report(i, status=[ReportStatus.RESOLVED, ReportStatus.REJECTED, ReportStatus.PENDING][i % 3])
        for i in range(1, 10)
    ]
    assignments = [make_assignment(i, 2) for i in range(1, 10)]

    for team in rank_teams(aggregate_workload(reports, assignments, staff)):
        assert 0 <= team.resolution_rate_pct <= 100
        assert 0 <= team.performance_score <= 100


@pytest.mark.parametrize("score,label", [
    (80, "Excellent"), (79.9, "Good"), (60, "Good"), (40, "Average"), (35, "Needs Improvement"),
])
def test_performance_level(score, label):
    assert performance_level(score) == label


def test_summary_with_no_teams():
    summary = summarize_teams([])

    assert summary.total_teams == 0
    assert summary.avg_performance_score == 0.0
    assert summary.top_performers == []


def test_summary_figures():
    staff = [
        make_staff(1, Role.SUPERVISOR),
        make_staff(2, Role.SUPERVISOR),
        make_staff(20, supervisor_id=2),
    ]
    reports = [make_report(10, status=ReportStatus.PENDING)]
    assignments = [make_assignment(10, 20)]

    summary = summarize_teams(rank_teams(aggregate_workload(reports, assignments, staff)))

    assert summary.total_teams == 2
    assert summary.total_active_cases == 1
    assert len(summary.top_performers) == 2
    assert summary.avg_resolution_rate_pct == 0.0
