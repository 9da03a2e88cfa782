from datetime import timedelta

import pytest

from app.core.config import ScoringConfig
from app.models.schemas import ReportStatus, ReportType, Role
from app.services.ranking.priority import (
    PrioritySignals, compute_signals, paginate, rank_unassigned_reports,
    score_signals, staff_factor,
)
from app.services.workload.aggregator import aggregate_workload
from factories import NOW, make_assignment, make_report, make_staff


def _rank(reports, assignments=(), staff=(), available=1, config=None, report_type=None):
    snapshot = aggregate_workload(list(reports), list(assignments), list(staff))
    return rank_unassigned_reports(
        snapshot, available, config or ScoringConfig(), NOW, report_type
    )


def test_severe_crime_waiting_ten_days_is_clamped_to_100(config):
    report = make_report(1, ReportType.CRIME, submitted_days_ago=10, injury_level="SEVERE")

    signals = compute_signals(report, 1, config, NOW)

    assert signals.severity_score == 5
    assert signals.waiting_days == 10
    assert signals.staff_factor == 2.0
    assert signals.type_weight == 1.2
    assert signals.base_points == 50
    assert score_signals(signals) == 100


def test_fresh_low_facility_with_ten_staff_rounds_up_to_7(config):
    report = make_report(1, ReportType.FACILITY, submitted_days_ago=0, severity_level="LOW")

    signals = compute_signals(report, 10, config, NOW)

    assert signals.severity_score == 1
    assert signals.waiting_days == 0
    assert signals.staff_factor == pytest.approx(1.1)
    assert score_signals(signals) == 7


def test_half_points_round_up():
    signals = PrioritySignals(waiting_days=2, severity_score=0, type_weight=1.75, staff_factor=1.5)
    assert signals.base_points * signals.type_weight * signals.staff_factor == 10.5
    assert score_signals(signals) == 11


def test_staff_factor_guards_zero_available():
    assert staff_factor(0) == 2.0
    assert staff_factor(1) == 2.0
    assert staff_factor(4) == 1.25


def test_waiting_days_are_whole_days_and_never_negative(config):
    almost_two = make_report(1, submitted_days_ago=1.9)
    future = make_report(2).model_copy(update={"submitted_at": NOW + timedelta(days=3)})

    assert compute_signals(almost_two, 1, config, NOW).waiting_days == 1
    assert compute_signals(future, 1, config, NOW).waiting_days == 0


def test_type_weights_come_from_config():
    report = make_report(1, ReportType.CRIME, injury_level="NONE")
    config = ScoringConfig(crime_type_weight=2.0)

    # (0 + 6) * 2.0 * 2.0
    assert score_signals(compute_signals(report, 1, config, NOW)) == 24


def test_terminal_and_assigned_reports_are_never_ranked():
    reports = [
        make_report(1, status=ReportStatus.PENDING),
        make_report(2, status=ReportStatus.IN_PROGRESS),
        make_report(3, status=ReportStatus.RESOLVED),
        make_report(4, status=ReportStatus.REJECTED),
        make_report(5, status=ReportStatus.PENDING),
    ]
    assignments = [make_assignment(5, 20)]

    ranked = _rank(reports, assignments, [make_staff(20)])

    assert sorted(r.id for r in ranked) == [1, 2]
    assert all(r.assignment_count == 0 for r in ranked)


def test_assignment_to_unknown_staff_does_not_count():
    ranked = _rank([make_report(1)], [make_assignment(1, 404)], [])

    assert [r.id for r in ranked] == [1]


def test_order_is_score_then_older_submission_then_id():
    reports = [
        make_report(5, submitted_days_ago=0, severity_level="LOW"),
        make_report(4, submitted_days_ago=0.5, severity_level="LOW"),
        make_report(3, submitted_days_ago=0.5, severity_level="LOW"),
        make_report(2, submitted_days_ago=0, severity_level="CRITICAL"),
    ]

    ranked = _rank(reports)

    assert [r.id for r in ranked] == [2, 3, 4, 5]
    assert [r.rank for r in ranked] == [1, 2, 3, 4]
    scores = [r.priority_score for r in ranked]
    assert scores == sorted(scores, reverse=True)


def test_scores_are_integers_within_bounds():
    reports = [
        make_report(i, ReportType.CRIME, submitted_days_ago=i * 7, injury_level="SEVERE")
        for i in range(1, 15)
    ]

    for r in _rank(reports, available=0):
        assert isinstance(r.priority_score, int)
        assert 0 <= r.priority_score <= 100


def test_type_filter():
    reports = [make_report(1, ReportType.CRIME), make_report(2, ReportType.FACILITY)]

    assert [r.id for r in _rank(reports, report_type=ReportType.CRIME)] == [1]
    assert [r.id for r in _rank(reports, report_type=ReportType.FACILITY)] == [2]


def test_immediate_attention_flag_and_labels(config):
    reports = [
        make_report(1, ReportType.CRIME, submitted_days_ago=10, injury_level="SEVERE"),
        make_report(2, ReportType.FACILITY, severity_level="LOW"),
    ]

    first, second = _rank(reports, available=1)

    assert first.requires_immediate_attention is True
    assert first.severity_label == "Critical"
    assert second.requires_immediate_attention is False
    assert second.severity_label == "Low"
    assert first.available_staff_count == 1


def test_no_eligible_reports_gives_empty_ranking(config):
    assert _rank([]) == []
    page = paginate([], 1, 10, config)
    assert page.data == []
    assert page.total == 0
    assert page.summary.avg_waiting_days == 0.0


def test_pagination_covers_every_report_once_in_rank_order(config):
    reports = [
        make_report(i, submitted_days_ago=i % 7, severity_level=["LOW", "HIGH", "CRITICAL"][i % 3])
        for i in range(1, 26)
    ]
    ranked = _rank(reports, available=3)

    pages = [paginate(ranked, p, 10, config) for p in (1, 2, 3)]

    assert [len(p.data) for p in pages] == [10, 10, 5]
    assert all(p.total == 25 for p in pages)
    seen = [r.id for p in pages for r in p.data]
    assert seen == [r.id for r in ranked]
    assert len(set(seen)) == 25


def test_page_past_the_end_is_empty(config):
    ranked = _rank([make_report(1)])

    page = paginate(ranked, 5, 10, config)

    assert page.data == []
    assert page.total == 1
    assert page.page == 5


def test_summary_covers_whole_ranking(config):
    reports = [
        make_report(1, ReportType.CRIME, submitted_days_ago=10, injury_level="SEVERE"),
        make_report(2, severity_level="LOW", submitted_days_ago=1),
        make_report(3, severity_level="CRITICAL", submitted_days_ago=4),
    ]
    ranked = _rank(reports, available=1)

    summary = paginate(ranked, 1, 1, config).summary

    assert summary.total == 3
    assert summary.critical_severity == 2
    assert summary.high_priority == sum(1 for r in ranked if r.priority_score >= 60)
    assert summary.avg_waiting_days == 5.0


def test_ranking_is_idempotent():
    reports = [make_report(i, submitted_days_ago=i, severity_level="HIGH") for i in range(1, 8)]
    staff = [make_staff(50, Role.STAFF)]

    first = [r.model_dump() for r in _rank(reports, staff=staff)]
    second = [r.model_dump() for r in _rank(reports, staff=staff)]

    assert first == second
