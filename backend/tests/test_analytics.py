from datetime import date

from dashboard.analytics import aggregate, build_timeline, month_iter, project_metrics
from dashboard.schemas import ProjectRecord
from dashboard.seed import INITIAL_PROJECTS


def test_empty_portfolio_is_all_zero():
    snap = aggregate([])
    assert snap.total_projects == 0
    assert snap.median_completion == 0
    assert snap.avg_completion == 0
    assert snap.efficiency_ratio == 0


def test_median(make_project):
    assert aggregate([make_project(completion=c) for c in (10, 20, 30, 40)]).median_completion == 25
    assert aggregate([make_project(completion=c) for c in (10, 20, 30)]).median_completion == 20


def test_rag_counts(make_project):
    projects = [make_project(rag=r) for r in ("Green", "Green", "Amber", "Red")]
    snap = aggregate(projects)
    assert (snap.projects_on_track, snap.projects_at_risk, snap.projects_overdue) == (2, 1, 1)


def test_unknown_rag_is_counted_nowhere(make_project):
    snap = aggregate([make_project(rag="Green"), make_project(rag="Blue"), make_project(rag="")])
    assert snap.total_projects == 3
    assert snap.projects_on_track + snap.projects_at_risk + snap.projects_overdue == 1


def test_hours_and_efficiency(make_project):
    projects = [make_project(allocated=100, consumed=50), make_project(allocated=200, consumed=50)]
    snap = aggregate(projects)
    assert snap.total_hours_allocated == 300
    assert snap.total_hours_consumed == 100
    assert snap.total_hours_remaining == 200
    assert snap.efficiency_ratio == 300


def test_zero_consumed_hours_gives_zero_efficiency(make_project):
    snap = aggregate([make_project(allocated=120, consumed=0)])
    assert snap.efficiency_ratio == 0
    assert snap.total_hours_remaining == 120


def test_overrun_leaves_negative_remaining(make_project):
    snap = aggregate([make_project(allocated=100, consumed=130)])
    assert snap.total_hours_remaining == -30
    assert snap.efficiency_ratio == 76.92


def test_aggregate_is_idempotent(make_project):
    projects = [make_project(completion=c, allocated=10 * c, consumed=c, rag="Amber") for c in (5, 50, 95)]
    assert aggregate(projects) == aggregate(projects)
    assert [p.completion_percentage for p in projects] == [5, 50, 95]


def test_seed_portfolio_snapshot():
    snap = aggregate([ProjectRecord.model_validate(p) for p in INITIAL_PROJECTS])
    dumped = snap.model_dump(by_alias=True)
    assert dumped["totalProjects"] == 9
    assert dumped["totalHoursAllocated"] == 2150
    assert dumped["totalHoursConsumed"] == 1020
    assert dumped["totalHoursRemaining"] == 1130
    assert dumped["avgCompletion"] == 46.67
    assert dumped["medianCompletion"] == 55
    assert dumped["projectsOnTrack"] == 7
    assert dumped["projectsAtRisk"] == 2
    assert dumped["projectsOverdue"] == 0
    assert dumped["efficiencyRatio"] == 210.78


def test_project_metrics(make_project):
    m = project_metrics(make_project(code="PRJ-001", completion=80, allocated=320, consumed=256))
    assert m == {
        "projectCode": "PRJ-001",
        "hoursRemaining": 64,
        "efficiency": 125,
        "burnRate": 8.53,
        "daysToCompletion": 8,
        "phase": "testing",
    }


def test_project_metrics_without_consumption(make_project):
    m = project_metrics(make_project(allocated=100, consumed=0))
    assert m["burnRate"] == 0
    assert m["daysToCompletion"] is None
    assert m["efficiency"] == 0


def test_month_iter_spans_partial_months():
    assert list(month_iter(date(2025, 11, 20), date(2026, 2, 3))) == ["2025-11", "2025-12", "2026-01", "2026-02"]


def test_timeline(make_project):
    projects = [
        make_project(code="A", start_date="2025-01-01", target_completion_date="2025-01-11"),
        make_project(code="B", start_date="2025-01-06", target_completion_date="2025-01-21"),
        make_project(code="C", start_date="not a date", target_completion_date="2025-02-01"),
    ]
    tl = build_timeline(projects, date(2025, 1, 16))
    assert tl["start"] == "2025-01-01"
    assert tl["end"] == "2025-01-21"
    assert tl["months"] == ["2025-01"]
    assert tl["todayOffset"] == 0.75
    assert [b["projectCode"] for b in tl["bars"]] == ["A", "B"]
    assert tl["bars"][1]["startOffset"] == 0.25
    assert tl["bars"][1]["widthFraction"] == 0.75


def test_timeline_empty_and_zero_length(make_project):
    assert build_timeline([], date(2025, 1, 1))["bars"] == []
    one_day = make_project(start_date="2025-03-01", target_completion_date="2025-03-01")
    tl = build_timeline([one_day], date(2025, 3, 5))
    assert tl["todayOffset"] == 0
    assert tl["bars"][0]["widthFraction"] == 0
