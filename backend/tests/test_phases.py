import math

import pytest

from dashboard.phases import PROJECT_PHASES, calculate_median_completion, determine_project_phase


@pytest.mark.parametrize("pct", [0, 1, 2.5, 4, 5])
def test_low_percentages_are_inception(pct):
    assert determine_project_phase(pct).id == "inception"


@pytest.mark.parametrize("pct", [96, 97.5, 99, 100])
def test_high_percentages_are_complete(pct):
    assert determine_project_phase(pct).id == "complete"


@pytest.mark.parametrize("below,above,below_id,above_id", [
    (5, 6, "inception", "planning"),
    (20, 21, "planning", "design"),
    (40, 41, "design", "development"),
    (70, 71, "development", "testing"),
    (85, 86, "testing", "deployment"),
    (95, 96, "deployment", "complete"),
])
def test_boundaries_fall_on_the_right_side(below, above, below_id, above_id):
    assert determine_project_phase(below).id == below_id
    assert determine_project_phase(above).id == above_id


@pytest.mark.parametrize("pct", [-5, 150, 5.5, math.nan])
def test_unmatched_values_fall_back_to_inception(pct):
    assert determine_project_phase(pct) is PROJECT_PHASES[0]


def test_first_match_wins_when_ranges_overlap():
    a = PROJECT_PHASES[2].model_copy(update={"id": "a", "min_progress": 0, "max_progress": 50})
    b = PROJECT_PHASES[3].model_copy(update={"id": "b", "min_progress": 40, "max_progress": 100})
    assert determine_project_phase(45, [a, b]).id == "a"
    assert determine_project_phase(60, [a, b]).id == "b"


def test_table_partitions_zero_to_hundred():
    assert PROJECT_PHASES[0].min_progress == 0
    assert PROJECT_PHASES[-1].max_progress == 100
    for prev, nxt in zip(PROJECT_PHASES, PROJECT_PHASES[1:]):
        assert nxt.min_progress == prev.max_progress + 1
    assert [p.id for p in PROJECT_PHASES] == [
        "inception", "planning", "design", "development", "testing", "deployment", "complete",
    ]


def test_phase_serialises_with_camel_case_keys():
    dumped = PROJECT_PHASES[3].model_dump(by_alias=True)
    assert dumped["minProgress"] == 41
    assert dumped["maxProgress"] == 70
    assert dumped["particleEffect"]["type"] == "matrix"
    assert dumped["backgroundGradient"]["angle"] == 135


def test_median_of_empty_is_zero():
    assert calculate_median_completion([]) == 0


def test_median_even_and_odd(make_project):
    even = [make_project(completion=c) for c in (40, 10, 30, 20)]
    odd = [make_project(completion=c) for c in (30, 10, 20)]
    assert calculate_median_completion(even) == 25
    assert calculate_median_completion(odd) == 20
