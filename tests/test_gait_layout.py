import pytest

from run_analytics.config import EngineConfig
from run_analytics.gait_layout import (
    GaitCyclePhaseLayout,
    compare_all_phases,
    compare_phase,
    phase_status,
    symmetry_band,
)
from run_analytics.models import GaitCycleMetrics, GaitPhase, LegGaitCycle


def _bounds(arcs):
    return [(pytest.approx(a.start), pytest.approx(a.end)) for a in arcs]


def test_layout_with_gaps_between_phases():
    arcs = GaitCyclePhaseLayout().layout(LegGaitCycle(20, 30, 25, 25))

    assert [a.phase for a in arcs] == list(GaitPhase)
    assert _bounds(arcs) == [(-180, -110), (-108, -2), (0, 88), (90, 180)]
    assert not any(a.is_degenerate for a in arcs)


def test_flying_arc_always_closes_circle():
    layout = GaitCyclePhaseLayout()

    for cycle in (LegGaitCycle(12, 22, 15, 51), LegGaitCycle(10, 10, 10, 10)):
        assert layout.layout(cycle)[-1].end == layout.end_angle == 180.0


def test_under_sum_is_not_normalised():
    arcs = GaitCyclePhaseLayout().layout(LegGaitCycle(10, 10, 10, 10))

    assert arcs[0].end == pytest.approx(-146.0)
    assert arcs[3].start == pytest.approx(-72.0)
    assert arcs[3].sweep == pytest.approx(252.0)


def test_over_sum_runs_past_closing_angle():
    arcs = GaitCyclePhaseLayout().layout(LegGaitCycle(40, 40, 40, 40))

    assert arcs[2].end == pytest.approx(250.0)
    assert arcs[3].is_degenerate
    assert arcs[3].sweep == 0.0


def test_tiny_phase_is_degenerate():
    arcs = GaitCyclePhaseLayout().layout(LegGaitCycle(0.5, 30, 20, 49.5))

    assert arcs[0].end < arcs[0].start
    assert arcs[0].is_degenerate
    assert arcs[0].sweep == 0.0


def test_custom_start_and_gap():
    layout = GaitCyclePhaseLayout(EngineConfig(gait_start=0.0, gait_gap=0.0))
    arcs = layout.layout(LegGaitCycle(25, 25, 25, 25))

    assert _bounds(arcs) == [(0, 90), (90, 180), (180, 270), (270, 360)]


def test_layout_both_legs():
    metrics = GaitCycleMetrics(
        left_leg=LegGaitCycle(15, 20, 15, 50),
        right_leg=LegGaitCycle(16, 21, 14, 49),
    )
    arcs = GaitCyclePhaseLayout().layout_both(metrics)

    assert set(arcs) == {"left", "right"}
    assert len(arcs["left"]) == len(arcs["right"]) == 4


def test_compare_phase_levels():
    metrics = GaitCycleMetrics(
        left_leg=LegGaitCycle(15, 20, 15, 50),
        right_leg=LegGaitCycle(16, 22, 19, 43),
    )

    assert compare_phase(metrics, GaitPhase.LANDING).level == "balanced"
    assert compare_phase(metrics, GaitPhase.STABILIZING).level == "slight"
    assert compare_phase(metrics, GaitPhase.LAUNCHING).level == "notable"
    assert compare_phase(metrics, GaitPhase.FLYING).difference == 7

    assert [c.phase for c in compare_all_phases(metrics)] == list(GaitPhase)


def test_phase_status_and_symmetry_band():
    assert phase_status(GaitPhase.LANDING, 10) == "low"
    assert phase_status(GaitPhase.LANDING, 15) == "optimal"
    assert phase_status(GaitPhase.FLYING, 60) == "high"

    assert symmetry_band(90) == "excellent"
    assert symmetry_band(70) == "moderate"
    assert symmetry_band(69) == "significant"
