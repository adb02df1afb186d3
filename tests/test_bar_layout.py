from datetime import datetime

import pytest

from run_analytics.bar_layout import (
    BarLayoutEngine,
    BarLayoutMode,
    HipMetric,
    hip_values_from_snapshots,
    pairs_from_snapshots,
)
from run_analytics.models import (
    ChartFrame,
    HipValues,
    InjuryMetrics,
    LegInjuryMetrics,
    PairedValue,
    RunMetrics,
    RunSnapshot,
)


def _rect(bar):
    return (bar.rect.x, bar.rect.y, bar.rect.width, bar.rect.height)


def test_mirrored_bars_grow_from_center():
    layout = BarLayoutEngine().mirrored([PairedValue(left=50, right=100)], ChartFrame(100, 100))

    left, right = layout.bars
    assert left.side == "left" and right.side == "right"
    assert _rect(left) == pytest.approx((10, 30, 80, 20))
    assert _rect(right) == pytest.approx((10, 50, 80, 40))
    assert not layout.needs_scroll


def test_overlaid_bars_sit_side_by_side():
    pairs = [PairedValue(left=80, right=60), PairedValue(left=40, right=100)]
    layout = BarLayoutEngine().layout(pairs, "overlaid", ChartFrame(200, 100))

    assert layout.mode is BarLayoutMode.OVERLAID
    assert [b.snapshot_index for b in layout.bars] == [0, 0, 1, 1]
    assert _rect(layout.bars[0]) == pytest.approx((15, 20, 35, 80))
    assert _rect(layout.bars[1]) == pytest.approx((57.5, 40, 35, 60))
    assert layout.bars[2].rect.x == pytest.approx(115)
    assert layout.bars[3].rect.bottom == pytest.approx(100)


def test_grouped_bars_scroll_past_frame():
    snapshots = [HipValues(80, 70, 60, 50)] * 3
    layout = BarLayoutEngine().layout(snapshots, BarLayoutMode.GROUPED, ChartFrame(250, 100))

    assert len(layout.bars) == 12
    assert layout.content_width == 300.0
    assert layout.needs_scroll

    first_group = layout.bars[:4]
    assert [b.rect.x for b in first_group] == [0.0, 20.0, 50.0, 70.0]
    assert [b.rect.height for b in first_group] == pytest.approx([80, 70, 60, 50])
    assert [b.metric for b in first_group] == [
        HipMetric.MOBILITY, HipMetric.MOBILITY, HipMetric.STABILITY, HipMetric.STABILITY,
    ]
    assert [b.side for b in first_group] == ["left", "right", "left", "right"]
    assert layout.bars[4].rect.x == 100.0


def test_grouped_fits_without_scroll():
    layout = BarLayoutEngine().grouped([HipValues(80, 70, 60, 50)], ChartFrame(250, 100))

    assert layout.content_width == 100.0
    assert not layout.needs_scroll


def test_values_above_scale_are_not_clamped():
    layout = BarLayoutEngine().overlaid([PairedValue(left=120, right=0)], ChartFrame(100, 100))

    assert layout.bars[0].rect.height == pytest.approx(120)
    assert layout.bars[0].rect.y == pytest.approx(-20)
    assert layout.bars[1].rect.height == 0.0


def test_empty_input_gives_empty_layout():
    engine = BarLayoutEngine()

    for mode in BarLayoutMode:
        layout = engine.layout([], mode, ChartFrame(100, 100))
        assert layout.is_empty
        assert layout.mode is mode


def test_unknown_mode_raises():
    with pytest.raises(ValueError):
        BarLayoutEngine().layout([PairedValue(1, 2)], "stacked", ChartFrame(100, 100))


def test_values_from_snapshots():
    metrics = RunMetrics(80, 80, 80, 80, 80, 80, 80)
    snapshot = RunSnapshot(
        snapshot_number=1,
        distance=0.5,
        duration=240,
        timestamp=datetime(2025, 6, 30, 7, 0),
        performance=metrics,
        injury=InjuryMetrics(
            left_leg=LegInjuryMetrics(hip_mobility=72, hip_stability=81),
            right_leg=LegInjuryMetrics(hip_mobility=68, hip_stability=79),
        ),
    )

    assert pairs_from_snapshots([snapshot], HipMetric.MOBILITY) == [PairedValue(72, 68)]
    assert pairs_from_snapshots([snapshot], HipMetric.STABILITY) == [PairedValue(81, 79)]
    assert hip_values_from_snapshots([snapshot]) == [HipValues(72, 68, 81, 79)]
