import pytest

from run_analytics.chart_geometry import ChartGeometryMapper, ChartInsets, map_metric_series
from run_analytics.errors import SeriesAlignmentError
from run_analytics.models import ChartFrame, MetricKind, MetricSeries


def _series(kind, values):
    return MetricSeries.from_values(kind, values)


def test_points_span_frame_edges():
    mapper = ChartGeometryMapper()
    geometry = mapper.map_series(_series(MetricKind.EFFICIENCY, [70, 80, 90]), ChartFrame(200, 100))

    assert [(p.x, p.y) for p in geometry.points] == [(0.0, 100.0), (100.0, 50.0), (200.0, 0.0)]


def test_last_point_lands_on_right_edge():
    mapper = ChartGeometryMapper()
    geometry = mapper.map_series(_series(MetricKind.SWAY, [61, 74, 68, 90, 83, 77, 70]), ChartFrame(333, 120))

    assert geometry.points[0].x == 0.0
    assert geometry.points[-1].x == 333.0
    xs = [p.x for p in geometry.points]
    assert xs == sorted(xs)


def test_flat_series_has_no_geometry():
    mapper = ChartGeometryMapper()
    geometry = mapper.map_many([_series(MetricKind.IMPACT, [75, 75, 75])], ChartFrame(200, 100))

    assert geometry.is_empty
    assert geometry.series[0].points == []
    assert geometry.series[0].markers == []


def test_single_sample_is_one_point_on_left_edge():
    mapper = ChartGeometryMapper()
    geometry = mapper.map_series(_series(MetricKind.EFFICIENCY, [50]), ChartFrame(200, 100))

    assert len(geometry.points) == 1
    assert geometry.points[0].x == 0.0
    assert geometry.points[0].y == 50.0


def test_empty_inputs():
    mapper = ChartGeometryMapper()
    frame = ChartFrame(200, 100)

    assert mapper.map_many([], frame).series == []

    geometry = mapper.map_many(
        [_series(MetricKind.EFFICIENCY, []), _series(MetricKind.SWAY, [])], frame
    )
    assert geometry.is_empty
    assert geometry.min_value is None
    assert [s.kind for s in geometry.series] == [MetricKind.EFFICIENCY, MetricKind.SWAY]


def test_series_share_min_and_max():
    mapper = ChartGeometryMapper()
    geometry = mapper.map_many(
        [_series(MetricKind.EFFICIENCY, [0, 50]), _series(MetricKind.SWAY, [50, 100])],
        ChartFrame(100, 100),
    )

    assert geometry.min_value == 0
    assert geometry.max_value == 100
    assert [p.y for p in geometry.series[0].points] == [100.0, 50.0]
    assert [p.y for p in geometry.series[1].points] == [50.0, 0.0]


def test_mismatched_counts_raise():
    mapper = ChartGeometryMapper()

    with pytest.raises(SeriesAlignmentError) as exc_info:
        mapper.map_many(
            [_series(MetricKind.EFFICIENCY, [1, 2, 3]), _series(MetricKind.SWAY, [1, 2])],
            ChartFrame(100, 100),
        )

    assert exc_info.value.counts == [3, 2]
    assert isinstance(exc_info.value, ValueError)


def test_insets_offset_plot_area():
    mapper = ChartGeometryMapper(insets=ChartInsets.history_chart())
    geometry = mapper.map_series(_series(MetricKind.EFFICIENCY, [60, 90]), ChartFrame(600, 300))

    first, last = geometry.points
    assert (first.x, first.y) == (40.0, 270.0)
    assert (last.x, last.y) == (590.0, 10.0)


def test_hip_markers_alternate_tint():
    mapper = ChartGeometryMapper()
    hip = mapper.map_series(_series(MetricKind.HIP_MOBILITY_LEFT, [70, 75, 80]), ChartFrame(100, 100))
    plain = mapper.map_series(_series(MetricKind.EFFICIENCY, [70, 75, 80]), ChartFrame(100, 100))

    assert [m.tint for m in hip.markers] == ["side", "metric_type", "side"]
    assert {m.radius for m in hip.markers} == {4.0}
    assert {m.tint for m in plain.markers} == {"metric"}
    assert {m.radius for m in plain.markers} == {3.0}


def test_axis_ticks_and_label_indices():
    mapper = ChartGeometryMapper(insets=ChartInsets.history_chart())
    ticks = mapper.y_axis_ticks(ChartFrame(600, 300))

    assert [t.label for t in ticks] == ["100", "75", "50", "25", "0"]
    assert [t.y for t in ticks] == [10.0, 75.0, 140.0, 205.0, 270.0]

    assert ChartGeometryMapper.x_axis_label_indices(12) == [0, 2, 4, 6, 8, 10]
    assert ChartGeometryMapper.x_axis_label_indices(3) == [0, 1, 2]
    assert ChartGeometryMapper.x_axis_label_indices(0) == []


def test_map_metric_series_returns_tuples():
    result = map_metric_series([_series(MetricKind.BRAKING, [10, 20])], 50, 40)

    assert result == [[(0.0, 40.0), (50.0, 0.0)]]


def test_single_samples_normalised_against_shared_range():
    mapper = ChartGeometryMapper()
    geometry = mapper.map_many(
        [_series(MetricKind.HIP_MOBILITY_LEFT, [60]), _series(MetricKind.HIP_MOBILITY_RIGHT, [80])],
        ChartFrame(100, 100),
    )

    left, right = geometry.series
    assert [(p.x, p.y) for p in left.points] == [(0.0, 100.0)]
    assert [(p.x, p.y) for p in right.points] == [(0.0, 0.0)]


def test_series_geometry_carries_shared_range():
    mapper = ChartGeometryMapper()
    geometry = mapper.map_many(
        [_series(MetricKind.EFFICIENCY, [70, 90]), _series(MetricKind.SWAY, [65, 80])],
        ChartFrame(100, 100),
    )

    for series in geometry.series:
        assert (series.min_value, series.max_value) == (65, 90)
    assert mapper.map_many([_series(MetricKind.SWAY, [])], ChartFrame(100, 100)).series[0].min_value is None
