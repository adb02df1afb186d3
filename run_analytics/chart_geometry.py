"""Map metric series onto line-chart coordinates."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from run_analytics.errors import SeriesAlignmentError
from run_analytics.models import ChartFrame, MetricKind, MetricSeries, Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartInsets:
    """Space reserved around the plot area for axis labels."""
    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @classmethod
    def history_chart(cls) -> "ChartInsets":
        """Insets of the run-history chart (labels left and below)."""
        return cls(left=40.0, top=10.0, right=10.0, bottom=30.0)

    def plot_area(self, frame: ChartFrame) -> ChartFrame:
        return ChartFrame(
            width=max(0.0, frame.width - self.left - self.right),
            height=max(0.0, frame.height - self.top - self.bottom),
        )


@dataclass(frozen=True)
class MarkerStyle:
    """Dot drawn on a data point.

    ``tint`` is one of ``"metric"`` (the metric's own colour), ``"side"``
    (left/right leg colour) or ``"metric_type"`` (mobility/stability colour).
    """
    center: Point
    radius: float
    tint: str


@dataclass(frozen=True)
class SeriesGeometry:
    kind: MetricKind
    points: List[Point] = field(default_factory=list)
    markers: List[MarkerStyle] = field(default_factory=list)
    # Shared range the points were normalised against
    min_value: Optional[float] = None
    max_value: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return not self.points


@dataclass(frozen=True)
class ChartGeometry:
    series: List[SeriesGeometry]
    min_value: Optional[float]
    max_value: Optional[float]

    @property
    def is_empty(self) -> bool:
        return all(s.is_empty for s in self.series)


@dataclass(frozen=True)
class AxisTick:
    label: str
    y: float


class ChartGeometryMapper:
    """Lay out one or more aligned series on a shared Y axis.

    X is ordinal: sample ``i`` of ``n`` sits at ``i * width / (n - 1)``, so the
    first sample is on the left edge and the last on the right edge. Y is the
    value normalised against the min/max of every series drawn together,
    with higher values nearer the top.
    """

    HIP_MARKER_RADIUS = 4.0
    MARKER_RADIUS = 3.0

    def __init__(self, insets: Optional[ChartInsets] = None):
        self.insets = insets or ChartInsets()

    def map_series(self, series: MetricSeries, frame: ChartFrame) -> SeriesGeometry:
        """Map a single series (its own min/max define the Y axis)."""
        return self.map_many([series], frame).series[0]

    def map_many(
        self,
        series_list: Sequence[MetricSeries],
        frame: ChartFrame,
    ) -> ChartGeometry:
        """Map several series that share timestamps onto one frame.

        Args:
            series_list: Series to draw together, all with the same sample count
            frame: Target drawing size

        Returns:
            ChartGeometry with one SeriesGeometry per input series (in order)

        Raises:
            SeriesAlignmentError: If the series have different sample counts
        """
        if not series_list:
            return ChartGeometry(series=[], min_value=None, max_value=None)

        counts = [len(s) for s in series_list]
        if len(set(counts)) > 1:
            raise SeriesAlignmentError(counts)

        n = counts[0]
        if n == 0:
            logger.debug("No samples to map")
            return ChartGeometry(
                series=[SeriesGeometry(kind=s.kind) for s in series_list],
                min_value=None,
                max_value=None,
            )

        all_values = [v for s in series_list for v in s.values()]
        min_value = min(all_values)
        max_value = max(all_values)

        area = self.insets.plot_area(frame)
        mapped = []
        for series in series_list:
            points = self._points(series.values(), min_value, max_value, area)
            mapped.append(
                SeriesGeometry(
                    kind=series.kind,
                    points=points,
                    markers=self._markers(series.kind, points),
                    min_value=min_value,
                    max_value=max_value,
                )
            )

        return ChartGeometry(series=mapped, min_value=min_value, max_value=max_value)

    def _points(
        self,
        values: List[int],
        min_value: float,
        max_value: float,
        area: ChartFrame,
    ) -> List[Point]:
        n = len(values)
        value_range = max_value - min_value

        if n == 1:
            # Nothing to connect; one anchor point on the left edge
            if value_range > 0:
                y = self._y(values[0], min_value, value_range, area.height)
            else:
                y = area.height / 2
            return [self._offset(0.0, y)]

        if value_range == 0:
            logger.debug("Flat series (all values %s), no geometry", min_value)
            return []

        x_step = area.width / (n - 1)
        points = []
        for index, value in enumerate(values):
            # Pin the last point so it lands exactly on the right edge
            x = area.width if index == n - 1 else index * x_step
            y = self._y(value, min_value, value_range, area.height)
            points.append(self._offset(x, y))
        return points

    @staticmethod
    def _y(value: float, min_value: float, value_range: float, height: float) -> float:
        normalized = (value - min_value) / value_range
        return height - normalized * height

    def _offset(self, x: float, y: float) -> Point:
        return Point(x=x + self.insets.left, y=y + self.insets.top)

    def _markers(self, kind: MetricKind, points: List[Point]) -> List[MarkerStyle]:
        if kind.is_hip:
            # Alternate leg colour and mobility/stability colour
            return [
                MarkerStyle(
                    center=p,
                    radius=self.HIP_MARKER_RADIUS,
                    tint="side" if i % 2 == 0 else "metric_type",
                )
                for i, p in enumerate(points)
            ]
        return [MarkerStyle(center=p, radius=self.MARKER_RADIUS, tint="metric") for p in points]

    def y_axis_ticks(self, frame: ChartFrame, count: int = 5) -> List[AxisTick]:
        """Horizontal grid lines labelled on the nominal 0-100 scale, top first."""
        if count < 2:
            return []
        area = self.insets.plot_area(frame)
        step = area.height / (count - 1)
        label_step = 100 / (count - 1)
        return [
            AxisTick(label=f"{100 - i * label_step:g}", y=self.insets.top + i * step)
            for i in range(count)
        ]

    @staticmethod
    def x_axis_label_indices(sample_count: int, max_labels: int = 5) -> List[int]:
        """Sample indices that get a date label below the chart."""
        if sample_count <= 0:
            return []
        step = max(1, sample_count // max_labels)
        return list(range(0, sample_count, step))


def map_metric_series(
    series_list: Sequence[MetricSeries],
    width: float,
    height: float,
) -> List[List[Tuple[float, float]]]:
    """Map series to plain ``(x, y)`` tuples (convenience function)."""
    geometry = ChartGeometryMapper().map_many(series_list, ChartFrame(width, height))
    return [[(p.x, p.y) for p in s.points] for s in geometry.series]
