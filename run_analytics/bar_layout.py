"""Bar geometry for left/right hip metric charts."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Union

from run_analytics.config import DEFAULT_CONFIG, EngineConfig
from run_analytics.models import ChartFrame, HipValues, PairedValue, Rect, RunSnapshot

logger = logging.getLogger(__name__)

VALUE_SCALE = 100.0


class BarLayoutMode(Enum):
    MIRRORED = "mirrored"
    OVERLAID = "overlaid"
    GROUPED = "grouped"


class HipMetric(Enum):
    MOBILITY = "mobility"
    STABILITY = "stability"


@dataclass(frozen=True)
class Bar:
    rect: Rect
    snapshot_index: int
    side: str  # "left" or "right"
    metric: Optional[HipMetric] = None


@dataclass(frozen=True)
class BarLayout:
    mode: BarLayoutMode
    bars: List[Bar] = field(default_factory=list)
    content_width: float = 0.0
    needs_scroll: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.bars


class BarLayoutEngine:
    """Compute bar rectangles for one of three chart variants.

    Heights are ``value / 100`` of the available height and are not clamped:
    a score above 100 produces a bar taller than its nominal space.
    """

    # Overlaid mode, as fractions of the group slot
    OVERLAID_BAR_FRACTION = 0.35
    OVERLAID_SPACING_FRACTION = 0.15

    # Mirrored mode, as fractions of the slot
    MIRRORED_BAR_FRACTION = 0.8
    MIRRORED_SPACING_FRACTION = 0.2

    # Grouped mode, fixed sizes
    GROUP_WIDTH = 80.0
    GROUP_GAP = 20.0
    GROUP_BAR_WIDTH = 15.0
    GROUP_BAR_SPACING = 5.0
    GROUP_PAIR_GAP = 10.0

    def __init__(self, config: Optional[EngineConfig] = None):
        config = config or DEFAULT_CONFIG
        self.margin = config.mirrored_margin

    def layout(
        self,
        values: Sequence[Union[PairedValue, HipValues]],
        mode: Union[BarLayoutMode, str],
        frame: ChartFrame,
    ) -> BarLayout:
        """Dispatch to the layout for ``mode``.

        Mirrored and overlaid modes take ``PairedValue`` items; grouped mode
        takes ``HipValues``.

        Raises:
            ValueError: If ``mode`` is not a known layout mode
        """
        mode = BarLayoutMode(mode)
        if mode is BarLayoutMode.MIRRORED:
            return self.mirrored(values, frame)
        if mode is BarLayoutMode.OVERLAID:
            return self.overlaid(values, frame)
        return self.grouped(values, frame)

    def mirrored(self, pairs: Sequence[PairedValue], frame: ChartFrame) -> BarLayout:
        """Left bars grow up from the centre line, right bars grow down."""
        if not pairs:
            return BarLayout(mode=BarLayoutMode.MIRRORED)

        center_y = frame.height / 2
        slot = frame.width / len(pairs)
        bar_width = slot * self.MIRRORED_BAR_FRACTION
        spacing = slot * self.MIRRORED_SPACING_FRACTION
        half_space = center_y - self.margin

        bars = []
        for index, pair in enumerate(pairs):
            x = index * (bar_width + spacing) + spacing / 2

            left_height = self._scaled(pair.left, half_space)
            bars.append(Bar(
                rect=Rect(x=x, y=center_y - left_height, width=bar_width, height=left_height),
                snapshot_index=index,
                side="left",
            ))

            right_height = self._scaled(pair.right, half_space)
            bars.append(Bar(
                rect=Rect(x=x, y=center_y, width=bar_width, height=right_height),
                snapshot_index=index,
                side="right",
            ))

        return BarLayout(mode=BarLayoutMode.MIRRORED, bars=bars, content_width=frame.width)

    def overlaid(self, pairs: Sequence[PairedValue], frame: ChartFrame) -> BarLayout:
        """Left and right bars side by side, both growing from the bottom."""
        if not pairs:
            return BarLayout(mode=BarLayoutMode.OVERLAID)

        group_width = frame.width / len(pairs)
        bar_width = group_width * self.OVERLAID_BAR_FRACTION
        spacing = group_width * self.OVERLAID_SPACING_FRACTION

        bars = []
        for index, pair in enumerate(pairs):
            group_x = index * group_width

            left_height = self._scaled(pair.left, frame.height)
            bars.append(Bar(
                rect=Rect(
                    x=group_x + spacing,
                    y=frame.height - left_height,
                    width=bar_width,
                    height=left_height,
                ),
                snapshot_index=index,
                side="left",
            ))

            right_height = self._scaled(pair.right, frame.height)
            bars.append(Bar(
                rect=Rect(
                    x=group_x + spacing + bar_width + spacing / 2,
                    y=frame.height - right_height,
                    width=bar_width,
                    height=right_height,
                ),
                snapshot_index=index,
                side="right",
            ))

        return BarLayout(mode=BarLayoutMode.OVERLAID, bars=bars, content_width=frame.width)

    def grouped(self, snapshots: Sequence[HipValues], frame: ChartFrame) -> BarLayout:
        """Four bars per snapshot in a fixed-width, horizontally scrolling strip."""
        if not snapshots:
            return BarLayout(mode=BarLayoutMode.GROUPED)

        step = self.GROUP_BAR_WIDTH + self.GROUP_BAR_SPACING
        # (x offset within group, side, metric, attribute)
        slots = (
            (0.0, "left", HipMetric.MOBILITY, "left_mobility"),
            (step, "right", HipMetric.MOBILITY, "right_mobility"),
            (step * 2 + self.GROUP_PAIR_GAP, "left", HipMetric.STABILITY, "left_stability"),
            (step * 3 + self.GROUP_PAIR_GAP, "right", HipMetric.STABILITY, "right_stability"),
        )

        bars = []
        for index, values in enumerate(snapshots):
            group_x = index * (self.GROUP_WIDTH + self.GROUP_GAP)
            for offset, side, metric, attr in slots:
                height = self._scaled(getattr(values, attr), frame.height)
                bars.append(Bar(
                    rect=Rect(
                        x=group_x + offset,
                        y=frame.height - height,
                        width=self.GROUP_BAR_WIDTH,
                        height=height,
                    ),
                    snapshot_index=index,
                    side=side,
                    metric=metric,
                ))

        content_width = len(snapshots) * (self.GROUP_WIDTH + self.GROUP_GAP)
        return BarLayout(
            mode=BarLayoutMode.GROUPED,
            bars=bars,
            content_width=content_width,
            needs_scroll=content_width > frame.width,
        )

    @staticmethod
    def _scaled(value: float, available: float) -> float:
        if value > VALUE_SCALE or value < 0:
            logger.debug("Bar value %s outside 0-%g, drawn unclamped", value, VALUE_SCALE)
        return value / VALUE_SCALE * available


def pairs_from_snapshots(
    snapshots: Sequence[RunSnapshot],
    metric: HipMetric,
) -> List[PairedValue]:
    """Left/right values of one hip metric for each snapshot."""
    pairs = []
    for snapshot in snapshots:
        left, right = snapshot.injury.left_leg, snapshot.injury.right_leg
        if metric is HipMetric.MOBILITY:
            pairs.append(PairedValue(left=left.hip_mobility, right=right.hip_mobility))
        else:
            pairs.append(PairedValue(left=left.hip_stability, right=right.hip_stability))
    return pairs


def hip_values_from_snapshots(snapshots: Sequence[RunSnapshot]) -> List[HipValues]:
    return [
        HipValues(
            left_mobility=s.injury.left_leg.hip_mobility,
            right_mobility=s.injury.right_leg.hip_mobility,
            left_stability=s.injury.left_leg.hip_stability,
            right_stability=s.injury.right_leg.hip_stability,
        )
        for s in snapshots
    ]
