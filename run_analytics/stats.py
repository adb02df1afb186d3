"""Aggregate statistics over metric series and run histories."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union

import numpy as np

from run_analytics.config import DEFAULT_CONFIG, EngineConfig
from run_analytics.models import (
    PERFORMANCE_KINDS,
    MetricKind,
    MetricSample,
    MetricSeries,
    RunRecord,
    series_from_history,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Inclusive distance ranges (miles) for the race-distance records
DISTANCE_BUCKETS: Dict[str, Tuple[float, float]] = {
    "5K": (3.0, 3.3),
    "10K": (6.0, 6.5),
}

CONSISTENCY_LABELS: Tuple[Tuple[int, str], ...] = (
    (80, "Very Consistent"),
    (60, "Consistent"),
    (40, "Moderate"),
)

OPTIMAL_UPPER_BOUND = 100

# Lower bound of each metric's optimal range
OPTIMAL_LOWER_BOUNDS: Dict[MetricKind, int] = {
    MetricKind.EFFICIENCY: 80,
    MetricKind.BRAKING: 80,
    MetricKind.IMPACT: 80,
    MetricKind.SWAY: 75,
    MetricKind.VARIATION: 80,
    MetricKind.WARMUP: 75,
    MetricKind.ENDURANCE: 75,
    MetricKind.HIP_MOBILITY_LEFT: 75,
    MetricKind.HIP_MOBILITY_RIGHT: 75,
    MetricKind.HIP_STABILITY_LEFT: 75,
    MetricKind.HIP_STABILITY_RIGHT: 75,
    MetricKind.PORTRAIT_SYMMETRY: 80,
    MetricKind.OVERALL_SCORE: 75,
}

HIP_KINDS: Tuple[MetricKind, ...] = (
    MetricKind.HIP_MOBILITY_LEFT,
    MetricKind.HIP_MOBILITY_RIGHT,
    MetricKind.HIP_STABILITY_LEFT,
    MetricKind.HIP_STABILITY_RIGHT,
)


class TrendDirection(Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


@dataclass(frozen=True)
class Trend:
    """Direction plus the size of the change between the two windows."""
    direction: TrendDirection
    delta: float = 0.0

    @classmethod
    def stable(cls) -> "Trend":
        return cls(TrendDirection.STABLE, 0.0)

    @property
    def is_improving(self) -> bool:
        return self.direction is TrendDirection.IMPROVING

    @property
    def is_declining(self) -> bool:
        return self.direction is TrendDirection.DECLINING


@dataclass(frozen=True)
class MetricStats:
    average: int
    best: int
    worst: int
    range: int
    consistency: int
    trend: Trend

    @property
    def consistency_label(self) -> str:
        return consistency_label(self.consistency)


@dataclass(frozen=True)
class MetricBest:
    score: int
    run: RunRecord


@dataclass(frozen=True)
class SampleBest:
    score: int
    sample: MetricSample


@dataclass(frozen=True)
class Asymmetry:
    left_average: float
    right_average: float
    difference: float
    notable: bool


@dataclass(frozen=True)
class PersonalBests:
    metric_bests: Dict[MetricKind, MetricBest] = field(default_factory=dict)
    best_overall_run: Optional[RunRecord] = None
    fastest_5k: Optional[RunRecord] = None
    fastest_10k: Optional[RunRecord] = None
    longest_run: Optional[RunRecord] = None

    def best_for(self, kind: MetricKind) -> Optional[MetricBest]:
        return self.metric_bests.get(kind)


@dataclass(frozen=True)
class HistoryTotals:
    total_runs: int
    total_distance: float
    total_duration: float
    average_pace: Optional[float]


@dataclass(frozen=True)
class Insight:
    title: str
    message: str
    tone: str  # "positive", "warning", "info", "neutral"
    kind: Optional[MetricKind] = None


def consistency_label(score: int) -> str:
    """Human label for a 0-100 consistency score."""
    for threshold, label in CONSISTENCY_LABELS:
        if score >= threshold:
            return label
    return "Variable"


def metric_status(kind: MetricKind, value: int) -> str:
    """Status text for a score relative to the metric's optimal range."""
    lower = OPTIMAL_LOWER_BOUNDS[kind]
    if value >= OPTIMAL_UPPER_BOUND - 5:
        return "Excellent"
    if value >= lower + 5:
        return "Good"
    if value >= lower:
        return "Fair"
    return "Needs Improvement"


def _first_extreme(
    items: Iterable[T],
    key: Callable[[T], Optional[float]],
    pick_max: bool,
) -> Optional[Tuple[T, float]]:
    """Item with the max/min key; the earliest item wins ties.

    Items whose key is None are skipped.
    """
    chosen = None
    chosen_key = None
    for item in items:
        k = key(item)
        if k is None:
            continue
        if chosen_key is None or (k > chosen_key if pick_max else k < chosen_key):
            chosen, chosen_key = item, k
    if chosen_key is None:
        return None
    return chosen, chosen_key


class StatsAggregator:
    """Best/worst/average/consistency/trend queries.

    Every query over an empty input returns None rather than a zero value,
    so callers can tell "no data" from a real score.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or DEFAULT_CONFIG

    # -- scalar aggregates -------------------------------------------------

    @staticmethod
    def average(values: Sequence[float]) -> Optional[int]:
        """Arithmetic mean truncated toward zero."""
        if len(values) == 0:
            return None
        return int(np.mean(values))

    @staticmethod
    def value_range(values: Sequence[float]) -> Optional[int]:
        if len(values) == 0:
            return None
        return int(max(values) - min(values))

    @classmethod
    def consistency_score(cls, values: Sequence[float]) -> Optional[int]:
        """0-100, higher for lower spread (100 minus twice the std deviation).

        The deviation is measured around the truncated average, the same
        average every other statistic reports.
        """
        average = cls.average(values)
        if average is None:
            return None
        deviations = np.asarray(values, dtype=float) - average
        std_dev = float(np.sqrt(np.mean(deviations ** 2)))
        return max(0, min(100, int(100 - std_dev * 2)))

    def asymmetry(
        self,
        left: Union[float, Sequence[float]],
        right: Union[float, Sequence[float]],
        threshold: Optional[float] = None,
    ) -> Optional[Asymmetry]:
        """Difference between left and right averages.

        Args:
            left: Left-side average, or the left values to average
            right: Right-side average, or the right values to average
                (sequences use the truncated average)
            threshold: Difference above which the asymmetry is notable
                (defaults to ``config.asymmetry_threshold``)
        """
        left_avg = self._as_average(left)
        right_avg = self._as_average(right)
        if left_avg is None or right_avg is None:
            return None

        threshold = self.config.asymmetry_threshold if threshold is None else threshold
        difference = abs(left_avg - right_avg)
        return Asymmetry(
            left_average=left_avg,
            right_average=right_avg,
            difference=difference,
            notable=difference > threshold,
        )

    def _as_average(self, value: Union[float, Sequence[float]]) -> Optional[float]:
        if np.isscalar(value):
            return value
        return self.average(value)

    # -- trends ------------------------------------------------------------

    def classify_trend(
        self,
        earlier: Sequence[float],
        later: Sequence[float],
        epsilon: Optional[float] = None,
    ) -> Trend:
        """Compare the truncated averages of two windows of a series."""
        epsilon = self.config.trend_epsilon if epsilon is None else epsilon
        earlier_avg = self.average(earlier)
        later_avg = self.average(later)
        if earlier_avg is None or later_avg is None:
            return Trend.stable()

        change = later_avg - earlier_avg
        if abs(change) < epsilon:
            return Trend(TrendDirection.STABLE, abs(change))
        if change > 0:
            return Trend(TrendDirection.IMPROVING, abs(change))
        return Trend(TrendDirection.DECLINING, abs(change))

    def trend_for(self, values: Sequence[float], epsilon: Optional[float] = None) -> Trend:
        """Earlier half vs later half (the later half takes the odd sample)."""
        if len(values) < 2:
            return Trend.stable()
        midpoint = len(values) // 2
        return self.classify_trend(values[:midpoint], values[midpoint:], epsilon)

    # -- per-metric summaries ----------------------------------------------

    def metric_stats(self, values: Sequence[float]) -> Optional[MetricStats]:
        if len(values) == 0:
            return None
        best = max(values)
        worst = min(values)
        return MetricStats(
            average=self.average(values),
            best=best,
            worst=worst,
            range=best - worst,
            consistency=self.consistency_score(values),
            trend=self.trend_for(values),
        )

    def stats_for_series(self, series: MetricSeries) -> Optional[MetricStats]:
        return self.metric_stats(series.values())

    def stats_for_history(
        self,
        runs: Sequence[RunRecord],
        kind: MetricKind,
    ) -> Optional[MetricStats]:
        return self.stats_for_series(series_from_history(runs, kind))

    def best_sample(self, series: MetricSeries) -> Optional[SampleBest]:
        found = _first_extreme(series, lambda s: s.value, pick_max=True)
        return SampleBest(score=found[0].value, sample=found[0]) if found else None

    def worst_sample(self, series: MetricSeries) -> Optional[SampleBest]:
        found = _first_extreme(series, lambda s: s.value, pick_max=False)
        return SampleBest(score=found[0].value, sample=found[0]) if found else None

    # -- run history queries -----------------------------------------------

    def best_run(self, runs: Sequence[RunRecord], kind: MetricKind) -> Optional[MetricBest]:
        """Run with the highest score for ``kind``; the earliest run wins ties."""
        found = _first_extreme(runs, lambda r: r.value_for(kind), pick_max=True)
        return MetricBest(score=found[0].value_for(kind), run=found[0]) if found else None

    def worst_run(self, runs: Sequence[RunRecord], kind: MetricKind) -> Optional[MetricBest]:
        found = _first_extreme(runs, lambda r: r.value_for(kind), pick_max=False)
        return MetricBest(score=found[0].value_for(kind), run=found[0]) if found else None

    def best_overall_run(self, runs: Sequence[RunRecord]) -> Optional[RunRecord]:
        found = _first_extreme(runs, lambda r: r.metrics.overall_score, pick_max=True)
        return found[0] if found else None

    def longest_run(self, runs: Sequence[RunRecord]) -> Optional[RunRecord]:
        found = _first_extreme(runs, lambda r: r.distance, pick_max=True)
        return found[0] if found else None

    def fastest_in_range(
        self,
        runs: Sequence[RunRecord],
        low: float,
        high: float,
    ) -> Optional[RunRecord]:
        """Fastest-paced run with ``low <= distance <= high``."""
        in_range = [r for r in runs if low <= r.distance <= high and r.distance > 0]
        found = _first_extreme(in_range, lambda r: r.pace, pick_max=False)
        return found[0] if found else None

    def fastest_for_bucket(self, runs: Sequence[RunRecord], name: str) -> Optional[RunRecord]:
        """Fastest run for a named race distance such as ``"5K"``.

        Raises:
            ValueError: If ``name`` is not in DISTANCE_BUCKETS
        """
        if name not in DISTANCE_BUCKETS:
            raise ValueError(
                f"Unknown distance bucket {name!r}, expected one of {sorted(DISTANCE_BUCKETS)}"
            )
        low, high = DISTANCE_BUCKETS[name]
        return self.fastest_in_range(runs, low, high)

    def personal_bests(self, runs: Sequence[RunRecord]) -> PersonalBests:
        metric_bests = {}
        for kind in PERFORMANCE_KINDS + HIP_KINDS + (MetricKind.PORTRAIT_SYMMETRY,):
            best = self.best_run(runs, kind)
            if best is not None:
                metric_bests[kind] = best

        return PersonalBests(
            metric_bests=metric_bests,
            best_overall_run=self.best_overall_run(runs),
            fastest_5k=self.fastest_for_bucket(runs, "5K"),
            fastest_10k=self.fastest_for_bucket(runs, "10K"),
            longest_run=self.longest_run(runs),
        )

    def history_totals(self, runs: Sequence[RunRecord]) -> Optional[HistoryTotals]:
        if not runs:
            return None
        total_distance = sum(r.distance for r in runs)
        total_duration = sum(r.duration for r in runs)
        return HistoryTotals(
            total_runs=len(runs),
            total_distance=total_distance,
            total_duration=total_duration,
            average_pace=total_duration / total_distance if total_distance > 0 else None,
        )

    def generate_insights(
        self,
        runs: Sequence[RunRecord],
        kinds: Sequence[MetricKind] = PERFORMANCE_KINDS,
    ) -> List[Insight]:
        """Short coaching notes on trends and consistency across a history."""
        if not runs:
            return []

        insights = []
        consistencies = []
        for kind in kinds:
            stats = self.stats_for_history(runs, kind)
            if stats is None:
                continue
            consistencies.append(stats.consistency)

            if stats.trend.is_improving and stats.trend.delta > self.config.insight_change:
                insights.append(Insight(
                    title=f"{kind.value} Improving",
                    message=(
                        f"Your {kind.value.lower()} has improved by "
                        f"{stats.trend.delta:g} points over this period!"
                    ),
                    tone="positive",
                    kind=kind,
                ))
            elif stats.trend.is_declining and stats.trend.delta > self.config.insight_change:
                insights.append(Insight(
                    title=f"{kind.value} Declining",
                    message=(
                        f"Your {kind.value.lower()} has decreased by "
                        f"{stats.trend.delta:g} points. Consider reviewing your training."
                    ),
                    tone="warning",
                    kind=kind,
                ))

        if consistencies and self.average(consistencies) >= 75:
            insights.append(Insight(
                title="Excellent Consistency",
                message="Your metrics are very consistent, showing strong form stability.",
                tone="info",
            ))

        if not insights:
            insights.append(Insight(
                title="Keep Training",
                message="Continue your current training to see improvements in your metrics.",
                tone="neutral",
            ))

        logger.debug("Generated %d insights from %d runs", len(insights), len(runs))
        return insights


def compute_personal_bests(
    runs: Sequence[RunRecord],
    config: Optional[EngineConfig] = None,
) -> PersonalBests:
    """Personal bests for a run history (convenience function)."""
    return StatsAggregator(config).personal_bests(runs)
