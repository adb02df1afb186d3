"""Value types shared by the geometry and statistics modules."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple


class MetricKind(Enum):
    """Named biomechanical metrics scored per run."""
    EFFICIENCY = "Efficiency"
    BRAKING = "Braking"
    IMPACT = "Impact"
    SWAY = "Sway"
    VARIATION = "Variation"
    WARMUP = "Warmup"
    ENDURANCE = "Endurance"
    HIP_MOBILITY_LEFT = "Hip Mobility Left"
    HIP_MOBILITY_RIGHT = "Hip Mobility Right"
    HIP_STABILITY_LEFT = "Hip Stability Left"
    HIP_STABILITY_RIGHT = "Hip Stability Right"
    PORTRAIT_SYMMETRY = "Portrait Symmetry"
    OVERALL_SCORE = "Overall Score"

    @property
    def is_hip(self) -> bool:
        return self in _HIP_SIDES

    @property
    def side(self) -> Optional[str]:
        """'left' / 'right' for the per-leg hip metrics, else None."""
        return _HIP_SIDES.get(self)

    @property
    def is_mobility(self) -> bool:
        return self in (MetricKind.HIP_MOBILITY_LEFT, MetricKind.HIP_MOBILITY_RIGHT)


_HIP_SIDES: Dict[MetricKind, str] = {
    MetricKind.HIP_MOBILITY_LEFT: "left",
    MetricKind.HIP_MOBILITY_RIGHT: "right",
    MetricKind.HIP_STABILITY_LEFT: "left",
    MetricKind.HIP_STABILITY_RIGHT: "right",
}

PERFORMANCE_KINDS: Tuple[MetricKind, ...] = (
    MetricKind.EFFICIENCY,
    MetricKind.BRAKING,
    MetricKind.IMPACT,
    MetricKind.SWAY,
    MetricKind.VARIATION,
    MetricKind.WARMUP,
    MetricKind.ENDURANCE,
)


class GaitPhase(Enum):
    """The four phases of one leg's gait cycle, in cycle order."""
    LANDING = "Landing"
    STABILIZING = "Stabilizing"
    LAUNCHING = "Launching"
    FLYING = "Flying"

    @property
    def description(self) -> str:
        return _PHASE_DESCRIPTIONS[self]


_PHASE_DESCRIPTIONS = {
    GaitPhase.LANDING: "Initial foot contact with the ground",
    GaitPhase.STABILIZING: "Body weight shifts over the supporting leg",
    GaitPhase.LAUNCHING: "Push-off phase propelling forward",
    GaitPhase.FLYING: "Both feet off the ground, airborne",
}


class RiskLevel(Enum):
    LOW = "Low Risk"
    MODERATE = "Moderate Risk"
    HIGH = "High Risk"


# ---------------------------------------------------------------------------
# Samples and series
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MetricSample:
    """One scored measurement. Values are not clamped to 0-100."""
    timestamp: datetime
    value: int
    kind: MetricKind


@dataclass(frozen=True)
class MetricSeries:
    """Chronological samples of a single metric (first = oldest)."""
    kind: MetricKind
    samples: Tuple[MetricSample, ...] = ()

    def __post_init__(self):
        # Accept any sequence but store a tuple so the series stays immutable
        object.__setattr__(self, "samples", tuple(self.samples))
        for sample in self.samples:
            if sample.kind is not self.kind:
                raise ValueError(
                    f"Sample of kind {sample.kind.value!r} in {self.kind.value!r} series"
                )

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self) -> Iterator[MetricSample]:
        return iter(self.samples)

    @property
    def is_empty(self) -> bool:
        return not self.samples

    @property
    def latest(self) -> Optional[MetricSample]:
        return self.samples[-1] if self.samples else None

    def values(self) -> List[int]:
        return [s.value for s in self.samples]

    @classmethod
    def from_values(
        cls,
        kind: MetricKind,
        values: Iterable[int],
        start: Optional[datetime] = None,
        step: timedelta = timedelta(days=1),
    ) -> "MetricSeries":
        """Build a series from plain values spaced ``step`` apart."""
        start = start or datetime(2025, 1, 1)
        samples = [
            MetricSample(timestamp=start + i * step, value=int(v), kind=kind)
            for i, v in enumerate(values)
        ]
        return cls(kind=kind, samples=tuple(samples))


# ---------------------------------------------------------------------------
# Gait cycle
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LegGaitCycle:
    """Phase percentages for one leg.

    Expected to sum to 100 but never normalised or validated here.
    """
    landing: float
    stabilizing: float
    launching: float
    flying: float

    @property
    def total(self) -> float:
        return self.landing + self.stabilizing + self.launching + self.flying

    def percentage_for(self, phase: GaitPhase) -> float:
        return {
            GaitPhase.LANDING: self.landing,
            GaitPhase.STABILIZING: self.stabilizing,
            GaitPhase.LAUNCHING: self.launching,
            GaitPhase.FLYING: self.flying,
        }[phase]

    def phases(self) -> List[Tuple[GaitPhase, float]]:
        return [(phase, self.percentage_for(phase)) for phase in GaitPhase]


@dataclass(frozen=True)
class GaitCycleMetrics:
    """Both legs' gait cycles plus externally computed summary values."""
    left_leg: LegGaitCycle
    right_leg: LegGaitCycle
    symmetry_score: int = 0
    cadence: int = 0
    contact_time_ms: float = 0.0
    flight_time_ms: float = 0.0

    def leg(self, side: str) -> LegGaitCycle:
        if side == "left":
            return self.left_leg
        if side == "right":
            return self.right_leg
        raise ValueError(f"Unknown leg side: {side!r}")


# ---------------------------------------------------------------------------
# Runs and snapshots
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RunMetrics:
    """Per-run metric scores (0-100 by convention)."""
    efficiency: int
    braking: int
    impact: int
    sway: int
    variation: int
    warmup: int
    endurance: int

    # Hip scores are not recorded for every run
    hip_mobility_left: Optional[int] = None
    hip_mobility_right: Optional[int] = None
    hip_stability_left: Optional[int] = None
    hip_stability_right: Optional[int] = None
    portrait_symmetry: Optional[int] = None

    @property
    def overall_score(self) -> int:
        scores = [getattr(self, kind.name.lower()) for kind in PERFORMANCE_KINDS]
        return int(sum(scores) / len(scores))

    def value_for(self, kind: MetricKind) -> Optional[int]:
        if kind is MetricKind.OVERALL_SCORE:
            return self.overall_score
        return getattr(self, kind.name.lower())


@dataclass(frozen=True)
class LegInjuryMetrics:
    hip_mobility: int
    hip_stability: int

    @property
    def overall_score(self) -> int:
        return int((self.hip_mobility + self.hip_stability) / 2)


@dataclass(frozen=True)
class InjuryMetrics:
    """Left/right hip scores with derived averages and symmetry."""
    left_leg: LegInjuryMetrics
    right_leg: LegInjuryMetrics

    @property
    def hip_mobility(self) -> int:
        return int((self.left_leg.hip_mobility + self.right_leg.hip_mobility) / 2)

    @property
    def hip_stability(self) -> int:
        return int((self.left_leg.hip_stability + self.right_leg.hip_stability) / 2)

    @property
    def portrait_symmetry(self) -> int:
        mobility_diff = abs(self.left_leg.hip_mobility - self.right_leg.hip_mobility)
        stability_diff = abs(self.left_leg.hip_stability - self.right_leg.hip_stability)
        avg_difference = (mobility_diff + stability_diff) // 2
        return max(0, 100 - avg_difference * 2)

    @property
    def risk_level(self) -> RiskLevel:
        average = (self.hip_mobility + self.hip_stability + self.portrait_symmetry) // 3
        if average >= 75:
            return RiskLevel.LOW
        if average >= 50:
            return RiskLevel.MODERATE
        return RiskLevel.HIGH


@dataclass(frozen=True)
class RunRecord:
    """One completed run. Distance in miles, duration in seconds."""
    date: datetime
    distance: float
    duration: float
    metrics: RunMetrics

    @property
    def pace(self) -> Optional[float]:
        """Seconds per distance unit, None for a zero-distance run."""
        if self.distance <= 0:
            return None
        return self.duration / self.distance

    def value_for(self, kind: MetricKind) -> Optional[int]:
        return self.metrics.value_for(kind)


@dataclass(frozen=True)
class RunSnapshot:
    """Cumulative state of a run at one capture point."""
    snapshot_number: int
    distance: float
    duration: float
    timestamp: datetime
    performance: RunMetrics
    injury: InjuryMetrics
    gait: Optional[GaitCycleMetrics] = None


def series_from_history(runs: Sequence[RunRecord], kind: MetricKind) -> MetricSeries:
    """Series of one metric across a run history, skipping runs without it."""
    samples = []
    for run in runs:
        value = run.value_for(kind)
        if value is None:
            continue
        samples.append(MetricSample(timestamp=run.date, value=value, kind=kind))
    return MetricSeries(kind=kind, samples=tuple(samples))


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChartFrame:
    width: float
    height: float


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class Arc:
    """Angular range in degrees. ``end < start`` means a zero-length arc."""
    phase: GaitPhase
    start: float
    end: float

    @property
    def sweep(self) -> float:
        return max(0.0, self.end - self.start)

    @property
    def is_degenerate(self) -> bool:
        return self.end <= self.start


@dataclass(frozen=True)
class PairedValue:
    """Left/right values of one metric for one snapshot."""
    left: float
    right: float


@dataclass(frozen=True)
class HipValues:
    """Both hip metrics for both legs at one snapshot."""
    left_mobility: float
    right_mobility: float
    left_stability: float
    right_stability: float
