"""
Gait cycle dial layout

Features:
- Four phase arcs per leg (landing, stabilizing, launching, flying)
- Fixed gap before every phase boundary, none after the last phase
- Left/right phase comparison with asymmetry bands
- Phase status against typical running ranges
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from run_analytics.config import DEFAULT_CONFIG, EngineConfig
from run_analytics.models import Arc, GaitCycleMetrics, GaitPhase, LegGaitCycle

logger = logging.getLogger(__name__)

FULL_CIRCLE = 360.0

# Typical share of the cycle (percent) for a healthy running gait
OPTIMAL_PHASE_RANGES: Dict[GaitPhase, Tuple[float, float]] = {
    GaitPhase.LANDING: (12.0, 18.0),
    GaitPhase.STABILIZING: (18.0, 25.0),
    GaitPhase.LAUNCHING: (12.0, 18.0),
    GaitPhase.FLYING: (40.0, 55.0),
}

# Left/right difference bands (percentage points)
SLIGHT_ASYMMETRY = 1.5
NOTABLE_ASYMMETRY = 3.0


@dataclass(frozen=True)
class PhaseComparison:
    phase: GaitPhase
    left: float
    right: float
    difference: float
    level: str  # "balanced", "slight", "notable"


class GaitCyclePhaseLayout:
    """Turn phase percentages into dial arcs.

    Angles are in degrees. The dial starts at ``config.gait_start`` and each
    arc ends ``config.gait_gap`` degrees short of the next boundary, except
    the flying arc, which always closes the circle at ``start + 360``.

    Percentages are used as given. A leg whose phases do not sum to 100 is
    laid out anyway: an under-sum leaves the flying arc long, an over-sum
    makes the first arcs run past the closing angle. Arcs whose gap is wider
    than their phase come out with ``end < start`` and are drawn as
    zero-length arcs.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        config = config or DEFAULT_CONFIG
        self.start = config.gait_start
        self.gap = config.gait_gap

    def layout(self, cycle: LegGaitCycle) -> List[Arc]:
        """Lay out one leg's four arcs in phase order."""
        phases = cycle.phases()
        last_phase = phases[-1][0]

        arcs = []
        cumulative = 0.0
        for phase, percentage in phases:
            segment_start = self.start + (cumulative / 100) * FULL_CIRCLE
            cumulative += percentage
            if phase is last_phase:
                segment_end = self.start + FULL_CIRCLE
            else:
                segment_end = self.start + (cumulative / 100) * FULL_CIRCLE - self.gap
            arcs.append(Arc(phase=phase, start=segment_start, end=segment_end))

        degenerate = [a.phase.value for a in arcs if a.is_degenerate]
        if degenerate:
            logger.debug("Zero-length gait arcs: %s", ", ".join(degenerate))
        if abs(cycle.total - 100.0) > 1e-6:
            logger.debug("Gait phases sum to %.2f%%, laid out without normalising", cycle.total)

        return arcs

    def layout_both(self, metrics: GaitCycleMetrics) -> Dict[str, List[Arc]]:
        return {
            "left": self.layout(metrics.left_leg),
            "right": self.layout(metrics.right_leg),
        }

    @property
    def end_angle(self) -> float:
        return self.start + FULL_CIRCLE


def compare_phase(metrics: GaitCycleMetrics, phase: GaitPhase) -> PhaseComparison:
    """Compare one phase's share between the legs."""
    left = metrics.left_leg.percentage_for(phase)
    right = metrics.right_leg.percentage_for(phase)
    difference = abs(left - right)

    if difference > NOTABLE_ASYMMETRY:
        level = "notable"
    elif difference > SLIGHT_ASYMMETRY:
        level = "slight"
    else:
        level = "balanced"

    return PhaseComparison(
        phase=phase, left=left, right=right, difference=difference, level=level
    )


def compare_all_phases(metrics: GaitCycleMetrics) -> List[PhaseComparison]:
    return [compare_phase(metrics, phase) for phase in GaitPhase]


def phase_status(phase: GaitPhase, percentage: float) -> str:
    """'optimal', 'low' or 'high' relative to the typical range."""
    low, high = OPTIMAL_PHASE_RANGES[phase]
    if percentage < low:
        return "low"
    if percentage > high:
        return "high"
    return "optimal"


def symmetry_band(score: int) -> str:
    if score >= 85:
        return "excellent"
    if score >= 70:
        return "moderate"
    return "significant"
