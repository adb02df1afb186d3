"""Deterministic sample run histories and snapshots for demos and tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

import numpy as np

from run_analytics.models import (
    GaitCycleMetrics,
    InjuryMetrics,
    LegGaitCycle,
    LegInjuryMetrics,
    RunMetrics,
    RunRecord,
    RunSnapshot,
)

DEFAULT_SEED = 7


def _score(rng: np.random.Generator, low: int, high: int) -> int:
    return int(rng.integers(low, high + 1))


def random_gait_cycle(rng: np.random.Generator) -> GaitCycleMetrics:
    """Gait cycle with a small, realistic left/right asymmetry."""
    landing = rng.uniform(5, 18)
    stabilizing = rng.uniform(5, 25)
    launching = rng.uniform(5, 18)
    flying = 100 - landing - stabilizing - launching
    skew = rng.uniform(-2, 2)

    left = LegGaitCycle(
        landing=landing + skew,
        stabilizing=stabilizing - skew * 0.5,
        launching=launching + skew * 0.3,
        flying=flying - skew * 0.8,
    )
    right = LegGaitCycle(
        landing=landing - skew,
        stabilizing=stabilizing + skew * 0.5,
        launching=launching - skew * 0.3,
        flying=flying + skew * 0.8,
    )
    return GaitCycleMetrics(
        left_leg=left,
        right_leg=right,
        symmetry_score=_score(rng, 70, 98),
        cadence=_score(rng, 160, 185),
        contact_time_ms=float(rng.uniform(220, 280)),
        flight_time_ms=float(rng.uniform(80, 120)),
    )


def generate_runs(
    count: int = 30,
    seed: int = DEFAULT_SEED,
    end: Optional[datetime] = None,
) -> List[RunRecord]:
    """Oldest-first run history with a slight upward trend in scores."""
    rng = np.random.default_rng(seed)
    end = end or datetime(2025, 6, 30, 7, 0)
    runs = []

    for i in range(count):
        lift = int(i / max(count, 1) * 5)
        left_mobility = _score(rng, 70, 90)
        left_stability = _score(rng, 70, 90)
        metrics = RunMetrics(
            efficiency=_score(rng, 70, 85) + lift,
            braking=_score(rng, 70, 85) + lift,
            impact=_score(rng, 75, 88) + lift,
            sway=_score(rng, 65, 80) + lift,
            variation=_score(rng, 73, 85) + lift,
            warmup=_score(rng, 68, 80) + lift,
            endurance=_score(rng, 72, 85) + lift,
            hip_mobility_left=left_mobility,
            hip_mobility_right=_score(rng, max(60, left_mobility - 10), min(100, left_mobility + 10)),
            hip_stability_left=left_stability,
            hip_stability_right=_score(rng, max(60, left_stability - 10), min(100, left_stability + 10)),
            portrait_symmetry=_score(rng, 70, 95),
        )
        distance = round(float(rng.choice([3.1, 3.2, 4.0, 5.0, 6.2, 8.0])), 2)
        pace = float(rng.uniform(450, 600))  # seconds per mile
        runs.append(RunRecord(
            date=end - timedelta(days=2 * (count - 1 - i)),
            distance=distance,
            duration=round(distance * pace),
            metrics=metrics,
        ))

    return runs


def generate_snapshots(
    count: int = 8,
    seed: int = DEFAULT_SEED,
    start: Optional[datetime] = None,
) -> List[RunSnapshot]:
    """Snapshots of a single run taken every half mile."""
    rng = np.random.default_rng(seed)
    start = start or datetime(2025, 6, 30, 7, 0)
    snapshots = []

    for i in range(count):
        performance = RunMetrics(
            efficiency=_score(rng, 70, 90),
            braking=_score(rng, 65, 85),
            impact=_score(rng, 70, 88),
            sway=_score(rng, 75, 90),
            variation=_score(rng, 70, 85),
            warmup=_score(rng, 65, 90),
            endurance=_score(rng, 68, 85),
        )
        injury = InjuryMetrics(
            left_leg=LegInjuryMetrics(
                hip_mobility=_score(rng, 60, 90), hip_stability=_score(rng, 65, 90)
            ),
            right_leg=LegInjuryMetrics(
                hip_mobility=_score(rng, 60, 90), hip_stability=_score(rng, 65, 90)
            ),
        )
        snapshots.append(RunSnapshot(
            snapshot_number=i + 1,
            distance=(i + 1) * 0.5,
            duration=(i + 1) * 240.0,
            timestamp=start + timedelta(seconds=240 * i),
            performance=performance,
            injury=injury,
            gait=random_gait_cycle(rng),
        ))

    return snapshots
