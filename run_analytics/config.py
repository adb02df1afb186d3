"""Tunable thresholds shared by the layout and statistics components."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional

from run_analytics.errors import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "RUN_ANALYTICS_"


@dataclass(frozen=True)
class EngineConfig:
    """Engine thresholds.

    Example:
        >>> config = EngineConfig.from_env()
        >>> StatsAggregator(config).classify_trend([70, 71], [80, 82])

    Attributes:
        trend_epsilon: Minimum |delta| between window averages to call a trend
        asymmetry_threshold: Left/right difference above which asymmetry is notable
        gait_gap: Angular gap (degrees) drawn before each gait phase boundary
        gait_start: Angle (degrees) where the gait dial begins
        mirrored_margin: Space kept between a mirrored bar and the frame edge
        insight_change: Trend delta above which an insight is emitted
    """

    trend_epsilon: float = 3.0
    asymmetry_threshold: float = 1.0
    gait_gap: float = 2.0
    gait_start: float = -180.0
    mirrored_margin: float = 10.0
    insight_change: float = 5.0

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        prefix: str = ENV_PREFIX,
    ) -> "EngineConfig":
        """Create config with overrides from ``PREFIX + FIELD_NAME`` variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)
            prefix: Variable name prefix

        Raises:
            ConfigError: If an override is not a number
        """
        environ = os.environ if environ is None else environ
        overrides = {}

        for f in fields(cls):
            key = prefix + f.name.upper()
            raw = environ.get(key)
            if raw is None or raw == "":
                continue
            try:
                overrides[f.name] = float(raw)
            except ValueError as e:
                raise ConfigError(f"{key} must be a number, got {raw!r}") from e
            logger.debug("Config override %s=%s", key, raw)

        return replace(cls(), **overrides)


DEFAULT_CONFIG = EngineConfig()
