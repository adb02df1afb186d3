"""Chart geometry and statistics for run analytics."""

__version__ = "1.0.0"

from .bar_layout import BarLayoutEngine, BarLayoutMode
from .chart_geometry import ChartGeometryMapper, map_metric_series
from .config import EngineConfig
from .errors import ConfigError, RunAnalyticsError, SeriesAlignmentError
from .gait_layout import GaitCyclePhaseLayout
from .stats import StatsAggregator, compute_personal_bests

# Lazy imports keep matplotlib out of the module import path.
__all__ = [
    "BarLayoutEngine",
    "BarLayoutMode",
    "ChartGeometryMapper",
    "ConfigError",
    "EngineConfig",
    "GaitCyclePhaseLayout",
    "ReportGenerator",
    "RunAnalyticsError",
    "SeriesAlignmentError",
    "StatsAggregator",
    "compute_personal_bests",
    "map_metric_series",
]


def __getattr__(name: str):
    if name == "ReportGenerator":
        from .report_generator import ReportGenerator

        globals()["ReportGenerator"] = ReportGenerator
        return ReportGenerator
    raise AttributeError(f"module 'run_analytics' has no attribute {name!r}")
