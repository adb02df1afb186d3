"""Generate preview charts and text summaries from engine output."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import matplotlib.pyplot as plt
import seaborn as sns
from matplotlib.patches import Rectangle, Wedge

from run_analytics.bar_layout import (
    BarLayoutEngine,
    BarLayoutMode,
    HipMetric,
    hip_values_from_snapshots,
    pairs_from_snapshots,
)
from run_analytics.chart_geometry import ChartGeometryMapper, ChartInsets
from run_analytics.config import EngineConfig
from run_analytics.gait_layout import GaitCyclePhaseLayout, compare_all_phases
from run_analytics.models import (
    PERFORMANCE_KINDS,
    ChartFrame,
    GaitCycleMetrics,
    GaitPhase,
    HipValues,
    MetricKind,
    MetricSeries,
    PairedValue,
    RunRecord,
    RunSnapshot,
    series_from_history,
)
from run_analytics.stats import StatsAggregator

logger = logging.getLogger(__name__)

# Set style
sns.set_style("whitegrid")

# Presentation colours, keyed by what they tint
METRIC_COLORS: Dict[MetricKind, str] = {
    MetricKind.EFFICIENCY: "#3b82f6",
    MetricKind.BRAKING: "#ef4444",
    MetricKind.IMPACT: "#f97316",
    MetricKind.SWAY: "#8b5cf6",
    MetricKind.VARIATION: "#06b6d4",
    MetricKind.WARMUP: "#f59e0b",
    MetricKind.ENDURANCE: "#10b981",
    MetricKind.HIP_MOBILITY_LEFT: "#60a5fa",
    MetricKind.HIP_MOBILITY_RIGHT: "#34d399",
    MetricKind.HIP_STABILITY_LEFT: "#60a5fa",
    MetricKind.HIP_STABILITY_RIGHT: "#34d399",
    MetricKind.PORTRAIT_SYMMETRY: "#ec4899",
    MetricKind.OVERALL_SCORE: "#f97316",
}
SIDE_COLORS = {"left": "#60a5fa", "right": "#34d399"}
PHASE_COLORS = {
    GaitPhase.LANDING: "#ef4444",
    GaitPhase.STABILIZING: "#f59e0b",
    GaitPhase.LAUNCHING: "#10b981",
    GaitPhase.FLYING: "#3b82f6",
}

CHART_FRAME = ChartFrame(width=600.0, height=300.0)


class ReportGenerator:
    """Render run-history reports."""

    def __init__(self, output_dir: str = "./reports", config: Optional[EngineConfig] = None):
        """Initialize report generator.

        Args:
            output_dir: Directory for output files
            config: Engine thresholds shared by all layouts
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.mapper = ChartGeometryMapper(insets=ChartInsets.history_chart())
        self.gait_layout = GaitCyclePhaseLayout(config)
        self.bar_engine = BarLayoutEngine(config)
        self.stats = StatsAggregator(config)

    def generate_history_chart(
        self,
        series_list: Sequence[MetricSeries],
        output_path: str = None,
    ) -> str:
        """Draw aligned metric series on a shared axis.

        Returns:
            Path to saved chart, or "" when there is nothing to draw
        """
        if output_path is None:
            output_path = str(self.output_dir / "history_chart.png")

        geometry = self.mapper.map_many(series_list, CHART_FRAME)
        if geometry.is_empty:
            logger.warning("No chart geometry for %d series", len(series_list))
            return ""

        fig, ax = plt.subplots(figsize=(12, 6))

        for tick in self.mapper.y_axis_ticks(CHART_FRAME):
            ax.axhline(y=tick.y, color="#d4d4d8", linestyle="--", linewidth=1)
            ax.text(4, tick.y, tick.label, va="center", fontsize=9, color="#71717a")

        for series in geometry.series:
            if series.is_empty:
                continue
            color = METRIC_COLORS[series.kind]
            ax.plot(
                [p.x for p in series.points],
                [p.y for p in series.points],
                linewidth=2.5,
                color=color,
                label=series.kind.value,
            )
            for marker in series.markers:
                dot_color = SIDE_COLORS[series.kind.side] if marker.tint == "side" else color
                ax.plot(marker.center.x, marker.center.y, "o", color=dot_color, markersize=marker.radius * 2)

        ax.set_xlim(0, CHART_FRAME.width)
        ax.set_ylim(CHART_FRAME.height, 0)  # screen coordinates, y grows down
        ax.axis("off")
        ax.legend(loc="lower right")
        ax.set_title("Metric History", fontsize=14, fontweight="bold")

        plt.tight_layout()
        plt.savefig(output_path, dpi=150, bbox_inches="tight")
        plt.close(fig)

        logger.info(f"Saved history chart: {output_path}")
        return output_path

    def generate_gait_dial(
        self,
        metrics: GaitCycleMetrics,
        output_path: str = None,
    ) -> str:
        """Draw left and right gait cycle dials side by side."""
        if output_path is None:
            output_path = str(self.output_dir / "gait_dial.png")

        arcs_by_leg = self.gait_layout.layout_both(metrics)
        fig, axes = plt.subplots(1, 2, figsize=(10, 5))

        for ax, (side, arcs) in zip(axes, arcs_by_leg.items()):
            for arc in arcs:
                if arc.is_degenerate:
                    continue
                ax.add_patch(Wedge(
                    (0, 0), 1.0, arc.start, arc.end, width=0.3,
                    color=PHASE_COLORS[arc.phase], label=phase_label(arc.phase),
                ))
            ax.text(0, 0.1, f"{metrics.cadence}", ha="center", fontsize=20, fontweight="bold")
            ax.text(0, -0.15, "SPM", ha="center", fontsize=10)
            ax.set_xlim(-1.1, 1.1)
            ax.set_ylim(-1.1, 1.1)
            ax.set_aspect("equal")
            ax.axis("off")
            ax.set_title(f"{side.title()} leg")

        axes[0].legend(loc="lower left", fontsize=8)
        fig.suptitle(f"Gait Cycle (symmetry {metrics.symmetry_score}/100)", fontweight="bold")

        plt.tight_layout()
        plt.savefig(output_path, dpi=150, bbox_inches="tight")
        plt.close(fig)

        logger.info(f"Saved gait dial: {output_path}")
        return output_path

    def generate_bar_chart(
        self,
        values: Sequence[Union[PairedValue, HipValues]],
        mode: Union[BarLayoutMode, str],
        output_path: str = None,
    ) -> str:
        """Draw a mirrored, overlaid or grouped hip bar chart."""
        mode = BarLayoutMode(mode)
        if output_path is None:
            output_path = str(self.output_dir / f"bars_{mode.value}.png")

        frame = ChartFrame(width=CHART_FRAME.width, height=200.0)
        layout = self.bar_engine.layout(values, mode, frame)
        if layout.is_empty:
            logger.warning("No bars to draw for %s layout", mode.value)
            return ""

        width = max(frame.width, layout.content_width)
        fig, ax = plt.subplots(figsize=(12 * width / frame.width, 4))
        for bar in layout.bars:
            alpha = 0.6 if bar.metric is HipMetric.STABILITY else 1.0
            ax.add_patch(Rectangle(
                (bar.rect.x, bar.rect.y), bar.rect.width, bar.rect.height,
                color=SIDE_COLORS[bar.side], alpha=alpha,
            ))
        if mode is BarLayoutMode.MIRRORED:
            ax.axhline(y=frame.height / 2, color="#a1a1aa", linewidth=2)

        ax.set_xlim(0, width)
        ax.set_ylim(frame.height, 0)
        ax.axis("off")
        ax.set_title(f"Hip Metrics ({mode.value})", fontsize=12, fontweight="bold")

        plt.tight_layout()
        plt.savefig(output_path, dpi=150, bbox_inches="tight")
        plt.close(fig)

        logger.info(f"Saved bar chart: {output_path}")
        return output_path

    def generate_text_summary(
        self,
        runs: Sequence[RunRecord],
    ) -> Dict[str, str]:
        """Generate text summary for coach and athlete.

        Returns:
            Dict with 'coach' and 'athlete' summaries
        """
        totals = self.stats.history_totals(runs)
        if totals is None:
            message = "No runs recorded yet."
            return {"athlete": message, "coach": message}

        bests = self.stats.personal_bests(runs)
        best_overall = bests.best_overall_run

        lines = [
            "YOUR RUNNING HISTORY",
            "",
            f"Runs: {totals.total_runs}",
            f"Distance: {totals.total_distance:.1f} mi",
            f"Average pace: {_format_pace(totals.average_pace)} /mi",
        ]
        if best_overall is not None:
            lines.append(
                f"Best run: {best_overall.date:%Y-%m-%d} "
                f"(overall {best_overall.metrics.overall_score})"
            )
        if bests.fastest_5k is not None:
            lines.append(f"Fastest 5K pace: {_format_pace(bests.fastest_5k.pace)} /mi")
        if bests.fastest_10k is not None:
            lines.append(f"Fastest 10K pace: {_format_pace(bests.fastest_10k.pace)} /mi")
        if bests.longest_run is not None:
            lines.append(f"Longest run: {bests.longest_run.distance:.2f} mi")
        lines.append("")
        lines.extend(f"* {insight.title}: {insight.message}" for insight in self.stats.generate_insights(runs))
        athlete_summary = "\n".join(lines)

        coach_lines = ["TECHNICAL REPORT", "", "Per-metric statistics:"]
        for kind in PERFORMANCE_KINDS + (MetricKind.OVERALL_SCORE,):
            stats = self.stats.stats_for_history(runs, kind)
            if stats is None:
                continue
            trend = stats.trend.direction.value
            if stats.trend.delta:
                trend += f" ({stats.trend.delta:g})"
            coach_lines.append(
                f"* {kind.value}: avg {stats.average}, best {stats.best}, worst {stats.worst}, "
                f"range {stats.range}, consistency {stats.consistency} "
                f"({stats.consistency_label}), trend {trend}"
            )

        coach_lines.extend(self._asymmetry_lines(runs))
        coach_summary = "\n".join(coach_lines)

        return {
            "athlete": athlete_summary,
            "coach": coach_summary,
        }

    def _asymmetry_lines(self, runs: Sequence[RunRecord]) -> List[str]:
        pairs = (
            ("Hip Mobility", MetricKind.HIP_MOBILITY_LEFT, MetricKind.HIP_MOBILITY_RIGHT),
            ("Hip Stability", MetricKind.HIP_STABILITY_LEFT, MetricKind.HIP_STABILITY_RIGHT),
        )
        lines = []
        for name, left_kind, right_kind in pairs:
            left = series_from_history(runs, left_kind).values()
            right = series_from_history(runs, right_kind).values()
            result = self.stats.asymmetry(left, right)
            if result is None:
                continue
            flag = " - notable" if result.notable else ""
            lines.append(
                f"* {name} asymmetry: L {result.left_average:.0f} / R {result.right_average:.0f}, "
                f"difference {result.difference:.1f}{flag}"
            )
        if lines:
            lines.insert(0, "")
            lines.insert(1, "Left/right balance:")
        return lines

    def generate_complete_report(
        self,
        runs: Sequence[RunRecord],
        snapshots: Sequence[RunSnapshot] = (),
        kinds: Sequence[MetricKind] = (MetricKind.EFFICIENCY, MetricKind.SWAY),
    ) -> Dict[str, str]:
        """Generate complete report package.

        Returns:
            Dict with paths to all generated files (empty string when skipped)
        """
        history_chart = self.generate_history_chart(
            [series_from_history(runs, kind) for kind in kinds]
        )

        gait_dial = ""
        bar_charts = {}
        if snapshots:
            latest_gait = next((s.gait for s in reversed(snapshots) if s.gait), None)
            if latest_gait is not None:
                gait_dial = self.generate_gait_dial(latest_gait)
                for comparison in compare_all_phases(latest_gait):
                    if comparison.level != "balanced":
                        logger.info(
                            "%s phase differs by %.1f%% between legs",
                            comparison.phase.value,
                            comparison.difference,
                        )
            mobility = pairs_from_snapshots(snapshots, HipMetric.MOBILITY)
            bar_charts["bars_mirrored"] = self.generate_bar_chart(mobility, BarLayoutMode.MIRRORED)
            bar_charts["bars_overlaid"] = self.generate_bar_chart(mobility, BarLayoutMode.OVERLAID)
            bar_charts["bars_grouped"] = self.generate_bar_chart(
                hip_values_from_snapshots(snapshots), BarLayoutMode.GROUPED
            )

        summaries = self.generate_text_summary(runs)
        athlete_summary_path = str(self.output_dir / "summary_athlete.txt")
        coach_summary_path = str(self.output_dir / "summary_coach.txt")

        with open(athlete_summary_path, "w", encoding="utf-8") as f:
            f.write(summaries["athlete"])

        with open(coach_summary_path, "w", encoding="utf-8") as f:
            f.write(summaries["coach"])

        return {
            "history_chart": history_chart,
            "gait_dial": gait_dial,
            **bar_charts,
            "athlete_summary": athlete_summary_path,
            "coach_summary": coach_summary_path,
        }


def phase_label(phase: GaitPhase) -> str:
    """Legend text for a gait phase, e.g. "Landing: Initial foot contact with the ground"."""
    return f"{phase.value}: {phase.description}"


def _format_pace(seconds_per_unit: Optional[float]) -> str:
    if seconds_per_unit is None:
        return "-"
    minutes = int(seconds_per_unit // 60)
    seconds = int(seconds_per_unit - minutes * 60)
    return f"{minutes}:{seconds:02d}"
