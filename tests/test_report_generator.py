from pathlib import Path

import pytest

matplotlib = pytest.importorskip("matplotlib")
pytest.importorskip("seaborn")
matplotlib.use("Agg")

from run_analytics.bar_layout import BarLayoutMode, HipMetric, pairs_from_snapshots  # noqa: E402
from run_analytics.models import GaitPhase, MetricKind, MetricSeries, series_from_history  # noqa: E402
from run_analytics.report_generator import ReportGenerator, phase_label  # noqa: E402
from run_analytics.sample_data import generate_runs, generate_snapshots  # noqa: E402


def test_generate_text_summary(tmp_path: Path):
    generator = ReportGenerator(output_dir=str(tmp_path))
    runs = generate_runs(count=12)

    summary = generator.generate_text_summary(runs)

    assert summary["athlete"].startswith("YOUR RUNNING HISTORY")
    assert "Runs: 12" in summary["athlete"]
    assert "Efficiency: avg" in summary["coach"]
    assert "Hip Mobility asymmetry" in summary["coach"]


def test_text_summary_without_runs(tmp_path: Path):
    summary = ReportGenerator(output_dir=str(tmp_path)).generate_text_summary([])

    assert summary == {"athlete": "No runs recorded yet.", "coach": "No runs recorded yet."}


def test_history_chart(tmp_path: Path):
    generator = ReportGenerator(output_dir=str(tmp_path))
    runs = generate_runs(count=8)
    series = [series_from_history(runs, kind) for kind in (MetricKind.EFFICIENCY, MetricKind.HIP_MOBILITY_LEFT)]

    chart_path = generator.generate_history_chart(series, output_path=str(tmp_path / "chart.png"))
    assert Path(chart_path).exists()

    flat = MetricSeries.from_values(MetricKind.SWAY, [80, 80, 80])
    assert generator.generate_history_chart([flat]) == ""


def test_gait_dial_and_bar_charts(tmp_path: Path):
    generator = ReportGenerator(output_dir=str(tmp_path))
    snapshots = generate_snapshots(count=5)

    assert Path(generator.generate_gait_dial(snapshots[0].gait)).exists()

    pairs = pairs_from_snapshots(snapshots, HipMetric.STABILITY)
    assert Path(generator.generate_bar_chart(pairs, "mirrored")).exists()
    assert generator.generate_bar_chart([], BarLayoutMode.OVERLAID) == ""


def test_complete_report(tmp_path: Path):
    generator = ReportGenerator(output_dir=str(tmp_path))

    files = generator.generate_complete_report(generate_runs(count=10), generate_snapshots(count=12))

    for key in ("history_chart", "gait_dial", "bars_mirrored", "bars_overlaid", "bars_grouped",
                "athlete_summary", "coach_summary"):
        assert Path(files[key]).exists(), key


def test_gait_phase_legend_label():
    assert phase_label(GaitPhase.FLYING) == "Flying: Both feet off the ground, airborne"
