"""
Timeline Plotter Test Suite.
"""

from datetime import date, timedelta

import matplotlib

matplotlib.use("Agg")

import pytest

from analyzers.models import DataPoint, TimelineReport
from visualization.plotter import TimelinePlotter


@pytest.fixture
def sample_report():
    start = date(2024, 1, 1)
    return TimelineReport(
        timeline=[
            DataPoint(day=start + timedelta(days=i), open_issues=i, open_prs=2 * i)
            for i in range(5)
        ]
    )


def test_plot_leaves_out_current_day(tmp_path, sample_report):
    plotter = TimelinePlotter(str(tmp_path))
    fig = plotter.create_timeline_plot("test/repo", sample_report)
    ax = fig.axes[0]

    issues_line, prs_line = ax.lines
    assert issues_line.get_label() == "Issues"
    assert prs_line.get_label() == "PRs"
    assert list(issues_line.get_ydata()) == [0, 1, 2, 3]
    assert list(prs_line.get_ydata()) == [0, 2, 4, 6]
    assert ax.get_title() == "test/repo"


def test_single_day_timeline_is_plotted(tmp_path):
    report = TimelineReport(timeline=[DataPoint(day=date(2024, 1, 1), open_prs=3)])
    plotter = TimelinePlotter(str(tmp_path))

    fig = plotter.create_timeline_plot("test/repo", report)

    assert list(fig.axes[0].lines[1].get_ydata()) == [3]


def test_save_timeline_plot(tmp_path, sample_report):
    plotter = TimelinePlotter(str(tmp_path / "plots"))

    path = plotter.save_timeline_plot("test/repo", sample_report)

    assert path == str(tmp_path / "plots" / "test_repo_timeline.png")
    assert (tmp_path / "plots" / "test_repo_timeline.png").exists()
