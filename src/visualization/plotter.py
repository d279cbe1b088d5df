"""
Timeline Visualization Module.

Plots the number of open issues and open pull requests per day for a
repository. The last day of a timeline is still in progress, so it is left
out of the plot.
"""

import os

import matplotlib.pyplot as plt

from analyzers.models import TimelineReport


class TimelinePlotter:
    """
    Plotter for repository timelines.

    Attributes:
        output_dir (str): Directory for saving generated plots
    """

    def __init__(self, output_dir: str = "plots"):
        """
        Initialize timeline plotter with output configuration.

        Args:
            output_dir (str): Directory path for saving generated plots.
                Defaults to "plots"
        """
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)

    def create_timeline_plot(self, repo_name: str, report: TimelineReport) -> plt.Figure:
        """Create the open issues / open PRs plot.

        Args:
            repo_name (str): Repository name used as the title
            report (TimelineReport): The timeline to plot

        Returns:
            plt.Figure: Generated figure
        """
        df = report.to_dataframe()
        # Drop today, its counts are not final yet
        if len(df) > 1:
            df = df.iloc[:-1]

        fig, ax = plt.subplots(figsize=(12, 6))
        ax.plot(df.index, df["open_issues"], label="Issues")
        ax.plot(df.index, df["open_prs"], label="PRs")

        ax.set_title(repo_name)
        ax.set_xlabel("Date")
        ax.set_ylabel("Open")
        ax.legend()
        ax.grid(True)
        plt.setp(ax.xaxis.get_majorticklabels(), rotation=45)

        fig.tight_layout()
        return fig

    def save_timeline_plot(self, repo_name: str, report: TimelineReport) -> str:
        """Create and save the timeline plot as a PNG.

        Args:
            repo_name (str): Repository name, ``org/repo``
            report (TimelineReport): The timeline to plot

        Returns:
            str: Path of the saved image
        """
        fig = self.create_timeline_plot(repo_name, report)
        safe_name = repo_name.replace("/", "_").replace("\\", "_")
        file_path = os.path.join(self.output_dir, f"{safe_name}_timeline.png")
        try:
            fig.savefig(file_path)
        finally:
            plt.close(fig)
        return file_path
