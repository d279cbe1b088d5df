"""
Multi-Repository Timeline Module.

Coordinates timeline generation for every configured repository:

- Record collection (or reuse of today's snapshot)
- Invalid record policy
- Timeline construction and persistence
- Optional plotting
- Per-repository error handling and logging
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from config import logger
from analyzers.models import TimelineReport
from analyzers.timeline import TimelineBuilder, partition_records, to_day
from miners.base import RepositoryMiner
from miners.models import RepositoryData, RepositoryRecord
from storage.repository_store import RepositoryStore, split_repository_name
from visualization.plotter import TimelinePlotter


def parse_repository(identifier: str) -> Tuple[str, str]:
    """
    Extract ``(org, repo)`` from ``org/repo`` or a GitHub URL.

    Args:
        identifier (str): Repository path or URL.

    Returns:
        Tuple[str, str]: Organization and repository name.

    Raises:
        ValueError: If the identifier does not name a single repository.
    """
    path = identifier.strip().rstrip("/")
    if "://" in path:
        path = "/".join(path.split("://", 1)[1].split("/")[1:])
    elif path.startswith("github.com/"):
        path = path[len("github.com/"):]
    if path.endswith(".git"):
        path = path[: -len(".git")]
    return split_repository_name(path)


class MultiRepositoryAnalyzer:
    """
    Coordinates timeline generation for multiple GitHub repositories.

    Attributes:
        store (RepositoryStore): Storage for snapshots and timelines.
        builder (TimelineBuilder): Timeline builder.
        miner (RepositoryMiner): Record source.
        repository_urls (List[str]): Repositories to process.
        plotter (Optional[TimelinePlotter]): Plotter, no plots when None.
        skip_invalid_records (bool): Drop malformed records instead of aborting.
        reuse_cached_records (bool): Reuse a snapshot collected today.
    """

    def __init__(
        self,
        repository_store: RepositoryStore,
        builder: TimelineBuilder,
        miner: RepositoryMiner,
        repository_urls: List[str],
        plotter: Optional[TimelinePlotter] = None,
        skip_invalid_records: bool = False,
        reuse_cached_records: bool = True,
    ):
        self.store = repository_store
        self.builder = builder
        self.miner = miner
        self.repository_urls = repository_urls
        self.plotter = plotter
        self.skip_invalid_records = skip_invalid_records
        self.reuse_cached_records = reuse_cached_records

    async def _collect(self, repo_name: str, now: datetime) -> RepositoryData:
        """Return today's snapshot if there is one, otherwise mine and save."""
        if self.reuse_cached_records:
            repo_data = self.store.load_repository_data(repo_name)
            if repo_data and to_day(repo_data.collection_date) == to_day(now):
                logger.info(
                    {
                        "message": "Repository data already exists for today, skipping mining",
                        "repository": repo_name,
                    }
                )
                return repo_data

        repo_data = await self.miner.mine_repository(repo_name)
        self.store.save_repository_data(repo_data)
        return repo_data

    def _apply_record_policy(self, repo_data: RepositoryData) -> List[RepositoryRecord]:
        if not self.skip_invalid_records:
            return repo_data.records

        records, rejected = partition_records(repo_data.records)
        for error in rejected:
            logger.warning(
                {
                    "message": "Skipping invalid record",
                    "repository": repo_data.repository_name,
                    "error": str(error),
                }
            )
        return records

    async def analyze_repository(self, identifier: str) -> Tuple[str, TimelineReport]:
        """
        Collect, build and store the timeline of one repository.

        Args:
            identifier (str): Repository path or URL.

        Returns:
            Tuple[str, TimelineReport]: ``org/repo`` and its timeline.

        Raises:
            Exception: If any step fails.
        """
        org, repo = parse_repository(identifier)
        repo_name = f"{org}/{repo}"
        logger.info({"message": "Analyzing repository", "repository": repo_name})

        now = datetime.now(timezone.utc)
        repo_data = await self._collect(repo_name, now)
        records = self._apply_record_policy(repo_data)

        report = self.builder.build(records, now=now)
        self.store.save_timeline(org, repo, report)

        if self.plotter is not None:
            plot_path = self.plotter.save_timeline_plot(repo_name, report)
            logger.info(
                {"message": "Saved timeline plot", "repository": repo_name, "file": plot_path}
            )

        return repo_name, report

    async def analyze_repositories(self) -> Dict[str, TimelineReport]:
        """
        Build and store the timeline of every configured repository.

        Returns:
            Dict[str, TimelineReport]: Mapping of repository names to timelines.

        Note:
            If a repository fails, the error is logged and the remaining
            repositories are still processed.
        """
        results = {}
        for repo_url in self.repository_urls:
            try:
                repo_name, report = await self.analyze_repository(repo_url)
                results[repo_name] = report

            except Exception as e:
                logger.error(
                    {
                        "message": "Failed to analyze repository",
                        "repository": repo_url,
                        "error": str(e),
                    }
                )

        return results
