"""
Main Application Entry Point.

Builds the open issue / open pull request timeline of one or more GitHub
repositories and stores one JSON document per repository.

Usage:
    python src/app.py example-org/example-repo [other-org/other-repo ...]

Without arguments the repositories configured in ``GITHUB_REPO_URLS`` are used.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from config import settings, logger
from analyzers.multi_repository import MultiRepositoryAnalyzer
from analyzers.timeline import TimelineBuilder
from miners.github_miner import GitHubMiner
from miners.base import RepositoryMiner
from miners.rate_limit import RateLimitStrategy
from storage.repository_store import RepositoryStore
from visualization.plotter import TimelinePlotter


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build the daily open issues / open PRs timeline of GitHub repositories."
    )
    parser.add_argument(
        "repositories",
        nargs="*",
        help="Repositories as org/repo or GitHub URLs (default: GITHUB_REPO_URLS)",
    )
    return parser.parse_args(argv)


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main application workflow.

    Returns:
        int: Process exit status, 0 when every repository succeeded.
    """
    args = parse_args(argv)
    repositories = args.repositories or settings.repository_urls
    if not repositories:
        logger.error(
            {
                "message": "No repositories specified. Pass org/repo arguments or set GITHUB_REPO_URLS."
            }
        )
        return 1

    logger.info({"message": "Starting timeline generation", "repositories": repositories})

    logger.debug("initializing github miner...")
    rate_limit = RateLimitStrategy(
        on_primary_limit=settings.on_primary_limit,
        on_secondary_limit=settings.on_secondary_limit,
        secondary_wait_seconds=settings.secondary_limit_wait_seconds,
        max_secondary_sleep_seconds=settings.max_secondary_sleep_seconds,
    )
    github_miner: RepositoryMiner = GitHubMiner(
        settings.github_token.get_secret_value() if settings.github_token else None,
        per_page=settings.per_page,
        rate_limit=rate_limit,
    )

    plotter = TimelinePlotter(settings.plot_output_dir) if settings.plot_timelines else None

    multi_analyzer = MultiRepositoryAnalyzer(
        RepositoryStore(settings.data_dir),
        TimelineBuilder(),
        github_miner,
        repositories,
        plotter=plotter,
        skip_invalid_records=settings.skip_invalid_records,
        reuse_cached_records=settings.reuse_cached_records,
    )

    logger.info({"message": "analyzing repositories..."})
    results = await multi_analyzer.analyze_repositories()

    logger.info(
        {
            "message": "application finished",
            "succeeded": len(results),
            "failed": len(repositories) - len(results),
        }
    )
    return 0 if len(results) == len(repositories) else 1


if __name__ == "__main__":
    logger.info("Starting application ...")
    sys.exit(asyncio.run(main()))
