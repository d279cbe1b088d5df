"""
GitHub Repository Data Mining Module.

This module extracts the full issue tracker history of a GitHub repository.
GitHub lists pull requests alongside issues, so a single listing yields both
tracks. Pages are requested one at a time by index so a page interrupted by a
rate limit is simply requested again once the strategy has waited.
"""

from datetime import datetime, timezone
from typing import Iterator, List, Optional

from github import Auth, Github, GithubException, RateLimitExceededException
from github.Issue import Issue
from github.PaginatedList import PaginatedList
from github.Repository import Repository
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from config import settings, logger
from miners.base import RepositoryMiner
from miners.models import RepositoryData, RepositoryRecord
from miners.rate_limit import RateLimitStrategy


def _is_transient_error(exc: BaseException) -> bool:
    """Server side failures are worth retrying; client errors and rate limits are not."""
    if isinstance(exc, RateLimitExceededException):
        return False
    return isinstance(exc, GithubException) and (exc.status or 0) >= 500


class GitHubMiner(RepositoryMiner):
    """
    GitHubMiner collects every issue and pull request of a GitHub repository
    and transforms them into ``RepositoryRecord`` models.
    """

    def __init__(
        self,
        github_token: Optional[str] = None,
        per_page: int = 50,
        rate_limit: Optional[RateLimitStrategy] = None,
        github: Optional[Github] = None,
    ):
        """Initialize GitHub miner with authentication and configuration.

        Args:
            github_token (Optional[str]): GitHub API token; anonymous access when empty.
            per_page (int): Number of issues requested per page.
            rate_limit (Optional[RateLimitStrategy]): Strategy applied on rate limits.
            github (Optional[Github]): Preconfigured client, mainly for tests.
        """
        if github is None:
            if github_token is None and settings.github_token is not None:
                github_token = settings.github_token.get_secret_value()
            auth = Auth.Token(github_token) if github_token else None
            # retry=None: rate limits are handled by the injected strategy
            github = Github(auth=auth, per_page=per_page, retry=None)
        self.github = github
        self.per_page = per_page
        self.rate_limit = rate_limit or RateLimitStrategy()

    def _check_rate_limit(self, check_name: str = None) -> None:
        """
        Log the GitHub API rate limit status.

        Args:
            check_name (Optional[str]): Identifier for the rate limit check point.
        """
        remaining, limit = self.github.rate_limiting
        reset_time = datetime.fromtimestamp(
            self.github.rate_limiting_resettime, timezone.utc
        )
        now = datetime.now(timezone.utc)

        logger.info(
            {
                "message": f"{check_name} API rate limit status",
                "remaining_points": remaining,
                "total_points": limit,
                "reset_time": reset_time.isoformat(),
                "minutes_to_reset": (reset_time - now).total_seconds() / 60,
            }
        )

        # If less than 10% of rate limit remains, log a warning
        if limit and remaining < (limit * 0.1):
            logger.warning(
                {
                    "message": "GitHub API rate limit running low",
                    "remaining_points": remaining,
                    "reset_time": reset_time.isoformat(),
                }
            )

    @retry(
        retry=retry_if_exception(_is_transient_error),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    def _fetch_page(self, issues: PaginatedList, page: int) -> List[Issue]:
        """Fetch one page, waiting out rate limits as the strategy dictates.

        Args:
            issues (PaginatedList): The issue listing.
            page (int): Zero based page index.

        Returns:
            List[Issue]: The issues on that page, empty past the last page.
        """
        while True:
            try:
                return list(issues.get_page(page))
            except RateLimitExceededException as e:
                self.rate_limit.handle(e)

    def _iter_pages(self, issues: PaginatedList) -> Iterator[List[Issue]]:
        """Lazily yield pages until GitHub returns an empty one.

        The page size of the client may differ from ``per_page`` when a
        preconfigured client is injected, so a short page does not end the
        listing.

        Args:
            issues (PaginatedList): The issue listing.

        Yields:
            List[Issue]: One page of issues.
        """
        page = 0
        while True:
            batch = self._fetch_page(issues, page)
            if not batch:
                return
            yield batch
            page += 1

    def _get_record(self, issue: Issue) -> RepositoryRecord:
        """Convert a GitHub Issue object to a Pydantic model.

        Args:
            issue (Issue): The GitHub Issue object, possibly a pull request.

        Returns:
            RepositoryRecord: A Pydantic model representing the record.
        """
        return RepositoryRecord(
            number=issue.number,
            title=issue.title or "",
            state=issue.state,
            created_at=issue.created_at,
            closed_at=issue.closed_at,
            is_pull_request=issue.pull_request is not None,
        )

    async def mine_repository(self, repo_name: str) -> RepositoryData:
        """
        Extract every issue and pull request of a GitHub repository.

        Args:
            repo_name (str): The full name of the repository (e.g., 'owner/repo').

        Returns:
            RepositoryData: A Pydantic model containing all records.

        Raises:
            Exception: Raised if the mining process fails.
        """
        logger.info({"message": "Starting repository mining", "repository": repo_name})

        try:
            while True:
                try:
                    repo: Repository = self.github.get_repo(repo_name)
                    break
                except RateLimitExceededException as e:
                    self.rate_limit.handle(e)

            self._check_rate_limit("Repository mining")

            issues = repo.get_issues(state="all", sort="created", direction="asc")
            records: List[RepositoryRecord] = []
            for page_number, batch in enumerate(self._iter_pages(issues), start=1):
                records.extend(self._get_record(issue) for issue in batch)
                logger.info(
                    {
                        "message": f"Fetched page {page_number}",
                        "repository": repo_name,
                        "records": len(records),
                    }
                )

            self._check_rate_limit("Issue mining")

            return RepositoryData(repository_name=repo_name, records=records)

        except Exception as e:
            logger.error(
                {
                    "message": "Repository mining failed",
                    "repository": repo_name,
                    "error": str(e),
                }
            )
            raise
