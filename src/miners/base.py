"""
Abstract Base Class for Repository Miners.

Defines the interface for repository data mining implementations.
All repository miners (GitHub, GitLab, etc.) should implement this interface.
"""

from abc import ABC, abstractmethod

from miners.models import RepositoryData


class RepositoryMiner(ABC):
    """
    Abstract base class for repository miners.

    Implementations must return the complete record set of a repository:
    every page is fetched and merged before returning, or an exception is
    raised. A partial snapshot would move the oldest creation day and skew
    the whole timeline.
    """

    @abstractmethod
    async def mine_repository(self, repo_name: str) -> RepositoryData:
        """
        Extract every issue and pull request record from a repository.

        Args:
            repo_name (str): Full repository name, ``org/repo``

        Returns:
            RepositoryData: Collected repository records

        Raises:
            Exception: If mining fails
        """
        pass
