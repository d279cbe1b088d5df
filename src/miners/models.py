"""
Repository Mining Data Models.

Defines the common data models used across different repository mining implementations.
Uses Pydantic for validation and serialization.
"""

from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class RepositoryRecord(BaseModel):
    """A single issue or pull request from a repository's issue tracker."""

    model_config = ConfigDict(frozen=True)

    number: int
    title: str = ""
    state: str = "open"
    created_at: Optional[datetime]
    closed_at: Optional[datetime] = None
    is_pull_request: bool = False


class RepositoryData(BaseModel):
    """Container for all mined repository data."""

    repository_name: str
    collection_date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    records: List[RepositoryRecord]

    @property
    def issues(self) -> List[RepositoryRecord]:
        """Records on the issue track."""
        return [record for record in self.records if not record.is_pull_request]

    @property
    def pull_requests(self) -> List[RepositoryRecord]:
        """Records on the pull request track."""
        return [record for record in self.records if record.is_pull_request]
