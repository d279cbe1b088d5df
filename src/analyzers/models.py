"""
Timeline Data Models.

Defines the daily timeline document produced for each repository.
Uses Pydantic for validation and serialization.
"""

from datetime import date
from typing import Any, List

import pandas as pd
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class DataPoint(BaseModel):
    """Counts for a single calendar day.

    ``closed_issues`` and ``closed_prs`` are reserved fields kept for format
    compatibility; they are always zero.
    """

    model_config = ConfigDict(frozen=True)

    day: date
    open_issues: int = Field(default=0, ge=0)
    closed_issues: int = Field(default=0, ge=0)
    open_prs: int = Field(default=0, ge=0)
    # Older documents were written with the key "closed:prs"
    closed_prs: int = Field(
        default=0, ge=0, validation_alias=AliasChoices("closed_prs", "closed:prs")
    )

    @field_validator("day", mode="before")
    @classmethod
    def truncate_midnight_timestamp(cls, v: Any) -> Any:
        """Accept ``2024-01-05T00:00:00Z`` style days written by older documents."""
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v


class TimelineReport(BaseModel):
    """Ordered daily series, one entry per day with no gaps."""

    model_config = ConfigDict(frozen=True)

    timeline: List[DataPoint]

    @property
    def start_day(self) -> date:
        return self.timeline[0].day

    @property
    def end_day(self) -> date:
        return self.timeline[-1].day

    def to_dataframe(self) -> pd.DataFrame:
        """
        Convert the timeline to a DataFrame indexed by day.

        Returns:
            pd.DataFrame: One row per day with the four counter columns.
        """
        df = pd.DataFrame([point.model_dump() for point in self.timeline])
        if df.empty:
            return df
        df["day"] = pd.to_datetime(df["day"])
        return df.set_index("day")
