"""
Timeline Construction Module.

Rebuilds how many issues and pull requests were open on every calendar day of
a repository's history. All days are UTC calendar days; the series runs from
the day the oldest record was created through today, inclusive.

The builder is a pure computation over an already collected record set: it
performs no I/O and no logging, and raises ``analyzers.errors`` exceptions for
input it cannot represent.
"""

import warnings
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Optional, Tuple, Union

from analyzers.errors import ClockSkewWarning, EmptyInputError, InvalidRecordError
from analyzers.models import DataPoint, TimelineReport
from miners.models import RepositoryRecord


def to_day(instant: Union[datetime, date]) -> date:
    """
    Truncate an instant to its UTC calendar day.

    Naive datetimes are taken to be UTC. A ``date`` is returned unchanged.

    Args:
        instant (Union[datetime, date]): The instant to truncate.

    Returns:
        date: The UTC calendar day.
    """
    if isinstance(instant, datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return instant.astimezone(timezone.utc).date()
    return instant


def validate_record(record: RepositoryRecord) -> None:
    """
    Check that a record describes a non-negative open interval.

    Raises:
        InvalidRecordError: If the creation instant is missing or the record
            was closed before it was created.
    """
    if record.created_at is None:
        raise InvalidRecordError(
            f"record #{record.number} has no creation instant", record
        )
    if record.closed_at is None:
        return
    created = record.created_at
    closed = record.closed_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    if closed.tzinfo is None:
        closed = closed.replace(tzinfo=timezone.utc)
    if closed < created:
        raise InvalidRecordError(
            f"record #{record.number} closed at {record.closed_at.isoformat()} "
            f"before it was created at {record.created_at.isoformat()}",
            record,
        )


def partition_records(
    records: Iterable[RepositoryRecord],
) -> Tuple[List[RepositoryRecord], List[InvalidRecordError]]:
    """
    Split records into valid ones and the errors of the rejected ones.

    Args:
        records (Iterable[RepositoryRecord]): Records to check.

    Returns:
        Tuple[List[RepositoryRecord], List[InvalidRecordError]]: Valid records
            and one error per rejected record.
    """
    valid: List[RepositoryRecord] = []
    rejected: List[InvalidRecordError] = []
    for record in records:
        try:
            validate_record(record)
        except InvalidRecordError as e:
            rejected.append(e)
        else:
            valid.append(record)
    return valid, rejected


class TimelineBuilder:
    """Builds the daily open issue / open pull request series."""

    def _clamp(self, day: date, today: date, record: RepositoryRecord) -> date:
        if day > today:
            warnings.warn(
                f"record #{record.number} has an instant on {day.isoformat()}, "
                f"after today ({today.isoformat()})",
                ClockSkewWarning,
                stacklevel=3,
            )
            return today
        return day

    def build(
        self,
        records: Iterable[RepositoryRecord],
        now: Optional[datetime] = None,
    ) -> TimelineReport:
        """
        Build the timeline for a complete set of records.

        Args:
            records (Iterable[RepositoryRecord]): Every record of the repository.
            now (Optional[datetime]): The instant treated as "now"; sampled
                once when omitted.

        Returns:
            TimelineReport: One data point per day from the oldest creation day
                through today.

        Raises:
            EmptyInputError: If there are no records.
            InvalidRecordError: If a record was closed before it was created or
                has no creation instant.
        """
        records = list(records)
        if not records:
            raise EmptyInputError()
        for record in records:
            validate_record(record)

        today = to_day(now or datetime.now(timezone.utc))

        # Resolve every record to an inclusive [created, closed] day interval
        intervals = []
        for record in records:
            created_day = self._clamp(to_day(record.created_at), today, record)
            if record.closed_at is None:
                closed_day = today
            else:
                closed_day = self._clamp(to_day(record.closed_at), today, record)
            intervals.append((created_day, closed_day, record.is_pull_request))

        oldest_day = min(created_day for created_day, _, _ in intervals)
        num_days = (today - oldest_day).days

        open_issues = [0] * (num_days + 1)
        open_prs = [0] * (num_days + 1)
        for created_day, closed_day, is_pull_request in intervals:
            counters = open_prs if is_pull_request else open_issues
            first = (created_day - oldest_day).days
            last = (closed_day - oldest_day).days
            for index in range(first, last + 1):
                counters[index] += 1

        timeline = [
            DataPoint(
                day=oldest_day + timedelta(days=index),
                open_issues=open_issues[index],
                open_prs=open_prs[index],
            )
            for index in range(num_days + 1)
        ]
        return TimelineReport(timeline=timeline)
