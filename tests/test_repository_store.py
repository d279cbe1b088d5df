"""
Repository Store Test Suite.

Covers timeline documents and record snapshots on disk.
"""

import json
from datetime import date, datetime, timezone

import pytest

from analyzers.models import DataPoint, TimelineReport
from miners.models import RepositoryData, RepositoryRecord
from storage.repository_store import RepositoryStore, split_repository_name


@pytest.fixture
def store(tmp_path):
    return RepositoryStore(str(tmp_path / "data"))


@pytest.fixture
def sample_report():
    return TimelineReport(
        timeline=[
            DataPoint(day=date(2024, 1, 5), open_issues=1, open_prs=2),
            DataPoint(day=date(2024, 1, 6), open_issues=0, open_prs=1),
        ]
    )


@pytest.fixture
def sample_repo_data():
    return RepositoryData(
        repository_name="test/repo",
        collection_date=datetime(2024, 1, 6, 9, tzinfo=timezone.utc),
        records=[
            RepositoryRecord(
                number=1,
                title="Bug",
                created_at=datetime(2024, 1, 5, tzinfo=timezone.utc),
                closed_at=datetime(2024, 1, 6, tzinfo=timezone.utc),
            ),
            RepositoryRecord(
                number=2,
                title="Fix",
                created_at=datetime(2024, 1, 5, tzinfo=timezone.utc),
                is_pull_request=True,
            ),
        ],
    )


def test_save_timeline_writes_org_directory(store, tmp_path, sample_report):
    path = store.save_timeline("test", "repo", sample_report)

    expected = tmp_path / "data" / "test" / "repo.json"
    assert path == str(expected)
    document = json.loads(expected.read_text(encoding="utf-8"))
    assert document == {
        "timeline": [
            {
                "day": "2024-01-05",
                "open_issues": 1,
                "closed_issues": 0,
                "open_prs": 2,
                "closed_prs": 0,
            },
            {
                "day": "2024-01-06",
                "open_issues": 0,
                "closed_issues": 0,
                "open_prs": 1,
                "closed_prs": 0,
            },
        ]
    }


def test_save_timeline_overwrites(store, sample_report):
    store.save_timeline("test", "repo", sample_report)
    shorter = TimelineReport(timeline=sample_report.timeline[:1])
    store.save_timeline("test", "repo", shorter)

    assert store.load_timeline("test", "repo") == shorter


def test_load_timeline_round_trip(store, sample_report):
    store.save_timeline("test", "repo", sample_report)

    assert store.load_timeline("test", "repo") == sample_report


def test_load_timeline_missing(store):
    assert store.load_timeline("test", "missing") is None


def test_load_timeline_written_by_older_format(store, tmp_path):
    legacy = tmp_path / "data" / "nixos" / "nixpkgs.json"
    legacy.parent.mkdir(parents=True)
    legacy.write_text(
        json.dumps(
            {
                "timeline": [
                    {
                        "day": "2024-01-05T00:00:00Z",
                        "open_issues": 4,
                        "closed_issues": 0,
                        "open_prs": 7,
                        "closed:prs": 0,
                    }
                ]
            }
        ),
        encoding="utf-8",
    )

    report = store.load_timeline("nixos", "nixpkgs")

    assert report.timeline[0].day == date(2024, 1, 5)
    assert report.timeline[0].open_prs == 7


def test_repository_data_round_trip(store, tmp_path, sample_repo_data):
    store.save_repository_data(sample_repo_data)

    assert (tmp_path / "data" / "test" / "repo_records.json").exists()
    loaded = store.load_repository_data("test/repo")
    assert loaded == sample_repo_data


def test_load_repository_data_missing(store):
    assert store.load_repository_data("test/none") is None


def test_corrupted_repository_data_is_ignored(store, tmp_path):
    corrupted = tmp_path / "data" / "test" / "repo_records.json"
    corrupted.parent.mkdir(parents=True)
    corrupted.write_text("{not json", encoding="utf-8")

    assert store.load_repository_data("test/repo") is None


@pytest.mark.parametrize("name", ["repo", "a/b/c", "/repo", "org/"])
def test_split_repository_name_rejects_bad_paths(name):
    with pytest.raises(ValueError):
        split_repository_name(name)


def test_split_repository_name():
    assert split_repository_name("nixos/nixpkgs") == ("nixos", "nixpkgs")
