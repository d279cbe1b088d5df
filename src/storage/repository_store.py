"""
Repository Storage Module.

This module handles the persistent storage and retrieval of repository timelines
and raw record snapshots. Files are laid out per organization:

    <data_dir>/<org>/<repo>.json           timeline document
    <data_dir>/<org>/<repo>_records.json   latest record snapshot
"""

import json
import os
from pathlib import Path
from typing import Optional, Tuple

from pydantic import ValidationError

from config import logger
from miners.models import RepositoryData
from analyzers.models import TimelineReport


def split_repository_name(repo_name: str) -> Tuple[str, str]:
    """Split ``org/repo`` into its two parts.

    Raises:
        ValueError: If the name does not contain exactly one slash.
    """
    parts = repo_name.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError(
            f"expected the GitHub repo path to contain one slash, got {repo_name!r}"
        )
    return parts[0], parts[1]


class RepositoryStore:
    """
    Manages persistent storage of repository timelines and record snapshots.
    """

    def __init__(self, data_dir: str):
        """Initialize the repository storage system.

        Args:
            data_dir (str): Base directory path for storing repository data.
        """

        self.storage_dir = Path(data_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def _get_timeline_file_path(self, org: str, repo: str) -> str:
        """Generate the file path for a repository timeline.

        Args:
            org (str): Organization or user owning the repository.
            repo (str): Repository name.

        Returns:
            str: Complete file path for the timeline document.
        """
        return os.path.join(self.storage_dir, org, f"{repo}.json")

    def _get_repo_data_file_path(self, repo_name: str) -> str:
        """Generate the file path for the raw record snapshot.

        Args:
            repo_name (str): Full repository name, ``org/repo``.

        Returns:
            str: Complete file path for the record snapshot.
        """
        org, repo = split_repository_name(repo_name)
        return os.path.join(self.storage_dir, org, f"{repo}_records.json")

    def save_timeline(self, org: str, repo: str, report: TimelineReport) -> str:
        """Write a repository timeline, replacing any previous one.

        Args:
            org (str): Organization or user owning the repository.
            repo (str): Repository name.
            report (TimelineReport): The timeline to store.

        Returns:
            str: Path of the written document.

        Raises:
            Exception: If storage operation fails.
        """
        file_path = self._get_timeline_file_path(org, repo)
        try:
            os.makedirs(os.path.dirname(file_path), exist_ok=True)
            with open(file_path, "w", encoding="utf-8") as f:
                f.write(report.model_dump_json(indent=2))

            logger.info(
                {
                    "message": "Stored repository timeline",
                    "repository": f"{org}/{repo}",
                    "file_path": file_path,
                    "days": len(report.timeline),
                }
            )
            return file_path

        except Exception as e:
            logger.error(
                {
                    "message": "Failed to store repository timeline",
                    "repository": f"{org}/{repo}",
                    "error": str(e),
                }
            )
            raise

    def load_timeline(self, org: str, repo: str) -> Optional[TimelineReport]:
        """Load a stored repository timeline.

        Args:
            org (str): Organization or user owning the repository.
            repo (str): Repository name.

        Returns:
            Optional[TimelineReport]: The stored timeline, None if absent.

        Raises:
            Exception: If the document cannot be read or parsed.
        """
        file_path = self._get_timeline_file_path(org, repo)
        if not os.path.exists(file_path):
            return None

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return TimelineReport.model_validate_json(f.read())

        except Exception as e:
            logger.error(
                {
                    "message": "Failed to load repository timeline",
                    "repository": f"{org}/{repo}",
                    "error": str(e),
                }
            )
            raise

    def save_repository_data(self, data: RepositoryData) -> None:
        """Save the raw record snapshot of a repository.

        Only the latest snapshot is kept.

        Args:
            data (RepositoryData): Repository data to save.

        Raises:
            Exception: If save operation fails.
        """
        repo_file = self._get_repo_data_file_path(data.repository_name)

        try:
            os.makedirs(os.path.dirname(repo_file), exist_ok=True)
            with open(repo_file, "w", encoding="utf-8") as f:
                f.write(data.model_dump_json(indent=2))

            logger.info(
                {
                    "message": "Repository data saved successfully",
                    "repository": data.repository_name,
                    "file": str(repo_file),
                    "records": len(data.records),
                }
            )

        except Exception as e:
            logger.error(
                {
                    "message": "Failed to save repository data",
                    "repository": data.repository_name,
                    "error": str(e),
                }
            )
            raise

    def load_repository_data(self, repo_name: str) -> Optional[RepositoryData]:
        """Load the latest record snapshot of a repository.

        Args:
            repo_name (str): Full repository name, ``org/repo``.

        Returns:
            Optional[RepositoryData]: The snapshot, None if absent or corrupted.
        """
        repo_file = self._get_repo_data_file_path(repo_name)
        if not os.path.exists(repo_file):
            return None

        try:
            with open(repo_file, "r", encoding="utf-8") as f:
                return RepositoryData.model_validate(json.load(f))

        except (json.JSONDecodeError, ValidationError) as e:
            # Handle corrupted file by mining again
            logger.error(
                {
                    "message": "Corrupted repository data file",
                    "repository": repo_name,
                    "file": str(repo_file),
                    "error": str(e),
                }
            )
            return None
