"""
Entry Point Test Suite.
"""

from unittest.mock import AsyncMock, Mock

import pytest

import app


@pytest.fixture
def mock_analyzer_class(monkeypatch, tmp_path):
    monkeypatch.setattr(app.settings, "data_dir", str(tmp_path))
    analyzer = Mock()
    analyzer.analyze_repositories = AsyncMock(return_value={"test/repo": Mock()})
    analyzer_class = Mock(return_value=analyzer)
    monkeypatch.setattr(app, "MultiRepositoryAnalyzer", analyzer_class)
    monkeypatch.setattr(app, "GitHubMiner", Mock())
    monkeypatch.setattr(app.settings, "plot_timelines", False)
    return analyzer_class


def test_parse_args():
    args = app.parse_args(["nixos/nixpkgs", "test/repo"])

    assert args.repositories == ["nixos/nixpkgs", "test/repo"]


@pytest.mark.asyncio
async def test_main_without_repositories_fails(monkeypatch, mock_analyzer_class):
    monkeypatch.setattr(app.settings, "github_repo_urls", "")

    assert await app.main([]) == 1
    mock_analyzer_class.assert_not_called()


@pytest.mark.asyncio
async def test_main_uses_command_line_repositories(mock_analyzer_class):
    assert await app.main(["test/repo"]) == 0

    args = mock_analyzer_class.call_args.args
    assert args[3] == ["test/repo"]


@pytest.mark.asyncio
async def test_main_falls_back_to_settings(monkeypatch, mock_analyzer_class):
    monkeypatch.setattr(app.settings, "github_repo_urls", "test/repo, other/repo")

    assert await app.main([]) == 1

    args = mock_analyzer_class.call_args.args
    assert args[3] == ["test/repo", "other/repo"]
