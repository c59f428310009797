"""Shared test fixtures for repopick."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from repopick.config.models import RepopickConfig
from repopick.tree.models import Entry
from repopick.vcs.base import VCSProvider
from repopick.vcs.models import FlatTree, RepoSummary, VCSError


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep tests away from a developer's real .env, repopick.yaml and PORT."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.delenv("PORT", raising=False)


@pytest.fixture
def sample_repos():
    return [
        RepoSummary(
            id=101,
            name="widget-api",
            full_name="acme/widget-api",
            private=True,
            description="REST API for widget management",
            url="https://github.com/acme/widget-api",
        ),
        RepoSummary(
            id=102,
            name="docs",
            full_name="acme/docs",
            private=False,
            description=None,
            url="https://github.com/acme/docs",
        ),
    ]


@pytest.fixture
def sample_entries():
    """Flat recursive listing, deliberately out of order."""
    return [
        Entry(path="src/main.py", kind="file", id="abc1"),
        Entry(path="README.md", kind="file", id="abc2"),
        Entry(path="src", kind="dir", id="t1"),
        Entry(path="src/utils/helpers.py", kind="file", id="abc3"),
        Entry(path="docs", kind="dir", id="t2"),
        Entry(path="src/utils", kind="dir", id="t3"),
        Entry(path="docs/guide.md", kind="file", id="abc4"),
        Entry(path="Dockerfile", kind="file", id="abc5"),
    ]


@pytest.fixture
def file_bodies():
    return {
        "README.md": "# Widget API\nSome docs.",
        "src/main.py": "print('hello')\n",
        "src/utils/helpers.py": "def helper():\n    return 1\n",
        "docs/guide.md": "Guide",
        "Dockerfile": "FROM python:3.12",
    }


@pytest.fixture
def mock_vcs_provider(sample_repos, sample_entries, file_bodies):
    provider = MagicMock(spec=VCSProvider)
    provider.list_repos = AsyncMock(return_value=sample_repos)
    provider.get_flat_tree = AsyncMock(
        return_value=FlatTree(entries=sample_entries, truncated=False, ref="main")
    )

    async def _raw(repo_id, path):
        if path not in file_bodies:
            raise VCSError(f"fetch {repo_id}/{path}", "Not Found", status=404)
        return file_bodies[path]

    provider.get_raw_file = AsyncMock(side_effect=_raw)
    return provider


@pytest.fixture
def sample_config():
    return RepopickConfig()
