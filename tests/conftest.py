"""Pytest fixtures for groove-locator tests"""
import json
import tempfile
from pathlib import Path

import git
import pytest

from groove_locator.config import Config


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def small_config():
    """Configuration with small caps suited to fixture trees."""
    return Config(max_depth=4, max_directories=200)


@pytest.fixture
def make_workspace():
    """Factory that builds a workspace root with worktrees and optional metadata."""

    def _make(root: Path, worktrees=(), metadata=None, container=True) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        if container or worktrees:
            (root / ".worktrees").mkdir(exist_ok=True)
        for name in worktrees:
            (root / ".worktrees" / name).mkdir(parents=True, exist_ok=True)
        if metadata is not None:
            groove_dir = root / ".groove"
            groove_dir.mkdir(exist_ok=True)
            payload = metadata if isinstance(metadata, str) else json.dumps(metadata)
            (groove_dir / "workspace.json").write_text(payload)
        return root

    return _make


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    readme = repo_path / "README.md"
    readme.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    yield repo

    repo.close()
