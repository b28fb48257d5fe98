"""Global test fixtures and configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pygit2
import pytest

from aicommit.config import ConfigLoader
from aicommit.cost import SKIP_CONFIRM_ENV_VAR

if TYPE_CHECKING:
	from collections.abc import Iterator


@pytest.fixture
def git_repo(tmp_path: Path) -> pygit2.Repository:
	"""A fresh repository with an identity configured and no commits."""
	repo = pygit2.init_repository(str(tmp_path / "repo"))
	repo.config["user.name"] = "Test User"
	repo.config["user.email"] = "test@example.com"
	return repo


@pytest.fixture
def repo_path(git_repo: pygit2.Repository) -> Path:
	"""Work tree of ``git_repo``."""
	return Path(git_repo.workdir)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
	"""Keep user settings out of the tests."""
	for name in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", SKIP_CONFIRM_ENV_VAR):
		monkeypatch.delenv(name, raising=False)
	for name in list(os.environ):
		if name.startswith("AI_COMMIT_"):
			monkeypatch.delenv(name, raising=False)
	ConfigLoader._instance = None  # noqa: SLF001
	yield
	ConfigLoader._instance = None  # noqa: SLF001
