"""Tests for the commit command CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest
import typer
from typer.testing import CliRunner

from aicommit import __version__
from aicommit.cli import app
from aicommit.cli.commit_cmd import commit_command_impl, parse_provider_key
from aicommit.commit import SessionState, SessionStatus
from aicommit.config import ConfigError
from aicommit.git import NoRepositoryError
from aicommit.llm import ProviderName

if TYPE_CHECKING:
	from collections.abc import Iterator


@pytest.fixture
def runner() -> CliRunner:
	"""Typer test runner."""
	return CliRunner()


@pytest.fixture
def mock_root_impl() -> Iterator[MagicMock]:
	"""Mock the implementation run when no subcommand is given."""
	with patch("aicommit.cli.commit_command_impl") as mock_impl:
		yield mock_impl


@pytest.fixture
def mock_commit_impl() -> Iterator[MagicMock]:
	"""Mock the implementation behind the ``commit`` subcommand."""
	with patch("aicommit.cli.commit_cmd.commit_command_impl") as mock_impl:
		yield mock_impl


@pytest.mark.unit
class TestParseProviderKey:
	"""Test cases for the provider=key option parser."""

	@pytest.mark.parametrize(
		("value", "expected"),
		[
			("openai=sk-abc", (ProviderName.OPENAI, "sk-abc")),
			(" Anthropic =sk-ant-1", (ProviderName.ANTHROPIC, "sk-ant-1")),
			("openai=sk=with=equals", (ProviderName.OPENAI, "sk=with=equals")),
		],
	)
	def test_valid(self, value: str, expected: tuple[ProviderName, str]) -> None:
		"""Test accepted values."""
		assert parse_provider_key(value) == expected

	@pytest.mark.parametrize("value", ["openai", "gemini=key", "openai=", "=key"])
	def test_invalid(self, value: str) -> None:
		"""Test rejected values."""
		with pytest.raises(typer.BadParameter):
			parse_provider_key(value)


@pytest.mark.cli
class TestCliOptions:
	"""Test cases for option parsing through the typer app."""

	def test_version(self, runner: CliRunner, mock_root_impl: MagicMock) -> None:
		"""Test --version prints and exits without committing."""
		result = runner.invoke(app, ["--version"])

		assert result.exit_code == 0
		assert __version__ in result.output
		mock_root_impl.assert_not_called()

	def test_root_runs_commit(self, runner: CliRunner, mock_root_impl: MagicMock) -> None:
		"""Test that options without a subcommand run the commit flow."""
		result = runner.invoke(app, ["-k", "openai=sk-abc", "-m", "gpt-4o", "-c", "PROJ-1 fix"])

		assert result.exit_code == 0, result.output
		mock_root_impl.assert_called_once_with(
			api_key="openai=sk-abc",
			model="gpt-4o",
			context="PROJ-1 fix",
			context_lines=None,
			config_file=None,
		)

	def test_no_arguments_runs_commit(self, runner: CliRunner, mock_root_impl: MagicMock) -> None:
		"""Test that a bare invocation uses the saved configuration."""
		result = runner.invoke(app, [])

		assert result.exit_code == 0, result.output
		mock_root_impl.assert_called_once()

	def test_commit_subcommand(
		self, runner: CliRunner, mock_root_impl: MagicMock, mock_commit_impl: MagicMock
	) -> None:
		"""Test the explicit commit subcommand."""
		result = runner.invoke(app, ["commit", "--api-key", "anthropic=sk-ant", "--context-lines", "5"])

		assert result.exit_code == 0, result.output
		mock_root_impl.assert_not_called()
		kwargs = mock_commit_impl.call_args.kwargs
		assert kwargs["api_key"] == "anthropic=sk-ant"
		assert kwargs["context_lines"] == 5

	def test_root_options_reach_subcommand(
		self, runner: CliRunner, mock_root_impl: MagicMock, mock_commit_impl: MagicMock
	) -> None:
		"""Test that options before ``commit`` are used unless repeated after it."""
		result = runner.invoke(app, ["-m", "gpt-4o", "-c", "PROJ-4", "commit", "-c", "PROJ-5", "-k", "openai=sk"])

		assert result.exit_code == 0, result.output
		mock_root_impl.assert_not_called()
		mock_commit_impl.assert_called_once_with(
			api_key="openai=sk",
			model="gpt-4o",
			context="PROJ-5",
			context_lines=None,
			config_file=None,
		)

	@pytest.mark.parametrize(
		"args",
		[["-k", "gemini=key"], ["-k", "openai"], ["commit", "-k", "openai="], ["--context-lines", "-1"]],
	)
	def test_usage_errors(
		self, runner: CliRunner, mock_root_impl: MagicMock, mock_commit_impl: MagicMock, args: list[str]
	) -> None:
		"""Test that malformed options are rejected before anything runs."""
		result = runner.invoke(app, args)

		assert result.exit_code == 2
		mock_root_impl.assert_not_called()
		mock_commit_impl.assert_not_called()


@pytest.fixture
def mock_loader() -> Iterator[MagicMock]:
	"""Mock the configuration singleton."""
	with patch("aicommit.config.ConfigLoader") as mock_cls:
		yield mock_cls.get_instance.return_value


@pytest.fixture
def mock_command() -> Iterator[MagicMock]:
	"""Mock the commit workflow."""
	with patch("aicommit.commit.CommitCommand") as mock_cls:
		yield mock_cls


@pytest.mark.unit
class TestCommitImplementation:
	"""Test cases for commit_command_impl."""

	def test_overrides_applied_and_saved(self, mock_loader: MagicMock, mock_command: MagicMock) -> None:
		"""Test that command line values reach the config and are persisted."""
		mock_command.return_value.run.return_value = SessionState(status=SessionStatus.COMMITTED)

		commit_command_impl(api_key="openai=sk-abc", model="gpt-4o", context="PROJ-2")

		mock_loader.apply_overrides.assert_called_once_with(
			provider=ProviderName.OPENAI, api_key="sk-abc", model="gpt-4o", context_lines=None
		)
		mock_loader.save.assert_called_once()
		mock_command.assert_called_once_with(mock_loader, context="PROJ-2")

	def test_no_overrides_no_save(self, mock_loader: MagicMock, mock_command: MagicMock) -> None:
		"""Test that the config file is left alone without overrides."""
		mock_command.return_value.run.return_value = SessionState(status=SessionStatus.CANCELLED, reason="x")

		commit_command_impl()

		mock_loader.save.assert_not_called()

	def test_context_alone_is_not_saved(self, mock_loader: MagicMock, mock_command: MagicMock) -> None:
		"""Test that the per-run description neither reaches nor rewrites the config file."""
		mock_command.return_value.run.return_value = SessionState(status=SessionStatus.COMMITTED)

		commit_command_impl(context="PROJ-7 private note")

		mock_loader.save.assert_not_called()
		assert "PROJ-7 private note" not in str(mock_loader.apply_overrides.call_args)
		mock_command.assert_called_once_with(mock_loader, context="PROJ-7 private note")

	def test_failed_session_exits_nonzero(self, mock_loader: MagicMock, mock_command: MagicMock) -> None:
		"""Test that a FAILED session exits with code 1."""
		mock_command.return_value.run.return_value = SessionState(status=SessionStatus.FAILED, reason="API Error")

		with pytest.raises(typer.Exit) as exc_info:
			commit_command_impl()

		assert exc_info.value.exit_code == 1

	@pytest.mark.parametrize(
		"error",
		[ConfigError("Model is not set. Please use -m/--model."), NoRepositoryError("Not a git repository")],
	)
	def test_config_and_git_errors_exit_nonzero(
		self, mock_loader: MagicMock, mock_command: MagicMock, error: Exception
	) -> None:
		"""Test that configuration and repository errors exit with code 1."""
		mock_command.side_effect = error

		with pytest.raises(typer.Exit) as exc_info:
			commit_command_impl()

		assert exc_info.value.exit_code == 1

	def test_keyboard_interrupt(self, mock_loader: MagicMock, mock_command: MagicMock) -> None:
		"""Test that Ctrl+C exits with 130."""
		mock_command.return_value.run.side_effect = KeyboardInterrupt

		with pytest.raises(typer.Exit) as exc_info:
			commit_command_impl()

		assert exc_info.value.exit_code == 130
