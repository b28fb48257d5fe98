"""Entry point of the ``ai-commit`` command line tool."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from aicommit import __version__
from aicommit.utils.log_setup import setup_logging

from .commit_cmd import ApiKeyOpt, ConfigOpt, ContextLinesOpt, ContextOpt, ModelOpt, commit_command_impl
from .commit_cmd import register_command as register_commit_command

logger = logging.getLogger(__name__)

# The first file found wins
ENV_FILES = (".env.local", ".env")

LOG_DIR = Path("logs")


def _load_env_files() -> None:
	for name in ENV_FILES:
		path = Path(name)
		if path.is_file():
			load_dotenv(dotenv_path=path)
			logger.debug("Loaded environment variables from %s", path)
			return


_load_env_files()

app = typer.Typer(
	help=f"ai-commit - Commit messages for your staged changes, written by an LLM\n\nVersion: {__version__}",
	no_args_is_help=False,
	context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
	if value:
		typer.echo(f"ai-commit version: {__version__}")
		raise typer.Exit


def _log_file_path() -> Path:
	timestamp = datetime.now(tz=UTC).strftime("%Y-%m-%d_%H-%M-%S")
	return LOG_DIR / f"ai-commit_{timestamp}.log"


@app.callback(invoke_without_command=True)
def global_options(
	ctx: typer.Context,
	is_verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
	save_log: Annotated[
		bool,
		typer.Option("--save-log", help="Also write the log to logs/ai-commit_<timestamp>.log."),
	] = False,
	_version: Annotated[
		bool | None,
		typer.Option("--version", help="Show the version and exit.", callback=_version_callback, is_eager=True),
	] = None,
	api_key: ApiKeyOpt = None,
	model: ModelOpt = None,
	context: ContextOpt = None,
	context_lines: ContextLinesOpt = None,
	config_file: ConfigOpt = None,
) -> None:
	"""
	Set up logging, then run ``commit`` when no command is given.

	``ai-commit -k openai=sk-... -m gpt-4o`` is the same as
	``ai-commit commit -k openai=sk-... -m gpt-4o``.

	"""
	setup_logging(is_verbose=is_verbose, log_file_path=_log_file_path() if save_log else None)

	# Handed on to ``commit`` when it is named explicitly
	ctx.obj = {
		name: value
		for name, value in (
			("api_key", api_key),
			("model", model),
			("context", context),
			("context_lines", context_lines),
			("config_file", config_file),
		)
		if value is not None
	}

	if ctx.invoked_subcommand is None:
		commit_command_impl(
			api_key=api_key,
			model=model,
			context=context,
			context_lines=context_lines,
			config_file=config_file,
		)


register_commit_command(app)


def main() -> None:
	"""Run the CLI application."""
	app()
