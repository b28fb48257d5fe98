"""Command for generating a commit message from the staged changes and committing it."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from aicommit.llm.schemas import ProviderName

logger = logging.getLogger(__name__)

# --- Command Option Annotations ---


def parse_provider_key(value: str) -> tuple[ProviderName, str]:
	"""
	Split a ``provider=key`` value.

	Args:
	    value: Raw option value

	Returns:
	    Tuple of (provider, key)

	Raises:
	    typer.BadParameter: If the value is malformed or names an unknown provider

	"""
	provider, sep, key = value.partition("=")
	if not sep:
		msg = "Must be in form <provider>=<key>"
		raise typer.BadParameter(msg)

	provider = provider.strip().lower()
	try:
		provider_name = ProviderName(provider)
	except ValueError as e:
		supported = ", ".join(p.value for p in ProviderName)
		msg = f"Unsupported provider '{provider}'. Supported providers: {supported}"
		raise typer.BadParameter(msg) from e

	key = key.strip()
	if not key:
		msg = "API key must not be empty"
		raise typer.BadParameter(msg)
	return provider_name, key


def _validate_provider_key(value: str | None) -> str | None:
	if value is not None:
		parse_provider_key(value)
	return value


ApiKeyOpt = Annotated[
	str | None,
	typer.Option(
		"--api-key",
		"-k",
		metavar="PROVIDER=KEY",
		help="API provider and key, e.g. openai=sk-... The value is saved to the config file.",
		callback=_validate_provider_key,
	),
]

ModelOpt = Annotated[
	str | None,
	typer.Option("--model", "-m", help="Model used to generate the message. The value is saved to the config file."),
]

ContextOpt = Annotated[
	str | None,
	typer.Option("--context", "-c", help="Short description of this change, e.g. containing a ticket number. Used for this run only."),
]

ContextLinesOpt = Annotated[
	int | None,
	typer.Option("--context-lines", min=0, help="Unchanged lines shown around each change in the diff."),
]

ConfigOpt = Annotated[
	Path | None,
	typer.Option("--config", dir_okay=False, help="Path to the configuration file."),
]

# --- Registration Function ---


def register_command(app: typer.Typer) -> None:
	"""Register the commit command with the CLI app."""

	@app.command(name="commit")
	def commit_command(
		ctx: typer.Context,
		api_key: ApiKeyOpt = None,
		model: ModelOpt = None,
		context: ContextOpt = None,
		context_lines: ContextLinesOpt = None,
		config_file: ConfigOpt = None,
	) -> None:
		"""
		Generate a commit message for the staged changes and commit them.

		The message can be committed as is, edited, regenerated or discarded.

		"""
		# Options given before ``commit`` apply unless repeated after it
		root_options: dict[str, object] = ctx.obj or {}
		options = {
			"api_key": api_key,
			"model": model,
			"context": context,
			"context_lines": context_lines,
			"config_file": config_file,
		}
		commit_command_impl(
			**{name: root_options.get(name) if value is None else value for name, value in options.items()}
		)


# --- Implementation Function (Heavy imports deferred here) ---


def commit_command_impl(
	api_key: str | None = None,
	model: str | None = None,
	context: str | None = None,
	context_lines: int | None = None,
	config_file: Path | None = None,
) -> None:
	"""Actual implementation of the commit command."""
	from aicommit.commit import CommitCommand, SessionStatus
	from aicommit.config import ConfigError, ConfigLoader
	from aicommit.git import GitError
	from aicommit.utils.cli_utils import exit_with_error, handle_keyboard_interrupt

	state = None
	try:
		config_loader = ConfigLoader.get_instance(config_file, reload=True)

		provider, key = parse_provider_key(api_key) if api_key else (None, None)
		overrides_given = any(value is not None for value in (api_key, model, context_lines))
		config_loader.apply_overrides(
			provider=provider,
			api_key=key,
			model=model,
			context_lines=context_lines,
		)
		if overrides_given:
			config_loader.save()

		state = CommitCommand(config_loader, context=context).run()
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except ConfigError as e:
		exit_with_error(f"Configuration error: {e}", exception=e)
	except GitError as e:
		exit_with_error(f"Git error: {e}", exception=e)

	if state is not None and state.status is SessionStatus.FAILED:
		exit_with_error(f"Commit failed: {state.reason}")
