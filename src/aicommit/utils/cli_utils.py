"""Console helpers shared by the ai-commit commands."""

from __future__ import annotations

import contextlib
import logging
import os
from typing import TYPE_CHECKING, ClassVar, NoReturn

import typer
from rich.console import Console

from aicommit.utils.log_setup import display_error_summary

if TYPE_CHECKING:
	from collections.abc import Iterator

console = Console()
logger = logging.getLogger(__name__)

# Conventional exit code for a process stopped by SIGINT
INTERRUPTED_EXIT_CODE = 130

# Any of these being set means nobody is watching the terminal
NON_INTERACTIVE_ENV_VARS = ("PYTEST_CURRENT_TEST", "CI")


class SpinnerState:
	"""Whether a spinner is currently drawn; nested spinners reuse it."""

	is_active: ClassVar[bool] = False


def _is_non_interactive() -> bool:
	return any(os.environ.get(name) for name in NON_INTERACTIVE_ENV_VARS)


@contextlib.contextmanager
def loading_spinner(message: str = "Working...") -> Iterator[None]:
	"""
	Show a spinner while the body of the ``with`` block runs.

	Nothing is drawn under pytest or CI, or inside another spinner.

	Args:
	    message: Text shown next to the spinner

	Yields:
	    None

	"""
	if _is_non_interactive() or SpinnerState.is_active:
		yield
		return

	SpinnerState.is_active = True
	try:
		with console.status(message, spinner="dots"):
			yield
	finally:
		SpinnerState.is_active = False


def show_error(message: str, exception: BaseException | None = None) -> None:
	"""
	Print an error summary.

	Args:
	    message: What went wrong, in user terms
	    exception: Cause; its text is appended unless the message already has it

	"""
	if exception is not None:
		logger.debug("Error details", exc_info=exception)
		detail = str(exception)
		if detail and detail not in message:
			message = f"{message}\n\nDetails: {detail}"
	display_error_summary(message)


def exit_with_error(message: str, exit_code: int = 1, exception: BaseException | None = None) -> NoReturn:
	"""
	Print an error summary and leave the command.

	Raises:
	    typer.Exit: Always, with ``exit_code``

	"""
	show_error(message, exception)
	raise typer.Exit(exit_code) from exception


def handle_keyboard_interrupt() -> NoReturn:
	"""Leave quietly after Ctrl+C."""
	console.print("\n[yellow]Interrupted.[/yellow]")
	raise typer.Exit(INTERRUPTED_EXIT_CODE)
