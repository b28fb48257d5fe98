"""
Logging setup for ai-commit.

The root logger gets a rich console handler and, with ``--save-log``, a
plain file handler. Diff content and user context never reach these
handlers; callers log sizes and counts only.

"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.text import Text

console = Console(stderr=True)
logger = logging.getLogger(__name__)

# HTTP client loggers that flood DEBUG/INFO with connection details
NOISY_LOGGERS = ("urllib3", "requests", "charset_normalizer")

FILE_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d %(message)s"


def _console_handler(level: int, is_verbose: bool) -> logging.Handler:
	return RichHandler(
		level=level,
		console=console,
		rich_tracebacks=is_verbose,
		show_time=is_verbose,
		show_path=is_verbose,
	)


def _file_handler(log_file_path: Path | str) -> logging.Handler | None:
	"""Open a file handler, or return None when the file cannot be created."""
	path = Path(log_file_path)
	try:
		path.parent.mkdir(parents=True, exist_ok=True)
		handler = logging.FileHandler(path, mode="a", encoding="utf-8")
	except OSError as e:
		console.print(f"[yellow]Could not write log file {path}: {e}[/yellow]")
		return None
	handler.setLevel(logging.DEBUG)
	handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
	return handler


def setup_logging(
	is_verbose: bool = False,
	log_to_console: bool = True,
	log_file_path: Path | str | None = None,
) -> None:
	"""
	Configure the root logger.

	Warnings and errors are shown by default, everything with ``is_verbose``.
	Calling this again replaces the handlers of the previous call.

	Args:
	    is_verbose: Log at DEBUG level instead of WARNING
	    log_to_console: Attach the rich console handler
	    log_file_path: Optional file receiving every record at DEBUG level

	"""
	level = logging.DEBUG if is_verbose else logging.WARNING
	root_logger = logging.getLogger()
	root_logger.setLevel(level)

	for handler in root_logger.handlers[:]:
		root_logger.removeHandler(handler)

	if log_to_console:
		root_logger.addHandler(_console_handler(level, is_verbose))

	if log_file_path is not None:
		file_handler = _file_handler(log_file_path)
		if file_handler is not None:
			root_logger.addHandler(file_handler)
			logger.debug("Logging to file %s", log_file_path)

	noisy_level = logging.DEBUG if is_verbose else logging.WARNING
	for name in NOISY_LOGGERS:
		logging.getLogger(name).setLevel(noisy_level)


def display_error_summary(error_message: str) -> None:
	"""
	Print an error between two red rules.

	Args:
	    error_message: The error message to display

	"""
	console.print()
	console.print(Rule(Text("Error", style="bold red"), style="red"))
	console.print(error_message)
	console.print(Rule(style="red"))
