"""Interactive commit interface for ai-commit."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import questionary
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .session import SessionAction

if TYPE_CHECKING:
	from aicommit.cost.estimator import CostEstimate
	from aicommit.llm.schemas import CommitMessage

logger = logging.getLogger(__name__)


class CommitUI:
	"""Interactive UI for the commit process."""

	def __init__(self, console: Console | None = None) -> None:
		"""Initialize the commit UI."""
		self.console = console or Console()

	def display_message(self, message: CommitMessage) -> None:
		"""
		Show a generated commit message and, separately, any warnings.

		Args:
		    message: The generated message

		"""
		body = Text(message.summary, style="bold")
		if message.description:
			body.append("\n\n")
			body.append(message.description)
		self.console.print()
		self.console.print(Panel(body, title="Generated commit message", border_style="green", expand=False))

		for warning in message.warnings:
			banner = Text("Potential sensitive information\n", style="bold white on red")
			banner.append(warning)
			self.console.print(Panel(banner, border_style="red", style="bold white on red", expand=False))

	def get_user_action(self) -> SessionAction:
		"""
		Get the user's desired action for the generated message.

		Returns:
		    SessionAction indicating what to do; a dismissed prompt cancels

		"""
		options: list[tuple[str, SessionAction]] = [
			("Commit - Commit with this message", SessionAction.COMMIT),
			("Edit - Edit the message, then commit", SessionAction.EDIT),
			("Regenerate - Ask for a new message", SessionAction.REGENERATE),
			("Cancel - Exit without committing", SessionAction.CANCEL),
		]

		result = questionary.select(
			"What would you like to do?",
			choices=[option[0] for option in options],
			default=options[0][0],
			use_indicator=True,
			use_arrow_keys=True,
		).ask()

		for option, action in options:
			if option == result:
				return action
		return SessionAction.CANCEL

	def edit_message(self, current_message: str) -> str:
		"""
		Let the user edit the message in place.

		Args:
		    current_message: Current commit message

		Returns:
		    Whatever text the user left, possibly empty

		"""
		edited = questionary.text(
			"Edit commit message (Esc then Enter to finish):",
			default=current_message,
			multiline=True,
		).ask()
		if edited is None:
			return ""
		return edited.rstrip("\n")

	def confirm_cost(self, estimate: CostEstimate) -> bool | None:
		"""
		Present a cost estimate and ask whether to proceed.

		Args:
		    estimate: The estimate to present

		Returns:
		    The answer, or None when the prompt was dismissed

		"""
		self.console.print(estimate.format())
		if estimate.used_default_price:
			self.console.print(
				f"[yellow]No price known for '{estimate.model}', the default of "
				f"${estimate.price_per_million:.2f} per 1M tokens was used.[/yellow]"
			)
		return questionary.confirm("Do you want to proceed?", default=False).ask()

	def show_success(self, message: str) -> None:
		"""
		Show a success message.

		Args:
		    message: Message to display

		"""
		self.console.print(f"\n[bold green]✓[/] {message}")

	def show_cancelled(self, message: str) -> None:
		"""Show why the session ended without a commit."""
		self.console.print(f"\n[yellow]{message}[/yellow]")

	def show_error(self, message: str) -> None:
		"""
		Show an error message.

		Args:
		    message: Error message to display

		"""
		self.console.print(f"\n[bold red]✗[/] {message}")
