"""Main commit command implementation for ai-commit."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from aicommit.cost import DEFAULT_PRICE_TABLE, CostEstimator
from aicommit.git import DiffExtractor, GitRepoContext
from aicommit.llm import create_provider

from .interactive import CommitUI
from .session import SessionController, SessionState, SessionStatus

if TYPE_CHECKING:
	from pathlib import Path

	import requests

	from aicommit.config import ConfigLoader

logger = logging.getLogger(__name__)

EXIT_CODES = {
	SessionStatus.COMMITTED: 0,
	SessionStatus.CANCELLED: 0,
	SessionStatus.FAILED: 1,
}


class CommitCommand:
	"""Handles the commit command workflow."""

	def __init__(
		self,
		config_loader: ConfigLoader,
		path: Path | None = None,
		ui: CommitUI | None = None,
		http_session: requests.Session | None = None,
		context: str | None = None,
	) -> None:
		"""
		Initialize the commit command.

		Args:
		    config_loader: Loaded configuration with command line overrides applied
		    path: Directory inside the repository (defaults to the cwd)
		    ui: Terminal surface
		    http_session: HTTP session handed to the provider
		    context: Free-text description of this change; used for one session only

		Raises:
		    GitError: If no repository is found

		"""
		self.config_loader = config_loader
		self.repo = GitRepoContext(path)
		self.ui = ui or CommitUI()
		self.http_session = http_session
		self.context = context

	def build_controller(self) -> SessionController:
		"""
		Wire the session collaborators from the configuration.

		Raises:
		    ConfigError: If the provider, key or model is missing

		"""
		provider_config = self.config_loader.provider_config()
		settings = self.config_loader.get

		price_table = {**DEFAULT_PRICE_TABLE, **settings.pricing}
		estimator = CostEstimator(price_table=price_table, prompt=self.ui.confirm_cost)
		provider = create_provider(provider_config, session=self.http_session)
		logger.debug("Using %s with model %s", provider_config.provider_name.value, provider_config.model)

		return SessionController(
			extractor=DiffExtractor(self.repo, ignore_file=settings.commit.ignore_file),
			estimator=estimator,
			provider=provider,
			vcs=self.repo,
			ui=self.ui,
			model=provider_config.model,
			context=self.context,
			context_lines=settings.commit.context_lines,
		)

	def run(self) -> SessionState:
		"""
		Run one commit session and report its outcome.

		Failures are returned as a FAILED state, not raised.

		Returns:
		    The terminal session state

		"""
		state = self.build_controller().run()

		if state.status is SessionStatus.COMMITTED:
			lines = (state.final_text or "").splitlines()
			summary = lines[0] if lines else "(empty message)"
			self.ui.show_success(f"Committed {str(state.commit_id)[:7]}: {summary}")
		elif state.status is SessionStatus.CANCELLED:
			self.ui.show_cancelled(f"No commit created: {state.reason}.")
		return state

	@staticmethod
	def exit_code(state: SessionState) -> int:
		"""Process exit code for a terminal state."""
		return EXIT_CODES.get(state.status, 1)
