"""Interactive commit session modelled as a finite state machine."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol

from aicommit.git.utils import StaleParentError
from aicommit.llm.prompts import build_prompt
from aicommit.utils.cli_utils import loading_spinner

if TYPE_CHECKING:
	from pygit2 import Oid

	from aicommit.cost.estimator import CostEstimate, CostEstimator
	from aicommit.git.diff_extractor import DiffExtractor
	from aicommit.llm.base import GenerationProvider
	from aicommit.llm.schemas import CommitMessage

logger = logging.getLogger(__name__)

NOTHING_TO_COMMIT = "nothing to commit"
COST_DECLINED = "cost confirmation declined"
CANCELLED_BY_USER = "cancelled by user"


class SessionStatus(Enum):
	"""States of a commit session."""

	IDLE = auto()
	DIFF_READY = auto()
	COST_GATE = auto()
	GENERATING = auto()
	MESSAGE_READY = auto()
	COMMITTING = auto()
	EDITING_THEN_COMMITTING = auto()
	COMMITTED = auto()
	CANCELLED = auto()
	FAILED = auto()


TERMINAL_STATUSES = frozenset({SessionStatus.COMMITTED, SessionStatus.CANCELLED, SessionStatus.FAILED})


class SessionAction(Enum):
	"""What the user chose to do with a generated message."""

	COMMIT = auto()
	EDIT = auto()
	REGENERATE = auto()
	CANCEL = auto()


@dataclass(frozen=True)
class SessionState:
	"""Immutable snapshot of a session; transitions build a new one."""

	status: SessionStatus = SessionStatus.IDLE
	diff: str = ""
	prompt: str = ""
	parent: Oid | None = None
	estimate: CostEstimate | None = None
	message: CommitMessage | None = None
	final_text: str | None = None
	commit_id: Oid | None = None
	reason: str | None = None

	@property
	def is_terminal(self) -> bool:
		"""Whether the session has ended."""
		return self.status in TERMINAL_STATUSES


class CommitTarget(Protocol):
	"""The VCS operations a session needs besides the diff."""

	def head_id(self) -> Oid | None: ...

	def commit(self, message: str, expected_parent: Oid | None = None) -> Oid: ...


class SessionUI(Protocol):
	"""Terminal surface driven by the session."""

	def display_message(self, message: CommitMessage) -> None: ...

	def get_user_action(self) -> SessionAction: ...

	def edit_message(self, current_message: str) -> str: ...


class SessionController:
	"""
	Drives one commit from the staged diff to a terminal state.

	Every transition is computed by ``step`` from the current state, the
	user's action and the collaborators' results. A step that raises
	ends the session in ``FAILED`` with the data of the previous state
	kept intact.

	"""

	def __init__(
		self,
		extractor: DiffExtractor,
		estimator: CostEstimator,
		provider: GenerationProvider,
		vcs: CommitTarget,
		ui: SessionUI,
		model: str,
		context: str | None = None,
		context_lines: int = 3,
	) -> None:
		"""
		Initialize the controller.

		Args:
		    extractor: Produces the filtered staged diff
		    estimator: Cost estimate and confirmation gate
		    provider: Backend generating the message
		    vcs: Repository receiving the commit
		    ui: Terminal surface for display, action choice and editing
		    model: Model identifier passed to the estimator and provider
		    context: Optional free-text description from the developer
		    context_lines: Unchanged lines around each change in the diff

		"""
		self.extractor = extractor
		self.estimator = estimator
		self.provider = provider
		self.vcs = vcs
		self.ui = ui
		self.model = model
		self.context = context
		self.context_lines = context_lines

	def run(self, state: SessionState | None = None) -> SessionState:
		"""
		Step until a terminal state is reached.

		Args:
		    state: State to resume from (a fresh session when omitted)

		Returns:
		    The terminal state

		"""
		state = state or SessionState()
		while not state.is_terminal:
			state = self.step(state)
		logger.debug("Session ended in %s", state.status.name)
		return state

	def step(self, state: SessionState) -> SessionState:
		"""
		Perform a single transition.

		Args:
		    state: Current state

		Returns:
		    The next state; terminal states are returned unchanged

		"""
		handlers = {
			SessionStatus.IDLE: self._read_diff,
			SessionStatus.DIFF_READY: self._estimate_cost,
			SessionStatus.COST_GATE: self._confirm_cost,
			SessionStatus.GENERATING: self._generate,
			SessionStatus.MESSAGE_READY: self._await_action,
			SessionStatus.COMMITTING: self._commit,
			SessionStatus.EDITING_THEN_COMMITTING: self._edit_and_commit,
		}
		handler = handlers.get(state.status)
		if handler is None:
			return state

		try:
			next_state = handler(state)
		except Exception as e:
			logger.exception("Commit session failed in state %s", state.status.name)
			return replace(state, status=SessionStatus.FAILED, reason=str(e) or type(e).__name__)

		logger.debug("Session transition %s -> %s", state.status.name, next_state.status.name)
		return next_state

	def _read_diff(self, state: SessionState) -> SessionState:
		parent = self.vcs.head_id()
		diff = self.extractor.extract(self.context_lines)
		if not diff:
			logger.info("No staged changes left after filtering")
			return replace(state, status=SessionStatus.CANCELLED, reason=NOTHING_TO_COMMIT)
		return replace(state, status=SessionStatus.DIFF_READY, diff=diff, parent=parent)

	def _estimate_cost(self, state: SessionState) -> SessionState:
		prompt = build_prompt(state.diff, self.context)
		estimate = self.estimator.estimate(self.model, prompt)
		return replace(state, status=SessionStatus.COST_GATE, prompt=prompt, estimate=estimate)

	def _confirm_cost(self, state: SessionState) -> SessionState:
		if state.estimate is None or not self.estimator.confirm(state.estimate):
			return replace(state, status=SessionStatus.CANCELLED, reason=COST_DECLINED)
		return replace(state, status=SessionStatus.GENERATING)

	def _generate(self, state: SessionState) -> SessionState:
		# The previous message stays in place until the new one is fully parsed
		with loading_spinner("Generating commit message..."):
			message = self.provider.generate(self.model, state.diff, self.context)
		return replace(state, status=SessionStatus.MESSAGE_READY, message=message)

	def _await_action(self, state: SessionState) -> SessionState:
		if state.message is None:
			msg = "No generated message to act on"
			raise RuntimeError(msg)

		self.ui.display_message(state.message)
		action = self.ui.get_user_action()
		logger.debug("User chose %s", action.name)

		if action is SessionAction.COMMIT:
			return replace(state, status=SessionStatus.COMMITTING, final_text=state.message.to_commit_text())
		if action is SessionAction.EDIT:
			return replace(state, status=SessionStatus.EDITING_THEN_COMMITTING)
		if action is SessionAction.REGENERATE:
			return replace(state, status=SessionStatus.GENERATING)
		return replace(state, status=SessionStatus.CANCELLED, reason=CANCELLED_BY_USER)

	def _edit_and_commit(self, state: SessionState) -> SessionState:
		current = state.final_text
		if current is None:
			current = state.message.to_commit_text() if state.message else ""
		# An empty result is committed as is
		edited = self.ui.edit_message(current)
		return self._commit(replace(state, final_text=edited))

	def _commit(self, state: SessionState) -> SessionState:
		text = state.final_text if state.final_text is not None else ""
		try:
			commit_id = self.vcs.commit(text, state.parent)
		except StaleParentError as e:
			logger.warning("Branch tip moved since the diff was read, retrying commit on %s", e.current_parent)
			commit_id = self.vcs.commit(text, e.current_parent)
			return replace(
				state, status=SessionStatus.COMMITTED, final_text=text, parent=e.current_parent, commit_id=commit_id
			)
		return replace(state, status=SessionStatus.COMMITTED, final_text=text, commit_id=commit_id)
