"""Interactive commit session for ai-commit."""

from .command import CommitCommand
from .interactive import CommitUI
from .session import (
	TERMINAL_STATUSES,
	SessionAction,
	SessionController,
	SessionState,
	SessionStatus,
)

__all__ = [
	"TERMINAL_STATUSES",
	"CommitCommand",
	"CommitUI",
	"SessionAction",
	"SessionController",
	"SessionState",
	"SessionStatus",
]
