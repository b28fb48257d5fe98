"""Data models shared by the generation providers."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

COMMIT_MESSAGE_TOOL_NAME = "git_commit_message"
COMMIT_MESSAGE_TOOL_DESCRIPTION = "Generate a commit message from a diff"

# JSON schema of the tool arguments, shared by both providers
COMMIT_MESSAGE_PARAMETERS: dict[str, Any] = {
	"type": "object",
	"properties": {
		"summary": {
			"type": "string",
			"description": "A one-sentence description of the key change, starting with a capital letter.",
		},
		"description": {
			"type": "string",
			"description": "A detailed description of the changes as at most five dash points.",
		},
		"warning": {
			"type": "string",
			"description": "All detected potential sensitive information, or null if none found.",
		},
	},
	"required": ["summary"],
}


class ProviderName(str, Enum):
	"""Supported language model backends."""

	OPENAI = "openai"
	ANTHROPIC = "anthropic"


class ProviderConfig(BaseModel):
	"""Backend selection and credentials, read-only to the pipeline."""

	model_config = ConfigDict(frozen=True)

	provider_name: ProviderName
	api_key: str = Field(repr=False)
	model: str


class CommitMessage(BaseModel):
	"""Structured commit message returned by a provider."""

	model_config = ConfigDict(extra="ignore")

	summary: str
	description: str | None = None
	warning: str | list[str] | None = None

	@field_validator("summary")
	@classmethod
	def _summary_not_blank(cls, value: str) -> str:
		value = value.strip()
		if not value:
			msg = "summary must not be empty"
			raise ValueError(msg)
		return value

	@field_validator("description")
	@classmethod
	def _blank_description_is_none(cls, value: str | None) -> str | None:
		if value is None or not value.strip():
			return None
		return value.strip()

	@property
	def warnings(self) -> list[str]:
		"""The warning field as a list; empty when there is nothing to flag."""
		if self.warning is None:
			return []
		items = [self.warning] if isinstance(self.warning, str) else self.warning
		return [item.strip() for item in items if item and item.strip()]

	def to_commit_text(self) -> str:
		"""Text written to the commit; the warning is never part of it."""
		if self.description:
			return f"{self.summary}\n\n{self.description}"
		return self.summary
