"""Schemas for the ai-commit configuration file."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from aicommit.git.ignore import IGNORE_FILE_NAME
from aicommit.llm.schemas import ProviderName


class LLMSchema(BaseModel):
	"""Backend selection and credentials."""

	provider: ProviderName | None = None
	api_key: str | None = Field(default=None, repr=False)
	model: str | None = None


class CommitSchema(BaseModel):
	"""Settings for the commit session."""

	context_lines: int = Field(default=3, ge=0)
	ignore_file: str = IGNORE_FILE_NAME


class AppConfigSchema(BaseModel):
	"""Top level configuration."""

	llm: LLMSchema = Field(default_factory=LLMSchema)
	commit: CommitSchema = Field(default_factory=CommitSchema)
	# Model -> USD per 1M input tokens, merged over the built-in table
	pricing: dict[str, float] = Field(default_factory=dict)

	@field_validator("pricing")
	@classmethod
	def _prices_not_negative(cls, value: dict[str, float]) -> dict[str, float]:
		for model, price in value.items():
			if price < 0:
				msg = f"price for '{model}' must not be negative"
				raise ValueError(msg)
		return value
