"""Anthropic Messages backend."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from .base import GenerationProvider
from .errors import InvalidFormatError
from .schemas import COMMIT_MESSAGE_PARAMETERS, COMMIT_MESSAGE_TOOL_DESCRIPTION, COMMIT_MESSAGE_TOOL_NAME

logger = logging.getLogger(__name__)

ANTHROPIC_API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
MAX_TOKENS = 1024


class AnthropicProvider(GenerationProvider):
	"""Generates commit messages through a forced tool use."""

	name = "Anthropic"
	endpoint = ANTHROPIC_API_URL
	known_errors: ClassVar[dict[str, str]] = {
		"authentication_error": "The Anthropic API key is invalid. Set a valid key with -k anthropic=<key>.",
		"rate_limit_error": "Anthropic rate limit reached, please wait a moment and try again.",
		"billing_error": "Your Anthropic credit balance is too low, please check your plan and billing details.",
		"overloaded_error": "Anthropic is temporarily overloaded, please try again later.",
	}

	def _headers(self) -> dict[str, str]:
		return {"x-api-key": self.api_key, "anthropic-version": ANTHROPIC_VERSION}

	def _build_request(self, model: str, prompt: str) -> dict[str, Any]:
		return {
			"model": model,
			"max_tokens": MAX_TOKENS,
			"tools": [
				{
					"name": COMMIT_MESSAGE_TOOL_NAME,
					"description": COMMIT_MESSAGE_TOOL_DESCRIPTION,
					"input_schema": COMMIT_MESSAGE_PARAMETERS,
				}
			],
			"tool_choice": {"type": "tool", "name": COMMIT_MESSAGE_TOOL_NAME},
			"messages": [{"role": "user", "content": prompt}],
		}

	def _extract_arguments(self, data: dict[str, Any]) -> dict[str, Any] | str:
		content = data.get("content")
		if isinstance(content, list):
			for block in content:
				if isinstance(block, dict) and block.get("type") == "tool_use":
					return block.get("input")
		logger.error("No tool_use block found in the Anthropic response")
		msg = "Anthropic response contains no commit message tool use"
		raise InvalidFormatError(msg)

	def _error_subtype(self, body: dict[str, Any]) -> str | None:
		error = body.get("error")
		if not isinstance(error, dict):
			return None
		return error.get("type")
