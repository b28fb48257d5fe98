"""OpenAI Chat Completions backend."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from .base import GenerationProvider
from .errors import InvalidFormatError
from .schemas import COMMIT_MESSAGE_PARAMETERS, COMMIT_MESSAGE_TOOL_DESCRIPTION, COMMIT_MESSAGE_TOOL_NAME

logger = logging.getLogger(__name__)

OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"


class OpenAIProvider(GenerationProvider):
	"""Generates commit messages through a forced function call."""

	name = "OpenAI"
	endpoint = OPENAI_API_URL
	known_errors: ClassVar[dict[str, str]] = {
		"insufficient_quota": "You exceeded your current OpenAI quota, please check your plan and billing details.",
		"invalid_api_key": "The OpenAI API key is invalid. Set a valid key with -k openai=<key>.",
		"rate_limit_exceeded": "OpenAI rate limit reached, please wait a moment and try again.",
	}

	def _headers(self) -> dict[str, str]:
		return {"Authorization": f"Bearer {self.api_key}"}

	def _build_request(self, model: str, prompt: str) -> dict[str, Any]:
		return {
			"model": model,
			"messages": [{"role": "user", "content": prompt}],
			"tools": [
				{
					"type": "function",
					"function": {
						"name": COMMIT_MESSAGE_TOOL_NAME,
						"description": COMMIT_MESSAGE_TOOL_DESCRIPTION,
						"parameters": COMMIT_MESSAGE_PARAMETERS,
					},
				}
			],
			"tool_choice": {"type": "function", "function": {"name": COMMIT_MESSAGE_TOOL_NAME}},
		}

	def _extract_arguments(self, data: dict[str, Any]) -> dict[str, Any] | str:
		try:
			message = data["choices"][0]["message"]
			tool_call = (message.get("tool_calls") or [])[0]
			return tool_call["function"]["arguments"]
		except (KeyError, IndexError, TypeError, AttributeError) as e:
			logger.exception("No tool call found in the OpenAI response")
			msg = "OpenAI response contains no commit message tool call"
			raise InvalidFormatError(msg) from e

	def _error_subtype(self, body: dict[str, Any]) -> str | None:
		error = body.get("error")
		if not isinstance(error, dict):
			return None
		return error.get("code") or error.get("type")
