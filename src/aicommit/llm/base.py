"""Provider base class and the HTTP handling shared by all backends."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import requests
from pydantic import ValidationError

from .errors import ApiError, InvalidFormatError, NetworkError
from .prompts import build_prompt
from .schemas import CommitMessage

logger = logging.getLogger(__name__)

# Seconds to establish the connection
CONNECT_TIMEOUT = 10
# Seconds the backend may stay silent before the request counts as a network failure
REQUEST_TIMEOUT = 120


class GenerationProvider(ABC):
	"""
	A language model backend that turns a diff into a structured commit message.

	Subclasses describe their endpoint, request body and where the tool
	arguments live in the response. Exactly one request is made per
	``generate`` call.

	"""

	name: ClassVar[str]
	endpoint: ClassVar[str]
	# Backend error subtype -> user readable message
	known_errors: ClassVar[dict[str, str]] = {}

	def __init__(
		self,
		api_key: str,
		session: requests.Session | None = None,
		timeout: float = REQUEST_TIMEOUT,
	) -> None:
		"""
		Initialize the provider.

		Args:
		    api_key: Backend API key
		    session: HTTP session to use (a new one when omitted)
		    timeout: Longest wait in seconds for the backend to send data.
		        requests applies it to each socket read, not to the call as a
		        whole. A non-streamed answer arrives in one piece, so in practice
		        it bounds the wait for the complete response. Connecting is
		        bounded separately by ``CONNECT_TIMEOUT``.

		"""
		self.api_key = api_key
		self.session = session or requests.Session()
		self.timeout = timeout

	@abstractmethod
	def _headers(self) -> dict[str, str]:
		"""Authentication and versioning headers."""

	@abstractmethod
	def _build_request(self, model: str, prompt: str) -> dict[str, Any]:
		"""JSON body forcing a single call of the commit message tool."""

	@abstractmethod
	def _extract_arguments(self, data: dict[str, Any]) -> dict[str, Any] | str:
		"""
		Locate the tool arguments in a decoded response.

		Raises:
		    InvalidFormatError: If the response carries no tool invocation

		"""

	@abstractmethod
	def _error_subtype(self, body: dict[str, Any]) -> str | None:
		"""Backend specific error subtype of a decoded error body."""

	def generate(self, model: str, diff: str, context: str | None = None) -> CommitMessage:
		"""
		Generate a commit message for a diff.

		Args:
		    model: Model identifier
		    diff: Staged diff text
		    context: Optional free-text description from the developer

		Returns:
		    The parsed commit message

		Raises:
		    ApiError: The backend answered with a non-2xx status
		    NetworkError: The backend was unreachable or timed out
		    InvalidFormatError: The answer lacked a valid tool invocation

		"""
		prompt = build_prompt(diff, context)
		payload = self._build_request(model, prompt)
		logger.debug("Requesting commit message from %s (model %s, prompt %d chars)", self.name, model, len(prompt))
		data = self._post(payload)
		arguments = self._extract_arguments(data)
		return self._parse_message(arguments)

	def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
		connect_timeout = min(CONNECT_TIMEOUT, self.timeout)
		try:
			response = self.session.post(
				self.endpoint,
				headers={"Content-Type": "application/json", **self._headers()},
				json=payload,
				timeout=(connect_timeout, self.timeout),
			)
		except requests.ConnectTimeout as e:
			msg = f"Connecting to {self.name} timed out after {connect_timeout:g} seconds"
			logger.warning(msg)
			raise NetworkError(msg) from e
		except requests.Timeout as e:
			msg = f"{self.name} request timed out after {self.timeout:g} seconds"
			logger.warning(msg)
			raise NetworkError(msg) from e
		except requests.RequestException as e:
			msg = f"Could not reach {self.name}: {e}"
			logger.warning(msg)
			raise NetworkError(msg) from e

		logger.debug("%s responded with HTTP %s", self.name, response.status_code)
		if not 200 <= response.status_code < 300:  # noqa: PLR2004
			raise self._api_error(response)

		try:
			data = response.json()
		except ValueError as e:
			logger.exception("Failed to parse %s response as JSON", self.name)
			raise InvalidFormatError(f"{self.name} returned a response that is not JSON") from e
		if not isinstance(data, dict):
			raise InvalidFormatError(f"{self.name} returned an unexpected JSON document")
		return data

	def _api_error(self, response: requests.Response) -> ApiError:
		"""Map a failed response to an ApiError with a readable message."""
		try:
			body = response.json()
		except ValueError:
			body = None

		server_message = None
		subtype = None
		if isinstance(body, dict):
			subtype = self._error_subtype(body)
			error = body.get("error")
			if isinstance(error, dict):
				server_message = error.get("message")
			elif isinstance(error, str):
				server_message = error

		message = self.known_errors.get(subtype or "") or server_message or response.reason or "Unknown error"
		logger.error("%s request failed with HTTP %s (%s)", self.name, response.status_code, subtype or "unknown")
		return ApiError(response.status_code, message)

	def _parse_message(self, arguments: dict[str, Any] | str) -> CommitMessage:
		if isinstance(arguments, str):
			try:
				arguments = json.loads(arguments)
			except json.JSONDecodeError as e:
				logger.exception("Tool arguments from %s are not valid JSON", self.name)
				raise InvalidFormatError(f"{self.name} returned malformed tool arguments") from e
		if not isinstance(arguments, dict):
			raise InvalidFormatError(f"{self.name} returned tool arguments that are not an object")

		try:
			return CommitMessage.model_validate(arguments)
		except ValidationError as e:
			logger.exception("Tool arguments from %s do not match the commit message schema", self.name)
			raise InvalidFormatError(f"{self.name} returned an incomplete commit message") from e
