"""Error types raised by generation providers."""

from __future__ import annotations


class LLMError(Exception):
	"""Base class for failures talking to a language model backend."""


class ApiError(LLMError):
	"""The backend was reachable but rejected or failed the request."""

	def __init__(self, status_code: int, message: str) -> None:
		"""
		Initialize the error.

		Args:
		    status_code: HTTP status returned by the backend
		    message: User-readable explanation

		"""
		self.status_code = status_code
		self.message = message
		super().__init__(f"API Error ({status_code}): {message}")


class NetworkError(LLMError):
	"""The backend could not be reached or did not answer in time."""


class InvalidFormatError(LLMError):
	"""The backend answered without the required structured tool output."""
