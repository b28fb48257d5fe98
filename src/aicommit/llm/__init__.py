"""Language model backends that produce structured commit messages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .anthropic import AnthropicProvider
from .base import CONNECT_TIMEOUT, REQUEST_TIMEOUT, GenerationProvider
from .errors import ApiError, InvalidFormatError, LLMError, NetworkError
from .openai import OpenAIProvider
from .prompts import SYSTEM_PROMPT, build_prompt
from .schemas import CommitMessage, ProviderConfig, ProviderName

if TYPE_CHECKING:
	import requests

PROVIDERS: dict[ProviderName, type[GenerationProvider]] = {
	ProviderName.OPENAI: OpenAIProvider,
	ProviderName.ANTHROPIC: AnthropicProvider,
}


def create_provider(config: ProviderConfig, session: requests.Session | None = None) -> GenerationProvider:
	"""
	Create the backend named by a provider configuration.

	Args:
	    config: Provider name and credentials
	    session: Optional HTTP session shared with the caller

	Returns:
	    A ready to use provider

	"""
	provider_cls = PROVIDERS[config.provider_name]
	return provider_cls(config.api_key, session=session)


__all__ = [
	"CONNECT_TIMEOUT",
	"PROVIDERS",
	"REQUEST_TIMEOUT",
	"SYSTEM_PROMPT",
	"AnthropicProvider",
	"ApiError",
	"CommitMessage",
	"GenerationProvider",
	"InvalidFormatError",
	"LLMError",
	"NetworkError",
	"OpenAIProvider",
	"ProviderConfig",
	"ProviderName",
	"build_prompt",
	"create_provider",
]
