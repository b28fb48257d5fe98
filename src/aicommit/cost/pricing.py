"""Input token prices for supported models, in USD per 1M tokens."""

from __future__ import annotations

from types import MappingProxyType

# Used for any model missing from the table (gpt-4o input pricing)
DEFAULT_PRICE_PER_MILLION = 2.50

_PRICES: dict[str, float] = {
	# OpenAI GPT-5 family
	"gpt-5": 1.25,
	"gpt-5-chat-latest": 1.25,
	"gpt-5-mini": 0.25,
	"gpt-5-nano": 0.05,
	# OpenAI GPT-4.1 family
	"gpt-4.1": 2.00,
	"gpt-4.1-mini": 0.40,
	"gpt-4.1-nano": 0.10,
	# OpenAI GPT-4o family
	"gpt-4o": 2.50,
	"chatgpt-4o-latest": 2.50,
	"gpt-4o-2024-11-20": 2.50,
	"gpt-4o-2024-08-06": 2.50,
	"gpt-4o-2024-05-13": 5.00,
	"gpt-4o-mini": 0.15,
	"gpt-4o-mini-2024-07-18": 0.15,
	# OpenAI GPT-4 Turbo and legacy
	"gpt-4-turbo": 10.00,
	"gpt-4-turbo-2024-04-09": 10.00,
	"gpt-4-turbo-preview": 10.00,
	"gpt-4-0125-preview": 10.00,
	"gpt-4-1106-preview": 10.00,
	"gpt-4": 30.00,
	"gpt-4-0613": 30.00,
	"gpt-4-32k": 60.00,
	"gpt-4-32k-0613": 60.00,
	"gpt-3.5-turbo": 0.50,
	"gpt-3.5-turbo-0125": 0.50,
	"gpt-3.5-turbo-1106": 0.50,
	"gpt-3.5-turbo-instruct": 1.50,
	# OpenAI reasoning models
	"o1": 15.00,
	"o1-preview": 15.00,
	"o1-preview-2024-09-12": 15.00,
	"o1-mini": 3.00,
	"o1-mini-2024-09-12": 3.00,
	"o3-mini": 1.10,
	"o3": 10.00,
	"o3-pro": 30.00,
	"o4-mini": 1.10,
	# Anthropic Opus
	"claude-opus-4.1": 15.00,
	"claude-opus-4-1-20250805": 15.00,
	"claude-opus-4": 15.00,
	"claude-opus-4-20250514": 15.00,
	"claude-3-opus-20240229": 15.00,
	"claude-3-opus-latest": 15.00,
	# Anthropic Sonnet
	"claude-sonnet-4.5": 3.00,
	"claude-sonnet-4-5-20250929": 3.00,
	"claude-sonnet-4": 3.00,
	"claude-sonnet-4-20250514": 3.00,
	"claude-3-7-sonnet-20250219": 3.00,
	"claude-3-5-sonnet-20241022": 3.00,
	"claude-3-5-sonnet-latest": 3.00,
	"claude-3-5-sonnet-20240620": 3.00,
	# Anthropic Haiku
	"claude-haiku-4.5": 1.00,
	"claude-haiku-4-5-20251001": 1.00,
	"claude-3-5-haiku-20241022": 0.80,
	"claude-3-5-haiku-latest": 0.80,
	"claude-3-haiku-20240307": 0.25,
}

DEFAULT_PRICE_TABLE = MappingProxyType(_PRICES)
