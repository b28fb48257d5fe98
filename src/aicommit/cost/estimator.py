"""Cost estimation and the confirmation gate in front of paid LLM calls."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Protocol

import questionary
import tiktoken
from rich.console import Console

from .pricing import DEFAULT_PRICE_PER_MILLION, DEFAULT_PRICE_TABLE

logger = logging.getLogger(__name__)
console = Console()

# Any value skips the confirmation prompt
SKIP_CONFIRM_ENV_VAR = "AI_COMMIT_SKIP_COST_CONFIRM"

# Model-independent encoding used for every estimate
ENCODING_NAME = "cl100k_base"

TOKENS_PER_MILLION = 1_000_000


class TokenizerError(Exception):
	"""Raised when the tokenizer cannot be initialized."""


class Encoding(Protocol):
	"""Minimal tokenizer interface (satisfied by ``tiktoken.Encoding``)."""

	def encode(self, text: str, **kwargs: Any) -> list[int]: ...  # noqa: ANN401


@dataclass(frozen=True)
class CostEstimate:
	"""Token count and estimated USD cost for a single request."""

	token_count: int
	estimated_cost_usd: float
	model: str = ""
	price_per_million: float = DEFAULT_PRICE_PER_MILLION
	used_default_price: bool = False

	def format(self) -> str:
		"""Human readable one-liner."""
		return f"Estimated cost: ${self.estimated_cost_usd:.3f} for processing {self.token_count} tokens."


def _load_default_encoding() -> Encoding:
	return tiktoken.get_encoding(ENCODING_NAME)


def _ask_user(estimate: CostEstimate) -> bool | None:
	"""Print the estimate and ask for go/no-go; None when the prompt is dismissed."""
	console.print(estimate.format())
	return questionary.confirm("Do you want to proceed?", default=False).ask()


class CostEstimator:
	"""Estimates request cost from a read-only price table and gates on user approval."""

	def __init__(
		self,
		price_table: Mapping[str, float] | None = None,
		default_price: float = DEFAULT_PRICE_PER_MILLION,
		encoding_factory: Callable[[], Encoding] = _load_default_encoding,
		prompt: Callable[[CostEstimate], bool | None] = _ask_user,
	) -> None:
		"""
		Initialize the estimator.

		Args:
		    price_table: Model -> USD per 1M input tokens; defaults to the built-in table
		    default_price: Price used for models missing from the table
		    encoding_factory: Builds the tokenizer on first use
		    prompt: Asks the user to approve an estimate

		"""
		table = DEFAULT_PRICE_TABLE if price_table is None else price_table
		self.price_table: Mapping[str, float] = MappingProxyType(dict(table))
		self.default_price = default_price
		self._encoding_factory = encoding_factory
		self._encoding: Encoding | None = None
		self._prompt = prompt

	def _get_encoding(self) -> Encoding:
		if self._encoding is None:
			try:
				self._encoding = self._encoding_factory()
			except Exception as e:
				msg = f"Failed to load tokenizer '{ENCODING_NAME}': {e}"
				logger.exception(msg)
				raise TokenizerError(msg) from e
		return self._encoding

	def count_tokens(self, text: str) -> int:
		"""Number of tokens in ``text``, special tokens included."""
		return len(self._get_encoding().encode(text, allowed_special="all"))

	def price_for(self, model: str) -> tuple[float, bool]:
		"""
		Look up the input price of a model.

		Args:
		    model: Model identifier

		Returns:
		    Tuple of (USD per 1M tokens, whether the default price was used)

		"""
		price = self.price_table.get(model)
		if price is None:
			logger.warning(
				"Unknown model '%s', using default pricing of $%.2f per 1M input tokens.", model, self.default_price
			)
			return self.default_price, True
		return price, False

	def estimate(self, model: str, prompt: str) -> CostEstimate:
		"""
		Estimate the input cost of sending ``prompt`` to ``model``.

		Output tokens are not included.

		Args:
		    model: Model identifier
		    prompt: Full prompt text

		Returns:
		    The estimate

		Raises:
		    TokenizerError: If the tokenizer cannot be initialized

		"""
		token_count = self.count_tokens(prompt)
		price, used_default = self.price_for(model)
		cost = token_count * (price / TOKENS_PER_MILLION)
		logger.debug("Estimated %d tokens ($%.6f) for model %s", token_count, cost, model)
		return CostEstimate(
			token_count=token_count,
			estimated_cost_usd=cost,
			model=model,
			price_per_million=price,
			used_default_price=used_default,
		)

	def confirm(self, estimate: CostEstimate) -> bool:
		"""
		Ask the user whether to proceed with the request.

		Returns True without prompting when the skip variable is set. A
		dismissed prompt counts as a decline.

		Args:
		    estimate: The estimate to present

		Returns:
		    True to proceed

		"""
		if os.environ.get(SKIP_CONFIRM_ENV_VAR) is not None:
			logger.info("Skipping cost confirmation due to %s environment variable", SKIP_CONFIRM_ENV_VAR)
			return True

		answer = self._prompt(estimate)
		if answer is not True:
			logger.info("Request canceled by the user.")
			return False
		return True
