"""Token counting and cost estimation for LLM requests."""

from .estimator import SKIP_CONFIRM_ENV_VAR, CostEstimate, CostEstimator, TokenizerError
from .pricing import DEFAULT_PRICE_PER_MILLION, DEFAULT_PRICE_TABLE

__all__ = [
	"DEFAULT_PRICE_PER_MILLION",
	"DEFAULT_PRICE_TABLE",
	"SKIP_CONFIRM_ENV_VAR",
	"CostEstimate",
	"CostEstimator",
	"TokenizerError",
]
