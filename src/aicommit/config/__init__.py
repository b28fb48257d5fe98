"""Configuration for ai-commit."""

from .config_loader import (
	PROVIDER_KEY_ENV_VARS,
	ConfigError,
	ConfigLoader,
	ConfigParsingError,
	default_config_path,
)
from .config_schema import AppConfigSchema, CommitSchema, LLMSchema

__all__ = [
	"PROVIDER_KEY_ENV_VARS",
	"AppConfigSchema",
	"CommitSchema",
	"ConfigError",
	"ConfigLoader",
	"ConfigParsingError",
	"LLMSchema",
	"default_config_path",
]
