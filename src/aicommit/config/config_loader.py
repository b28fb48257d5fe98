"""
Configuration loader for ai-commit.

This module loads the YAML configuration file, applies environment and
command line overrides, and writes the persisted settings back so that
the model and key survive between runs.

"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError
from xdg.BaseDirectory import xdg_config_home

from aicommit.llm.schemas import ProviderConfig, ProviderName

from .config_schema import AppConfigSchema

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = "ai-commit"
CONFIG_FILE_NAME = "config.yml"
LOCAL_CONFIG_FILE = ".ai-commit.yml"

# AI_COMMIT_<SECTION>_<KEY>, e.g. AI_COMMIT_LLM_MODEL
ENV_PREFIX = "AI_COMMIT_"

PROVIDER_KEY_ENV_VARS: dict[ProviderName, str] = {
	ProviderName.OPENAI: "OPENAI_API_KEY",
	ProviderName.ANTHROPIC: "ANTHROPIC_API_KEY",
}


class ConfigError(Exception):
	"""The configuration is incomplete or unusable."""


class ConfigParsingError(ConfigError):
	"""The configuration file is not valid YAML or does not fit the schema."""


def default_config_path() -> Path:
	"""The per-user configuration file under ``$XDG_CONFIG_HOME``."""
	return Path(xdg_config_home) / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
	"""
	Read a YAML file that must hold a mapping; an empty file is an empty mapping.

	Raises:
		ConfigParsingError: If the file cannot be read or parsed
	"""
	try:
		with path.open(encoding="utf-8") as f:
			content = yaml.safe_load(f)
	except yaml.YAMLError as e:
		msg = f"Configuration file {path} is not valid YAML: {e}"
		raise ConfigParsingError(msg) from e
	except OSError as e:
		msg = f"Cannot read configuration file {path}: {e}"
		raise ConfigParsingError(msg) from e

	if content is None:
		return {}
	if not isinstance(content, dict):
		msg = f"Configuration file {path} must contain a mapping of sections, not {type(content).__name__}"
		raise ConfigParsingError(msg)
	return content


def _deep_merge(target: dict[str, Any], layer: dict[str, Any]) -> None:
	"""Merge ``layer`` into ``target`` in place; nested mappings are merged key by key."""
	for key, value in layer.items():
		if isinstance(value, dict):
			existing = target.get(key)
			if not isinstance(existing, dict):
				existing = target[key] = {}
			_deep_merge(existing, value)
		else:
			target[key] = value


def _environment_layer() -> dict[str, Any]:
	"""Collect ``AI_COMMIT_<SECTION>_<KEY>`` values for every field of every section."""
	layer: dict[str, Any] = {}
	for section, field in AppConfigSchema.model_fields.items():
		section_model = field.annotation
		if not (isinstance(section_model, type) and issubclass(section_model, BaseModel)):
			continue
		for key in section_model.model_fields:
			env_name = f"{ENV_PREFIX}{section}_{key}".upper()
			value = os.environ.get(env_name)
			if value is not None:
				logger.debug("Using %s from the environment", env_name)
				layer.setdefault(section, {})[key] = value
	return layer


class ConfigLoader:
	"""
	Loads and manages configuration for ai-commit using Pydantic schemas.

	Values are layered: schema defaults, the configuration file,
	``AI_COMMIT_*`` environment variables, then command line overrides.
	Only the file and command line layers are written back by ``save``.

	"""

	_instance: ConfigLoader | None = None

	@classmethod
	def get_instance(cls, config_file: Path | None = None, reload: bool = False) -> ConfigLoader:
		"""
		Return the shared loader, creating it on first use.

		Args:
			config_file: Explicit configuration file
			reload: Re-read the configuration of an existing loader

		"""
		if cls._instance is None:
			cls._instance = cls(config_file)
		elif reload:
			cls._instance.reload_config(config_file)
		return cls._instance

	def __init__(self, config_file: Path | None = None) -> None:
		"""
		Locate and load the configuration.

		Args:
			config_file: Explicit configuration file; searched for when omitted

		Raises:
			ConfigParsingError: If the file exists but cannot be parsed

		"""
		self._config_file = config_file
		self._file_layer: dict[str, Any] = {}
		self._cli_layer: dict[str, Any] = {}
		self._resolved_config_file: Path | None = None
		self._app_config = self._load()

	def reload_config(self, config_file: Path | None = None) -> None:
		"""
		Read the configuration again and drop any command line overrides.

		Args:
			config_file: Switch to this file before reloading
		"""
		if config_file is not None:
			self._config_file = config_file
		self._cli_layer = {}
		self._app_config = self._load()
		logger.debug("Configuration reloaded")

	@property
	def config_file(self) -> Path | None:
		"""The configuration file in use, if any."""
		return self._resolved_config_file

	@property
	def get(self) -> AppConfigSchema:
		"""The merged, validated configuration."""
		return self._app_config

	def _locate_config_file(self) -> Path | None:
		"""
		Pick the configuration file.

		An explicit path is used even if it does not exist yet (``save``
		creates it). Otherwise ``./.ai-commit.yml`` is preferred over
		``$XDG_CONFIG_HOME/ai-commit/config.yml``.

		"""
		if self._config_file:
			path = Path(self._config_file).expanduser().resolve()
			if not path.exists():
				logger.info("Config file %s does not exist yet", path)
			return path

		for candidate in (Path(LOCAL_CONFIG_FILE), default_config_path()):
			if candidate.exists():
				return candidate
		return None

	def _load(self) -> AppConfigSchema:
		self._resolved_config_file = self._locate_config_file()
		path = self._resolved_config_file
		if path is not None and path.exists():
			try:
				self._file_layer = _read_yaml_mapping(path)
			except ConfigParsingError:
				logger.exception("Failed to load configuration from %s", path)
				raise
			logger.info("Loaded configuration from %s", path)
		else:
			self._file_layer = {}
			logger.info("No configuration file found, using defaults")
		return self._validate(self._file_layer, _environment_layer(), self._cli_layer)

	@staticmethod
	def _validate(*layers: dict[str, Any]) -> AppConfigSchema:
		merged: dict[str, Any] = {}
		for layer in layers:
			_deep_merge(merged, layer)
		try:
			return AppConfigSchema(**merged)
		except ValidationError as e:
			msg = f"Invalid configuration: {e}"
			logger.exception(msg)
			raise ConfigParsingError(msg) from e

	def apply_overrides(
		self,
		provider: ProviderName | None = None,
		api_key: str | None = None,
		model: str | None = None,
		context_lines: int | None = None,
	) -> AppConfigSchema:
		"""
		Layer command line values on top of the loaded configuration.

		Only settings meant to persist belong here; the free-text context
		of a single run is handed to the session directly.

		Args:
			provider: Backend selected together with ``api_key``
			api_key: Key for ``provider``
			model: Model identifier
			context_lines: Unchanged lines around each change

		Returns:
			The updated configuration

		Raises:
			ConfigParsingError: If a value does not fit the schema

		"""
		llm: dict[str, Any] = {}
		commit: dict[str, Any] = {}
		if provider is not None:
			llm["provider"] = ProviderName(provider).value
		if api_key is not None:
			llm["api_key"] = api_key
		if model is not None:
			llm["model"] = model
		if context_lines is not None:
			commit["context_lines"] = context_lines

		overrides = {section: values for section, values in (("llm", llm), ("commit", commit)) if values}
		_deep_merge(self._cli_layer, overrides)
		self._app_config = self._validate(self._file_layer, _environment_layer(), self._cli_layer)
		return self._app_config

	def save(self, path: Path | None = None) -> bool:
		"""
		Write the file settings plus command line overrides back to disk.

		Environment overrides are not persisted. A failure is logged and
		reported through the return value.

		Args:
			path: Target file (defaults to the resolved file or the XDG location)

		Returns:
			True if the file was written

		"""
		target = path or self._resolved_config_file or default_config_path()
		data: dict[str, Any] = {}
		_deep_merge(data, self._file_layer)
		_deep_merge(data, self._cli_layer)
		try:
			# Validate before writing so a broken file is never produced
			persisted = AppConfigSchema(**data).model_dump(mode="json", exclude_none=True)
			target.parent.mkdir(parents=True, exist_ok=True)
			with target.open("w", encoding="utf-8") as f:
				yaml.safe_dump(persisted, f, sort_keys=False)
		except (OSError, ValidationError) as e:
			logger.warning("Failed to save configuration to %s: %s", target, e)
			return False

		logger.debug("Configuration saved to %s", target)
		self._resolved_config_file = target
		return True

	def provider_config(self) -> ProviderConfig:
		"""
		Build the read-only backend configuration.

		The provider's conventional environment variable is consulted
		when no key is configured.

		Returns:
			ProviderConfig for the selected backend

		Raises:
			ConfigError: If the provider, key or model is missing

		"""
		llm = self._app_config.llm
		if llm.provider is None:
			msg = "API provider is not set. Please use -k/--api-key <provider>=<key>."
			raise ConfigError(msg)

		api_key = llm.api_key or os.environ.get(PROVIDER_KEY_ENV_VARS[llm.provider])
		if not api_key:
			msg = (
				f"API key for {llm.provider.value} is not set. Please use -k/--api-key "
				f"or set {PROVIDER_KEY_ENV_VARS[llm.provider]}."
			)
			raise ConfigError(msg)

		if not llm.model:
			msg = "Model is not set. Please use -m/--model."
			raise ConfigError(msg)

		return ProviderConfig(provider_name=llm.provider, api_key=api_key, model=llm.model)
