#!/usr/bin/env python3
"""
Configuration loader for the ARIA knowledge base pipeline

Settings are merged from three layers and validated into a
``PipelineSettings`` model:

1. Model defaults
2. YAML config file (``config/aria_kb.yaml`` by default)
3. Environment variables with the ``ARIA_KB_`` prefix, nested keys joined
   with a double underscore (``ARIA_KB_PATHS__DATA_DIR=/srv/aria``)
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from aria_kb.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/aria_kb.yaml"


class PathSettings(BaseModel):
    """Filesystem locations for inputs and output."""
    data_dir: Path = Path("data")
    aria_subdir: str = "aria"
    output_file: Path = Path("data/aria-data.json")

    @property
    def aria_dir(self) -> Path:
        return self.data_dir / self.aria_subdir


class SourceSettings(BaseModel):
    """Source registry: document paths relative to the ARIA directory."""
    primary: str = "index.html"
    role_info: str = "common/script/roleInfo.js"
    html_aam: str = "html-aam/index.html"
    accname: str = "accname/index.html"


class ExtensionModuleSettings(BaseModel):
    """One extension-module document contributing module-scoped roles."""
    label: str
    path: str


def _default_extensions() -> Dict[str, ExtensionModuleSettings]:
    return {
        "dpub": ExtensionModuleSettings(label="dpub-aria", path="dpub-aria/index.html"),
        "graphics": ExtensionModuleSettings(label="graphics-aria", path="graphics-aria/index.html"),
    }


class MetadataSettings(BaseModel):
    version: str = "1.3"
    source_url: str = "https://github.com/w3c/aria"
    spec_url: str = "https://w3c.github.io/aria/"
    accname_spec_url: str = "https://w3c.github.io/accname/"


class ServerInfoSettings(BaseModel):
    name: str = "aria-mcp"
    version: str = "1.0.0"
    description: str = "ARIA specification MCP server for accessibility professionals and AI agents"


class ParsingSettings(BaseModel):
    html_parser: str = "html.parser"
    encoding: str = "utf-8"
    role_info_variable: str = "roleInfo"


class LoggingSettings(BaseModel):
    level: str = "INFO"
    file: Optional[Path] = None


class OutputSettings(BaseModel):
    indent: int = Field(default=2, ge=0)
    validate_schema: bool = True


class PipelineSettings(BaseModel):
    """Validated settings for one pipeline run."""
    model_config = ConfigDict(extra="ignore")

    paths: PathSettings = Field(default_factory=PathSettings)
    sources: SourceSettings = Field(default_factory=SourceSettings)
    extensions: Dict[str, ExtensionModuleSettings] = Field(default_factory=_default_extensions)
    metadata: MetadataSettings = Field(default_factory=MetadataSettings)
    server_info: ServerInfoSettings = Field(default_factory=ServerInfoSettings)
    parsing: ParsingSettings = Field(default_factory=ParsingSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)


class ConfigLoader:
    """Loads and validates pipeline configuration"""

    def __init__(self, config_path: Optional[str] = None, env_prefix: str = "ARIA_KB_",
                 load_env_file: bool = True):
        """
        Args:
            config_path: YAML file to read, config/aria_kb.yaml by default
            env_prefix: Prefix of the environment variables that override it
            load_env_file: Whether to read a ``.env`` file before the environment
        """
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self.env_prefix = env_prefix
        self.load_env_file = load_env_file
        self._settings: Optional[PipelineSettings] = None

    def load_settings(self) -> PipelineSettings:
        """
        Load configuration from defaults, file and environment

        Raises:
            ConfigurationError: if the merged configuration does not validate
        """
        if self._settings is not None:
            return self._settings

        config = self._get_defaults()

        file_config = self._load_from_file()
        if file_config:
            config = self._merge_configs(config, file_config)

        if self.load_env_file:
            load_dotenv(find_dotenv(usecwd=True))
        env_config = self._load_from_env()
        if env_config:
            config = self._merge_configs(config, env_config)

        try:
            self._settings = PipelineSettings.model_validate(config)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        logger.debug(f"Configuration loaded from {self.config_path}")
        return self._settings

    def _get_defaults(self) -> Dict[str, Any]:
        """Model defaults as a plain dict, the base layer of the merge"""
        return PipelineSettings().model_dump(mode="json")

    def _load_from_file(self) -> Optional[Dict[str, Any]]:
        """Read the YAML layer; a missing file is not an error"""
        config_file = Path(self.config_path)

        if not config_file.exists():
            logger.warning(f"Config file not found: {self.config_path}, using defaults")
            return None

        try:
            with open(config_file, encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load config file {config_file}: {e}") from e

        if config is None:
            return None
        if not isinstance(config, dict):
            raise ConfigurationError(f"Config file {config_file} must contain a mapping")

        logger.debug(f"Loaded config from {config_file}")
        return config

    def _load_from_env(self) -> Dict[str, Any]:
        """
        Collect ARIA_KB_<SECTION>__<KEY> variables into a nested dict

        Examples:
            ARIA_KB_PATHS__DATA_DIR=/srv/aria
            ARIA_KB_OUTPUT__VALIDATE_SCHEMA=false
        """
        env_config: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(self.env_prefix):
                continue
            config_path = key[len(self.env_prefix):].lower().split("__")
            if len(config_path) < 2:
                # Single-level names (ARIA_KB_LOG_LEVEL) are read elsewhere
                continue
            self._set_nested_dict(env_config, config_path, self._parse_env_value(value))

        if env_config:
            logger.debug(f"Loaded {len(env_config)} setting groups from environment")

        return env_config

    def _parse_env_value(self, value: str) -> Any:
        """true/false, then JSON scalars, else the raw string"""
        if value.lower() in ("true", "false"):
            return value.lower() == "true"

        try:
            return json.loads(value)
        except ValueError:
            return value

    def _set_nested_dict(self, d: dict, path: list, value: Any) -> None:
        """d[path[0]][path[1]]... = value, creating levels as needed"""
        for key in path[:-1]:
            d = d.setdefault(key, {})
        d[path[-1]] = value

    def _merge_configs(self, base: dict, override: dict) -> dict:
        """Deep merge where ``override`` wins; neither input is modified"""
        merged = dict(base)
        for key, value in override.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                value = self._merge_configs(current, value)
            merged[key] = value
        return merged


def load_settings(config_path: Optional[str] = None, **overrides: Any) -> PipelineSettings:
    """Load settings and apply keyword overrides section by section

    Example:
        load_settings(paths={"data_dir": "fixtures"})
    """
    loader = ConfigLoader(config_path)
    settings = loader.load_settings()
    if not overrides:
        return settings

    merged = loader._merge_configs(settings.model_dump(mode="json"), overrides)
    try:
        return PipelineSettings.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration override: {e}") from e
