"""Configuration manager for the extraction pipeline.

Reads `config/extraction_config.yaml` (or a given path), substitutes
`${VAR}` references from the environment and a .env file, and validates
the result into an ExtractionConfig.
"""

import os
from pathlib import Path
from string import Template
from typing import Any, Dict, Optional

import structlog
import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from tieredpdf.models.config import ExtractionConfig, VisionSettings
from tieredpdf.utils.exceptions import ConfigValidationError

logger = structlog.get_logger()

DEFAULT_CONFIG_PATH = "config/extraction_config.yaml"
API_KEY_ENV = "GEMINI_API_KEY"


class ConfigManager:
    """Loads the extraction configuration from YAML and the environment.

    ``${VAR}`` references in the file are replaced with environment values
    (after loading a .env file); unknown references are left as written and
    a left-over ``${GEMINI_API_KEY}`` counts as no key.
    """

    def __init__(
        self,
        config_path: str = DEFAULT_CONFIG_PATH,
        load_env: bool = True,
    ):
        self.config_path = Path(config_path)
        self.env_loaded = not load_env
        self._config: Optional[ExtractionConfig] = None

    def load_config(self) -> ExtractionConfig:
        """Load and validate configuration (cached after the first call)"""
        if self._config:
            return self._config

        if not self.env_loaded:
            load_dotenv()
            self.env_loaded = True

        data = self._parse(self._read())
        try:
            self._config = ExtractionConfig(**data)
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid configuration: {e}")

        logger.info(
            "config_loaded",
            path=str(self.config_path),
            native_backend=self._config.native_backend,
            vision_enabled=self._config.vision.enabled,
            vision_configured=self._config.vision.api_key is not None,
        )
        return self._config

    def _read(self) -> str:
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        try:
            return self.config_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigValidationError(f"Failed to read config file: {e}")

    @staticmethod
    def _parse(raw_content: str) -> Dict[str, Any]:
        try:
            substituted = Template(raw_content).safe_substitute(os.environ)
            data = yaml.safe_load(substituted) or {}
        except (yaml.YAMLError, ValueError) as e:
            raise ConfigValidationError(
                f"Failed to parse YAML or substitute variables: {e}"
            )
        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"Configuration root must be a mapping, got {type(data).__name__}"
            )
        return data


def load_config_or_default(config_path: Optional[str] = None) -> ExtractionConfig:
    """Load config from `config_path`, or defaults when no path is given and
    the default file does not exist."""
    if config_path is None:
        if not Path(DEFAULT_CONFIG_PATH).exists():
            load_dotenv()
            return ExtractionConfig(
                vision=VisionSettings(api_key=os.environ.get(API_KEY_ENV))
            )
        config_path = DEFAULT_CONFIG_PATH
    return ConfigManager(config_path).load_config()
