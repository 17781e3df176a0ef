"""YAML configuration loading and validation.

Export settings come from, lowest to highest precedence: built-in defaults,
an optional YAML file, the CONFLUENCE_SPACE_KEY environment variable, and
command-line options. Credentials are never read from the YAML file; they
come from the environment via the Authenticator.
"""

import os
from dataclasses import fields, replace
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .models import ExportConfig

SPACE_KEY_ENV = 'CONFLUENCE_SPACE_KEY'


class ConfigLoader:
    """Loads and validates export configuration.

    Configuration file structure:
        space_key: "TEAM"
        output_dir: "./confluence_pages"
        page_size: 100
        include_content: true
        include_attachments: true
        strict_hierarchy: false
    """

    BOOL_FIELDS = {'include_content', 'include_attachments', 'strict_hierarchy'}
    STR_FIELDS = {'space_key', 'output_dir'}

    @classmethod
    def load(cls, config_path: str) -> ExportConfig:
        """Load and parse configuration from a YAML file.

        Raises:
            ConfigError: If the file cannot be read or is invalid
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise ConfigError(f"Configuration file not found: {config_path}")
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}")

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            return ExportConfig()

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls._parse_config(config_dict)

    @classmethod
    def resolve(
        cls,
        config_path: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None
    ) -> ExportConfig:
        """Build the effective configuration for a run.

        Args:
            config_path: Optional YAML file
            overrides: Command-line values; None entries are ignored

        Raises:
            ConfigError: If the file is invalid or no space key is set
        """
        config = cls.load(config_path) if config_path else ExportConfig()

        env_space_key = os.getenv(SPACE_KEY_ENV)
        if env_space_key:
            config = replace(config, space_key=env_space_key)

        set_overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
        if set_overrides:
            merged = {f.name: getattr(config, f.name) for f in fields(ExportConfig)}
            merged.update(set_overrides)
            config = cls._parse_config(merged)

        if not config.space_key.strip():
            raise ConfigError(
                f"No space key given (use --space, '{SPACE_KEY_ENV}' or the config file)",
                'space_key'
            )
        return config

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> ExportConfig:
        """Validate a configuration dictionary.

        Raises:
            ConfigError: If configuration is invalid
        """
        known = {f.name for f in fields(ExportConfig)}
        unknown = set(config_dict) - known
        if unknown:
            raise ConfigError(f"Unknown fields: {', '.join(sorted(unknown))}")

        values: Dict[str, Any] = {}
        for name, value in config_dict.items():
            if name in cls.BOOL_FIELDS:
                if not isinstance(value, bool):
                    raise ConfigError(f"must be true or false, got {value!r}", name)
            elif name in cls.STR_FIELDS:
                if value is None:
                    raise ConfigError("cannot be empty", name)
                value = str(value)
            elif name == 'page_size':
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ConfigError(f"must be an integer, got {value!r}", name)
                if value < 1:
                    raise ConfigError(f"must be at least 1, got {value}", name)
            values[name] = value

        if 'output_dir' in values and not values['output_dir'].strip():
            raise ConfigError("cannot be empty", 'output_dir')

        return ExportConfig(**values)
