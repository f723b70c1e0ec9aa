"""
Centralized configuration management for the XSLT generation system.

This module provides the ConfigManager class that serves as the single source of truth
for generation settings (defaults overridden by environment variables) and for loading
mapping sets and namespace tables from JSON or YAML files.
"""

import os
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional, Union

import yaml

from ..interfaces import ConfigurationManagerInterface
from ..models import MappingSet, GenerationOptions, OutputFormat
from ..exceptions import ConfigurationError
from ..utils import ValidationUtils
from .generation_defaults import GenerationDefaults

SUPPORTED_SUFFIXES = ('.json', '.yaml', '.yml')
LOG_LEVELS = ('CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG')


@dataclass
class GeneratorSettings:
    """Generation settings with environment variable support."""
    default_format: str = GenerationDefaults.DEFAULT_FORMAT
    delimiter: str = GenerationDefaults.DELIMITER
    xslt_version: str = GenerationDefaults.XSLT_VERSION
    json_typed_values: bool = GenerationDefaults.JSON_TYPED_VALUES
    validate_output: bool = GenerationDefaults.VALIDATE_OUTPUT
    log_level: str = GenerationDefaults.LOG_LEVEL
    base_config_path: Path = field(default_factory=lambda: Path.cwd())

    @classmethod
    def from_environment(cls, base_path: Optional[Union[str, Path]] = None) -> 'GeneratorSettings':
        """Create settings from XSLT_GENERATOR_* environment variables."""
        if base_path:
            base_config_path = Path(base_path)
        else:
            base_config_path = Path(os.environ.get('XSLT_GENERATOR_CONFIG_PATH', Path.cwd()))

        return cls(
            default_format=os.environ.get('XSLT_GENERATOR_DEFAULT_FORMAT', cls.default_format),
            delimiter=os.environ.get('XSLT_GENERATOR_DELIMITER', cls.delimiter),
            xslt_version=os.environ.get('XSLT_GENERATOR_XSLT_VERSION', cls.xslt_version),
            json_typed_values=ValidationUtils.safe_bool_conversion(
                os.environ.get('XSLT_GENERATOR_JSON_TYPED_VALUES'), cls.json_typed_values
            ),
            validate_output=ValidationUtils.safe_bool_conversion(
                os.environ.get('XSLT_GENERATOR_VALIDATE_OUTPUT'), cls.validate_output
            ),
            log_level=os.environ.get('XSLT_GENERATOR_LOG_LEVEL', cls.log_level).upper(),
            base_config_path=base_config_path,
        )


class ConfigManager(ConfigurationManagerInterface):
    """
    Centralized configuration manager serving as single source of truth.

    This class consolidates:
    - Generation settings (defaults plus environment overrides)
    - Mapping set loading with caching
    - Namespace table loading with caching
    - Configuration validation and reporting
    """

    def __init__(self, base_config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            base_config_path: Base path for relative configuration files. If None,
                uses XSLT_GENERATOR_CONFIG_PATH or the current directory.
        """
        self.logger = logging.getLogger(__name__)
        self._base_config_path = base_config_path
        self.settings = GeneratorSettings.from_environment(base_config_path)

        self._mapping_set_cache: Dict[str, MappingSet] = {}
        self._namespace_cache: Dict[str, Dict[str, str]] = {}

        self.logger.info(f"ConfigManager initialized with base path: {self.settings.base_config_path}")
        self.logger.debug(f"Default output format: {self.settings.default_format}")

    def load_mapping_set(self, mapping_path: str) -> MappingSet:
        """
        Load a mapping set with caching.

        Args:
            mapping_path: JSON or YAML file, absolute or relative to the base path

        Returns:
            Parsed MappingSet; invalid rows are recorded in MappingSet.rejected

        Raises:
            ConfigurationError: If the file is missing, unreadable, or not a mapping set
        """
        cache_key = str(mapping_path)
        if cache_key in self._mapping_set_cache:
            self.logger.debug(f"Returning cached mapping set for {mapping_path}")
            return self._mapping_set_cache[cache_key]

        data = self._read_structured_file(mapping_path, "mapping set")
        try:
            mapping_set = MappingSet.from_dict(data)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(f"Invalid mapping set in {mapping_path}: {e}")

        if mapping_set.rejected:
            self.logger.warning(
                f"{len(mapping_set.rejected)} mapping(s) in {mapping_path} were skipped as malformed"
            )

        self._mapping_set_cache[cache_key] = mapping_set
        self.logger.info(f"Loaded mapping set from {mapping_path}: {len(mapping_set.fields)} fields")
        return mapping_set

    def load_namespaces(self, namespaces_path: str) -> Dict[str, str]:
        """
        Load a namespace table with caching.

        The file holds an object mapping prefixes to URIs, optionally wrapped in
        a top-level 'namespaces' key.

        Raises:
            ConfigurationError: If the file is missing, unreadable, or not a prefix table
        """
        cache_key = str(namespaces_path)
        if cache_key in self._namespace_cache:
            self.logger.debug(f"Returning cached namespaces for {namespaces_path}")
            return self._namespace_cache[cache_key]

        data = self._read_structured_file(namespaces_path, "namespace table")
        if 'namespaces' in data and isinstance(data['namespaces'], dict):
            data = data['namespaces']
        for prefix, uri in data.items():
            if not isinstance(uri, str):
                raise ConfigurationError(
                    f"Namespace '{prefix}' in {namespaces_path} must map to a URI string"
                )

        namespaces = {str(prefix): uri for prefix, uri in data.items()}
        self._namespace_cache[cache_key] = namespaces
        self.logger.info(f"Loaded {len(namespaces)} namespace(s) from {namespaces_path}")
        return namespaces

    def get_generation_options(self, **overrides: Any) -> GenerationOptions:
        """
        Build generation options from settings.

        Args:
            overrides: namespaces, delimiter or json_typed_values; None values are ignored

        Returns:
            GenerationOptions
        """
        values = {
            'namespaces': {},
            'delimiter': self.settings.delimiter,
            'json_typed_values': self.settings.json_typed_values,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return GenerationOptions(**values)

    def validate_configuration(self) -> bool:
        """
        Validate all configuration settings.

        Returns:
            True if all settings are valid

        Raises:
            ConfigurationError: If any setting is invalid
        """
        errors = []

        if OutputFormat.resolve(self.settings.default_format) is None:
            errors.append(f"Unsupported default format: {self.settings.default_format}")

        if not self.settings.delimiter:
            errors.append("Delimiter cannot be empty")

        if self.settings.log_level not in LOG_LEVELS:
            errors.append(f"Unknown log level: {self.settings.log_level}")

        if not self.settings.base_config_path.exists():
            errors.append(f"Base configuration path does not exist: {self.settings.base_config_path}")

        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")

        self.logger.info("Configuration validation passed")
        return True

    def get_configuration_summary(self) -> Dict[str, Any]:
        """
        Get a summary of all configuration settings.

        Returns:
            Dictionary containing configuration summary
        """
        return {
            'generation': {
                'default_format': self.settings.default_format,
                'delimiter': self.settings.delimiter,
                'xslt_version': self.settings.xslt_version,
                'json_typed_values': self.settings.json_typed_values,
                'validate_output': self.settings.validate_output,
            },
            'logging': {
                'log_level': self.settings.log_level,
            },
            'paths': {
                'base_config_path': str(self.settings.base_config_path),
            },
            'cache': {
                'mapping_sets': len(self._mapping_set_cache),
                'namespace_tables': len(self._namespace_cache),
            },
        }

    def clear_cache(self) -> None:
        """Clear all cached configurations."""
        self._mapping_set_cache.clear()
        self._namespace_cache.clear()

        self.logger.info("Configuration cache cleared")

    def reload_configuration(self) -> None:
        """Reload settings from environment variables and clear cache."""
        self.settings = GeneratorSettings.from_environment(self._base_config_path)
        self.clear_cache()

        self.logger.info("Configuration reloaded from environment variables")

    def _resolve_path(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        if path.is_absolute():
            return path
        return self.settings.base_config_path / path

    def _read_structured_file(self, path: Union[str, Path], description: str) -> Dict[str, Any]:
        """Read a JSON or YAML file whose top level must be an object."""
        full_path = self._resolve_path(path)

        if not full_path.exists():
            raise ConfigurationError(f"{description.capitalize()} file not found: {full_path}")

        suffix = full_path.suffix.lower()
        if suffix not in SUPPORTED_SUFFIXES:
            raise ConfigurationError(f"Unsupported file format: {full_path.suffix}")

        try:
            with open(full_path, 'r', encoding='utf-8') as file:
                if suffix == '.json':
                    data = json.load(file)
                else:
                    data = yaml.safe_load(file)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to parse {description} file {full_path}: {e}")
        except OSError as e:
            raise ConfigurationError(f"Failed to read {description} file {full_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"{description.capitalize()} file {full_path} must contain an object")
        return data


# Global configuration manager instance
_global_config_manager: Optional[ConfigManager] = None


def get_config_manager(base_config_path: Optional[Union[str, Path]] = None) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        base_config_path: Base path for configuration files. Only used on first call.

    Returns:
        Global ConfigManager instance
    """
    global _global_config_manager

    if _global_config_manager is None:
        _global_config_manager = ConfigManager(base_config_path)

    return _global_config_manager


def reset_config_manager() -> None:
    """Reset the global configuration manager instance."""
    global _global_config_manager
    _global_config_manager = None
