"""Configuration management components."""

from .config_manager import ConfigManager, GeneratorSettings, get_config_manager, reset_config_manager
from .generation_defaults import GenerationDefaults

__all__ = [
    'ConfigManager',
    'GeneratorSettings',
    'GenerationDefaults',
    'get_config_manager',
    'reset_config_manager',
]
