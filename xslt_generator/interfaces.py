"""
Abstract interfaces for the XSLT generation system.

This module defines the contracts the compiler's collaborators implement so the
facade can dispatch to emitters and validators without knowing their concrete
classes, and so tests can substitute their own.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Any

from .models import Mapping, MappingSet, GenerationOptions


class StylesheetEmitterInterface(ABC):
    """Abstract interface for per-format stylesheet emitters."""

    @abstractmethod
    def emit(self, mapping_set: MappingSet, mappings: List[Mapping],
             options: GenerationOptions) -> str:
        """
        Generate stylesheet text.

        Args:
            mapping_set: The mapping set being compiled (root/record paths, variables, ...)
            mappings: Normalized mappings including synthesized placeholders
            options: Namespace table, delimiter and other shared options

        Returns:
            Complete stylesheet document as a string
        """
        pass


class StylesheetValidatorInterface(ABC):
    """Abstract interface for output validation."""

    @abstractmethod
    def validate(self, stylesheet: str) -> Any:
        """
        Check that stylesheet text is a well-formed stylesheet document.

        Args:
            stylesheet: Generated stylesheet text

        Returns:
            Validation result with ``valid`` and ``error`` attributes
        """
        pass


class ConfigurationManagerInterface(ABC):
    """Abstract interface for configuration management components."""

    @abstractmethod
    def load_mapping_set(self, mapping_path: str) -> MappingSet:
        """
        Load a mapping set from file.

        Args:
            mapping_path: Path to a JSON or YAML mapping file

        Returns:
            Parsed mapping set
        """
        pass

    @abstractmethod
    def load_namespaces(self, namespaces_path: str) -> Dict[str, str]:
        """
        Load a namespace table (prefix -> URI) from file.

        Args:
            namespaces_path: Path to a JSON or YAML file

        Returns:
            Namespace table
        """
        pass

    @abstractmethod
    def get_generation_options(self, **overrides: Any) -> GenerationOptions:
        """
        Build generation options from configured defaults.

        Args:
            overrides: Explicit values taking precedence over the defaults

        Returns:
            Generation options
        """
        pass
