"""Output and pre-flight validation."""

from .validation_models import (
    StylesheetValidationResult,
    MappingSetValidationError,
    MappingSetValidationWarning,
    MappingSetValidationResult,
)
from .stylesheet_validator import StylesheetValidator, validate_xslt
from .mapping_set_validator import MappingSetValidator

__all__ = [
    'StylesheetValidationResult',
    'MappingSetValidationError',
    'MappingSetValidationWarning',
    'MappingSetValidationResult',
    'StylesheetValidator',
    'validate_xslt',
    'MappingSetValidator',
]
