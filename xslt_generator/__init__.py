"""
XSLT Generation System

Compiles a declarative field-mapping configuration (source XML paths bound to a
target output structure) into an XSLT stylesheet producing hierarchical XML,
XSLT 3.0 JSON, or delimited flat text.
"""

__version__ = "1.0.0"

# Import core models, the compiler facade and exceptions for easy access
from .models import (
    Mapping,
    MappingSet,
    AttributeSpec,
    Variable,
    RootElement,
    GenerationOptions,
    CompilationResult,
    FieldType,
    SourceType,
    ValueType,
    OutputFormat
)

from .compiler import XsltCompiler, generate_xslt

from .validation import (
    StylesheetValidationResult,
    StylesheetValidator,
    MappingSetValidator,
    validate_xslt
)

from .exceptions import (
    XsltGeneratorError,
    MalformedInputError,
    InvalidXPathError,
    UnsupportedFormatError,
    GenerationError,
    MalformedOutputError,
    ConfigurationError
)

__all__ = [
    # Core models
    "Mapping",
    "MappingSet",
    "AttributeSpec",
    "Variable",
    "RootElement",
    "GenerationOptions",
    "CompilationResult",
    "FieldType",
    "SourceType",
    "ValueType",
    "OutputFormat",

    # Compiler and validation
    "XsltCompiler",
    "generate_xslt",
    "StylesheetValidationResult",
    "StylesheetValidator",
    "MappingSetValidator",
    "validate_xslt",

    # Exceptions
    "XsltGeneratorError",
    "MalformedInputError",
    "InvalidXPathError",
    "UnsupportedFormatError",
    "GenerationError",
    "MalformedOutputError",
    "ConfigurationError"
]
