"""
Custom exceptions for the XSLT generation system.

This module defines specific exception types for the error conditions that can
occur while compiling a mapping set into a stylesheet. Only UnsupportedFormatError,
GenerationError and ConfigurationError are raised by the compiler itself; the
remaining types are collected as advisory warnings (MalformedInputError,
InvalidXPathError) or raised on request by the output validator
(MalformedOutputError).
"""


def _truncate(text: str, limit: int = 500) -> str:
    """Truncate long payloads kept on exceptions for logging."""
    return text[:limit] + "..." if text and len(text) > limit else text


def _truncate_payload(payload):
    """Truncate the string values of a raw row, or the row itself when it is not an object."""
    if payload is None:
        return None
    if isinstance(payload, dict):
        return {key: _truncate(value) if isinstance(value, str) else value
                for key, value in payload.items()}
    return _truncate(str(payload))


class XsltGeneratorError(Exception):
    """Base exception for all XSLT generation related errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedInputError(XsltGeneratorError):
    """Raised when a raw mapping row, variable or root element entry is unusable."""

    def __init__(self, message: str, field_index: int = None, raw_mapping: dict = None,
                 section: str = 'fields'):
        """
        Initialize malformed input error.

        Args:
            message: Error description
            field_index: Position of the rejected row within its section
            raw_mapping: The raw row that was rejected (string values truncated for logging)
            section: Mapping set section the row came from ('fields', 'variables', 'rootElement')
        """
        super().__init__(message)
        self.field_index = field_index
        self.raw_mapping = _truncate_payload(raw_mapping)
        self.section = section


class InvalidXPathError(XsltGeneratorError):
    """Raised (or recorded) when a source path fails the basic syntax checks."""

    def __init__(self, message: str, xpath: str = None, normalized: str = None):
        """
        Initialize invalid XPath error.

        Args:
            message: Error description
            xpath: Path as supplied by the caller
            normalized: Path after normalization (what was actually emitted)
        """
        super().__init__(message)
        self.xpath = xpath
        self.normalized = normalized


class UnsupportedFormatError(XsltGeneratorError):
    """Raised when the requested output format has no emitter."""

    def __init__(self, output_format: str):
        super().__init__(f"Unsupported output format: {output_format}")
        self.output_format = output_format


class GenerationError(XsltGeneratorError):
    """Raised when an emitter fails while walking the mapping hierarchy."""

    def __init__(self, message: str, output_format: str = None):
        super().__init__(message)
        self.output_format = output_format


class MalformedOutputError(XsltGeneratorError):
    """Raised when generated stylesheet text is not a well-formed stylesheet."""

    def __init__(self, message: str, stylesheet: str = None):
        """
        Initialize malformed output error.

        Args:
            message: Error description
            stylesheet: Optional stylesheet text that failed validation (truncated for logging)
        """
        super().__init__(message)
        self.stylesheet = _truncate(stylesheet)


class ConfigurationError(XsltGeneratorError):
    """Raised when configuration is invalid or a mapping file cannot be loaded."""
    pass
