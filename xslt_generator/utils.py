"""
Utility functions for common patterns across the XSLT generation system.

All escaping used by the emitters lives here so the three output formats
cannot drift apart in how they sanitise names or quote values.
"""

import re
from typing import Any, Optional


class StringUtils:
    """Utility methods for string validation and processing."""

    @staticmethod
    def safe_string_check(value: Any) -> bool:
        """
        Standardized string validation.

        Args:
            value: Value to check

        Returns:
            True if value is a non-empty string after stripping whitespace
        """
        return value is not None and str(value).strip() != ''

    @staticmethod
    def path_segments(path: Optional[str]) -> list:
        """Split a slash-delimited target path into its non-empty segments."""
        if not path:
            return []
        return [segment.strip() for segment in str(path).split('/') if segment.strip()]


class XmlUtils:
    """Escaping helpers for emitting stylesheet text."""

    # Cached regex patterns for performance
    _regex_cache = {
        'invalid_name_chars': re.compile(r'[^a-zA-Z0-9_.-]'),
        'name_start': re.compile(r'^[a-zA-Z_]'),
    }

    @staticmethod
    def escape_xml_name(name: str) -> str:
        """
        Sanitise a target segment so it is usable as an element name or map key.

        Every character outside [a-zA-Z0-9_.-] becomes '_'. A name that would
        start with a digit, '.' or '-' is prefixed with '_'.

        Examples:
            'Order Date' -> 'Order_Date'
            '1stLine' -> '_1stLine'
        """
        if not name:
            return '_'
        escaped = XmlUtils._regex_cache['invalid_name_chars'].sub('_', str(name))
        if not XmlUtils._regex_cache['name_start'].match(escaped):
            escaped = '_' + escaped
        return escaped

    @staticmethod
    def escape_text(value: Any) -> str:
        """Escape a value for use as element text content."""
        if value is None:
            return ''
        return str(value).replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')

    @staticmethod
    def escape_attribute(value: Any) -> str:
        """Escape a value for use inside a double-quoted attribute."""
        return XmlUtils.escape_text(value).replace('"', '&quot;')

    @staticmethod
    def escape_comment(value: Any) -> str:
        """Make a value safe inside <!-- -->, which may not contain '--' or end with '-'."""
        text = '' if value is None else str(value)
        while '--' in text:
            text = text.replace('--', '- -')
        return text + ' ' if text.endswith('-') else text

    @staticmethod
    def avt_literal(value: Any) -> str:
        """
        Escape a literal for an attribute of a literal result element.

        Braces are doubled because such attributes are attribute value templates.
        """
        return XmlUtils.escape_attribute(value).replace('{', '{{').replace('}', '}}')

    @staticmethod
    def xpath_string_literal(value: Any) -> str:
        """
        Quote a value as an XPath string literal.

        Single quotes are preferred; values containing both quote characters
        are assembled with concat(). The result is not attribute-escaped.

        Examples:
            en-US -> 'en-US'
            it's -> "it's"
        """
        text = '' if value is None else str(value)
        if "'" not in text:
            return f"'{text}'"
        if '"' not in text:
            return f'"{text}"'
        parts = text.split("'")
        pieces = []
        for index, part in enumerate(parts):
            if index:
                pieces.append('"\'"')
            if part:
                pieces.append(f"'{part}'")
        return f"concat({', '.join(pieces)})"


class ValidationUtils:
    """Utility methods for validation patterns."""

    @staticmethod
    def safe_int_conversion(value: Any, default: Optional[int] = None) -> Optional[int]:
        """
        Safely convert value to integer.

        Args:
            value: Value to convert
            default: Default value if conversion fails

        Returns:
            Integer value or default
        """
        if value is None or isinstance(value, bool):
            return default

        try:
            if isinstance(value, (int, float)):
                return int(value)
            return int(str(value).strip())
        except (ValueError, TypeError):
            return default

    @staticmethod
    def safe_bool_conversion(value: Any, default: bool = False) -> bool:
        """
        Convert flags coming from JSON, YAML or environment variables.

        Accepts real booleans and the usual string spellings ('true', 'yes', '1').
        """
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value != 0
        text = str(value).strip().lower()
        if text in ('true', 'yes', '1', 'on'):
            return True
        if text in ('false', 'no', '0', 'off', ''):
            return False
        return default
