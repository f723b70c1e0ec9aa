"""Source path normalization and parsing."""

from .xpath_normalizer import normalize_xpath, is_valid_xpath, describe_xpath_problem, strip_file_prefix
from .source_path import (
    ParsedSource,
    parse_source_path,
    relative_to,
    resolve_select,
    resolve_record_select,
    strip_axis_prefix,
)

__all__ = [
    'normalize_xpath',
    'is_valid_xpath',
    'describe_xpath_problem',
    'strip_file_prefix',
    'ParsedSource',
    'parse_source_path',
    'relative_to',
    'resolve_select',
    'resolve_record_select',
    'strip_axis_prefix',
]
