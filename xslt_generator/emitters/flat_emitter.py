"""
Flat (delimited text) output emitter.

The '/' template writes the header row and applies the record template to
every node selected by the root path; the record template writes one line per
record with one value block per column. Placeholder components are not columns.
Text nodes outside the records are dropped, so the root path may select an
ancestor of the records.
"""

from typing import List, Optional, Tuple

from .base import DEFAULT_XSLT_VERSION, BaseStylesheetEmitter
from .value_formatting import comment, flat_value_lines, with_date_namespace
from ..config.generation_defaults import GenerationDefaults
from ..models import GenerationOptions, Mapping, MappingSet, ValueType
from ..parsing.source_path import parse_source_path, resolve_record_select
from ..parsing.xpath_normalizer import normalize_xpath
from ..utils import XmlUtils

DEFAULT_FLAT_ROOT_PATH = GenerationDefaults.FLAT_ROOT_PATH
DEFAULT_RECORD_PATH = GenerationDefaults.FLAT_RECORD_PATH
NEWLINE = "&#10;"


def column_name(mapping: Mapping) -> str:
    """Header name: the target path with '/' replaced by '.'."""
    return mapping.full_target_path.replace('/', '.')


def expand_columns(mappings: List[Mapping]) -> List[Tuple[Mapping, str, Optional[int]]]:
    """
    One (mapping, header name, occurrence) entry per output column.

    A field with occurs N > 1 contributes N columns suffixed _1.._N; the
    occurrence is None for single columns.
    """
    columns = []
    for mapping in mappings:
        name = column_name(mapping)
        if mapping.occurs > 1:
            columns.extend((mapping, f"{name}_{i}", i) for i in range(1, mapping.occurs + 1))
        else:
            columns.append((mapping, name, None))
    return columns


class FlatEmitter(BaseStylesheetEmitter):
    """Generates XSLT producing delimited text with a header line."""

    def emit(self, mapping_set: MappingSet, mappings: List[Mapping],
             options: GenerationOptions) -> str:
        fields = [mapping for mapping in mappings if not mapping.is_placeholder]
        columns = expand_columns(fields)
        delimiter = options.delimiter
        record_path = mapping_set.record_path or DEFAULT_RECORD_PATH
        context = None if record_path == DEFAULT_RECORD_PATH else record_path
        root_select = normalize_xpath(mapping_set.root_path or DEFAULT_FLAT_ROOT_PATH)
        header = delimiter.join(name for _, name, _ in columns)

        lines = self.stylesheet_open(mapping_set.xslt_version or DEFAULT_XSLT_VERSION,
                                     with_date_namespace(options.namespaces, fields))
        lines.append('')
        lines.append('  <xsl:output method="text" encoding="UTF-8"/>')
        lines.append('')
        lines.append('  ' + comment("Root template"))
        lines.append('  <xsl:template match="/">')
        lines.append('    ' + comment("Header row"))
        lines.append(f'    <xsl:text>{XmlUtils.escape_text(header)}{NEWLINE}</xsl:text>')
        lines.append('')
        lines.append('    ' + comment("Data rows"))
        lines.append(f'    <xsl:apply-templates select="{XmlUtils.escape_attribute(root_select)}"/>')
        lines.append('  </xsl:template>')
        lines.append('')
        lines.append('  ' + comment("Text between records is not output"))
        lines.append('  <xsl:template match="text()"/>')
        lines.append('')
        lines.append('  ' + comment("Data template"))
        lines.append(f'  <xsl:template match="{XmlUtils.escape_attribute(record_path)}">')
        for index, (mapping, name, occurrence) in enumerate(columns):
            is_last = index == len(columns) - 1
            block = self._column_lines(mapping, name, occurrence, context)
            block.append(self._separator(delimiter, is_last))
            lines.extend(self.indented(block, 2))
        lines.append('  </xsl:template>')
        lines.append('')
        lines.append('</xsl:stylesheet>')

        self.logger.debug(f"Flat stylesheet generated: {len(columns)} columns from {len(fields)} fields")
        return '\n'.join(lines) + '\n'

    @staticmethod
    def _column_lines(mapping: Mapping, name: str, occurrence: Optional[int],
                      context: Optional[str]) -> List[str]:
        if mapping.value_type == ValueType.HARDCODED:
            return [
                comment(f"{name} - Hardcoded value"),
                f"<xsl:text>{XmlUtils.escape_text(mapping.hardcoded_value or '')}</xsl:text>",
            ]
        if mapping.value_type == ValueType.EMPTY:
            return [comment(f"{name} - Empty field"), "<xsl:text></xsl:text>"]

        select = resolve_record_select(parse_source_path(mapping.source_path), context, occurrence)
        return flat_value_lines(mapping.field_type, select, name, mapping.required)

    @staticmethod
    def _separator(delimiter: str, is_last: bool) -> str:
        """Delimiter after a column; the last column of a record ends the line instead."""
        if is_last:
            return f"<xsl:text>{NEWLINE}</xsl:text>"
        return f"<xsl:text>{XmlUtils.escape_text(delimiter)}</xsl:text>"
