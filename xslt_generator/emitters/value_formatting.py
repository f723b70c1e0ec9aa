"""
Field-type value formatting shared by all emitters.

The policy is the same for every output format; only the syntax differs:

    date / dateTime   value if present, else current date-time cut to 19 chars
                      (XSLT 1.0 output falls back to EXSLT date:date-time())
    currency          two decimals (XML also adds currencyID="USD")
    decimal / numeric two decimals
    time              raw value
    string / other    raw value if present, else nothing plus a comment

Each function returns stylesheet lines without indentation; the emitters
indent them to their own layout.
"""

from typing import Dict, List

from ..models import FieldType, Mapping
from ..utils import XmlUtils

DATETIME_FALLBACK = "substring(string(current-dateTime()), 1, 19)"
EXSLT_DATES_PREFIX = "date"
EXSLT_DATES_NAMESPACE = "http://exslt.org/dates-and-times"
EXSLT_DATETIME_FALLBACK = f"substring({EXSLT_DATES_PREFIX}:date-time(), 1, 19)"
DECIMAL_PICTURE = "0.00"
CURRENCY_CODE = "USD"

_DATE_TYPES = (FieldType.DATE, FieldType.DATETIME)
_DECIMAL_TYPES = (FieldType.DECIMAL, FieldType.NUMERIC)


def format_number(select: str) -> str:
    """format-number() call producing exactly two decimals."""
    return f"format-number({select}, '{DECIMAL_PICTURE}')"


def value_of(select: str) -> str:
    return f'<xsl:value-of select="{XmlUtils.escape_attribute(select)}"/>'


def sequence(select: str) -> str:
    return f'<xsl:sequence select="{XmlUtils.escape_attribute(select)}"/>'


def has_date_fields(mappings: List[Mapping]) -> bool:
    return any(mapping.field_type in _DATE_TYPES for mapping in mappings)


def with_date_namespace(namespaces: Dict[str, str], mappings: List[Mapping]) -> Dict[str, str]:
    """
    Namespace table for XSLT 1.0 output, plus the EXSLT dates namespace when a
    date fallback may be emitted. A 'date' prefix already in the table is kept.
    """
    namespaces = dict(namespaces or {})
    if has_date_fields(mappings):
        namespaces.setdefault(EXSLT_DATES_PREFIX, EXSLT_DATES_NAMESPACE)
    return namespaces


def comment(text: str) -> str:
    return f"<!-- {XmlUtils.escape_comment(text)} -->"


def choose(test: str, when_lines: List[str], otherwise_lines: List[str]) -> List[str]:
    """xsl:choose with a single when branch and an otherwise branch."""
    lines = ["<xsl:choose>", f'  <xsl:when test="{XmlUtils.escape_attribute(test)}">']
    lines.extend('    ' + line for line in when_lines)
    lines.append("  </xsl:when>")
    lines.append("  <xsl:otherwise>")
    lines.extend('    ' + line for line in otherwise_lines)
    lines.append("  </xsl:otherwise>")
    lines.append("</xsl:choose>")
    return lines


def datetime_fallback_lines() -> List[str]:
    """
    Current date-time for XSLT 1.0 output.

    current-dateTime() exists from XSLT 2.0 on; 1.0 processors take the EXSLT
    branch instead.
    """
    return choose("function-available('current-dateTime')",
                  [value_of(DATETIME_FALLBACK)],
                  [value_of(EXSLT_DATETIME_FALLBACK)])


def xml_value_lines(field_type: FieldType, select: str) -> List[str]:
    """Content of an XML output element whose value comes from select."""
    if field_type in _DATE_TYPES:
        return choose(select, [value_of(select)],
                      [comment("Using current date-time as fallback")] + datetime_fallback_lines())
    if field_type == FieldType.CURRENCY:
        return [
            f'<xsl:attribute name="currencyID">{CURRENCY_CODE}</xsl:attribute>',
            value_of(format_number(select)),
        ]
    if field_type in _DECIMAL_TYPES:
        return [value_of(format_number(select))]
    return [value_of(select)]


def flat_value_lines(field_type: FieldType, select: str, label: str, required: bool = True) -> List[str]:
    """
    One column's value block for delimited output.

    Every branch falls back to a constant so a missing value never shifts the
    following columns.
    """
    if field_type in _DATE_TYPES:
        return [comment(f"{label} - Date/DateTime field")] + choose(
            select, [value_of(select)], datetime_fallback_lines()
        )
    if field_type == FieldType.CURRENCY:
        return [comment(f"{label} - Currency field")] + choose(
            select, [value_of(format_number(select))], ["<xsl:text>0.00</xsl:text>"]
        )
    if field_type in _DECIMAL_TYPES:
        return [comment(f"{label} - Numeric field")] + choose(
            select, [value_of(format_number(select))], ["<xsl:text>0</xsl:text>"]
        )
    if field_type == FieldType.TIME:
        return [comment(f"{label} - Time field")] + choose(
            select, [value_of(select)], ["<xsl:text></xsl:text>"]
        )

    header = comment(f"{label} - Optional field") if not required else comment(label)
    otherwise = ["<xsl:text></xsl:text>"]
    if required:
        otherwise.insert(0, comment(f"Field {label} is missing"))
    return [header] + choose(select, [value_of(select)], otherwise)


def json_typed_value_lines(field_type: FieldType, select: str, label: str) -> List[str]:
    """Type-aware map-entry content for JSON output (opt-in)."""
    if field_type in _DATE_TYPES:
        return choose(select, [sequence(f"string({select})")], [
            comment("Using current date-time as fallback"),
            sequence(DATETIME_FALLBACK),
        ])
    if field_type == FieldType.CURRENCY:
        return [
            "<xsl:map>",
            "  <xsl:map-entry key=\"'amount'\">",
            "    " + sequence(format_number(select)),
            "  </xsl:map-entry>",
            "  <xsl:map-entry key=\"'currency'\">",
            "    " + sequence(XmlUtils.xpath_string_literal(CURRENCY_CODE)),
            "  </xsl:map-entry>",
            "</xsl:map>",
        ]
    if field_type in _DECIMAL_TYPES:
        return [sequence(format_number(select))]
    if field_type == FieldType.TIME:
        return [sequence(f"string({select})")]
    return choose(select, [sequence(f"string({select})")], [
        comment(f"Field {label} is missing"),
        sequence("''"),
    ])
