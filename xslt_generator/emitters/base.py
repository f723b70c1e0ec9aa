"""
Shared building blocks for the stylesheet emitters.

Namespace declarations, the stylesheet opening tag, attribute rendering and
element opening tags are identical across formats apart from indentation, so
they live here once.
"""

import logging
from typing import Dict, List, Optional

from ..config.generation_defaults import GenerationDefaults
from ..interfaces import StylesheetEmitterInterface
from ..mapping.hierarchy import HierarchyField
from ..models import AttributeSpec, AttributeMode, Variable
from ..parsing.source_path import relative_to
from ..utils import XmlUtils

XSL_NAMESPACE = "http://www.w3.org/1999/XSL/Transform"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
DEFAULT_XSLT_VERSION = GenerationDefaults.XSLT_VERSION


def namespace_declarations(namespaces: Optional[Dict[str, str]], default_as: str = 'xmlns') -> List[str]:
    """
    Stylesheet attributes declaring the namespace table.

    Every prefix becomes xmlns:prefix, the 'default' entry becomes the bare
    default namespace (or whatever attribute default_as names), and all prefixes
    are listed in exclude-result-prefixes.
    """
    namespaces = namespaces or {}
    declarations = [
        f'xmlns:{prefix}="{XmlUtils.escape_attribute(uri)}"'
        for prefix, uri in namespaces.items()
        if prefix != 'default'
    ]
    if namespaces.get('default'):
        declarations.append(f'{default_as}="{XmlUtils.escape_attribute(namespaces["default"])}"')
    prefixes = [prefix for prefix in namespaces if prefix != 'default']
    if prefixes:
        declarations.append(f'exclude-result-prefixes="{" ".join(prefixes)}"')
    return declarations


def render_attribute(attribute: AttributeSpec) -> str:
    """
    One attribute of a literal result element.

    hardcoded -> name="literal", variable -> name="{$Var}", xpath -> name="{xpath}"
    """
    name = XmlUtils.escape_xml_name(attribute.name)
    if attribute.mode == AttributeMode.HARDCODED:
        return f'{name}="{XmlUtils.avt_literal(attribute.value)}"'
    if attribute.mode == AttributeMode.VARIABLE:
        return f'{name}="{{${attribute.value}}}"'
    return f'{name}="{{{XmlUtils.escape_attribute(attribute.xpath)}}}"'


def open_tag(name: str, attributes: Optional[List[AttributeSpec]] = None, self_closing: bool = False) -> str:
    """Opening tag of an output element, with its attributes."""
    parts = [XmlUtils.escape_xml_name(name)]
    parts.extend(render_attribute(attribute) for attribute in attributes or [])
    return f"<{' '.join(parts)}{'/' if self_closing else ''}>"


def render_variable(variable: Variable) -> str:
    """Top-level xsl:variable; literals are quoted, expressions are not."""
    if variable.is_expression:
        select = variable.xpath
    else:
        select = XmlUtils.xpath_string_literal(variable.value)
    return f'<xsl:variable name="{XmlUtils.escape_attribute(variable.name)}" select="{XmlUtils.escape_attribute(select)}"/>'


def loop_path(hierarchy_field: HierarchyField) -> str:
    """Node-set a repeated field or component iterates over; forEachPath wins over the source path."""
    return hierarchy_field.mapping.for_each_path or hierarchy_field.parsed.xpath


def loop_select(path: str, context: Optional[str]) -> str:
    """for-each select for path, relative to the enclosing loop when it lies below it."""
    relative = relative_to(path, context)
    return relative if relative and relative != '.' else path


class BaseStylesheetEmitter(StylesheetEmitterInterface):
    """
    Common state and helpers for emitters.

    Subclasses implement emit(); output is accumulated line by line with
    explicit indentation so the generated stylesheet stays readable.
    """

    indent_unit = '  '

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def stylesheet_open(self, version: str, namespaces: Optional[Dict[str, str]],
                        default_as: str = 'xmlns') -> List[str]:
        """XML declaration plus the xsl:stylesheet opening tag, one attribute per line."""
        attributes = [f'xmlns:xsl="{XSL_NAMESPACE}"'] + namespace_declarations(namespaces, default_as)
        lines = [XML_DECLARATION, f'<xsl:stylesheet version="{XmlUtils.escape_attribute(version)}"']
        for index, attribute in enumerate(attributes):
            closing = '>' if index == len(attributes) - 1 else ''
            lines.append(f"{self.indent_unit * 2}{attribute}{closing}")
        return lines

    def indent(self, depth: int) -> str:
        return self.indent_unit * depth

    def indented(self, lines: List[str], depth: int) -> List[str]:
        prefix = self.indent(depth)
        return [prefix + line for line in lines]
