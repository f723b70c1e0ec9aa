"""
XML output emitter.

Produces an XSLT stylesheet with a single template matching '/' that builds the
configured root element and, inside it, one literal result element per node of
the completed target hierarchy.
"""

from typing import List, Optional

from .base import (
    DEFAULT_XSLT_VERSION, BaseStylesheetEmitter, loop_path, loop_select, open_tag, render_variable
)
from .value_formatting import comment, with_date_namespace, xml_value_lines
from ..mapping.hierarchy import ComponentNode, HierarchyBuilder, HierarchyField, LeafNode
from ..models import FieldType, GenerationOptions, Mapping, MappingSet, ValueType
from ..parsing.source_path import resolve_select
from ..utils import XmlUtils


class XmlEmitter(BaseStylesheetEmitter):
    """Generates XSLT producing hierarchical XML output."""

    def emit(self, mapping_set: MappingSet, mappings: List[Mapping],
             options: GenerationOptions) -> str:
        tree = HierarchyBuilder().build(mappings)
        root = mapping_set.root_element
        root_name = XmlUtils.escape_xml_name(root.name)

        lines = self.stylesheet_open(mapping_set.xslt_version or DEFAULT_XSLT_VERSION,
                                     with_date_namespace(options.namespaces, mappings))
        lines.append('')
        lines.append('  <xsl:output method="xml" encoding="UTF-8" indent="yes"/>')
        if mapping_set.variables:
            lines.append('')
            lines.append('  ' + comment("Define top-level variables for constants"))
            lines.extend('  ' + render_variable(variable) for variable in mapping_set.variables)
        lines.append('')
        lines.append('  <xsl:template match="/">')
        lines.append('    ' + open_tag(root_name, root.attributes))
        for child in tree.children.values():
            lines.extend(self._render_node(child, None, 3))
        lines.append(f'    </{root_name}>')
        lines.append('  </xsl:template>')
        lines.append('')
        lines.append('</xsl:stylesheet>')

        self.logger.debug(f"XML stylesheet generated: {len(mappings)} mappings, {len(lines)} lines")
        return '\n'.join(lines) + '\n'

    def _render_node(self, node, context: Optional[str], depth: int) -> List[str]:
        if isinstance(node, ComponentNode):
            return self._render_component(node, context, depth)
        lines = []
        for hierarchy_field in node.fields:
            lines.extend(self._render_field(node, hierarchy_field, context, depth))
        return lines

    def _render_component(self, node: ComponentNode, context: Optional[str], depth: int) -> List[str]:
        name = XmlUtils.escape_xml_name(node.name)
        component = node.component_field
        attributes = component.mapping.attributes if component else []
        pad = self.indent(depth)

        lines = []
        if component and not component.mapping.required:
            lines.append(pad + comment(f"{name} - Optional component"))

        if node.is_repeated:
            path = loop_path(component)
            lines.append(f'{pad}<xsl:for-each select="{XmlUtils.escape_attribute(loop_select(path, context))}">')
            depth += 1
            pad = self.indent(depth)
            context = path

        lines.append(pad + open_tag(name, attributes))
        for child in node.children.values():
            lines.extend(self._render_node(child, context, depth + 1))
        lines.append(f'{pad}</{name}>')

        if node.is_repeated:
            lines.append(f'{self.indent(depth - 1)}</xsl:for-each>')
        return lines

    def _render_field(self, node: LeafNode, hierarchy_field: HierarchyField,
                      context: Optional[str], depth: int) -> List[str]:
        mapping = hierarchy_field.mapping
        if mapping.is_placeholder:
            return []

        name = XmlUtils.escape_xml_name(node.name)
        pad = self.indent(depth)
        lines = []
        if not mapping.required:
            lines.append(pad + comment(f"{name} - Optional field"))

        if mapping.is_repeated:
            path = loop_path(hierarchy_field)
            lines.append(f'{pad}<xsl:for-each select="{XmlUtils.escape_attribute(loop_select(path, context))}">')
            # explicit loops may iterate an ancestor of the value; occurs loops iterate the value itself
            select = resolve_select(hierarchy_field.parsed, path) if mapping.for_each_path else '.'
            lines.extend(self._element_lines(name, mapping, select, depth + 1))
            lines.append(f'{pad}</xsl:for-each>')
        else:
            select = resolve_select(hierarchy_field.parsed, context)
            lines.extend(self._element_lines(name, mapping, select, depth))
        return lines

    def _element_lines(self, name: str, mapping: Mapping, select: str, depth: int) -> List[str]:
        pad = self.indent(depth)
        if mapping.value_type == ValueType.EMPTY or mapping.field_type == FieldType.COMPONENT:
            return [pad + open_tag(name, mapping.attributes, self_closing=True)]
        if mapping.value_type == ValueType.HARDCODED:
            text = XmlUtils.escape_text(mapping.hardcoded_value or '')
            return [f"{pad}{open_tag(name, mapping.attributes)}{text}</{name}>"]

        content = xml_value_lines(mapping.field_type, select)
        if len(content) == 1:
            return [f"{pad}{open_tag(name, mapping.attributes)}{content[0]}</{name}>"]
        lines = [pad + open_tag(name, mapping.attributes)]
        lines.extend(self.indented(content, depth + 1))
        lines.append(f'{pad}</{name}>')
        return lines
