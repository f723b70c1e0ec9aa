"""
JSON output emitter (XSLT 3.0).

The stylesheet builds one top-level xsl:map inside the '/' template. Map
population runs inside an xsl:for-each over the root path so relative source
paths have an anchor; components become nested maps and repeated nodes become
arrays. The result is serialized with the json output method.
"""

from typing import List, Optional

from .base import BaseStylesheetEmitter, loop_path, loop_select
from .value_formatting import comment, json_typed_value_lines, value_of
from ..config.generation_defaults import GenerationDefaults
from ..mapping.hierarchy import ComponentNode, HierarchyBuilder, HierarchyField
from ..models import FieldType, GenerationOptions, Mapping, MappingSet, ValueType
from ..parsing.source_path import resolve_select
from ..utils import XmlUtils

JSON_XSLT_VERSION = "3.0"
DEFAULT_JSON_ROOT_PATH = GenerationDefaults.JSON_ROOT_PATH


def map_key(name: str) -> str:
    """key attribute value: a single-quoted string literal."""
    return f"'{XmlUtils.escape_xml_name(name)}'"


class JsonEmitter(BaseStylesheetEmitter):
    """
    Generates XSLT 3.0 producing JSON output.

    Leaf values are plain xsl:value-of by default; with
    GenerationOptions.json_typed_values the type-aware branches from
    value_formatting are used instead.
    """

    def emit(self, mapping_set: MappingSet, mappings: List[Mapping],
             options: GenerationOptions) -> str:
        tree = HierarchyBuilder().build(mappings)
        root_path = mapping_set.root_path or DEFAULT_JSON_ROOT_PATH
        # only a caller-supplied root path is a meaningful base for relative selects
        context = mapping_set.root_path
        typed = options.json_typed_values

        lines = self.stylesheet_open(JSON_XSLT_VERSION, options.namespaces,
                                     default_as='xpath-default-namespace')
        lines.append('')
        lines.append('  <xsl:output method="json" indent="yes"/>')
        lines.append('')
        lines.append('  <xsl:template match="/">')
        lines.append('    <xsl:map>')
        lines.append(f'      <xsl:for-each select="{XmlUtils.escape_attribute(root_path)}">')
        for child in tree.children.values():
            lines.extend(self._render_node(child, context, 4, typed))
        lines.append('      </xsl:for-each>')
        lines.append('    </xsl:map>')
        lines.append('  </xsl:template>')
        lines.append('')
        lines.append('</xsl:stylesheet>')

        self.logger.debug(f"JSON stylesheet generated: {len(mappings)} mappings, root path {root_path}")
        return '\n'.join(lines) + '\n'

    def _render_node(self, node, context: Optional[str], depth: int, typed: bool) -> List[str]:
        if isinstance(node, ComponentNode):
            return self._render_component(node, context, depth, typed)
        lines = []
        for hierarchy_field in node.fields:
            lines.extend(self._render_field(hierarchy_field, context, depth, typed))
        return lines

    def _render_component(self, node: ComponentNode, context: Optional[str], depth: int,
                          typed: bool) -> List[str]:
        name = XmlUtils.escape_xml_name(node.name)
        pad = self.indent(depth)
        component = node.component_field

        lines = []
        if node.is_placeholder:
            lines.append(pad + comment(f"{name} - Placeholder component"))
        elif not component.mapping.required:
            lines.append(pad + comment(f"{name} - Optional field"))

        lines.append(f'{pad}<xsl:map-entry key="{map_key(node.name)}">')
        if node.is_repeated:
            path = loop_path(component)
            lines.insert(-1, pad + comment(f"{name} - Multiple occurrences (Occurs: {component.mapping.occurs})"))
            lines.append(f'{pad}  <xsl:array>')
            lines.append(f'{pad}    <xsl:for-each select="{XmlUtils.escape_attribute(loop_select(path, context))}">')
            lines.append(f'{pad}      <xsl:map>')
            for child in node.children.values():
                lines.extend(self._render_node(child, path, depth + 4, typed))
            lines.append(f'{pad}      </xsl:map>')
            lines.append(f'{pad}    </xsl:for-each>')
            lines.append(f'{pad}  </xsl:array>')
        else:
            lines.append(f'{pad}  <xsl:map>')
            for child in node.children.values():
                lines.extend(self._render_node(child, context, depth + 2, typed))
            lines.append(f'{pad}  </xsl:map>')
        lines.append(f'{pad}</xsl:map-entry>')
        return lines

    def _render_field(self, hierarchy_field: HierarchyField, context: Optional[str], depth: int,
                      typed: bool) -> List[str]:
        mapping = hierarchy_field.mapping
        name = XmlUtils.escape_xml_name(hierarchy_field.leaf_name)
        pad = self.indent(depth)

        if mapping.is_placeholder:
            return [pad + comment(f"{name} - Placeholder component")]

        lines = []
        if not mapping.required:
            lines.append(pad + comment(f"{name} - Optional field"))

        if mapping.value_type == ValueType.EMPTY:
            lines.append(f'{pad}<xsl:map-entry key="{map_key(name)}"/>')
            return lines

        if mapping.is_repeated:
            path = loop_path(hierarchy_field)
            select = resolve_select(hierarchy_field.parsed, path) if mapping.for_each_path else '.'
            lines.append(pad + comment(f"{name} - Multiple occurrences (Occurs: {mapping.occurs})"))
            lines.append(f'{pad}<xsl:map-entry key="{map_key(name)}">')
            lines.append(f'{pad}  <xsl:array>')
            lines.append(f'{pad}    <xsl:for-each select="{XmlUtils.escape_attribute(loop_select(path, context))}">')
            lines.extend(self.indented(self._value_lines(name, mapping, select, typed), depth + 3))
            lines.append(f'{pad}    </xsl:for-each>')
            lines.append(f'{pad}  </xsl:array>')
        else:
            select = resolve_select(hierarchy_field.parsed, context)
            lines.append(f'{pad}<xsl:map-entry key="{map_key(name)}">')
            lines.extend(self.indented(self._value_lines(name, mapping, select, typed), depth + 1))
        lines.append(f'{pad}</xsl:map-entry>')
        return lines

    def _value_lines(self, name: str, mapping: Mapping, select: str, typed: bool) -> List[str]:
        if mapping.value_type == ValueType.HARDCODED:
            return [value_of(XmlUtils.xpath_string_literal(mapping.hardcoded_value or ''))]
        if mapping.field_type == FieldType.COMPONENT:
            return ['<xsl:map/>']
        if typed:
            return json_typed_value_lines(mapping.field_type, select, name)
        return [value_of(select)]
