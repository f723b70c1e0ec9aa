"""
Output hierarchy reconstruction from flat target paths.

Mappings carry their output position as a slash-delimited target path
("Order/Customer/Name"). The emitters for nested formats need the tree those
paths describe, so this module rebuilds it:

- complete_hierarchy() makes sure every intermediate path has a mapping of its
  own by synthesizing placeholder component mappings for the gaps.
- HierarchyBuilder.build() turns the mappings into a tree of ComponentNode and
  LeafNode objects keyed by path segment, in order of first appearance.

A node is a ComponentNode when anything lives below it. Mappings whose target
path ends exactly at a component (an explicit "component" row or a placeholder)
are attached to that component and drive its repetition and attributes.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from ..models import FieldType, Mapping
from ..parsing.source_path import ParsedSource, parse_source_path

logger = logging.getLogger(__name__)


@dataclass
class HierarchyField:
    """A mapping attached to the tree, with its parsed source and leaf name."""
    mapping: Mapping
    leaf_name: str
    parsed: ParsedSource


@dataclass
class LeafNode:
    """Terminal node: one or more fields sharing the same output name."""
    name: str
    level: int
    fields: List[HierarchyField] = field(default_factory=list)

    is_component = False


@dataclass
class ComponentNode:
    """Container node with ordered children."""
    name: str
    level: int
    path: str
    children: Dict[str, 'Node'] = field(default_factory=dict)
    mappings: List[HierarchyField] = field(default_factory=list)

    is_component = True

    @property
    def component_field(self) -> Optional[HierarchyField]:
        """The user-authored mapping for this component, if there is one."""
        for hierarchy_field in self.mappings:
            if not hierarchy_field.mapping.is_placeholder:
                return hierarchy_field
        return None

    @property
    def is_placeholder(self) -> bool:
        """True when the component exists only to keep the tree contiguous."""
        return self.component_field is None

    @property
    def is_repeated(self) -> bool:
        component = self.component_field
        return component is not None and component.mapping.is_repeated


Node = Union[ComponentNode, LeafNode]


def _target_prefixes(mapping: Mapping) -> List[str]:
    segments = mapping.segments
    return ['/'.join(segments[:i]) for i in range(1, len(segments) + 1)]


def complete_hierarchy(mappings: List[Mapping]) -> List[Mapping]:
    """
    Add placeholder component mappings for every target path prefix that has no mapping.

    For target path 'a/b/c' the prefixes are 'a', 'a/b' and 'a/b/c'. Placeholders
    are appended after the original mappings in order of first appearance.

    Args:
        mappings: Normalized mappings

    Returns:
        Original mappings followed by the synthesized placeholders
    """
    existing = {mapping.full_target_path for mapping in mappings}
    missing: Dict[str, None] = {}
    for mapping in mappings:
        for prefix in _target_prefixes(mapping):
            if prefix not in existing:
                missing.setdefault(prefix, None)

    placeholders = [
        Mapping(
            source_path='//' + prefix.replace('/', '_'),
            target_name=prefix.split('/')[-1],
            target_path=prefix,
            field_type=FieldType.COMPONENT,
            required=False,
            is_placeholder=True,
        )
        for prefix in missing
    ]
    if placeholders:
        logger.debug(f"Synthesized {len(placeholders)} placeholder components: {list(missing)}")
    return list(mappings) + placeholders


class HierarchyBuilder:
    """
    Builds the output tree from a list of mappings.

    Two mappings sharing an intermediate path share the same ComponentNode, and
    fields attached to a node keep their input order.
    """

    def build(self, mappings: List[Mapping]) -> ComponentNode:
        """
        Build the tree.

        Returns:
            A nameless root ComponentNode (level -1) whose children are the
            top-level output nodes
        """
        root = ComponentNode(name='', level=-1, path='')
        for mapping in mappings:
            self._add(root, mapping)
        return root

    def _add(self, root: ComponentNode, mapping: Mapping) -> None:
        segments = mapping.segments
        node = root
        for level, segment in enumerate(segments[:-1]):
            node = self._component_child(node, segment, level)

        leaf_name = segments[-1]
        hierarchy_field = HierarchyField(mapping, leaf_name, parse_source_path(mapping.source_path))
        existing = node.children.get(leaf_name)
        if isinstance(existing, ComponentNode):
            existing.mappings.append(hierarchy_field)
        elif isinstance(existing, LeafNode):
            existing.fields.append(hierarchy_field)
        else:
            node.children[leaf_name] = LeafNode(leaf_name, len(segments) - 1, [hierarchy_field])

    @staticmethod
    def _component_child(parent: ComponentNode, segment: str, level: int) -> ComponentNode:
        child = parent.children.get(segment)
        if isinstance(child, ComponentNode):
            return child

        path = f"{parent.path}/{segment}" if parent.path else segment
        component = ComponentNode(name=segment, level=level, path=path)
        if isinstance(child, LeafNode):
            # a field ending here turns out to have children: it becomes the component's mapping
            component.mappings.extend(child.fields)
        parent.children[segment] = component
        return component


def iter_paths(node: ComponentNode):
    """Yield the path of every node below node, depth first."""
    for name, child in node.children.items():
        path = f"{node.path}/{name}" if node.path else name
        yield path
        if isinstance(child, ComponentNode):
            yield from iter_paths(child)
