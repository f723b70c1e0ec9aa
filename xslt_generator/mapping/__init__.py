"""Mapping normalization and output hierarchy reconstruction."""

from .mapping_normalizer import MappingNormalizer
from .hierarchy import (
    ComponentNode,
    LeafNode,
    HierarchyField,
    HierarchyBuilder,
    complete_hierarchy,
    iter_paths,
)

__all__ = [
    'MappingNormalizer',
    'ComponentNode',
    'LeafNode',
    'HierarchyField',
    'HierarchyBuilder',
    'complete_hierarchy',
    'iter_paths',
]
