"""
Source path parsing and select-expression resolution.

parse_source_path splits a (normalized) source path into its parent path and
the element or attribute it names. The resolve_* helpers turn a parsed source
into the select expression an emitter writes, taking the current loop or record
context into account so paths below the context become relative.
"""

from dataclasses import dataclass
from typing import Optional

from ..models import SourceType


@dataclass(frozen=True)
class ParsedSource:
    """
    A source path split into its parts.

    Attributes:
        source_type: ELEMENT or ATTRIBUTE
        parent_path: Path of the owning element ('' for a single element name)
        name: Element or attribute name (without '@')
        xpath: The path as given
    """
    source_type: SourceType
    parent_path: str
    name: str
    xpath: str

    @property
    def is_attribute(self) -> bool:
        return self.source_type == SourceType.ATTRIBUTE

    @property
    def attribute_name(self) -> Optional[str]:
        return self.name if self.is_attribute else None

    @property
    def element_name(self) -> Optional[str]:
        return None if self.is_attribute else self.name


def parse_source_path(source_path: str) -> ParsedSource:
    """
    Split a source path into {type, parent path, name}.

    Examples:
        //Company/Employee/@id -> attribute, parent '//Company/Employee', name 'id'
        //Company/Employee/Name -> element, parent 'Company/Employee', name 'Name'
    """
    source_path = source_path or ''
    if '/@' in source_path:
        parent_path, attribute_name = source_path.rsplit('/@', 1)
        if parent_path and attribute_name:
            return ParsedSource(SourceType.ATTRIBUTE, parent_path, attribute_name, source_path)

    stripped = source_path[2:] if source_path.startswith('//') else source_path
    stripped = stripped[1:] if stripped.startswith('/') else stripped
    parts = stripped.split('/')
    return ParsedSource(SourceType.ELEMENT, '/'.join(parts[:-1]), parts[-1], source_path)


def strip_axis_prefix(path: Optional[str]) -> str:
    """Drop leading '//' or '/' so paths can be compared segment-wise."""
    if not path:
        return ''
    return path.lstrip('/')


def relative_to(path: str, context: Optional[str]) -> Optional[str]:
    """
    Express path relative to context when path lies below it.

    Returns:
        The relative remainder, '.' when path equals the context, or None when
        path is not below the context
    """
    if not context:
        return None
    target = strip_axis_prefix(path)
    base = strip_axis_prefix(context)
    if not base or not target:
        return None
    if target == base:
        return '.'
    if target.startswith(base + '/'):
        return target[len(base) + 1:]
    return None


def resolve_select(parsed: ParsedSource, context: Optional[str] = None) -> str:
    """
    Select expression for a field's value inside the given context.

    Attributes resolve to '@name' (prefixed with the parent's relative path when
    the parent lies below the context); elements resolve to their path relative
    to the context, or to the full normalized path when there is no usable context.
    """
    if parsed.is_attribute:
        relative_parent = relative_to(parsed.parent_path, context)
        if relative_parent and relative_parent != '.':
            return f"{relative_parent}/@{parsed.name}"
        return f"@{parsed.name}"

    relative = relative_to(parsed.xpath, context)
    if relative:
        return relative
    return parsed.xpath


def resolve_record_select(parsed: ParsedSource, context: Optional[str] = None,
                          occurrence: Optional[int] = None) -> str:
    """
    Select expression for a field inside a record template (Flat output).

    Without a context the element name alone is used, so the path is read
    relative to the current record. With an occurrence index the n-th element
    (or the attribute of the n-th parent element) is selected.
    """
    if parsed.is_attribute:
        if occurrence is None:
            return resolve_select(parsed, context)
        parent = relative_to(parsed.parent_path, context)
        if parent == '.':
            # the record itself repeats; index within the record is meaningless
            return f"@{parsed.name}"
        return f"{parent or parsed.parent_path}[{occurrence}]/@{parsed.name}"

    relative = relative_to(parsed.xpath, context)
    select = relative if relative and relative != '.' else parsed.name or '.'
    if occurrence is not None:
        select = f"{select}[{occurrence}]"
    return select
