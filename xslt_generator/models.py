"""
Core data models for the XSLT generation system.

This module defines the mapping configuration the compiler consumes (mappings,
attributes, variables, the mapping set itself), the options that travel with a
generation request, and the result the compiler hands back.

Raw configuration usually arrives as the camelCase JSON produced by the mapping
UI. ``MappingSet.from_dict`` is the boundary: rows, variables and root element
attributes that cannot be turned into valid models are recorded in
``MappingSet.rejected`` instead of failing the whole set.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from enum import Enum

from .exceptions import MalformedInputError
from .utils import StringUtils, ValidationUtils


class SourceType(Enum):
    """Kind of node a source path points at."""
    ELEMENT = "element"
    ATTRIBUTE = "attribute"


class FieldType(Enum):
    """Supported field types for value formatting."""
    STRING = "string"
    DATE = "date"
    DATETIME = "dateTime"
    TIME = "time"
    CURRENCY = "currency"
    NUMERIC = "numeric"
    DECIMAL = "decimal"
    COMPONENT = "component"

    @classmethod
    def parse(cls, value: Any) -> 'FieldType':
        """Resolve a field type name; unknown or missing names format as strings."""
        if isinstance(value, FieldType):
            return value
        if not value:
            return cls.STRING
        text = str(value).strip()
        for member in cls:
            if member.value.lower() == text.lower():
                return member
        return cls.STRING


class ValueType(Enum):
    """Where the value of a target field comes from."""
    XPATH = "xpath"
    HARDCODED = "hardcoded"
    EMPTY = "empty"


class AttributeMode(Enum):
    """How an output attribute gets its value."""
    HARDCODED = "hardcoded"
    VARIABLE = "variable"
    XPATH = "xpath"


class OutputFormat(Enum):
    """Output shapes the compiler can target."""
    XML = "xml"
    JSON = "json"
    FLAT = "flat"

    @classmethod
    def resolve(cls, value: Any) -> Optional['OutputFormat']:
        """
        Map a caller-supplied format name to an OutputFormat.

        Matching is case-insensitive and 'csv' is an alias for FLAT.

        Returns:
            The matching OutputFormat, or None when the name is not supported
        """
        if isinstance(value, OutputFormat):
            return value
        if value is None:
            return None
        text = str(value).strip().lower()
        if text == 'csv':
            return cls.FLAT
        for member in cls:
            if member.value == text:
                return member
        return None


def _pick(raw: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key present in raw (camelCase first, then snake_case)."""
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return default


@dataclass
class AttributeSpec:
    """
    An attribute emitted on an output element.

    Exactly one mode must be active:
        - is_hardcoded=True with value: literal text
        - is_variable=True with value: name of a stylesheet variable
        - xpath: expression evaluated when the stylesheet runs

    Attributes:
        name: Attribute name in the output
        value: Literal text or variable name, depending on the mode
        is_hardcoded: Value is literal text
        is_variable: Value names a declared Variable
        xpath: Dynamic value expression
    """
    name: str
    value: Optional[str] = None
    is_hardcoded: bool = False
    is_variable: bool = False
    xpath: Optional[str] = None

    def __post_init__(self):
        """Validate that the attribute has a name and exactly one value mode."""
        if not StringUtils.safe_string_check(self.name):
            raise ValueError("attribute name cannot be empty")
        active = [self.is_hardcoded, self.is_variable, bool(self.xpath)]
        if sum(active) != 1:
            raise ValueError(
                f"attribute '{self.name}' must be exactly one of hardcoded, variable or xpath"
            )
        if (self.is_hardcoded or self.is_variable) and self.value is None:
            raise ValueError(f"attribute '{self.name}' needs a value")
        if self.is_variable and not StringUtils.safe_string_check(self.value):
            raise ValueError(f"attribute '{self.name}' must name a variable")

    @property
    def mode(self) -> AttributeMode:
        if self.is_hardcoded:
            return AttributeMode.HARDCODED
        if self.is_variable:
            return AttributeMode.VARIABLE
        return AttributeMode.XPATH

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'AttributeSpec':
        value = _pick(raw, 'value')
        return cls(
            name=_pick(raw, 'name', default=''),
            value=None if value is None else str(value),
            is_hardcoded=ValidationUtils.safe_bool_conversion(_pick(raw, 'isHardcoded', 'is_hardcoded')),
            is_variable=ValidationUtils.safe_bool_conversion(_pick(raw, 'isVariable', 'is_variable')),
            xpath=_pick(raw, 'xpath'),
        )


@dataclass
class Variable:
    """
    Stylesheet-scoped constant.

    Attributes:
        name: Unique variable name
        value: Literal value (quoted as a string in the stylesheet)
        xpath: Expression evaluated when the stylesheet starts
    """
    name: str
    value: Optional[str] = None
    xpath: Optional[str] = None

    def __post_init__(self):
        """Validate the variable has a name and exactly one of value/xpath."""
        if not StringUtils.safe_string_check(self.name):
            raise ValueError("variable name cannot be empty")
        if (self.value is None) == (not self.xpath):
            raise ValueError(f"variable '{self.name}' must have exactly one of value or xpath")

    @property
    def is_expression(self) -> bool:
        return bool(self.xpath)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'Variable':
        value = _pick(raw, 'value')
        xpath = _pick(raw, 'xpath')
        return cls(
            name=_pick(raw, 'name', default=''),
            value=None if value is None or xpath else str(value),
            xpath=xpath or None,
        )


@dataclass
class RootElement:
    """Output root element for the XML format."""
    name: str = "root"
    attributes: List[AttributeSpec] = field(default_factory=list)

    def __post_init__(self):
        if not StringUtils.safe_string_check(self.name):
            raise ValueError("root element name cannot be empty")


@dataclass
class Mapping:
    """
    One row of mapping configuration: a source path bound to a target path.

    Attributes:
        source_path: Path into the source document (element or attribute form)
        target_name: Leaf output name
        target_path: Slash-delimited output path; defaults to target_name
        source_type: Whether the source is an element or an attribute
        field_type: Value formatting applied to the field
        occurs: Number of repetitions; values above 1 generate loops
        required: Drives optional/missing comments and fallbacks
        attributes: Attributes emitted on the output element, in order
        value_type: Where the value comes from (xpath, hardcoded, empty)
        hardcoded_value: Literal used when value_type is hardcoded
        for_each_path: Explicit repetition source, overrides the occurs-derived path
        is_placeholder: Synthesized by hierarchy completion, never user-authored
        mapping_id: Identifier carried over from the UI, if any
    """
    source_path: str
    target_name: str
    target_path: Optional[str] = None
    source_type: SourceType = SourceType.ELEMENT
    field_type: FieldType = FieldType.STRING
    occurs: int = 1
    required: bool = True
    attributes: List[AttributeSpec] = field(default_factory=list)
    value_type: ValueType = ValueType.XPATH
    hardcoded_value: Optional[str] = None
    for_each_path: Optional[str] = None
    is_placeholder: bool = False
    mapping_id: Optional[Any] = None

    def __post_init__(self):
        """Validate required fields and normalize defaults."""
        if not StringUtils.safe_string_check(self.source_path):
            raise ValueError("sourcePath cannot be empty")
        if not StringUtils.safe_string_check(self.target_name):
            raise ValueError("targetName cannot be empty")
        if not StringUtils.safe_string_check(self.target_path):
            self.target_path = self.target_name
        if not StringUtils.path_segments(self.target_path):
            raise ValueError(f"targetPath '{self.target_path}' has no path segments")
        # occurs of 0/None means "not set"
        occurs = ValidationUtils.safe_int_conversion(self.occurs, default=1) or 1
        if occurs < 1:
            raise ValueError(f"occurs must be at least 1, got {self.occurs}")
        self.occurs = occurs
        if not self.for_each_path:
            self.for_each_path = None

    @property
    def segments(self) -> List[str]:
        """Target path split into its segments."""
        return StringUtils.path_segments(self.target_path)

    @property
    def full_target_path(self) -> str:
        """Target path with empty segments removed."""
        return '/'.join(self.segments)

    @property
    def is_repeated(self) -> bool:
        """Either repetition mechanism triggers loop emission."""
        return self.occurs > 1 or bool(self.for_each_path)

    @property
    def is_attribute_source(self) -> bool:
        return self.source_type == SourceType.ATTRIBUTE or '/@' in self.source_path

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'Mapping':
        """
        Build a Mapping from a UI-style row.

        Raises:
            ValueError: If required keys are missing or a nested attribute is invalid
        """
        if not isinstance(raw, dict):
            raise ValueError(f"mapping must be an object, got {type(raw).__name__}")
        source_type = str(_pick(raw, 'sourceType', 'source_type', default='element')).lower()
        value_type = str(_pick(raw, 'valueType', 'value_type', default='xpath')).lower()
        hardcoded_value = _pick(raw, 'hardcodedValue', 'hardcoded_value')
        return cls(
            source_path=_pick(raw, 'sourcePath', 'source_path', default=''),
            target_name=_pick(raw, 'targetName', 'target_name', default=''),
            target_path=_pick(raw, 'targetPath', 'target_path'),
            source_type=SourceType.ATTRIBUTE if source_type == 'attribute' else SourceType.ELEMENT,
            field_type=FieldType.parse(_pick(raw, 'fieldType', 'field_type')),
            occurs=_pick(raw, 'occurs', default=1),
            required=ValidationUtils.safe_bool_conversion(_pick(raw, 'required'), default=True),
            attributes=[AttributeSpec.from_dict(attr) for attr in _pick(raw, 'attributes', default=[])],
            value_type=ValueType(value_type) if value_type in ('hardcoded', 'empty') else ValueType.XPATH,
            hardcoded_value=None if hardcoded_value is None else str(hardcoded_value),
            for_each_path=_pick(raw, 'forEachPath', 'for_each_path'),
            mapping_id=_pick(raw, 'id', 'mapping_id'),
        )


@dataclass
class MappingSet:
    """
    Complete compiler input.

    Attributes:
        fields: Ordered list of valid mappings
        root_path: Iteration anchor (Flat: apply-templates select, JSON: for-each select)
        record_path: Per-row element matched by the Flat data template
        root_element: Output root element (XML format only)
        variables: Stylesheet-scoped constants
        xslt_version: Stylesheet version for XML/Flat output (None: configured default, 1.0); JSON is always 3.0
        rejected: Rows, variables and root attributes dropped at the input boundary, as MalformedInputError records
    """
    fields: List[Mapping] = field(default_factory=list)
    root_path: Optional[str] = None
    record_path: Optional[str] = None
    root_element: RootElement = field(default_factory=RootElement)
    variables: List[Variable] = field(default_factory=list)
    xslt_version: Optional[str] = None
    rejected: List[MalformedInputError] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'MappingSet':
        """
        Build a MappingSet from the UI's JSON structure.

        Field rows missing sourcePath/targetName (or otherwise invalid),
        invalid variables and invalid root element attributes are skipped and
        recorded in ``rejected``; the rest of the set survives. An invalid root
        element name falls back to the default root.

        Raises:
            ValueError: If raw is not an object
            TypeError: If a list section is not iterable
        """
        if not isinstance(raw, dict):
            raise ValueError(f"mapping set must be an object, got {type(raw).__name__}")

        version = _pick(raw, 'xsltVersion', 'xslt_version')
        rejected = []
        fields = cls._parse_rows(_pick(raw, 'fields', 'mappings', default=[]), Mapping.from_dict,
                                 'fields', 'Mapping', rejected)
        variables = cls._parse_rows(_pick(raw, 'variables', default=[]), Variable.from_dict,
                                    'variables', 'Variable', rejected)

        return cls(
            fields=fields,
            root_path=_pick(raw, 'rootPath', 'root_path') or None,
            record_path=_pick(raw, 'recordPath', 'record_path') or None,
            root_element=cls._parse_root_element(_pick(raw, 'rootElement', 'root_element'), rejected),
            variables=variables,
            xslt_version=str(version) if version else None,
            rejected=rejected,
        )

    @staticmethod
    def _parse_rows(rows, parse, section: str, label: str, rejected: List[MalformedInputError]) -> list:
        parsed = []
        for index, row in enumerate(rows):
            try:
                parsed.append(parse(row))
            except (ValueError, TypeError) as e:
                rejected.append(MalformedInputError(
                    f"{label} {index} skipped: {e}", field_index=index, raw_mapping=row, section=section
                ))
        return parsed

    @classmethod
    def _parse_root_element(cls, raw: Optional[Dict[str, Any]],
                            rejected: List[MalformedInputError]) -> RootElement:
        if not raw:
            return RootElement()
        if not isinstance(raw, dict):
            rejected.append(MalformedInputError(
                "Root element skipped: must be an object", raw_mapping=raw, section='rootElement'
            ))
            return RootElement()

        attributes = cls._parse_rows(_pick(raw, 'attributes', default=[]), AttributeSpec.from_dict,
                                     'rootElement', 'Root element attribute', rejected)
        try:
            return RootElement(name=_pick(raw, 'name', default='root'), attributes=attributes)
        except (ValueError, TypeError) as e:
            rejected.append(MalformedInputError(
                f"Root element name skipped, using 'root': {e}", raw_mapping=raw, section='rootElement'
            ))
            return RootElement(attributes=attributes)


@dataclass
class GenerationOptions:
    """
    Options forwarded by the compiler facade to every emitter.

    Attributes:
        namespaces: Prefix -> URI table; the 'default' key is the unprefixed namespace
        delimiter: Column delimiter (Flat only)
        json_typed_values: Use type-aware JSON leaf values instead of plain value-of
    """
    namespaces: Dict[str, str] = field(default_factory=dict)
    delimiter: str = ","
    json_typed_values: bool = False

    def __post_init__(self):
        if self.namespaces is None:
            self.namespaces = {}
        if not self.delimiter:
            self.delimiter = ","

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> 'GenerationOptions':
        raw = raw or {}
        return cls(
            namespaces=dict(_pick(raw, 'namespaces', default={})),
            delimiter=_pick(raw, 'delimiter', default=','),
            json_typed_values=ValidationUtils.safe_bool_conversion(
                _pick(raw, 'jsonTypedValues', 'json_typed_values')
            ),
        )


@dataclass
class CompilationResult:
    """
    Result of one compiler run.

    Attributes:
        stylesheet: Generated stylesheet text
        output_format: Format the stylesheet targets
        rejected_mappings: Rows skipped at the input boundary
        warnings: Advisory findings (invalid XPaths, pre-flight issues)
        validation: Output validator result, when validation ran
    """
    stylesheet: str
    output_format: OutputFormat
    rejected_mappings: List[MalformedInputError] = field(default_factory=list)
    warnings: List[Any] = field(default_factory=list)
    validation: Optional[Any] = None

    @property
    def rejected_count(self) -> int:
        return len(self.rejected_mappings)

    @property
    def is_valid(self) -> bool:
        """True unless the output validator ran and rejected the stylesheet."""
        return self.validation is None or self.validation.valid
