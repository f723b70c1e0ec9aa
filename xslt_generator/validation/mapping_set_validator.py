"""
Mapping Set Validator - Pre-flight validation for mapping sets.

Validates the structure of a mapping set BEFORE any stylesheet is generated, so
configuration mistakes are reported up front instead of surfacing as a
stylesheet that parses but produces the wrong output.

Scope:
    - VALIDATES: variable declarations, variable references from attributes,
      duplicate target paths
    - DOES NOT VALIDATE: path syntax (the mapping normalizer reports it) or
      that source paths exist in any document
    - Findings never block generation; the compiler reports them as warnings
"""

from collections import Counter
from typing import List

from ..models import AttributeSpec, FieldType, MappingSet
from .validation_models import (
    MappingSetValidationError,
    MappingSetValidationResult,
    MappingSetValidationWarning,
)


class MappingSetValidator:
    """
    Validates mapping set structure and cross-references.

    Validation Categories:
        1. Variables: names are unique
        2. Variable references: attributes in variable mode name a declared variable
        3. Target paths: no two value fields write the same target path

    Usage:
        validator = MappingSetValidator(mapping_set)
        result = validator.validate()
        if not result.is_valid:
            print(result.format_summary())
    """

    def __init__(self, mapping_set: MappingSet):
        self.mapping_set = mapping_set
        self.errors: List[MappingSetValidationError] = []
        self.warnings: List[MappingSetValidationWarning] = []

    def validate(self) -> MappingSetValidationResult:
        """
        Run every check and aggregate the findings.

        Validation continues after the first problem so all issues are reported at once.
        """
        self.errors.clear()
        self.warnings.clear()

        self._validate_variables()
        self._validate_variable_references()
        self._validate_target_paths()

        return MappingSetValidationResult(
            is_valid=len(self.errors) == 0,
            errors=self.errors.copy(),
            warnings=self.warnings.copy()
        )

    def _validate_variables(self) -> None:
        counts = Counter(variable.name for variable in self.mapping_set.variables)
        for name, count in counts.items():
            if count > 1:
                self.errors.append(MappingSetValidationError(
                    category="variables",
                    message=f"Variable '{name}' is declared {count} times",
                    location="variables",
                    fix_guidance="Give every variable a unique name; stylesheets reject duplicate top-level variables",
                    example_fix=f'{{"name": "{name}2", "value": "..."}}'
                ))

    def _validate_variable_references(self) -> None:
        declared = {variable.name for variable in self.mapping_set.variables}

        self._check_references(self.mapping_set.root_element.attributes, declared, "rootElement")
        for index, mapping in enumerate(self.mapping_set.fields):
            self._check_references(mapping.attributes, declared, f"fields[{index}]")

    def _check_references(self, attributes: List[AttributeSpec], declared: set, location: str) -> None:
        for attribute in attributes:
            if attribute.is_variable and attribute.value not in declared:
                self.warnings.append(MappingSetValidationWarning(
                    category="variable_references",
                    message=f"Attribute '{attribute.name}' refers to undeclared variable '{attribute.value}'",
                    location=f"{location}.attributes",
                    recommendation=f"Declare a variable named '{attribute.value}' or switch the attribute to a hardcoded value"
                ))

    def _validate_target_paths(self) -> None:
        seen = {}
        for index, mapping in enumerate(self.mapping_set.fields):
            if mapping.field_type == FieldType.COMPONENT:
                continue
            target = mapping.full_target_path
            if target in seen:
                self.warnings.append(MappingSetValidationWarning(
                    category="target_paths",
                    message=f"Target path '{target}' is also written by fields[{seen[target]}]",
                    location=f"fields[{index}]",
                    recommendation="Rename one of the targets; JSON output rejects duplicate map keys"
                ))
            else:
                seen[target] = index
