"""
Validation Data Models

Result structures shared by the two validators:

- StylesheetValidationResult: outcome of parsing a generated stylesheet
  ({valid, error}), with a helper that raises MalformedOutputError.
- MappingSetValidationError / MappingSetValidationWarning / MappingSetValidationResult:
  pre-flight findings about a mapping set, formatted for logs and the CLI.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..exceptions import MalformedOutputError


@dataclass
class StylesheetValidationResult:
    """
    Outcome of validating generated stylesheet text.

    Attributes:
        valid: True when the text parsed and its root is a stylesheet
        error: Parser or root-check message when invalid, otherwise None
        stylesheet: The validated text, kept for error reporting
    """
    valid: bool
    error: Optional[str] = None
    stylesheet: Optional[str] = field(default=None, repr=False)

    def __post_init__(self):
        if self.valid and self.error:
            raise ValueError("Stylesheet validation result cannot be valid with an error message")
        if not self.valid and not self.error:
            raise ValueError("Invalid stylesheet validation result must carry an error message")

    def to_dict(self) -> Dict[str, Any]:
        """The {valid, error} shape handed to callers."""
        return {'valid': self.valid, 'error': self.error}

    def raise_for_error(self) -> None:
        """
        Raise MalformedOutputError when the stylesheet was rejected.

        Raises:
            MalformedOutputError: If valid is False
        """
        if not self.valid:
            raise MalformedOutputError(self.error, stylesheet=self.stylesheet)


@dataclass
class MappingSetValidationError:
    """
    A blocking problem in a mapping set.

    Attributes:
        category: Check that found the problem (e.g. 'variables')
        message: What is wrong
        location: Where in the mapping set (e.g. 'variables[2]')
        fix_guidance: How to fix it
        example_fix: Optional example of a correct entry
    """
    category: str
    message: str
    location: str
    fix_guidance: str
    example_fix: Optional[str] = None

    def format_error(self) -> str:
        lines = [
            f"X: [{self.category}] {self.message}",
            f"   Location: {self.location}",
            f"   Fix: {self.fix_guidance}",
        ]
        if self.example_fix:
            lines.append(f"   Example: {self.example_fix}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return f"[{self.category}] {self.message} ({self.location})"


@dataclass
class MappingSetValidationWarning:
    """
    A non-blocking finding: generation works but the output may not be what was meant.

    Attributes:
        category: Check that produced the warning
        message: What looks wrong
        location: Where in the mapping set
        recommendation: Suggested change
    """
    category: str
    message: str
    location: str
    recommendation: str

    def format_warning(self) -> str:
        return "\n".join([
            f"!: [{self.category}] {self.message}",
            f"   Location: {self.location}",
            f"   Recommendation: {self.recommendation}",
        ])

    def __str__(self) -> str:
        return f"[{self.category}] {self.message} ({self.location})"


@dataclass
class MappingSetValidationResult:
    """
    Aggregated pre-flight validation outcome.

    is_valid must agree with the presence of errors; warnings never affect it.
    """
    is_valid: bool
    errors: List[MappingSetValidationError] = field(default_factory=list)
    warnings: List[MappingSetValidationWarning] = field(default_factory=list)

    def __post_init__(self):
        if self.is_valid and self.errors:
            raise ValueError("Validation result cannot be valid with errors present")
        if not self.is_valid and not self.errors:
            raise ValueError("Validation result must be valid if no errors present")

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def format_summary(self) -> str:
        """Human-readable report of all findings."""
        if self.is_valid and not self.warnings:
            return "> Mapping set validation passed (no errors, no warnings)"

        lines = []
        if self.is_valid:
            lines.append(f"> Mapping set validation passed with {self.warning_count} warning(s)")
        else:
            lines.append(
                f"X: Mapping set validation FAILED: {self.error_count} error(s), "
                f"{self.warning_count} warning(s)"
            )
            lines.append("")
            for error in self.errors:
                lines.append(error.format_error())
                lines.append("")

        for warning in self.warnings:
            lines.append(warning.format_warning())
            lines.append("")
        return "\n".join(lines).rstrip()
