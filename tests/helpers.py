"""Test helpers shared by the unit and integration suites.

prepare() runs the same front half of the pipeline the compiler runs
(normalization and hierarchy completion) so emitter tests can call emit()
directly on realistic input.
"""
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from xslt_generator.mapping import MappingNormalizer, complete_hierarchy
from xslt_generator.models import GenerationOptions, Mapping, MappingSet

XSL_NS = "http://www.w3.org/1999/XSL/Transform"
SAMPLES_DIR = Path(__file__).resolve().parents[1] / "config" / "samples"


def mapping_set_from(fields: List[Dict[str, Any]], **extra: Any) -> MappingSet:
    """Build a MappingSet from UI-style field rows plus top-level keys."""
    raw = dict(extra)
    raw["fields"] = fields
    return MappingSet.from_dict(raw)


def prepare(mapping_set: MappingSet) -> List[Mapping]:
    """Normalized mappings followed by synthesized placeholders."""
    return complete_hierarchy(MappingNormalizer().normalize(mapping_set.fields))


def emit(emitter, fields: List[Dict[str, Any]], options: Optional[GenerationOptions] = None,
         **extra: Any) -> str:
    """Run one emitter on field rows and return the stylesheet text."""
    mapping_set = mapping_set_from(fields, **extra)
    return emitter.emit(mapping_set, prepare(mapping_set), options or GenerationOptions())


def flat_header_and_separators(stylesheet: str, delimiter: str = ",") -> Tuple[List[str], int]:
    """Header columns and the number of column separators in a Flat stylesheet."""
    start = stylesheet.index("<!-- Header row -->")
    text_open = stylesheet.index("<xsl:text>", start) + len("<xsl:text>")
    text_close = stylesheet.index("&#10;</xsl:text>", text_open)
    header = stylesheet[text_open:text_close]
    columns = header.split(delimiter) if header else []

    body = stylesheet[stylesheet.index("<!-- Data template -->"):]
    separators = body.count(f"<xsl:text>{delimiter}</xsl:text>") + body.count("<xsl:text>&#10;</xsl:text>")
    return columns, separators
