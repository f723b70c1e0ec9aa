"""
Per-field normalization of a mapping set.

Every mapping's source path (and explicit for-each path) is run through
normalize_xpath before any hierarchy work. Paths that fail the basic syntax
checks are still normalized and emitted; the problem is logged and recorded as
an InvalidXPathError so the caller can surface it as an advisory warning.
"""

import logging
from dataclasses import replace
from typing import List, Optional

from ..exceptions import InvalidXPathError
from ..models import Mapping, SourceType
from ..parsing.xpath_normalizer import normalize_xpath, describe_xpath_problem, strip_file_prefix


class MappingNormalizer:
    """
    Normalizes source paths on a list of mappings.

    Usage:
        normalizer = MappingNormalizer()
        mappings = normalizer.normalize(mapping_set.fields)
        for issue in normalizer.issues:
            ...
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.issues: List[InvalidXPathError] = []

    def normalize(self, mappings: List[Mapping]) -> List[Mapping]:
        """
        Return normalized copies of the mappings, in input order.

        Input Mapping objects are not modified.
        """
        self.issues = []
        normalized = []
        for index, mapping in enumerate(mappings):
            source_path = self._normalize_path(mapping.source_path, index, 'sourcePath')
            for_each_path = None
            if mapping.for_each_path:
                for_each_path = self._normalize_path(mapping.for_each_path, index, 'forEachPath')

            source_type = mapping.source_type
            if '/@' in source_path:
                source_type = SourceType.ATTRIBUTE

            normalized.append(replace(
                mapping,
                source_path=source_path,
                for_each_path=for_each_path,
                source_type=source_type,
            ))

        self.logger.debug(f"Normalized {len(normalized)} mappings ({len(self.issues)} path warnings)")
        return normalized

    def _normalize_path(self, raw: str, index: int, label: str) -> str:
        normalized = normalize_xpath(raw)
        problem = describe_xpath_problem(strip_file_prefix(raw.strip()))
        if problem:
            message = f"Invalid XPath in mapping {index} {label} '{raw}' ({problem}), normalized to '{normalized}'"
            self.logger.warning(message)
            self.issues.append(InvalidXPathError(message, xpath=raw, normalized=normalized))
        return normalized
