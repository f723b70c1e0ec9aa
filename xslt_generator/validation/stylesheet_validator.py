"""
Output validation for generated stylesheets.

Checks only that the text is a well-formed XML document whose root element is
a stylesheet. Semantic problems (duplicate template matches, undefined variable
references, XPath syntax) are not detected here; running the stylesheet through
a processor is the only complete test.
"""

import logging
from typing import Optional

from lxml import etree

from ..interfaces import StylesheetValidatorInterface
from .validation_models import StylesheetValidationResult


class StylesheetValidator(StylesheetValidatorInterface):
    """
    Parses stylesheet text with lxml and checks the root element.

    Entity resolution and network access are disabled on the parser; generated
    stylesheets never need either.
    """

    ROOT_LOCAL_NAME = 'stylesheet'

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def validate(self, stylesheet: str) -> StylesheetValidationResult:
        """
        Validate stylesheet text.

        Args:
            stylesheet: Generated stylesheet text

        Returns:
            StylesheetValidationResult; never raises for bad input
        """
        if stylesheet is None or not str(stylesheet).strip():
            return self._invalid("XSLT parsing error: document is empty", stylesheet)

        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        try:
            # bytes, because lxml refuses str input that carries an encoding declaration
            root = etree.fromstring(str(stylesheet).encode('utf-8'), parser)
        except etree.XMLSyntaxError as e:
            return self._invalid(f"XSLT parsing error: {e}", stylesheet)

        local_name = etree.QName(root).localname
        if local_name != self.ROOT_LOCAL_NAME:
            return self._invalid(
                f"Root element must be xsl:stylesheet, found '{local_name}'", stylesheet
            )

        self.logger.debug("XSLT validation passed - document is well-formed")
        return StylesheetValidationResult(valid=True, error=None, stylesheet=stylesheet)

    def _invalid(self, error: str, stylesheet: Optional[str]) -> StylesheetValidationResult:
        self.logger.warning(error)
        return StylesheetValidationResult(valid=False, error=error, stylesheet=stylesheet)


def validate_xslt(stylesheet: str) -> StylesheetValidationResult:
    """Validate stylesheet text with a default StylesheetValidator."""
    return StylesheetValidator().validate(stylesheet)
