"""
XPath normalization for user-supplied source paths.

Source paths come from a tree picker or are typed by hand, so they arrive in
several shapes: prefixed with the uploaded file name ("orders.xml/Order/Id"),
dotted ("Order.Customer.Name"), or relative ("Order/Id"). normalize_xpath turns
all of them into an expression a stylesheet processor accepts:

    orders.xml/Order/Id      -> //Order/Id
    Order.Customer.Name      -> //Order/Customer/Name
    Item[@code='a.b'].Price  -> //Item[@code='a.b']/Price
    /Order/Id                -> /Order/Id   (absolute paths are kept)

Validation is deliberately shallow (bracket balance and the leading character)
and never blocks normalization; callers decide what to do with a problem report.
"""

import re
from typing import Optional

_FILE_PREFIX = re.compile(r'^[^/]*\.xml/', re.IGNORECASE)
_VALID_START = re.compile(r'^[a-zA-Z/*@]')


def _replace_separator_dots(path: str) -> str:
    """
    Turn '.' hierarchy separators into '/'.

    Dots inside predicates or quoted literals are kept, as are the '.' and '..'
    location steps.
    """
    out = []
    depth = 0
    quote = None
    length = len(path)
    for index, char in enumerate(path):
        if quote:
            if char == quote:
                quote = None
            out.append(char)
            continue
        if char in ('"', "'"):
            quote = char
        elif char == '[':
            depth += 1
        elif char == ']':
            depth = max(depth - 1, 0)
        elif char == '.' and depth == 0:
            previous = path[index - 1] if index > 0 else '/'
            following = path[index + 1] if index + 1 < length else '/'
            if previous not in ('/', '.') and following not in ('/', '.'):
                out.append('/')
                continue
        out.append(char)
    return ''.join(out)


def strip_file_prefix(xpath: str) -> str:
    """Remove a leading '<name>.xml/' segment (case-insensitive)."""
    return _FILE_PREFIX.sub('', xpath)


def normalize_xpath(xpath: Optional[str]) -> str:
    """
    Clean and canonicalize a raw source path.

    Args:
        xpath: Raw path string, possibly empty

    Returns:
        Normalized path, or '' for empty input
    """
    if not xpath or not str(xpath).strip():
        return ''

    normalized = strip_file_prefix(str(xpath).strip())
    normalized = _replace_separator_dots(normalized)

    if not normalized.startswith('/') and not normalized.startswith('*'):
        normalized = '//' + normalized

    return normalized


def describe_xpath_problem(xpath: Optional[str]) -> Optional[str]:
    """
    Run the basic syntax checks on a path.

    Returns:
        A short description of the first problem found, or None if the path passes
    """
    if not xpath:
        return "path is empty"
    if xpath.count('[') != xpath.count(']'):
        return "unbalanced brackets"
    if not _VALID_START.match(xpath):
        return f"path cannot start with '{xpath[0]}'"
    return None


def is_valid_xpath(xpath: Optional[str]) -> bool:
    """True when the path passes the basic syntax checks."""
    return describe_xpath_problem(xpath) is None
