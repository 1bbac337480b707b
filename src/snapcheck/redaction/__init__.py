"""Selector parsing and subtree redaction."""

from snapcheck.redaction.engine import (
    REDACTED_PLACEHOLDER,
    RedactionRule,
    apply,
    compile_rules,
)
from snapcheck.redaction.selector import (
    Index,
    Key,
    RecursiveWildcard,
    Selector,
    Wildcard,
    parse_selector,
)

__all__ = [
    "REDACTED_PLACEHOLDER",
    "Index",
    "Key",
    "RecursiveWildcard",
    "RedactionRule",
    "Selector",
    "Wildcard",
    "apply",
    "compile_rules",
    "parse_selector",
]
