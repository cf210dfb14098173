"""Ignore-rule parsing and exclusion decisions."""

from .ignore_pattern import IgnorePattern, matches, parse_rules, resolve
from .ignore_rules import IgnoreExclusionRules

__all__ = [
    "IgnoreExclusionRules",
    "IgnorePattern",
    "matches",
    "parse_rules",
    "resolve",
]
