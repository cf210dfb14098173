"""Parsing and matching of ignore-rule patterns.

This module implements the small subset of the .gitignore language used when
building selection trees: literal names and paths, ``*`` and ``?`` wildcards,
``!`` negation, a trailing ``/`` for directory-only rules and a leading ``/`` (or
``./``) for rules anchored to the directory that declares them.

Rules are resolved with last-match-wins semantics: every matching rule overrides
the verdict of the rules before it, so a negated rule declared after an excluding
rule re-includes the path.
"""

import re
from typing import Iterable, List, NamedTuple, Pattern

from pathspec.util import normalize_file

WILDCARD_CHARS = ("*", "?")

# Separators rewritten to "/" before matching, whatever the host convention
FOREIGN_SEPARATORS = ("\\",)


class IgnorePattern(NamedTuple):
    """A single parsed ignore rule.

    Attributes:
        text (str): Normalized pattern body, without the leading ``!``, the leading
            ``/`` or ``./`` and the trailing ``/``.
        negated (bool): The rule re-includes paths excluded by earlier rules.
        directory_only (bool): The rule only applies to directories.
        anchored (bool): The rule matches from the start of the path relative to the
            declaring directory instead of at any depth.

    Example:
        >>> parse_rules("!/build/")[0]
        IgnorePattern(text='build', negated=True, directory_only=True, anchored=True)
    """

    text: str
    negated: bool = False
    directory_only: bool = False
    anchored: bool = False

    @property
    def has_wildcards(self) -> bool:
        return any(char in self.text for char in WILDCARD_CHARS)


def parse_rule(line: str) -> IgnorePattern:
    """Parse a single, already trimmed, non-comment rule line."""
    negated = line.startswith("!")
    body = line[1:] if negated else line

    directory_only = body.endswith("/")
    if directory_only:
        body = body[:-1]

    anchored = body.startswith("/") or body.startswith("./")
    if anchored:
        body = body[2:] if body.startswith("./") else body[1:]

    return IgnorePattern(body, negated=negated, directory_only=directory_only, anchored=anchored)


def parse_rules(text: str) -> List[IgnorePattern]:
    """Parse the contents of a rule file into an ordered list of patterns.

    Blank lines and lines starting with ``#`` are skipped. The order of the
    returned patterns is the order of the lines, which matters because later rules
    override earlier ones.

    Args:
        text: Full text of a rule file.

    Returns:
        The parsed patterns in declaration order.

    Example:
        >>> [p.text for p in parse_rules("# logs\\n*.log\\n\\n  !important.log  \\n")]
        ['*.log', 'important.log']
    """
    patterns = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        patterns.append(parse_rule(line))
    return patterns


def compile_pattern(pattern: IgnorePattern) -> Pattern[str]:
    """Compile a wildcard pattern to a regular expression.

    ``*`` matches any run of characters (including ``/``) and ``?`` exactly one
    character. Everything else is matched literally. Anchored patterns must match
    the whole path; unanchored ones may start at the beginning of the path or right
    after any ``/``.
    """
    body = "".join(
        ".*" if char == "*" else "." if char == "?" else re.escape(char) for char in pattern.text
    )
    if pattern.anchored:
        return re.compile(f"^{body}$")
    return re.compile(f"(^|/){body}$")


def matches(relative_path: str, pattern: IgnorePattern, is_directory: bool) -> bool:
    """Check whether a path matches a single pattern, ignoring negation.

    Args:
        relative_path: Path relative to the directory that declared the pattern.
            Backslash separators are normalized to ``/``.
        pattern: The pattern to test.
        is_directory: Whether the path names a directory.

    Returns:
        True if the pattern applies to the path.

    Example:
        >>> matches("src/build", parse_rule("build/"), is_directory=True)
        True
        >>> matches("src/build", parse_rule("build/"), is_directory=False)
        False
        >>> matches("docs/notes.md", parse_rule("*.md"), is_directory=False)
        True
    """
    if pattern.directory_only and not is_directory:
        return False

    path = normalize_file(relative_path, separators=FOREIGN_SEPARATORS)
    text = pattern.text
    if not text:
        return False

    if not pattern.has_wildcards:
        if pattern.anchored:
            return path == text or (is_directory and path.startswith(text + "/"))
        return path == text or path.endswith("/" + text) or f"/{text}/" in path

    return compile_pattern(pattern).search(path) is not None


def resolve(relative_path: str, patterns: Iterable[IgnorePattern], is_directory: bool) -> bool:
    """Decide whether a path is excluded by an ordered list of patterns.

    Each matching pattern sets the verdict to "excluded" unless it is negated, in
    which case it sets it to "included". Patterns that don't match leave the
    verdict alone, so the last matching pattern wins.

    Args:
        relative_path: Path relative to the directory being scanned.
        patterns: Patterns in precedence order (later wins).
        is_directory: Whether the path names a directory.

    Returns:
        True if the path is excluded.

    Example:
        >>> rules = parse_rules("*.log\\n!important.log")
        >>> resolve("error.log", rules, is_directory=False)
        True
        >>> resolve("important.log", rules, is_directory=False)
        False
    """
    excluded = False
    for pattern in patterns:
        if matches(relative_path, pattern, is_directory):
            excluded = not pattern.negated
    return excluded
