"""Exclusion rules backed by an ordered list of ignore patterns."""

from os import PathLike
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from treemark.types import PathType

from .ignore_pattern import IgnorePattern, parse_rule, parse_rules, resolve


class IgnoreExclusionRules:
    """Exclusion rules using the .gitignore-style subset understood by treemark.

    Rules can come from any number of rule files and from individual patterns.
    They are kept in the order they were added and resolved with last-match-wins
    semantics, so a negation added after an excluding rule re-includes the path.

    Attributes:
        patterns (Tuple[IgnorePattern, ...]): The parsed patterns in precedence order.

    Example:
        >>> rules = IgnoreExclusionRules()
        >>> rules.add_rule("*.log")
        >>> rules.add_rule("!important.log")
        >>> rules.exclude("app.log")
        True
        >>> rules.exclude("important.log")
        False
        >>> rules.add_rule("build/")
        >>> rules.exclude("build", is_dir=True)
        True
        >>> rules.exclude("build")
        False
    """

    def __init__(self, rules_files: Optional[Union[PathType, Sequence[PathType]]] = None):
        """Initialize the rules, optionally loading patterns from files.

        Args:
            rules_files: Path(s) to the file(s) containing ignore patterns.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        self._patterns: List[IgnorePattern] = []

        if rules_files is not None:
            self.load_rules(rules_files)

    @property
    def patterns(self) -> Tuple[IgnorePattern, ...]:
        return tuple(self._patterns)

    def exclude(self, path: str, is_dir: bool = False) -> bool:
        return resolve(path, self._patterns, is_dir)

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """Append the patterns of one or more rule files.

        Args:
            rules_files: Path(s) to file(s) containing ignore patterns.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        # Convert to list if it's a single path
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            path = Path(rules_file)
            if not path.exists():
                raise FileNotFoundError(f"Rules file not found: {path}")

            self._patterns.extend(parse_rules(path.read_text(encoding="utf-8")))

    def add_rule(self, rule: str) -> None:
        """Append a single pattern, using the same syntax as a rule file line.

        Blank rules and comments are ignored.
        """
        line = rule.strip()
        if not line or line.startswith("#"):
            return
        self._patterns.append(parse_rule(line))
