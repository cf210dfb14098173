"""Command-line options for treemark.

Besides the usual options, the parser collects the extra root-level ignore
patterns given with -e and -i while it parses.
"""

import argparse
from pathlib import Path
from typing import Any, Optional, Sequence, Type, Union

from treemark import __version__
from treemark.exclusion_rules.ignore_rules import IgnoreExclusionRules


def create_exclusion_action(exclusion_rules: IgnoreExclusionRules) -> Type[argparse.Action]:
    """Create an argparse action that feeds extra rules into ``exclusion_rules``.

    Rule files (-e) and single patterns (-i) are applied as they are parsed, so
    their relative order on the command line is the order of the patterns. The
    raw values are also collected on the namespace under the action's ``dest``.

    Args:
        exclusion_rules: The rules object that collects the root-level patterns.

    Returns:
        An argparse action class bound to ``exclusion_rules``.
    """

    class ExclusionRulesAction(argparse.Action):
        def __call__(
            self,
            parser: argparse.ArgumentParser,
            namespace: argparse.Namespace,
            values: Union[str, Sequence[Any], None],
            option_string: Optional[str] = None,
        ) -> None:
            if values is None:
                return
            if option_string in ("-e", "--exclude"):
                exclusion_rules.load_rules(Path(str(values)))
            else:
                exclusion_rules.add_rule(str(values))

            collected = list(getattr(namespace, self.dest, None) or [])
            collected.append(values)
            setattr(namespace, self.dest, collected)

    return ExclusionRulesAction


def create_parser(exclusion_rules: IgnoreExclusionRules) -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Args:
        exclusion_rules: The exclusion rules object to update during parsing.

    Returns:
        An ArgumentParser instance configured with treemark's options.
    """
    description = """
    treemark: show the tree of a folder and copy the selected part as a text diagram.

    The tree honours the ignore-rule file found in every directory (.gitignore by
    default): entries matched by the rules in effect are left out of the selection.
    The result is printed in the familiar connector style:

      ├── src
      │   └── main.py
      └── README.md
    """

    epilog = """
    Examples:
      # Print the selected tree of a project
      treemark /path/to/project

      # Copy it to the clipboard instead
      treemark -c /path/to/project

      # Leave extra patterns out, on top of the per-directory rule files
      treemark -i "*.log" -i "!important.log" /path/to/project

      # Use another per-directory rule file name
      treemark -r .treeignore /path/to/project

      # Emit the addFolder message as JSON for a host to consume
      treemark --json /path/to/project
    """

    parser = argparse.ArgumentParser(
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"treemark {__version__}", help="Show the version and exit"
    )

    ExclusionAction = create_exclusion_action(exclusion_rules)

    parser.add_argument(
        "directory",
        type=Path,
        help="The directory to show.",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        type=Path,
        metavar="FILE",
        action=ExclusionAction,
        help="Extra rule file applied to the top-level directory (can be specified multiple times).",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        type=str,
        metavar="PATTERN",
        action=ExclusionAction,
        dest="exclude",
        help=(
            "Extra pattern applied to the top-level directory, e.g. '*.log', 'build/' or '!keep.log'. "
            "Can be specified multiple times; patterns keep their order, mixed with -e/--exclude options."
        ),
    )
    parser.add_argument(
        "-r",
        "--rules-file",
        metavar="NAME",
        default=".gitignore",
        help="Name of the per-directory rule file (default: .gitignore).",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="FILE",
        help="Output file path. If not specified, output is written to stdout.",
    )
    parser.add_argument(
        "-c",
        "--copy",
        action="store_true",
        help="Copy the diagram to the clipboard instead of printing it.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the addFolder message (folder path and tree) as JSON instead of the diagram.",
    )
    parser.add_argument(
        "-P",
        "--permission-action",
        choices=["ignore", "fail"],
        default="fail",
        help="How to handle subdirectories that cannot be read (default: fail).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug information to stderr.",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Raises:
        ValueError: If any arguments fail validation.
    """
    if args.copy and args.json:
        raise ValueError("-c/--copy cannot be combined with --json")
    if args.copy and args.output:
        raise ValueError("-c/--copy cannot be combined with -o/--output")
