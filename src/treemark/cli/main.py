"""Command-line interface for treemark.

This module is the command-line host of the "show folder tree" action: it builds
the tree of a directory in a tab session, renders the selection and either prints
it or hands it to the clipboard, the same way an editor host would react to the
session's ``copyTree`` message.

Exit Codes:
    0: Successful completion
    1: Runtime error during execution
    2: Command-line syntax error
    126: Permission denied

Example:
    # Print the tree of a directory
    $ treemark /path/to/dir

    # Copy it to the clipboard, with an extra pattern
    $ treemark -c -i "*.log" /path/to/dir
"""

import json
import locale
import logging
import os
import sys
from logging.config import dictConfig
from pathlib import Path
from typing import Any, Mapping, Optional, TextIO

from treemark.cli.argparser import create_parser, validate_args
from treemark.cli.clipboard import ClipboardReceiver
from treemark.exceptions import DirectoryReadError
from treemark.exclusion_rules.ignore_rules import IgnoreExclusionRules
from treemark.file_system_tree.permission_action import PermissionAction
from treemark.file_system_tree.tree_builder import TreeBuilder
from treemark.session.messages import COPY_TREE, add_folder_message
from treemark.session.tabs import TabSession

logger = logging.getLogger(__name__)

# Map CLI permission actions to internal enum
PERMISSION_ACTIONS = {"ignore": PermissionAction.IGNORE, "fail": PermissionAction.RAISE}


def setup_logging(verbose: bool = False) -> None:
    """Send log records to stderr; debug records only when verbose."""
    level = "DEBUG" if verbose else "WARNING"
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {"format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s"},
            },
            "handlers": {
                "console": {
                    "level": level,
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "treemark": {"handlers": ["console"], "level": level, "propagate": False},
            },
        }
    )


def setup_locale() -> None:
    """Use the environment's collation rules when sorting directory entries."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.warning("Unsupported collation locale, falling back to the C locale")


class TextReceiver:
    """Writes the text of ``copyTree`` messages to a stream."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def __call__(self, message: Mapping[str, Any]) -> None:
        if message.get("command") == COPY_TREE:
            self.stream.write(message["treeText"])


def write_output(text: str, output: Optional[Path]) -> None:
    if output is None:
        sys.stdout.write(text)
    else:
        output.write_text(text, encoding="utf-8")


def main() -> None:
    """Main entry point for the treemark command-line interface.

    Exit codes:
        0: Successful completion
        1: Runtime error during execution
        2: Command-line syntax error
        126: Permission denied
    """
    try:
        # Extra root-level rules are collected while parsing, in command-line order
        exclusion_rules = IgnoreExclusionRules()
        parser = create_parser(exclusion_rules)
        args = parser.parse_args()

        validate_args(args)
        setup_logging(args.verbose)
        setup_locale()

        builder = TreeBuilder(
            rules_file_name=args.rules_file,
            permission_action=PERMISSION_ACTIONS[args.permission_action],
        )
        session = TabSession(builder=builder)
        folder_path = os.path.abspath(args.directory)
        tab = session.show_folder(folder_path, exclusion_rules.patterns)

        if args.json:
            message = add_folder_message(folder_path, tab.tree_root)
            write_output(json.dumps(message, ensure_ascii=False, indent=2) + "\n", args.output)
        elif args.copy:
            clipboard = ClipboardReceiver()
            session.channel.attach(clipboard)
            text = session.copy(tab.id)
            print(f"Copied {len(text.splitlines())} line(s) to the clipboard.", file=sys.stderr)
        elif args.output is not None:
            with args.output.open("w", encoding="utf-8") as stream:
                session.channel.attach(TextReceiver(stream))
                session.copy(tab.id)
        else:
            session.channel.attach(TextReceiver(sys.stdout))
            session.copy(tab.id)

    except DirectoryReadError as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(126 if isinstance(e.__cause__, PermissionError) else 1)
    except Exception as e:
        logger.debug("Unhandled error", exc_info=True)
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
