"""Batch driver for the topic tools.

Runs one command over many topic files.  A document that fails (bad table
shape, unreadable file, ambiguous element) is logged and counted, and the
batch carries on with the next file.

Usage:
    topic-tools tables docs/index.md docs/structures/*.md
    topic-tools dedupe-columns docs/**/*.md --column Description --column Requirements
"""

import argparse
import logging
import sys
from pathlib import Path

from tqdm import tqdm

from topic_tools.config import load_settings
from topic_tools.editing.editor import TopicEditor
from topic_tools.errors import TopicToolsError

logger = logging.getLogger(__name__)


def list_tables(editor: TopicEditor) -> int:
    """Log each table in the topic and return how many were found."""
    count = 0
    for table in editor.iter_tables():
        count += 1
        logger.info(
            "%s lines %d-%d: %d rows, headings %s",
            editor.source,
            table.first_line_number,
            table.last_line_number,
            table.row_count,
            table.column_headings,
        )
    return count


def dedupe_columns(editor: TopicEditor, column_headings: list[str]) -> int:
    """Drop repeated columns from every table in the topic; return how many tables changed."""
    changed = 0
    for table in editor.iter_tables():
        n_cols = len(table.column_headings)
        table.remove_redundant_columns(*column_headings)
        if len(table.column_headings) != n_cols:
            editor.replace_table(table)
            changed += 1
    return changed


def run(command: str, paths: list[Path], column_headings: list[str] | None = None) -> int:
    """Apply a command to each topic file.  Returns the number of documents that failed."""
    settings = load_settings()
    failures = 0

    for path in tqdm(paths, desc=command, disable=len(paths) < 2):
        try:
            editor = TopicEditor(path, settings)
            if command == "tables":
                list_tables(editor)
            elif command == "dedupe-columns":
                if dedupe_columns(editor, column_headings or []) and not editor.save_if_dirty():
                    failures += 1
            else:
                raise ValueError(f"Unknown command {command}")
        except TopicToolsError as exc:
            logger.error("Skipping %s: %s", path, exc)
            failures += 1

    logger.info("Processed %d files, %d failed", len(paths), failures)
    return failures


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, configure logging and run the requested command."""
    parser = argparse.ArgumentParser(description="Query and edit markdown tables in topic files")
    parser.add_argument("--log-level", default=None, help="Logging level (default: TOPIC_TOOLS_LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    tables_parser = subparsers.add_parser("tables", help="List the tables in each topic")
    tables_parser.add_argument("paths", nargs="+", type=Path)

    dedupe_parser = subparsers.add_parser("dedupe-columns", help="Remove repeated columns from every table")
    dedupe_parser.add_argument("paths", nargs="+", type=Path)
    dedupe_parser.add_argument(
        "--column", dest="columns", action="append", required=True, help="Column heading whose repeats are removed"
    )

    args = parser.parse_args(argv)

    level = (args.log_level or load_settings().log_level).upper()
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(message)s")

    failures = run(args.command, args.paths, getattr(args, "columns", None))
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
