"""Exception types raised by the table core and the topic editor.

Anything derived from TopicToolsError is fatal for the current document only:
the batch driver in cli.py catches it per file and moves on to the next one.
"""


class TopicToolsError(Exception):
    """Base class for errors that abort processing of one document."""


class TableShapeError(TopicToolsError):
    """A table row whose cell count differs from the heading row."""

    def __init__(self, source: str, row: str, expected: int, found: int):
        self.source = source
        self.row = row
        self.expected = expected
        self.found = found
        super().__init__(f"Row found with unexpected number of cells ({found}, expected {expected}) in {source}: {row}")


class TopicLoadError(TopicToolsError):
    """The topic file could not be read."""


class NotUniqueError(TopicToolsError):
    """A lookup that requires a single matching element found several."""


class MalformedLinkError(TopicToolsError):
    """Text that should be a markdown link is not one."""
