"""Topic editor: the document side of the table tools.

A TopicEditor owns one topic file for the length of an edit.  It holds the
file as a list of lines (trailing whitespace trimmed) for the markdown table
parser and, for XML topics, an lxml tree for element and attribute queries.
Every successful mutation moves the document from CLEAN to DIRTY, and
save_if_dirty writes it back (after an optional checkout) only when DIRTY.

Usage:
    editor = TopicEditor(Path("docs/index.md"))
    table = editor.get_index_md_table("functions")
    if table is not None:
        table.remove_redundant_columns("Description")
        editor.replace_table(table)
    editor.save_if_dirty()
"""

import enum
import logging
import shlex
import subprocess
from collections.abc import Iterator
from pathlib import Path

from lxml import etree as ET

from topic_tools.config import Settings, load_settings
from topic_tools.errors import NotUniqueError, TopicLoadError
from topic_tools.tables.parser import find_next_table
from topic_tools.tables.schema import Table

logger = logging.getLogger(__name__)


# ─── Well-known Section Headings ─────────────────────────────────────────────

INDEX_MD_SECTIONS = {
    "callback_functions": "## Callback functions",
    "classes": "## Classes",
    "enumerations": "## Enumerations",
    "functions": "## Functions",
    "interfaces": "## Interfaces",
    "ioctls": "## IOCTLs",
    "structures": "## Structures",
}

INTERFACE_TOPIC_METHODS_H2 = "## Methods"
STRUCTURE_TOPIC_STRUCT_FIELDS_H2 = "## -struct-fields"

NO_BREAK_SPACE = "\u00a0"
YAML_DESCRIPTION_ASTERISK_PREFIX = "description: *"


class DocumentState(enum.Enum):
    """Whether the topic has unsaved changes."""

    CLEAN = "clean"
    DIRTY = "dirty"


class TopicEditor:
    """Query and edit one topic file, then save it if anything changed."""

    def __init__(self, path: Path, settings: Settings | None = None):
        self.path = Path(path)
        self.settings = settings or load_settings()
        self.state = DocumentState.CLEAN
        self.xml_tree = None
        self._lines_edited = False

        try:
            with open(self.path, "r", encoding=self.settings.encoding, newline="") as fopen:
                self.file_contents = fopen.read()
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("%s is invalid: %s", self.path, exc)
            raise TopicLoadError(f"{self.path} is invalid: {exc}") from exc

        # Raw lines keep trailing whitespace and any "\r"; only spliced tables are rewritten on save
        self._raw_lines: list[str] = self.file_contents.split("\n") if self.file_contents else []
        self._trailing_newline = self.file_contents.endswith("\n")
        if self._trailing_newline:
            self._raw_lines.pop()
        self.lines: list[str] = [line.rstrip() for line in self._raw_lines]

        if self.file_contents.lstrip().startswith("<"):
            try:
                self.xml_tree = ET.parse(str(self.path))
            except ET.XMLSyntaxError as exc:
                logger.warning("Could not parse %s as XML: %s", self.path, exc)

    @property
    def source(self) -> str:
        return str(self.path)

    @property
    def is_valid(self) -> bool:
        """True when the topic parsed as an XML document."""
        return self.xml_tree is not None

    @property
    def is_dirty(self) -> bool:
        return self.state is DocumentState.DIRTY

    def mark_dirty(self) -> None:
        self.state = DocumentState.DIRTY

    # ─── Table Queries ───────────────────────────────────────────────────────

    def get_first_table(self) -> Table | None:
        """Return the first markdown table in the topic, or None."""
        return find_next_table(self.lines, 0, self.source)

    def get_table_in_section(self, heading: str) -> Table | None:
        """Return the table that directly follows the first line equal to ``heading``.

        None if the heading is absent or is not followed by a table.
        """
        for ix, line in enumerate(self.lines):
            if line.strip() == heading:
                return find_next_table(self.lines, ix + 1, self.source)
        return None

    def get_index_md_table(self, kind: str) -> Table | None:
        """Return the table of an index.md section, e.g. kind="functions" or "structures"."""
        return self.get_table_in_section(INDEX_MD_SECTIONS[kind])

    def get_methods_in_interface_topic(self) -> Table | None:
        return self.get_table_in_section(INTERFACE_TOPIC_METHODS_H2)

    def iter_tables(self) -> Iterator[Table]:
        """Yield each table in document order.

        Stops at the first heading row that has no underline row, like
        find_next_table itself.  A table passed to replace_table while
        iterating has its line span updated, so iteration carries on after it.
        """
        start = 0
        while True:
            table = find_next_table(self.lines, start, self.source)
            if table is None:
                return
            yield table
            start = table.last_line_number

    # ─── Line Queries ────────────────────────────────────────────────────────

    def get_fields_section_line_number(self) -> int:
        """Return the 1-based line number of the struct-fields section, or -1 if not found."""
        for ix, line in enumerate(self.lines):
            if line.strip() == STRUCTURE_TOPIC_STRUCT_FIELDS_H2:
                return ix + 1
        return -1

    def get_first_no_break_space_line(self) -> str | None:
        for line in self.lines:
            if NO_BREAK_SPACE in line:
                return line.strip()
        return None

    def get_first_asterisk_in_yaml_description_line(self) -> str | None:
        for line in self.lines:
            stripped = line.strip()
            if stripped.startswith(YAML_DESCRIPTION_ASTERISK_PREFIX):
                return stripped
        return None

    # ─── Table Mutation ──────────────────────────────────────────────────────

    def replace_table(self, table: Table) -> int:
        """Overwrite the table's source lines with its current markdown.

        Updates the table's last_line_number to the new span and returns the
        zero-based index of the first line after it.
        """
        first, last = table.first_line_number, table.last_line_number
        if first < 1 or last < first:
            raise ValueError(f"Table has no source line span (lines {first}-{last}); cannot replace it in {self.source}")

        rendered = table.render_lines()
        line_ending = "\r" if self._raw_lines[first - 1].endswith("\r") else ""
        self._raw_lines[first - 1 : last] = [line + line_ending for line in rendered]
        self.lines[first - 1 : last] = rendered
        table.last_line_number = first - 1 + len(rendered)

        self._lines_edited = True
        self.mark_dirty()
        logger.debug("Replaced table at lines %d-%d of %s", first, last, self.source)
        return table.last_line_number

    # ─── XML Queries ─────────────────────────────────────────────────────────

    def get_descendants(self, name: str | None = None, container=None) -> list:
        """Return all descendant elements, optionally only those named ``name``.

        Searches the whole document by default (root included); pass an
        element as ``container`` to search only below it.
        """
        tag = name if name is not None else ET.Element
        if container is None:
            if self.xml_tree is None:
                return []
            return list(self.xml_tree.getroot().iter(tag))
        return list(container.iterdescendants(tag))

    def get_first_descendant(self, name: str | None, container=None):
        elements = self.get_descendants(name, container)
        return elements[0] if elements else None

    def get_unique_descendant(self, name: str | None, container=None):
        """Return the single descendant named ``name``, or None.  Raises NotUniqueError if there are several."""
        elements = self.get_descendants(name, container)
        if not elements:
            return None
        if len(elements) > 1:
            logger.error('get_unique_descendant("%s") found %d elements in %s', name, len(elements), self.source)
            raise NotUniqueError(f'"{name}" is not unique in {self.source}')
        return elements[0]

    def get_metadata_attribute(self, attribute_name: str) -> str | None:
        """Return metadata/@attribute_name, e.g. "id" or "type"."""
        metadata = self.get_unique_descendant("metadata")
        if metadata is None:
            return None
        return metadata.get(attribute_name)

    def get_metadata_beta(self) -> str:
        value = self.get_metadata_attribute("beta")
        return value if value is not None else "0"

    def _is_in_document(self, element) -> bool:
        if self.xml_tree is None or element is None:
            return False
        return element.getroottree().getroot() is self.xml_tree.getroot()

    # ─── XML Mutation ────────────────────────────────────────────────────────

    def new_element(self, name: str, text: str | None = None, parent=None):
        """Create an element, optionally appended to ``parent``.

        The document is marked dirty only when the parent is part of it.
        """
        element = ET.SubElement(parent, name) if parent is not None else ET.Element(name)
        if text is not None:
            element.text = text
        if self._is_in_document(parent):
            self.mark_dirty()
        return element

    def set_attribute_value(self, element, attribute_name: str, value: str | None) -> None:
        """Set (or with value=None, remove) an attribute; dirty only if the element is in the document."""
        if element is None:
            return
        if value is None:
            element.attrib.pop(attribute_name, None)
        else:
            element.set(attribute_name, value)
        if self._is_in_document(element):
            self.mark_dirty()

    def set_metadata_title(self, title: str) -> None:
        metadata = self.get_unique_descendant("metadata")
        if metadata is None:
            return
        title_element = self.get_unique_descendant("title", metadata)
        if title_element is not None:
            title_element.text = title
            self.mark_dirty()

    def set_metadata_beta(self, value: str) -> None:
        metadata = self.get_unique_descendant("metadata")
        if metadata is not None:
            metadata.set("beta", value)
            self.mark_dirty()

    def delete_all_sections(self) -> None:
        for section in self.get_descendants("section"):
            parent = section.getparent()
            # The root element cannot be removed
            if parent is None:
                continue
            parent.remove(section)
            self.mark_dirty()

    # ─── Persistence ─────────────────────────────────────────────────────────

    def save_if_dirty(self) -> bool:
        """Check out and save the topic if it has unsaved changes.

        Writes the line buffer if any table was replaced, otherwise the XML
        tree.  Returns True if the file was written.  Failures are logged,
        not raised; either way the document is CLEAN afterwards.
        """
        if not self.is_dirty:
            return False

        saved = True
        try:
            if self.settings.live_run and self.settings.checkout_command:
                command = shlex.split(self.settings.checkout_command) + [self.source]
                subprocess.run(command, check=True, capture_output=True, text=True)
            self._write()
        except (OSError, subprocess.CalledProcessError) as exc:
            logger.error("Could not save %s: %s", self.source, exc)
            saved = False
        else:
            logger.info("Saved %s", self.source)

        self.state = DocumentState.CLEAN
        return saved

    def _write(self) -> None:
        if self.xml_tree is not None and not self._lines_edited:
            has_declaration = self.file_contents.lstrip().startswith("<?xml")
            self.xml_tree.write(str(self.path), encoding=self.settings.encoding, xml_declaration=has_declaration)
            return

        text = "\n".join(self._raw_lines)
        if self._trailing_newline:
            text += "\n"
        with open(self.path, "w", encoding=self.settings.encoding, newline="") as fopen:
            fopen.write(text)
        self._lines_edited = False
