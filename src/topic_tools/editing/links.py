"""Markdown link helpers used when rewriting topic cross-references."""

import re

from topic_tools.errors import MalformedLinkError
from topic_tools.tables.patterns import MARKDOWN_LINK_RE

# Deepest "[[...](...)](...)" nesting unwrapped before giving up
MAX_LINK_NESTING = 16


def _single_link_match(text: str) -> re.Match | None:
    """Return the link match if ``text`` holds exactly one link, else None."""
    matches = list(MARKDOWN_LINK_RE.finditer(text))
    return matches[0] if len(matches) == 1 else None


def deconstruct_markdown_link(markdown_link: str) -> tuple[str, str]:
    """Split "[text](url)" into (text, url), unwrapping links nested in the text.

    Raises MalformedLinkError if the input is not exactly one link, or if the
    nesting goes deeper than MAX_LINK_NESTING.
    """
    match = _single_link_match(markdown_link)
    if match is None:
        raise MalformedLinkError(f"Markdown link {markdown_link} is malformed.")
    link_text, link_url = match.group("link_text"), match.group("link_url")

    for _ in range(MAX_LINK_NESTING):
        inner = _single_link_match("[" + link_text)
        if inner is None:
            return link_text, link_url
        link_text, link_url = inner.group("link_text"), inner.group("link_url")

    raise MalformedLinkError(f"Markdown link {markdown_link} is nested more than {MAX_LINK_NESTING} deep.")
