"""Conversion of rendered reading markup back to searchable plain text."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

# Block elements that start on a new line when collapsed to text.
BLOCK_LEVEL_TAGS = {"div", "h1", "h2", "h3", "h4", "h5", "h6", "p"}

_BLANK_RUN_RE = re.compile(r"\n{3,}")


def html_to_text(markup: str) -> str:
    """Drop ruby glosses and tags, keeping line structure.

    ``<br>`` becomes a newline (the newline that follows it in rendered
    output is ignored), block elements open a new line, and runs of three or
    more newlines collapse to one blank line.
    """

    if not markup:
        return ""

    soup = BeautifulSoup(markup.replace("<br>\n", "<br>"), "lxml")
    for tag in soup.find_all(["rt", "rp", "script", "style"]):
        tag.decompose()
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for tag in soup.find_all(BLOCK_LEVEL_TAGS):
        preceding = tag.find_previous(string=True)
        if preceding is not None and not preceding.endswith("\n"):
            tag.insert_before("\n")

    text = soup.get_text(separator="")
    return _BLANK_RUN_RE.sub("\n\n", text).strip("\n")
