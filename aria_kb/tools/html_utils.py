"""
Small helpers shared by the extractors for reading BeautifulSoup trees
"""

import re
from typing import List, Optional

from bs4 import Tag

_WHITESPACE = re.compile(r"\s+")


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace runs to single spaces and trim"""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def tag_text(tag: Optional[Tag]) -> str:
    """Cleaned text of a tag, empty string when the tag is missing"""
    if tag is None:
        return ""
    return clean_text(tag.get_text())


def cells_text(cells: List[Tag]) -> str:
    """Cleaned text of several cells joined the way a single selection reads"""
    return clean_text("".join(cell.get_text() for cell in cells))


def referenced_names(cells: List[Tag], selector: str) -> List[str]:
    """Texts of the reference elements matched by ``selector`` inside cells

    Only text inside the matched markup counts; empty names are dropped and
    document order is kept.
    """
    names = []
    for cell in cells:
        for element in cell.select(selector):
            name = clean_text(element.get_text())
            if name:
                names.append(name)
    return names
