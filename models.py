# models.py
"""
Data structures for the support-info pipeline.
Contains the core data models used across multiple modules.
"""

import copy
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Sequence, Set

from bs4 import BeautifulSoup, Tag

from utils import extract_papers, normalize_text


def _span(tag: Tag, attr: str) -> int:
    try:
        value = int(str(tag.get(attr, 1)).strip())
    except ValueError:
        return 1
    return value if value > 0 else 1


class Cell:
    """
    One table cell, wrapping a <td>/<th> tag.

    Cells compare by identity: a cell spanning several grid positions is the
    same object at each of them. Use `matches()` for text equality.
    """

    def __init__(self, tag: Tag, placeholder: bool = False):
        self.tag = tag
        self.placeholder = placeholder

    @classmethod
    def make_placeholder(cls, label: str = "N/A") -> "Cell":
        soup = BeautifulSoup("", "html.parser")
        td = soup.new_tag("td")
        td["class"] = ["table-na"]
        if label:
            small = soup.new_tag("small")
            small.string = label
            td.append(small)
        return cls(td, placeholder=True)

    @property
    def rowspan(self) -> int:
        return _span(self.tag, "rowspan")

    @property
    def colspan(self) -> int:
        return _span(self.tag, "colspan")

    def text(self) -> str:
        return normalize_text(self.tag.get_text(" "))

    def links(self) -> List[str]:
        return [a["href"] for a in self.tag.find_all("a", href=True)]

    def ids(self) -> Set[str]:
        """Ids declared by the cell, its descendants and its own row."""
        out = {el["id"] for el in self.tag.find_all(id=True)}
        if self.tag.get("id"):
            out.add(self.tag["id"])
        row = self.tag.parent
        if row is not None and row.name == "tr" and row.get("id"):
            out.add(row["id"])
        return out

    def papers(self) -> Set[str]:
        out = extract_papers(self.tag.get_text(" "))
        for href in self.links():
            out |= extract_papers(href)
        return out

    def matches(self, other: "Cell") -> bool:
        return self.text() == other.text()

    def clone(self) -> "Cell":
        return Cell(copy.copy(self.tag), placeholder=self.placeholder)

    def __repr__(self) -> str:
        return f"Cell({self.text()!r})"


Row = List[Cell]
Grid = List[List[Optional[Cell]]]


@dataclass
class TableSection:
    """Header row plus data rows bound to that header's columns."""
    head: Optional[Row] = None
    body: List[Row] = field(default_factory=list)

    def is_empty(self) -> bool:
        return self.head is None or not self.body

    def texts(self) -> List[List[str]]:
        """Header and body as plain text, mostly for logging and tests."""
        rows = [self.head] if self.head is not None else []
        return [[c.text() for c in row] for row in rows + self.body]


@dataclass(frozen=True)
class Criteria:
    """Relevance criteria derived from the page being augmented."""
    page_url: str
    base_url: str
    header_link: Optional[str] = None
    anchors: FrozenSet[str] = frozenset()
    papers: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class RevisionMarkers:
    """since/until revision tokens found on one element (e.g. '11', '20')."""
    since: Optional[str] = None
    until: Optional[str] = None


@dataclass
class SupportReport:
    lang: str
    revisions: Sequence[str]
    compiler: TableSection = field(default_factory=TableSection)
    library: TableSection = field(default_factory=TableSection)

    def has_content(self) -> bool:
        return bool(self.compiler.body) or bool(self.library.body)
