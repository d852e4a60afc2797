# merger.py
"""
Schema Merger

Folds one TableSection into an accumulator when the two tables may carry
different column sets. Missing columns are added on both sides, with
"not applicable" placeholder cells in rows that lack them, before the new
rows are appended.

Column 0 is the feature label column. Its header text differs from one
revision page to the next ("C++17 feature", "C++20 feature") so it is
always treated as matching.
"""

from typing import List, Optional, Set

from config import DEFAULTS
from models import Cell, Row, TableSection


def _find_match(head: Row, cell: Cell, claimed: Set[int]) -> Optional[int]:
    for idx in range(1, len(head)):
        if idx not in claimed and head[idx].matches(cell):
            return idx
    return None


def _fixup_missing_columns(dst: TableSection, src: TableSection, label: str) -> None:
    """Insert into `dst` every column of `src` it does not have."""
    claimed: Set[int] = set()
    for i in range(1, len(src.head)):
        src_cell = src.head[i]
        match = _find_match(dst.head, src_cell, claimed)
        if match is not None:
            claimed.add(match)
            continue
        pos = min(i, len(dst.head))
        dst.head.insert(pos, src_cell.clone())
        claimed = {c + 1 if c >= pos else c for c in claimed}
        claimed.add(pos)
        for row in dst.body:
            row.insert(pos, Cell.make_placeholder(label))


def _align_to(head: Row, src: TableSection) -> None:
    """Permute `src` columns into the order of `head` (same multiset of texts)."""
    order: List[int] = [0]
    used: Set[int] = {0}
    for j in range(1, len(head)):
        k = _find_match(src.head, head[j], used)
        # both sides were reconciled, so a match always exists
        used.add(k)
        order.append(k)
    src.head = [src.head[k] for k in order]
    src.body = [[row[k] for k in order] for row in src.body]


def merge(accumulator: TableSection, new: TableSection, label: Optional[str] = None) -> None:
    """Merge `new` into `accumulator` in place."""
    if new.is_empty():
        return
    if accumulator.head is None:
        accumulator.head = new.head
        accumulator.body = new.body
        return

    label = DEFAULTS.render.placeholder_label if label is None else label
    _fixup_missing_columns(accumulator, new, label)
    _fixup_missing_columns(new, accumulator, label)
    _align_to(accumulator.head, new)
    accumulator.body = accumulator.body + new.body
