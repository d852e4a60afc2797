# utils.py
"""
Shared helpers for the support-info pipeline.
Text and URL normalization, paper-number extraction and revision ordering.
"""

import re
from typing import Set
from urllib.parse import unquote, urldefrag, urljoin, urlsplit


# ==========================
# Text Utilities
# ==========================

_WS_RE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Trim and collapse internal whitespace (including NBSP)."""
    return _WS_RE.sub(" ", (text or "").replace("\xa0", " ")).strip()


# ==========================
# URL Utilities
# ==========================

def normalize_url(url: str, base_url: str = "") -> str:
    """
    Resolve `url` against `base_url` and reduce it to a comparable form:
    fragment and query dropped, percent-escapes decoded, no trailing slash.
    """
    absolute = urljoin(base_url, url or "") if base_url else (url or "")
    absolute, _ = urldefrag(absolute)
    absolute = absolute.split("?", 1)[0]
    return unquote(absolute).rstrip("/")


def is_in_page_link(href: str) -> bool:
    """True for hrefs with no path of their own: "", "#fn1", "?action=edit"."""
    parts = urlsplit(href or "")
    return not (parts.scheme or parts.netloc or parts.path)


def is_url_prefix(target: str, page_url: str) -> bool:
    """True when `target` names `page_url` or one of its ancestor paths."""
    if not target:
        return False
    return f"{page_url}/".startswith(f"{target}/")


# ==========================
# Paper / Defect Report Numbers
# ==========================

# Order matters: the suffix group of P-papers is dropped.
_PAPER_PATTERNS = [
    re.compile(r"\b(P\d{4})(?:R\d+)?\b", re.IGNORECASE),
    re.compile(r"\b(N\d{4})\b", re.IGNORECASE),
    re.compile(r"\b(CWG|LWG|EWG|LEWG)[\s#_-]*(\d+)\b", re.IGNORECASE),
    re.compile(r"\b(DR)[\s#_-]*(\d+)\b"),
]


def extract_papers(text: str) -> Set[str]:
    """
    Return the set of paper / defect-report numbers cited in `text`,
    uppercased, without whitespace and without revision suffix.

    >>> sorted(extract_papers("P0137R1 and CWG 1776"))
    ['CWG1776', 'P0137']
    """
    found: Set[str] = set()
    if not text:
        return found
    for pat in _PAPER_PATTERNS:
        for m in pat.finditer(text):
            found.add("".join(m.groups()).upper())
    return found


# ==========================
# Revision Ordering
# ==========================

def revision_year(token: str) -> int:
    """Two-digit standard revision -> year ('98' -> 1998, '11' -> 2011)."""
    value = int(token)
    if value >= 100:
        return value
    return 1900 + value if value >= 70 else 2000 + value

