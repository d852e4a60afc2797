# augment.py
"""
Support-info augmenter

Appends compiler / library support tables to a cppreference page, built from
the rows of the per-revision compiler support pages that concern it.
"""

import asyncio
import logging
import re
import sys
from typing import Dict, Optional, Tuple

from bs4 import BeautifulSoup

from config import DEFAULTS, PROFILES, AppConfig, LanguageProfile
from fetcher import FetchError, WikiFetcher
from merger import merge
from models import Criteria, SupportReport
from relevance import build_criteria, expand_papers
from render import build_fragment, inject
from revisions import discover_markers, select_revisions
from row_filter import filter_rows

logger = logging.getLogger(__name__)

_C_URL_RE = re.compile(r"\bc/")


def profile_for_url(url: str) -> LanguageProfile:
    """C pages live under /w/c/, everything else is C++."""
    return PROFILES["c"] if _C_URL_RE.search(url) else PROFILES["cpp"]


class SupportInfoAugmenter:
    """Builds the support tables for one page and attaches them to it."""

    def __init__(self, cfg: Optional[AppConfig] = None, fetcher: Optional[WikiFetcher] = None):
        self.cfg = cfg or DEFAULTS
        self.fetcher = fetcher or WikiFetcher(self.cfg.fetch)

    # ---------- Public API ----------

    async def collect(self, page: BeautifulSoup, page_url: str) -> SupportReport:
        """Fetch, filter and merge the support rows relevant to `page`."""
        profile = profile_for_url(page_url)
        revisions = select_revisions(profile.catalog, discover_markers(page, profile))
        criteria = build_criteria(page, page_url, profile, base_url=self.cfg.fetch.site)
        report = SupportReport(lang=profile.name, revisions=revisions)
        if not revisions:
            logger.info("no revisions in scope for %s", page_url)
            return report

        titles = [profile.page_title(rev) for rev in revisions]
        pages, criteria = await self._fetch_all(titles, criteria, profile)

        # catalog order, regardless of the order the API returned them in
        for title in titles:
            html = pages.get(title)
            if html is None:
                continue
            content = BeautifulSoup(html, "html.parser")
            merge(report.compiler, filter_rows(content, profile.compiler_selector, criteria),
                  self.cfg.render.placeholder_label)
            merge(report.library, filter_rows(content, profile.library_selector, criteria),
                  self.cfg.render.placeholder_label)

        logger.info("%s: %d compiler rows, %d library rows from %s",
                    page_url, len(report.compiler.body), len(report.library.body), titles)
        return report

    def augment(self, html: str, page_url: str) -> Tuple[str, SupportReport]:
        """Return the augmented page HTML and the report it was built from."""
        page = BeautifulSoup(html, "html.parser")
        report = asyncio.run(self.collect(page, page_url))
        fragment = build_fragment(report, profile_for_url(page_url), self.cfg.render, page)
        if fragment is not None:
            inject(page, fragment, self.cfg.render.content_selector)
        return str(page), report

    # ---------- Internal methods ----------

    async def _fetch_all(self, titles, criteria: Criteria,
                         profile: LanguageProfile) -> Tuple[Dict[str, str], Criteria]:
        index_title = profile.paper_index_title if criteria.papers else None
        if index_title:
            pages, index = await asyncio.gather(
                self.fetcher.afetch_pages(titles),
                self.fetcher.afetch_pages([index_title]),
            )
            index_html = index.get(index_title)
            if index_html is not None:
                criteria = expand_papers(criteria, BeautifulSoup(index_html, "html.parser"))
        else:
            pages = await self.fetcher.afetch_pages(titles)
        return pages, criteria


def main(argv=None) -> int:
    import argparse
    ap = argparse.ArgumentParser(description="Append compiler/library support tables to a cppreference page")
    ap.add_argument("url", help="URL of the page to augment")
    ap.add_argument("--page-file", help="Read the page HTML from this file instead of fetching URL")
    ap.add_argument("--output", "-o", help="Write the result here (default: stdout)")
    ap.add_argument("--fragment-only", action="store_true", help="Write only the generated tables")
    ap.add_argument("--site", default=DEFAULTS.fetch.site)
    ap.add_argument("--api-path", default=DEFAULTS.fetch.api_path)
    ap.add_argument("--timeout", type=float, default=DEFAULTS.fetch.timeout)
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    cfg = AppConfig()
    cfg.fetch.site = args.site
    cfg.fetch.api_path = args.api_path
    cfg.fetch.timeout = args.timeout
    augmenter = SupportInfoAugmenter(cfg)

    try:
        if args.page_file:
            with open(args.page_file, "r", encoding="utf-8") as f:
                html = f.read()
        else:
            html = augmenter.fetcher.fetch_document(args.url)
        out, report = augmenter.augment(html, args.url)
    except FetchError as e:
        raise SystemExit(f"[FetchError] {e}")

    if args.fragment_only:
        fragment = build_fragment(report, profile_for_url(args.url), cfg.render)
        out = str(fragment) if fragment is not None else ""

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(out)
    else:
        sys.stdout.write(out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
