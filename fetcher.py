# fetcher.py
"""
MediaWiki page fetcher.

Fetches the rendered HTML of several wiki pages in one API request and hands
it back keyed by the titles the caller asked for.
"""

import asyncio
import logging
from typing import Callable, Dict, List, Optional, Sequence

import requests
from jsonschema import Draft202012Validator, ValidationError

from config import DEFAULTS, FetchConfig

logger = logging.getLogger(__name__)


QUERY_RESPONSE_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["query"],
    "properties": {
        "query": {
            "type": "object",
            "required": ["pages"],
            "properties": {
                "normalized": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "required": ["from", "to"],
                        "properties": {
                            "from": {"type": "string"},
                            "to": {"type": "string"},
                        },
                    },
                },
                "pages": {
                    "type": "object",
                    "additionalProperties": {
                        "type": "object",
                        "required": ["title"],
                        "properties": {
                            "title": {"type": "string"},
                            "revisions": {
                                "type": "array",
                                "minItems": 1,
                                "items": {
                                    "type": "object",
                                    "required": ["*"],
                                    "properties": {"*": {"type": "string"}},
                                },
                            },
                        },
                    },
                },
            },
        },
    },
}


class FetchError(RuntimeError):
    """A page request failed or came back malformed."""


class WikiFetcher:
    """
    Batched MediaWiki `action=query` client.

    Every request opens its own session from `session_factory`, so concurrent
    `afetch_pages` calls running in worker threads never share one.
    """

    def __init__(self, cfg: Optional[FetchConfig] = None,
                 session_factory: Callable[[], requests.Session] = requests.Session):
        self.cfg = cfg or DEFAULTS.fetch
        self.session_factory = session_factory
        self.validator = Draft202012Validator(QUERY_RESPONSE_SCHEMA)

    @property
    def api_url(self) -> str:
        return self.cfg.site.rstrip("/") + self.cfg.api_path

    # ---------- Public API ----------

    def fetch_pages(self, titles: Sequence[str]) -> Dict[str, str]:
        """Return {requested title: rendered HTML}; missing pages are left out."""
        titles = list(titles)
        if not titles:
            return {}
        params = {
            "format": "json",
            "action": "query",
            "prop": "revisions",
            "rvprop": "content",
            "rvparse": "1",
            "titles": "|".join(titles),
        }
        data = self._get_json(self.api_url, params)
        return self._pages_by_title(data, titles)

    async def afetch_pages(self, titles: Sequence[str]) -> Dict[str, str]:
        return await asyncio.to_thread(self.fetch_pages, titles)

    def fetch_document(self, url: str) -> str:
        """Rendered HTML of an ordinary page, e.g. the page being augmented."""
        try:
            with self._session() as session:
                resp = session.get(url, timeout=self.cfg.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(f"GET {url} failed: {e}") from e
        return resp.text

    # ---------- Internal methods ----------

    def _session(self) -> requests.Session:
        session = self.session_factory()
        session.headers.setdefault("User-Agent", self.cfg.user_agent)
        return session

    def _get_json(self, url: str, params: dict) -> dict:
        try:
            with self._session() as session:
                resp = session.get(url, params=params, timeout=self.cfg.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            raise FetchError(f"query {params.get('titles')!r} failed: {e}") from e
        except ValueError as e:
            raise FetchError(f"query {params.get('titles')!r} returned invalid JSON: {e}") from e
        try:
            self.validator.validate(data)
        except ValidationError as e:
            raise FetchError(f"unexpected API response: {e.message}") from e
        return data

    def _pages_by_title(self, data: dict, wanted: List[str]) -> Dict[str, str]:
        query = data["query"]
        # API title -> title we asked for
        requested = {t: t for t in wanted}
        for entry in query.get("normalized", []):
            if entry["from"] in requested:
                requested[entry["to"]] = requested.pop(entry["from"])

        out: Dict[str, str] = {}
        for page in query["pages"].values():
            title = page["title"]
            if title not in requested:
                continue
            if "missing" in page or "revisions" not in page:
                logger.warning("wiki page missing: %s", title)
                continue
            out[requested[title]] = page["revisions"][0]["*"]
        return out
