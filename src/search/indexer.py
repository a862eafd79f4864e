"""Client-side search index built from the rendered article pages."""

import json
import logging
import re
from pathlib import Path

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

INDEX_FILENAME = "search-index.json"
BODY_SELECTOR = "[data-search-body]"
TITLE_SELECTOR = "[data-search-title]"
EXCERPT_LENGTH = 160

_RE_WHITESPACE = re.compile(r"\s+")


def _clean_text(text: str) -> str:
    return _RE_WHITESPACE.sub(" ", text or "").strip()


def _excerpt(text: str, limit: int = EXCERPT_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3].rstrip() + "..."


def _page_url(path: Path, output_dir: Path) -> str:
    relative = path.relative_to(output_dir).as_posix()
    if relative.endswith("index.html"):
        return "/" + relative[: -len("index.html")]
    return "/" + relative


def extract_entry(html: str, url: str) -> dict | None:
    """Index entry for one page, or None when the page has no searchable body."""
    soup = BeautifulSoup(html, "html.parser")
    body = soup.select_one(BODY_SELECTOR)
    if body is None:
        return None

    for node in body.select("script, style, pre.mermaid"):
        node.decompose()
    content = _clean_text(body.get_text(" "))

    title_node = soup.select_one(TITLE_SELECTOR) or soup.find("title")
    title = _clean_text(title_node.get_text(" ")) if title_node else url
    return {"url": url, "title": title, "excerpt": _excerpt(content), "content": content}


def build_search_index(output_dir: str | Path, pages: list[Path] | None = None) -> list[dict]:
    """
    Index the pages written by the current build and write the index.

    `pages` is the list returned by `write_site`; when omitted every HTML
    file under `output_dir` is scanned. Only pages carrying a
    `data-search-body` element are indexed.
    """
    out = Path(output_dir)
    candidates = pages if pages is not None else out.rglob("*.html")
    entries: list[dict] = []
    for path in sorted(Path(p) for p in candidates):
        entry = extract_entry(path.read_text(encoding="utf-8"), _page_url(path, out))
        if entry is not None:
            entries.append(entry)

    index_path = out / INDEX_FILENAME
    with open(index_path, "w", encoding="utf-8") as handle:
        json.dump(entries, handle, ensure_ascii=False, indent=2)
    logger.info(
        "[SEARCH] Indexed %s pages -> %s",
        len(entries),
        index_path,
        extra={"stage": "search", "event": "index_written"},
    )
    return entries


def load_search_index(path: str | Path) -> list[dict]:
    with open(path, encoding="utf-8") as handle:
        return json.load(handle)


def search(entries: list[dict], query: str, limit: int = 10) -> list[dict]:
    """Entries matching every query term (case-insensitive), in index order."""
    terms = [term for term in query.lower().split() if term]
    if not terms:
        return []
    hits: list[dict] = []
    for entry in entries:
        haystack = f"{entry.get('title', '')} {entry.get('content', '')}".lower()
        if all(term in haystack for term in terms):
            hits.append(entry)
        if limit > 0 and len(hits) >= limit:
            break
    return hits
