"""Content loader: reads Markdown files, validates them and renders their bodies."""

import html
import logging
import math
import re
from pathlib import Path

import markdown
from bs4 import BeautifulSoup

from config import WORDS_PER_MINUTE
from src.content.errors import ContentError
from src.content.frontmatter import parse_front_matter
from src.content.schema import validate_front_matter
from src.models import Article, Heading, Page

logger = logging.getLogger(__name__)

ARTICLE_PATTERNS = ("*.md", "*.mdx")
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "toc"]

_RE_WORD = re.compile(r"\w+")
_RE_ARTICLE_ID = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*(/[A-Za-z0-9][A-Za-z0-9._-]*)*")


def _build_markdown() -> markdown.Markdown:
    return markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs={"toc": {"permalink": False}},
    )


def _flatten_toc(tokens: list[dict]) -> list[Heading]:
    headings: list[Heading] = []
    for token in tokens:
        headings.append(
            Heading(slug=token["id"], text=html.unescape(token["name"]), depth=int(token["level"]))
        )
        headings.extend(_flatten_toc(token.get("children", [])))
    return headings


def _mark_diagrams(fragment: str) -> str:
    """Turn fenced ```mermaid blocks into containers the client-side renderer picks up."""
    if "language-mermaid" not in fragment:
        return fragment
    soup = BeautifulSoup(fragment, "html.parser")
    for code in soup.select("pre > code.language-mermaid"):
        pre = code.parent
        diagram = soup.new_tag("pre", attrs={"class": "mermaid"})
        diagram.string = code.get_text()
        pre.replace_with(diagram)
    return str(soup)


def render_markdown(body: str) -> tuple[str, list[Heading]]:
    """Render a Markdown body to HTML and collect its headings."""
    md = _build_markdown()
    rendered = md.convert(body)
    headings = _flatten_toc(getattr(md, "toc_tokens", []))
    return _mark_diagrams(rendered), headings


def reading_time(body: str, words_per_minute: int = WORDS_PER_MINUTE) -> str:
    words = len(_RE_WORD.findall(body))
    minutes = max(1, math.ceil(words / words_per_minute))
    return f"{minutes} min read"


def _article_id(path: Path, root: Path) -> str:
    """
    Id of an article file: its path below `root` without the extension.

    Ids become URL segments as-is, so each path segment may only hold
    letters, digits, `-`, `_` and `.`, and must start with a letter or digit.

    Raises:
        ContentError: INVALID_ID for names that would need URL encoding.
    """
    article_id = path.relative_to(root).with_suffix("").as_posix()
    if not _RE_ARTICLE_ID.fullmatch(article_id):
        raise ContentError(
            "INVALID_ID",
            f"article id '{article_id}' is not URL-safe; rename the file using "
            "letters, digits, '-', '_' or '.'",
            str(path),
        )
    return article_id


def load_article(path: Path, root: Path) -> Article:
    """Parse, validate and render one article file."""
    source = str(path)
    article_id = _article_id(path, root)
    text = path.read_text(encoding="utf-8")
    raw, body = parse_front_matter(text, source=source)
    meta = validate_front_matter(raw, source=source)
    body_html, headings = render_markdown(body)

    return Article(
        id=article_id,
        title=meta.title,
        subtitle=meta.subtitle,
        date=meta.date,
        category=meta.category,
        tags=list(meta.tags),
        icon=meta.icon,
        icon_color=meta.icon_color,
        description=meta.description,
        group=meta.group,
        draft=meta.draft,
        featured=meta.featured,
        medium_url=meta.medium_url,
        github_url=meta.github_url,
        body=body,
        html=body_html,
        headings=headings,
        read_time=reading_time(body),
        source_path=source,
    )


def discover_articles(articles_dir: Path) -> list[Path]:
    """All article files below `articles_dir`, in a stable (path-sorted) order."""
    found: set[Path] = set()
    for pattern in ARTICLE_PATTERNS:
        found.update(p for p in articles_dir.rglob(pattern) if p.is_file())
    return sorted(found, key=lambda p: p.relative_to(articles_dir).as_posix())


def load_articles(articles_dir: str | Path) -> list[Article]:
    """
    Load every article of the collection.

    Fail-fast: the first file that cannot be parsed or validated aborts the
    load with a ContentError; no partial collection is returned.
    """
    root = Path(articles_dir)
    if not root.is_dir():
        raise ContentError("CONTENT_DIR", f"articles directory not found: {root}")

    logger.info("[CONTENT] Loading articles from %s", root)
    articles: list[Article] = []
    seen: dict[str, str] = {}
    for path in discover_articles(root):
        article = load_article(path, root)
        if article.id in seen:
            raise ContentError(
                "DUPLICATE_ID",
                f"article id '{article.id}' already defined by {seen[article.id]}",
                str(path),
            )
        seen[article.id] = str(path)
        articles.append(article)
        logger.debug("[CONTENT] Loaded %s (%s)", article.id, article.date.date())

    logger.info("[CONTENT] Loaded %s articles", len(articles), extra={"stage": "content"})
    return articles


def load_page(path: str | Path) -> Page | None:
    """Load a free-form page. Returns None when the file does not exist."""
    page_path = Path(path)
    if not page_path.exists():
        logger.info("[CONTENT] No page at %s, skipping", page_path)
        return None
    raw, body = parse_front_matter(page_path.read_text(encoding="utf-8"), source=str(page_path))
    title = str(raw.get("title") or "").strip()
    if not title:
        raise ContentError("VALIDATION", "missing required field 'title'", str(page_path))
    body_html, _ = render_markdown(body)
    return Page(title=title, html=body_html, description=str(raw.get("description") or ""))
