"""Static page rendering: landing page, article index, article detail, about, 404."""

import logging
import shutil
from datetime import date
from pathlib import Path

from config import (
    ARTICLE_GROUPS,
    AUTHOR_NAME,
    DIAGRAMS_ENABLED,
    GITHUB_HANDLE,
    HOME_SUBTITLE,
    MATH_ENABLED,
    MERMAID_DARK_THEME,
    MERMAID_LIGHT_THEME,
    NAV_LINKS,
    PROJECTS,
    RECENT_LIMIT,
    SITE_DESCRIPTION,
    SITE_TITLE,
    SITE_URL,
    SOCIAL_LINKS,
    TWITTER_HANDLE,
    group_map,
)
from src.listing import (
    ALL,
    adjacent,
    categories,
    featured,
    filter_articles,
    group_articles,
    group_ids,
    recent,
)
from src.models import Article, Page
from src.render.templates import build_environment

logger = logging.getLogger(__name__)

_ENV = build_environment()

TOC_MIN_DEPTH = 2
TOC_MAX_DEPTH = 3


def site_context() -> dict:
    """Values shared by every page (layout, navigation, footer)."""
    return {
        "site": {
            "title": SITE_TITLE,
            "description": SITE_DESCRIPTION,
            "author": AUTHOR_NAME,
            "subtitle": HOME_SUBTITLE,
            "url": SITE_URL,
            "twitter": TWITTER_HANDLE,
            "handle": GITHUB_HANDLE.lower(),
        },
        "nav_links": NAV_LINKS,
        "social_links": SOCIAL_LINKS,
        "year": date.today().year,
    }


def _render(template_name: str, canonical_path: str, **context) -> str:
    template = _ENV.get_template(template_name)
    return template.render(canonical_path=canonical_path, **site_context(), **context)


def render_index(articles: list[Article], recent_limit: int = RECENT_LIMIT) -> str:
    """Landing page. `articles` must already exclude drafts."""
    return _render(
        "index.html",
        "/",
        recent_articles=recent(articles, recent_limit),
        featured_articles=featured(articles),
        group_listings=group_articles(articles, ARTICLE_GROUPS),
        projects=PROJECTS,
    )


def filter_options(articles: list[Article]) -> dict[str, list[tuple[str, int]]]:
    """Filter buttons of the archive page with the number of articles each one shows."""
    return {
        "category": [
            (value, len(filter_articles(articles, category=value)))
            for value in [ALL, *categories(articles)]
        ],
        "group": [
            (value, len(filter_articles(articles, group=value)))
            for value in [ALL, *group_ids(articles)]
        ],
    }


def render_articles_page(articles: list[Article]) -> str:
    options = filter_options(articles)
    return _render(
        "articles.html",
        "/articles/",
        articles=recent(articles),
        group_listings=group_articles(articles, ARTICLE_GROUPS),
        categories=options["category"],
        groups=options["group"],
    )


def render_article(article: Article, articles: list[Article]) -> str:
    """Detail page; `articles` is the collection used for previous/next navigation."""
    prev_article, next_article = adjacent(article, articles, ARTICLE_GROUPS)
    toc = [h for h in article.headings if TOC_MIN_DEPTH <= h.depth <= TOC_MAX_DEPTH]
    return _render(
        "article.html",
        article.url_path,
        article=article,
        group=group_map().get(article.group or ""),
        toc=toc,
        prev_article=prev_article,
        next_article=next_article,
        math_enabled=MATH_ENABLED,
        diagrams_enabled=DIAGRAMS_ENABLED,
        has_diagrams='class="mermaid"' in article.html,
        mermaid_light=MERMAID_LIGHT_THEME,
        mermaid_dark=MERMAID_DARK_THEME,
    )


def render_about(page: Page | None) -> str:
    return _render("about.html", "/about/", page=page)


def render_not_found() -> str:
    return _render("404.html", "/404.html")


def write_file(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def write_site(
    articles: list[Article], output_dir: str | Path, about_page: Page | None = None
) -> list[Path]:
    """
    Render every route into `output_dir`.

    Routes:
        /                 -> index.html
        /articles/        -> articles/index.html
        /articles/<id>/   -> articles/<id>/index.html
        /about/           -> about/index.html
        (not found)       -> 404.html

    The articles/ tree is rebuilt from scratch so pages of removed or
    re-drafted articles do not survive from an earlier build.
    """
    out = Path(output_dir)
    articles_root = out / "articles"
    if articles_root.exists():
        shutil.rmtree(articles_root)
        logger.info(
            "[RENDER] Removed previous article pages under %s", articles_root, extra={"stage": "render"}
        )
    written = [
        write_file(out / "index.html", render_index(articles)),
        write_file(out / "articles" / "index.html", render_articles_page(articles)),
    ]
    for article in articles:
        written.append(
            write_file(out / "articles" / article.id / "index.html", render_article(article, articles))
        )
    written.append(write_file(out / "about" / "index.html", render_about(about_page)))
    written.append(write_file(out / "404.html", render_not_found()))

    logger.info(
        "[RENDER] Wrote %s pages (%s articles) to %s",
        len(written),
        len(articles),
        out,
        extra={"stage": "render", "event": "pages_written"},
    )
    return written
