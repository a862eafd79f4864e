"""RSS feed and sitemap generation."""

import logging
from datetime import datetime, timezone
from email.utils import format_datetime

import feedparser
from jinja2 import Template

from config import FEED_LIMIT, SITE_DESCRIPTION, SITE_LANGUAGE, SITE_TITLE, SITE_URL
from src.listing import published, recent
from src.models import Article

logger = logging.getLogger(__name__)

STATIC_ROUTES = ["/", "/articles/", "/about/"]

RSS_TEMPLATE = Template(
    """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">
<channel>
<title>{{ title }}</title>
<link>{{ site_url }}/</link>
<description>{{ description }}</description>
<language>{{ language }}</language>
<lastBuildDate>{{ last_build }}</lastBuildDate>
<atom:link href="{{ site_url }}/rss.xml" rel="self" type="application/rss+xml"/>
{% for item in items %}
<item>
<title>{{ item.title }}</title>
<link>{{ item.link }}</link>
<guid isPermaLink="true">{{ item.link }}</guid>
<description>{{ item.description }}</description>
<pubDate>{{ item.pub_date }}</pubDate>
{% for tag in item.categories %}<category>{{ tag }}</category>
{% endfor %}
</item>
{% endfor %}
</channel>
</rss>
""",
    autoescape=True,
    trim_blocks=True,
)

SITEMAP_TEMPLATE = Template(
    """\
<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
{% for url, lastmod in urls %}
<url>
<loc>{{ url }}</loc>
{% if lastmod %}<lastmod>{{ lastmod }}</lastmod>
{% endif %}
</url>
{% endfor %}
</urlset>
""",
    autoescape=True,
    trim_blocks=True,
)


class FeedError(Exception):
    """Generated feed failed verification."""

    def __init__(self, category: str, message: str):
        super().__init__(message)
        self.category = category
        self.message = message


def rfc822_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc))


def article_link(article: Article, site_url: str = SITE_URL) -> str:
    return f"{site_url.rstrip('/')}{article.url_path}"


def feed_items(articles: list[Article], limit: int = FEED_LIMIT) -> list[Article]:
    """Non-draft articles, newest first, truncated to `limit` (0 = all)."""
    return recent(published(articles), limit)


def render_rss(
    articles: list[Article],
    site_url: str = SITE_URL,
    title: str = SITE_TITLE,
    description: str = SITE_DESCRIPTION,
    limit: int = FEED_LIMIT,
) -> str:
    """RSS 2.0 document for the published articles."""
    entries = feed_items(articles, limit)
    items = [
        {
            "title": article.title,
            "link": article_link(article, site_url),
            "description": article.description,
            "pub_date": rfc822_date(article.date),
            "categories": [article.category, *article.tags],
        }
        for article in entries
    ]
    last_build = entries[0].date if entries else datetime.now(tz=timezone.utc)
    return RSS_TEMPLATE.render(
        title=title,
        description=description,
        site_url=site_url.rstrip("/"),
        language=SITE_LANGUAGE,
        last_build=rfc822_date(last_build),
        items=items,
    )


def render_sitemap(articles: list[Article], site_url: str = SITE_URL) -> str:
    base = site_url.rstrip("/")
    urls: list[tuple[str, str | None]] = [(f"{base}{route}", None) for route in STATIC_ROUTES]
    for article in recent(published(articles)):
        urls.append((article_link(article, base), article.date.date().isoformat()))
    return SITEMAP_TEMPLATE.render(urls=urls)


def verify_feed(xml_text: str, expected_count: int) -> int:
    """
    Re-parse a generated feed with feedparser.

    Raises:
        FeedError: when the document is malformed or the item count differs.
    """
    parsed = feedparser.parse(xml_text)
    if parsed.bozo:
        raise FeedError("MALFORMED", f"feed is not well-formed: {parsed.bozo_exception}")
    count = len(parsed.entries)
    if count != expected_count:
        raise FeedError("COUNT", f"feed has {count} items, expected {expected_count}")
    logger.info(
        "[FEED] Verified feed with %s items", count, extra={"stage": "feed", "event": "feed_verified"}
    )
    return count
