from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from bs4 import BeautifulSoup

from src.content.loader import render_markdown
from src.models import Article, Page
from src.render import pages
from src.render.pages import (
    render_about,
    render_article,
    render_articles_page,
    render_index,
    render_not_found,
    write_site,
)


def _article(article_id: str, day: int, body: str = "## Intro\n\nHello.", **kwargs) -> Article:
    html, headings = render_markdown(body)
    defaults = dict(
        title=f"Title {article_id}",
        date=datetime(2024, 2, day, tzinfo=timezone.utc),
        category="web3",
        tags=["EVM"],
        icon="flame",
        description=f"About {article_id}",
        html=html,
        headings=headings,
        read_time="1 min read",
    )
    defaults.update(kwargs)
    return Article(id=article_id, **defaults)


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def test_detail_page_renders_every_tag_in_order():
    tags = ["Zeta", "C++", "alpha", "ERC-4337", "Mid"]
    article = _article("tags", 1, tags=tags)
    soup = _soup(render_article(article, [article]))
    assert [li.get_text(strip=True) for li in soup.select("ul.tags li")] == tags


def test_detail_page_unknown_icon_uses_default_symbol():
    article = _article("odd-icon", 1, icon="not-a-real-icon")
    soup = _soup(render_article(article, [article]))
    title_icon = soup.select_one("h1[data-search-title] i")
    assert title_icon["data-lucide"] == "box"


def test_detail_page_contents():
    article = _article(
        "full",
        3,
        body="## Setup\n\ntext\n\n### Details\n\nmore\n\n#### Too deep\n",
        subtitle="A subtitle",
        medium_url="https://medium.com/x",
        group="web3",
    )
    soup = _soup(render_article(article, [article]))

    assert soup.title.get_text() == "Title full | " + pages.SITE_TITLE
    assert soup.select_one("[data-search-body]") is not None
    assert [a["href"] for a in soup.select("nav.toc a")] == ["#setup", "#details"]
    assert soup.find("a", href="https://medium.com/x") is not None
    assert "A subtitle" in soup.get_text()
    assert soup.find("link", rel="canonical")["href"].endswith("/articles/full/")


def test_detail_page_group_navigation():
    older = _article("older", 1, group="web3")
    current = _article("current", 2, group="web3")
    newer = _article("newer", 3, group="web3")
    soup = _soup(render_article(current, [older, current, newer]))

    assert soup.select_one("nav.article-nav a.prev")["href"] == "/articles/older/"
    assert soup.select_one("nav.article-nav a.next")["href"] == "/articles/newer/"
    assert "More from Web3 & Solidity" in soup.select_one("nav.article-nav").get_text()


def test_detail_page_diagram_script_only_when_needed():
    plain = _article("plain", 1)
    diagram = _article("diagram", 2, body="```mermaid\ngraph TD\n  A --> B\n```")
    assert "mermaid.esm" not in render_article(plain, [plain])
    assert "mermaid.esm" in render_article(diagram, [diagram])


def test_detail_page_escapes_front_matter_text():
    article = _article("xss", 1, title="<script>alert(1)</script>")
    html = render_article(article, [article])
    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html


def test_index_page_sections():
    articles = [_article(f"a{i}", i, featured=(i == 2), group="frak") for i in range(1, 8)]
    soup = _soup(render_index(articles, recent_limit=3))

    recent_links = [a["href"] for a in soup.select("#articles a.card")]
    assert recent_links == ["/articles/a7/", "/articles/a6/", "/articles/a5/"]
    assert [a["href"] for a in soup.select("#featured a.card")] == ["/articles/a2/"]
    assert [div["data-collection"] for div in soup.select("[data-collection]")] == ["frak"]
    assert len(soup.select("#projects a.card")) == len(pages.PROJECTS)


def test_unknown_group_is_left_out_of_collections():
    articles = [_article("known", 1, group="web3"), _article("lost", 2, group="nope")]
    soup = _soup(render_articles_page(articles))

    collections = soup.select("[data-collection]")
    assert [div["data-collection"] for div in collections] == ["web3"]
    collection_links = [a["href"] for a in soup.select("#collections a")]
    assert "/articles/lost/" not in collection_links
    # still listed in the full archive
    assert "/articles/lost/" in [a["href"] for a in soup.select("#article-list a.card")]


def test_articles_page_filters_and_count():
    articles = [
        _article("a", 1, category="web3", group="frak"),
        _article("b", 2, category="ai"),
    ]
    soup = _soup(render_articles_page(articles))

    categories = [b["data-value"] for b in soup.select('[data-filter="category"] button')]
    groups = [b["data-value"] for b in soup.select('[data-filter="group"] button')]
    assert categories == ["all", "ai", "web3"]
    assert groups == ["all", "frak"]
    assert soup.select_one("#shown-count").get_text() == "2"
    assert [a["href"] for a in soup.select("#article-list a.card")] == ["/articles/b/", "/articles/a/"]


def test_about_and_not_found_pages():
    about = _soup(render_about(Page(title="About me", html="<p>Hi there</p>")))
    assert about.h1.get_text() == "About me"
    assert "Hi there" in about.get_text()
    assert _soup(render_about(None)).h1.get_text() == "About"
    assert "404" in render_not_found()


def test_write_site_routes(tmp_path: Path):
    articles = [_article("one", 1), _article("series/two", 2)]
    written = write_site(articles, tmp_path, about_page=None)

    relative = sorted(p.relative_to(tmp_path).as_posix() for p in written)
    assert relative == [
        "404.html",
        "about/index.html",
        "articles/index.html",
        "articles/one/index.html",
        "articles/series/two/index.html",
        "index.html",
    ]


def test_articles_page_filter_buttons_carry_counts():
    articles = [
        _article("a", 1, category="web3", group="frak"),
        _article("b", 2, category="web3"),
        _article("c", 3, category="ai", group="frak"),
    ]
    options = pages.filter_options(articles)
    assert options["category"] == [("all", 3), ("ai", 1), ("web3", 2)]
    assert options["group"] == [("all", 3), ("frak", 2)]

    soup = _soup(render_articles_page(articles))
    counts = {
        b["data-value"]: b["data-count"] for b in soup.select('[data-filter="category"] button')
    }
    assert counts == {"all": "3", "ai": "1", "web3": "2"}
