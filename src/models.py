"""Article data models used across the build."""

from dataclasses import dataclass, field
from datetime import datetime

from config import ArticleGroup


@dataclass
class Heading:
    """A heading of a rendered article body, used for the table of contents."""
    slug: str
    text: str
    depth: int


@dataclass
class Article:
    """
    Validated article ready for rendering.
    Built once from a content file at build time and never mutated afterwards.
    """
    id: str                 # path relative to the articles dir, without extension
    title: str
    date: datetime          # timezone-aware (UTC when the source was naive)
    category: str
    tags: list[str]         # authoring order is preserved
    icon: str               # key into src.icons.ICON_MAP
    description: str
    subtitle: str | None = None
    icon_color: str | None = None
    group: str | None = None  # key into config.ARTICLE_GROUPS
    draft: bool = False
    featured: bool = False
    medium_url: str | None = None
    github_url: str | None = None

    body: str = ""          # raw Markdown body
    html: str = ""          # rendered body
    headings: list[Heading] = field(default_factory=list)
    read_time: str = ""
    source_path: str = ""

    @property
    def url_path(self) -> str:
        return f"/articles/{self.id}/"

    @property
    def external_links(self) -> list[tuple[str, str]]:
        links: list[tuple[str, str]] = []
        if self.medium_url:
            links.append(("Medium", self.medium_url))
        if self.github_url:
            links.append(("GitHub", self.github_url))
        return links


@dataclass
class Page:
    """Free-form page (e.g. about) with a title and a rendered body."""
    title: str
    html: str = ""
    description: str = ""


@dataclass
class GroupListing:
    """A taxonomy entry with the articles that reference it."""
    group: ArticleGroup
    articles: list[Article] = field(default_factory=list)
