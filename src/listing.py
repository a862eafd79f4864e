"""Listing, filtering and grouping of validated articles."""

from config import ArticleGroup
from src.models import Article, GroupListing

ALL = "all"


def published(articles: list[Article]) -> list[Article]:
    """Drop drafts from public output."""
    return [article for article in articles if not article.draft]


def recent(articles: list[Article], limit: int | None = None) -> list[Article]:
    """
    Articles sorted by date, newest first.
    Equal dates keep the original collection order (sorted() is stable).
    `limit` keeps the N most recent; None or <= 0 disables truncation.
    """
    ranked = sorted(articles, key=lambda article: article.date, reverse=True)
    if limit is None or limit <= 0:
        return ranked
    return ranked[:limit]


def featured(articles: list[Article]) -> list[Article]:
    return recent([article for article in articles if article.featured])


def group_articles(articles: list[Article], groups: list[ArticleGroup]) -> list[GroupListing]:
    """
    Group articles by their `group` key.

    Only taxonomy entries with at least one article are returned, ordered by
    `order`. Articles without a group or with an unknown one are left out.
    """
    by_id = {group.id: group for group in groups}
    bucket: dict[str, list[Article]] = {}
    for article in articles:
        if article.group and article.group in by_id:
            bucket.setdefault(article.group, []).append(article)

    listings = [
        GroupListing(group=by_id[group_id], articles=recent(items))
        for group_id, items in bucket.items()
    ]
    listings.sort(key=lambda listing: listing.group.order)
    return listings


def unknown_groups(articles: list[Article], groups: list[ArticleGroup]) -> list[Article]:
    """Articles whose group is set but missing from the taxonomy table."""
    known = {group.id for group in groups}
    return [article for article in articles if article.group and article.group not in known]


def filter_articles(
    articles: list[Article], category: str | None = None, group: str | None = None
) -> list[Article]:
    """Keep articles matching both filters; None or "all" matches everything."""
    result: list[Article] = []
    for article in articles:
        category_match = category in (None, ALL) or article.category == category
        group_match = group in (None, ALL) or article.group == group
        if category_match and group_match:
            result.append(article)
    return result


def categories(articles: list[Article]) -> list[str]:
    return sorted({article.category for article in articles})


def group_ids(articles: list[Article]) -> list[str]:
    return sorted({article.group for article in articles if article.group})


def adjacent(
    article: Article, articles: list[Article], groups: list[ArticleGroup]
) -> tuple[Article | None, Article | None]:
    """
    Previous (older) and next (newer) article within the same known group.
    Returns (None, None) for articles outside the taxonomy.
    """
    known = {group.id for group in groups}
    if not article.group or article.group not in known:
        return None, None

    siblings = list(reversed(recent([a for a in articles if a.group == article.group])))
    ids = [sibling.id for sibling in siblings]
    if article.id not in ids:
        return None, None
    index = ids.index(article.id)
    prev_article = siblings[index - 1] if index > 0 else None
    next_article = siblings[index + 1] if index + 1 < len(siblings) else None
    return prev_article, next_article
