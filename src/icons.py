"""Icon key -> symbol lookup (Lucide icon identifiers)."""

import logging

from markupsafe import Markup, escape

logger = logging.getLogger(__name__)

DEFAULT_ICON = "box"

ICON_MAP: dict[str, str] = {
    "terminal": "terminal",
    "server": "server",
    "cpu": "cpu",
    "code-2": "code-2",
    "code2": "code-2",
    "github": "github",
    "twitter": "twitter",
    "linkedin": "linkedin",
    "flame": "flame",
    "box": "box",
    "shield-check": "shield-check",
    "command": "command",
    "menu": "menu",
    "x": "x",
    "arrow-up-right": "arrow-up-right",
    "message-square-warning": "message-square-warning",
    # taxonomy icons
    "rocket": "rocket",
    "blocks": "blocks",
    "wrench": "wrench",
    # navigation
    "chevron-left": "chevron-left",
    "chevron-right": "chevron-right",
    "search": "search",
    "rss": "rss",
    "sun": "sun",
    "moon": "moon",
}


def resolve_icon(name: str | None) -> str:
    """Symbol for an icon key; unknown or empty keys fall back to DEFAULT_ICON."""
    symbol = ICON_MAP.get((name or "").strip())
    if symbol is None:
        if name:
            logger.debug("[ICON] Unknown icon '%s', using '%s'", name, DEFAULT_ICON)
        return DEFAULT_ICON
    return symbol


def is_known_icon(name: str | None) -> bool:
    return (name or "").strip() in ICON_MAP


def render_icon(name: str | None, css_class: str = "", size: int = 24) -> Markup:
    """HTML placeholder replaced by the Lucide script on page load."""
    symbol = resolve_icon(name)
    return Markup(
        f'<i data-lucide="{escape(symbol)}" class="icon {escape(css_class)}" '
        f'width="{int(size)}" height="{int(size)}" aria-hidden="true"></i>'
    )
