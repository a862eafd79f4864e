"""Central configuration for the portfolio site build."""

import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw else default


# --- Site Identity ---
SITE_TITLE = os.getenv("SITE_TITLE", "Quentin Nivelais")
SITE_DESCRIPTION = os.getenv(
    "SITE_DESCRIPTION",
    "Co-Founder & CTO at Frak Labs. EVM infrastructure, DevOps, and Hardware.",
)
AUTHOR_NAME = os.getenv("AUTHOR_NAME", "Quentin Nivelais")
HOME_SUBTITLE = os.getenv("HOME_SUBTITLE", "CoFounder & CTO @frak-labs | EVM Pro | Rust Learner")
SITE_URL = os.getenv("SITE_URL", "https://nivelais.com").rstrip("/")
SITE_LANGUAGE = os.getenv("SITE_LANGUAGE", "en-us")

TWITTER_HANDLE = os.getenv("TWITTER_HANDLE", "@QNivelais")
GITHUB_HANDLE = os.getenv("GITHUB_HANDLE", "KONFeature")
LINKEDIN_URL = os.getenv("LINKEDIN_URL", "https://www.linkedin.com/in/quentin-nivelais")

# --- Paths ---
CONTENT_DIR = os.getenv("CONTENT_DIR", "content")
OUTPUT_DIR = os.getenv("OUTPUT_DIR", "dist")
REPORT_DIR = os.getenv("REPORT_DIR", "reports")

# --- Listing Config ---
RECENT_LIMIT = _env_int("RECENT_LIMIT", 5)
FEED_LIMIT = _env_int("FEED_LIMIT", 0)  # 0 = every published article
WORDS_PER_MINUTE = _env_int("WORDS_PER_MINUTE", 200)

# --- Rendering Options ---
MATH_ENABLED = _env_bool("MATH_ENABLED", True)
DIAGRAMS_ENABLED = _env_bool("DIAGRAMS_ENABLED", True)

_MERMAID_PALETTE = {
    "primaryColor": "#3b82f6",
    "secondaryColor": "#8b5cf6",
    "tertiaryColor": "#10b981",
    "errorBkgColor": "#dc2626",
    "errorTextColor": "#ffffff",
    "git0": "#3b82f6",
    "git1": "#8b5cf6",
    "git2": "#10b981",
    "git3": "#f59e0b",
    "git4": "#ef4444",
    "git5": "#ec4899",
    "git6": "#14b8a6",
    "git7": "#f97316",
}

MERMAID_LIGHT_THEME = {
    "theme": "base",
    "themeVariables": {
        "darkMode": False,
        "background": "transparent",
        "mainBkg": "#ffffff",
        "secondBkg": "#f5f5f5",
        "tertiaryBkg": "#e5e5e5",
        "primaryTextColor": "#171717",
        "secondaryTextColor": "#525252",
        "tertiaryTextColor": "#737373",
        "primaryBorderColor": "#a3a3a3",
        "secondaryBorderColor": "#d4d4d4",
        "nodeBorder": "#a3a3a3",
        "clusterBkg": "#ffffff",
        "clusterBorder": "#d4d4d4",
        "lineColor": "#737373",
        "edgeLabelBackground": "#ffffff",
        **_MERMAID_PALETTE,
    },
    "flowchart": {"curve": "basis", "padding": 20},
    "sequence": {
        "actorMargin": 50,
        "boxMargin": 10,
        "boxTextMargin": 5,
        "noteMargin": 10,
        "messageMargin": 35,
    },
}

MERMAID_DARK_THEME = {
    "theme": "dark",
    "themeVariables": {
        "darkMode": True,
        "background": "#0a0a0a",
        "mainBkg": "#1a1a1a",
        "secondBkg": "#262626",
        "tertiaryBkg": "#333333",
        "primaryTextColor": "#e5e5e5",
        "secondaryTextColor": "#a3a3a3",
        "tertiaryTextColor": "#737373",
        "primaryBorderColor": "rgba(255, 255, 255, 0.2)",
        "secondaryBorderColor": "rgba(255, 255, 255, 0.1)",
        "nodeBorder": "rgba(255, 255, 255, 0.2)",
        "clusterBkg": "#1a1a1a",
        "clusterBorder": "rgba(255, 255, 255, 0.1)",
        "lineColor": "rgba(255, 255, 255, 0.3)",
        "edgeLabelBackground": "#1a1a1a",
        **_MERMAID_PALETTE,
    },
}


# --- Table Definitions ---
@dataclass
class SocialLink:
    name: str
    url: str
    icon: str  # key into src.icons.ICON_MAP


@dataclass
class NavLink:
    label: str
    href: str


@dataclass
class ArticleGroup:
    """Taxonomy entry used to group related articles for display."""
    id: str
    name: str
    description: str
    icon: str
    icon_color: str
    order: int


@dataclass
class Project:
    title: str
    role: str
    description: str
    link: str = "#"
    tech: list[str] = field(default_factory=list)


SOCIAL_LINKS: list[SocialLink] = [
    SocialLink(name="GitHub", url=f"https://github.com/{GITHUB_HANDLE}", icon="github"),
    SocialLink(name="X", url=f"https://x.com/{TWITTER_HANDLE.lstrip('@')}", icon="twitter"),
    SocialLink(name="LinkedIn", url=LINKEDIN_URL, icon="linkedin"),
]

NAV_LINKS: list[NavLink] = [
    NavLink(label="Recent", href="/#articles"),
    NavLink(label="Collections", href="/#collections"),
    NavLink(label="Selected works", href="/#projects"),
    NavLink(label="All articles", href="/articles/"),
    NavLink(label="About", href="/about/"),
]

ARTICLE_GROUPS: list[ArticleGroup] = [
    ArticleGroup(
        id="frak",
        name="Frak Labs",
        description=(
            "Building the future of content monetization with Web3. From pioneering account "
            "abstraction and WebAuthn wallets to extreme frontend optimization and "
            "cost-effective blockchain infrastructure."
        ),
        icon="rocket",
        icon_color="text-purple-400",
        order=1,
    ),
    ArticleGroup(
        id="cooking-bot",
        name="Cooking Bot",
        description=(
            "An AI cooking assistant where safety is paramount. Exploring deterministic "
            "safety layers, vector search, and when NOT to use LLMs."
        ),
        icon="shield-check",
        icon_color="text-emerald-400",
        order=2,
    ),
    ArticleGroup(
        id="web3",
        name="Web3 & Solidity",
        description=(
            "Deep dives into EVM optimization, account abstraction, cryptography, and the "
            "bleeding edge of smart contract development."
        ),
        icon="blocks",
        icon_color="text-blue-400",
        order=3,
    ),
    ArticleGroup(
        id="side-projects",
        name="Side Projects",
        description=(
            "Personal projects born from real problems. Hardware controllers for pottery kilns, "
            "NLP pipelines for screenplay analysis, AI-powered WordPress management."
        ),
        icon="wrench",
        icon_color="text-cyan-400",
        order=4,
    ),
    ArticleGroup(
        id="opinion",
        name="Tech Opinion",
        description=(
            "Unfiltered takes on the state of Web3, developer tooling, and the gap between "
            "specs and reality. Less tutorial, more editorial."
        ),
        icon="message-square-warning",
        icon_color="text-amber-400",
        order=5,
    ),
]

PROJECTS: list[Project] = [
    Project(
        title="Frak Labs",
        role="Co-Founder & CTO",
        description="DeFi infrastructure & AMMs. Previously Polygon's top gas guzzler.",
        tech=["Solidity", "SST", "TypeScript"],
    ),
    Project(
        title="Gas Golfing",
        role="Ranked #2 Global",
        description="Extreme EVM optimization contest. Assembly & memory management.",
        tech=["Yul", "Assembly", "EVM"],
    ),
    Project(
        title="Open Source Infra",
        role="Contributor",
        description="Core contributions to eRPC (Load Balancer), Ponder (Indexer), and SST.",
        tech=["Go", "TypeScript", "Infra"],
    ),
    Project(
        title="ERC-4337 SDKs",
        role="Contributor",
        description="SDK improvements for ZeroDev & Pimlico. WebAuthn validator impl.",
        tech=["Cryptography", "AA"],
    ),
]


def group_map() -> dict[str, ArticleGroup]:
    """Taxonomy table keyed by group id."""
    return {group.id: group for group in ARTICLE_GROUPS}


def validate_config() -> tuple[bool, list[str]]:
    """Check the static configuration before anything is generated."""
    errors: list[str] = []

    if not SITE_TITLE.strip():
        errors.append("SITE_TITLE is empty")
    if not AUTHOR_NAME.strip():
        errors.append("AUTHOR_NAME is empty")
    if not SITE_URL.startswith(("http://", "https://")):
        errors.append(f"SITE_URL must be an absolute http(s) URL, got '{SITE_URL}'")

    for name, value in (
        ("RECENT_LIMIT", RECENT_LIMIT),
        ("FEED_LIMIT", FEED_LIMIT),
    ):
        if value < 0:
            errors.append(f"{name} must be >= 0, got {value}")
    if WORDS_PER_MINUTE <= 0:
        errors.append(f"WORDS_PER_MINUTE must be > 0, got {WORDS_PER_MINUTE}")

    seen: set[str] = set()
    for group in ARTICLE_GROUPS:
        if group.id in seen:
            errors.append(f"duplicate article group id '{group.id}'")
        seen.add(group.id)

    return not errors, errors
