#!/usr/bin/env python3
"""Site build controller: load -> validate -> render -> feed -> search index."""

from __future__ import annotations

import argparse
import json
import logging
import os
import shutil
import sys
import time
import traceback
from dataclasses import asdict, dataclass, field
from datetime import date
from pathlib import Path

from config import ARTICLE_GROUPS, CONTENT_DIR, OUTPUT_DIR, REPORT_DIR, validate_config

logger = logging.getLogger(__name__)


class JsonFormatter(logging.Formatter):
    """Machine-readable build logs; build context comes from `extra=`."""

    CONTEXT_FIELDS = ("stage", "event", "source")

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in self.CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value:
                payload[name] = value
        return json.dumps(payload, ensure_ascii=False)


@dataclass
class StageFailure:
    """Error recorded for one build stage."""
    stage: str          # e.g. "config", "content", "render"
    error_type: str     # e.g. "VALIDATION", "FRONT_MATTER"
    message: str
    source: str = ""    # offending content file, if any


@dataclass
class BuildResult:
    """Statistics and failures of one site build."""
    run_id: str
    date: str
    output_dir: str
    success: bool = False
    exit_reason: str = ""
    duration_seconds: float = 0.0
    loaded_count: int = 0       # articles loaded and validated
    published_count: int = 0    # articles rendered publicly
    draft_count: int = 0
    pages_written: int = 0
    feed_items: int = 0
    indexed_count: int = 0
    warnings: list[str] = field(default_factory=list)
    failures: list[StageFailure] = field(default_factory=list)


def build_log_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S")
    return logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S")


def configure_logging(log_format: str, verbose: bool = False) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(build_log_formatter(log_format))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    # the markdown package logs extension loading at DEBUG
    logging.getLogger("MARKDOWN").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the portfolio & blog static site")
    parser.add_argument(
        "--content-dir",
        default=CONTENT_DIR,
        help="Content root holding articles/ and pages/ (default: %(default)s)",
    )
    parser.add_argument(
        "--output-dir",
        default=OUTPUT_DIR,
        help="Where the static site is written (default: %(default)s)",
    )
    parser.add_argument(
        "--report-dir",
        default=REPORT_DIR,
        help="Where build summaries are written (default: %(default)s)",
    )
    parser.add_argument(
        "--drafts",
        action="store_true",
        help="Preview mode: render draft articles too (never use for publishing)",
    )
    parser.add_argument(
        "--clean",
        action="store_true",
        help="Remove the output directory before writing",
    )
    parser.add_argument(
        "--skip-search",
        action="store_true",
        help="Do not build the client-side search index",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default="text",
        help="Log format (text|json)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-article debug messages",
    )
    parser.add_argument(
        "--query",
        default=None,
        help="Search an already built index in --output-dir and print matches",
    )
    return parser.parse_args(argv)


def _append_failure(
    result: BuildResult, stage: str, error_type: str, message: str, source: str = ""
) -> None:
    result.failures.append(
        StageFailure(stage=stage, error_type=error_type, message=message, source=source)
    )


def _finish(result: BuildResult, started: float, reason: str, success: bool = False) -> BuildResult:
    result.success = success
    result.exit_reason = reason
    result.duration_seconds = round(time.perf_counter() - started, 3)
    return result


def _write_json(path: str, data: dict) -> None:
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(data, handle, ensure_ascii=False, indent=2)


def _emit_summary(result: BuildResult, report_dir: str) -> None:
    os.makedirs(report_dir, exist_ok=True)
    summary_path = os.path.join(report_dir, f"build-summary-{result.date}.json")
    _write_json(summary_path, asdict(result))
    logger.info("[SUMMARY] Wrote build summary: %s", summary_path, extra={"stage": "summary"})

    if not result.success:
        error_path = os.path.join(report_dir, f"error-{result.date}.json")
        _write_json(
            error_path,
            {
                "run_id": result.run_id,
                "date": result.date,
                "exit_reason": result.exit_reason,
                "failures": [asdict(item) for item in result.failures],
            },
        )
        logger.info("[SUMMARY] Wrote error report: %s", error_path, extra={"stage": "summary"})


def _collect_warnings(articles: list) -> list[str]:
    """Non-fatal content issues: unknown taxonomy references and icon keys."""
    from src.icons import is_known_icon
    from src.listing import unknown_groups

    warnings: list[str] = []
    for article in unknown_groups(articles, ARTICLE_GROUPS):
        warnings.append(f"{article.id}: unknown group '{article.group}', left out of collections")
    for article in articles:
        if not is_known_icon(article.icon):
            warnings.append(f"{article.id}: unknown icon '{article.icon}', using default symbol")
    for item in warnings:
        logger.warning("[CONTENT] %s", item, extra={"stage": "content", "event": "content_warning"})
    return warnings


def run_build(args: argparse.Namespace) -> BuildResult:
    """
    Build the whole site.

    Steps:
    1. Validate config
    2. Load & validate content (fail-fast; nothing is written on failure)
    3. Render pages
    4. Feed & sitemap
    5. Search index
    """
    today = date.today().strftime("%Y-%m-%d")
    run_id = f"{today}-{int(time.time())}"
    started = time.perf_counter()
    result = BuildResult(run_id=run_id, date=today, output_dir=args.output_dir)

    logger.info("=" * 60)
    logger.info("Site build | date=%s run_id=%s", today, run_id)
    logger.info(
        "options content_dir=%s output_dir=%s drafts=%s clean=%s skip_search=%s",
        args.content_dir,
        args.output_dir,
        args.drafts,
        args.clean,
        args.skip_search,
    )

    # 1. Config
    valid, config_errors = validate_config()
    if not valid:
        for item in config_errors:
            _append_failure(result, "config", "CONFIG", item)
            logger.error("[CONFIG] %s", item, extra={"stage": "config", "event": "CONFIG"})
        return _finish(result, started, "configuration validation failed")

    # 2. Content
    from src.content.errors import ContentError
    from src.content.loader import load_articles, load_page
    from src.listing import published

    content_root = Path(args.content_dir)
    try:
        articles = load_articles(content_root / "articles")
        about_page = load_page(content_root / "pages" / "about.md")
    except ContentError as exc:
        _append_failure(result, "content", exc.category, exc.message, source=exc.source)
        logger.error(
            "[CONTENT] Build aborted: %s",
            exc,
            extra={"stage": "content", "event": exc.category, "source": exc.source},
        )
        return _finish(result, started, "content validation failed")

    result.loaded_count = len(articles)
    public_articles = articles if args.drafts else published(articles)
    result.published_count = len(public_articles)
    result.draft_count = len(articles) - len(published(articles))
    if args.drafts and result.draft_count:
        logger.warning("[CONTENT] Preview mode: %s draft(s) will be rendered", result.draft_count)
    result.warnings = _collect_warnings(public_articles)

    # 3. Render
    from src.render.feed import FeedError, feed_items, render_rss, render_sitemap, verify_feed
    from src.render.pages import write_file, write_site

    output_dir = Path(args.output_dir)
    if args.clean and output_dir.exists():
        shutil.rmtree(output_dir)
        logger.info("[RENDER] Cleaned %s", output_dir, extra={"stage": "render"})

    try:
        written = write_site(public_articles, output_dir, about_page=about_page)
    except OSError as exc:
        _append_failure(result, "render", "IO", str(exc))
        return _finish(result, started, "render stage failed")
    result.pages_written = len(written)

    # 4. Feed & sitemap (drafts never reach the feed, even in preview mode)
    try:
        rss = render_rss(articles)
        result.feed_items = verify_feed(rss, expected_count=len(feed_items(articles)))
        write_file(output_dir / "rss.xml", rss)
        write_file(output_dir / "sitemap.xml", render_sitemap(articles))
    except FeedError as exc:
        _append_failure(result, "feed", exc.category, exc.message)
        return _finish(result, started, "feed stage failed")

    # 5. Search index
    if args.skip_search:
        logger.info("[SEARCH] Skipping search index (--skip-search)", extra={"stage": "search"})
    else:
        from src.search.indexer import build_search_index

        result.indexed_count = len(build_search_index(output_dir, pages=written))

    return _finish(result, started, "completed", success=True)


def run_query(args: argparse.Namespace) -> int:
    from src.search.indexer import INDEX_FILENAME, load_search_index, search

    index_path = Path(args.output_dir) / INDEX_FILENAME
    if not index_path.exists():
        logger.error("[SEARCH] No index at %s, build the site first", index_path)
        return 1
    hits = search(load_search_index(index_path), args.query)
    for hit in hits:
        print(f"{hit['url']}\t{hit['title']}")
    logger.info("[SEARCH] %s result(s) for '%s'", len(hits), args.query)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_format, verbose=args.verbose)

    if args.query:
        return run_query(args)

    try:
        result = run_build(args)
    except Exception as exc:
        logger.critical("Build failed unexpectedly: %s", exc)
        traceback.print_exc()
        today = date.today().strftime("%Y-%m-%d")
        crash_result = BuildResult(
            run_id=f"{today}-{int(time.time())}",
            date=today,
            output_dir=args.output_dir,
            success=False,
            exit_reason="unhandled exception",
        )
        _append_failure(crash_result, "runtime", "RUNTIME", str(exc))
        _emit_summary(crash_result, args.report_dir)
        return 1

    _emit_summary(result, args.report_dir)
    if result.success:
        logger.info(
            "Build complete | loaded=%s published=%s drafts=%s pages=%s feed=%s indexed=%s "
            "warnings=%s duration=%.2fs",
            result.loaded_count,
            result.published_count,
            result.draft_count,
            result.pages_written,
            result.feed_items,
            result.indexed_count,
            len(result.warnings),
            result.duration_seconds,
        )
        return 0

    logger.error(
        "Build failed | reason=%s failures=%s",
        result.exit_reason,
        len(result.failures),
    )
    return 1


if __name__ == "__main__":
    sys.exit(main())
