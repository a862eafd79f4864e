import json
import logging
from argparse import Namespace
from pathlib import Path

import main
from src.search.indexer import INDEX_FILENAME


def _article(root: Path, name: str, front: str, body: str = "Some body text about kilns.") -> None:
    path = root / "articles" / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"---\n{front.strip()}\n---\n\n{body}\n", encoding="utf-8")


def _front(title: str, date: str, extra: str = "") -> str:
    return (
        f"title: {title}\n"
        f"date: {date}\n"
        "category: hardware\n"
        "tags: [PID, ESP32]\n"
        "icon: flame\n"
        "description: Notes.\n"
        "group: side-projects\n"
        f"{extra}"
    )


def _site(tmp_path: Path) -> Path:
    content = tmp_path / "content"
    _article(content, "first.md", _front("First", "2024-01-01"))
    _article(content, "second.md", _front("Second", "2024-02-01"))
    _article(content, "secret.md", _front("Secret", "2024-03-01", "draft: true\n"))
    pages = content / "pages"
    pages.mkdir(parents=True)
    (pages / "about.md").write_text("---\ntitle: About me\n---\n\nHello.\n", encoding="utf-8")
    return content


def _args(tmp_path: Path, content: Path, **overrides) -> Namespace:
    values = {
        "content_dir": str(content),
        "output_dir": str(tmp_path / "dist"),
        "report_dir": str(tmp_path / "reports"),
        "drafts": False,
        "clean": False,
        "skip_search": False,
        "log_format": "text",
        "query": None,
    }
    values.update(overrides)
    return Namespace(**values)


def test_run_build_writes_site_feed_and_index(tmp_path: Path):
    content = _site(tmp_path)
    result = main.run_build(_args(tmp_path, content))

    assert result.success
    assert result.exit_reason == "completed"
    assert result.loaded_count == 3
    assert result.published_count == 2
    assert result.draft_count == 1
    assert result.pages_written == 6
    assert result.feed_items == 2
    assert result.indexed_count == 2

    dist = tmp_path / "dist"
    for route in ["index.html", "articles/index.html", "articles/first/index.html", "about/index.html", "404.html"]:
        assert (dist / route).exists(), route
    assert not (dist / "articles" / "secret").exists()
    assert "Secret" not in (dist / "rss.xml").read_text(encoding="utf-8")
    assert "/articles/secret/" not in (dist / "sitemap.xml").read_text(encoding="utf-8")
    assert (dist / INDEX_FILENAME).exists()


def test_run_build_preview_renders_drafts_but_keeps_feed_clean(tmp_path: Path):
    content = _site(tmp_path)
    result = main.run_build(_args(tmp_path, content, drafts=True))

    assert result.success
    assert result.published_count == 3
    assert result.feed_items == 2
    dist = tmp_path / "dist"
    assert (dist / "articles" / "secret" / "index.html").exists()
    assert "Secret" not in (dist / "rss.xml").read_text(encoding="utf-8")


def test_run_build_stops_before_writing_on_invalid_content(tmp_path: Path):
    content = _site(tmp_path)
    _article(content, "broken.md", "date: 2024-04-01\ncategory: x\n")

    result = main.run_build(_args(tmp_path, content))

    assert not result.success
    assert result.exit_reason == "content validation failed"
    assert len(result.failures) == 1
    assert result.failures[0].stage == "content"
    assert result.failures[0].source.endswith("broken.md")
    assert "title" in result.failures[0].message
    assert not (tmp_path / "dist").exists()


def test_run_build_rejects_invalid_config(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(main, "validate_config", lambda: (False, ["SITE_URL must be http(s)"]))
    result = main.run_build(_args(tmp_path, _site(tmp_path)))

    assert not result.success
    assert result.exit_reason == "configuration validation failed"
    assert result.failures[0].error_type == "CONFIG"
    assert not (tmp_path / "dist").exists()


def test_run_build_skip_search(tmp_path: Path):
    result = main.run_build(_args(tmp_path, _site(tmp_path), skip_search=True))

    assert result.success
    assert result.indexed_count == 0
    assert not (tmp_path / "dist" / INDEX_FILENAME).exists()


def test_run_build_clean_removes_stale_output(tmp_path: Path):
    stale = tmp_path / "dist" / "old" / "index.html"
    stale.parent.mkdir(parents=True)
    stale.write_text("old", encoding="utf-8")

    result = main.run_build(_args(tmp_path, _site(tmp_path), clean=True))

    assert result.success
    assert not stale.exists()


def test_run_build_warns_about_unknown_group(tmp_path: Path):
    content = _site(tmp_path)
    _article(content, "odd.md", _front("Odd", "2024-05-01").replace("side-projects", "nowhere"))

    result = main.run_build(_args(tmp_path, content))

    assert result.success
    assert any("unknown group 'nowhere'" in item for item in result.warnings)


def test_main_writes_summary_and_exit_codes(tmp_path: Path):
    content = _site(tmp_path)
    argv = [
        "--content-dir", str(content),
        "--output-dir", str(tmp_path / "dist"),
        "--report-dir", str(tmp_path / "reports"),
    ]
    assert main.main(argv) == 0

    summaries = list((tmp_path / "reports").glob("build-summary-*.json"))
    assert len(summaries) == 1
    data = json.loads(summaries[0].read_text(encoding="utf-8"))
    assert data["success"] is True
    assert data["published_count"] == 2
    assert not list((tmp_path / "reports").glob("error-*.json"))

    _article(content, "broken.md", "title: Broken\n")
    assert main.main(argv) == 1
    errors = list((tmp_path / "reports").glob("error-*.json"))
    assert len(errors) == 1
    report = json.loads(errors[0].read_text(encoding="utf-8"))
    assert report["exit_reason"] == "content validation failed"


def test_main_query_searches_built_index(tmp_path: Path, capsys):
    content = _site(tmp_path)
    base = ["--output-dir", str(tmp_path / "dist"), "--report-dir", str(tmp_path / "reports")]
    assert main.main(["--query", "kilns", *base]) == 1

    assert main.main(["--content-dir", str(content), *base]) == 0
    capsys.readouterr()
    assert main.main(["--query", "kilns", *base]) == 0
    out = capsys.readouterr().out
    assert "/articles/first/" in out
    assert "/articles/second/" in out


def test_parse_args_defaults():
    args = main.parse_args([])
    assert args.drafts is False
    assert args.clean is False
    assert args.skip_search is False
    assert args.log_format == "text"
    assert args.query is None


def test_run_build_reports_out_of_range_date_as_validation_failure(tmp_path: Path):
    content = _site(tmp_path)
    _article(content, "far-future.md", _front("Far", ".inf"))

    result = main.run_build(_args(tmp_path, content))

    assert not result.success
    assert result.exit_reason == "content validation failed"
    assert result.failures[0].error_type == "VALIDATION"
    assert result.failures[0].source.endswith("far-future.md")
    assert not (tmp_path / "dist").exists()


def test_preview_build_followed_by_public_build_drops_draft_pages(tmp_path: Path):
    content = _site(tmp_path)
    dist = tmp_path / "dist"

    preview = main.run_build(_args(tmp_path, content, drafts=True))
    assert preview.success
    assert (dist / "articles" / "secret" / "index.html").exists()

    public = main.run_build(_args(tmp_path, content))

    assert public.success
    assert public.indexed_count == 2
    assert not (dist / "articles" / "secret").exists()
    index = json.loads((dist / INDEX_FILENAME).read_text(encoding="utf-8"))
    assert sorted(entry["url"] for entry in index) == ["/articles/first/", "/articles/second/"]


def test_unpublishing_an_article_removes_its_page(tmp_path: Path):
    content = _site(tmp_path)
    dist = tmp_path / "dist"
    assert main.run_build(_args(tmp_path, content)).success
    assert (dist / "articles" / "second" / "index.html").exists()

    _article(content, "second.md", _front("Second", "2024-02-01", "draft: true\n"))
    assert main.run_build(_args(tmp_path, content)).success

    assert not (dist / "articles" / "second").exists()
    urls = [entry["url"] for entry in json.loads((dist / INDEX_FILENAME).read_text(encoding="utf-8"))]
    assert urls == ["/articles/first/"]


def test_json_log_formatter_carries_stage_context():
    formatter = main.build_log_formatter("json")
    record = logging.LogRecord("main", logging.ERROR, __file__, 1, "[CONTENT] boom", None, None)
    record.stage = "content"
    record.event = "VALIDATION"
    record.source = "articles/a.md"

    payload = json.loads(formatter.format(record))

    assert payload["stage"] == "content"
    assert payload["event"] == "VALIDATION"
    assert payload["source"] == "articles/a.md"
    assert payload["message"] == "[CONTENT] boom"


def test_text_log_formatter_is_plain():
    record = logging.LogRecord("main", logging.INFO, __file__, 1, "hello", None, None)
    assert main.build_log_formatter("text").format(record).endswith("[INFO] hello")
