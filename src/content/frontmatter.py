"""YAML front-matter parsing for Markdown content files."""

import yaml

from src.content.errors import ContentError

DELIMITER = "---"


def parse_front_matter(text: str, source: str = "") -> tuple[dict, str]:
    """
    Split a document into its front-matter mapping and Markdown body.

    The document must open with a `---` line; the block ends at the next
    `---` line and is parsed with `yaml.safe_load`.
    """
    clean = text.lstrip("\ufeff")
    lines = clean.splitlines()
    if not lines or lines[0].strip() != DELIMITER:
        raise ContentError("FRONT_MATTER", "missing front-matter block", source)

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == DELIMITER:
            end = i
            break
    if end is None:
        raise ContentError("FRONT_MATTER", "unterminated front-matter block", source)

    try:
        meta = yaml.safe_load("\n".join(lines[1:end]))
    except yaml.YAMLError as exc:
        raise ContentError("FRONT_MATTER", f"invalid YAML: {exc}", source) from exc

    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise ContentError("FRONT_MATTER", "front-matter must be a mapping", source)

    body = "\n".join(lines[end + 1 :]).strip("\n")
    return meta, body
