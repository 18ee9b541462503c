"""Front matter extraction for Inkwell.

A content file looks like::

    ---
    Title: Hello
    CreatedAt: 2023-06-01
    ---
    Markdown body

The separator must appear exactly twice, so the file splits into an empty
preamble, the YAML front matter and the Markdown body.

Key functions:
- split_frontmatter: Split raw text into front matter and body.
- parse_frontmatter: Parse the YAML block into a mapping.
- extract_fields: Map front matter keys onto Post field values.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Any

import yaml

from .errors import MalformedContentError
from .utils import ZERO_TIME

SEPARATOR = "---"

# Front matter key -> Post field
FIELD_NAMES = {
    "Author": "author",
    "Title": "title",
    "Synopsis": "synopsis",
    "CreatedAt": "created_at",
    "Tags": "tags",
    "ArticleID": "article_id",
}


def split_frontmatter(text: str, path: Path | None = None) -> tuple[str, str]:
    """Split raw file content into its front matter and body.

    Args:
        text: Raw file content.
        path: Source file, used for error context.

    Returns:
        Tuple of (front matter text, body text).

    Raises:
        MalformedContentError: If the separator does not occur exactly twice.
    """
    segments = text.split(SEPARATOR)
    if len(segments) != 3:
        raise MalformedContentError(
            f"expected 2 '{SEPARATOR}' separators, found {len(segments) - 1}",
            source_path=path,
        )
    _, frontmatter, body = segments
    return frontmatter, body


def parse_frontmatter(block: str, path: Path | None = None) -> dict[str, Any]:
    """Parse a YAML front matter block.

    Args:
        block: Text between the two separators.
        path: Source file, used for error context.

    Returns:
        Parsed mapping; empty for an empty block.

    Raises:
        MalformedContentError: On YAML errors or when the block is not a mapping.
    """
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        raise MalformedContentError(
            f"invalid front matter: {exc}", source_path=path, original_error=exc
        ) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MalformedContentError(
            "front matter must be a mapping", source_path=path
        )
    return data


def parse_timestamp(value: Any, path: Path | None = None) -> datetime:
    """Normalize a CreatedAt value to an aware UTC datetime.

    Accepts YAML dates and timestamps as well as ISO 8601 strings. Naive
    values are taken as UTC.
    """
    if value is None or value == "":
        return ZERO_TIME
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as exc:
            raise MalformedContentError(
                f"invalid CreatedAt timestamp: {value!r}",
                source_path=path,
                original_error=exc,
            ) from exc
    else:
        raise MalformedContentError(
            f"invalid CreatedAt timestamp: {value!r}", source_path=path
        )
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError as exc:
        raise MalformedContentError(
            f"CreatedAt timestamp out of range: {value!r}",
            source_path=path,
            original_error=exc,
        ) from exc


def _parse_tags(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        return tuple(str(tag) for tag in value if tag is not None)
    return (str(value),)


def _parse_article_id(value: Any, path: Path | None) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise MalformedContentError(f"invalid ArticleID: {value!r}", source_path=path)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise MalformedContentError(
            f"invalid ArticleID: {value!r}", source_path=path, original_error=exc
        ) from exc


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def extract_fields(frontmatter: dict[str, Any], path: Path | None = None) -> dict[str, Any]:
    """Map recognized front matter keys to Post keyword arguments.

    Unknown keys are ignored and missing keys take zero values; nothing is
    required.

    Args:
        frontmatter: Parsed front matter mapping.
        path: Source file, used for error context.

    Returns:
        Dictionary of Post field values.
    """
    return {
        "author": _as_text(frontmatter.get("Author")),
        "title": _as_text(frontmatter.get("Title")),
        "synopsis": _as_text(frontmatter.get("Synopsis")),
        "created_at": parse_timestamp(frontmatter.get("CreatedAt"), path),
        "tags": _parse_tags(frontmatter.get("Tags")),
        "article_id": _parse_article_id(frontmatter.get("ArticleID"), path),
    }


def build_frontmatter(
    *,
    author: str,
    title: str,
    synopsis: str = "",
    created_at: datetime | None = None,
    tags: list[str] | None = None,
    article_id: int | None = None,
) -> str:
    """Render a front matter block for a new article.

    Returns:
        Text starting and ending with the separator line.
    """
    fields: dict[str, Any] = {
        "Author": author,
        "Title": title,
        "Synopsis": synopsis,
        "CreatedAt": (created_at or datetime.now(timezone.utc)).isoformat(
            timespec="seconds"
        ),
        "Tags": list(tags or []),
    }
    if article_id is not None:
        fields["ArticleID"] = article_id
    dumped = yaml.safe_dump(
        fields, allow_unicode=True, sort_keys=False, default_flow_style=False
    )
    return f"{SEPARATOR}\n{dumped}{SEPARATOR}\n"
