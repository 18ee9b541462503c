"""Utility functions for Inkwell.

String helpers shared by the content loader, the template helpers and the CLI.

Key functions:
    slugify: Convert titles and file names to URL slugs.
    read_time: Estimate reading time in minutes.
    friendly_date: Format a timestamp for display.
    is_content_file: Check if a path is a Markdown article.
    is_page_template: Check if a path is an addressable page template.
    is_layout_template: Check if a path is a shared layout fragment.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from pathlib import Path

from markupsafe import Markup

CONTENT_EXTENSIONS = (".md", ".markdown")
WORDS_PER_MINUTE = 200

# Zero value for a missing CreatedAt field; sorts after every real date.
ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Convert text to a URL slug.

    Lowercases, drops non-ASCII characters, collapses every run of
    non-alphanumeric characters into a single hyphen and trims hyphens
    from both ends.

    Args:
        text: Title or file name.

    Returns:
        Slug made of lowercase ASCII alphanumerics joined by single hyphens.
        Empty when the text has no ASCII alphanumerics.

    Examples:
        >>> slugify("Hello, World!")
        'hello-world'

        >>> slugify("Crème Brûlée")
        'crme-brle'
    """
    lowered = str(text).lower()
    ascii_only = lowered.encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM_RE.sub("-", ascii_only).strip("-")


def count_words(text: str) -> int:
    """Count whitespace-separated words, ignoring HTML tags.

    Args:
        text: Plain text or rendered HTML.

    Returns:
        Number of words.
    """
    return len(Markup(str(text)).striptags().split())


def estimate_minutes(word_count: int) -> int:
    """Convert a word count into whole minutes, rounding any remainder up."""
    if word_count <= 0:
        return 0
    return math.ceil(word_count / WORDS_PER_MINUTE)


def read_time(text: str) -> int:
    """Estimate the reading time of a text in minutes.

    Assumes an average reading speed of 200 words per minute.

    Examples:
        >>> read_time("")
        0

        >>> read_time("word " * 201)
        2
    """
    return estimate_minutes(count_words(text))


def friendly_date(value: datetime | None) -> str:
    """Format a timestamp as ``02 Jan 2006`` in UTC.

    Returns an empty string for missing or zero timestamps.
    """
    if value is None or value == ZERO_TIME:
        return ""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%d %b %Y")


def is_content_file(path: Path) -> bool:
    """Check if a path is a Markdown article.

    Args:
        path: Path to check.

    Returns:
        True if the file has a .md or .markdown extension (case-insensitive).
    """
    return path.suffix.lower() in CONTENT_EXTENSIONS


def is_page_template(path: Path) -> bool:
    """Check if a path is a page template such as ``home.page.html``."""
    return len(path.suffixes) >= 2 and path.suffixes[-2] == ".page"


def is_layout_template(path: Path) -> bool:
    """Check if a path is a layout fragment such as ``base.layout.html``."""
    return len(path.suffixes) >= 2 and path.suffixes[-2] == ".layout"
