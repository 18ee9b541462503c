"""Content loading for Inkwell.

This module turns Markdown articles with YAML front matter into Post records.
Nothing is cached: every call reads the files again, so concurrent requests
share no mutable state and edits show up on the next request.

Key classes:
- Post: Immutable record for one article.
- ContentLoader: Loads one post, a post by slug, or every post newest first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from .errors import ContentNotFoundError, InkwellError, MalformedContentError
from .extractors import extract_fields, parse_frontmatter, split_frontmatter
from .renderers import MarkdownRenderer
from .utils import ZERO_TIME, is_content_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Post:
    """An article parsed from one content file.

    Attributes:
        author: Author name.
        title: Article title.
        synopsis: Short summary shown in listings.
        created_at: Publication timestamp (UTC).
        tags: Ordered tags.
        content: Rendered HTML body.
        article_id: Numeric id from the front matter, 0 when absent.
        slug: File stem, used as the post identifier in URLs.
        path: Path to the source file.
        frontmatter: Raw parsed front matter.
    """

    author: str = ""
    title: str = ""
    synopsis: str = ""
    created_at: datetime = ZERO_TIME
    tags: tuple[str, ...] = ()
    content: str = ""
    article_id: int = 0
    slug: str = ""
    path: Path | None = None
    frontmatter: dict[str, Any] = field(default_factory=dict, compare=False)


class ContentLoader:
    """Loads posts from an articles directory.

    Attributes:
        articles_dir: Directory containing Markdown articles.
        renderer: Markdown to HTML converter.
        strict: When True a malformed file fails the whole listing; when
            False it is skipped with a warning.
    """

    def __init__(
        self,
        articles_dir: Path,
        renderer: MarkdownRenderer | None = None,
        strict: bool = True,
    ):
        self.articles_dir = Path(articles_dir)
        self.renderer = renderer or MarkdownRenderer()
        self.strict = strict

    def iter_files(self) -> list[Path]:
        """Return content files in the articles directory, sorted by name.

        Raises:
            ContentNotFoundError: If the articles directory does not exist.
        """
        if not self.articles_dir.is_dir():
            raise ContentNotFoundError(
                "articles directory not found", source_path=self.articles_dir
            )
        return sorted(
            path
            for path in self.articles_dir.iterdir()
            if path.is_file()
            and not path.name.startswith(".")
            and is_content_file(path)
        )

    def load_one(self, path: Path) -> Post:
        """Parse a single content file into a Post.

        Args:
            path: Path to a Markdown file with front matter.

        Returns:
            Post with rendered HTML content.

        Raises:
            ContentNotFoundError: If the file does not exist.
            MalformedContentError: If the front matter cannot be split or parsed.
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ContentNotFoundError(
                "content file not found", source_path=path, original_error=exc
            ) from exc
        except UnicodeDecodeError as exc:
            raise MalformedContentError(
                "content file is not valid UTF-8", source_path=path, original_error=exc
            ) from exc

        block, body = split_frontmatter(raw, path)
        frontmatter = parse_frontmatter(block, path)
        fields = extract_fields(frontmatter, path)

        return Post(
            content=self.renderer.render(body),
            slug=path.stem,
            path=path,
            frontmatter=frontmatter,
            **fields,
        )

    def load_all(self) -> list[Post]:
        """Load every post, most recent first.

        Posts with equal timestamps keep file-name order.

        Returns:
            List of posts sorted by ``created_at`` descending.
        """
        posts: list[Post] = []
        for path in self.iter_files():
            try:
                posts.append(self.load_one(path))
            except InkwellError as exc:
                if self.strict:
                    raise
                logger.warning("skipping %s: %s", path.name, exc.message)
        posts.sort(key=lambda post: post.created_at, reverse=True)
        return posts

    def resolve(self, slug: str) -> Path:
        """Resolve a post identifier to its content file.

        Only files that the listing would show are candidates, so every slug
        returned by ``load_all`` resolves here.

        Raises:
            ContentNotFoundError: If no listed file has ``slug`` as its stem.
        """
        for path in self.iter_files():
            if path.stem == slug:
                return path
        raise ContentNotFoundError(f"no post named {slug!r}")

    def load(self, slug: str) -> Post:
        """Load the post whose file stem is ``slug``."""
        return self.load_one(self.resolve(slug))
