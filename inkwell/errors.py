"""Error types for Inkwell.

Every failure in the content pipeline is request-scoped: the server catches
these and turns them into a 404 or 500 response instead of exiting.

Key classes:
- InkwellError: Base class carrying the offending file and original error.
- MalformedContentError: Front matter segmentation or parse failure.
- ContentNotFoundError: Requested post or directory does not exist.
- UnknownTemplateError: Page name missing from the template cache.
- TemplateExecutionError: Template failed to compile or render.
"""

from __future__ import annotations

from pathlib import Path


class InkwellError(Exception):
    """Base error with optional file context.

    Attributes:
        message: Human-readable error message.
        source_path: Path to the file that caused the error, if any.
        original_error: The original exception that was caught.
        status: HTTP status the server should answer with.
    """

    status = 500

    def __init__(
        self,
        message: str,
        source_path: Path | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.source_path = source_path
        self.original_error = original_error
        if source_path is not None:
            super().__init__(f"{source_path}: {message}")
        else:
            super().__init__(message)


class MalformedContentError(InkwellError):
    """A content file could not be split or its front matter parsed."""


class ContentNotFoundError(InkwellError):
    """No content file matches the requested identifier."""

    status = 404


class UnknownTemplateError(InkwellError):
    """The requested page name is not in the template cache."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"the template {name} does not exist")


class TemplateExecutionError(InkwellError):
    """A template failed at compile time or while rendering."""
