"""Inkwell blog server.

This package serves a small blog from a directory of Markdown articles with
YAML front matter, rendered through Jinja2 page templates that are compiled
once at startup.

The main entry point is the CLI module, which provides commands for
scaffolding a new blog, writing posts and running the server.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
