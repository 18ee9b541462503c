"""Command-line interface for Inkwell.

This module defines the CLI commands using Click framework.

Commands:
- new: Scaffold a new Inkwell blog.
- serve: Run the blog server.
- post: Create a new article interactively.
- posts: List articles, newest first.
"""

from __future__ import annotations

import shutil
from dataclasses import asdict
from pathlib import Path

import click
import questionary

from . import __version__
from .config import Config, ConfigError, load_config
from .content import ContentLoader
from .errors import InkwellError
from .extractors import SEPARATOR, build_frontmatter
from .log import configure_logging
from .utils import friendly_date, slugify

# Path to the project skeleton copied by `inkwell new`
_SCAFFOLD_DIR = Path(__file__).parent / "scaffold"


@click.group()
@click.version_option(version=__version__, prog_name="inkwell")
def cli():
    """Inkwell blog server."""


@cli.command()
@click.argument("name")
def new(name: str):
    """Scaffold a new Inkwell blog."""
    target = Path(name).resolve()
    if target.exists() and any(target.iterdir()):
        raise click.ClickException(
            f"Refusing to initialize into non-empty directory: {target}"
        )
    _scaffold(target)
    click.echo(f"New Inkwell blog created at {target}")


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (defaults to inkwell.yaml in the current directory)",
)
@click.option("--address", help="host:port to listen on (overrides config)")
@click.option("--env", "environment", help="Environment name (overrides config)")
def serve(config_path: Path | None, address: str | None, environment: str | None):
    """Run the blog server."""
    project_root = Path.cwd()
    from .server import Application, BlogServer

    try:
        config = load_config(project_root, config_path)
        overrides = {}
        if address:
            overrides["address"] = address
        if environment:
            overrides["environment"] = environment
        if overrides:
            config = _override(config, overrides, project_root)
        configure_logging(config.environment)
        app = Application.create(config)
    except (ConfigError, InkwellError) as exc:
        _fail("Server failed to start:", str(exc))

    server = BlogServer(app)
    server.start()


@cli.command()
def post():
    """Create a new article interactively."""
    project_root = Path.cwd()
    try:
        config = load_config(project_root)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from None
    articles_dir = config.articles_dir
    if not articles_dir.is_dir():
        raise click.ClickException(
            f"No articles directory found at {articles_dir}. "
            "Run this command from an Inkwell project root."
        )

    title = _ask(
        questionary.text(
            "Title:",
            validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
            style=_questionary_style(),
        )
    ).strip()
    slug = slugify(title)
    if not slug:
        raise click.ClickException(f"Cannot derive a file name from title: {title!r}")
    target_path = articles_dir / f"{slug}.md"
    if target_path.exists():
        raise click.ClickException(
            f"File already exists: {target_path.relative_to(project_root)}"
        )

    author = _ask(questionary.text("Author:", style=_questionary_style())).strip()
    synopsis = _ask(questionary.text("Synopsis:", style=_questionary_style())).strip()
    tags_answer = _ask(
        questionary.text("Tags (comma separated):", style=_questionary_style())
    )
    tags = [tag.strip() for tag in tags_answer.split(",") if tag.strip()]

    for label, value in [("Title", title), ("Author", author), ("Synopsis", synopsis)] + [
        ("Tags", tag) for tag in tags
    ]:
        if SEPARATOR in value:
            raise click.ClickException(f"{label} must not contain '{SEPARATOR}'")

    header = build_frontmatter(
        author=author,
        title=title,
        synopsis=synopsis,
        tags=tags,
        article_id=_next_article_id(articles_dir),
    )
    target_path.write_text(f"{header}\n# {title}\n\n", encoding="utf-8")
    click.echo(f"Created {target_path.relative_to(project_root)}")


@cli.command("posts")
def list_posts():
    """List articles, newest first."""
    project_root = Path.cwd()
    try:
        config = load_config(project_root)
        posts = ContentLoader(config.articles_dir, strict=True).load_all()
    except (ConfigError, InkwellError) as exc:
        _fail("Could not load posts:", str(exc))
    for item in posts:
        date = friendly_date(item.created_at) or "undated"
        click.echo(f"{date:<12} {item.slug:<32} {item.title}")


def _override(config: Config, values: dict, project_root: Path) -> Config:
    return Config.from_mapping({**asdict(config), **values}, project_root)


def _next_article_id(articles_dir: Path) -> int:
    """Return one more than the highest ArticleID among readable articles."""
    posts = ContentLoader(articles_dir, strict=False).load_all()
    return max((p.article_id for p in posts), default=0) + 1


def _ask(question) -> str:
    answer = question.ask()
    if answer is None:
        raise click.Abort()
    return answer


def _fail(headline: str, message: str):
    click.echo(click.style(headline, fg="red", bold=True), err=True)
    click.echo(click.style(f"  Error: {message}", fg="white"), err=True)
    raise SystemExit(1)


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()


def _scaffold(root: Path) -> None:
    """Copy the project skeleton into ``root``.

    Args:
        root: Root directory for the new project.
    """
    for src_path in _SCAFFOLD_DIR.rglob("*"):
        if src_path.is_dir() or "__pycache__" in src_path.parts:
            continue
        rel_path = src_path.relative_to(_SCAFFOLD_DIR)
        dest_path = root / rel_path
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_path, dest_path)
