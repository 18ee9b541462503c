"""HTTP server for Inkwell.

Serves the blog pages from the template cache and static files from the
static directory:
- ``/`` redirects to ``/home``.
- ``/home``, ``/posts`` and ``/post/<slug>`` render page templates.
- ``/static/...`` serves files, rejecting directory listings with a 404.

Pages are rendered to bytes before anything is written, so a failed render
produces a clean error response instead of half a page.

Key classes:
- Response: Status, headers and body of a rendered reply.
- Application: Request context built once at startup and never mutated.
- BlogRequestHandler: HTTP request handler that dispatches to the Application.
- BlogServer: Threaded HTTP server with graceful shutdown on SIGINT/SIGTERM.
"""

from __future__ import annotations

import functools
import logging
import signal
import threading
import traceback
from dataclasses import dataclass, field
from http import HTTPStatus
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from urllib.parse import parse_qs, unquote, urlsplit

from . import __version__
from .config import Config
from .content import ContentLoader
from .errors import ContentNotFoundError
from .templates import TemplateCache, TemplateData

STATIC_PREFIX = "/static/"
HTML_CONTENT_TYPE = "text/html; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
ALLOWED_METHODS = ("GET", "HEAD")


@dataclass(frozen=True)
class Response:
    """A fully rendered HTTP reply."""

    status: int
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def html(cls, body: bytes, status: int = HTTPStatus.OK) -> Response:
        return cls(status, body, {"Content-Type": HTML_CONTENT_TYPE})

    @classmethod
    def text(cls, message: str, status: int) -> Response:
        return cls(status, message.encode("utf-8"), {"Content-Type": TEXT_CONTENT_TYPE})

    @classmethod
    def redirect(cls, location: str) -> Response:
        return cls(HTTPStatus.TEMPORARY_REDIRECT, b"", {"Location": location})


@dataclass(frozen=True)
class Application:
    """Everything a request handler needs, created once at startup.

    Attributes:
        config: Resolved configuration.
        templates: Compiled page templates.
        loader: Content loader for the articles directory.
        logger: Logger for request errors.
    """

    config: Config
    templates: TemplateCache
    loader: ContentLoader
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    @classmethod
    def create(cls, config: Config) -> Application:
        """Build the template cache and content loader for ``config``.

        Raises:
            TemplateExecutionError: If a template fails to compile.
        """
        templates = TemplateCache.build(config.templates_dir)
        loader = ContentLoader(config.articles_dir, strict=config.strict_content)
        return cls(config=config, templates=templates, loader=loader)

    def handle(self, method: str, target: str) -> Response:
        """Route a request to its page and render it.

        Args:
            method: HTTP method.
            target: Request target, path plus optional query string.

        Returns:
            Response ready to be written.
        """
        if method not in ALLOWED_METHODS:
            status = HTTPStatus.METHOD_NOT_ALLOWED
            return Response(
                status,
                status.phrase.encode("utf-8"),
                {"Content-Type": TEXT_CONTENT_TYPE, "Allow": ", ".join(ALLOWED_METHODS)},
            )

        url = urlsplit(target)
        path = unquote(url.path)
        try:
            if path == "/":
                return Response.redirect("/home")
            if path == "/home":
                return self.render("home.page.html")
            if path == "/posts":
                return self.render(
                    "posts.page.html", TemplateData(posts=self.loader.load_all())
                )
            if path == "/post" or path.startswith("/post/"):
                slug = path[len("/post/"):] if path.startswith("/post/") else ""
                if not slug:
                    slug = parse_qs(url.query).get("id", [""])[0]
                return self.render(
                    "post.page.html", TemplateData(post=self.loader.load(slug))
                )
        except ContentNotFoundError as exc:
            self.logger.debug("not found: %s", exc)
            return self.not_found()
        except Exception as exc:
            return self.server_error(exc)
        return self.not_found()

    def render(self, name: str, data: TemplateData | None = None) -> Response:
        """Render a cached page into an HTML response."""
        return Response.html(self.templates.render(name, data))

    def server_error(self, exc: BaseException) -> Response:
        """Log the error with its trace and build a 500 response.

        Development responses include the trace; others only the status text.
        """
        trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        self.logger.error("server error occurred\n%s", trace)
        if self.config.is_development:
            return Response.text(trace, HTTPStatus.INTERNAL_SERVER_ERROR)
        return self.client_error(HTTPStatus.INTERNAL_SERVER_ERROR)

    def client_error(self, status: HTTPStatus) -> Response:
        return Response.text(status.phrase, status)

    def not_found(self) -> Response:
        return self.client_error(HTTPStatus.NOT_FOUND)


class BlogRequestHandler(SimpleHTTPRequestHandler):
    """HTTP request handler that renders pages and serves static files."""

    server_version = f"Inkwell/{__version__}"

    def __init__(self, *args, app: Application, **kwargs):
        self.app = app
        super().__init__(*args, **kwargs)

    def do_GET(self):
        if self.path.startswith(STATIC_PREFIX):
            return super().do_GET()
        return self._dispatch()

    def do_HEAD(self):
        if self.path.startswith(STATIC_PREFIX):
            return super().do_HEAD()
        return self._dispatch()

    def do_POST(self):
        return self._dispatch()

    def do_PUT(self):
        return self._dispatch()

    def do_DELETE(self):
        return self._dispatch()

    def do_PATCH(self):
        return self._dispatch()

    def _dispatch(self):
        response = self.app.handle(self.command, self.path)
        self.write_response(response)

    def write_response(self, response: Response) -> None:
        """Send a fully rendered response; HEAD requests get headers only."""
        self.send_response(response.status)
        for name, value in response.headers.items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(response.body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(response.body)

    def translate_path(self, path):
        # Map /static/<file> onto the static directory.
        if path.startswith(STATIC_PREFIX):
            path = "/" + path[len(STATIC_PREFIX):]
        return super().translate_path(path)

    def list_directory(self, path):
        self.write_response(self.app.not_found())
        return None

    def send_head(self):
        if Path(self.translate_path(self.path)).exists():
            return super().send_head()
        self.write_response(self.app.not_found())
        return None

    def log_message(self, format, *args):
        self.app.logger.debug("%s - %s", self.address_string(), format % args)


class BlogServer:
    """Threaded HTTP server for an Application.

    Attributes:
        app: Application context shared by every request.
    """

    def __init__(self, app: Application):
        self.app = app
        self.logger = app.logger
        self._httpd: ThreadingHTTPServer | None = None

    def create_server(self) -> ThreadingHTTPServer:
        handler = functools.partial(
            BlogRequestHandler, app=self.app, directory=str(self.app.config.static_dir)
        )
        config = self.app.config
        return ThreadingHTTPServer((config.host, config.port), handler)

    def start(self) -> None:  # pragma: no cover - integration path
        """Serve until SIGINT or SIGTERM, then shut down gracefully."""
        self._httpd = self.create_server()
        signal.signal(signal.SIGINT, self._on_signal)
        signal.signal(signal.SIGTERM, self._on_signal)
        self.logger.info(
            "starting server environment=%s addr=%s",
            self.app.config.environment,
            self.app.config.address,
        )
        try:
            self._httpd.serve_forever()
        finally:
            self._httpd.server_close()
        self.logger.info("server stopped addr=%s", self.app.config.address)

    def stop(self) -> None:
        """Stop serving; safe to call from any thread but the serving one."""
        if self._httpd is not None:
            self._httpd.shutdown()

    def _on_signal(self, signum, frame):
        self.logger.info("shutting down server signal=%s", signal.Signals(signum).name)
        # shutdown() blocks until serve_forever returns, so it must not run
        # on the thread that is serving.
        threading.Thread(target=self.stop, daemon=True).start()
