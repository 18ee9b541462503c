"""Configuration loading for Inkwell.

Settings come from ``inkwell.yaml`` in the project root, with defaults for
anything missing. The ``ENVIRONMENT`` and ``HTTP_SERVER_ADDRESS`` environment
variables override the file.

Key functions:
- load_config: Build a Config from the project root.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "inkwell.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "environment": "development",
    "address": "localhost:4000",
    "articles_dir": "articles",
    "templates_dir": "ui/html",
    "static_dir": "ui/static",
    "strict_content": True,
}

ENV_OVERRIDES = {
    "ENVIRONMENT": "environment",
    "HTTP_SERVER_ADDRESS": "address",
}


class ConfigError(ValueError):
    """Raised for unreadable or invalid configuration."""


@dataclass(frozen=True)
class Config:
    """Resolved server configuration.

    Attributes:
        environment: ``development`` shows error details in responses.
        address: ``host:port`` to listen on.
        articles_dir: Directory of Markdown articles.
        templates_dir: Directory of page and layout templates.
        static_dir: Directory served under ``/static/``.
        strict_content: Fail the post list on a malformed article.
    """

    environment: str
    address: str
    articles_dir: Path
    templates_dir: Path
    static_dir: Path
    strict_content: bool = True

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def host(self) -> str:
        return split_address(self.address)[0]

    @property
    def port(self) -> int:
        return split_address(self.address)[1]

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any], project_root: Path) -> Config:
        """Build a Config from raw values, resolving directories against the root."""
        merged = {**DEFAULT_CONFIG, **values}
        split_address(str(merged["address"]))
        if not isinstance(merged["strict_content"], bool):
            raise ConfigError(
                f"strict_content must be true or false, not {merged['strict_content']!r}"
            )

        def resolve(key: str) -> Path:
            path = Path(str(merged[key])).expanduser()
            return path if path.is_absolute() else project_root / path

        return cls(
            environment=str(merged["environment"]),
            address=str(merged["address"]),
            articles_dir=resolve("articles_dir"),
            templates_dir=resolve("templates_dir"),
            static_dir=resolve("static_dir"),
            strict_content=merged["strict_content"],
        )


def split_address(address: str) -> tuple[str, int]:
    """Split ``host:port`` into its parts. An empty host means all interfaces.

    Raises:
        ConfigError: If the port is missing or not a number.
    """
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ConfigError(f"invalid server address: {address!r}")
    return host, int(port)


def load_config(
    project_root: Path,
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Load configuration from ``inkwell.yaml`` and the environment.

    Args:
        project_root: Root directory of the project.
        path: Optional explicit config file; relative paths resolve
            against the project root.
        environ: Environment variables; defaults to ``os.environ``.

    Returns:
        Resolved Config.

    Raises:
        ConfigError: If an explicit file is missing or the file is invalid.
    """
    project_root = Path(project_root)
    environ = os.environ if environ is None else environ
    if path is None:
        config_path = project_root / CONFIG_FILENAME
    else:
        config_path = path if Path(path).is_absolute() else project_root / path
        if not config_path.exists():
            raise ConfigError(f"config file not found: {config_path}")

    values: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid config file {config_path}: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigError(f"config file must be a mapping: {config_path}")
        values.update(loaded)

    for env_name, key in ENV_OVERRIDES.items():
        if environ.get(env_name):
            values[key] = environ[env_name]

    return Config.from_mapping(values, project_root)
