import logging
from pathlib import Path

import pytest

from inkwell.config import Config, ConfigError, load_config, split_address
from inkwell.log import configure_logging


def test_defaults_without_config_file(tmp_path):
    config = load_config(tmp_path, environ={})
    assert config.environment == "development"
    assert config.is_development
    assert config.address == "localhost:4000"
    assert config.host == "localhost"
    assert config.port == 4000
    assert config.articles_dir == tmp_path / "articles"
    assert config.templates_dir == tmp_path / "ui" / "html"
    assert config.static_dir == tmp_path / "ui" / "static"
    assert config.strict_content is True


def test_config_file_values(tmp_path):
    (tmp_path / "inkwell.yaml").write_text(
        "environment: production\naddress: ':8080'\narticles_dir: content\n"
        "static_dir: /srv/static\nstrict_content: false\n",
        encoding="utf-8",
    )
    config = load_config(tmp_path, environ={})
    assert not config.is_development
    assert config.host == ""
    assert config.port == 8080
    assert config.articles_dir == tmp_path / "content"
    assert config.static_dir == Path("/srv/static")
    assert config.strict_content is False


def test_environment_overrides_file(tmp_path):
    (tmp_path / "inkwell.yaml").write_text(
        "environment: production\naddress: localhost:9000\n", encoding="utf-8"
    )
    config = load_config(
        tmp_path,
        environ={"ENVIRONMENT": "staging", "HTTP_SERVER_ADDRESS": "0.0.0.0:5000"},
    )
    assert config.environment == "staging"
    assert config.port == 5000


def test_environment_read_from_os(tmp_path, monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.delenv("HTTP_SERVER_ADDRESS", raising=False)
    assert load_config(tmp_path).environment == "production"


def test_explicit_config_path(tmp_path):
    (tmp_path / "prod.yaml").write_text("address: localhost:7000\n", encoding="utf-8")
    assert load_config(tmp_path, Path("prod.yaml"), environ={}).port == 7000
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path, Path("missing.yaml"), environ={})


@pytest.mark.parametrize(
    "text",
    [
        "- just\n- a list\n",
        "address: [unclosed\n",
        "address: no-port\n",
        "strict_content: \"false\"\n",
        "strict_content: 0\n",
    ],
)
def test_invalid_config_files(tmp_path, text):
    (tmp_path / "inkwell.yaml").write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={})


def test_split_address():
    assert split_address("example.com:80") == ("example.com", 80)
    assert split_address(":4000") == ("", 4000)
    with pytest.raises(ValueError):
        split_address("localhost")
    with pytest.raises(ValueError):
        split_address("localhost:http")


def test_config_is_frozen(tmp_path):
    config = Config.from_mapping({}, tmp_path)
    with pytest.raises(AttributeError):
        config.environment = "production"


def test_configure_logging_levels_and_idempotence():
    logger = configure_logging("development")
    assert logger.name == "inkwell"
    assert logger.level == logging.DEBUG
    configure_logging("production")
    assert logger.level == logging.INFO
    console = [h for h in logger.handlers if h.get_name() == "inkwell-console"]
    assert len(console) == 1
    assert "%(lineno)d" not in console[0].formatter._fmt
    logger.removeHandler(console[0])
    logger.setLevel(logging.NOTSET)
