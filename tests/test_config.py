import logging
from pathlib import Path

import pytest

from matprops_core.channels import DEFAULT_BASE_URL
from matprops_core.config import CoreConfig, configure_logging, load_config
from matprops_core.errors import ConfigError


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.yaml")

    assert config == CoreConfig()
    assert config.base_url == DEFAULT_BASE_URL
    assert config.timeout_s is None
    assert config.fallback_on_embedded_error is False


def test_loads_matprops_section(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "matprops:\n"
        "  base_url: https://compute.example.org/api\n"
        "  timeout_s: 12\n"
        "  export_dir: exports\n"
        "  fallback_on_embedded_error: true\n"
        "  log_level: debug\n",
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.base_url == "https://compute.example.org/api"
    assert config.timeout_s == 12.0
    assert config.export_dir == Path("exports")
    assert config.fallback_on_embedded_error is True
    assert config.log_level == "DEBUG"


def test_top_level_keys_and_unknown_keys(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("base_url: http://10.0.0.2:8080\ncolour: blue\n", encoding="utf-8")

    config = load_config(path)

    assert config.base_url == "http://10.0.0.2:8080"
    assert "colour" in caplog.text


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == CoreConfig()


@pytest.mark.parametrize(
    "body",
    [
        "timeout_s: -1\n",
        "timeout_s: soon\n",
        "fallback_on_embedded_error: maybe\n",
        "base_url: ''\n",
        "log_level: chatty\n",
        "- just\n- a list\n",
        "matprops: 3\n",
    ],
)
def test_invalid_values_raise(tmp_path: Path, body: str) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(body, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


def test_configure_logging_applies_configured_level(tmp_path: Path, restore_root_logger: logging.Logger) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("log_level: debug\n", encoding="utf-8")

    configure_logging(load_config(path))

    assert restore_root_logger.level == logging.DEBUG


def test_configure_logging_defaults_to_info(restore_root_logger: logging.Logger) -> None:
    restore_root_logger.setLevel(logging.ERROR)

    configure_logging()

    assert restore_root_logger.level == logging.INFO
