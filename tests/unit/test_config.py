# tests/unit/test_config.py
"""Unit tests for configuration parsing and validation."""

import logging

import pytest
from pytest import LogCaptureFixture, MonkeyPatch

from deluge_bridge.config import Config, _parse_env_bool, _parse_env_int


@pytest.fixture
def prod_config(monkeypatch: MonkeyPatch) -> type[Config]:
    """A Config that passes validation in production mode."""
    monkeypatch.setattr(Config, "SECRET_KEY", "prod-secret-key")
    monkeypatch.setattr(Config, "TESTING", False)
    monkeypatch.setattr(Config, "FLASK_DEBUG", False)
    monkeypatch.setattr(Config, "DELUGE_PORT", 8112)
    monkeypatch.setattr(Config, "DELUGE_RECENT_PRIORITY", "last")
    monkeypatch.setattr(Config, "DELUGE_OLDER_PRIORITY", "last")
    monkeypatch.setattr(Config, "REMOTE_PATH_MAPPINGS", "")
    monkeypatch.setattr(Config, "DELUGE_CATEGORY", "readarr")
    monkeypatch.setattr(Config, "DELUGE_IMPORTED_CATEGORY", "")
    return Config


def test_config_validate_success(prod_config: type[Config]) -> None:
    """Ensure validation passes with valid configuration."""
    # Should not raise
    prod_config.validate(logging.getLogger("test"))


def test_config_validate_insecure_secret_prod(
    prod_config: type[Config], monkeypatch: MonkeyPatch, caplog: LogCaptureFixture
) -> None:
    """Ensure validation raises ValueError for insecure secret key in production."""
    monkeypatch.setattr(Config, "SECRET_KEY", "change-this-to-a-secure-random-key")

    with pytest.raises(ValueError, match="Application refused to start"):
        prod_config.validate(logging.getLogger("test"))

    assert "CRITICAL SECURITY ERROR" in caplog.text


def test_config_validate_insecure_secret_dev(
    prod_config: type[Config], monkeypatch: MonkeyPatch, caplog: LogCaptureFixture
) -> None:
    """Ensure the default secret key only warns in development."""
    monkeypatch.setattr(Config, "SECRET_KEY", "change-this-to-a-secure-random-key")
    monkeypatch.setattr(Config, "FLASK_DEBUG", True)

    with caplog.at_level(logging.WARNING):
        prod_config.validate(logging.getLogger("test"))

    assert "default insecure SECRET_KEY" in caplog.text


@pytest.mark.parametrize("port", [0, 70000, -1])
def test_config_validate_bad_port(prod_config: type[Config], monkeypatch: MonkeyPatch, port: int) -> None:
    """Ports outside 1-65535 are rejected."""
    monkeypatch.setattr(Config, "DELUGE_PORT", port)

    with pytest.raises(ValueError, match="Invalid DELUGE_PORT"):
        prod_config.validate(logging.getLogger("test"))


def test_config_validate_bad_priority(
    prod_config: type[Config], monkeypatch: MonkeyPatch, caplog: LogCaptureFixture
) -> None:
    """Unknown queue priorities fail startup."""
    monkeypatch.setattr(Config, "DELUGE_OLDER_PRIORITY", "sometimes")

    with pytest.raises(ValueError):
        prod_config.validate(logging.getLogger("test"))

    assert "Invalid DELUGE_OLDER_PRIORITY 'sometimes'" in caplog.text


def test_config_validate_bad_mappings(
    prod_config: type[Config], monkeypatch: MonkeyPatch, caplog: LogCaptureFixture
) -> None:
    """Malformed remote path mappings fail startup."""
    monkeypatch.setattr(Config, "REMOTE_PATH_MAPPINGS", "nas|/downloads")

    with pytest.raises(ValueError, match="Invalid remote path mapping"):
        prod_config.validate(logging.getLogger("test"))

    assert "Configuration Error" in caplog.text


def test_config_validate_logs_mappings(
    prod_config: type[Config], monkeypatch: MonkeyPatch, caplog: LogCaptureFixture
) -> None:
    """Valid mappings are counted in the startup log."""
    monkeypatch.setattr(Config, "REMOTE_PATH_MAPPINGS", "nas|/downloads|/mnt/a;nas|/seed|/mnt/b")

    with caplog.at_level(logging.INFO):
        prod_config.validate(logging.getLogger("test"))

    assert "Loaded 2 remote path mapping(s)." in caplog.text


def test_config_validate_same_imported_category(
    prod_config: type[Config], monkeypatch: MonkeyPatch, caplog: LogCaptureFixture
) -> None:
    """An imported category equal to the category is pointless and warned about."""
    monkeypatch.setattr(Config, "DELUGE_IMPORTED_CATEGORY", "readarr")

    with caplog.at_level(logging.WARNING):
        prod_config.validate(logging.getLogger("test"))

    assert "post-import labeling is disabled" in caplog.text


def test_config_validate_invalid_log_level(
    prod_config: type[Config], monkeypatch: MonkeyPatch, caplog: LogCaptureFixture
) -> None:
    """An unknown LOG_LEVEL only produces a warning."""
    monkeypatch.setattr(Config, "_log_level_env", "CHATTY")
    monkeypatch.setattr(Config, "LOG_LEVEL_STR", "CHATTY")

    with caplog.at_level(logging.WARNING):
        prod_config.validate(logging.getLogger("test"))

    assert "Invalid LOG_LEVEL 'CHATTY'" in caplog.text


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("9000", 9000), ("3.0", 3), (" 42 ", 42), ("abc", 8112)],
)
def test_parse_env_int(monkeypatch: MonkeyPatch, raw: str, expected: int) -> None:
    """Integers tolerate float strings and fall back on garbage."""
    monkeypatch.setenv("TEST_INT", raw)
    assert _parse_env_int("TEST_INT", 8112) == expected


def test_parse_env_int_missing(monkeypatch: MonkeyPatch) -> None:
    """A missing variable uses the default."""
    monkeypatch.delenv("TEST_INT", raising=False)
    assert _parse_env_int("TEST_INT", 5) == 5


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("TRUE", True), ("yes", True), (" on ", True), ("0", False), ("no", False), ("", False)],
)
def test_parse_env_bool(monkeypatch: MonkeyPatch, raw: str, expected: bool) -> None:
    """Booleans accept the usual truthy spellings."""
    monkeypatch.setenv("TEST_BOOL", raw)
    assert _parse_env_bool("TEST_BOOL") is expected
