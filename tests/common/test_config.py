from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from wellbook.adapters.events import LoggingEventPublisher
from wellbook.config import (
    ConfigurationError,
    StorageConfig,
    get_database_config,
    get_storage_config,
    resolve_log_level,
)
from wellbook.domain.model import WellStatus
from tests.helpers.operations import make_well

if TYPE_CHECKING:
    from pathlib import Path


def test_database_uri_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "postgresql+psycopg://ops@db/wellbook")
    monkeypatch.delenv("WELLBOOK_SQL_ECHO", raising=False)

    config = get_database_config()

    assert config.uri == "postgresql+psycopg://ops@db/wellbook"
    assert config.echo is False


def test_database_uri_defaults_to_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("WELLBOOK_DATA_DIR", str(tmp_path / "data"))

    config = get_database_config()

    assert config.uri == f"sqlite+pysqlite:///{(tmp_path / 'data').resolve() / 'wellbook.db'}"
    assert (tmp_path / "data").is_dir()


def test_storage_config_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("WELLBOOK_DATA_DIR", str(tmp_path))

    assert get_storage_config() == StorageConfig(data_dir=tmp_path)


@pytest.mark.parametrize(("raw", "expected"), [("1", True), ("Yes", True), ("off", False)])
def test_sql_echo_flag(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool  # noqa: FBT001
) -> None:
    monkeypatch.setenv("WELLBOOK_SQL_ECHO", raw)

    assert get_database_config().echo is expected


def test_invalid_sql_echo_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WELLBOOK_SQL_ECHO", "sometimes")

    with pytest.raises(ConfigurationError, match="WELLBOOK_SQL_ECHO"):
        get_database_config()


def test_logging_event_publisher_writes_event(caplog: pytest.LogCaptureFixture) -> None:
    well = make_well()
    well.change_status(WellStatus.DRILLING)
    (event,) = well.pull_events()

    with caplog.at_level(logging.INFO, logger="wellbook.events"):
        LoggingEventPublisher().publish(event)

    assert "well.status_changed" in caplog.text
    assert str(well.id) in caplog.text


def test_blank_database_uri_falls_back_to_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("DATABASE_URI", "")
    monkeypatch.setenv("WELLBOOK_DATA_DIR", str(tmp_path))

    config = get_database_config()

    assert config.uri.endswith("/wellbook.db")
    assert config.uri.startswith("sqlite+pysqlite:///")


def test_log_level_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WELLBOOK_LOG_LEVEL", "warning")

    assert resolve_log_level() == logging.WARNING
    assert resolve_log_level(logging.DEBUG) == logging.DEBUG


def test_log_level_defaults_to_info(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WELLBOOK_LOG_LEVEL", raising=False)

    assert resolve_log_level() == logging.INFO


def test_unknown_log_level_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WELLBOOK_LOG_LEVEL", "chatty")

    with pytest.raises(ConfigurationError, match="WELLBOOK_LOG_LEVEL"):
        resolve_log_level()
