from __future__ import annotations

import json
from pathlib import Path

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def test_json_logs_go_to_configured_file(tmp_path: Path) -> None:
    from services.api.app.logging import configure_logging

    target = tmp_path / "app.log"
    configure_logging("info", output="file", filename=str(target))
    log = structlog.get_logger()
    log.info("seed_succeeded", seeder="orders")
    log.debug("filtered_out")

    lines = [json.loads(line) for line in target.read_text(encoding="utf-8").splitlines()]
    assert [line["event"] for line in lines] == ["seed_succeeded"]
    assert lines[0]["seeder"] == "orders"
    assert lines[0]["level"] == "info"
    assert "timestamp" in lines[0]


def test_console_format_renders_plain_text(capsys: pytest.CaptureFixture[str]) -> None:
    from services.api.app.logging import configure_logging

    configure_logging("debug", log_format="console", output="stdout")
    structlog.get_logger().debug("cors_debug_request", origin="http://localhost:3000")

    out = capsys.readouterr().out
    assert "cors_debug_request" in out
    assert "origin=http://localhost:3000" in out


def test_warn_is_an_alias_for_warning(tmp_path: Path) -> None:
    from services.api.app.logging import configure_logging

    target = tmp_path / "app.log"
    configure_logging("warn", output="file", filename=str(target))
    log = structlog.get_logger()
    log.info("filtered_out")
    log.warning("seed_prerequisite_retry")

    lines = [json.loads(line) for line in target.read_text(encoding="utf-8").splitlines()]
    assert [line["event"] for line in lines] == ["seed_prerequisite_retry"]


def test_unknown_level_is_rejected() -> None:
    from services.api.app.logging import configure_logging

    with pytest.raises(ValueError, match="unknown log level"):
        configure_logging("trace")


def test_file_handle_is_reused_then_closed(tmp_path: Path) -> None:
    from services.api.app import logging as app_logging

    target = str(tmp_path / "app.log")
    app_logging.configure_logging("info", output="file", filename=target)
    first = app_logging._file_stream
    app_logging.configure_logging("debug", output="file", filename=target)
    assert app_logging._file_stream is first
    assert not first.closed

    app_logging.configure_logging("info", output="stderr")
    assert first.closed
    assert app_logging._file_stream is None
