from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog


LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

# Append handle for output="file"; reused or closed on reconfiguration.
_file_stream: TextIO | None = None


def _log_stream(output: str, filename: str) -> TextIO:
    global _file_stream

    wants_file = output == "file" and bool(filename)
    if _file_stream is not None:
        if wants_file and _file_stream.name == filename:
            return _file_stream
        _file_stream.close()
        _file_stream = None

    if output == "stderr":
        return sys.stderr
    if wants_file:
        _file_stream = open(filename, "a", encoding="utf-8")
        return _file_stream
    return sys.stdout


def configure_logging(
    log_level: str,
    *,
    log_format: str = "json",
    output: str = "stdout",
    filename: str = "",
) -> None:
    try:
        level = LEVELS[log_level.lower()]
    except KeyError:
        raise ValueError(f"unknown log level: {log_level!r}") from None
    stream = _log_stream(output, filename)
    logging.basicConfig(format="%(message)s", stream=stream, level=level, force=True)

    processors: list = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
    ]
    if log_format == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    else:
        processors.extend([structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()
