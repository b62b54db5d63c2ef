# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_openid

import logging
import os
import sys
from pathlib import Path
from typing import Any

from loguru import logger
from opentelemetry import trace

__all__ = ["logger", "configure_logging"]

DEFAULT_LOG_FILE = "logs/app.log"

TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """
    Routes standard logging records (httpx, httpcore) into Loguru.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk back to the frame that issued the logging call
        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename in (logging.__file__, __file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def trace_id_injector(record: dict[str, Any]) -> None:
    """
    Loguru patcher adding the active OpenTelemetry trace and span ids to `extra`.
    """
    ctx = trace.get_current_span().get_span_context()
    if ctx.is_valid:
        trace_id = format(ctx.trace_id, "032x")
        record["extra"]["trace_id"] = trace_id
        record["extra"]["span_id"] = format(ctx.span_id, "016x")
        record["extra"]["correlation_id"] = trace_id


def _resolve_level() -> str:
    level = os.getenv("COREASON_LOG_LEVEL", "INFO").upper()
    try:
        logger.level(level)
    except ValueError:
        return "INFO"
    return level


def _add_file_sink(path: str, level: str) -> None:
    try:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            path,
            rotation="500 MB",
            retention="10 days",
            serialize=True,
            enqueue=True,
            level=level,
        )
    except (PermissionError, OSError):
        # Read-only filesystems run with console logging only
        pass


def configure_logging() -> None:
    """
    Configures the logger from environment variables.

    COREASON_LOG_LEVEL selects the level (INFO when unset or unknown),
    COREASON_LOG_JSON=true switches the console sink to JSON on stdout and
    COREASON_LOG_FILE overrides the JSON file sink path (empty disables it).
    Safe to call again after the environment changes.
    """
    level = _resolve_level()
    as_json = os.getenv("COREASON_LOG_JSON", "false").lower() == "true"
    log_file = os.getenv("COREASON_LOG_FILE", DEFAULT_LOG_FILE)

    logger.configure(handlers=[], patcher=trace_id_injector)  # type: ignore[arg-type]

    if as_json:
        logger.add(sys.stdout, level=level, serialize=True)
    else:
        logger.add(sys.stderr, level=level, format=TEXT_FORMAT)

    if log_file:
        _add_file_sink(log_file, level)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    # Loguru-only levels (TRACE, SUCCESS) have no stdlib equivalent
    numeric_level = logging.getLevelName(level)
    logging.getLogger().setLevel(numeric_level if isinstance(numeric_level, int) else logging.INFO)


configure_logging()
