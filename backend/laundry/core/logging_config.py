"""
Centralized logging configuration for the laundry booking backend.

Structured logging with:
- JSON lines for log files (and optionally the console)
- Colored console lines for development
- Request/response logging with the authenticated user id
- Slow SQL statement warnings
- Rotating log files

Usage:
    from laundry.core.logging_config import setup_logging

    # In main.py
    setup_logging(app, log_level="INFO")

    # In any module
    logger = logging.getLogger(__name__)
    logger.info("Booking created", extra={"context": {"book_id": 1}})
"""

import json
import logging
import logging.handlers
import os
import sys
import time
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from flask import Flask, g, request
from flask_login import current_user
from sqlalchemy import event
from sqlalchemy.engine import Engine

from .config import APP_TZ

LOG_FILE_NAME = "laundry.log"
ERROR_LOG_FILE_NAME = "laundry_errors.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

_slow_query_listener_installed = False


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with the ``context`` extra kept as a nested object."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, APP_TZ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        context = getattr(record, "context", None)
        if context:
            log_data["context"] = context

        return json.dumps(log_data, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable console formatter with colored levels."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Format a copy so file handlers sharing the record see a plain level name
        colored = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, self.RESET)
        colored.levelname = f"{color}{record.levelname:8}{self.RESET}"
        line = super().format(colored)
        context = getattr(record, "context", None)
        if context:
            line = f"{line} | {json.dumps(context, ensure_ascii=False, default=str)}"
        return line


def _resolve_level(log_level: Union[int, str]) -> int:
    if isinstance(log_level, int):
        return log_level
    return getattr(logging, str(log_level).upper(), logging.INFO)


def _log_dir() -> Path:
    configured = os.getenv("LOG_DIR")
    if configured:
        return Path(configured)
    return Path(__file__).resolve().parent.parent.parent / "logs"


def _add_file_handlers(root_logger: logging.Logger, level: int) -> None:
    log_dir = _log_dir()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        error_handler = logging.handlers.RotatingFileHandler(
            log_dir / ERROR_LOG_FILE_NAME,
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as exc:
        # Disk full or read-only filesystem: keep running on the console handler
        root_logger.warning(
            "File logging disabled",
            extra={"context": {"log_dir": str(log_dir), "error": str(exc)}},
        )
        return

    file_handler.setLevel(level)
    file_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(file_handler)

    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(error_handler)


def _install_slow_query_listener(threshold_ms: float) -> None:
    global _slow_query_listener_installed
    if _slow_query_listener_installed:
        return
    _slow_query_listener_installed = True

    @event.listens_for(Engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_start_time", []).append(time.perf_counter())

    @event.listens_for(Engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        started = conn.info["query_start_time"].pop(-1)
        duration_ms = (time.perf_counter() - started) * 1000
        if duration_ms >= threshold_ms:
            logging.getLogger("laundry.sql").warning(
                "Slow query",
                extra={
                    "context": {
                        "sql_query": statement[:500],
                        "sql_duration_ms": round(duration_ms, 2),
                    }
                },
            )


def _register_request_hooks(app: Flask) -> None:
    req_logger = logging.getLogger("laundry.request")

    @app.before_request
    def log_request():
        g.request_start_time = time.perf_counter()
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        g.user_id = None
        if current_user.is_authenticated:
            g.user_id = current_user.get_id()

        req_logger.info(
            f"{request.method} {request.path}",
            extra={
                "context": {
                    "request_id": g.request_id,
                    "method": request.method,
                    "path": request.path,
                    "user_id": g.user_id,
                    "remote_addr": request.remote_addr,
                }
            },
        )

    @app.after_request
    def log_response(response):
        if hasattr(g, "request_start_time"):
            duration_ms = (time.perf_counter() - g.request_start_time) * 1000
            response.headers["X-Request-ID"] = g.request_id
            req_logger.info(
                f"{request.method} {request.path} {response.status_code} in {duration_ms:.2f}ms",
                extra={
                    "context": {
                        "request_id": g.request_id,
                        "status_code": response.status_code,
                        "duration_ms": round(duration_ms, 2),
                        "user_id": g.get("user_id"),
                    }
                },
            )
        return response


def setup_logging(
    app: Optional[Flask] = None,
    log_level: Union[int, str] = "INFO",
    log_to_file: bool = True,
    use_json_format: bool = False,
    slow_query_ms: Optional[float] = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        app: Flask application; when given, requests and responses are logged
        log_level: Logging level (``logging.INFO`` or ``"INFO"``)
        log_to_file: Also write JSON lines to rotating files under LOG_DIR
        use_json_format: Use JSON on the console as well
        slow_query_ms: Warn about SQL statements slower than this
    """
    level = _resolve_level(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    if use_json_format:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(
            ConsoleFormatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    root_logger.addHandler(console_handler)

    if log_to_file:
        _add_file_handlers(root_logger, level)

    if slow_query_ms is not None:
        _install_slow_query_listener(slow_query_ms)

    if app is not None:
        _register_request_hooks(app)

    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logging.getLogger("laundry").info(
        "Logging configured",
        extra={
            "context": {
                "level": logging.getLevelName(level),
                "log_to_file": log_to_file,
                "json_format": use_json_format,
                "slow_query_ms": slow_query_ms,
            }
        },
    )
