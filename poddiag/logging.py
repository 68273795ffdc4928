from __future__ import annotations

import contextlib
import contextvars
import datetime as _dt
import json
import logging
import os
import sys
import traceback
from typing import Any, Iterator

# Custom TRACE level (more verbose than DEBUG).
TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

_LEVELS: dict[str, int] = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE_LEVEL,
}

_COLORS: list[tuple[int, str]] = [
    (logging.ERROR, "31"),
    (logging.WARNING, "33"),
    (logging.INFO, "32"),
    (logging.DEBUG, "36"),
]

_trace_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("poddiag_trace_id", default=None)

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_STANDARD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime", "taskName"}


@contextlib.contextmanager
def trace_context(trace_id: str) -> Iterator[None]:
    token = _trace_id_var.set(str(trace_id))
    try:
        yield
    finally:
        _trace_id_var.reset(token)


def get_trace_id() -> str | None:
    return _trace_id_var.get()


class _TraceIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (filter)
        if not hasattr(record, "trace_id"):
            record.trace_id = get_trace_id()  # type: ignore[attr-defined]
        return True


def _timestamp(record: logging.LogRecord) -> str:
    created = _dt.datetime.fromtimestamp(record.created, tz=_dt.timezone.utc).astimezone()
    return created.isoformat(timespec="milliseconds")


def _extras(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _STANDARD_ATTRS and not k.startswith("_")}


class PrettyFormatter(logging.Formatter):
    def __init__(self, *, use_color: bool) -> None:
        super().__init__()
        self._use_color = bool(use_color)

    def format(self, record: logging.LogRecord) -> str:
        extras = _extras(record)
        parts = [_timestamp(record), record.levelname, record.name, record.getMessage()]
        trace_id = extras.pop("trace_id", None)
        if trace_id:
            parts.append(f"trace_id={trace_id}")
        parts.extend(f"{k}={extras[k]}" for k in sorted(extras))

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info)).rstrip()
        if self._use_color:
            line = _colorize(record.levelno, line)
        return line


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": _timestamp(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(_extras(record))
        if record.exc_info:
            payload["exc"] = "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return json.dumps(payload, separators=(",", ":"), sort_keys=True, default=str)


def _colorize(levelno: int, text: str) -> str:
    color = "90"
    for threshold, code in _COLORS:
        if levelno >= threshold:
            color = code
            break
    return f"\x1b[{color}m{text}\x1b[0m"


def parse_log_level(value: str | None) -> int:
    raw = (value or "").strip().lower() or "info"
    if raw not in _LEVELS:
        raise ValueError("invalid log level")
    return _LEVELS[raw]


def setup_logging(
    *,
    level: int = logging.INFO,
    log_format: str = "pretty",
    log_file: str | None = None,
    no_color: bool = False,
) -> None:
    """Configure root logging.

    Logs go to stderr (and optionally a file); stdout is left for command
    results.
    """

    fmt = (log_format or "pretty").strip().lower()
    if fmt not in {"pretty", "json"}:
        raise ValueError("invalid log format")

    use_color = (not no_color) and bool(getattr(sys.stderr, "isatty", lambda: False)())
    if fmt == "json":
        formatter: logging.Formatter = JsonFormatter()
        file_formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = PrettyFormatter(use_color=use_color)
        file_formatter = PrettyFormatter(use_color=False)

    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [stderr_handler]

    if log_file:
        path = os.path.expanduser(str(log_file))
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(file_formatter)
        handlers.append(file_handler)

    for handler in handlers:
        handler.addFilter(_TraceIdFilter())
    logging.basicConfig(level=int(level), handlers=handlers, force=True)

    # Textual logs a lot at INFO; only let it through when debugging.
    third_party_level = logging.DEBUG if int(level) <= logging.DEBUG else logging.WARNING
    logging.getLogger("textual").setLevel(third_party_level)
