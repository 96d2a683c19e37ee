"""Unified logging configuration for scene-generation entrypoints.

Provides consistent logging for scripts/generate_scene.py and library callers:
    - Console (stderr) and optional file handler
    - JSON-line output mode for tooling ingestion
    - Contextual fields (app, seed, canvas) via contextvars
    - Warning capture (Python warnings -> logging)
    - Uncaught exception logging

Public API:
    setup_logging(log_level="INFO", context={"app": "generate_scene"})
    get_logger(name)
    push_context(seed=1337, canvas="800x600")
    pop_context(keys=["seed"])
    install_excepthook()

Format examples:
    Human: 2025-10-28T13:45:12.345Z | INFO     | app=generate_scene seed=1337 | Composed scene
    JSON:  {"t":"2025-10-28T13:45:12.345000+00:00","lvl":"INFO","seed":1337,"msg":"..."}

Library modules only call logging.getLogger(__name__); handlers are installed
by entrypoints. Repeated setup_logging() calls don't duplicate handlers.
"""

import contextvars
import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

_context_var: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    'logging_context', default={}
)

# Handlers installed by setup_logging(), removed again on reconfiguration
_installed_handlers: List[logging.Handler] = []


class ContextFormatter(logging.Formatter):
    """Formatter that appends contextual fields from push_context().

    Supports a human-readable layout (optionally colored) and a JSON-line
    layout for machine ingestion.
    """

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, fmt_mode: str = "human", use_color: bool = True, tz: str = "UTC"):
        super().__init__()
        if fmt_mode not in ("human", "json"):
            raise ValueError(f"Unknown format mode: {fmt_mode}. Use 'human' or 'json'.")
        self.fmt_mode = fmt_mode
        self.use_color = use_color and sys.stderr.isatty()
        self.tz = tz

    def format(self, record: logging.LogRecord) -> str:
        context = _context_var.get()
        if self.tz == "UTC":
            ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        else:
            ts = datetime.fromtimestamp(record.created)

        if self.fmt_mode == "json":
            return self._format_json(record, ts, context)
        return self._format_human(record, ts, context)

    def _format_json(self, record: logging.LogRecord, ts: datetime, context: dict) -> str:
        log_dict = {
            't': ts.isoformat(),
            'lvl': record.levelname,
            'name': record.name,
            'pid': os.getpid(),
            'msg': record.getMessage(),
        }
        log_dict.update(context)
        if record.exc_info:
            log_dict['exc'] = self.formatException(record.exc_info)
        return json.dumps(log_dict, default=str)

    def _format_human(self, record: logging.LogRecord, ts: datetime, context: dict) -> str:
        ts_str = ts.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'

        level = f"{record.levelname:8s}"
        if self.use_color:
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"

        parts = [ts_str, '|', level, '|']
        if context:
            parts.append(' '.join(f"{k}={v}" for k, v in context.items()))
            parts.append('|')
        parts.append(record.getMessage())

        line = ' '.join(parts)
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    to_stderr: bool = True,
    tz: str = "UTC",
    capture_warnings: bool = True,
    quiet_libs: Optional[List[str]] = None,
    context: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Configure root logger (idempotent).

    Parameters
    ----------
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"
    log_file : str, optional
        Log file path; None for no file logging
    json : bool
        Use JSON-line format on every handler, default False
    color : bool
        Use ANSI colors in console output, default True
    to_stderr : bool
        Log to stderr (console), default True
    tz : str
        Timezone for timestamps, "UTC" (default) or "local"
    capture_warnings : bool
        Capture Python warnings to logging, default True
    quiet_libs : list[str], optional
        Library names to set to WARNING level
    context : dict, optional
        Initial contextual fields (e.g., {"app": "generate_scene"})

    Returns
    -------
    dict
        Configuration info: {"handlers": [...]}

    Raises
    ------
    ValueError
        If log_level is not a known level name
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    root = logging.getLogger()
    for handler in _installed_handlers:
        root.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    root.setLevel(level)
    fmt_mode = "json" if json else "human"

    if to_stderr:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(ContextFormatter(fmt_mode, color, tz))
        _installed_handlers.append(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setFormatter(ContextFormatter(fmt_mode, use_color=False, tz=tz))
        _installed_handlers.append(file_handler)

    for handler in _installed_handlers:
        root.addHandler(handler)

    if context:
        push_context(**context)

    for lib in quiet_libs or []:
        logging.getLogger(lib).setLevel(logging.WARNING)

    if capture_warnings:
        logging.captureWarnings(True)

    return {'handlers': list(_installed_handlers)}


def get_logger(name: str) -> logging.Logger:
    """Get logger by name (typically __name__)."""
    return logging.getLogger(name)


def push_context(**kwargs) -> None:
    """Add contextual fields to all subsequent log records.

    Examples
    --------
    >>> push_context(app="generate_scene", seed=1337)
    >>> logger.info("Started")  # -> "... | app=generate_scene seed=1337 | Started"
    """
    _context_var.set({**_context_var.get(), **kwargs})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Remove contextual fields; all of them when keys is None."""
    if keys is None:
        _context_var.set({})
        return
    current = dict(_context_var.get())
    for key in keys:
        current.pop(key, None)
    _context_var.set(current)


def get_context() -> Dict[str, Any]:
    """Current contextual fields (copy)."""
    return dict(_context_var.get())


def install_excepthook() -> None:
    """Log uncaught exceptions (except Ctrl+C) before the interpreter exits."""
    def log_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logging.getLogger(__name__).critical(
            "Uncaught exception",
            exc_info=(exc_type, exc_value, exc_traceback)
        )

    sys.excepthook = log_exception
