########## Runtime ##########
# Run log, verbose debug buffer, and the guard that keeps the room talking.

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, List, TypeVar

from . import config

T = TypeVar("T")

DEBUG_LOG: List[str] = []  # shared buffer for tooling to read verbose notes

########## Text Logging ##########
# Lightweight, human-readable log lines for room runs.


def log_run_event(message: str) -> None:
    """Append a single readable line to the run log file."""

    if config.DEBUG_VERBOSE:
        DEBUG_LOG.append(message)
    if not config.LOG_TEXT_ENABLED:  # fast skip when disabled               # intent
        return
    log_dir = Path(config.LOG_TEXT_DIR)
    if not log_dir.is_absolute():
        log_dir = Path(__file__).resolve().parents[2] / log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / config.LOG_TEXT_FILENAME
    timestamp = datetime.utcnow().isoformat()
    line = f"[{timestamp}] {message}"
    with log_path.open("a", encoding="utf-8") as handle:
        handle.write(line + "\n")
    _trim_log_file(log_path, config.LOG_TEXT_MAX_LINES)


def _trim_log_file(log_path: Path, max_lines: int) -> None:
    """Keep the log file short and readable."""

    if max_lines <= 0 or not log_path.exists():
        return
    lines = log_path.read_text(encoding="utf-8").splitlines()
    if len(lines) <= max_lines:
        return
    trimmed = "\n".join(lines[-max_lines:]) + "\n"
    log_path.write_text(trimmed, encoding="utf-8")


########## Guarded Calls ##########
# Public entry points degrade to a safe default instead of raising.


def safe_call(component: str, default: T, func: Callable[..., T], *args, **kwargs) -> T:
    """Run func and return default when it raises, logging the failure."""

    try:
        return func(*args, **kwargs)
    except Exception as error:
        log_run_event(f"[{component}] {type(error).__name__}: {error}")
        return default
