"""Append-only audit log built on a dedicated loguru sink.

Only records bound with ``audit=True`` reach the file, so regular
console logging never leaks into it and audit lines never need a
separate logger object.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger

from mediakit.config.settings import DEFAULT_LOG_DIR, LOG_DIR_ENV

AUDIT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {extra[tag]} | {message}"

_sink_id: Optional[int] = None
_log_path: Optional[Path] = None


def resolve_log_dir(log_dir: Optional[Path] = None) -> Path:
    """Explicit directory, then ``MEDIAKIT_LOG_DIR``, then the default."""
    if log_dir is not None:
        return Path(log_dir)
    env = os.environ.get(LOG_DIR_ENV)
    if env:
        return Path(env)
    return DEFAULT_LOG_DIR


def audit_log_name(now: Optional[datetime] = None, pid: Optional[int] = None) -> str:
    """Process-determined file name: ``mediakit_<YYYYMMDD>_<pid>.log``."""
    now = now or datetime.now()
    pid = pid if pid is not None else os.getpid()
    return f"mediakit_{now:%Y%m%d}_{pid}.log"


def _is_audit(record) -> bool:
    return record["extra"].get("audit", False)


def setup_audit_log(log_dir: Optional[Path] = None) -> Path:
    """
    Install the audit file sink (idempotent).

    Args:
        log_dir: Directory for the log file; see :func:`resolve_log_dir`.

    Returns:
        Path of the audit log file.
    """
    global _sink_id, _log_path
    if _sink_id is not None:
        return _log_path

    directory = resolve_log_dir(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / audit_log_name()

    _sink_id = logger.add(
        path,
        level="DEBUG",
        format=AUDIT_FORMAT,
        filter=_is_audit,
        mode="a",
        encoding="utf-8",
    )
    _log_path = path
    return path


def close_audit_log() -> None:
    """Remove the audit sink, flushing pending lines."""
    global _sink_id, _log_path
    if _sink_id is not None:
        logger.remove(_sink_id)
    _sink_id = None
    _log_path = None


def audit_log_path() -> Optional[Path]:
    return _log_path


def audit(tag: str, message: str) -> None:
    """Write one line to the audit log."""
    logger.bind(audit=True, tag=tag).info(message)
