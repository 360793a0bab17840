"""Utility modules: audit log, bounded concurrency and formatting."""

from mediakit.utils.audit import (
    audit,
    audit_log_name,
    audit_log_path,
    close_audit_log,
    resolve_log_dir,
    setup_audit_log,
)
from mediakit.utils.concurrency import (
    bounded_map,
    cpu_count,
    run_bounded,
    worker_count,
)
from mediakit.utils.formatting import human_size, human_time, short_path

__all__ = [
    "audit",
    "audit_log_name",
    "audit_log_path",
    "close_audit_log",
    "resolve_log_dir",
    "setup_audit_log",
    "bounded_map",
    "cpu_count",
    "run_bounded",
    "worker_count",
    "human_size",
    "human_time",
    "short_path",
]
