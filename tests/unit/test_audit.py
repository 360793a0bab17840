"""Tests for the audit log sink."""

from datetime import datetime

import pytest
from loguru import logger

from mediakit.utils.audit import (
    audit,
    audit_log_name,
    audit_log_path,
    close_audit_log,
    resolve_log_dir,
    setup_audit_log,
)


@pytest.fixture
def audit_dir(tmp_path):
    """Audit log directory, with the sink removed afterwards."""
    yield tmp_path / "logs"
    close_audit_log()


class TestResolveLogDir:
    """Tests for resolve_log_dir function."""

    def test_explicit(self, tmp_path, monkeypatch):
        """An explicit directory wins over the environment."""
        monkeypatch.setenv("MEDIAKIT_LOG_DIR", "/env")
        assert resolve_log_dir(tmp_path) == tmp_path

    def test_environment(self, tmp_path, monkeypatch):
        """The environment variable overrides the default."""
        monkeypatch.setenv("MEDIAKIT_LOG_DIR", str(tmp_path))
        assert resolve_log_dir() == tmp_path


class TestAuditLog:
    """Tests for setup_audit_log and audit."""

    def test_name(self):
        """File name carries the date and process id."""
        assert audit_log_name(datetime(2024, 1, 2), pid=77) == "mediakit_20240102_77.log"

    def test_writes_tagged_lines(self, audit_dir):
        """Audit records reach the file with their tag."""
        path = setup_audit_log(audit_dir)
        audit("MOVE", "a.jpg -> b.jpg")
        close_audit_log()

        content = path.read_text(encoding="utf-8")
        assert "| MOVE | a.jpg -> b.jpg" in content

    def test_regular_logs_excluded(self, audit_dir):
        """Plain log records never reach the audit file."""
        path = setup_audit_log(audit_dir)
        logger.info("console only")
        close_audit_log()

        assert "console only" not in path.read_text(encoding="utf-8")

    def test_idempotent(self, audit_dir):
        """A second setup returns the same file."""
        first = setup_audit_log(audit_dir)
        assert setup_audit_log(audit_dir) == first
        assert audit_log_path() == first

    def test_close_resets_path(self, audit_dir):
        """Closing forgets the current file."""
        setup_audit_log(audit_dir)
        close_audit_log()
        assert audit_log_path() is None
