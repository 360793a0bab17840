"""Tests for the mediakit entry point."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from mediakit.__main__ import display_configuration, main, setup_logging
from mediakit.config.cli import OrganizeOptions, RemoveOptions
from mediakit.config.conditions import ConditionSet
from mediakit.config.context import get_context
from mediakit.models.task import BatchResult


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default(self):
        """Sets up a single console sink at INFO."""
        with patch("mediakit.__main__.logger") as mock_logger:
            setup_logging(debug=False)
            mock_logger.remove.assert_called_once()
            mock_logger.add.assert_called_once()
            assert mock_logger.add.call_args[1]["level"] == "INFO"

    def test_setup_logging_debug(self):
        """Debug mode lowers the level."""
        with patch("mediakit.__main__.logger") as mock_logger:
            setup_logging(debug=True)
            assert mock_logger.add.call_args[1]["level"] == "DEBUG"


class TestDisplayConfiguration:
    """Tests for display_configuration function."""

    def test_dry_run(self):
        """Dry runs are labelled."""
        with patch("mediakit.__main__.console") as mock_console:
            display_configuration(OrganizeOptions(command="organize", root=Path("/in")))
        assert "DRY RUN" in mock_console.print_panel.call_args[0][0]

    def test_remove_conditions(self):
        """Remove shows its conditions and deletion mode."""
        options = RemoveOptions(
            command="remove", root=Path("/in"), doit=True, conditions=ConditionSet(max_size=1024), purge=True,
        )
        with patch("mediakit.__main__.console") as mock_console:
            display_configuration(options)
        content = mock_console.print_panel.call_args[0][0]
        assert "LIVE" in content
        assert "size=1k" in content
        assert "purge" in content

    def test_holding_dir_shown(self):
        """Safe removal names the holding folder."""
        options = RemoveOptions(
            command="remove", root=Path("/in"), conditions=ConditionSet(corrupted=True), holding_dir=Path("/trash"),
        )
        with patch("mediakit.__main__.console") as mock_console:
            display_configuration(options)
        assert "/trash" in mock_console.print_panel.call_args[0][0]


class TestMain:
    """Tests for main function."""

    def _patched(self):
        return (
            patch("mediakit.__main__.setup_logging"),
            patch("mediakit.__main__.setup_audit_log"),
            patch("mediakit.__main__.close_audit_log"),
            patch("mediakit.__main__.console"),
        )

    def test_invalid_arguments(self, tmp_path):
        """Input errors exit with status 1 before anything runs."""
        with patch("mediakit.__main__.console"), \
                patch("mediakit.__main__.CommandOrchestrator") as orchestrator:
            assert main(["remove", str(tmp_path)]) == 1
        orchestrator.assert_not_called()

    def test_runs_in_context(self, tmp_path):
        """The orchestrator runs inside the execution context."""
        seen = {}

        def run(options):
            seen["ctx"] = get_context()
            return BatchResult(dry_run=False)

        logging_patch, audit_patch, close_patch, console_patch = self._patched()
        with logging_patch, audit_patch, close_patch as close, console_patch, \
                patch("mediakit.__main__.CommandOrchestrator") as orchestrator:
            orchestrator.return_value.run.side_effect = run
            code = main(["remove", str(tmp_path), "-p", "x", "--doit", "--purge"])

        assert code == 0
        assert not seen["ctx"].dry_run
        assert seen["ctx"].purge
        close.assert_called_once()
        assert get_context().dry_run

    def test_root_error(self, tmp_path):
        """Errors raised while running exit with status 1."""
        from mediakit.exceptions import InputError

        logging_patch, audit_patch, close_patch, console_patch = self._patched()
        with logging_patch, audit_patch, close_patch, console_patch, \
                patch("mediakit.__main__.CommandOrchestrator") as orchestrator:
            orchestrator.return_value.run.side_effect = InputError("not a directory")
            assert main(["organize", str(tmp_path / "missing")]) == 1

    def test_interrupted(self, tmp_path):
        """Ctrl-C exits with status 130 and closes the audit log."""
        logging_patch, audit_patch, close_patch, console_patch = self._patched()
        with logging_patch, audit_patch, close_patch as close, console_patch, \
                patch("mediakit.__main__.CommandOrchestrator") as orchestrator:
            orchestrator.return_value.run.side_effect = KeyboardInterrupt
            assert main(["organize", str(tmp_path)]) == 130
        close.assert_called_once()

    def test_audit_log_unavailable(self, tmp_path):
        """An unwritable audit directory is reported."""
        with patch("mediakit.__main__.setup_logging"), \
                patch("mediakit.__main__.setup_audit_log", side_effect=PermissionError("denied")), \
                patch("mediakit.__main__.console") as mock_console:
            assert main(["organize", str(tmp_path)]) == 1
        mock_console.print_error.assert_called_once()
