"""Tests for CLI argument handling in main.py."""
from unittest.mock import AsyncMock, MagicMock, patch

from click.testing import CliRunner

from peerclip.errors import ClipboardAccessError
from peerclip.main import main
from peerclip.sync_config import SyncConfig


class TestCLIArguments:
    """Tests for command-line argument validation."""

    def test_help_exits_with_code_0(self):
        """Test that --help exits cleanly with code 0."""
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "--peer" in result.output
        assert "--poll-interval" in result.output

    def test_defaults_build_config(self):
        """Test running without options uses the built-in defaults."""
        runner = CliRunner()
        with patch("peerclip.main._run") as mock_run:
            result = runner.invoke(main, [])
        assert result.exit_code == 0
        mock_run.assert_called_once_with(SyncConfig())

    def test_options_reach_config(self):
        """Test every option ends up in the SyncConfig."""
        runner = CliRunner()
        with patch("peerclip.main._run") as mock_run:
            result = runner.invoke(main, [
                "--host", "0.0.0.0",
                "--port", "6000",
                "--peer", "http://192.168.137.9:6000",
                "--allowed-prefix", "10.42.0.",
                "--poll-interval", "2",
                "--push-timeout", "1.5",
                "--backend", "pyperclip",
            ])
        assert result.exit_code == 0
        config = mock_run.call_args.args[0]
        assert config.host == "0.0.0.0"
        assert config.port == 6000
        assert config.peer_clipboard_url == "http://192.168.137.9:6000/clipboard"
        assert config.allowed_prefix == "10.42.0."
        assert config.poll_interval == 2.0
        assert config.push_timeout == 1.5
        assert config.backend == "pyperclip"

    def test_environment_variables_are_read(self):
        """Test PEERCLIP_* environment variables configure options."""
        runner = CliRunner()
        with patch("peerclip.main._run") as mock_run:
            result = runner.invoke(main, [], env={"PEERCLIP_PORT": "7000"})
        assert result.exit_code == 0
        assert mock_run.call_args.args[0].port == 7000

    def test_push_timeout_above_interval_exits_with_code_2(self):
        """Test a push timeout longer than the poll interval is refused."""
        runner = CliRunner()
        result = runner.invoke(main, ["--poll-interval", "1", "--push-timeout", "3"])
        assert result.exit_code == 2
        assert "may not exceed" in result.output

    def test_non_positive_interval_exits_with_code_2(self):
        """Test a zero poll interval is refused."""
        runner = CliRunner()
        result = runner.invoke(main, ["--poll-interval", "0"])
        assert result.exit_code == 2

    def test_unknown_backend_exits_with_code_2(self):
        """Test an unknown backend name is refused."""
        runner = CliRunner()
        result = runner.invoke(main, ["--backend", "wayland"])
        assert result.exit_code == 2

    def test_peer_port_out_of_range_exits_with_code_2(self):
        """Test a peer URL whose port cannot exist is refused at startup."""
        runner = CliRunner()
        result = runner.invoke(main, ["--peer", "http://192.168.137.2:99999"])
        assert result.exit_code == 2


class TestRun:
    """Tests for startup and shutdown around the server."""

    def test_clipboard_init_failure_exits_with_code_1(self):
        """Test a clipboard that cannot start is fatal."""
        runner = CliRunner()
        with patch(
            "peerclip.clipboard.open_accessor",
            side_effect=ClipboardAccessError("DISPLAY environment variable is not set"),
        ):
            result = runner.invoke(main, ["--backend", "x11"])
        assert result.exit_code == 1
        assert "Error: DISPLAY environment variable is not set" in result.output

    def test_server_runs_and_accessor_is_closed(self):
        """Test the server is started with the config and cleanup happens."""
        accessor = MagicMock()
        accessor.backend_name = "fake"
        runner = CliRunner()
        with patch("peerclip.clipboard.open_accessor", return_value=accessor), patch(
            "peerclip.server.run_server", new_callable=AsyncMock
        ) as mock_server:
            result = runner.invoke(main, [])
        assert result.exit_code == 0
        mock_server.assert_awaited_once_with(SyncConfig(), accessor)
        accessor.close.assert_called_once()
        assert "Clipboard Server" in result.output
