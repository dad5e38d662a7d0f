"""Tests for reloader.cli module."""

import logging
import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from reloader.cli import main, parse_args, serve
from reloader.shutdown import FAREWELL
from reloader_core.config import DEFAULT_CONFIG_TEMPLATE
from reloader_core.models import ReloaderConfig


class TestParseArgs:
    """Tests for parse_args function."""

    def test_parse_args_default(self):
        args = parse_args([])
        assert args.config == "reloader.toml"
        assert args.init is False
        assert args.verbose is False

    def test_parse_args_custom_config_short_flag(self):
        assert parse_args(["-c", "dev.toml"]).config == "dev.toml"

    def test_parse_args_custom_config_long_flag(self):
        assert parse_args(["--config", "dev.toml"]).config == "dev.toml"

    def test_parse_args_reads_sys_argv(self):
        with patch.object(sys, "argv", ["reloader", "-v"]):
            assert parse_args().verbose is True

    def test_parse_args_version_flag(self):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--version"])
        assert exc_info.value.code == 0


class TestMain:
    """Tests for main function."""

    def test_init_writes_template(self, tmp_path, capsys):
        config_path = tmp_path / "reloader.toml"

        main(["--init", "-c", str(config_path)])

        assert config_path.read_text() == DEFAULT_CONFIG_TEMPLATE
        assert "Created default config" in capsys.readouterr().out

    def test_init_keeps_existing(self, tmp_path, capsys):
        config_path = tmp_path / "reloader.toml"
        config_path.write_text("# mine")

        main(["--init", "-c", str(config_path)])

        assert config_path.read_text() == "# mine"
        assert "already exists" in capsys.readouterr().out

    def test_missing_config_exits_1(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-c", str(tmp_path / "reloader.toml")])

        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "Please create reloader.toml" in err

    def test_malformed_config_exits_1(self, tmp_path, capsys):
        config_path = tmp_path / "reloader.toml"
        config_path.write_text("[[watch]]\ncommand = 'make'\n")

        with pytest.raises(SystemExit) as exc_info:
            main(["-c", str(config_path)])

        assert exc_info.value.code == 1
        assert "needs a non-empty string 'pattern'" in capsys.readouterr().err

    def test_config_path_is_directory_exits_1(self, tmp_path, capsys):
        config_path = tmp_path / "reloader.toml"
        config_path.mkdir()

        with pytest.raises(SystemExit) as exc_info:
            main(["-c", str(config_path)])

        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: Failed to read config file")

    def test_missing_working_directory_exits_1(self, tmp_config, capsys):
        with (
            patch.object(Path, "cwd", side_effect=FileNotFoundError("gone")),
            pytest.raises(SystemExit) as exc_info,
        ):
            main(["-c", str(tmp_config)])

        assert exc_info.value.code == 1
        assert "Unable to get current directory" in capsys.readouterr().err

    def test_runs_serve_with_loaded_config(self, tmp_config, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        async def fake_serve(config, root):
            fake_serve.called_with = (config, root)

        with patch("reloader.cli.serve", fake_serve):
            main(["-c", str(tmp_config)])

        config, root = fake_serve.called_with
        assert [r.pattern for r in config.rules] == ["*.txt", "*.go"]
        assert root.resolve() == tmp_path.resolve()

    @pytest.mark.asyncio
    async def test_serve_reports_through_logging_only(self, tmp_path):
        """The CLI controller gets no notifier, so notices are not logged twice."""
        config = ReloaderConfig(rules=[], skip_folders=[])
        with (
            patch("reloader.cli.ShutdownHandler"),
            patch("reloader.cli.WatchdogEventSource") as source_cls,
            patch("reloader.cli.ReloaderController") as controller_cls,
        ):
            controller_cls.return_value.run = AsyncMock()
            await serve(config, tmp_path)

        controller_cls.assert_called_once_with(config)
        controller_cls.return_value.run.assert_awaited_once_with(source_cls.return_value)

    def test_watcher_failure_exits_1(self, tmp_config, capsys):
        async def broken_serve(config, root):
            raise OSError("inotify instance limit reached")

        with patch("reloader.cli.serve", broken_serve), pytest.raises(SystemExit) as exc_info:
            main(["-c", str(tmp_config)])

        assert exc_info.value.code == 1
        assert "inotify instance limit reached" in capsys.readouterr().err

    def test_keyboard_interrupt_exits_0(self, tmp_config, capsys):
        async def interrupted(config, root):
            raise KeyboardInterrupt

        with patch("reloader.cli.serve", interrupted), pytest.raises(SystemExit) as exc_info:
            main(["-c", str(tmp_config)])

        assert exc_info.value.code == 0
        assert FAREWELL in capsys.readouterr().out

    def test_startup_diagnostics_logged(self, tmp_config, caplog):
        async def fake_serve(config, root):
            pass

        with patch("reloader.cli.serve", fake_serve), caplog.at_level(logging.INFO, logger="reloader"):
            main(["-c", str(tmp_config)])

        assert "skip folders, ['.git', 'node_modules']" in caplog.text
