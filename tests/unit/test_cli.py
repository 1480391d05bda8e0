"""Unit tests for the command-line entry point."""

import curses

import pytest

from notmuch_tui import __version__, cli
from notmuch_tui.exceptions import ConfigurationError, SearchFailed


class TestParser:
    """Test suite for argument parsing."""

    def test_query_words_are_collected(self) -> None:
        parsed = cli._build_parser().parse_args(["tag:inbox", "and", "from:bob"])

        assert parsed.query == ["tag:inbox", "and", "from:bob"]
        assert parsed.log_file is None

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli._build_parser().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestMain:
    """Test suite for main."""

    @pytest.fixture(autouse=True)
    def _settings(self, mock_settings, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(cli, "get_settings", lambda: mock_settings)

    def test_query_is_passed_to_app(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        seen = {}

        def fake_wrapper(func, settings, query):
            seen["query"] = query
            seen["log_file"] = settings.log_file

        monkeypatch.setattr(curses, "wrapper", fake_wrapper)

        assert cli.main(["--log-file", str(tmp_path / "x.log"), "tag:unread", "from:bob"]) == 0
        assert seen == {"query": "tag:unread from:bob", "log_file": tmp_path / "x.log"}

    def test_fatal_error_is_reported(self, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        def failing_wrapper(func, settings, query):
            raise SearchFailed("notmuch not found")

        monkeypatch.setattr(curses, "wrapper", failing_wrapper)

        assert cli.main([]) == 1
        assert "notmuch not found" in capsys.readouterr().err

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def interrupted(func, settings, query):
            raise KeyboardInterrupt

        monkeypatch.setattr(curses, "wrapper", interrupted)

        assert cli.main([]) == 130

    def test_invalid_configuration(self, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        def invalid_settings():
            raise ConfigurationError("Invalid configuration: editor")

        monkeypatch.setattr(cli, "get_settings", invalid_settings)

        assert cli.main([]) == 2
        assert "Invalid configuration" in capsys.readouterr().err
