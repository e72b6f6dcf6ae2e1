"""
Unit tests for the command-line entry point.
"""

import pytest

from minihttp import __main__ as cli
from minihttp.config import ServerConfig


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("HTTP_HOST", "HTTP_PORT", "HTTP_TIMEOUT",
                 "HTTP_BODY_FILE", "HTTP_LOG_LEVEL", "HTTP_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def no_logging_setup(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)


class TestParser:

    def test_defaults(self):
        args = cli.build_parser(ServerConfig()).parse_args([])

        assert args.host == "127.0.0.1"
        assert args.port == 8993
        assert args.body_file == "hello.html"
        assert args.log_level == "INFO"
        assert args.log_format == "text"

    def test_flags(self):
        args = cli.build_parser(ServerConfig()).parse_args([
            "-H", "0.0.0.0", "-p", "3000", "-f", "index.html",
            "-l", "debug", "--log-format", "json",
        ])

        assert args.host == "0.0.0.0"
        assert args.port == 3000
        assert args.body_file == "index.html"
        assert args.log_level == "DEBUG"
        assert args.log_format == "json"

    def test_defaults_follow_config(self):
        args = cli.build_parser(ServerConfig(port=4000)).parse_args([])
        assert args.port == 4000

    def test_unknown_log_level(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.build_parser(ServerConfig()).parse_args(["--log-level", "loud"])
        assert exc_info.value.code == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.build_parser(ServerConfig()).parse_args(["--version"])

        assert exc_info.value.code == 0
        assert "minihttp" in capsys.readouterr().out


class TestMain:

    def test_invalid_port(self, clean_env, capsys):
        assert cli.main(["--port", "70000"]) == 2
        assert "Invalid port" in capsys.readouterr().err

    def test_runs_server(self, clean_env, no_logging_setup, monkeypatch):
        seen = {}

        def fake_run(server):
            seen["address"] = server.address
            seen["body_file"] = server.config.body_file

        monkeypatch.setattr(cli.HTTPServer, "run", fake_run)

        assert cli.main(["--port", "3000", "--body-file", "page.html"]) == 0
        assert seen == {"address": ("127.0.0.1", 3000), "body_file": "page.html"}

    def test_environment_defaults(self, clean_env, no_logging_setup, monkeypatch):
        seen = {}
        clean_env.setenv("HTTP_PORT", "3100")
        monkeypatch.setattr(cli.HTTPServer, "run", lambda server: seen.update(port=server.config.port))

        assert cli.main([]) == 0
        assert seen["port"] == 3100

    def test_bind_failure(self, clean_env, no_logging_setup, monkeypatch, capsys):
        def fail(server):
            raise OSError("Address already in use")

        monkeypatch.setattr(cli.HTTPServer, "run", fail)

        assert cli.main([]) == 1
        assert "Address already in use" in capsys.readouterr().err

    def test_invalid_environment(self, clean_env, capsys):
        clean_env.setenv("HTTP_PORT", "abc")

        assert cli.main([]) == 2
        assert "invalid environment setting" in capsys.readouterr().err
