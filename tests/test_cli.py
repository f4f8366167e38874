"""Tests for command-line parsing."""

from pathlib import Path

import pytest

from dbterm.cli import main, parse_args
from dbterm.constants import APP_VERSION, DB_QUERY_TIMEOUT, DEFAULT_LOG_FILE, EXIT_FAILURE, EXIT_SUCCESS


def test_defaults():
    options = parse_args([])
    assert options.timeout == DB_QUERY_TIMEOUT
    assert options.log_file == DEFAULT_LOG_FILE
    assert options.debug is False


def test_flags():
    options = parse_args(["--timeout", "2.5", "--log-file", "/tmp/dbterm-test.log", "--debug"])
    assert options.timeout == 2.5
    assert options.log_file == Path("/tmp/dbterm-test.log")
    assert options.debug is True


@pytest.mark.parametrize("argv", [["--timeout"], ["--timeout", "soon"], ["--timeout", "0"], ["--bogus"]])
def test_invalid_arguments_exit(argv, capsys):
    with pytest.raises(SystemExit) as exc_info:
        parse_args(argv)
    assert exc_info.value.code == EXIT_FAILURE
    assert "Error:" in capsys.readouterr().err


def test_version(capsys):
    assert main(["--version"]) == EXIT_SUCCESS
    assert APP_VERSION in capsys.readouterr().out


def test_help(capsys):
    assert main(["--help"]) == EXIT_SUCCESS
    assert "--timeout" in capsys.readouterr().out
