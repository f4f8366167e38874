"""Command-line entry point for dbterm."""

import logging
import sys
from pathlib import Path
from typing import Optional

from .constants import (
    APP_VERSION,
    DB_QUERY_TIMEOUT,
    DEFAULT_LOG_FILE,
    EXIT_FAILURE,
    EXIT_SUCCESS,
    LOG_FORMAT,
)
from .tui.app import DbTermApp

logger = logging.getLogger("dbterm")

USAGE = "Usage: dbterm [--timeout <seconds>] [--log-file <path>] [--debug] [--version] [--help]\n"


def print_help() -> None:
    sys.stdout.write(USAGE)
    sys.stdout.write("\n")
    sys.stdout.write("Interactive terminal client for PostgreSQL and MySQL.\n")
    sys.stdout.write("\n")
    sys.stdout.write("Options:\n")
    sys.stdout.write(f"  --timeout <seconds>  - Timeout for every database call (default: {DB_QUERY_TIMEOUT:g})\n")
    sys.stdout.write(f"  --log-file <path>    - Log file (default: {DEFAULT_LOG_FILE})\n")
    sys.stdout.write("  --debug              - Log at DEBUG level\n")
    sys.stdout.write("  --version            - Print the version and exit\n")
    sys.stdout.write("  --help               - Show this message and exit\n")
    sys.stdout.write("\n")
    sys.stdout.write("Keys:\n")
    sys.stdout.write("  Up/Down, Enter, Tab, Backspace  - navigate and edit\n")
    sys.stdout.write("  F5 or Ctrl+E                    - run the SQL buffer\n")
    sys.stdout.write("  F1                              - back to database selection\n")
    sys.stdout.write("  Esc / q                         - back or quit\n")
    sys.stdout.write("  Ctrl+C                          - quit immediately\n")


class Options:
    """Parsed command-line options."""

    def __init__(self):
        self.timeout = DB_QUERY_TIMEOUT
        self.log_file: Path = DEFAULT_LOG_FILE
        self.debug = False
        self.show_version = False
        self.show_help = False


def _fail(message: str) -> None:
    sys.stderr.write(f"Error: {message}\n")
    sys.stderr.write(USAGE)
    sys.exit(EXIT_FAILURE)


def parse_args(argv: list[str]) -> Options:
    """Parse ``argv`` (without the program name); exits on invalid input."""
    options = Options()
    args = list(argv)

    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ("--help", "-h"):
            options.show_help = True
        elif arg == "--version":
            options.show_version = True
        elif arg == "--debug":
            options.debug = True
        elif arg in ("--timeout", "--log-file"):
            if i + 1 >= len(args):
                _fail(f"{arg} requires a value")
            value = args[i + 1]
            if arg == "--timeout":
                try:
                    options.timeout = float(value)
                except ValueError:
                    _fail(f"--timeout must be a number of seconds, got {value!r}")
                if options.timeout <= 0:
                    _fail("--timeout must be positive")
            else:
                options.log_file = Path(value).expanduser()
            i += 1
        else:
            _fail(f"Unknown argument '{arg}'")
        i += 1

    return options


def setup_logging(log_file: Path, debug: bool = False) -> None:
    """Route the ``dbterm`` logger to a file; the terminal belongs to the UI."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False


def main(argv: Optional[list[str]] = None) -> int:
    options = parse_args(sys.argv[1:] if argv is None else argv)

    if options.show_help:
        print_help()
        return EXIT_SUCCESS
    if options.show_version:
        sys.stdout.write(f"dbterm {APP_VERSION}\n")
        return EXIT_SUCCESS

    try:
        setup_logging(options.log_file, options.debug)
    except OSError as e:
        sys.stderr.write(f"Error: cannot open log file {options.log_file}: {e}\n")
        return EXIT_FAILURE

    logger.info(f"Starting dbterm {APP_VERSION} (timeout={options.timeout:g}s)")
    app = DbTermApp(timeout=options.timeout)
    app.run()
    logger.info("dbterm exited")
    return app.return_code or EXIT_SUCCESS


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
