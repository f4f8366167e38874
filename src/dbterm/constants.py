"""Constants and static configuration for dbterm."""

from pathlib import Path

# Application constants
APP_VERSION = "0.3.0"
EXIT_SUCCESS = 0
EXIT_FAILURE = 1

# Logging
LOG_DIR = Path.home() / ".dbterm"
DEFAULT_LOG_FILE = LOG_DIR / "dbterm.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Database constants
DB_QUERY_TIMEOUT = 30.0  # 30 seconds default timeout for every driver call
DB_POOL_SIZE = 5  # Fixed connection pool size per client
DB_POOL_ACQUIRE_TIMEOUT = 30.0  # Seconds to wait for a free pooled connection
DB_SUPPORTED_SCHEMES = ["postgres", "postgresql", "mysql", "sqlite"]

# Default ports (None means "let the driver decide")
POSTGRES_DEFAULT_PORT = 5432
MYSQL_DEFAULT_PORT = 3306

# Default administrative databases used for the first connection
POSTGRES_DEFAULT_DATABASE = "postgres"
MYSQL_DEFAULT_DATABASE = "mysql"
SQLITE_DEFAULT_DATABASE = "main"

# Session messages
SQLITE_NOT_IMPLEMENTED_MESSAGE = "SQLite is not implemented yet."
STATEMENT_SUCCESS_MESSAGE = "Query executed successfully."
OPERATION_CANCELLED_MESSAGE = "Operation cancelled."
NO_RESULTS_MESSAGE = "No results"
