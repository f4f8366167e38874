"""Error taxonomy for database access and session logic.

Every failure coming out of a driver is mapped to one of these classes inside
the adapters. The session layer catches ``DbError`` and turns it into a message
on screen; nothing below is ever fatal to the process.
"""


class DbError(Exception):
    """Base class for all dbterm database errors."""

    kind = "general"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class DbConnectionError(DbError, ConnectionError):
    """Handshake, authentication or network failure."""

    kind = "connection"


class NotConnectedError(DbConnectionError):
    """Raised when an operation needs a connection and the registry is empty."""

    def __init__(self, message: str = "No database connection available."):
        super().__init__(message)


class QueryError(DbError):
    """Malformed SQL, constraint violation, missing table, ..."""

    kind = "query"


class QueryTimeoutError(QueryError, TimeoutError):
    """A driver call did not finish within the configured timeout."""

    kind = "timeout"


class TransactionError(DbError):
    """Begin, commit or rollback failed, or a finished transaction was reused."""

    kind = "transaction"


class CsvImportError(DbError):
    kind = "import"


class CsvExportError(DbError):
    kind = "export"


class ConfigurationError(DbError, ValueError):
    """Missing or invalid connection parameters."""

    kind = "configuration"


class GeneralError(DbError):
    kind = "general"
