from __future__ import annotations

from fastapi import status


###############################################################################
class ExplorerError(Exception):
    """Base error of the database explorer.

    `message` is safe to return to the client. Driver details stay in the
    server log through the chained cause.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to execute query."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


###############################################################################
class DatabaseUnavailableError(ExplorerError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Database explorer is unavailable without an active database connection."


###############################################################################
class InvalidRequestError(ExplorerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request."


###############################################################################
class TableNotFoundError(ExplorerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Table not found."


###############################################################################
class QueryExecutionError(ExplorerError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to execute query."
