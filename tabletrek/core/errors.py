"""Typed failures raised by the accounting core and mapped to HTTP responses in main."""


class TableTrekError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TableTrekError):
    """Inconsistent input; rejected before anything is written."""

    status_code = 400
    default_message = "Invalid input"


class NotFound(TableTrekError):
    status_code = 404
    default_message = "Not found"


class InsufficientFunds(TableTrekError):
    status_code = 400
    default_message = "Insufficient coins"


class UsernameTaken(TableTrekError):
    status_code = 409
    default_message = "Username already exists"


class InvalidCredentials(TableTrekError):
    status_code = 401
    default_message = "Invalid credentials"


class StorageUnavailable(TableTrekError):
    status_code = 503
    default_message = "Database unavailable"


class TransactionFailed(TableTrekError):
    """The store failed mid-operation; the whole unit of work was rolled back."""

    status_code = 500
    default_message = "Transaction failed"
