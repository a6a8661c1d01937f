"""
Custom exceptions for the application.
Following SOLID principles - centralized error handling.

Every domain failure derives from LaundryError so the HTTP layer can map it
to a response with a single error handler.
"""


class LaundryError(Exception):
    """Base class for domain errors reported to the caller."""

    status_code = 400
    error_code = "laundry_error"
    default_message = "Request could not be processed"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class NotLoginError(LaundryError):
    """Raised when an operation requiring a session is attempted anonymously."""

    status_code = 401
    error_code = "not_logged_in"
    default_message = "Login is required"


class InvalidCredentialsError(LaundryError):
    """Raised when the login id or password does not match."""

    status_code = 401
    error_code = "invalid_credentials"
    default_message = "Invalid user id or password"


class InvalidUserError(LaundryError):
    """Raised when the caller does not own the resource it tries to use."""

    status_code = 403
    error_code = "invalid_user"
    default_message = "Not authorized for this resource"


class NotExistError(LaundryError):
    """Raised when a referenced entity is missing from the database."""

    status_code = 404
    error_code = "not_exist"
    default_message = "Requested resource does not exist"


class NotFilledInError(LaundryError, ValueError):
    """Raised when a required field was not provided."""

    status_code = 400
    error_code = "not_filled_in"
    default_message = "Required field is missing"

    def __init__(self, message: str = "", field: str = ""):
        super().__init__(message or (f"{field} is required" if field else ""))
        self.field = field


class DuplicateError(LaundryError):
    """Raised when a unique entity already exists."""

    status_code = 409
    error_code = "duplicate"
    default_message = "Resource already exists"


class InsufficientBalanceError(LaundryError):
    """Raised when a Metapay debit would drive the balance negative."""

    status_code = 409
    error_code = "insufficient_balance"
    default_message = "Metapay balance is insufficient"

    def __init__(self, balance: int = 0, amount: int = 0, message: str = ""):
        super().__init__(
            message
            or f"Metapay balance {balance} is insufficient for amount {amount}"
        )
        self.balance = balance
        self.amount = amount


class InvalidBookStateError(LaundryError):
    """Raised on a booking state transition that is not allowed."""

    status_code = 409
    error_code = "invalid_book_state"
    default_message = "Booking state transition is not allowed"
