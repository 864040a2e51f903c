"""Banking error kinds raised by registry, storage and ledger operations."""


class BankingError(ValueError):
    """Base exception for banking errors."""

    code = "BANKING_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InsufficientFundsError(BankingError):
    """Raised when a balance or holding cannot cover the requested amount."""

    code = "INSUFFICIENT_FUNDS"

    def __init__(self, requested: float, available: float):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient funds: requested {requested:.2f}, available {available:.2f}"
        )


class InvalidCredentialError(BankingError):
    """Raised on a login mismatch or a failed PIN re-verification."""

    code = "INVALID_CREDENTIAL"


class DuplicateAccountError(BankingError):
    """Raised when the name or the PIN is already used by another account."""

    code = "DUPLICATE_ACCOUNT"


class StorageFailureError(BankingError):
    """Raised when the snapshot file cannot be written or fully read."""

    code = "STORAGE_FAILURE"


class InvalidInputError(BankingError):
    """Raised when a user-supplied value is malformed or out of range."""

    code = "INVALID_INPUT"


class CapacityExceededError(BankingError):
    """Raised when the registry already holds the maximum number of accounts."""

    code = "CAPACITY_EXCEEDED"


class AccountNotFoundError(BankingError):
    """Raised when no account matches the given credentials or index."""

    code = "NOT_FOUND"


class NotAuthenticatedError(BankingError):
    """Raised when a ledger operation is attempted without an active account."""

    code = "NOT_AUTHENTICATED"
