"""
Dependencies shared by the API routers
"""

from typing import Optional
from fastapi import HTTPException, status

from ..bank import Bank
from ..config import get_config
from ..errors import (
    AccountNotFoundError, BankingError, CapacityExceededError, DuplicateAccountError,
    InsufficientFundsError, InvalidCredentialError, InvalidInputError,
    NotAuthenticatedError, StorageFailureError
)


# Global bank instance, opened on first use
_bank: Optional[Bank] = None


def get_bank() -> Bank:
    """Dependency returning the process-wide bank"""
    global _bank
    if _bank is None:
        _bank = Bank.open(get_config())
    return _bank


def set_bank(bank: Optional[Bank]) -> None:
    """Replace the process-wide bank (None reopens from config on next use)"""
    global _bank
    _bank = bank


STATUS_BY_CODE = {
    InvalidInputError.code: status.HTTP_400_BAD_REQUEST,
    InvalidCredentialError.code: status.HTTP_401_UNAUTHORIZED,
    NotAuthenticatedError.code: status.HTTP_401_UNAUTHORIZED,
    AccountNotFoundError.code: status.HTTP_404_NOT_FOUND,
    DuplicateAccountError.code: status.HTTP_409_CONFLICT,
    InsufficientFundsError.code: status.HTTP_409_CONFLICT,
    CapacityExceededError.code: status.HTTP_507_INSUFFICIENT_STORAGE,
    StorageFailureError.code: status.HTTP_507_INSUFFICIENT_STORAGE,
}


def http_error(error: BankingError) -> HTTPException:
    """Translate a banking error into an HTTP error response"""
    return HTTPException(
        status_code=STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST),
        detail={"code": error.code, "message": error.message}
    )
