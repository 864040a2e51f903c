"""
Session Module

Tracks the single account that is currently authenticated. Ledger
operations resolve their account through the session, so at most one
account is ever active per process.
"""

from enum import Enum
from typing import Optional

from .accounts import Account, AccountRegistry
from .errors import (
    AccountNotFoundError, InvalidCredentialError, InvalidInputError,
    NotAuthenticatedError, StorageFailureError
)
from .logging_config import get_logger, log_action
from .storage import SnapshotStore


class SessionState(Enum):
    """Authentication states"""
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class Session:
    """Login state over an account registry"""

    def __init__(self, registry: AccountRegistry, store: SnapshotStore):
        self.registry = registry
        self.store = store
        self._index: Optional[int] = None
        self.logger = get_logger("simbank.session")

    @property
    def state(self) -> SessionState:
        if self._index is None:
            return SessionState.UNAUTHENTICATED
        return SessionState.AUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED

    def register(self, name: str, pin: int) -> Account:
        """
        Create and persist a new account

        Registration does not log the new account in.

        Raises:
            InvalidInputError: If called while logged in, or on a bad name/PIN
            CapacityExceededError: If the registry is full
            DuplicateAccountError: If the name or the PIN is taken
            StorageFailureError: If the snapshot cannot be saved
        """
        if self.is_authenticated:
            raise InvalidInputError("Log out before registering a new account")

        account = self.registry.create(name, pin)
        try:
            self.store.save(self.registry)
        except StorageFailureError:
            log_action(self.logger, "error", "Account created but not saved",
                       account=name, action="create_account")
            raise
        return account

    def login(self, name: str, pin: int) -> Account:
        """
        Authenticate with name and PIN

        Raises:
            InvalidInputError: If an account is already logged in
            InvalidCredentialError: If no account matches both fields
        """
        if self.is_authenticated:
            raise InvalidInputError("An account is already logged in")

        try:
            self._index = self.registry.find_by_credentials(name, pin)
        except AccountNotFoundError:
            log_action(self.logger, "warning", "Login failed",
                       account=name, action="login")
            raise InvalidCredentialError("Login failed. Invalid credentials.")

        log_action(self.logger, "info", "Login succeeded",
                   account=name, action="login")
        return self.current_account()

    def logout(self) -> None:
        """End the session; a no-op when nobody is logged in"""
        if self._index is None:
            return
        name = self.registry.active_account(self._index).name
        self._index = None
        log_action(self.logger, "info", "Logged out", account=name, action="logout")

    def current_account(self) -> Account:
        """
        The active account

        Raises:
            NotAuthenticatedError: If nobody is logged in
        """
        if self._index is None:
            raise NotAuthenticatedError("No account is logged in")
        return self.registry.active_account(self._index)

    def verify_pin(self, pin: int) -> Account:
        """
        Re-verify the active account's PIN before a sensitive operation

        Raises:
            NotAuthenticatedError: If nobody is logged in
            InvalidCredentialError: If the PIN does not match
        """
        account = self.current_account()
        if not account.verify_pin(pin):
            log_action(self.logger, "warning", "PIN verification failed",
                       account=account.name, action="verify_pin")
            raise InvalidCredentialError("Invalid PIN entered.")
        return account
