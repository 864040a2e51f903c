"""
Account Management Module

Defines the Account record and the AccountRegistry that owns every account
for the lifetime of the process. Names and PINs are each unique across the
registry, and the registry never holds more than its configured capacity.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from .config import SimBankConfig, get_config
from .currency import Currency, FOREIGN_CURRENCIES
from .errors import (
    AccountNotFoundError, CapacityExceededError, DuplicateAccountError,
    InvalidInputError
)
from .logging_config import get_logger, log_action
from .market import AssetType, ASSET_ORDER


# Size of the stored name field, NUL terminator included
NAME_FIELD_SIZE = 50
MAX_NAME_LENGTH = NAME_FIELD_SIZE - 1


def _empty_assets() -> Dict[AssetType, float]:
    return {asset: 0.0 for asset in ASSET_ORDER}


def _empty_currencies() -> Dict[Currency, float]:
    return {currency: 0.0 for currency in FOREIGN_CURRENCIES}


@dataclass
class Account:
    """
    Identity and financial state of one customer

    ``name`` and ``pin`` never change after creation. ``loan`` is either 0
    (no loan) or the single fixed loan amount outstanding.
    """
    name: str
    pin: int
    balance: float
    loan: float = 0.0
    assets: Dict[AssetType, float] = field(default_factory=_empty_assets)
    currencies: Dict[Currency, float] = field(default_factory=_empty_currencies)

    @property
    def has_loan(self) -> bool:
        return self.loan != 0

    def verify_pin(self, pin: int) -> bool:
        """Check a re-entered PIN against the stored one"""
        return self.pin == pin


def validate_name(name: str) -> str:
    """
    Validate an account name: non-empty, alphabetic only, fits the stored field

    Raises:
        InvalidInputError: If the name is not acceptable
    """
    if not isinstance(name, str) or not name:
        raise InvalidInputError("Name must not be empty")
    if not name.isascii() or not name.isalpha():
        raise InvalidInputError("Name must contain only alphabetic characters")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidInputError(f"Name must be at most {MAX_NAME_LENGTH} characters")
    return name


def validate_pin(pin: int, config: Optional[SimBankConfig] = None) -> int:
    """
    Validate a PIN is an integer within the configured range

    Raises:
        InvalidInputError: If the PIN is out of range or not an integer
    """
    config = config or get_config()
    if isinstance(pin, bool) or not isinstance(pin, int):
        raise InvalidInputError("PIN must be an integer")
    if not config.min_pin <= pin <= config.max_pin:
        raise InvalidInputError(
            f"PIN must be between {config.min_pin} and {config.max_pin}"
        )
    return pin


class AccountRegistry:
    """
    Ordered, capacity-bounded collection of accounts

    The registry hands out mutable references; keeping a single account
    active at a time is the session's job.
    """

    def __init__(
        self,
        accounts: Optional[Iterable[Account]] = None,
        config: Optional[SimBankConfig] = None
    ):
        self.config = config or get_config()
        self.capacity = self.config.max_accounts
        self._accounts: List[Account] = []
        self.logger = get_logger("simbank.accounts")

        for account in accounts or ():
            self._add(account)

    def _add(self, account: Account) -> None:
        if self.is_full:
            raise CapacityExceededError(
                f"Maximum account limit reached ({self.capacity})"
            )
        if self.exists(account.name, account.pin):
            raise DuplicateAccountError(
                "Account with this name or PIN already exists"
            )
        self._accounts.append(account)

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[Account]:
        return iter(self._accounts)

    @property
    def accounts(self) -> List[Account]:
        """Snapshot of the accounts in registration order"""
        return list(self._accounts)

    @property
    def is_full(self) -> bool:
        return len(self._accounts) >= self.capacity

    def exists(self, name: str, pin: int) -> bool:
        """True if any account already uses this name or this PIN"""
        return any(
            account.name == name or account.pin == pin
            for account in self._accounts
        )

    def create(self, name: str, pin: int) -> Account:
        """
        Register a new account with the starting balance and empty holdings

        Raises:
            InvalidInputError: If the name or PIN is malformed
            CapacityExceededError: If the registry is full
            DuplicateAccountError: If the name or the PIN is already taken
        """
        validate_name(name)
        validate_pin(pin, self.config)

        account = Account(
            name=name,
            pin=pin,
            balance=self.config.starting_balance
        )
        self._add(account)

        log_action(
            self.logger, "info", "Account created",
            account=name, action="create_account",
            extra={"starting_balance": account.balance, "count": len(self)}
        )
        return account

    def find_by_credentials(self, name: str, pin: int) -> int:
        """
        Index of the account matching both name and PIN

        Raises:
            AccountNotFoundError: If no account matches
        """
        for index, account in enumerate(self._accounts):
            if account.name == name and account.pin == pin:
                return index
        raise AccountNotFoundError("No account matches these credentials")

    def active_account(self, index: int) -> Account:
        """
        Mutable reference to the account at ``index``

        Raises:
            AccountNotFoundError: If the index is out of range
        """
        if not 0 <= index < len(self._accounts):
            raise AccountNotFoundError(f"No account at index {index}")
        return self._accounts[index]
