"""
Storage Backend Module

Persists the whole account registry as one snapshot: a versioned header
followed by one fixed-width binary record per account. Provides an
abstract store interface with a file implementation and an in-memory
implementation for testing.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Union
from pathlib import Path
import math
import os
import struct
import tempfile

from .accounts import NAME_FIELD_SIZE, Account, AccountRegistry, validate_name, validate_pin
from .config import SimBankConfig, get_config
from .currency import FOREIGN_CURRENCIES
from .errors import (
    CapacityExceededError, DuplicateAccountError, InvalidInputError, StorageFailureError
)
from .logging_config import get_logger, log_action
from .market import ASSET_ORDER


MAGIC = b"SBNK"
SCHEMA_VERSION = 1

# magic, schema version, reserved, record count
HEADER = struct.Struct("<4sHHI")

# name, pin, balance, loan, crypto, gold, silver, eur, gbp, inr
RECORD = struct.Struct(f"<{NAME_FIELD_SIZE}si8d")


def encode_account(account: Account) -> bytes:
    """Pack one account into its fixed-width record"""
    name = account.name.encode("utf-8")
    if len(name) >= NAME_FIELD_SIZE:
        raise StorageFailureError(f"Name too long to store: {account.name!r}")

    return RECORD.pack(
        name,
        account.pin,
        account.balance,
        account.loan,
        *(account.assets[asset] for asset in ASSET_ORDER),
        *(account.currencies[currency] for currency in FOREIGN_CURRENCIES)
    )


def decode_account(record: bytes) -> Account:
    """Unpack one fixed-width record into an account"""
    name, pin, balance, loan, *holdings = RECORD.unpack(record)
    asset_values = holdings[:len(ASSET_ORDER)]
    currency_values = holdings[len(ASSET_ORDER):]

    try:
        decoded_name = name.split(b"\0", 1)[0].decode("utf-8")
    except UnicodeDecodeError as e:
        raise StorageFailureError(f"Corrupt account name in snapshot: {e}")

    return Account(
        name=decoded_name,
        pin=pin,
        balance=balance,
        loan=loan,
        assets=dict(zip(ASSET_ORDER, asset_values)),
        currencies=dict(zip(FOREIGN_CURRENCIES, currency_values))
    )


def encode_snapshot(accounts: List[Account]) -> bytes:
    """Serialize an ordered list of accounts as header plus records"""
    header = HEADER.pack(MAGIC, SCHEMA_VERSION, 0, len(accounts))
    return header + b"".join(encode_account(account) for account in accounts)


def decode_snapshot(data: bytes) -> List[Account]:
    """
    Deserialize a snapshot produced by encode_snapshot()

    Raises:
        StorageFailureError: On a short, oversized or unrecognised snapshot
    """
    if len(data) < HEADER.size:
        raise StorageFailureError("Snapshot is truncated: incomplete header")

    magic, version, _reserved, count = HEADER.unpack_from(data)
    if magic != MAGIC:
        raise StorageFailureError("Snapshot has an unrecognised format")
    if version != SCHEMA_VERSION:
        raise StorageFailureError(f"Unsupported snapshot schema version {version}")

    expected = HEADER.size + count * RECORD.size
    if len(data) < expected:
        raise StorageFailureError(
            f"Snapshot is truncated: expected {count} records"
        )
    if len(data) > expected:
        raise StorageFailureError("Snapshot has trailing data after the last record")

    return [
        decode_account(data[offset:offset + RECORD.size])
        for offset in range(HEADER.size, expected, RECORD.size)
    ]


def validate_record(account: Account, config: SimBankConfig) -> None:
    """
    Check a decoded account holds values registration and the ledger allow

    Raises:
        StorageFailureError: On a bad name or PIN, or a negative or non-finite amount
    """
    try:
        validate_name(account.name)
        validate_pin(account.pin, config)
    except InvalidInputError as e:
        raise StorageFailureError(f"Corrupt account record in snapshot: {e.message}") from e

    amounts = [account.balance, account.loan,
               *account.assets.values(), *account.currencies.values()]
    if not all(math.isfinite(amount) and amount >= 0 for amount in amounts):
        raise StorageFailureError(
            f"Corrupt account record in snapshot: invalid amount for {account.name!r}"
        )


class SnapshotStore(ABC):
    """Abstract interface for registry snapshot backends"""

    def __init__(self, config: Optional[SimBankConfig] = None):
        self.config = config or get_config()
        self.logger = get_logger("simbank.storage")

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Replace the stored snapshot"""
        pass

    @abstractmethod
    def read(self) -> Optional[bytes]:
        """Return the stored snapshot, or None if nothing was ever saved"""
        pass

    def save(self, registry: AccountRegistry) -> None:
        """
        Persist every account in the registry, overwriting the prior snapshot

        Raises:
            StorageFailureError: If the snapshot cannot be written
        """
        data = encode_snapshot(registry.accounts)
        self.write(data)
        self.logger.debug(f"Saved snapshot of {len(registry)} account(s)")

    def load(self) -> AccountRegistry:
        """
        Rebuild the registry from the stored snapshot

        A missing snapshot yields an empty registry.

        Raises:
            StorageFailureError: If the snapshot exists but cannot be fully read
        """
        data = self.read()
        if data is None:
            log_action(self.logger, "info", "No snapshot found, starting empty",
                       action="load")
            return AccountRegistry(config=self.config)

        accounts = decode_snapshot(data)
        for account in accounts:
            validate_record(account, self.config)

        try:
            registry = AccountRegistry(accounts, config=self.config)
        except (CapacityExceededError, DuplicateAccountError) as e:
            raise StorageFailureError(f"Snapshot violates registry invariants: {e}") from e
        log_action(self.logger, "info", f"Loaded {len(registry)} existing account(s)",
                   action="load")
        return registry


class InMemorySnapshotStore(SnapshotStore):
    """
    In-memory snapshot store for testing

    ``fail_writes`` and ``write_count`` are test hooks: the first makes every
    write raise StorageFailureError, the second counts successful writes.
    """

    def __init__(self, config: Optional[SimBankConfig] = None):
        super().__init__(config)
        self._data: Optional[bytes] = None
        self.fail_writes = False
        self.write_count = 0

    def write(self, data: bytes) -> None:
        if self.fail_writes:
            raise StorageFailureError("Simulated write failure")
        self._data = bytes(data)
        self.write_count += 1

    def read(self) -> Optional[bytes]:
        return self._data


class FileSnapshotStore(SnapshotStore):
    """Snapshot store backed by a single binary file"""

    def __init__(
        self,
        path: Union[str, Path, None] = None,
        config: Optional[SimBankConfig] = None
    ):
        super().__init__(config)
        self.path = Path(path if path is not None else self.config.data_file)

    def write(self, data: bytes) -> None:
        """Write to a sibling temporary file, then swap it into place"""
        directory = self.path.parent
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            log_action(self.logger, "error", f"Failed to save snapshot to {self.path}",
                       action="save", resource=str(self.path), exc_info=True)
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageFailureError(f"File operation failed: {e}") from e

    def read(self) -> Optional[bytes]:
        try:
            with open(self.path, "rb") as handle:
                return handle.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            log_action(self.logger, "error", f"Failed to load snapshot from {self.path}",
                       action="load", resource=str(self.path), exc_info=True)
            raise StorageFailureError(f"File operation failed: {e}") from e
