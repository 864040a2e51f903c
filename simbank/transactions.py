"""
Transaction Processing Module

Cash deposits and withdrawals, fixed-amount asset purchases, and currency
conversion for the active account. Every successful mutation is followed
by a full registry snapshot save before the result is returned.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, NoReturn, Optional, Union
from enum import Enum

from .accounts import Account
from .config import SimBankConfig, get_config
from .currency import Currency, parse_currency
from .errors import InsufficientFundsError, InvalidInputError, StorageFailureError
from .logging_config import get_logger, log_action
from .market import AssetType, Market, parse_asset
from .session import Session


class TransactionType(Enum):
    """Types of ledger mutations"""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    ASSET_PURCHASE = "asset_purchase"
    CONVERSION_TO_FOREIGN = "conversion_to_foreign"
    CONVERSION_TO_USD = "conversion_to_usd"
    INTEREST_CREDIT = "interest_credit"
    LOAN_DISBURSEMENT = "loan_disbursement"
    LOAN_REPAYMENT = "loan_repayment"


@dataclass(frozen=True)
class CashTransaction:
    """Outcome of a deposit or withdrawal"""
    transaction_type: TransactionType
    amount: float
    balance: float


@dataclass(frozen=True)
class AssetPurchase:
    """Outcome of an asset purchase"""
    asset: AssetType
    amount: float
    unit_price: float
    units: float
    holding: float
    balance: float


@dataclass(frozen=True)
class CurrencyConversion:
    """Outcome of a conversion in either direction"""
    transaction_type: TransactionType
    currency: Currency
    amount: float      # Amount given up, in the source currency
    converted: float   # Amount received, in the target currency
    holding: float
    balance: float


def validate_amount(amount: float) -> float:
    """
    Validate a user-supplied amount is a finite number greater than zero

    Raises:
        InvalidInputError: If the amount is not positive and finite
    """
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise InvalidInputError("Amount must be a number")
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidInputError("Amount must be greater than zero")
    return float(amount)


class LedgerOperation:
    """Shared plumbing for operations that mutate the active account"""

    logger_name = "simbank.ledger"

    def __init__(
        self,
        session: Session,
        market: Market,
        config: Optional[SimBankConfig] = None
    ):
        self.session = session
        self.market = market
        self.config = config or get_config()
        self.logger = get_logger(self.logger_name)

    @property
    def store(self):
        return self.session.store

    def _commit(
        self,
        account: Account,
        transaction_type: TransactionType,
        message: str,
        extra: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Save the registry after a mutation

        A failed save leaves the in-memory mutation in place and re-raises.
        """
        try:
            self.store.save(self.session.registry)
        except StorageFailureError:
            log_action(
                self.logger, "error",
                f"{message}, but the snapshot could not be saved",
                account=account.name, action=transaction_type.value, extra=extra
            )
            raise

        log_action(
            self.logger, "info", message,
            account=account.name, action=transaction_type.value, extra=extra
        )

    def _reject(self, account: Account, transaction_type: TransactionType,
                error: Exception) -> NoReturn:
        """Log a rejected operation and raise its error"""
        log_action(
            self.logger, "warning", f"{transaction_type.value} rejected: {error}",
            account=account.name, action=transaction_type.value
        )
        raise error


class TransactionProcessor(LedgerOperation):
    """Cash, asset and currency operations on the active account"""

    logger_name = "simbank.transactions"

    def deposit(self, amount: float) -> CashTransaction:
        """
        Add cash to the balance

        Raises:
            InvalidInputError: If amount <= 0
        """
        account = self.session.current_account()
        try:
            amount = validate_amount(amount)
        except InvalidInputError as e:
            self._reject(account, TransactionType.DEPOSIT, e)

        account.balance += amount

        self._commit(account, TransactionType.DEPOSIT, f"Deposited {amount:.2f}",
                     extra={"amount": amount, "balance": account.balance})
        return CashTransaction(TransactionType.DEPOSIT, amount, account.balance)

    def withdraw(self, amount: float, pin: int) -> CashTransaction:
        """
        Take cash from the balance after re-verifying the PIN

        Raises:
            InvalidInputError: If amount <= 0
            InsufficientFundsError: If amount exceeds the balance
            InvalidCredentialError: If the PIN does not match
        """
        account = self.session.current_account()
        try:
            amount = validate_amount(amount)
            if amount > account.balance:
                raise InsufficientFundsError(amount, account.balance)
        except (InvalidInputError, InsufficientFundsError) as e:
            self._reject(account, TransactionType.WITHDRAWAL, e)

        self.session.verify_pin(pin)

        account.balance -= amount

        self._commit(account, TransactionType.WITHDRAWAL, f"Withdrawn {amount:.2f}",
                     extra={"amount": amount, "balance": account.balance})
        return CashTransaction(TransactionType.WITHDRAWAL, amount, account.balance)

    def purchase_asset(self, selection: Union[AssetType, str, int], pin: int) -> AssetPurchase:
        """
        Spend the fixed purchase amount on units of one asset

        The selection is resolved before the balance is touched, so a bad
        choice leaves the account unchanged.

        Raises:
            InsufficientFundsError: If the balance is below the purchase amount
            InvalidCredentialError: If the PIN does not match
            InvalidInputError: If the selection does not name an asset
        """
        account = self.session.current_account()
        amount = self.config.asset_purchase_amount

        if account.balance < amount:
            self._reject(account, TransactionType.ASSET_PURCHASE,
                         InsufficientFundsError(amount, account.balance))

        self.session.verify_pin(pin)

        try:
            asset = parse_asset(selection)
        except InvalidInputError as e:
            self._reject(account, TransactionType.ASSET_PURCHASE, e)

        unit_price = self.market.current_prices().get(asset)
        units = amount / unit_price

        account.balance -= amount
        account.assets[asset] += units

        self._commit(
            account, TransactionType.ASSET_PURCHASE,
            f"Purchased {units:.4f} units of {asset.label}",
            extra={"asset": asset.value, "units": units, "unit_price": unit_price,
                   "balance": account.balance}
        )
        return AssetPurchase(
            asset=asset,
            amount=amount,
            unit_price=unit_price,
            units=units,
            holding=account.assets[asset],
            balance=account.balance
        )

    def convert_to_foreign(self, currency: Union[Currency, str], amount: float) -> CurrencyConversion:
        """
        Convert USD from the balance into a foreign currency holding

        Raises:
            InvalidInputError: If amount <= 0 or the currency is not EUR/GBP/INR
            InsufficientFundsError: If amount exceeds the balance
        """
        account = self.session.current_account()
        try:
            currency = parse_currency(currency)
            amount = validate_amount(amount)
            if amount > account.balance:
                raise InsufficientFundsError(amount, account.balance)
        except (InvalidInputError, InsufficientFundsError) as e:
            self._reject(account, TransactionType.CONVERSION_TO_FOREIGN, e)

        converted = self.market.converter.from_usd(amount, currency)
        account.balance -= amount
        account.currencies[currency] += converted

        self._commit(
            account, TransactionType.CONVERSION_TO_FOREIGN,
            f"Converted {amount:.2f} USD to {converted:.2f} {currency.code}",
            extra={"currency": currency.code, "amount": amount, "converted": converted}
        )
        return CurrencyConversion(
            transaction_type=TransactionType.CONVERSION_TO_FOREIGN,
            currency=currency,
            amount=amount,
            converted=converted,
            holding=account.currencies[currency],
            balance=account.balance
        )

    def convert_to_usd(self, currency: Union[Currency, str], amount: float) -> CurrencyConversion:
        """
        Convert part of a foreign currency holding back into the USD balance

        Raises:
            InvalidInputError: If amount <= 0 or the currency is not EUR/GBP/INR
            InsufficientFundsError: If amount exceeds the holding
        """
        account = self.session.current_account()
        try:
            currency = parse_currency(currency)
            amount = validate_amount(amount)
            if amount > account.currencies[currency]:
                raise InsufficientFundsError(amount, account.currencies[currency])
        except (InvalidInputError, InsufficientFundsError) as e:
            self._reject(account, TransactionType.CONVERSION_TO_USD, e)

        converted = self.market.converter.to_usd(amount, currency)
        account.currencies[currency] -= amount
        account.balance += converted

        self._commit(
            account, TransactionType.CONVERSION_TO_USD,
            f"Converted {amount:.2f} {currency.code} to {converted:.2f} USD",
            extra={"currency": currency.code, "amount": amount, "converted": converted}
        )
        return CurrencyConversion(
            transaction_type=TransactionType.CONVERSION_TO_USD,
            currency=currency,
            amount=amount,
            converted=converted,
            holding=account.currencies[currency],
            balance=account.balance
        )
