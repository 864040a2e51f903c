"""
Test suite for transactions module

Tests deposits, withdrawals, asset purchases and currency conversion on the
active account, including validation order, PIN checks and persistence.
"""

import logging
import math

import pytest

from simbank.config import SimBankConfig
from simbank.currency import Currency
from simbank.market import AssetType, Market
from simbank.accounts import AccountRegistry
from simbank.storage import InMemorySnapshotStore
from simbank.session import Session
from simbank.errors import (
    InsufficientFundsError, InvalidCredentialError, InvalidInputError,
    NotAuthenticatedError, StorageFailureError
)
from simbank.transactions import TransactionProcessor, TransactionType, validate_amount


class TestValidateAmount:
    """Test amount validation"""

    @pytest.mark.parametrize("amount", [0.01, 1, 250.5])
    def test_valid(self, amount):
        assert validate_amount(amount) == float(amount)

    @pytest.mark.parametrize("amount", [0, -5, -0.01, math.nan, math.inf, True, "10"])
    def test_invalid(self, amount):
        with pytest.raises(InvalidInputError):
            validate_amount(amount)


class TestTransactionProcessor:
    """Test transaction processing functionality"""

    def setup_method(self):
        """Set up test fixtures"""
        self.config = SimBankConfig(market_seed=1)
        self.registry = AccountRegistry(config=self.config)
        self.store = InMemorySnapshotStore(config=self.config)
        self.session = Session(self.registry, self.store)
        self.market = Market.from_config(self.config)
        self.processor = TransactionProcessor(self.session, self.market, self.config)

        self.session.register("Alice", 4321)
        self.account = self.session.login("Alice", 4321)
        self.writes = self.store.write_count

    def saved_account(self):
        return self.store.load().active_account(0)

    # Deposits

    def test_deposit(self):
        result = self.processor.deposit(200.0)

        assert result.transaction_type == TransactionType.DEPOSIT
        assert result.amount == 200.0
        assert result.balance == 1200.0
        assert self.account.balance == 1200.0
        assert self.saved_account().balance == 1200.0
        assert self.store.write_count == self.writes + 1

    @pytest.mark.parametrize("amount", [0, -50.0])
    def test_deposit_rejects_non_positive(self, amount):
        with pytest.raises(InvalidInputError):
            self.processor.deposit(amount)
        assert self.account.balance == 1000.0
        assert self.store.write_count == self.writes

    def test_deposit_requires_login(self):
        self.session.logout()
        with pytest.raises(NotAuthenticatedError):
            self.processor.deposit(10.0)

    def test_deposit_save_failure_keeps_mutation(self):
        """Test a failed save is reported without rolling back the balance"""
        self.store.fail_writes = True
        with pytest.raises(StorageFailureError):
            self.processor.deposit(200.0)
        assert self.account.balance == 1200.0

    # Withdrawals

    def test_withdraw(self):
        result = self.processor.withdraw(300.0, pin=4321)

        assert result.transaction_type == TransactionType.WITHDRAWAL
        assert result.balance == 700.0
        assert self.saved_account().balance == 700.0

    def test_withdraw_entire_balance(self):
        result = self.processor.withdraw(1000.0, pin=4321)
        assert result.balance == 0.0

    def test_withdraw_more_than_balance(self):
        with pytest.raises(InsufficientFundsError) as exc_info:
            self.processor.withdraw(5000.0, pin=4321)

        assert exc_info.value.requested == 5000.0
        assert exc_info.value.available == 1000.0
        assert self.account.balance == 1000.0
        assert self.store.write_count == self.writes

    def test_withdraw_checks_funds_before_pin(self):
        """Test an overdraft is reported even with a wrong PIN"""
        with pytest.raises(InsufficientFundsError):
            self.processor.withdraw(5000.0, pin=1111)

    def test_withdraw_wrong_pin(self):
        with pytest.raises(InvalidCredentialError):
            self.processor.withdraw(100.0, pin=1111)
        assert self.account.balance == 1000.0
        assert self.store.write_count == self.writes

    def test_withdraw_rejects_non_positive(self):
        with pytest.raises(InvalidInputError):
            self.processor.withdraw(0, pin=4321)

    # Asset purchases

    @pytest.mark.parametrize("selection,asset,price", [
        (AssetType.CRYPTO, AssetType.CRYPTO, 150.0),
        ("gold", AssetType.GOLD, 60.0),
        (3, AssetType.SILVER, 25.0),
    ])
    def test_purchase_asset(self, selection, asset, price):
        result = self.processor.purchase_asset(selection, pin=4321)

        assert result.asset is asset
        assert result.amount == 100.0
        assert result.unit_price == price
        assert result.units == pytest.approx(100.0 / price)
        assert result.balance == 900.0
        assert self.account.assets[asset] == pytest.approx(100.0 / price)
        assert self.saved_account().assets[asset] == pytest.approx(100.0 / price)

    def test_purchases_accumulate(self):
        self.processor.purchase_asset(AssetType.SILVER, pin=4321)
        self.processor.purchase_asset(AssetType.SILVER, pin=4321)

        assert self.account.assets[AssetType.SILVER] == pytest.approx(8.0)
        assert self.account.balance == 800.0

    def test_purchase_uses_current_price(self):
        update = self.market.refresh_prices()
        result = self.processor.purchase_asset(AssetType.CRYPTO, pin=4321)
        assert result.unit_price == update.prices.crypto

    def test_purchase_invalid_choice_leaves_balance_unchanged(self):
        """Test a bad selection fails without touching the balance"""
        with pytest.raises(InvalidInputError):
            self.processor.purchase_asset("platinum", pin=4321)

        assert self.account.balance == 1000.0
        assert all(units == 0.0 for units in self.account.assets.values())
        assert self.store.write_count == self.writes

    def test_rejected_purchase_is_logged(self, caplog):
        """Test a rejection is logged as a warning before its error propagates"""
        with caplog.at_level(logging.WARNING, logger="simbank.transactions"):
            with pytest.raises(InvalidInputError) as exc_info:
                self.processor.purchase_asset(7, pin=4321)

        record = caplog.records[-1]
        assert record.levelname == "WARNING"
        assert record.action == TransactionType.ASSET_PURCHASE.value
        assert str(exc_info.value) in record.getMessage()

    def test_purchase_insufficient_funds(self):
        self.processor.withdraw(950.0, pin=4321)
        writes = self.store.write_count

        with pytest.raises(InsufficientFundsError):
            self.processor.purchase_asset(AssetType.GOLD, pin=4321)
        assert self.account.balance == 50.0
        assert self.store.write_count == writes

    def test_purchase_with_exact_amount(self):
        self.processor.withdraw(900.0, pin=4321)
        result = self.processor.purchase_asset(AssetType.GOLD, pin=4321)
        assert result.balance == 0.0

    def test_purchase_wrong_pin(self):
        with pytest.raises(InvalidCredentialError):
            self.processor.purchase_asset(AssetType.GOLD, pin=1111)
        assert self.account.balance == 1000.0

    # Currency conversion

    def test_convert_to_foreign(self):
        result = self.processor.convert_to_foreign("EUR", 110.0)

        assert result.transaction_type == TransactionType.CONVERSION_TO_FOREIGN
        assert result.currency is Currency.EUR
        assert result.converted == pytest.approx(100.0)
        assert result.balance == 890.0
        assert self.account.currencies[Currency.EUR] == pytest.approx(100.0)
        assert self.saved_account().currencies[Currency.EUR] == pytest.approx(100.0)

    def test_convert_to_foreign_insufficient_funds(self):
        with pytest.raises(InsufficientFundsError):
            self.processor.convert_to_foreign(Currency.GBP, 1000.01)
        assert self.account.balance == 1000.0
        assert self.account.currencies[Currency.GBP] == 0.0

    def test_convert_to_usd(self):
        self.processor.convert_to_foreign(Currency.GBP, 254.0)
        result = self.processor.convert_to_usd(Currency.GBP, 100.0)

        assert result.transaction_type == TransactionType.CONVERSION_TO_USD
        assert result.converted == pytest.approx(127.0)
        assert result.holding == pytest.approx(100.0)
        assert self.account.balance == pytest.approx(873.0)

    def test_convert_to_usd_more_than_holding(self):
        with pytest.raises(InsufficientFundsError):
            self.processor.convert_to_usd(Currency.INR, 1.0)
        assert self.account.balance == 1000.0

    @pytest.mark.parametrize("currency", [Currency.EUR, Currency.GBP, Currency.INR])
    def test_conversion_round_trip(self, currency):
        """Test converting out and back restores the balance"""
        out = self.processor.convert_to_foreign(currency, 400.0)
        back = self.processor.convert_to_usd(currency, out.converted)

        assert back.converted == pytest.approx(400.0)
        assert self.account.balance == pytest.approx(1000.0)
        assert self.account.currencies[currency] == pytest.approx(0.0)

    def test_conversion_needs_no_pin(self):
        """Test conversion works with only an authenticated session"""
        self.processor.convert_to_foreign(Currency.EUR, 10.0)
        self.processor.convert_to_usd(Currency.EUR, 1.0)

    @pytest.mark.parametrize("currency,amount", [
        ("USD", 10.0), ("JPY", 10.0), ("EUR", 0), ("EUR", -1.0)
    ])
    def test_conversion_invalid_input(self, currency, amount):
        with pytest.raises(InvalidInputError):
            self.processor.convert_to_foreign(currency, amount)
        with pytest.raises(InvalidInputError):
            self.processor.convert_to_usd(currency, amount)
        assert self.store.write_count == self.writes
