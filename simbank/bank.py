"""
Bank Module

Wires the registry, snapshot store, market and session together and exposes
the operations a presentation layer calls: registration, login/logout,
ledger operations, market queries and status valuation.
"""

from typing import Optional, Union

from .accounts import Account, AccountRegistry
from .config import SimBankConfig, get_config
from .currency import Currency, ExchangeRates
from .interest import InterestEngine, InterestPosting
from .loans import LoanManager, LoanOutcome
from .logging_config import get_logger
from .market import AssetType, Market, MarketPrices, MarketUpdate
from .reporting import ReportingEngine, Valuation
from .session import Session
from .storage import FileSnapshotStore, SnapshotStore
from .transactions import (
    AssetPurchase, CashTransaction, CurrencyConversion, TransactionProcessor
)


class Bank:
    """Single-user banking system with all components initialized"""

    def __init__(
        self,
        registry: AccountRegistry,
        store: SnapshotStore,
        market: Optional[Market] = None,
        config: Optional[SimBankConfig] = None
    ):
        self.config = config or get_config()
        self.registry = registry
        self.store = store
        self.market = market or Market.from_config(self.config)
        self.session = Session(self.registry, self.store)
        self.logger = get_logger("simbank.bank")

        self.transaction_processor = TransactionProcessor(self.session, self.market, self.config)
        self.loan_manager = LoanManager(self.session, self.market, self.config)
        self.interest_engine = InterestEngine(self.session, self.market, self.config)
        self.reporting_engine = ReportingEngine(self.market)

    @classmethod
    def open(
        cls,
        config: Optional[SimBankConfig] = None,
        store: Optional[SnapshotStore] = None,
        market: Optional[Market] = None
    ) -> 'Bank':
        """
        Load the registry from the store (the configured data file by default)

        Raises:
            StorageFailureError: If an existing snapshot cannot be read
        """
        config = config or get_config()
        store = store or FileSnapshotStore(config=config)
        registry = store.load()
        return cls(registry, store, market=market, config=config)

    # Registration and authentication

    def create_account(self, name: str, pin: int) -> Account:
        return self.session.register(name, pin)

    def login(self, name: str, pin: int) -> Account:
        return self.session.login(name, pin)

    def logout(self) -> None:
        self.session.logout()

    def current_account(self) -> Account:
        return self.session.current_account()

    # Ledger operations

    def deposit(self, amount: float) -> CashTransaction:
        return self.transaction_processor.deposit(amount)

    def withdraw(self, amount: float, pin: int) -> CashTransaction:
        return self.transaction_processor.withdraw(amount, pin)

    def purchase_asset(self, selection: Union[AssetType, str, int], pin: int) -> AssetPurchase:
        return self.transaction_processor.purchase_asset(selection, pin)

    def convert_to_foreign(self, currency: Union[Currency, str], amount: float) -> CurrencyConversion:
        return self.transaction_processor.convert_to_foreign(currency, amount)

    def convert_to_usd(self, currency: Union[Currency, str], amount: float) -> CurrencyConversion:
        return self.transaction_processor.convert_to_usd(currency, amount)

    def manage_loan(self, pin: int, confirm: bool) -> LoanOutcome:
        return self.loan_manager.manage_loan(pin, confirm)

    def take_loan(self, pin: int, confirm: bool = True) -> LoanOutcome:
        return self.loan_manager.take_loan(pin, confirm)

    def repay_loan(self, pin: int, confirm: bool = True) -> LoanOutcome:
        return self.loan_manager.repay_loan(pin, confirm)

    def add_interest(self) -> InterestPosting:
        return self.interest_engine.add_interest()

    def valuation(self) -> Valuation:
        return self.reporting_engine.valuation(self.session.current_account())

    # Market

    def current_prices(self) -> MarketPrices:
        return self.market.current_prices()

    def current_rates(self) -> ExchangeRates:
        return self.market.current_rates()

    def refresh_prices(self) -> MarketUpdate:
        return self.market.refresh_prices()
