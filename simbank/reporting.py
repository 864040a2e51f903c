"""
Reporting Module

Read-only valuation of an account at the current market prices and
exchange rates: holdings, their USD values, and net worth.
"""

from dataclasses import dataclass
from typing import Dict

from .accounts import Account
from .currency import Currency, FOREIGN_CURRENCIES
from .market import AssetType, ASSET_ORDER, Market


@dataclass(frozen=True)
class HoldingValue:
    """A quantity held and its USD value"""
    quantity: float
    value: float


@dataclass(frozen=True)
class Valuation:
    """Status report for one account"""
    name: str
    balance: float
    loan: float
    assets: Dict[AssetType, HoldingValue]
    currencies: Dict[Currency, HoldingValue]
    total_asset_value: float
    total_forex_value: float
    net_worth: float


class ReportingEngine:
    """Values accounts against the market without mutating anything"""

    def __init__(self, market: Market):
        self.market = market

    def valuation(self, account: Account) -> Valuation:
        prices = self.market.current_prices()

        assets = {
            asset: HoldingValue(
                quantity=account.assets[asset],
                value=account.assets[asset] * prices.get(asset)
            )
            for asset in ASSET_ORDER
        }
        currencies = {
            currency: HoldingValue(
                quantity=account.currencies[currency],
                value=self.market.converter.to_usd(account.currencies[currency], currency)
            )
            for currency in FOREIGN_CURRENCIES
        }

        total_asset_value = sum(holding.value for holding in assets.values())
        total_forex_value = sum(holding.value for holding in currencies.values())

        return Valuation(
            name=account.name,
            balance=account.balance,
            loan=account.loan,
            assets=assets,
            currencies=currencies,
            total_asset_value=total_asset_value,
            total_forex_value=total_forex_value,
            net_worth=account.balance + total_asset_value + total_forex_value - account.loan
        )
