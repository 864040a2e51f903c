"""
Pydantic schemas for API requests and responses
"""

from typing import Dict, Union
from pydantic import BaseModel, Field

from ..accounts import Account
from ..market import MarketPrices, MarketUpdate
from ..currency import ExchangeRates
from ..reporting import HoldingValue, Valuation


# Session schemas
class CredentialsRequest(BaseModel):
    name: str = Field(..., description="Alphabetic account name")
    pin: int = Field(..., description="4-digit PIN")


class AccountModel(BaseModel):
    name: str
    balance: float
    loan: float
    assets: Dict[str, float]
    currencies: Dict[str, float]

    @classmethod
    def from_account(cls, account: Account) -> 'AccountModel':
        return cls(
            name=account.name,
            balance=account.balance,
            loan=account.loan,
            assets={asset.value: units for asset, units in account.assets.items()},
            currencies={currency.code: units for currency, units in account.currencies.items()}
        )


# Transaction schemas
class DepositRequest(BaseModel):
    amount: float


class WithdrawRequest(BaseModel):
    amount: float
    pin: int = Field(..., description="PIN re-entered for verification")


class ConvertRequest(BaseModel):
    currency: str = Field(..., description="Foreign currency code (EUR, GBP, INR)")
    amount: float


class PurchaseAssetRequest(BaseModel):
    asset: Union[int, str] = Field(..., description="Asset name (crypto, gold, silver) or menu number")
    pin: int


# Loan schemas
class LoanRequest(BaseModel):
    pin: int
    confirm: bool = True


# Market and status schemas
class PricesModel(BaseModel):
    crypto: float
    gold: float
    silver: float

    @classmethod
    def from_prices(cls, prices: MarketPrices) -> 'PricesModel':
        return cls(crypto=prices.crypto, gold=prices.gold, silver=prices.silver)


class RatesModel(BaseModel):
    EUR: float
    GBP: float
    INR: float

    @classmethod
    def from_rates(cls, rates: ExchangeRates) -> 'RatesModel':
        return cls(EUR=rates.eur, GBP=rates.gbp, INR=rates.inr)


class MarketUpdateModel(BaseModel):
    prices: PricesModel
    changes: Dict[str, float] = Field(..., description="Percent change applied per asset")

    @classmethod
    def from_update(cls, update: MarketUpdate) -> 'MarketUpdateModel':
        return cls(
            prices=PricesModel.from_prices(update.prices),
            changes={asset.value: pct for asset, pct in update.changes.items()}
        )


class HoldingModel(BaseModel):
    quantity: float
    value: float

    @classmethod
    def from_holding(cls, holding: HoldingValue) -> 'HoldingModel':
        return cls(quantity=holding.quantity, value=holding.value)


class ValuationModel(BaseModel):
    name: str
    balance: float
    loan: float
    assets: Dict[str, HoldingModel]
    currencies: Dict[str, HoldingModel]
    total_asset_value: float
    total_forex_value: float
    net_worth: float

    @classmethod
    def from_valuation(cls, valuation: Valuation) -> 'ValuationModel':
        return cls(
            name=valuation.name,
            balance=valuation.balance,
            loan=valuation.loan,
            assets={asset.value: HoldingModel.from_holding(h)
                    for asset, h in valuation.assets.items()},
            currencies={currency.code: HoldingModel.from_holding(h)
                        for currency, h in valuation.currencies.items()},
            total_asset_value=valuation.total_asset_value,
            total_forex_value=valuation.total_forex_value,
            net_worth=valuation.net_worth
        )
