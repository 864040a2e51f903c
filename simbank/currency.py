"""
Multi-Currency Support Module

Handles the foreign currencies an account can hold, their exchange rates to
the base currency (USD), and conversion in both directions. Amounts are
plain floats; precision-correct arithmetic is not a goal of the simulation.
"""

from dataclasses import dataclass
from typing import Dict, Union
from enum import Enum

from .errors import InvalidInputError


class Currency(Enum):
    """ISO 4217 currency codes; USD is the base currency"""
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    INR = "INR"

    @property
    def code(self) -> str:
        return self.value


# Holding order matters: it is the field order of the persisted record
FOREIGN_CURRENCIES = (Currency.EUR, Currency.GBP, Currency.INR)


def parse_currency(value: Union[Currency, str]) -> Currency:
    """
    Resolve a foreign currency from an enum member or its code

    Raises:
        InvalidInputError: If the value is not EUR, GBP or INR
    """
    if isinstance(value, Currency):
        currency = value
    else:
        try:
            currency = Currency[str(value).strip().upper()]
        except KeyError:
            raise InvalidInputError(f"Unknown currency code: {value!r}")

    if currency not in FOREIGN_CURRENCIES:
        raise InvalidInputError(f"{currency.code} is not a foreign currency")
    return currency


@dataclass(frozen=True)
class ExchangeRates:
    """Value of one unit of each foreign currency in USD"""
    eur: float
    gbp: float
    inr: float

    def __post_init__(self):
        for currency, rate in self.as_dict().items():
            if rate <= 0:
                raise ValueError(f"{currency.code} rate must be positive")

    def get(self, currency: Currency) -> float:
        """Get the USD rate for a foreign currency"""
        return getattr(self, parse_currency(currency).code.lower())

    def as_dict(self) -> Dict[Currency, float]:
        return {
            Currency.EUR: self.eur,
            Currency.GBP: self.gbp,
            Currency.INR: self.inr,
        }


class CurrencyConverter:
    """Converts between USD and the foreign currencies at the current rates"""

    def __init__(self, rates: ExchangeRates):
        self._rates = rates

    @property
    def rates(self) -> ExchangeRates:
        return self._rates

    def from_usd(self, amount: float, currency: Currency) -> float:
        """Units of ``currency`` bought with ``amount`` USD"""
        return amount / self._rates.get(currency)

    def to_usd(self, amount: float, currency: Currency) -> float:
        """USD value of ``amount`` units of ``currency``"""
        return amount * self._rates.get(currency)
