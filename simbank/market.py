"""
Market State Module

Process-wide pricing data for the simulated assets (crypto, gold, silver)
and the foreign exchange rates. Prices move only when a market refresh is
requested; exchange rates never move.
"""

import random
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union
from enum import Enum

from .config import SimBankConfig, get_config
from .currency import CurrencyConverter, ExchangeRates
from .errors import InvalidInputError
from .logging_config import get_logger, log_action


class AssetType(Enum):
    """Simulated assets an account can purchase"""
    CRYPTO = "crypto"
    GOLD = "gold"
    SILVER = "silver"

    @property
    def label(self) -> str:
        return "Cryptocurrency" if self is AssetType.CRYPTO else self.value.title()


# Holding order matters: it is the field order of the persisted record and
# the 1-based menu numbering accepted by parse_asset()
ASSET_ORDER = (AssetType.CRYPTO, AssetType.GOLD, AssetType.SILVER)

# Whole-percent change drawn per refresh, lower bound inclusive, upper exclusive
PRICE_CHANGE_BOUNDS: Dict[AssetType, Tuple[int, int]] = {
    AssetType.CRYPTO: (-15, 20),  # volatile
    AssetType.GOLD: (-5, 10),     # stable
    AssetType.SILVER: (-10, 15),  # moderate
}


def parse_asset(selection: Union[AssetType, str, int]) -> AssetType:
    """
    Resolve an asset from an enum member, its name, or its menu number

    Raises:
        InvalidInputError: If the selection does not name an asset
    """
    if isinstance(selection, AssetType):
        return selection

    if isinstance(selection, int) and not isinstance(selection, bool):
        if 1 <= selection <= len(ASSET_ORDER):
            return ASSET_ORDER[selection - 1]
        raise InvalidInputError(f"Invalid asset choice: {selection}")

    if isinstance(selection, str):
        value = selection.strip().lower()
        if value.isdigit():
            return parse_asset(int(value))
        try:
            return AssetType(value)
        except ValueError:
            pass

    raise InvalidInputError(f"Invalid asset choice: {selection!r}")


@dataclass(frozen=True)
class MarketPrices:
    """Unit price of each asset in USD"""
    crypto: float
    gold: float
    silver: float

    def get(self, asset: AssetType) -> float:
        return getattr(self, asset.value)

    def as_dict(self) -> Dict[AssetType, float]:
        return {asset: self.get(asset) for asset in ASSET_ORDER}


@dataclass(frozen=True)
class MarketUpdate:
    """Result of a market refresh"""
    prices: MarketPrices
    changes: Dict[AssetType, float]  # Percent applied to each price


class Market:
    """
    Owns the current asset prices and exchange rates

    Ledger operations read prices and rates through current_prices() and
    current_rates(); only refresh_prices() changes them.
    """

    def __init__(
        self,
        prices: MarketPrices,
        rates: ExchangeRates,
        rng: Optional[random.Random] = None
    ):
        self._prices = prices
        self.converter = CurrencyConverter(rates)
        self._rng = rng or random.Random()
        self.logger = get_logger("simbank.market")

    @classmethod
    def from_config(cls, config: Optional[SimBankConfig] = None) -> 'Market':
        """Build a market seeded with the configured default prices and rates"""
        config = config or get_config()
        return cls(
            prices=MarketPrices(
                crypto=config.crypto_price,
                gold=config.gold_price,
                silver=config.silver_price
            ),
            rates=ExchangeRates(
                eur=config.eur_rate,
                gbp=config.gbp_rate,
                inr=config.inr_rate
            ),
            rng=random.Random(config.market_seed)
        )

    def current_prices(self) -> MarketPrices:
        return self._prices

    def current_rates(self) -> ExchangeRates:
        return self.converter.rates

    def refresh_prices(self) -> MarketUpdate:
        """
        Apply an independent random percentage change to each asset price

        Each change compounds on the previous price and stays within the
        asset's PRICE_CHANGE_BOUNDS. Exchange rates are left untouched.
        """
        changes = {}
        new_prices = {}
        for asset in ASSET_ORDER:
            low, high = PRICE_CHANGE_BOUNDS[asset]
            percent = float(self._rng.randrange(low, high))
            changes[asset] = percent
            new_prices[asset.value] = self._prices.get(asset) * (1 + percent / 100)

        self._prices = MarketPrices(**new_prices)

        log_action(
            self.logger, "info", "Market prices refreshed",
            action="refresh_prices",
            extra={asset.value: {"price": self._prices.get(asset), "change_pct": pct}
                   for asset, pct in changes.items()}
        )

        return MarketUpdate(prices=self._prices, changes=changes)
