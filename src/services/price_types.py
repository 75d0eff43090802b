from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Price:
    """Value of an asset quoted in USD, BTC and ETH."""

    usd: float
    btc: float
    eth: float

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(value) for value in (self.usd, self.btc, self.eth))


@dataclass(frozen=True)
class PriceChangeAvailable:
    """Fractional change per currency, ``current / historic - 1``."""

    value: Price


@dataclass(frozen=True)
class PriceChangeUnavailable:
    pass


PriceChangeResult = PriceChangeAvailable | PriceChangeUnavailable


@dataclass(frozen=True)
class HistoricalPrice:
    coin_id: str
    on: date
    price: Price


@dataclass(frozen=True)
class HistoricalPriceMissing:
    """The coin had no recorded market data on ``on``."""

    coin_id: str
    on: date


CoinHistory = HistoricalPrice | HistoricalPriceMissing


__all__ = [
    "CoinHistory",
    "HistoricalPrice",
    "HistoricalPriceMissing",
    "Price",
    "PriceChangeAvailable",
    "PriceChangeResult",
    "PriceChangeUnavailable",
]
