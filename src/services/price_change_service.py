from __future__ import annotations

import logging
import math
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Protocol

import aiohttp

from config import AppSettings

from .coingecko_client import CoinGeckoClient
from .price_change_cache import LRUCache, price_change_cache_key
from .price_types import (
    CoinHistory,
    HistoricalPriceMissing,
    Price,
    PriceChangeAvailable,
    PriceChangeResult,
    PriceChangeUnavailable,
)

logger = logging.getLogger(__name__)


class HistoricalPriceSource(Protocol):
    async def get_coin_history(self, coin_id: str, on: date) -> CoinHistory: ...


class CurrentPriceProvider(Protocol):
    async def get_current_price(self, coin_id: str) -> Price: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PriceChangeService:
    def __init__(
        self,
        *,
        history_source: HistoricalPriceSource,
        current_price_provider: CurrentPriceProvider,
        cache: LRUCache[str, Price],
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.history_source = history_source
        self.current_price_provider = current_price_provider
        self.cache = cache
        self._now = now

    async def get_price_change(self, coin_id: str, days_ago: int) -> PriceChangeResult:
        if isinstance(days_ago, bool) or not isinstance(days_ago, int) or days_ago < 0:
            msg = "days_ago must be a non-negative integer"
            raise ValueError(msg)

        cache_key = price_change_cache_key(coin_id, days_ago)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Price change cache hit for %s", cache_key)
            return PriceChangeAvailable(cached)

        try:
            historic_date = (self._now() - timedelta(days=days_ago)).date()
        except OverflowError as exc:
            msg = f"days_ago {days_ago} reaches before the earliest representable date"
            raise ValueError(msg) from exc

        history = await self.history_source.get_coin_history(coin_id, historic_date)
        if isinstance(history, HistoricalPriceMissing):
            return PriceChangeUnavailable()

        current = await self.current_price_provider.get_current_price(coin_id)
        change = price_change(current, history.price)
        if not change.is_finite:
            logger.warning(
                "Price change for %s since %s is undefined in some currency: %s",
                coin_id,
                historic_date.isoformat(),
                change,
            )

        self.cache.set(cache_key, change)
        logger.debug("Price change cached under %s", cache_key)
        return PriceChangeAvailable(change)


def price_change(current: Price, historic: Price) -> Price:
    return Price(
        usd=_relative_change(current.usd, historic.usd),
        btc=_relative_change(current.btc, historic.btc),
        eth=_relative_change(current.eth, historic.eth),
    )


def _relative_change(current: float, historic: float) -> float:
    if historic == 0:
        # same values a float division by zero would carry
        if current == 0 or math.isnan(current):
            return math.nan
        return math.copysign(math.inf, current) * math.copysign(1.0, historic)
    return current / historic - 1


def build_price_change_service(session: aiohttp.ClientSession, settings: AppSettings) -> PriceChangeService:
    client = CoinGeckoClient(
        session=session,
        base_url=settings.coingecko_base_url,
        api_key=settings.coingecko_api_key,
        timeout=settings.coingecko_timeout,
    )
    cache: LRUCache[str, Price] = LRUCache(capacity=settings.price_change_cache_capacity)
    return PriceChangeService(history_source=client, current_price_provider=client, cache=cache)


__all__ = [
    "CurrentPriceProvider",
    "HistoricalPriceSource",
    "PriceChangeService",
    "build_price_change_service",
    "price_change",
]
