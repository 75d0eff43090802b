from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any

import aiohttp

from .price_types import CoinHistory, HistoricalPrice, HistoricalPriceMissing, Price

logger = logging.getLogger(__name__)

# API docs: https://docs.coingecko.com/v3.0.1/reference/coins-id-history
QUOTE_CURRENCIES = ("usd", "btc", "eth")
HISTORY_DATE_FORMAT = "%d-%m-%Y"


class IntegrationError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class PayloadDecodeError(IntegrationError):
    """CoinGecko answered, but the payload does not have the expected shape."""


class CoinGeckoClient:
    """Async CoinGecko client covering coin history and current prices.

    The caller owns ``session`` and is responsible for closing it.
    """

    def __init__(
        self,
        *,
        session: aiohttp.ClientSession,
        base_url: str = "https://api.coingecko.com/api/v3",
        api_key: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._session = session

    async def get_coin_history(self, coin_id: str, on: date) -> CoinHistory:
        params = {"date": on.strftime(HISTORY_DATE_FORMAT)}
        payload = await self._request(f"/coins/{coin_id}/history", params=params)

        if "error" in payload:
            raise IntegrationError(str(payload["error"]), payload=payload)

        market_data = payload.get("market_data")
        if market_data is None:
            return HistoricalPriceMissing(coin_id=coin_id, on=on)
        if not isinstance(market_data, dict):
            raise PayloadDecodeError("CoinGecko market_data is not an object", payload=payload)

        price = self._parse_price(market_data.get("current_price"), payload=payload)
        return HistoricalPrice(coin_id=coin_id, on=on, price=price)

    async def get_current_price(self, coin_id: str) -> Price:
        params = {"ids": coin_id, "vs_currencies": ",".join(QUOTE_CURRENCIES)}
        payload = await self._request("/simple/price", params=params)

        if "error" in payload:
            raise IntegrationError(str(payload["error"]), payload=payload)
        if coin_id not in payload:
            raise PayloadDecodeError(f"CoinGecko returned no current price for {coin_id}", payload=payload)
        return self._parse_price(payload[coin_id], payload=payload)

    async def _request(self, path: str, *, params: dict[str, str]) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["x-cg-demo-api-key"] = self.api_key

        try:
            async with self._session.get(
                url,
                params=params,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status != 200:
                    body = await response.text()
                    logger.error("CoinGecko bad response, %s %s - %s", response.status, response.reason, body)
                    raise IntegrationError(body, status_code=response.status, payload=body)

                try:
                    payload_raw = await response.json(content_type=None)
                except ValueError as exc:
                    text = await response.text()
                    raise PayloadDecodeError("CoinGecko returned invalid JSON", payload=text) from exc
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise IntegrationError(f"CoinGecko request to {path} failed: {exc!r}") from exc

        if not isinstance(payload_raw, dict):
            raise PayloadDecodeError("CoinGecko returned unexpected payload type", payload=payload_raw)

        return payload_raw

    @classmethod
    def _parse_price(cls, raw: Any, *, payload: Any) -> Price:
        if not isinstance(raw, dict):
            raise PayloadDecodeError("CoinGecko price is not an object", payload=payload)

        values: dict[str, float] = {}
        for currency in QUOTE_CURRENCIES:
            value = raw.get(currency)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise PayloadDecodeError(f"CoinGecko price missing numeric {currency} field", payload=payload)
            values[currency] = float(value)
        return Price(**values)


__all__ = ["CoinGeckoClient", "IntegrationError", "PayloadDecodeError", "QUOTE_CURRENCIES"]
