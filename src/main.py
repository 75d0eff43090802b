from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Sequence

import aiohttp

from config import AppSettings, config
from services.coingecko_client import IntegrationError
from services.price_change_service import PriceChangeService, build_price_change_service
from services.price_types import PriceChangeAvailable, PriceChangeResult

logger = logging.getLogger(__name__)


def format_result(coin_id: str, days_ago: int, result: PriceChangeResult) -> str:
    label = f"{coin_id} {days_ago}d"
    if not isinstance(result, PriceChangeAvailable):
        return f"{label}: unavailable"
    change = result.value
    return f"{label}: usd {change.usd:+.2%}  btc {change.btc:+.2%}  eth {change.eth:+.2%}"


async def report(service: PriceChangeService, coin_id: str, days: Sequence[int]) -> list[str]:
    lines: list[str] = []
    for days_ago in days:
        result = await service.get_price_change(coin_id, days_ago)
        lines.append(format_result(coin_id, days_ago, result))
    return lines


async def run(coin_id: str, days: Sequence[int], settings: AppSettings) -> list[str]:
    async with aiohttp.ClientSession() as session:
        service = build_price_change_service(session, settings)
        return await report(service, coin_id, days)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Show how a coin's price changed over the last N days.")
    parser.add_argument("coin_id", help="CoinGecko coin id, e.g. bitcoin.")
    parser.add_argument("--days", type=int, nargs="+", default=[1, 7, 30], help="Days-ago offsets (default: 1 7 30).")
    args = parser.parse_args(argv)
    if any(days_ago < 0 for days_ago in args.days):
        parser.error("--days values must be >= 0")

    settings = config()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    try:
        lines = asyncio.run(run(args.coin_id, args.days, settings))
    except IntegrationError as exc:
        logger.debug("Price change lookup failed", exc_info=exc)
        print(f"CoinGecko request failed: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Invalid lookup: {exc}", file=sys.stderr)
        return 2

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
