from typing import Generator

import pytest

from config import AppSettings, config


@pytest.fixture(autouse=True)
def _reset_config_cache() -> Generator[None, None, None]:
    config.cache_clear()
    yield
    config.cache_clear()


@pytest.fixture(scope="function")
def settings() -> AppSettings:
    return AppSettings(
        coingecko_base_url="https://example.com/api/v3",
        coingecko_api_key=None,
        price_change_cache_capacity=10,
    )
