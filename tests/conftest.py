from typing import Any, Dict, List, Optional, Tuple

import pytest

from app.config import Settings
from app.errors import UpstreamFetchError
from app.providers.base import SeriesProvider


class FakeProvider(SeriesProvider):
    """Deterministic stand-in for Trading Economics."""

    provider_name = "fake"

    def __init__(
        self,
        series: Optional[Dict[Tuple[str, str], List[Dict[str, Any]]]] = None,
        fail_for: Optional[str] = None,
    ) -> None:
        self.series = series or {}
        self.fail_for = fail_for
        self.calls: List[Tuple[str, str]] = []

    def fetch_series(self, country: str, indicator: str) -> List[Dict[str, Any]]:
        self.calls.append((country, indicator))
        if country == self.fail_for:
            raise UpstreamFetchError("boom", payload={"Message": f"no data for {country}"})
        return [dict(r) for r in self.series.get((country, indicator), [])]


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test:key", concurrent_fetches=False)


@pytest.fixture
def sweden_gdp() -> List[Dict[str, Any]]:
    return [
        {"Country": "Sweden", "Category": "GDP", "DateTime": "2021-12-31T00:00:00", "Value": 635.66},
        {"Country": "Sweden", "Category": "GDP", "DateTime": "2023-12-31T00:00:00", "Value": 593.27},
        {"Country": "Sweden", "Category": "GDP", "DateTime": "2022-12-31T00:00:00", "Value": 585.94},
    ]


@pytest.fixture
def mexico_inflation() -> List[Dict[str, Any]]:
    return [
        {"Country": "Mexico", "Category": "Inflation Rate", "DateTime": "2024-01-31T00:00:00", "Value": 4.88},
        {"Country": "Mexico", "Category": "Inflation Rate", "DateTime": "2024-03-31T00:00:00", "Value": 4.42},
        {"Country": "Mexico", "Category": "Inflation Rate", "DateTime": "2024-02-29T00:00:00", "Value": 4.4},
    ]


@pytest.fixture
def make_provider():
    return FakeProvider
