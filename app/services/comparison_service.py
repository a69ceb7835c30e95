# app/services/comparison_service.py — validate -> fetch -> sort for two country series
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple
import concurrent.futures as _futures
import logging
import time as _time

from app.config import Settings
from app.errors import InvalidCountry, UpstreamFetchError
from app.providers.base import SeriesProvider
from app.providers.tradingeconomics_provider import TradingEconomicsProvider
from app.utils.series_sort import sort_observations_desc

logger = logging.getLogger("trade-comparison")


def normalize_country(name: str) -> str:
    """
    "sWEDEN" -> "Sweden", "new zealand" -> "New Zealand".
    Each word gets an upper first letter and a lower remainder.
    """
    words = (name or "").split()
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)


def allowed_message(allowed: Tuple[str, ...]) -> str:
    if len(allowed) == 1:
        names = allowed[0]
    else:
        names = ", ".join(allowed[:-1]) + " and " + allowed[-1]
    return f"Only {names} are allowed for free users."


class ComparisonService:
    def __init__(self, settings: Settings, provider: Optional[SeriesProvider] = None) -> None:
        self.settings = settings
        self.provider = provider or TradingEconomicsProvider(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.request_timeout,
        )

    # ------------------------------------------------------------------ steps

    def validate(self, country1: str, country2: str) -> Tuple[str, str]:
        c1, c2 = normalize_country(country1), normalize_country(country2)
        allowed = self.settings.allowed_countries
        if c1 not in allowed or c2 not in allowed:
            logger.info("rejected countries | country1=%s | country2=%s", c1, c2)
            raise InvalidCountry(allowed_message(allowed))
        return c1, c2

    def _fetch(self, country: str, indicator: str) -> List[Dict[str, Any]]:
        if self.settings.fetch_delay > 0:
            _time.sleep(self.settings.fetch_delay)
        return self.provider.fetch_series(country, indicator)

    def _fetch_pair(
        self, first: Tuple[str, str], second: Tuple[str, str]
    ) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        if not self.settings.concurrent_fetches:
            return self._fetch(*first), self._fetch(*second)
        with _futures.ThreadPoolExecutor(max_workers=2) as pool:
            f1 = pool.submit(self._fetch, *first)
            f2 = pool.submit(self._fetch, *second)
            # .result() re-raises the worker's UpstreamFetchError
            return f1.result(), f2.result()

    @staticmethod
    def _sorted(records: List[Dict[str, Any]], country: str, indicator: str) -> List[Dict[str, Any]]:
        try:
            return sort_observations_desc(records)
        except ValueError as e:
            logger.error("malformed series | country=%s | indicator=%s | %s", country, indicator, e)
            raise UpstreamFetchError(
                f"Malformed data for {country} / {indicator}: {e}"
            ) from e

    # ------------------------------------------------------------- operation

    def compare(
        self, country1: str, country2: str, indicator1: str, indicator2: str
    ) -> Dict[str, List[Dict[str, Any]]]:
        """
        Both series or nothing: any upstream failure aborts the whole comparison.
        """
        c1, c2 = self.validate(country1, country2)
        started = _time.time()
        raw1, raw2 = self._fetch_pair((c1, indicator1), (c2, indicator2))
        out = {
            "country1": self._sorted(raw1, c1, indicator1),
            "country2": self._sorted(raw2, c2, indicator2),
        }
        logger.info(
            "compare done | %s/%s vs %s/%s | rows=%d/%d | elapsed=%.2fs",
            c1, indicator1, c2, indicator2,
            len(out["country1"]), len(out["country2"]), _time.time() - started,
        )
        return out
