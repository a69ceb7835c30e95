# app/providers/tradingeconomics_provider.py
from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote
import logging
import httpx

from app.errors import UpstreamFetchError
from app.providers.base import SeriesProvider

logger = logging.getLogger("trade-comparison")

# Historical indicator client for api.tradingeconomics.com
_TE_BASE = "https://api.tradingeconomics.com"
_TIMEOUT = 10.0

_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "trade-comparison/1.0 (+tradingeconomics_provider)",
}


def _error_payload(r: httpx.Response) -> Optional[Any]:
    # TE answers errors with JSON or a bare text line
    try:
        return r.json()
    except ValueError:
        text = (r.text or "").strip()
        return text or None


class TradingEconomicsProvider(SeriesProvider):
    provider_name = "tradingeconomics"

    def __init__(
        self,
        api_key: str,
        base_url: str = _TE_BASE,
        timeout: float = _TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.timeout,
            follow_redirects=True,
            headers=_HEADERS,
            transport=self._transport,
        )

    def series_url(self, country: str, indicator: str) -> str:
        return (
            f"{self.base_url}/historical/country/{quote(country, safe='')}"
            f"/indicator/{quote(indicator, safe='')}"
        )

    def fetch_series(self, country: str, indicator: str) -> List[Dict[str, Any]]:
        """
        GET /historical/country/{country}/indicator/{indicator}?c=KEY
        Shape: [ {Country, Category, DateTime, Value, Frequency, ...}, ... ]
        """
        url = self.series_url(country, indicator)
        logger.info("te fetch | country=%s | indicator=%s", country, indicator)
        try:
            with self._client() as client:
                r = client.get(url, params={"c": self.api_key})
        except httpx.HTTPError as e:
            logger.error("te request failed | country=%s | indicator=%s | %r", country, indicator, e)
            raise UpstreamFetchError(f"Request to Trading Economics failed: {e}") from e

        if not r.is_success:
            payload = _error_payload(r)
            logger.error(
                "te status %s | country=%s | indicator=%s | %s",
                r.status_code, country, indicator, payload,
            )
            raise UpstreamFetchError(
                f"Trading Economics returned HTTP {r.status_code}", payload=payload
            )

        try:
            data = r.json()
        except ValueError as e:
            raise UpstreamFetchError("Trading Economics returned invalid JSON") from e

        if not isinstance(data, list):
            logger.error("te payload not a list | country=%s | indicator=%s", country, indicator)
            raise UpstreamFetchError("Trading Economics returned an unexpected payload", payload=data)
        return data
