# app/client/comparison_client.py — selections -> /compare -> merged rows
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import logging
import threading
import httpx

from app.client.merge import MergedRow, chart_series, merge_series, series_labels, table_rows
from app.config import FREE_COUNTRIES, INDICATORS, client_base_url
from app.errors import MalformedResponse
from app.services.comparison_service import normalize_country

logger = logging.getLogger("trade-comparison")

GENERIC_ERROR = "Something went wrong!"
BUSY_ERROR = "A comparison is already in progress."
_TIMEOUT = 30.0


@dataclass
class ComparisonOutcome:
    rows: List[MergedRow] = field(default_factory=list)
    error: str = ""
    # [(row_key, display_name), ...] for the two selected series
    series: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.error


def _series(body: Any, key: str) -> List[Any]:
    try:
        if not isinstance(body, dict):
            raise MalformedResponse("response body is not an object")
        data = body.get(key)
        if not isinstance(data, list):
            raise MalformedResponse(f"{key} is not a list")
        return data
    except MalformedResponse as e:
        logger.warning("compare response degraded to empty %s: %s", key, e)
        return []


def _error_text(r: httpx.Response) -> str:
    try:
        err = r.json().get("error")
    except (ValueError, AttributeError):
        return GENERIC_ERROR
    if not err:
        return GENERIC_ERROR
    if isinstance(err, str):
        return err
    if isinstance(err, dict):
        # TE error bodies usually carry Message
        return str(err.get("Message") or err.get("message") or err)
    return str(err)


class ComparisonClient:
    """
    Holds the four selections and runs one comparison at a time.
    `loading` stays True while a request is in flight.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        country1: str = "Sweden",
        country2: str = "Mexico",
        indicator1: str = "GDP",
        indicator2: str = "Inflation Rate",
    ) -> None:
        self.country1, self.country2 = "Sweden", "Mexico"
        self.indicator1, self.indicator2 = "GDP", "Inflation Rate"
        self.set_selection(country1, country2, indicator1, indicator2)
        self.base_url = (base_url or client_base_url()).rstrip("/")
        self._http = http or httpx.Client(timeout=_TIMEOUT)
        self.loading = False
        self._lock = threading.Lock()
        self.outcome = ComparisonOutcome()

    # ------------------------------------------------------------ selections

    def set_selection(
        self,
        country1: Optional[str] = None,
        country2: Optional[str] = None,
        indicator1: Optional[str] = None,
        indicator2: Optional[str] = None,
    ) -> None:
        for c in (country1, country2):
            if c is not None and normalize_country(c) not in FREE_COUNTRIES:
                raise ValueError(f"unsupported country: {c}")
        for ind in (indicator1, indicator2):
            if ind is not None and ind not in INDICATORS:
                raise ValueError(f"unsupported indicator: {ind}")
        if country1 is not None:
            self.country1 = normalize_country(country1)
        if country2 is not None:
            self.country2 = normalize_country(country2)
        if indicator1 is not None:
            self.indicator1 = indicator1
        if indicator2 is not None:
            self.indicator2 = indicator2

    @property
    def labels(self) -> Tuple[str, str]:
        return series_labels(self.country1, self.country2, self.indicator1, self.indicator2)

    # ------------------------------------------------------------- operation

    def fetch_comparison(self) -> ComparisonOutcome:
        """
        One comparison at a time, across threads too. A failed fetch keeps the
        previous rows and only sets `error`.
        """
        if not self._lock.acquire(blocking=False):
            return ComparisonOutcome(error=BUSY_ERROR)
        try:
            if self.loading:
                return ComparisonOutcome(error=BUSY_ERROR)
            self.loading = True
            try:
                outcome = self._fetch()
            finally:
                self.loading = False
            if not outcome.ok:
                outcome.rows, outcome.series = self.outcome.rows, self.outcome.series
            self.outcome = outcome
        finally:
            self._lock.release()
        return self.outcome

    def _fetch(self) -> ComparisonOutcome:
        params = {
            "country1": self.country1,
            "country2": self.country2,
            "indicator1": self.indicator1,
            "indicator2": self.indicator2,
        }
        try:
            r = self._http.get(f"{self.base_url}/compare", params=params)
        except httpx.HTTPError as e:
            logger.error("error fetching comparison: %r", e)
            return ComparisonOutcome(error=GENERIC_ERROR)

        if not r.is_success:
            logger.error("compare failed | status=%s | body=%s", r.status_code, r.text[:500])
            return ComparisonOutcome(error=_error_text(r))

        try:
            body = r.json()
        except ValueError:
            body = None
        key1, key2 = self.labels
        rows = merge_series(_series(body, "country1"), _series(body, "country2"), key1, key2)
        if self.indicator1 != self.indicator2:
            names = (f"{self.country1} - {self.indicator1}", f"{self.country2} - {self.indicator2}")
        else:
            names = (key1, key2)
        return ComparisonOutcome(rows=rows, series=[(key1, names[0]), (key2, names[1])])

    # ---------------------------------------------------------- presentation

    def table(self, limit: int = 10) -> List[Dict[str, Any]]:
        return table_rows(self.outcome.rows, limit=limit)

    def chart(self) -> Dict[str, List[Tuple[str, Optional[float]]]]:
        return chart_series(self.outcome.rows, self.outcome.series)

    def close(self) -> None:
        self._http.close()
