# app/routes/compare.py — /compare: two country/indicator series, sorted most recent first
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query

from app.config import Settings
from app.services.comparison_service import ComparisonService

router = APIRouter(tags=["compare"])


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def get_comparison_service() -> ComparisonService:
    return ComparisonService(get_settings())


@router.get("/compare", summary="Compare two country indicators", operation_id="compare_get")
def compare(
    country1: str = Query(..., description="Country name, e.g. Sweden"),
    country2: str = Query(..., description="Country name, e.g. Mexico"),
    indicator1: str = Query(..., description="Indicator for country1, e.g. GDP"),
    indicator2: str = Query(..., description="Indicator for country2, e.g. Inflation Rate"),
    service: ComparisonService = Depends(get_comparison_service),
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Fetches both series from Trading Economics and returns
    {"country1": [...], "country2": [...]}, each sorted by DateTime descending.

    InvalidCountry / UpstreamFetchError propagate to the handlers in app.main.
    """
    return service.compare(country1, country2, indicator1, indicator2)
