# app/config.py — environment-backed settings for the comparison service + client
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple
import os

from dotenv import load_dotenv

load_dotenv()

# Countries available on the Trading Economics free tier
FREE_COUNTRIES: Tuple[str, ...] = ("Sweden", "Mexico", "New Zealand", "Thailand")

# Indicators the client offers
INDICATORS: Tuple[str, ...] = ("GDP", "Inflation Rate")

_TE_BASE = "https://api.tradingeconomics.com"


def _split_csv(value: str) -> Tuple[str, ...]:
    """Turn 'a,b,c' into ('a','b','c'); keep '*' as ('*',)."""
    value = (value or "").strip()
    if value == "*" or not value:
        return ("*",)
    return tuple(x.strip() for x in value.split(",") if x.strip())


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    api_key: str = "guest:guest"
    port: int = 5000
    base_url: str = _TE_BASE
    allowed_countries: Tuple[str, ...] = FREE_COUNTRIES
    fetch_delay: float = 0.0          # seconds slept before each upstream call
    concurrent_fetches: bool = True   # False -> fetch country1 then country2
    request_timeout: float = 10.0
    cors_origins: Tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_key=os.getenv("API_KEY", "guest:guest"),
            port=int(os.getenv("PORT", "5000")),
            base_url=os.getenv("TE_BASE_URL", _TE_BASE).rstrip("/"),
            fetch_delay=float(os.getenv("FETCH_DELAY", "0")),
            concurrent_fetches=_env_bool("CONCURRENT_FETCHES", "1"),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "10")),
            cors_origins=_split_csv(os.getenv("CORS_ORIGINS", "*")),
        )


def client_base_url() -> str:
    """Where the comparison client finds the service."""
    return os.getenv("COMPARE_API_URL", "http://localhost:5000").rstrip("/")
