"""
Series provider interface.

The comparison service only talks to upstream data through this, so tests
can hand it a deterministic fake instead of the Trading Economics client.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class SeriesProvider(ABC):
    """Fetches one historical indicator series for one country."""

    provider_name: str = "base"

    @abstractmethod
    def fetch_series(self, country: str, indicator: str) -> List[Dict[str, Any]]:
        """
        Return the provider's observation records, each carrying at least
        `DateTime` and `Value`. Order is whatever the provider returns.
        Raises UpstreamFetchError on any failure.
        """
        ...
