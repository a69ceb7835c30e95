# app/errors.py
from __future__ import annotations

from typing import Any, Optional


class ComparisonError(Exception):
    """Base class for failures of a country comparison."""

    status_code = 500

    def detail(self) -> Any:
        return str(self)


class InvalidCountry(ComparisonError):
    status_code = 400


class UpstreamFetchError(ComparisonError):
    """
    A Trading Economics call failed: network error, timeout, non-2xx status
    or a payload that is not a list of observation records.

    `payload` holds the provider's decoded error body when there was one;
    it is returned to the caller verbatim instead of the message.
    """

    status_code = 500

    def __init__(self, message: str, payload: Optional[Any] = None) -> None:
        super().__init__(message)
        self.payload = payload

    def detail(self) -> Any:
        if self.payload not in (None, "", {}, []):
            return self.payload
        return str(self)


class MalformedResponse(ComparisonError):
    """The comparison service answered with something other than two series."""
