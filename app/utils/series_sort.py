from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional, Sequence
from datetime import datetime, timezone

def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse a provider DateTime ("2024-03-31T00:00:00", "...Z", "2024-03-31") as aware UTC."""
    if not isinstance(value, str) or not value.strip():
        return None
    s = value.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    # naive timestamps are taken as UTC so they compare with aware ones
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt

def sort_observations_desc(records: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Most recent first by DateTime. sorted() is stable under reverse=True, so
    records sharing a timestamp keep their input order.
    Raises ValueError on a record without a parseable DateTime.
    """
    keyed = []
    for i, rec in enumerate(records):
        if not isinstance(rec, Mapping):
            raise ValueError(f"record {i} is not an object")
        dt = parse_datetime(rec.get("DateTime"))
        if dt is None:
            raise ValueError(f"record {i} has no valid DateTime: {rec.get('DateTime')!r}")
        keyed.append((dt, dict(rec)))
    keyed.sort(key=lambda kv: kv[0], reverse=True)
    return [rec for _, rec in keyed]

def date_part(value: Any) -> str:
    """'2024-03-31T00:00:00' -> '2024-03-31'; empty string when missing."""
    if value is None:
        return ""
    return str(value).split("T")[0]
