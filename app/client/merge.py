# app/client/merge.py — positional merge of two series into chart/table rows
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from app.utils.series_sort import date_part

NA = "N/A"


@dataclass
class MergedRow:
    date: str
    values: Dict[str, Any] = field(default_factory=dict)

    def value(self, label: str) -> Any:
        v = self.values.get(label)
        return NA if v is None else v

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"date": self.date}
        out.update(self.values)
        return out


def series_labels(country1: str, country2: str, indicator1: str, indicator2: str) -> Tuple[str, str]:
    """
    Row keys for the two series. Normally the indicator names; when both
    sides picked the same indicator the keys would collide, so they fall back
    to "<Country> - <Indicator>".
    """
    if indicator1 != indicator2:
        return indicator1, indicator2
    label1, label2 = f"{country1} - {indicator1}", f"{country2} - {indicator2}"
    if label1 == label2:
        label1, label2 = f"{label1} (1)", f"{label2} (2)"
    return label1, label2


def _value(rec: Any) -> Any:
    if not isinstance(rec, Mapping):
        return NA
    v = rec.get("Value")
    return NA if v is None else v


def merge_series(
    country1_data: Sequence[Any],
    country2_data: Sequence[Any],
    key1: str,
    key2: str,
) -> List[MergedRow]:
    """
    Pair country1_data[i] with country2_data[i] by index, not by date.
    One row per country1 record: extra country2 records are dropped,
    missing ones show up as "N/A".
    """
    if key1 == key2:
        raise ValueError(f"series keys must differ, got {key1!r} twice")
    rows: List[MergedRow] = []
    for i, rec in enumerate(country1_data):
        when = rec.get("DateTime") if isinstance(rec, Mapping) else None
        other = country2_data[i] if i < len(country2_data) else None
        rows.append(MergedRow(date=date_part(when), values={key1: _value(rec), key2: _value(other)}))
    return sort_rows_desc(rows)


def sort_rows_desc(rows: Sequence[MergedRow]) -> List[MergedRow]:
    # ISO dates order lexicographically; stable for equal dates
    return sorted(rows, key=lambda r: r.date, reverse=True)


def table_rows(rows: Sequence[MergedRow], limit: int = 10) -> List[Dict[str, Any]]:
    return [r.to_dict() for r in rows[:limit]]


def chart_series(
    rows: Sequence[MergedRow],
    series: Sequence[Tuple[str, str]],
) -> Dict[str, List[Tuple[str, Optional[float]]]]:
    """
    Line data per series: `series` is [(row_key, display_name), ...].
    Non-numeric cells ("N/A", provider strings) become gaps (None).
    """
    out: Dict[str, List[Tuple[str, Optional[float]]]] = {}
    for key, name in series:
        points: List[Tuple[str, Optional[float]]] = []
        for r in rows:
            v = r.values.get(key)
            try:
                y = float(v) if v is not None and v != NA else None
            except (TypeError, ValueError):
                y = None
            points.append((r.date, y))
        out[name] = points
    return out
