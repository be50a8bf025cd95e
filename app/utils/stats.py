"""Aggregation primitives behind the admin dashboard charts."""
import math
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Union

Number = Union[int, float]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percent_change(this_month: Number, last_month: Number) -> Number:
    """Ratio of this month to last month as a percentage.

    A zero baseline yields ``this_month * 100``.
    """
    if last_month == 0:
        return this_month * 100
    return round_half_up(this_month / last_month * 100)


def category_distribution(categories: Iterable[str], category_counts: Dict[str, int], total_count: int) -> Dict[str, int]:
    """Percentage of all products per category; values need not sum to 100."""
    distribution = {}
    for category in categories:
        count = category_counts.get(category, 0)
        distribution[category] = round_half_up(count / total_count * 100) if total_count else 0
    return distribution


def month_diff(today: datetime, created_at: datetime) -> int:
    return (today.month - created_at.month + 12) % 12


def month_buckets(
    length: int,
    docs: Iterable[Any],
    today: datetime,
    prop: Optional[str] = None,
) -> List[Number]:
    """Count (or sum ``prop`` of) docs per month, oldest bucket first.

    Docs further back than ``length - 1`` months are dropped.
    """
    data: List[Number] = [0] * length
    for doc in docs:
        diff = month_diff(today, _value(doc, "created_at"))
        if diff < length:
            index = length - diff - 1
            data[index] += _value(doc, prop) if prop else 1
    return data


def start_of_month(today: datetime, months_back: int = 0) -> datetime:
    """First instant of the month ``months_back`` months before ``today``."""
    month_index = today.year * 12 + (today.month - 1) - months_back
    year, month = divmod(month_index, 12)
    return today.replace(year=year, month=month + 1, day=1, hour=0, minute=0, second=0, microsecond=0)


def _value(doc: Any, name: str) -> Any:
    if isinstance(doc, dict):
        return doc[name]
    return getattr(doc, name)
