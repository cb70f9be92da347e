"""
Grouping and aggregation.

Pure functions that derive display buckets from already-fetched items:
calendar day placement, report rollups by category/customer/date.

Money is carried as integer minor units (kopecks, cents) through every step.
Conversion to major units happens only in format_money, at the render
boundary.
"""

from collections import OrderedDict
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Union

from app.domain.arrangement.models import NO_DATA, AggregateOp, Bucket, Item

DateLike = Union[date, datetime, str]
KeyFn = Callable[[Item], Hashable]
ValueFn = Callable[[Item], Any]

CURRENCY_SYMBOLS: Dict[str, str] = {"RUB": "₽", "USD": "$", "EUR": "€"}


# =============================================================================
# Grouping
# =============================================================================

def group_by(items: Iterable[Item], key_fn: KeyFn) -> Dict[Hashable, List[Item]]:
    """
    Stable grouping.

    Buckets appear in order of first occurrence and items keep their
    relative input order within a bucket.
    """
    buckets: Dict[Hashable, List[Item]] = OrderedDict()
    for item in items:
        buckets.setdefault(key_fn(item), []).append(item)
    return buckets


def aggregate(bucket: Sequence[Item], value_fn: ValueFn, op: AggregateOp) -> Any:
    """
    Aggregate a bucket.

    Sum and Count of an empty bucket are 0. Min and Max of an empty bucket
    are NO_DATA.
    """
    op = AggregateOp(op)
    if op is AggregateOp.COUNT:
        return len(bucket)

    values = [value_fn(item) for item in bucket]
    if op is AggregateOp.SUM:
        return sum(values, 0)
    if not values:
        return NO_DATA
    if op is AggregateOp.MIN:
        return min(values)
    return max(values)


def build_buckets(
    items: Iterable[Item],
    key_fn: KeyFn,
    value_fn: ValueFn,
    op: AggregateOp = AggregateOp.SUM,
) -> List[Bucket]:
    """Group items and compute one aggregate per bucket."""
    return [
        Bucket(key=key, items=members, value=aggregate(members, value_fn, op))
        for key, members in group_by(items, key_fn).items()
    ]


def sort_buckets(
    buckets: Iterable[Bucket],
    by: str = "value",
    descending: bool = True,
) -> List[Bucket]:
    """
    Order buckets for display.

    Sorting by value breaks ties by key ascending; buckets without data
    always come last.
    """
    buckets = list(buckets)
    if by == "key":
        return sorted(buckets, key=lambda b: str(b.key), reverse=descending)
    if by != "value":
        raise ValueError(f"Unknown sort field: {by}")

    with_data = [b for b in buckets if b.has_data]
    without_data = sorted((b for b in buckets if not b.has_data), key=lambda b: str(b.key))

    sign = -1 if descending else 1
    with_data.sort(key=lambda b: (sign * b.value, str(b.key)))
    return with_data + without_data


def share_percent(part: int, total: int) -> float:
    """Share of total in percent, one decimal. 0 when total is 0."""
    if not total:
        return 0.0
    return float((Decimal(part) * 100 / Decimal(total)).quantize(Decimal("0.1"), ROUND_HALF_UP))


# =============================================================================
# Dates
# =============================================================================

def to_date(value: DateLike) -> date:
    """Date part of a date, datetime or ISO string ("2024-03-01T10:00:00Z" -> 2024-03-01)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise TypeError(f"Cannot interpret {value!r} as a date")


def in_date_range(day: DateLike, start: DateLike, end: Optional[DateLike] = None) -> bool:
    """
    Date-range membership, inclusive at both ends.

    This is the only range check used for calendar placement and for
    payment-due rollups. A missing end means a single-day range.
    """
    d = to_date(day)
    start_day = to_date(start)
    end_day = to_date(end) if end is not None else start_day
    return start_day <= d <= end_day


def bucket_by_day(
    items: Iterable[Item],
    days: Iterable[DateLike],
    start_fn: Callable[[Item], Optional[DateLike]] = lambda item: item.start,
    end_fn: Callable[[Item], Optional[DateLike]] = lambda item: item.end,
) -> Dict[date, List[Item]]:
    """
    Place items on every day their range covers.

    Items without a start date are not placed.
    """
    placed = [item for item in items if start_fn(item) is not None]
    result: Dict[date, List[Item]] = OrderedDict()
    for day in days:
        d = to_date(day)
        result[d] = [item for item in placed if in_date_range(d, start_fn(item), end_fn(item))]
    return result


def month_grid(year: int, month: int) -> List[date]:
    """
    Six Monday-start weeks (42 days) covering the month.

    Leading days come from the previous month, trailing days from the next.
    """
    first = date(year, month, 1)
    start = first - timedelta(days=first.weekday())
    return [start + timedelta(days=offset) for offset in range(42)]


def period_start(period: str, today: Optional[date] = None) -> Optional[date]:
    """
    First day of the reporting period containing today.

    Periods: "month", "quarter", "year"; "all" has no start (None).
    """
    today = today or date.today()
    if period == "all":
        return None
    if period == "month":
        return today.replace(day=1)
    if period == "quarter":
        return date(today.year, (today.month - 1) // 3 * 3 + 1, 1)
    if period == "year":
        return date(today.year, 1, 1)
    raise ValueError(f"Unknown period: {period}")


# =============================================================================
# Money
# =============================================================================

def to_minor_units(value: Union[int, float, str, Decimal], exponent: int = 2) -> int:
    """
    Convert a major-unit amount to integer minor units (ROUND_HALF_UP).

    to_minor_units("12.345") -> 1235
    """
    if isinstance(value, float):
        value = str(value)
    amount = Decimal(value) * (Decimal(10) ** exponent)
    return int(amount.quantize(Decimal(1), ROUND_HALF_UP))


def _group_thousands(number: str) -> str:
    integer, _, fraction = number.partition(".")
    groups = []
    while len(integer) > 3:
        groups.insert(0, integer[-3:])
        integer = integer[:-3]
    groups.insert(0, integer)
    grouped = " ".join(groups)
    return f"{grouped}.{fraction}" if fraction else grouped


def format_money(
    minor: int,
    currency: str = "RUB",
    compact: bool = True,
    exponent: int = 2,
) -> str:
    """
    Render minor units for display.

    Compact form scales large amounts: 1.5 bn, 12.3 M, 450 k. Smaller
    amounts are grouped by thousands and show kopecks only when present.
    The unit is picked after rounding, so 999 999.99 shows as 1.0 M.
    """
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    major = Decimal(minor) / (Decimal(10) ** exponent)
    sign = "-" if major < 0 else ""
    major = abs(major)

    if compact and major >= 1_000:
        thousands = (major / 1_000).quantize(Decimal(1), ROUND_HALF_UP)
        if thousands < 1_000:
            return f"{sign}{thousands} k {symbol}"
        millions = (major / 1_000_000).quantize(Decimal("0.1"), ROUND_HALF_UP)
        if millions < 1_000:
            return f"{sign}{millions} M {symbol}"
        billions = (major / 1_000_000_000).quantize(Decimal("0.1"), ROUND_HALF_UP)
        return f"{sign}{billions} bn {symbol}"

    if major == major.to_integral_value():
        text = f"{major:.0f}"
    else:
        text = f"{major:.{exponent}f}"
    return f"{sign}{_group_thousands(text)} {symbol}"
