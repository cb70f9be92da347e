"""Tests for grouping, aggregation, calendar placement and money."""

from datetime import date, datetime

import pytest

from app.domain.arrangement import (
    NO_DATA,
    AggregateOp,
    Bucket,
    Item,
    aggregate,
    bucket_by_day,
    build_buckets,
    format_money,
    group_by,
    in_date_range,
    month_grid,
    period_start,
    share_percent,
    sort_buckets,
    to_date,
    to_minor_units,
)


def _payment(item_id: str, customer: str, amount: int) -> Item:
    return Item(id=item_id, payload={"customer": customer, "amount": amount})


def _amount(item: Item) -> int:
    return item.payload["amount"]


class TestGroupBy:
    """Tests for stable grouping."""
    
    def test_first_occurrence_order(self):
        """Buckets in first-occurrence order, items in input order."""
        items = [
            _payment("1", "acme", 100),
            _payment("2", "globex", 200),
            _payment("3", "acme", 300),
        ]
        
        groups = group_by(items, lambda item: item.payload["customer"])
        
        assert list(groups) == ["acme", "globex"]
        assert [i.id for i in groups["acme"]] == ["1", "3"]
    
    def test_empty(self):
        """No items, no buckets."""
        assert group_by([], lambda item: item.id) == {}


class TestAggregate:
    """Tests for aggregate."""
    
    def test_operations(self):
        """Sum, count, min and max over a bucket."""
        bucket = [_payment("1", "a", 150), _payment("2", "a", 50), _payment("3", "a", 300)]
        
        assert aggregate(bucket, _amount, AggregateOp.SUM) == 500
        assert aggregate(bucket, _amount, AggregateOp.COUNT) == 3
        assert aggregate(bucket, _amount, AggregateOp.MIN) == 50
        assert aggregate(bucket, _amount, AggregateOp.MAX) == 300
    
    def test_empty_bucket(self):
        """Sum and count are 0; min and max have no data."""
        assert aggregate([], _amount, AggregateOp.SUM) == 0
        assert aggregate([], _amount, AggregateOp.COUNT) == 0
        assert aggregate([], _amount, AggregateOp.MIN) is NO_DATA
        assert aggregate([], _amount, AggregateOp.MAX) is NO_DATA
    
    def test_op_by_value(self):
        """Operations can be given by their string value."""
        assert aggregate([_payment("1", "a", 7)], _amount, "sum") == 7
    
    def test_no_data_is_not_zero(self):
        """NO_DATA is falsy but distinct from 0."""
        assert not NO_DATA
        assert NO_DATA != 0
        assert repr(NO_DATA) == "NO_DATA"


class TestBuckets:
    """Tests for building and sorting report buckets."""
    
    def test_report_by_customer(self):
        """Payments roll up per customer in integer minor units."""
        payments = [
            _payment("1", "acme", to_minor_units("1200.50")),
            _payment("2", "globex", to_minor_units("99.99")),
            _payment("3", "acme", to_minor_units("0.01")),
        ]
        
        buckets = build_buckets(payments, lambda i: i.payload["customer"], _amount)
        
        assert [(b.key, b.value) for b in buckets] == [("acme", 120051), ("globex", 9999)]
        assert all(isinstance(b.value, int) for b in buckets)
    
    def test_sort_by_value_with_ties(self):
        """Ties break by key; buckets without data go last."""
        buckets = [
            Bucket(key="c", value=5),
            Bucket(key="d"),
            Bucket(key="b", value=10),
            Bucket(key="a", value=5),
        ]
        
        assert [b.key for b in sort_buckets(buckets)] == ["b", "a", "c", "d"]
        assert [b.key for b in sort_buckets(buckets, descending=False)] == ["a", "c", "b", "d"]
    
    def test_sort_by_key(self):
        """Key sort ignores values."""
        buckets = [Bucket(key="b", value=1), Bucket(key="a", value=2)]
        
        assert [b.key for b in sort_buckets(buckets, by="key", descending=False)] == ["a", "b"]
    
    def test_sort_unknown_field(self):
        """Unknown sort field raises."""
        with pytest.raises(ValueError):
            sort_buckets([], by="name")
    
    def test_share_percent(self):
        """Shares are rounded to one decimal."""
        assert share_percent(1, 3) == 33.3
        assert share_percent(2, 3) == 66.7
        assert share_percent(5, 0) == 0.0


class TestDateRange:
    """Tests for inclusive date-range membership."""
    
    def test_inclusive_both_ends(self):
        """Start and end days are inside the range."""
        assert in_date_range("2024-03-01", "2024-03-01", "2024-03-03")
        assert in_date_range("2024-03-03", "2024-03-01", "2024-03-03")
        assert not in_date_range("2024-03-04", "2024-03-01", "2024-03-03")
        assert not in_date_range("2024-02-29", "2024-03-01", "2024-03-03")
    
    def test_single_day(self):
        """Missing end means one day."""
        assert in_date_range(date(2024, 3, 1), "2024-03-01")
        assert not in_date_range(date(2024, 3, 2), "2024-03-01")
    
    def test_datetime_strings(self):
        """Time of day is ignored."""
        assert in_date_range("2024-03-03T23:59:00", "2024-03-01T09:00:00Z", "2024-03-03T08:00:00Z")
    
    def test_to_date(self):
        """Dates, datetimes and ISO strings all convert."""
        assert to_date(datetime(2024, 3, 1, 12, 30)) == date(2024, 3, 1)
        assert to_date("2024-03-01T10:00:00Z") == date(2024, 3, 1)
        with pytest.raises(TypeError):
            to_date(20240301)


class TestCalendar:
    """Tests for calendar placement."""
    
    def test_multi_day_event_on_every_day(self):
        """An event spanning three days shows on all three."""
        events = [
            Item(id="conf", start="2024-03-01", end="2024-03-03"),
            Item(id="call", start="2024-03-02"),
            Item(id="undated"),
        ]
        days = [date(2024, 3, d) for d in range(1, 5)]
        
        placed = bucket_by_day(events, days)
        
        assert [i.id for i in placed[date(2024, 3, 1)]] == ["conf"]
        assert [i.id for i in placed[date(2024, 3, 2)]] == ["conf", "call"]
        assert [i.id for i in placed[date(2024, 3, 3)]] == ["conf"]
        assert placed[date(2024, 3, 4)] == []
    
    def test_month_grid(self):
        """Six Monday-start weeks covering the month."""
        grid = month_grid(2024, 3)
        
        assert len(grid) == 42
        assert grid[0] == date(2024, 2, 26)
        assert grid[0].weekday() == 0
        assert grid[-1] == date(2024, 4, 7)
        assert date(2024, 3, 31) in grid
    
    def test_month_grid_starting_monday(self):
        """A month starting on Monday has no leading days."""
        assert month_grid(2024, 4)[0] == date(2024, 4, 1)
    
    def test_period_start(self):
        """Reporting periods start on the first day of month, quarter or year."""
        today = date(2024, 8, 15)
        
        assert period_start("month", today) == date(2024, 8, 1)
        assert period_start("quarter", today) == date(2024, 7, 1)
        assert period_start("year", today) == date(2024, 1, 1)
        assert period_start("all", today) is None
        with pytest.raises(ValueError):
            period_start("week", today)


class TestMoney:
    """Tests for minor-unit conversion and display."""
    
    def test_to_minor_units(self):
        """Half-up rounding into integer minor units."""
        assert to_minor_units("12.345") == 1235
        assert to_minor_units(10) == 1000
        assert to_minor_units(0.1 + 0.2) == 30
        assert to_minor_units("2.5", exponent=0) == 3
    
    def test_compact_format(self):
        """Large amounts are scaled."""
        assert format_money(150_000_000_000) == "1.5 bn ₽"
        assert format_money(1_234_567_800) == "12.3 M ₽"
        assert format_money(45_040_000) == "450 k ₽"
    
    def test_compact_unit_chosen_after_rounding(self):
        """Amounts that round up to the next unit are shown in that unit."""
        assert format_money(99_999_999) == "1.0 M ₽"
        assert format_money(99_996_000_000) == "1.0 bn ₽"
        assert format_money(-99_999_999) == "-1.0 M ₽"
        assert format_money(99_949_999) == "999 k ₽"
    
    def test_small_amounts(self):
        """Small amounts show kopecks only when present."""
        assert format_money(12345) == "123.45 ₽"
        assert format_money(50000) == "500 ₽"
        assert format_money(-250, currency="USD") == "-2.50 $"
    
    def test_full_format(self):
        """Non-compact form groups thousands."""
        assert format_money(123456750, compact=False) == "1 234 567.50 ₽"
        assert format_money(100000, currency="EUR", compact=False) == "1 000 €"
    
    def test_unknown_currency_uses_code(self):
        """Unknown currency codes are printed as-is."""
        assert format_money(100, currency="GBP") == "1 GBP"


class TestCalendarScenario:
    """Daily payment totals."""
    
    def test_sum_by_date(self):
        """Payments grouped by date sum per day."""
        payments = [
            Item(id="p1", payload={"amount": 500, "date": "2024-06-05"}),
            Item(id="p2", payload={"amount": 300, "date": "2024-06-05"}),
            Item(id="p3", payload={"amount": 100, "date": "2024-06-06"}),
        ]
        
        totals = {
            key: aggregate(bucket, _amount, AggregateOp.SUM)
            for key, bucket in group_by(payments, lambda item: item.payload["date"]).items()
        }
        
        assert totals == {"2024-06-05": 800, "2024-06-06": 100}
    
    def test_single_day_range(self):
        """An item starting and ending on one day lands only on that day."""
        item = Item(id="x", start="2024-03-01", end="2024-03-01")
        days = [date(2024, 2, 29), date(2024, 3, 1), date(2024, 3, 2)]
        
        placed = bucket_by_day([item], days)
        
        assert [day for day, items in placed.items() if items] == [date(2024, 3, 1)]
