"""Filter, sort and paginate in-memory record lists for list screens.

The whole record set is fetched once; everything here runs over that list
and is free of side effects, so it can be re-run on every redraw.
"""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from dealdesk.models import to_decimal_or_zero

PAGE_SIZES = (10, 20, 30, 50, 100)

ASC = "asc"
DESC = "desc"

Accessor = str | Callable[[Any], Any]
Predicate = Callable[[Any, Any], bool]


def resolve(record: Any, accessor: Accessor) -> Any:
    """Read a value from a record. String accessors may be dotted: 'customer.name'."""
    if callable(accessor):
        return accessor(record)
    value = record
    for part in accessor.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, tuple):
        return all(is_blank(v) for v in value)
    if isinstance(value, (list, set, frozenset, dict)):
        return not value
    return False


def _text(value: Any) -> str:
    if value is None:
        return ""
    if hasattr(value, "value") and isinstance(value.value, str):
        return value.value
    return str(value)


def contains(accessor: Accessor) -> Predicate:
    """Case-insensitive substring match on one field."""

    def predicate(record: Any, value: Any) -> bool:
        return str(value).strip().lower() in _text(resolve(record, accessor)).lower()

    return predicate


def search(*accessors: Accessor) -> Predicate:
    """Case-insensitive substring match on any of several fields."""

    def predicate(record: Any, value: Any) -> bool:
        needle = str(value).strip().lower()
        return any(needle in _text(resolve(record, a)).lower() for a in accessors)

    return predicate


def equals(accessor: Accessor) -> Predicate:
    """Exact match for enum and id fields. Compares string forms so '3' matches 3."""

    def predicate(record: Any, value: Any) -> bool:
        return _text(resolve(record, accessor)) == _text(value)

    return predicate


def in_range(accessor: Accessor) -> Predicate:
    """Inclusive numeric range. The filter value is ``(low, high)``; either bound may be blank."""

    def predicate(record: Any, value: Any) -> bool:
        low, high = value
        amount = to_decimal_or_zero(resolve(record, accessor))
        if not is_blank(low) and amount < to_decimal_or_zero(low):
            return False
        if not is_blank(high) and amount > to_decimal_or_zero(high):
            return False
        return True

    return predicate


def _as_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError:
            return None
    return None


def date_range(accessor: Accessor) -> Predicate:
    """Inclusive date range over ``(start, end)``; bounds are dates or ISO strings."""

    def predicate(record: Any, value: Any) -> bool:
        start, end = (_as_date(v) for v in value)
        current = _as_date(resolve(record, accessor))
        if current is None:
            return False
        if start is not None and current < start:
            return False
        if end is not None and current > end:
            return False
        return True

    return predicate


@dataclass(frozen=True)
class Filter:
    name: str
    predicate: Predicate
    value: Any = None

    @property
    def active(self) -> bool:
        return not is_blank(self.value)

    def matches(self, record: Any) -> bool:
        return not self.active or self.predicate(record, self.value)

    def with_value(self, value: Any) -> Filter:
        return dataclasses.replace(self, value=value)


@dataclass(frozen=True)
class SortSpec:
    accessor: Accessor
    direction: str = ASC


@dataclass(frozen=True)
class TablePage:
    records: list
    total_records: int
    page: int
    page_size: int

    @property
    def page_count(self) -> int:
        return max(1, math.ceil(self.total_records / self.page_size))

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count


def _sort_key(value: Any) -> tuple:
    # Missing values and NaN rank lowest; the rank keeps mixed types comparable.
    if value is None:
        return (0, 0)
    if isinstance(value, Decimal) and value.is_nan():
        return (0, 0)
    if isinstance(value, float) and math.isnan(value):
        return (0, 0)
    if isinstance(value, (bool, int, float, Decimal)):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    if isinstance(value, (date, datetime)):
        return (3, value.isoformat())
    return (4, str(value))


def filter_records(records: Iterable[Any], filters: Iterable[Filter] = ()) -> list:
    active = [f for f in filters if f.active]
    return [r for r in records if all(f.matches(r) for f in active)]


def sort_records(records: Sequence[Any], sort: SortSpec | None) -> list:
    if sort is None:
        return list(records)
    result = sorted(records, key=lambda r: _sort_key(resolve(r, sort.accessor)))
    if sort.direction == DESC:
        result.reverse()
    return result


def paginate(records: Sequence[Any], page: int, page_size: int) -> list:
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    start = (max(page, 1) - 1) * page_size
    return list(records[start : start + page_size])


def run_pipeline(
    records: Iterable[Any],
    filters: Iterable[Filter] = (),
    sort: SortSpec | None = None,
    page: int = 1,
    page_size: int = PAGE_SIZES[0],
) -> TablePage:
    filtered = sort_records(filter_records(records, filters), sort)
    return TablePage(
        records=paginate(filtered, page, page_size),
        total_records=len(filtered),
        page=max(page, 1),
        page_size=page_size,
    )


class TableState:
    """Mutable view state for one list screen.

    Changing filters, sort or page size re-anchors to page 1; moving between
    pages does not touch anything else.
    """

    def __init__(
        self,
        filters: Iterable[Filter] = (),
        sort: SortSpec | None = None,
        page_size: int = PAGE_SIZES[0],
    ) -> None:
        self.filters: dict[str, Filter] = {f.name: f for f in filters}
        self.sort = sort
        self.page = 1
        self.page_size = page_size

    def set_filter(self, name: str, value: Any) -> None:
        if name not in self.filters:
            raise KeyError(f"Unknown filter: {name}")
        self.filters[name] = self.filters[name].with_value(value)
        self.page = 1

    def clear_filters(self) -> None:
        self.filters = {name: f.with_value(None) for name, f in self.filters.items()}
        self.page = 1

    def set_sort(self, accessor: Accessor, direction: str = ASC) -> None:
        self.sort = SortSpec(accessor, direction)
        self.page = 1

    def toggle_sort(self, accessor: Accessor) -> None:
        """Same column flips direction; a new column starts ascending."""
        if self.sort is not None and self.sort.accessor == accessor:
            self.set_sort(accessor, DESC if self.sort.direction == ASC else ASC)
        else:
            self.set_sort(accessor, ASC)

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.page_size = page_size
        self.page = 1

    def set_page(self, page: int) -> None:
        self.page = max(page, 1)

    def apply(self, records: Iterable[Any]) -> TablePage:
        return run_pipeline(records, self.filters.values(), self.sort, self.page, self.page_size)
