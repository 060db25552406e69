"""View composer for MemoryKeeper.

Turns the full record set into the filtered, urgency-ordered list shown
to the user. Pure: no I/O, deterministic for a fixed "today".
"""

from collections.abc import Mapping
from datetime import date
from typing import Iterable, Optional, Tuple, Union

import recurrence
from schemas import ALL_CATEGORIES, Category, Record, RecordView

RecordSet = Union[Iterable[Record], Mapping]


def _matches_search(record: Record, search_term: str) -> bool:
    if not search_term:
        return True
    return search_term.lower() in record.title.lower()


def _matches_type(record: Record, type_filter) -> bool:
    if type_filter is None:
        return True
    wanted = str(type_filter.value if isinstance(type_filter, Category) else type_filter).upper()
    if wanted == ALL_CATEGORIES:
        return True
    return record.category.value == wanted


def build_view(
    records: RecordSet,
    search_term: str = "",
    type_filter: Union[str, Category, None] = ALL_CATEGORIES,
    today: Optional[date] = None
) -> Tuple[Record, ...]:
    """Filter and order records by urgency.

    Args:
        records: The full record set, as a sequence or an id -> Record mapping
        search_term: Case-insensitive substring matched against titles
        type_filter: "ALL" (any case) or a Category
        today: Reference date (default: local date)

    Returns:
        Tuple[Record, ...]: Matching records, soonest occurrence first.
        Records due on the same day keep their input order.
    """
    if isinstance(records, Mapping):
        records = records.values()
    today = today if today is not None else date.today()

    matching = [
        r for r in records
        if _matches_search(r, search_term) and _matches_type(r, type_filter)
    ]
    # sorted() is stable
    matching = sorted(
        matching,
        key=lambda r: recurrence.days_until_next_occurrence(r.origin_date, today)
    )
    return tuple(matching)


def upcoming(
    records: RecordSet,
    search_term: str = "",
    type_filter: Union[str, Category, None] = ALL_CATEGORIES,
    today: Optional[date] = None
) -> Optional[Record]:
    """First record of the view, or None when the view is empty."""
    view = build_view(records, search_term, type_filter, today)
    return view[0] if view else None


def project(record: Record, today: Optional[date] = None) -> RecordView:
    """Attach the derived display values to a record."""
    today = today if today is not None else date.today()
    days = recurrence.days_until_next_occurrence(record.origin_date, today)
    return RecordView(
        id=record.id,
        title=record.title,
        origin_date=record.origin_date,
        category=record.category,
        notes=record.notes,
        is_lunar=record.is_lunar,
        days_until=days,
        next_occurrence=recurrence.next_occurrence(record.origin_date, today),
        elapsed_years=recurrence.elapsed_years(record.origin_date, today),
        month_day=recurrence.format_month_day(record.origin_date),
        category_label=recurrence.category_label(record.category),
        age_caption=recurrence.age_caption(record, today),
        is_urgent=recurrence.is_urgent(days),
    )
