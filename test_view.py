"""Tests for the view composer."""

from datetime import date

from schemas import Category
from view import build_view, project, upcoming


def _titles(records):
    return [r.title for r in records]


def test_orders_by_urgency_keeping_ties_in_input_order(make_record, today):
    ann = make_record("a", "Ann", date(1985, 6, 6))   # 5 days
    bob = make_record("b", "Bob", date(1970, 6, 6))   # 5 days
    cy = make_record("c", "Cy", date(1990, 6, 2))     # 1 day

    assert _titles(build_view([ann, bob, cy], today=today)) == ["Cy", "Ann", "Bob"]
    assert _titles(build_view([bob, ann, cy], today=today)) == ["Cy", "Bob", "Ann"]


def test_search_is_case_insensitive(make_record, today):
    records = [
        make_record("1", "Mom's Birthday", date(1960, 8, 1)),
        make_record("2", "Dad", date(1958, 9, 1)),
    ]
    assert _titles(build_view(records, "mom", today=today)) == ["Mom's Birthday"]
    assert _titles(build_view(records, "MOM", today=today)) == ["Mom's Birthday"]


def test_type_filter(make_record, today):
    records = [
        make_record("1", "妈妈生日", date(1975, 5, 20), Category.BIRTHDAY),
        make_record("2", "结婚纪念日", date(2020, 10, 1), Category.ANNIVERSARY),
        make_record("3", "搬家", date(2018, 6, 3), Category.OTHER),
    ]

    assert _titles(build_view(records, type_filter="ANNIVERSARY", today=today)) == ["结婚纪念日"]
    assert _titles(build_view(records, type_filter=Category.OTHER, today=today)) == ["搬家"]
    assert len(build_view(records, type_filter="all", today=today)) == 3
    assert len(build_view(records, type_filter="ALL", today=today)) == 3


def test_filter_keeps_exactly_the_matching_records(make_record, today):
    records = [
        make_record("1", "Mom birthday", date(1975, 1, 2), Category.BIRTHDAY),
        make_record("2", "Mom & Dad wedding", date(1980, 7, 1), Category.ANNIVERSARY),
        make_record("3", "Grandma", date(1940, 3, 3), Category.BIRTHDAY),
        make_record("4", "mom's garden", date(2010, 4, 4), Category.OTHER),
    ]

    result = build_view(records, "mom", "BIRTHDAY", today=today)

    expected = {
        r.id for r in records
        if "mom" in r.title.lower() and r.category == Category.BIRTHDAY
    }
    assert {r.id for r in result} == expected == {"1"}


def test_is_idempotent(make_record, today):
    records = [
        make_record(str(i), f"Friend {i}", date(1990, (i % 12) + 1, (i % 27) + 1))
        for i in range(20)
    ]
    first = build_view(records, "friend", today=today)
    second = build_view(records, "friend", today=today)
    assert first == second


def test_accepts_mapping(make_record, today):
    a = make_record("a", "A", date(1990, 12, 1))
    b = make_record("b", "B", date(1990, 6, 2))
    assert _titles(build_view({"a": a, "b": b}, today=today)) == ["B", "A"]


def test_empty_view_is_empty_tuple(make_record, today):
    assert build_view([], today=today) == ()
    records = [make_record("1", "Dad", date(1958, 9, 1))]
    assert build_view(records, "nobody", today=today) == ()


def test_upcoming(make_record, today):
    records = [
        make_record("1", "Later", date(1990, 12, 1)),
        make_record("2", "Sooner", date(1990, 6, 10)),
    ]
    assert upcoming(records, today=today).title == "Sooner"
    assert upcoming([], today=today) is None


def test_project(make_record, today):
    record = make_record("1", "妈妈生日", date(1975, 6, 5), notes="喜欢花")

    item = project(record, today)

    assert item.id == "1"
    assert item.days_until == 4
    assert item.next_occurrence == date(2024, 6, 5)
    assert item.elapsed_years == 49
    assert item.month_day == "06月05日"
    assert item.category_label == "生日"
    assert item.age_caption == "49岁"
    assert item.is_urgent
    assert item.notes == "喜欢花"
