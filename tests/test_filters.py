"""Tests for transaction query predicates."""

from __future__ import annotations

import datetime
import re

import pytest

from app.domains.transactions.filters import (
    And,
    DateRange,
    MatchAll,
    Or,
    TextPattern,
    field_text,
    listing_filter,
    month_filter,
    month_range,
    parse_month,
)


def _doc(**overrides):
    doc = {
        "title": "Mens Cotton Jacket",
        "description": "Great outerwear jackets",
        "price": 615.89,
        "dateOfSale": datetime.datetime(2022, 7, 27, 14, 59, 54),
    }
    doc.update(overrides)
    return doc


@pytest.mark.parametrize(
    ("month", "expected"),
    [
        ("2024-03", (2024, 3)),
        ("2024-3", (2024, 3)),
        ("2024-03-15", (2024, 3)),
        ("2024-03-15T10:20:00Z", (2024, 3)),
        ("March 2024", (2024, 3)),
        ("mar 2024", (2024, 3)),
        ("2024-13", None),
        ("0000-01", None),
        ("9999-12", None),
        ("December 9999", None),
        ("9999-11", (9999, 11)),
        ("0001-01", (1, 1)),
        ("not a month", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_month(month, expected) -> None:
    assert parse_month(month) == expected


def test_month_range_rolls_over_december() -> None:
    assert month_range(2023, 12) == (datetime.datetime(2023, 12, 1), datetime.datetime(2024, 1, 1))
    assert month_range(2024, 2) == (datetime.datetime(2024, 2, 1), datetime.datetime(2024, 3, 1))


def test_month_filter_is_half_open_range() -> None:
    predicate = month_filter("2024-03")

    assert predicate.to_query() == {
        "dateOfSale": {
            "$gte": datetime.datetime(2024, 3, 1),
            "$lt": datetime.datetime(2024, 4, 1),
        }
    }
    assert predicate.matches({"dateOfSale": datetime.datetime(2024, 3, 1)})
    assert predicate.matches({"dateOfSale": datetime.datetime(2024, 3, 31, 23, 59, 59)})
    assert not predicate.matches({"dateOfSale": datetime.datetime(2024, 4, 1)})
    assert not predicate.matches({"dateOfSale": datetime.datetime(2024, 2, 29, 23, 59)})


def test_unreadable_month_matches_nothing(caplog) -> None:
    predicate = month_filter("garbage")

    assert not predicate.matches({"dateOfSale": datetime.datetime(1970, 1, 1)})
    assert not predicate.matches({"dateOfSale": datetime.datetime(2024, 3, 5)})
    assert "Unreadable month selector" in caplog.text


def test_text_pattern_on_string_field_uses_regex_operator() -> None:
    predicate = TextPattern("title", "jacket")

    assert predicate.to_query() == {"title": {"$regex": "jacket", "$options": "i"}}
    assert predicate.matches(_doc())
    assert not predicate.matches(_doc(title="Backpack"))


def test_text_pattern_on_price_matches_textual_form() -> None:
    predicate = TextPattern("price", "615", kind="number")

    assert predicate.to_query() == {
        "$expr": {
            "$regexMatch": {"input": {"$toString": "$price"}, "regex": "615", "options": "i"}
        }
    }
    assert predicate.matches(_doc())
    assert not predicate.matches(_doc(price=44.6))


def test_text_pattern_on_date_matches_rendered_date() -> None:
    predicate = TextPattern("dateOfSale", "2022-07", kind="date")

    query = predicate.to_query()
    assert query["$expr"]["$regexMatch"]["input"] == {
        "$dateToString": {"format": "%Y-%m-%dT%H:%M:%S.%LZ", "date": "$dateOfSale"}
    }
    assert predicate.matches(_doc())
    assert not predicate.matches(_doc(dateOfSale=datetime.datetime(2022, 8, 1)))


def test_field_text_renders_like_mongodb() -> None:
    assert field_text(150.0, "number") == "150"
    assert field_text(329.85, "number") == "329.85"
    assert field_text(datetime.datetime(2024, 3, 5, 1, 2, 3, 456789), "date") == "2024-03-05T01:02:03.456Z"


def test_invalid_pattern_is_rejected() -> None:
    with pytest.raises(re.error):
        TextPattern("title", "(unclosed")


def test_and_of_month_and_search_group_is_explicit() -> None:
    predicate = listing_filter("2022-07", "jacket")

    query = predicate.to_query()
    assert list(query) == ["$and"]
    month_clause, search_clause = query["$and"]
    assert "$expr" in month_clause
    assert [list(clause) for clause in search_clause["$or"]] == [["title"], ["description"], ["$expr"]]


def test_listing_filter_requires_month_and_any_search_field() -> None:
    predicate = listing_filter("2022-07", "outerwear")

    assert predicate.matches(_doc())
    assert not predicate.matches(_doc(description="Something else"))
    assert not predicate.matches(_doc(dateOfSale=datetime.datetime(2021, 7, 27)))


def test_listing_filter_without_filters_matches_everything() -> None:
    predicate = listing_filter()

    assert predicate.to_query() == {}
    assert predicate.matches(_doc())


def test_listing_filter_with_only_search_text() -> None:
    predicate = listing_filter(search_text="615.89")

    assert "$or" in predicate.to_query()
    assert predicate.matches(_doc())


def test_combinators_collapse_trivial_parts() -> None:
    title = TextPattern("title", "a")

    assert And(MatchAll(), title).to_query() == title.to_query()
    assert Or(title).to_query() == title.to_query()
    assert Or(title, MatchAll()).to_query() == {}
    assert And().matches({})


def test_empty_or_group_adds_no_constraint() -> None:
    assert Or().to_query() == {}
    assert Or().matches({"title": "anything"})


@pytest.mark.parametrize("month", ["0000-01", "9999-12"])
def test_out_of_range_month_matches_nothing(month, caplog) -> None:
    predicate = month_filter(month)

    assert not predicate.matches({"dateOfSale": datetime.datetime(2024, 3, 5)})
    assert "Unreadable month selector" in caplog.text


def test_date_range_ignores_non_datetime_values() -> None:
    predicate = DateRange("dateOfSale", datetime.datetime(2024, 1, 1), datetime.datetime(2024, 2, 1))

    assert not predicate.matches({"dateOfSale": "2024-01-05"})
    assert not predicate.matches({})
