from datetime import timedelta

import pytest

from flashcore.filtering import (
    LabelStats,
    all_sub_category_stats,
    cards_due_today,
    cards_reviewed_today,
    category_stats,
    next_category_with_due_cards,
    next_category_with_least_cards,
    next_sub_category_with_least_cards,
    past_due_cards,
    sub_category_stats,
)


@pytest.fixture
def deck(make_card, now):
    later = now + timedelta(days=5)
    return [
        make_card(category="Go", sub_category="a"),
        make_card(category="Go", sub_category="a", due_date=later),
        make_card(category="Go", sub_category="a", due_date=later),
        make_card(category="Go", sub_category="b"),
        make_card(category="Go", sub_category="c", due_date=later),
        make_card(category="AWS", sub_category="S3"),
        make_card(category="AWS", sub_category="S3"),
        make_card(category="Rust", sub_category="x", due_date=later),
        make_card(category="Zig", sub_category=None, active=False),
    ]


def test_category_stats(deck, now):
    assert category_stats(deck, now) == {
        "Go": LabelStats(total=5, due=2),
        "AWS": LabelStats(total=2, due=2),
        "Rust": LabelStats(total=1, due=0),
    }


def test_sub_category_stats_within_category(deck, now):
    stats = sub_category_stats(deck, now, category="Go")
    assert stats["a"] == LabelStats(total=3, due=1)
    assert stats["c"] == LabelStats(total=1, due=0)
    assert "S3" not in stats


def test_all_sub_category_stats_uses_composite_keys(deck, now):
    stats = all_sub_category_stats(deck, now)
    assert stats["AWS::S3"] == LabelStats(total=2, due=2)
    assert "Zig::Uncategorized" not in stats


def test_next_sub_category_prefers_fewest_cards(deck, now):
    assert next_sub_category_with_least_cards(deck, "Go", "a", now) == "b"
    assert next_sub_category_with_least_cards(deck, "Go", "b", now) == "a"
    assert next_sub_category_with_least_cards(deck, "Rust", "x", now) is None


def test_next_category_with_least_cards(deck, now):
    assert next_category_with_least_cards(deck, "AWS", now) == "Go"
    assert next_category_with_least_cards(deck, "All", now) == "AWS"


def test_next_category_with_due_cards_walks_alphabetically(deck, now):
    assert next_category_with_due_cards(deck, "All", now) == "AWS"
    assert next_category_with_due_cards(deck, "AWS", now) == "Go"
    assert next_category_with_due_cards(deck, "Go", now) is None
    assert next_category_with_due_cards(deck, "Rust", now) == "AWS"


def test_due_and_past_due_lists(make_card, now):
    overdue = make_card(due_date=now - timedelta(days=2))
    later_today = make_card(due_date=now + timedelta(hours=3))
    future = make_card(due_date=now + timedelta(days=2))
    inactive = make_card(due_date=now - timedelta(days=2), active=False)
    cards = [overdue, later_today, future, inactive]

    assert cards_due_today(cards, now) == [overdue, later_today]
    assert past_due_cards(cards, now) == [overdue]


def test_cards_reviewed_today(make_card, now):
    today = make_card(last_reviewed=now - timedelta(hours=2))
    yesterday = make_card(last_reviewed=now - timedelta(days=1))
    never = make_card()

    assert cards_reviewed_today([today, yesterday, never], now) == [today]
