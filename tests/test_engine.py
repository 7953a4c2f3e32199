from datetime import timedelta

import pytest

from flashcore.cards import ALL
from flashcore.filtering import CardSort, FilterConfig, aggregate, filter_cards, sort_cards
from flashcore.ratings import Level
from scripts.diagnose_counts import check_invariants


@pytest.fixture
def deck(make_card, now):
    tomorrow = now + timedelta(days=1)
    return [
        make_card(category="Amazon LP", sub_category="Ownership", question="b"),
        make_card(category="Amazon LP", sub_category="Ownership", due_date=tomorrow, question="a"),
        make_card(category="Amazon LP", sub_category="", starred=True),
        make_card(category="AWS", sub_category="S3", difficulty=8.5),
        make_card(category="AWS", sub_category="EC2", due_date=tomorrow, starred=True),
        make_card(category=None, sub_category="Misc", interval=10),
        make_card(category="Python", sub_category="Typing", active=False),
    ]


def _assert_sums(result, selected_category=ALL):
    assert sum(result.category_counts.values()) == len(result.visible_cards)
    for category, count in result.category_counts.items():
        subtotal = sum(
            value for key, value in result.sub_category_counts_by_category.items()
            if key.startswith(f"{category}::")
        )
        assert subtotal == count
    if selected_category != ALL:
        assert sum(result.sub_category_counts.values()) == result.category_counts.get(selected_category, 0)
    assert check_invariants(result, selected_category) == []


@pytest.mark.parametrize("filter_config", [
    FilterConfig(),
    FilterConfig(show_due_today_only=True),
    FilterConfig(show_starred_only=True),
    FilterConfig(selected_category="Amazon LP"),
    FilterConfig(selected_category="Amazon LP", selected_sub_category="Ownership"),
    FilterConfig(selected_category="AWS", show_due_today_only=True),
    FilterConfig(selected_level="again"),
    FilterConfig(selected_category="Nope"),
])
def test_counts_sum_to_visible_cards(deck, now, filter_config):
    result = aggregate(deck, filter_config, now)
    _assert_sums(result, filter_config.selected_category)


def test_inactive_cards_are_never_visible(deck, now):
    result = aggregate(deck, FilterConfig(), now)
    assert "Python" not in result.categories
    assert all(card.active for card in result.visible_cards)
    assert result.total == 6


def test_category_list_ignores_current_selection(deck, now):
    result = aggregate(deck, FilterConfig(selected_category="AWS"), now)

    assert set(result.categories) == {"Amazon LP", "AWS", "Uncategorized"}
    assert result.category_counts == {"Amazon LP": 0, "AWS": 2, "Uncategorized": 0}
    assert result.sub_categories == ["EC2", "S3"]


def test_lists_are_ordered_by_count_then_label(deck, now):
    result = aggregate(deck, FilterConfig(), now)
    assert result.categories == ["Amazon LP", "AWS", "Uncategorized"]


def test_due_filter_shrinks_lists(deck, now):
    result = aggregate(deck, FilterConfig(show_due_today_only=True), now)

    assert result.category_counts == {"Amazon LP": 2, "AWS": 1, "Uncategorized": 1}
    assert "EC2" not in result.sub_categories
    assert result.sub_category_counts_by_category["Amazon LP::Uncategorized"] == 1


def test_level_counts_always_hold_every_level(deck, now):
    result = aggregate(deck, FilterConfig(), now)

    assert set(result.level_counts) == set(Level)
    assert result.level_counts[Level.AGAIN] == 1
    assert result.level_counts[Level.GOOD] == 1
    assert result.level_counts[Level.NEW] == 4
    assert sum(result.level_counts.values()) == result.total


def test_level_filter(deck, now):
    visible = filter_cards(deck, FilterConfig(selected_level="again"), now)
    assert [card.sub_category for card in visible] == ["S3"]


def test_sort_orders(make_card, now):
    early = make_card(question="Zeta", due_date=now - timedelta(days=3))
    late = make_card(question="alpha", due_date=now + timedelta(days=3))
    never = make_card(question="Mid", due_date=None)
    cards = [early, late, never]

    assert sort_cards(cards, CardSort.ALPHABETICAL) == [late, never, early]
    assert sort_cards(cards, CardSort.MOST_DUE) == [never, early, late]
    assert sort_cards(cards, CardSort.LEAST_DUE) == [late, early, never]


def test_amazon_lp_blank_subcategories_collapse(make_card, now):
    named = [make_card(category="Amazon LP", sub_category=f"Principle {i}") for i in range(7)]
    blank = [
        make_card(category="Amazon LP", sub_category=""),
        make_card(category="Amazon LP", sub_category="   "),
        make_card(category="Amazon LP", sub_category=None),
        make_card(category="Amazon LP"),
        make_card(category="Amazon LP", sub_category=None),
    ]

    result = aggregate(named + blank, FilterConfig(selected_category="Amazon LP"), now)

    assert len(result.sub_categories) == 8
    assert "Uncategorized" in result.sub_categories
    assert result.sub_category_counts["Uncategorized"] == 5
    assert result.category_counts["Amazon LP"] == 12
    _assert_sums(result, "Amazon LP")


def test_case_variants_stay_separate(make_card, now):
    cards = [make_card(category="AWS"), make_card(category="aws")]

    result = aggregate(cards, FilterConfig(), now)

    assert sorted(result.categories) == ["AWS", "aws"]
    assert result.category_counts == {"AWS": 1, "aws": 1}


def test_starred_and_due_leaves_single_card(make_card, now):
    tomorrow = now + timedelta(days=2)
    target = make_card(category="AWS", sub_category="IAM", starred=True)
    cards = [
        target,
        make_card(category="AWS", sub_category="IAM", starred=True, due_date=tomorrow),
        make_card(category="AWS", sub_category="S3"),
        make_card(category="Python", starred=False),
    ]

    result = aggregate(cards, FilterConfig(show_due_today_only=True, show_starred_only=True), now)

    assert result.visible_cards == [target]
    assert sum(result.category_counts.values()) == 1
    assert sum(result.sub_category_counts.values()) == 1
    assert sum(result.sub_category_counts_by_category.values()) == 1


def test_check_invariants_reports_mismatch(make_card, now):
    result = aggregate([make_card(category="AWS")], FilterConfig(), now)
    broken = type(result)(
        visible_cards=result.visible_cards,
        categories=result.categories,
        sub_categories=result.sub_categories,
        category_counts={"AWS": 2},
        sub_category_counts=result.sub_category_counts,
        sub_category_counts_by_category=result.sub_category_counts_by_category,
        level_counts=result.level_counts,
    )

    problems = check_invariants(broken)

    assert len(problems) == 2
