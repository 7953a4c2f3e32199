"""
Diagnose category and due counts for a user.

Runs the aggregation engine on the user's cards, prints the category,
subcategory and level counts next to today's stable snapshot, and checks
that every count agrees with the visible card list.

Usage:
    # All categories, due today
    python -m scripts.diagnose_counts --user-id USER

    # One category, every active card
    python -m scripts.diagnose_counts --user-id USER --category "Amazon LP" --all-cards
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timezone
from typing import Optional

from flashcore import config, stable_counts
from flashcore.cards import ALL
from flashcore.filtering import AggregationResult, FilterConfig, aggregate
from flashcore.filtering.due_window import local_date
from flashcore.repos import card_repo, snapshot_repo
from flashcore.repos.mongo import close_client


def check_invariants(result: AggregationResult, selected_category: str = ALL) -> list[str]:
    """
    Return a description of every count that disagrees with the visible cards.
    """
    problems = []

    category_total = sum(result.category_counts.values())
    if category_total != result.total:
        problems.append(
            f"category counts sum to {category_total}, {result.total} cards visible"
        )

    for category, count in result.category_counts.items():
        prefix = f"{category}::"
        sub_total = sum(
            value for key, value in result.sub_category_counts_by_category.items()
            if key.startswith(prefix)
        )
        if sub_total != count:
            problems.append(
                f"subcategories of {category!r} sum to {sub_total}, category count is {count}"
            )

    if selected_category != ALL:
        sub_total = sum(result.sub_category_counts.values())
        expected = result.category_counts.get(selected_category, 0)
        if sub_total != expected:
            problems.append(
                f"subcategory counts sum to {sub_total}, {selected_category!r} has {expected}"
            )

    level_total = sum(result.level_counts.values())
    if level_total != result.total:
        problems.append(f"level counts sum to {level_total}, {result.total} cards visible")

    negative = [label for label, count in result.category_counts.items() if count < 0]
    if negative:
        problems.append(f"negative counts for {negative}")

    return problems


def print_counts(result: AggregationResult, snapshot: Optional[stable_counts.Snapshot]) -> None:
    """Print the aggregation (and stable remaining counts when available)."""
    print("=" * 80)
    print(f"VISIBLE CARDS: {result.total}")
    print("-" * 80)

    print("CATEGORIES:")
    for category in result.categories:
        line = f"  {category}: {result.category_counts.get(category, 0)}"
        if snapshot is not None:
            line += f" (stable remaining {stable_counts.remaining(snapshot, category)})"
        print(line)

    print("SUBCATEGORIES:")
    for sub_category in result.sub_categories:
        print(f"  {sub_category}: {result.sub_category_counts.get(sub_category, 0)}")

    print("LEVELS:")
    for level, count in result.level_counts.items():
        print(f"  {level.value}: {count}")


def diagnose(user_id: str, category: str = ALL, due_only: bool = True) -> int:
    """
    Print counts for a user and return the number of invariant violations.
    """
    now = datetime.now(timezone.utc).astimezone()
    cards = card_repo.load_cards(user_id)
    filter_config = FilterConfig(selected_category=category, show_due_today_only=due_only)

    result = aggregate(cards, filter_config, now)
    snapshot = snapshot_repo.load_snapshot(user_id, local_date(now))

    print(f"User: {user_id}  Date: {local_date(now)}  Cards loaded: {len(cards)}")
    if snapshot is None:
        print("No stable snapshot stored for today")
    print_counts(result, snapshot)

    problems = check_invariants(result, category)
    print("=" * 80)
    if problems:
        print(f"✗ {len(problems)} invariant violation(s):")
        for problem in problems:
            print(f"  - {problem}")
    else:
        print("✓ All counts consistent")
    return len(problems)


def main():
    parser = argparse.ArgumentParser(
        description="Print category/due counts and check their consistency"
    )
    parser.add_argument(
        "--user-id",
        default=config.get_default_user_id(),
        help="User whose cards to inspect (default: DEFAULT_USER_ID)"
    )
    parser.add_argument(
        "--category",
        default=ALL,
        help="Restrict to one category (default: All)"
    )
    parser.add_argument(
        "--all-cards",
        action="store_true",
        help="Count every active card instead of only cards due today"
    )

    args = parser.parse_args()

    try:
        violations = diagnose(args.user_id, category=args.category, due_only=not args.all_cards)
    finally:
        close_client()
    sys.exit(1 if violations else 0)


if __name__ == "__main__":
    main()
