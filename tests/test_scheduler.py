import math
import random
from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from flashcore.errors import InvalidRatingError, InvalidTimestampError
from flashcore.fsrs import (
    DEFAULT_PARAMS,
    D_MAX,
    D_MIN,
    Level,
    Rating,
    build_params,
    calculate_retrievability,
    infer_level,
    interval_for_retention,
    process_review,
    schedule,
)

PASSING = (Rating.HARD, Rating.GOOD, Rating.EASY)


def _reviewed_card(make_card, now, **overrides):
    days_ago = overrides.pop("days_ago", 3)
    defaults = dict(
        difficulty=5.0,
        stability=2.0,
        interval=1,
        ease_factor=2.5,
        repetitions=2,
        review_count=3,
        last_reviewed=now - timedelta(days=days_ago),
        due_date=now - timedelta(days=days_ago - 1),
    )
    defaults.update(overrides)
    return make_card(**defaults)


# ---- Memory state ----

def test_retrievability_is_ninety_percent_after_stability_days():
    assert calculate_retrievability(7.0, 7.0) == pytest.approx(0.9)
    assert calculate_retrievability(7.0, 0.0) == 1.0


def test_interval_for_default_retention_equals_stability():
    assert interval_for_retention(12.5, 0.9) == pytest.approx(12.5)
    assert interval_for_retention(12.5, 0.8) > 12.5


# ---- Difficulty ----

@pytest.mark.parametrize("rating, expected", [
    (Rating.AGAIN, 5.0 + 2 * 0.5 * 0.86),
    (Rating.HARD, 5.0 + 0.5 * 0.94),
    (Rating.GOOD, 5.0 - 0.3 * 0.86),
    (Rating.EASY, 5.0 - (0.86 + 0.01)),
])
def test_difficulty_deltas(make_card, now, rating, expected):
    card = _reviewed_card(make_card, now)
    assert schedule(card, rating, now).difficulty == pytest.approx(expected)


# ---- Monotonicity ----

def test_new_card_uses_initial_intervals(make_card, now):
    params = build_params({"fuzzFactor": 0})
    card = make_card(created_at=now - timedelta(days=1))

    intervals = {rating: schedule(card, rating, now, params=params).interval for rating in Rating}

    assert intervals == {Rating.AGAIN: 1, Rating.HARD: 1, Rating.GOOD: 4, Rating.EASY: 15}


@pytest.mark.parametrize("stability", [0.1, 0.5, 2.0, 15.0, 120.0, 3000.0])
@pytest.mark.parametrize("difficulty", [1.0, 4.2, 7.5, 10.0])
@pytest.mark.parametrize("days_ago", [0, 1, 9, 400])
def test_intervals_are_ordered_easy_good_hard(make_card, now, stability, difficulty, days_ago):
    card = _reviewed_card(
        make_card, now, stability=stability, difficulty=difficulty, days_ago=days_ago
    )

    hard, good, easy = (schedule(card, rating, now).interval for rating in PASSING)
    again = schedule(card, Rating.AGAIN, now).interval

    assert easy >= good >= hard >= 1
    assert again == DEFAULT_PARAMS.initial_again_interval


def test_ordering_holds_with_a_shared_rng_seed(make_card, now):
    card = _reviewed_card(make_card, now, stability=40.0, days_ago=30)
    for seed in range(25):
        hard, good, easy = (
            schedule(card, rating, now, rng=random.Random(seed)).interval for rating in PASSING
        )
        assert easy >= good >= hard


def test_default_fuzz_is_reproducible(make_card, now):
    card = _reviewed_card(make_card, now, stability=30.0, days_ago=20)
    assert schedule(card, Rating.GOOD, now) == schedule(card, Rating.GOOD, now)


# ---- Bounds ----

@pytest.mark.parametrize("rating", list(Rating))
def test_state_stays_within_bounds(make_card, now, rating):
    params = build_params({"maximumInterval": 100})
    cards = [
        _reviewed_card(make_card, now, difficulty=10.0, stability=0.1, days_ago=0),
        _reviewed_card(make_card, now, difficulty=1.0, stability=99.0, days_ago=5000),
        _reviewed_card(make_card, now, difficulty=float("nan"), stability=float("inf")),
    ]
    for card in cards:
        updated = schedule(card, rating, now, params=params)
        assert D_MIN <= updated.difficulty <= D_MAX
        assert 0.1 <= updated.stability <= params.maximum_interval
        assert 1 <= updated.interval <= params.maximum_interval
        assert updated.ease_factor >= 1.3
        assert not math.isnan(updated.difficulty)


def test_ease_factor_changes(make_card, now):
    card = _reviewed_card(make_card, now, ease_factor=1.35)
    assert schedule(card, Rating.EASY, now).ease_factor == pytest.approx(1.5)
    assert schedule(card, Rating.GOOD, now).ease_factor == pytest.approx(1.35)
    assert schedule(card, Rating.AGAIN, now).ease_factor == pytest.approx(1.3)


# ---- Again resets ----

def test_again_resets_stability_and_interval(make_card, now):
    card = _reviewed_card(make_card, now, difficulty=5.0, stability=2.0, interval=1, ease_factor=2.5)

    updated = schedule(card, "again", now)

    assert updated.stability == DEFAULT_PARAMS.initial_stability
    assert updated.interval == DEFAULT_PARAMS.initial_again_interval
    assert updated.repetitions == card.repetitions
    assert updated.review_count == card.review_count + 1
    assert updated.due_date == now + timedelta(days=1)
    assert updated.last_reviewed == now


def test_success_increments_repetitions(make_card, now):
    card = _reviewed_card(make_card, now)
    updated = schedule(card, Rating.GOOD, now)
    assert updated.repetitions == card.repetitions + 1
    assert updated.due_date == now + timedelta(days=updated.interval)


def test_input_card_is_not_modified(make_card, now):
    card = _reviewed_card(make_card, now, level=Level.HARD)
    before = replace(card)

    schedule(card, Rating.EASY, now)

    assert card == before


def test_level_is_cleared_unless_recorded(make_card, now):
    card = _reviewed_card(make_card, now, level=Level.HARD)
    assert schedule(card, Rating.EASY, now).level is None
    assert schedule(card, Rating.EASY, now, record_level=True).level == Level.EASY


# ---- Validation ----

@pytest.mark.parametrize("rating", ["GOOD", "ok", 3, None, ""])
def test_invalid_rating_is_rejected(make_card, now, rating):
    with pytest.raises(InvalidRatingError):
        schedule(make_card(), rating, now)


@pytest.mark.parametrize("value", [None, "2024-06-15", 1718452800])
def test_invalid_timestamp_is_rejected(make_card, value):
    with pytest.raises(InvalidTimestampError):
        schedule(make_card(), Rating.GOOD, value)


def test_invalid_rating_is_a_value_error(make_card, now):
    with pytest.raises(ValueError):
        schedule(make_card(), "perfect", now)


def test_naive_timestamp_is_accepted(make_card):
    updated = schedule(make_card(), Rating.GOOD, datetime(2024, 6, 15, 9, 30))
    assert updated.last_reviewed.tzinfo is not None


# ---- Review log ----

def test_process_review_returns_log(make_card, now):
    card = _reviewed_card(make_card, now, category="AWS", sub_category=None, days_ago=4)

    updated, log = process_review(card, Rating.HARD, now)

    assert log.card_id == card.id
    assert log.rating == Rating.HARD
    assert log.reviewed_at == now
    assert log.elapsed_days == pytest.approx(4.0)
    assert log.scheduled_days == updated.interval
    assert log.difficulty_before == card.difficulty
    assert log.stability_after == updated.stability
    assert log.category == "AWS"
    assert log.sub_category == "Uncategorized"


# ---- Level inference ----

@pytest.mark.parametrize("fields, expected", [
    (dict(difficulty=8.0), Level.AGAIN),
    (dict(difficulty=9.5, interval=30), Level.AGAIN),
    (dict(difficulty=7.0), Level.HARD),
    (dict(difficulty=3.0, ease_factor=2.8), Level.EASY),
    (dict(difficulty=3.0, ease_factor=2.7, interval=4), Level.GOOD),
    (dict(difficulty=5.0, interval=4), Level.GOOD),
    (dict(difficulty=5.0, interval=3), Level.NEW),
    (dict(), Level.NEW),
    (dict(difficulty=9.0, level=Level.EASY), Level.EASY),
])
def test_infer_level(make_card, fields, expected):
    assert infer_level(make_card(**fields)) == expected


def test_extreme_weights_clamp_instead_of_overflowing(make_card, now):
    w = list(DEFAULT_PARAMS.w)
    w[8] = 100.0
    w[9] = -100.0
    params = build_params({"w": w, "fuzzFactor": 0})
    card = _reviewed_card(make_card, now, stability=3000.0, days_ago=400)

    for rating in PASSING:
        updated = schedule(card, rating, now, params=params)
        assert updated.stability == params.maximum_interval
        assert updated.interval == params.maximum_interval


def test_tiny_retention_target_clamps_interval(make_card, now):
    params = build_params({"requestRetention": 1e-200})
    card = _reviewed_card(make_card, now, stability=50.0, days_ago=10)

    updated = schedule(card, Rating.GOOD, now, params=params)

    assert updated.interval == params.maximum_interval
