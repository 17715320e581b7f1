"""
Tests for `services/scoring_service.py`.

Covers:
- Base score and the default status bucket.
- Each term's buckets and thresholds in isolation.
- Clamping to [0, 100], determinism under a fixed clock.
- Missing and malformed fields contribute nothing.
"""
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from estate_crm.models.prospect import Prospect
from estate_crm.schemas.scoring import ScorePreviewRequest
from estate_crm.services.scoring_service import (
    BASE_SCORE, SCORING_TERMS, calculate_score, clamp_score, commission_points,
    recency_points, score_breakdown, source_points, status_points, timeline_points,
    value_points, days_since
)

from conftest import NOW


def test_empty_prospect_scores_base_plus_default_status() -> None:
    assert calculate_score({}, now=NOW) == 35


def test_unmapped_status_gets_default() -> None:
    assert calculate_score({"status": "archived"}, now=NOW) == 35


def test_new_model_defaults() -> None:
    # status "new" (+10) and the default 4% commission (+7)
    assert calculate_score(Prospect(), now=NOW) == BASE_SCORE + 10 + 7


def test_everything_maxed_saturates_at_100() -> None:
    prospect = {
        "status": "won",
        "is_hot_lead": True,
        "exclusive": True,
        "budget": 900_000,
        "timeline": "urgent",
        "last_contact_at": NOW,
        "source": "referral",
        "consent_given": True,
        "commission_rate": 0.06,
    }
    breakdown = score_breakdown(prospect, now=NOW)
    assert breakdown == {
        "base": 30, "status": 40, "hot_lead": 25, "exclusive": 15, "value": 20,
        "timeline": 15, "recency": 10, "source": 15, "consent": 5, "commission": 10,
    }
    assert sum(breakdown.values()) == 185
    assert calculate_score(prospect, now=NOW) == 100


def test_breakdown_keys_follow_term_order() -> None:
    assert list(score_breakdown({}, now=NOW)) == ["base"] + [name for name, _ in SCORING_TERMS]


@pytest.mark.parametrize("status,points", [
    ("mandate_signed", 40),
    ("won", 40),
    ("mandate_pending", 30),
    ("meeting_scheduled", 30),
    ("qualified", 20),
    ("contacted", 20),
    ("new", 10),
    ("lost", 5),
    ("no_answer", 5),
    (None, 5),
])
def test_status_buckets(status, points) -> None:
    assert status_points({"status": status}, NOW) == points


@pytest.mark.parametrize("fields,points", [
    ({"budget": 900_000}, 20),
    ({"budget": 800_001}, 20),
    ({"budget": 800_000}, 15),
    ({"budget": 500_000}, 10),
    ({"budget": 300_000}, 5),
    ({"budget": 100_000}, 0),
    ({"budget": 0, "estimated_price": 600_000}, 15),
    ({"estimated_price": 350_000}, 10),
    ({"budget": 150_000, "estimated_price": 900_000}, 5),
    ({"budget": "a lot", "estimated_price": 250_000}, 5),
    ({"budget": -50_000}, 0),
    ({}, 0),
])
def test_value_thresholds(fields, points) -> None:
    assert value_points(fields, NOW) == points


@pytest.mark.parametrize("timeline,points", [
    ("urgent", 15),
    ("1_month", 15),
    ("under_3_months", 15),
    ("2_months", 10),
    ("3_months", 10),
    ("6_months", 5),
    ("over_6_months", 0),
    ("someday", 0),
    (None, 0),
])
def test_timeline_buckets(timeline, points) -> None:
    assert timeline_points({"timeline": timeline}, NOW) == points


@pytest.mark.parametrize("elapsed,points", [
    (timedelta(0), 10),
    (timedelta(days=1, hours=23), 10),
    (timedelta(days=2), 7),
    (timedelta(days=3, hours=12), 7),
    (timedelta(days=4), 5),
    (timedelta(days=7), 5),
    (timedelta(days=8), 0),
    (timedelta(days=30, hours=23), 0),
    (timedelta(days=31), -10),
    (timedelta(days=-3), 10),
])
def test_recency_buckets(elapsed, points) -> None:
    assert recency_points({"last_contact_at": NOW - elapsed}, NOW) == points


def test_recency_without_contact_is_zero() -> None:
    assert recency_points({}, NOW) == 0
    assert recency_points({"last_contact_at": None}, NOW) == 0


def test_recency_accepts_naive_and_iso_timestamps() -> None:
    naive = (NOW - timedelta(days=5)).replace(tzinfo=None)
    assert recency_points({"last_contact_at": naive}, NOW) == 5
    assert recency_points({"last_contact_at": "2025-06-13T12:00:00Z"}, NOW) == 7
    assert recency_points({"last_contact_at": "last tuesday"}, NOW) == 0


def test_days_since_floors_to_whole_days() -> None:
    assert days_since(NOW - timedelta(hours=47), NOW) == 1
    assert days_since(NOW - timedelta(hours=48), NOW) == 2
    assert days_since(NOW + timedelta(hours=1), NOW) == -1


@pytest.mark.parametrize("source,points", [
    ("referral", 15),
    ("website", 10),
    ("google_ads", 8),
    ("facebook_ads", 8),
    ("door_to_door", 12),
    ("classifieds", 5),
    ("other", 0),
    ("newspaper", 0),
    (None, 0),
])
def test_source_buckets(source, points) -> None:
    assert source_points({"source": source}, NOW) == points


@pytest.mark.parametrize("rate,points", [
    (0.06, 10),
    (0.05, 10),
    (0.049, 7),
    (0.04, 7),
    (0.035, 5),
    (0.03, 5),
    (0.029, 0),
    (0, 0),
    (None, 0),
    ("five percent", 0),
])
def test_commission_thresholds(rate, points) -> None:
    assert commission_points({"commission_rate": rate}, NOW) == points


@pytest.mark.parametrize("base", [
    {},
    {"status": "qualified", "source": "website"},
    {"status": "won", "exclusive": True, "budget": 900_000},
])
def test_hot_lead_adds_exactly_25_before_clamping(base) -> None:
    cold = sum(score_breakdown({**base, "is_hot_lead": False}, now=NOW).values())
    hot = sum(score_breakdown({**base, "is_hot_lead": True}, now=NOW).values())
    assert hot - cold == 25
    if cold <= 75:
        assert calculate_score({**base, "is_hot_lead": True}, now=NOW) == cold + 25


def test_flags() -> None:
    assert calculate_score({"exclusive": True}, now=NOW) == 35 + 15
    assert calculate_score({"consent_given": True}, now=NOW) == 35 + 5


def test_malformed_fields_contribute_nothing() -> None:
    prospect = {
        "status": 42,
        "is_hot_lead": "yes",
        "exclusive": "false",
        "budget": "lots",
        "estimated_price": float("nan"),
        "timeline": ["urgent"],
        "last_contact_at": "yesterday",
        "source": {"name": "referral"},
        "consent_given": "true",
        "commission_rate": "high",
    }
    assert calculate_score(prospect, now=NOW) == 35


@pytest.mark.parametrize("field", ["budget", "estimated_price", "commission_rate"])
@pytest.mark.parametrize("value", [10 ** 400, float("inf"), float("-inf"), "1e999"])
def test_out_of_range_numbers_contribute_nothing(field, value) -> None:
    assert calculate_score({field: value}, now=NOW) == 35


@pytest.mark.parametrize("moment", [
    datetime(1, 1, 1, tzinfo=timezone(timedelta(hours=5))),
    datetime.max.replace(tzinfo=timezone(timedelta(hours=-5))),
    "0001-01-01T00:00:00+05:00",
    "9999-12-31T23:59:59-05:00",
])
def test_out_of_range_contact_dates_contribute_nothing(moment) -> None:
    assert recency_points({"last_contact_at": moment}, NOW) == 0
    assert calculate_score({"last_contact_at": moment}, now=NOW) == 35


def test_extreme_but_valid_contact_dates() -> None:
    assert recency_points({"last_contact_at": datetime.min}, NOW) == -10
    assert recency_points({"last_contact_at": datetime.max}, NOW) == 10


def test_clamp_score() -> None:
    assert clamp_score(-12) == 0
    assert clamp_score(185) == 100
    assert clamp_score(62.4) == 62
    assert clamp_score(62.6) == 63


def test_lowest_reachable_score_stays_in_range() -> None:
    prospect = {"status": "lost", "last_contact_at": NOW - timedelta(days=90)}
    assert calculate_score(prospect, now=NOW) == 25


def test_deterministic_under_fixed_clock(clock) -> None:
    prospect = {"status": "contacted", "last_contact_at": NOW - timedelta(days=2)}
    first = calculate_score(prospect, clock=clock)
    second = calculate_score(prospect, clock=clock)
    assert first == second == 30 + 20 + 7

    clock.advance(days=40)
    assert calculate_score(prospect, clock=clock) == 30 + 20 - 10


def test_accepts_objects_and_schemas() -> None:
    obj = SimpleNamespace(status="meeting_scheduled", source="door_to_door")
    request = ScorePreviewRequest(status="meeting_scheduled", source="door_to_door")
    assert calculate_score(obj, now=NOW) == calculate_score(request, now=NOW) == 30 + 30 + 12
