"""
Scoring service - prospect priority scoring.

The score starts at BASE_SCORE and adds one independent term per attribute.
Each term only looks at its own field and returns 0 when the field is missing
or unusable, so scoring never fails. The sum is rounded and clamped to
[0, 100] once, at the end.
"""
import math
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from estate_crm.core.clock import Clock, as_utc, system_clock
from estate_crm.models.prospect import ProspectStatus, Timeline, LeadSource

BASE_SCORE = 30
MIN_SCORE = 0
MAX_SCORE = 100

STATUS_POINTS: Dict[ProspectStatus, int] = {
    ProspectStatus.MANDATE_SIGNED: 40,
    ProspectStatus.WON: 40,
    ProspectStatus.MANDATE_PENDING: 30,
    ProspectStatus.MEETING_SCHEDULED: 30,
    ProspectStatus.QUALIFIED: 20,
    ProspectStatus.CONTACTED: 20,
    ProspectStatus.NEW: 10,
}
DEFAULT_STATUS_POINTS = 5

HOT_LEAD_POINTS = 25
EXCLUSIVE_POINTS = 15
CONSENT_POINTS = 5

# (threshold, points), highest first; value must be strictly greater
VALUE_THRESHOLDS: Tuple[Tuple[int, int], ...] = (
    (800_000, 20),
    (500_000, 15),
    (300_000, 10),
    (100_000, 5),
)

TIMELINE_POINTS: Dict[Timeline, int] = {
    Timeline.URGENT: 15,
    Timeline.ONE_MONTH: 15,
    Timeline.UNDER_THREE_MONTHS: 15,
    Timeline.TWO_MONTHS: 10,
    Timeline.THREE_MONTHS: 10,
    Timeline.SIX_MONTHS: 5,
}

SOURCE_POINTS: Dict[LeadSource, int] = {
    LeadSource.REFERRAL: 15,
    LeadSource.WEBSITE: 10,
    LeadSource.GOOGLE_ADS: 8,
    LeadSource.FACEBOOK_ADS: 8,
    LeadSource.DOOR_TO_DOOR: 12,
    LeadSource.CLASSIFIEDS: 5,
}

# (rate, points), highest first; rate must be greater or equal
COMMISSION_THRESHOLDS: Tuple[Tuple[float, int], ...] = (
    (0.05, 10),
    (0.04, 7),
    (0.03, 5),
)


# --- Field access ---------------------------------------------------------

def _field(prospect: Any, name: str) -> Any:
    if isinstance(prospect, Mapping):
        return prospect.get(name)
    return getattr(prospect, name, None)


def _choice(value: Any) -> Optional[str]:
    if isinstance(value, Enum):
        value = value.value
    return value if isinstance(value, str) else None


def _flag(value: Any) -> bool:
    # Only real booleans (or 0/1) count; strings like "false" are ignored
    return isinstance(value, (bool, int)) and bool(value)


def _number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    try:
        return as_utc(value)
    except (OverflowError, ValueError):
        return None


# --- Terms ----------------------------------------------------------------

def status_points(prospect: Any, now: datetime) -> int:
    """Pipeline stage; unknown or missing stages get the default."""
    return STATUS_POINTS.get(_choice(_field(prospect, "status")), DEFAULT_STATUS_POINTS)


def hot_lead_points(prospect: Any, now: datetime) -> int:
    return HOT_LEAD_POINTS if _flag(_field(prospect, "is_hot_lead")) else 0


def exclusive_points(prospect: Any, now: datetime) -> int:
    return EXCLUSIVE_POINTS if _flag(_field(prospect, "exclusive")) else 0


def value_points(prospect: Any, now: datetime) -> int:
    """Budget, or the estimated price when no budget is set."""
    value = _number(_field(prospect, "budget")) or _number(_field(prospect, "estimated_price")) or 0
    for threshold, points in VALUE_THRESHOLDS:
        if value > threshold:
            return points
    return 0


def timeline_points(prospect: Any, now: datetime) -> int:
    return TIMELINE_POINTS.get(_choice(_field(prospect, "timeline")), 0)


def days_since(moment: datetime, now: datetime) -> int:
    """Whole days elapsed, floored; negative for future moments."""
    return (as_utc(now) - as_utc(moment)) // timedelta(days=1)


def recency_points(prospect: Any, now: datetime) -> int:
    """Recent contact earns points; a contact older than 30 days costs 10."""
    last_contact = _timestamp(_field(prospect, "last_contact_at"))
    if last_contact is None:
        return 0
    try:
        days = days_since(last_contact, now)
    except OverflowError:
        return 0
    if days <= 1:
        return 10
    if days <= 3:
        return 7
    if days <= 7:
        return 5
    if days > 30:
        return -10
    return 0


def source_points(prospect: Any, now: datetime) -> int:
    return SOURCE_POINTS.get(_choice(_field(prospect, "source")), 0)


def consent_points(prospect: Any, now: datetime) -> int:
    return CONSENT_POINTS if _flag(_field(prospect, "consent_given")) else 0


def commission_points(prospect: Any, now: datetime) -> int:
    rate = _number(_field(prospect, "commission_rate"))
    if not rate:
        return 0
    for threshold, points in COMMISSION_THRESHOLDS:
        if rate >= threshold:
            return points
    return 0


ScoringTerm = Callable[[Any, datetime], int]

SCORING_TERMS: Tuple[Tuple[str, ScoringTerm], ...] = (
    ("status", status_points),
    ("hot_lead", hot_lead_points),
    ("exclusive", exclusive_points),
    ("value", value_points),
    ("timeline", timeline_points),
    ("recency", recency_points),
    ("source", source_points),
    ("consent", consent_points),
    ("commission", commission_points),
)


# --- Entry points ---------------------------------------------------------

def _resolve_now(now: Optional[datetime], clock: Optional[Clock]) -> datetime:
    if now is None:
        now = (clock or system_clock).now()
    return as_utc(now)


def score_breakdown(
    prospect: Any,
    now: Optional[datetime] = None,
    clock: Optional[Clock] = None
) -> Dict[str, int]:
    """
    Points contributed by each term, before clamping.

    Keys are "base" followed by the names in SCORING_TERMS.
    """
    now = _resolve_now(now, clock)
    breakdown = {"base": BASE_SCORE}
    for name, term in SCORING_TERMS:
        breakdown[name] = term(prospect, now)
    return breakdown


def clamp_score(total: float) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, round(total)))


def calculate_score(
    prospect: Any,
    now: Optional[datetime] = None,
    clock: Optional[Clock] = None
) -> int:
    """
    Priority score in [0, 100] for a prospect.

    Args:
        prospect: Prospect model, any object with the same attribute names,
            or a mapping. Missing fields contribute nothing.
        now: Instant to measure contact recency against.
        clock: Used when `now` is not given; defaults to the system clock.
    """
    return clamp_score(sum(score_breakdown(prospect, now, clock).values()))
