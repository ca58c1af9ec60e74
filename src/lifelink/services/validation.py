"""
Eligibility rules for medical donor submissions.

Money submissions and every receiver submission are accepted as sent;
only blood and organ donors go through these checks.
"""
import math
import re
from datetime import datetime, timezone

from lifelink.core.errors import BadRequestError

PHONE_PATTERN = re.compile(r"^\d{10}$")

MIN_DONOR_AGE = 18
MAX_DONOR_AGE = 65
MIN_DONOR_WEIGHT_KG = 50
DONATION_COOLDOWN_DAYS = 90

SECONDS_PER_DAY = 24 * 60 * 60


def is_valid_phone(phone) -> bool:
    return isinstance(phone, str) and PHONE_PATTERN.fullmatch(phone) is not None


def require_fields(*values) -> None:
    # empty strings and zero count as missing
    if not all(values):
        raise BadRequestError("Missing required fields")


def check_phone(phone) -> None:
    if not is_valid_phone(phone):
        raise BadRequestError("Invalid phone number format")


def _as_number(value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return math.nan
    return number


def check_age(age) -> float:
    number = _as_number(age)
    if math.isnan(number) or number < MIN_DONOR_AGE or number > MAX_DONOR_AGE:
        raise BadRequestError(f"Age must be between {MIN_DONOR_AGE} and {MAX_DONOR_AGE}")
    return number


def check_weight(weight) -> float:
    number = _as_number(weight)
    if math.isnan(number) or number < MIN_DONOR_WEIGHT_KG:
        raise BadRequestError(f"Weight must be at least {MIN_DONOR_WEIGHT_KG} kg")
    return number


def parse_date(value: str) -> datetime:
    """Parse an ISO-8601 date or datetime; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(str(value).strip())
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        raise BadRequestError("Invalid last donation date") from None


def days_since(moment: datetime, now: datetime) -> int:
    return math.floor((now - moment).total_seconds() / SECONDS_PER_DAY)


def check_cooldown(has_donated_before: bool, last_donation_date, now: datetime) -> datetime | None:
    """
    Enforce the gap between donations.

    Returns the parsed last donation date, or None for first-time donors.
    """
    if not has_donated_before:
        return None
    if not last_donation_date:
        raise BadRequestError("Last donation date is required for previous donors")

    last_date = parse_date(last_donation_date)
    if days_since(last_date, now) < DONATION_COOLDOWN_DAYS:
        raise BadRequestError(
            f"At least {DONATION_COOLDOWN_DAYS} days must have passed since the last donation"
        )
    return last_date
