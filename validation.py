"""Booking field rules.

Checks run in a fixed order and the first failure wins, mirroring the
booking form: identity, email, date, party size.
"""
import math
import re
from datetime import date, datetime
from typing import Any, Optional

from errors import InvalidDate, InvalidEmail, InvalidIdentity, InvalidPartySize
from models import Booking
from schemas import BookingCreate

BOOKABLE_YEAR = 2026
MIN_PEOPLE = 1
MAX_PEOPLE = 7

PERSONNUMMER_RE = re.compile(r"[0-9]{4}")
EMAIL_RE = re.compile(r"\S+@\S+\.\S+")


def check_personnummer(value: Any) -> str:
    if value is None or isinstance(value, bool):
        raise InvalidIdentity()
    text = str(value)
    if not PERSONNUMMER_RE.fullmatch(text):
        raise InvalidIdentity()
    return text


def check_email(value: Any) -> str:
    if not isinstance(value, str) or not EMAIL_RE.fullmatch(value):
        raise InvalidEmail()
    return value


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO date (or datetime) string, returning None when invalid."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def check_date(value: Any) -> date:
    parsed = parse_date(value)
    if parsed is None or parsed.year != BOOKABLE_YEAR:
        raise InvalidDate()
    return parsed


def coerce_people(value: Any) -> Optional[int]:
    """Turn a party size into an int, or None if it is not a whole number.

    Strings are accepted since HTML forms submit every field as text.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        return int(value)
    return None


def check_people(value: Any) -> int:
    people = coerce_people(value)
    if people is None or not MIN_PEOPLE <= people <= MAX_PEOPLE:
        raise InvalidPartySize()
    return people


def validate_booking(data: BookingCreate) -> Booking:
    """Validate a raw booking request and build the row to insert.

    Raises the first BookingValidationError encountered. Names and
    destination are passed through untouched.
    """
    personnummer = check_personnummer(data.personnummer)
    email = check_email(data.email)
    travel_date = check_date(data.date)
    people = check_people(data.people)

    return Booking(
        first_name=data.firstName or "",
        last_name=data.lastName or "",
        personnummer=personnummer,
        destination=data.destination or "",
        travel_date=travel_date,
        people=people,
        email=email,
    )
