"""Domain helpers for user attributes (gender, format rules, age cut-off)."""
from __future__ import annotations

import calendar
import enum
import re
from datetime import date

LOGIN_PATTERN = re.compile(r"[A-Za-z0-9]{1,50}")
NAME_PATTERN = re.compile(r"[A-Za-zА-Яа-яЁё]{1,100}")
# lower, upper, digit and special character, at least 8 long
STRONG_PASSWORD_PATTERN = re.compile(
    r"(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,100}"
)


class Gender(str, enum.Enum):
    FEMALE = "female"
    MALE = "male"
    UNSPECIFIED = "unspecified"


def is_valid_login(value: str | None) -> bool:
    """Return True when login contains only latin letters and digits."""
    if not value:
        return False
    return bool(LOGIN_PATTERN.fullmatch(value))


def is_valid_name(value: str | None) -> bool:
    if not value:
        return False
    return bool(NAME_PATTERN.fullmatch(value))


def is_strong_password(value: str | None) -> bool:
    if not value:
        return False
    return bool(STRONG_PASSWORD_PATTERN.fullmatch(value))


def birthday_cutoff(age: int, today: date | None = None) -> date | None:
    """
    Latest birthday a person may have to be at least ``age`` years old today.

    A Feb 29 anniversary in a non-leap year falls back to Feb 28. Returns None
    when the cut-off would precede the first representable year.
    """
    today = today or date.today()
    year = today.year - age
    if year < date.min.year:
        return None
    if (today.month, today.day) == (2, 29) and not calendar.isleap(year):
        return today.replace(year=year, day=28)
    return today.replace(year=year)

