"""Field-level format predicates.

Each predicate treats ``None`` as "not applicable" and returns True; deciding
whether a missing value is itself an error belongs to the caller.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterable

from agenda.common.constants import BIRTH_DATE_FORMAT
from agenda.common.time_utils import local_today
from agenda.validation.checksum import only_digits

EMAIL_RE = re.compile(r"^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+$")
ADDRESS_RE = re.compile(r".+,\s*\d+\s*-\s*.+")

PHONE_LENGTH = 11
POSTAL_CODE_LENGTH = 8
NAME_MIN_LENGTH = 3


def is_valid_email(value: str | None, blocked_domains: Iterable[str] = ()) -> bool:
    if value is None:
        return True
    if not EMAIL_RE.match(value):
        return False
    domain = value.split("@", 1)[1].lower()
    return domain not in {blocked.lower() for blocked in blocked_domains}


def is_valid_phone(value: str | None, region_codes: Iterable[str]) -> bool:
    if value is None:
        return True
    digits = only_digits(value)
    return len(digits) == PHONE_LENGTH and digits[:2] in set(region_codes)


def is_valid_birth_date(
    value: str | date | None,
    date_format: str = BIRTH_DATE_FORMAT,
    today: date | None = None,
) -> bool:
    if value is None:
        return True
    if isinstance(value, datetime):
        parsed = value.date()
    elif isinstance(value, date):
        parsed = value
    else:
        try:
            parsed = datetime.strptime(value.strip(), date_format).date()
        except (ValueError, AttributeError):
            return False
    return parsed <= (today or local_today())


def is_valid_postal_code(value: str | None) -> bool:
    """Format check only; whether the CEP exists is the geocoder's concern."""
    if value is None:
        return True
    digits = only_digits(value)
    # 00000-000 and similar repeated sequences are never assigned.
    return len(digits) == POSTAL_CODE_LENGTH and len(set(digits)) > 1


def is_valid_address(value: str | None) -> bool:
    if value is None:
        return True
    return bool(value) and ADDRESS_RE.fullmatch(value) is not None


def is_valid_name(value: str | None) -> bool:
    if value is None:
        return True
    if len(value.strip()) < NAME_MIN_LENGTH:
        return False
    return all(char.isalpha() or char.isspace() for char in value)
