# finance_tracker/utils.py
import math
import random
import re
import string
import time
from calendar import monthrange
from datetime import date, datetime, timezone

_ID_ALPHABET = string.ascii_lowercase + string.digits
# Timestamp formats cover interpreters whose fromisoformat only takes its own output.
_DATE_FORMATS = (
    '%m/%d/%Y',
    '%Y/%m/%d',
    '%Y-%m-%dT%H:%M:%S%z',
    '%Y-%m-%dT%H:%M:%S.%f%z',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%dT%H:%M:%S.%f',
)
_WHITESPACE = re.compile(r"\s+")


def parse_amount(value):
    """
    Coerce a cell or user value to a float. Missing, non-numeric and
    non-finite values become 0.0 instead of raising.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        cleaned = str(value).replace("$", "").replace(",", "").strip()
        try:
            amount = float(cleaned)
        except ValueError:
            return 0.0
    return amount if math.isfinite(amount) else 0.0


def parse_date(value):
    """Return a date for ISO or US-style input, or None if it can't be read."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    text = str(value).strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def normalize_header(name):
    return _WHITESPACE.sub("_", str(name).strip().lower())


def days_in_month(day):
    return monthrange(day.year, day.month)[1]


def generate_id():
    millis = int(time.time() * 1000)
    suffix = ''.join(random.choices(_ID_ALPHABET, k=9))
    return f"tx_{millis}_{suffix}"


def utc_timestamp():
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace("+00:00", "Z")


def format_currency(amount):
    value = parse_amount(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"
