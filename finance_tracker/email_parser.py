# finance_tracker/email_parser.py
import re
from dataclasses import dataclass

from finance_tracker.core.categorizer import categorize
from finance_tracker.utils import parse_amount

_AMOUNT = r"(\d[\d,]*\.\d{2})"
_MERCHANT = r"([^.\n]+)"

# Tried in order; the first match wins.
_PATTERNS = [
    re.compile(_AMOUNT + r"\s+at\s+" + _MERCHANT, re.I),
    re.compile(r"\$" + _AMOUNT + r"\s+.*?at\s+" + _MERCHANT, re.I),
    re.compile(r"charged\s+\$?" + _AMOUNT + r"\s+at\s+" + _MERCHANT, re.I),
]


@dataclass
class ParsedPayment:
    amount: float
    description: str
    category: str


def parse_email(content, category_keywords, default_category="flex"):
    """
    Pull a card charge out of a transaction alert email.

    Returns a ParsedPayment with a positive amount, or None when no
    pattern matches. The merchant is categorised by keyword, falling back
    to ``default_category``.
    """
    for pattern in _PATTERNS:
        match = pattern.search(content or "")
        if not match:
            continue
        merchant = match.group(2).strip()
        return ParsedPayment(
            amount=parse_amount(match.group(1)),
            description=merchant,
            category=categorize(merchant, category_keywords, default=default_category),
        )
    return None
