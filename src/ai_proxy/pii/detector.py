"""
Sensitive-data detection for QA logs.

A simple pattern-match classifier: a QA log is flagged when its prompt or
response looks like it carries identifiers, card numbers, contact data or
secrets. It flags, it never redacts; stored text is left as the user sent it.
"""

import re

import structlog


logger = structlog.get_logger(__name__)


SENSITIVE_PATTERNS: dict[str, re.Pattern[str]] = {
    "SSN": re.compile(r"\b\d{3}-\d{2}-\d{4}\b"),
    "CARD_NUMBER": re.compile(r"\b\d{13,16}\b"),
    "EMAIL": re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.IGNORECASE),
    # Korean: password, token
    "SECRET_KEYWORD": re.compile(r"비밀번호|password|secret|토큰|token", re.IGNORECASE),
    # Korean: resident registration number, employee number, bank account
    "KR_IDENTIFIER": re.compile(r"주민등록|사번|계좌"),
}


def find_sensitive_categories(text: str) -> list[str]:
    """
    Return the names of every sensitive pattern found in text.

    Examples:
        >>> find_sensitive_categories("mail me at a@b.io")
        ['EMAIL']
        >>> find_sensitive_categories("hello")
        []
    """
    if not text:
        return []
    return [name for name, pattern in SENSITIVE_PATTERNS.items() if pattern.search(text)]


def contains_sensitive_data(text: str) -> bool:
    """True when text matches any sensitive pattern."""
    categories = find_sensitive_categories(text)
    if categories:
        logger.debug("Sensitive data detected", categories=categories)
    return bool(categories)
