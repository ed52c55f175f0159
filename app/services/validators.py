import re
from typing import Optional

EMAIL_SHAPE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def is_valid_email(email: str) -> bool:
    """
    Loose address check used by the recipient picker: something@something.tld,
    no whitespace and a single '@' on each side. The share endpoint does not
    apply it.
    """
    return bool(EMAIL_SHAPE.match(email))
