"""
Text utilities for matching codes across the two catalogs.

Used for SKU / item code normalization and the yes/no CSV flags.
"""

from typing import Any, Optional


YES = "yes"
NO = "no"


def normalize_code(code: Optional[str]) -> str:
    """
    Normalize an item code or SKU for comparison.

    - " ABC-1 " → "abc-1"
    - "Sku1" → "sku1"
    - None → ""

    Args:
        code: Raw SKU or item code

    Returns:
        Trimmed lowercase string, empty for missing input
    """
    if not code:
        return ""
    return str(code).strip().lower()


def is_blank(value: Any) -> bool:
    """True for None, empty and whitespace-only values."""
    if value is None:
        return True
    return str(value).strip() == ""


def to_yes_no(flag: bool) -> str:
    return YES if flag else NO


def from_yes_no(value: Optional[str]) -> bool:
    """Parse a yes/no column; anything but 'yes' is False."""
    if not value:
        return False
    return value.strip().lower() == YES


def leading_token(message: Optional[str], default: str = "Unknown") -> str:
    """
    Text before the first colon, used to group error messages.

    - "404: Product not found" → "404"
    - "Maximum custom fields limit reached (50)" → unchanged
    """
    if not message:
        return default
    token = message.split(":", 1)[0].strip()
    return token or default
