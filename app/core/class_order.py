"""
Class label ordering and validation.

Grades run PreKG, LKG, UKG, then 1..12. Every class-bearing listing is sorted
by ``class_order`` after its SQL-level ordering, so the final order is grade
order rather than alphabetical.
"""
import re
from typing import Callable, Iterable, List, Optional, TypeVar

from app.core.exceptions import ValidationError

T = TypeVar("T")

UNRECOGNIZED_ORDER = 999
MAX_NUMERIC_CLASS = 12

_NAMED_ORDER = {"prekg": 0, "lkg": 1, "ukg": 2}
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

INVALID_CLASS_MESSAGE = "Class cannot be above 12. Allowed: PreKG, LKG, UKG and 1 to 12."


def _leading_int(value: str) -> Optional[int]:
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def class_order(name: Optional[str]) -> int:
    """Sort key for a class label: PreKG=0, LKG=1, UKG=2, N=3+N, anything else 999."""
    if not name:
        return UNRECOGNIZED_ORDER
    label = str(name).strip()
    named = _NAMED_ORDER.get(label.lower())
    if named is not None:
        return named
    number = _leading_int(label)
    if number is not None and 1 <= number <= MAX_NUMERIC_CLASS:
        return 3 + number
    return UNRECOGNIZED_ORDER


def sort_by_class(items: Iterable[T], key: Callable[[T], Optional[str]]) -> List[T]:
    """Stable sort of ``items`` by the class label returned by ``key``."""
    return sorted(items, key=lambda item: class_order(key(item)))


def validate_class_name(name: Optional[str]) -> None:
    """Reject numeral class names above 12. Empty names are left to required-field checks."""
    if not name or not str(name).strip():
        return
    number = _leading_int(str(name).strip())
    if number is not None and number > MAX_NUMERIC_CLASS:
        raise ValidationError(INVALID_CLASS_MESSAGE)


def normalize_class_for_compare(value: Optional[str]) -> str:
    """Lenient normalization used by report filters: "10th" and "10" both give "10"."""
    if value is None:
        return ""
    label = str(value).strip().lower()
    if not label:
        return ""
    if label in _NAMED_ORDER:
        return label
    match = re.match(r"^(\d+)", label)
    if match:
        return match.group(1)
    return label
