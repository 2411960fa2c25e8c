"""
Derived identifiers for students and faculty.

- student_id:  "<n>@sks", n = max existing numeral + 1 (first is 1@sks)
- roll_no:     "STUD<classAlnum><rank>@sks", rank = 1-based alphabetical position
               of the student's name among students of the same class
- staff_id:    "staff<n>@sks", n = max existing numeral + 1 (first is staff100@sks)
- login secret: ddmmyy of the date of birth, hashed before storage

All generators are pure functions of the identifiers currently stored; callers
query the store at write time and rely on unique constraints for races.
"""
import re
from datetime import date
from typing import Iterable, Optional, Union

STUDENT_ID_SUFFIX = "@sks"
STUDENT_ID_PATTERN = re.compile(r"^(\d+)@sks$")
STAFF_ID_PATTERN = re.compile(r"^staff(\d+)@sks$")
STAFF_ID_FLOOR = 99

_DOB_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def _max_numeral(values: Iterable[Optional[str]], pattern: "re.Pattern[str]", floor: int) -> int:
    highest = floor
    for value in values:
        if not value:
            continue
        match = pattern.match(value)
        if match:
            highest = max(highest, int(match.group(1)))
    return highest


def next_student_id(existing_ids: Iterable[Optional[str]]) -> str:
    return f"{_max_numeral(existing_ids, STUDENT_ID_PATTERN, 0) + 1}{STUDENT_ID_SUFFIX}"


def is_valid_student_id(value: Optional[str]) -> bool:
    return bool(value) and STUDENT_ID_PATTERN.match(value) is not None


def next_staff_id(existing_ids: Iterable[Optional[str]]) -> str:
    return f"staff{_max_numeral(existing_ids, STAFF_ID_PATTERN, STAFF_ID_FLOOR) + 1}{STUDENT_ID_SUFFIX}"


def class_alnum(class_name: Optional[str]) -> str:
    """Class label with non-alphanumerics stripped ("10-A" -> "10A")."""
    return _NON_ALNUM.sub("", class_name or "")


def format_roll_number(class_name: Optional[str], rank: int) -> str:
    return f"STUD{class_alnum(class_name)}{rank}{STUDENT_ID_SUFFIX}"


def roll_rank(name: str, classmate_names: Iterable[Optional[str]]) -> int:
    """1-based position of ``name`` after sorting it together with ``classmate_names``.

    ``classmate_names`` must not include the student themselves.
    """
    names = sorted([n or "" for n in classmate_names] + [name or ""])
    return names.index(name or "") + 1


def generate_roll_number(
    name: str,
    class_name: Optional[str],
    classmate_names: Iterable[Optional[str]],
) -> str:
    return format_roll_number(class_name, roll_rank(name, classmate_names))


def derive_login_secret(date_of_birth: Union[str, date, None]) -> Optional[str]:
    """ddmmyy of a ``YYYY-MM-DD``-prefixed date; None when the value does not parse.

    >>> derive_login_secret("2010-07-04")
    '040710'
    """
    if date_of_birth is None:
        return None
    if isinstance(date_of_birth, date):
        return date_of_birth.strftime("%d%m%y")
    match = _DOB_PATTERN.match(str(date_of_birth).strip())
    if not match:
        return None
    year, month, day = match.groups()
    return f"{day}{month}{year[-2:]}"
