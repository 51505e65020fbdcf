import re
from functools import cmp_to_key
from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar('T')

_RUN = re.compile(r'\d+|\D+')
_TRAILING_NUMBER = re.compile(r'^(.*?)(\d+)\s*$', re.DOTALL)

def _runs(label: str) -> List[str]:
    return _RUN.findall(label)

def _cmp(a, b) -> int:
    return (a > b) - (a < b)

def compare_alphanumeric(a: str, b: str) -> int:
    """Natural-order comparison: "Team 2" < "Team 10".

    Digit runs compare numerically, other runs case-insensitively. When the
    runs at one position are of different kinds they compare as plain text.
    """
    ra, rb = _runs(a), _runs(b)
    for x, y in zip(ra, rb):
        if x.isdecimal() and y.isdecimal():
            c = _cmp(int(x), int(y))
        else:
            c = _cmp(x.lower(), y.lower())
        if c:
            return c
    return _cmp(len(ra), len(rb))

def sort_labels(items: Iterable[T], key: Optional[Callable[[T], str]] = None) -> List[T]:
    if key is None:
        return sorted(items, key=cmp_to_key(compare_alphanumeric))
    return sorted(items, key=cmp_to_key(lambda x, y: compare_alphanumeric(key(x), key(y))))

def next_label(label: str) -> str:
    """Label for a duplicate: "DAY02" -> "DAY03", "A99" -> "A100", "Test" -> "Test (copy)"."""
    m = _TRAILING_NUMBER.match(label)
    if not m:
        return f"{label} (copy)"
    prefix, digits = m.group(1), m.group(2)
    return prefix + str(int(digits) + 1).zfill(len(digits))
