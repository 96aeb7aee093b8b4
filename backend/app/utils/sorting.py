from functools import cmp_to_key
from typing import Any, Callable, List, Optional, Sequence, TypeVar

T = TypeVar("T")


def compare_values(a: Any, b: Any) -> int:
    """
    Type-aware comparison used by the dashboard tables.
    Strings compare case-insensitively, numbers numerically, booleans
    false before true. Mixed or missing values compare equal.
    """
    if isinstance(a, bool) and isinstance(b, bool):
        return (a > b) - (a < b)
    if isinstance(a, str) and isinstance(b, str):
        a_key, b_key = a.casefold(), b.casefold()
        return (a_key > b_key) - (a_key < b_key)
    if isinstance(a, (int, float)) and isinstance(b, (int, float)) \
            and not isinstance(a, bool) and not isinstance(b, bool):
        return (a > b) - (a < b)
    return 0


def sort_items(
    items: Sequence[T],
    key: Optional[str],
    direction: str = "asc",
    getter: Optional[Callable[[T, str], Any]] = None,
) -> List[T]:
    """Stable sort on one attribute; no key keeps the incoming order"""
    items = list(items)
    if not key:
        return items
    getter = getter or (lambda item, name: getattr(item, name, None))
    sign = -1 if direction == "desc" else 1

    def cmp(a, b):
        return sign * compare_values(getter(a, key), getter(b, key))

    return sorted(items, key=cmp_to_key(cmp))


def contains(value: Optional[str], term: str) -> bool:
    return bool(value) and term in value.lower()
