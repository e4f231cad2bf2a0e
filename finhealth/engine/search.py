"""Binary search over a monotone integer-indexed function."""

from decimal import Decimal
from typing import Callable


def bisect_monotone(
    low: int,
    high: int,
    key: Callable[[int], Decimal],
    target: Decimal,
    tolerance: Decimal = Decimal("0.01"),
) -> int:
    """Find the index in [low, high] whose value best matches `target`.

    `key` must be non-increasing in its argument. Returns the first visited
    index within `tolerance` of target; otherwise the final `low`, i.e. the
    smallest index whose value is at or below target (or `high` if none is).
    """
    while low < high:
        mid = (low + high) // 2
        value = key(mid)
        if abs(value - target) < tolerance:
            return mid
        if value > target:
            low = mid + 1
        else:
            high = mid
    return low
