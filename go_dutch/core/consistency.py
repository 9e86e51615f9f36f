from __future__ import annotations

# One minor currency unit: absorbs division remainders, not real mistakes.
DEFAULT_TOLERANCE = 1.0


def is_consistent(total_expenses: float, total_splits: float, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    return abs(total_expenses - total_splits) < tolerance
