from __future__ import annotations

from typing import Callable, Iterable, Optional, TypeVar

C = TypeVar("C")
R = TypeVar("R")


def first_successful_probe(
    candidates: Iterable[C],
    probe: Callable[[C], Optional[R]],
    *,
    accept: Callable[[R], bool] = lambda result: result is not None,
) -> Optional[tuple[C, R]]:
    """
    Try `probe` on each candidate in order and return the first accepted
    `(candidate, result)` pair, or None when every candidate misses.

    A probe that raises is treated exactly like a miss; the next candidate is
    tried. Nothing is aggregated across candidates.
    """
    for candidate in candidates:
        try:
            result = probe(candidate)
        except Exception:
            continue
        if result is not None and accept(result):
            return candidate, result
    return None
