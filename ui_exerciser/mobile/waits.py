"""
Named settle delays and a bounded poll helper.

The target app does real asynchronous work (network calls, Fibonacci/sort
benchmarks, system dialogs), so interactions are separated by fixed waits.
Every wait lives here under a name so a slow emulator can be tuned from the
run config instead of editing steps.
"""

from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from .errors import ConfigError

T = TypeVar("T")


@dataclass(frozen=True)
class Waits:
    app_launch_s: float = 3.0
    tab_settle_s: float = 1.0
    tab_navigation_s: float = 1.5
    alert_settle_s: float = 0.5
    permission_settle_s: float = 1.0
    post_click_s: float = 2.0
    short_s: float = 1.0
    input_settle_s: float = 0.5
    network_s: float = 5.0
    cooldown_s: float = 2.0
    cpu_test_s: float = 20.0
    memory_test_s: float = 8.0
    browser_s: float = 3.0
    scroll_settle_s: float = 0.5
    poll_interval_s: float = 0.5

    def scaled(self, factor: float) -> "Waits":
        if factor < 0:
            raise ValueError("wait scale factor must be >= 0")
        return dataclasses.replace(
            self, **{f.name: getattr(self, f.name) * factor for f in dataclasses.fields(self)}
        )

    def with_overrides(self, overrides: dict[str, Any]) -> "Waits":
        known = {f.name for f in dataclasses.fields(self)}
        changes: dict[str, float] = {}
        for key, value in overrides.items():
            name = key if key.endswith("_s") else f"{key}_s"
            if name not in known:
                raise ConfigError(f"Unknown wait {key!r} (known: {', '.join(sorted(known))})")
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                raise ConfigError(f"Wait {key!r} must be a non-negative number")
            changes[name] = float(value)
        return dataclasses.replace(self, **changes)


def poll_until(
    predicate: Callable[[], Optional[T]],
    *,
    timeout_s: float,
    poll_s: float,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> Optional[T]:
    """
    Call `predicate` until it returns a truthy value or `timeout_s` elapses.

    The predicate is always evaluated at least once. Exceptions raised by the
    predicate count as "not yet". Returns the truthy value, or None on timeout.
    """
    deadline = clock() + timeout_s
    while True:
        try:
            value = predicate()
        except Exception:
            value = None
        if value:
            return value
        if clock() >= deadline:
            return None
        sleep(max(poll_s, 0.05))
