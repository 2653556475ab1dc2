from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .dialogs import DialogPolicy
from .gestures import GestureSynthesizer
from .locators import LocatorResolver
from .waits import Waits


@dataclass
class ExerciserContext:
    """Everything a step may touch. Passed explicitly; nothing is global."""

    client: Any
    resolver: LocatorResolver
    gestures: GestureSynthesizer
    dialogs: DialogPolicy
    waits: Waits = field(default_factory=Waits)
    sleep: Callable[[float], None] = time.sleep
    poll_for_results: bool = False
    vars: dict[str, Any] = field(default_factory=dict)

    def wait(self, seconds: float) -> None:
        if seconds > 0:
            self.sleep(seconds)


def build_context(
    client: Any,
    *,
    app_package: str,
    waits: Optional[Waits] = None,
    sleep: Callable[[float], None] = time.sleep,
    poll_for_results: bool = False,
) -> ExerciserContext:
    waits = waits or Waits()
    return ExerciserContext(
        client=client,
        resolver=LocatorResolver(client, app_package=app_package),
        gestures=GestureSynthesizer(client),
        dialogs=DialogPolicy(client, waits=waits, sleep=sleep),
        waits=waits,
        sleep=sleep,
        poll_for_results=poll_for_results,
    )
