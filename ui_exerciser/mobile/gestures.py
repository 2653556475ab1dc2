from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from .locators import Bounds

DEFAULT_LONG_PRESS_MS = 2000

MOVE = "move"
DOWN = "down"
UP = "up"


class ActionPerformer(Protocol):
    def perform_actions(self, actions: list[dict[str, Any]]) -> None: ...


@dataclass(frozen=True)
class Waypoint:
    x: int
    y: int
    offset_ms: int
    event: str = MOVE


@dataclass(frozen=True)
class GesturePath:
    """
    Ordered pointer waypoints with exactly one down and one up marker.

    Down/up waypoints repeat the position of the move that precedes them.
    """

    waypoints: tuple[Waypoint, ...]

    def __post_init__(self) -> None:
        if not self.waypoints:
            raise ValueError("gesture path must have waypoints")
        events = [w.event for w in self.waypoints]
        if events.count(DOWN) != 1 or events.count(UP) != 1:
            raise ValueError("gesture path needs exactly one down and one up marker")
        if events.index(DOWN) > events.index(UP):
            raise ValueError("pointer down must come before pointer up")
        offsets = [w.offset_ms for w in self.waypoints]
        if any(b < a for a, b in zip(offsets, offsets[1:])):
            raise ValueError("waypoint offsets must be non-decreasing")

    @property
    def down(self) -> Waypoint:
        return next(w for w in self.waypoints if w.event == DOWN)

    @property
    def up(self) -> Waypoint:
        return next(w for w in self.waypoints if w.event == UP)

    @property
    def duration_ms(self) -> int:
        return self.waypoints[-1].offset_ms - self.waypoints[0].offset_ms

    def to_w3c_actions(self) -> list[dict[str, Any]]:
        """Render as a single W3C touch pointer input source."""
        actions: list[dict[str, Any]] = []
        previous_offset = self.waypoints[0].offset_ms
        for waypoint in self.waypoints:
            if waypoint.event == MOVE:
                actions.append(
                    {
                        "type": "pointerMove",
                        "duration": waypoint.offset_ms - previous_offset,
                        "origin": "viewport",
                        "x": waypoint.x,
                        "y": waypoint.y,
                    }
                )
                previous_offset = waypoint.offset_ms
            elif waypoint.event == DOWN:
                actions.append({"type": "pointerDown", "button": 0})
            else:
                actions.append({"type": "pointerUp", "button": 0})
        return [
            {
                "type": "pointer",
                "id": "finger",
                "parameters": {"pointerType": "touch"},
                "actions": actions,
            }
        ]


def _as_pixels(*values: int) -> list[int]:
    return [int(v) for v in values]


def build_swipe_path(x1: int, y1: int, x2: int, y2: int, duration_ms: int) -> GesturePath:
    if duration_ms < 0:
        raise ValueError("duration_ms must be >= 0")
    x1, y1, x2, y2 = _as_pixels(x1, y1, x2, y2)
    return GesturePath(
        waypoints=(
            Waypoint(x1, y1, 0, MOVE),
            Waypoint(x1, y1, 0, DOWN),
            Waypoint(x2, y2, int(duration_ms), MOVE),
            Waypoint(x2, y2, int(duration_ms), UP),
        )
    )


def build_long_press_path(bounds: Bounds, hold_ms: int = DEFAULT_LONG_PRESS_MS) -> GesturePath:
    if hold_ms <= 0:
        raise ValueError("hold_ms must be > 0")
    x, y = bounds.center
    # The second move goes nowhere; its duration is what makes this a long-press.
    return GesturePath(
        waypoints=(
            Waypoint(x, y, 0, MOVE),
            Waypoint(x, y, 0, DOWN),
            Waypoint(x, y, int(hold_ms), MOVE),
            Waypoint(x, y, int(hold_ms), UP),
        )
    )


def build_tap_path(x: int, y: int) -> GesturePath:
    x, y = _as_pixels(x, y)
    return GesturePath(
        waypoints=(
            Waypoint(x, y, 0, MOVE),
            Waypoint(x, y, 0, DOWN),
            Waypoint(x, y, 0, UP),
        )
    )


class GestureSynthesizer:
    """Submit synthesized gestures as atomic W3C actions. Failures are always soft."""

    def __init__(self, client: ActionPerformer) -> None:
        self.client = client

    def perform(self, path: GesturePath, *, label: str) -> bool:
        try:
            self.client.perform_actions(path.to_w3c_actions())
        except Exception as e:
            print(f"    ⚠ {label} gesture failed: {e}")
            return False
        return True

    def swipe(self, x1: int, y1: int, x2: int, y2: int, duration_ms: int) -> bool:
        return self.perform(build_swipe_path(x1, y1, x2, y2, duration_ms), label="Swipe")

    def long_press(self, bounds: Bounds, hold_ms: int = DEFAULT_LONG_PRESS_MS) -> bool:
        return self.perform(build_long_press_path(bounds, hold_ms), label="Long press")

    def tap(self, x: int, y: int) -> bool:
        return self.perform(build_tap_path(x, y), label="Tap")
