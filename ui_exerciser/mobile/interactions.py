"""
Soft element interactions used by suite steps.

Every helper here swallows interaction errors at its own boundary, prints a
diagnostic naming the element, and reports failure through its return value.
"""

from __future__ import annotations

from typing import Optional

from .context import ExerciserContext
from .dialogs import press_back as _press_back
from .locators import ResolvedElement

SCROLL_VIEW_DURATION_MS = 800
SCROLL_AREA_DURATION_MS = 1000
SCROLL_AREA_INSET_PX = 50


def find(ctx: ExerciserContext, logical_id: str, label: str) -> Optional[ResolvedElement]:
    return ctx.resolver.resolve(logical_id, label)


def click(ctx: ExerciserContext, logical_id: str, label: str) -> Optional[str]:
    """Click the element; return None on success or a failure reason."""
    resolved = find(ctx, logical_id, label)
    if resolved is None:
        return f"{label} not found"
    try:
        ctx.client.click(resolved.element)
    except Exception as e:
        print(f"    ✗ Could not click {label}: {e}")
        return f"could not click {label}: {e}"
    return None


def find_and_click(ctx: ExerciserContext, logical_id: str, label: str) -> bool:
    return click(ctx, logical_id, label) is None


def read_text(ctx: ExerciserContext, logical_id: str, label: str) -> Optional[str]:
    resolved = find(ctx, logical_id, label)
    if resolved is None:
        return None
    try:
        return ctx.client.get_element_text(resolved.element)
    except Exception as e:
        print(f"    ✗ Could not read {label}: {e}")
        return None


def replace_text(ctx: ExerciserContext, logical_id: str, label: str, text: str) -> bool:
    resolved = find(ctx, logical_id, label)
    if resolved is None:
        return False
    try:
        ctx.client.clear(resolved.element)
        ctx.wait(ctx.waits.input_settle_s)
        ctx.client.send_keys(resolved.element, text=text)
    except Exception as e:
        print(f"    ✗ Could not type into {label}: {e}")
        return False
    return True


def read_attribute(ctx: ExerciserContext, resolved: ResolvedElement, name: str) -> Optional[str]:
    try:
        return ctx.client.get_element_attribute(resolved.element, name)
    except Exception as e:
        print(f"    ⚠ Could not read attribute {name!r} of {resolved.logical_id}: {e}")
        return None


def scroll_down_in_view(ctx: ExerciserContext) -> bool:
    try:
        rect = ctx.client.get_window_rect()
    except Exception as e:
        print(f"    ⚠ Scroll failed: {e}")
        return False
    center_x = rect["width"] // 2
    start_y = rect["height"] * 3 // 4
    end_y = rect["height"] // 4
    ok = ctx.gestures.swipe(center_x, start_y, center_x, end_y, SCROLL_VIEW_DURATION_MS)
    ctx.wait(ctx.waits.scroll_settle_s)
    return ok


def scroll_within(ctx: ExerciserContext, resolved: ResolvedElement, *, direction: str) -> bool:
    bounds = resolved.bounds
    center_x = bounds.x + bounds.width // 2
    bottom_y = bounds.y + bounds.height - SCROLL_AREA_INSET_PX
    top_y = bounds.y + SCROLL_AREA_INSET_PX
    if direction == "down":
        return ctx.gestures.swipe(center_x, bottom_y, center_x, top_y, SCROLL_AREA_DURATION_MS)
    if direction == "up":
        return ctx.gestures.swipe(center_x, top_y, center_x, bottom_y, SCROLL_AREA_DURATION_MS)
    raise ValueError("direction must be 'up' or 'down'")


def press_back(ctx: ExerciserContext) -> bool:
    return _press_back(ctx.client)
