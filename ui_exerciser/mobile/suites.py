"""
The NativeBridge debug app suite catalog.

Suites run in catalog order. Each tab suite opens its tab first; the steps
after it still run when that fails and report their own missing elements.
"""

from __future__ import annotations

from typing import Callable, Optional

from . import interactions as ui
from .context import ExerciserContext
from .errors import ConfigError
from .orchestrator import Step, StepOutcome, Suite
from .waits import poll_until

TAB_IDS: dict[str, str] = {
    "UI": "tab-ui",
    "Network": "tab-network",
    "Performance": "tab-performance",
    "Permissions": "tab-permissions",
    "Storage": "tab-storage",
}

LOGICAL_IDS: tuple[str, ...] = (
    "app-title",
    *TAB_IDS.values(),
    "button-counter",
    "test-button",
    "text-input",
    "input-display",
    "test-switch",
    "switch-status",
    "scrollable-area",
    "network-get-button",
    "network-post-button",
    "network-status",
    "network-data",
    "cpu-test-button",
    "memory-test-button",
    "performance-result",
    "request-camera-button",
    "request-location-button",
    "request-storage-button",
    "request-contacts-button",
    "vibrate-button",
    "open-browser-button",
    "copy-clipboard-button",
    "paste-clipboard-button",
    "clipboard-content",
    "save-storage-button",
    "load-storage-button",
    "clear-storage-button",
    "storage-content",
)

UI_INPUT_TEXT = "Appium v2 Test!"
STORAGE_TEST_DATA = "Test Data 123"
DATA_PREVIEW_CHARS = 50


def _preview(text: str) -> str:
    return text if len(text) <= DATA_PREVIEW_CHARS else text[:DATA_PREVIEW_CHARS] + "..."


def _contains(text: str, *, any_of: tuple[str, ...] = (), all_of: tuple[str, ...] = ()) -> bool:
    if any_of and not any(m in text for m in any_of):
        return False
    return all(m in text for m in all_of)


# -- generic step builders ---------------------------------------------------


def navigate_step(tab_name: str, *, settle: str = "tab_navigation_s") -> Step:
    tab_id = TAB_IDS[tab_name]

    def _action(ctx: ExerciserContext) -> Optional[StepOutcome]:
        failure = ui.click(ctx, tab_id, f"{tab_name} tab")
        ctx.wait(getattr(ctx.waits, settle))
        if failure:
            return StepOutcome.soft_failed(failure)
        print(f"  {tab_name} tab opened")
        return None

    return Step(name=f"Open {tab_name} tab", action=_action)


def wait_step(name: str, wait: str) -> Step:
    def _action(ctx: ExerciserContext) -> None:
        ctx.wait(getattr(ctx.waits, wait))

    return Step(name=name, action=_action)


def tap_and_dismiss_step(
    name: str,
    logical_id: str,
    label: str,
    *,
    settle: str = "short_s",
    read_id: Optional[str] = None,
    read_label: Optional[str] = None,
) -> Step:
    """Click a button, clear the alert it raises and optionally read a result field."""

    def _action(ctx: ExerciserContext) -> Optional[StepOutcome]:
        failure = ui.click(ctx, logical_id, label)
        if failure:
            return StepOutcome.soft_failed(failure)
        ctx.wait(getattr(ctx.waits, settle))
        ctx.dialogs.dismiss_alert()
        outcome = None
        if read_id is not None:
            text = ui.read_text(ctx, read_id, read_label or read_id)
            if text is None:
                outcome = StepOutcome.soft_failed(f"{read_label or read_id} not found")
            else:
                print(f"  {read_label}: {text}")
        ctx.wait(ctx.waits.short_s)
        return outcome

    return Step(name=name, action=_action)


def _await_result(
    ctx: ExerciserContext,
    logical_id: str,
    label: str,
    *,
    wait: str,
    any_of: tuple[str, ...],
    all_of: tuple[str, ...],
) -> Optional[str]:
    seconds = getattr(ctx.waits, wait)
    if ctx.poll_for_results:
        def _probe() -> Optional[str]:
            resolved = ctx.resolver.resolve(logical_id, quiet=True)
            if resolved is None:
                return None
            text = ctx.client.get_element_text(resolved.element)
            return text if _contains(text, any_of=any_of, all_of=all_of) else None

        poll_until(_probe, timeout_s=seconds, poll_s=ctx.waits.poll_interval_s, sleep=ctx.sleep)
    else:
        ctx.wait(seconds)
    return ui.read_text(ctx, logical_id, label)


def action_with_result_step(
    name: str,
    button_id: str,
    button_label: str,
    *,
    wait: str,
    result_id: str,
    result_label: str,
    any_of: tuple[str, ...] = (),
    all_of: tuple[str, ...] = (),
    detail_id: Optional[str] = None,
    detail_label: Optional[str] = None,
    waiting_message: Optional[str] = None,
) -> Step:
    """Click, wait out asynchronous app work, then check the status text it produces."""

    def _action(ctx: ExerciserContext) -> Optional[StepOutcome]:
        failure = ui.click(ctx, button_id, button_label)
        if failure:
            return StepOutcome.soft_failed(failure)
        if waiting_message:
            print(f"  {waiting_message}")

        status = _await_result(ctx, result_id, result_label, wait=wait, any_of=any_of, all_of=all_of)
        if detail_id is not None:
            detail = ui.read_text(ctx, detail_id, detail_label or detail_id)
            if detail is not None:
                print(f"  {detail_label}: {_preview(detail)}")
        if status is None:
            return StepOutcome.soft_failed(f"{result_label} not found")
        print(f"  {result_label}: {status}")
        if not _contains(status, any_of=any_of, all_of=all_of):
            return StepOutcome.soft_failed(f"unexpected {result_label}: {status!r}")
        return None

    return Step(name=name, action=_action)


# -- App Launch -------------------------------------------------------------


def _verify_app_title(ctx: ExerciserContext) -> Optional[StepOutcome]:
    title = ui.read_text(ctx, "app-title", "app title")
    if title is None:
        return StepOutcome.soft_failed("app title not found")
    print(f"  App title: {title!r}")
    if "NativeBridge" not in title:
        return StepOutcome.soft_failed(f"unexpected app title: {title!r}")
    return None


def app_launch_suite() -> Suite:
    return Suite(name="App Launch", steps=(Step(name="Verify app title", action=_verify_app_title),))


# -- UI ---------------------------------------------------------------------


def _read_initial_counter(ctx: ExerciserContext) -> Optional[StepOutcome]:
    ctx.vars.pop("initial_counter", None)
    count = ui.read_text(ctx, "button-counter", "button counter")
    if count is None:
        return StepOutcome.soft_failed("button counter not found")
    ctx.vars["initial_counter"] = count
    print(f"  Initial counter: {count}")
    return None


def _press_test_button(ctx: ExerciserContext) -> Optional[StepOutcome]:
    failure = ui.click(ctx, "test-button", "test button")
    if failure:
        return StepOutcome.soft_failed(failure)
    ctx.wait(ctx.waits.post_click_s)
    ctx.dialogs.dismiss_alert()
    ctx.wait(ctx.waits.short_s)
    return None


def _verify_counter_updated(ctx: ExerciserContext) -> Optional[StepOutcome]:
    count = ui.read_text(ctx, "button-counter", "button counter after click")
    if count is None:
        return StepOutcome.soft_failed("button counter not found")
    ctx.vars["updated_counter"] = count
    print(f"  Updated counter: {count}")
    initial = ctx.vars.get("initial_counter")
    if initial is not None and initial == count:
        return StepOutcome.soft_failed(f"button counter did not change (still {count!r})")
    return None


def _long_press_test_button(ctx: ExerciserContext) -> Optional[StepOutcome]:
    button = ui.find(ctx, "test-button", "test button for long press")
    if button is None:
        return StepOutcome.soft_failed("test button not found")
    if not ctx.gestures.long_press(button.bounds):
        return StepOutcome.soft_failed("long press gesture failed")
    ctx.wait(ctx.waits.post_click_s)
    ctx.dialogs.dismiss_alert()
    return None


def _enter_text(ctx: ExerciserContext) -> Optional[StepOutcome]:
    if not ui.replace_text(ctx, "text-input", "text input field", UI_INPUT_TEXT):
        return StepOutcome.soft_failed("text input field not usable")
    ctx.wait(ctx.waits.short_s)

    field = ui.find(ctx, "text-input", "text input field")
    if field is not None:
        print(f"  Entered text: {ui.read_attribute(ctx, field, 'text')!r}")
    display = ui.read_text(ctx, "input-display", "input display")
    if display is not None:
        print(f"  Display shows: {display!r}")
    return None


def _toggle_switch(ctx: ExerciserContext) -> Optional[StepOutcome]:
    switch = ui.find(ctx, "test-switch", "test switch")
    if switch is None:
        return StepOutcome.soft_failed("test switch not found")
    before = ui.read_text(ctx, "switch-status", "switch status")
    print(f"  Initial switch status: {before or ''}")

    ctx.client.click(switch.element)
    ctx.wait(ctx.waits.short_s)

    after = ui.read_text(ctx, "switch-status", "switch status after toggle")
    print(f"  New switch status: {after or ''}")
    if before is not None and after is not None and before == after:
        return StepOutcome.soft_failed(f"switch status did not change (still {after!r})")
    return None


def _scroll_area(ctx: ExerciserContext) -> Optional[StepOutcome]:
    area = ui.find(ctx, "scrollable-area", "scrollable area")
    if area is None:
        return StepOutcome.soft_failed("scrollable area not found")
    down = ui.scroll_within(ctx, area, direction="down")
    ctx.wait(ctx.waits.short_s)
    up = ui.scroll_within(ctx, area, direction="up")
    ctx.wait(ctx.waits.short_s)
    if not (down and up):
        return StepOutcome.soft_failed("scroll gesture failed")
    return None


def ui_suite() -> Suite:
    return Suite(
        name="UI",
        navigation=navigate_step("UI", settle="tab_settle_s"),
        steps=(
            Step(name="Read initial counter", action=_read_initial_counter),
            Step(name="Press test button", action=_press_test_button),
            Step(name="Verify counter updated", action=_verify_counter_updated, requires="Press test button"),
            Step(name="Long press test button", action=_long_press_test_button),
            Step(name="Enter text", action=_enter_text),
            Step(name="Toggle switch", action=_toggle_switch),
            Step(name="Scroll area", action=_scroll_area),
        ),
    )


# -- Network ----------------------------------------------------------------


def network_suite() -> Suite:
    return Suite(
        name="Network",
        navigation=navigate_step("Network"),
        steps=(
            action_with_result_step(
                "GET request",
                "network-get-button",
                "GET request button",
                wait="network_s",
                result_id="network-status",
                result_label="network status",
                any_of=("Downloaded", "✓"),
                detail_id="network-data",
                detail_label="network data",
                waiting_message="Waiting for GET request to complete...",
            ),
            wait_step("Network cooldown", "cooldown_s"),
            action_with_result_step(
                "POST request",
                "network-post-button",
                "POST request button",
                wait="network_s",
                result_id="network-status",
                result_label="network status",
                any_of=("Uploaded", "Created", "✓"),
                detail_id="network-data",
                detail_label="network data",
                waiting_message="Waiting for POST request to complete...",
            ),
        ),
    )


# -- Performance ------------------------------------------------------------


def performance_suite() -> Suite:
    return Suite(
        name="Performance",
        navigation=navigate_step("Performance"),
        steps=(
            action_with_result_step(
                "CPU test",
                "cpu-test-button",
                "CPU test button",
                wait="cpu_test_s",
                result_id="performance-result",
                result_label="performance result",
                all_of=("Fibonacci", "Time:"),
                waiting_message="Running Fibonacci(40) calculation...",
            ),
            wait_step("Performance cooldown", "cooldown_s"),
            action_with_result_step(
                "Memory test",
                "memory-test-button",
                "Memory test button",
                wait="memory_test_s",
                result_id="performance-result",
                result_label="performance result",
                all_of=("Sorted", "elements", "Time:"),
                waiting_message="Sorting 1,000,000 elements...",
            ),
        ),
    )


# -- Permissions ------------------------------------------------------------


def permission_request_step(kind: str) -> Step:
    label = f"{kind.capitalize()} permission button"

    def _action(ctx: ExerciserContext) -> Optional[StepOutcome]:
        failure = ui.click(ctx, f"request-{kind}-button", label)
        if failure:
            return StepOutcome.soft_failed(failure)
        ctx.wait(ctx.waits.post_click_s)
        ctx.dialogs.dismiss_permission_dialog()
        ctx.dialogs.dismiss_alert()
        ctx.wait(ctx.waits.short_s)
        return None

    return Step(name=f"Request {kind} permission", action=_action)


def _scroll_view(ctx: ExerciserContext) -> Optional[StepOutcome]:
    if not ui.scroll_down_in_view(ctx):
        return StepOutcome.soft_failed("scroll gesture failed")
    return None


def _open_browser(ctx: ExerciserContext) -> Optional[StepOutcome]:
    failure = ui.click(ctx, "open-browser-button", "Open browser button")
    if failure:
        return StepOutcome.soft_failed(failure)
    ctx.wait(ctx.waits.browser_s)
    returned = ui.press_back(ctx)
    ctx.wait(ctx.waits.short_s)
    if not returned:
        return StepOutcome.soft_failed("could not return from browser")
    return None


def permissions_suite() -> Suite:
    return Suite(
        name="Permissions",
        navigation=navigate_step("Permissions"),
        steps=(
            permission_request_step("camera"),
            permission_request_step("location"),
            permission_request_step("storage"),
            permission_request_step("contacts"),
            Step(name="Scroll to system features", action=_scroll_view),
            tap_and_dismiss_step("Vibrate device", "vibrate-button", "Vibrate button", settle="post_click_s"),
            Step(name="Open browser", action=_open_browser),
        ),
    )


# -- Storage ----------------------------------------------------------------


def _prepare_storage_data(ctx: ExerciserContext) -> Optional[StepOutcome]:
    ui.find_and_click(ctx, TAB_IDS["UI"], "UI tab")
    ctx.wait(ctx.waits.tab_settle_s)
    entered = ui.replace_text(ctx, "text-input", "text input", STORAGE_TEST_DATA)
    if entered:
        print(f"  Test data entered: {STORAGE_TEST_DATA!r}")

    back = ui.find_and_click(ctx, TAB_IDS["Storage"], "Storage tab")
    ctx.wait(ctx.waits.tab_settle_s)
    if not entered:
        return StepOutcome.soft_failed("text input not usable")
    if not back:
        return StepOutcome.soft_failed("could not return to Storage tab")
    return None


def storage_suite() -> Suite:
    return Suite(
        name="Storage",
        navigation=navigate_step("Storage"),
        steps=(
            Step(name="Prepare test data", action=_prepare_storage_data),
            tap_and_dismiss_step("Copy to clipboard", "copy-clipboard-button", "Copy to clipboard button"),
            tap_and_dismiss_step(
                "Paste from clipboard",
                "paste-clipboard-button",
                "Paste from clipboard button",
                read_id="clipboard-content",
                read_label="clipboard content",
            ),
            Step(name="Scroll to storage operations", action=_scroll_view),
            tap_and_dismiss_step("Save to storage", "save-storage-button", "Save to storage button"),
            tap_and_dismiss_step(
                "Load from storage",
                "load-storage-button",
                "Load from storage button",
                read_id="storage-content",
                read_label="storage content",
            ),
            tap_and_dismiss_step("Clear storage", "clear-storage-button", "Clear storage button"),
        ),
    )


# -- Tab Navigation ---------------------------------------------------------


def tab_navigation_suite() -> Suite:
    return Suite(
        name="Tab Navigation",
        steps=tuple(navigate_step(name, settle="tab_settle_s") for name in TAB_IDS),
    )


SUITE_CATALOG: dict[str, Callable[[], Suite]] = {
    "App Launch": app_launch_suite,
    "UI": ui_suite,
    "Network": network_suite,
    "Performance": performance_suite,
    "Permissions": permissions_suite,
    "Storage": storage_suite,
    "Tab Navigation": tab_navigation_suite,
}


def build_suites(names: Optional[list[str]] = None) -> list[Suite]:
    """Build suites in catalog order, or in the order given by `names`."""
    if names is None:
        return [builder() for builder in SUITE_CATALOG.values()]
    unknown = [n for n in names if n not in SUITE_CATALOG]
    if unknown:
        raise ConfigError(
            f"Unknown suite(s): {', '.join(unknown)} (known: {', '.join(SUITE_CATALOG)})"
        )
    return [SUITE_CATALOG[n]() for n in names]
