"""Tests for the NativeBridge suite catalog against a fake device."""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))
from fakes import APP_PACKAGE, FakeAppiumClient, RecordingSleep
from ui_exerciser.mobile.context import build_context
from ui_exerciser.mobile.errors import ConfigError
from ui_exerciser.mobile.orchestrator import StepStatus, run_suite
from ui_exerciser.mobile.suites import (
    LOGICAL_IDS,
    SUITE_CATALOG,
    build_suites,
    network_suite,
    performance_suite,
    permissions_suite,
    storage_suite,
    tab_navigation_suite,
    ui_suite,
)
from ui_exerciser.mobile.waits import Waits


def _ctx(client, **kwargs):
    return build_context(client, app_package=APP_PACKAGE, sleep=RecordingSleep(), **kwargs)


def _run(ctx, suite):
    return run_suite(ctx, suite.name, suite.all_steps())


def _by_step(result):
    return {o.step: o for o in result.outcomes}


@pytest.fixture
def ui_app():
    """A UI tab whose counter increments when the alert raised by the button is dismissed."""
    client = FakeAppiumClient()
    client.add_logical("tab-ui")
    counter = client.add_logical("button-counter", text="0")
    button = client.add_logical("test-button")
    client.add("id", "android:id/button1", "el-alert-ok")

    def _increment():
        client.texts[counter] = str(int(client.texts[counter]) + 1)

    client.on_click["el-alert-ok"] = _increment
    client.add_logical("text-input")
    client.add_logical("input-display", text="Appium v2 Test!")
    switch = client.add_logical("test-switch")
    status = client.add_logical("switch-status", text="OFF")
    client.on_click[switch] = lambda: client.texts.__setitem__(status, "ON")
    client.add_logical("scrollable-area", rect={"x": 0, "y": 500, "width": 1000, "height": 600})
    return client, button


def test_ui_suite_counter_reflects_increment(ui_app):
    client, button = ui_app
    ctx = _ctx(client)

    result = _run(ctx, ui_suite())

    assert len(result.outcomes) == 8
    assert all(o.ok for o in result.outcomes), [(o.step, o.reason) for o in result.outcomes]
    assert ctx.vars["initial_counter"] == "0"
    assert ctx.vars["updated_counter"] == "1"
    assert client.sent_text == [("el-text-input", "Appium v2 Test!")]


def test_ui_suite_long_press_and_scroll_gestures(ui_app):
    client, _ = ui_app
    _run(_ctx(client), ui_suite())

    long_press, scroll_down, scroll_up = client.performed
    moves = [a for a in long_press[0]["actions"] if a["type"] == "pointerMove"]
    assert moves[0]["x"] == moves[1]["x"] == 250
    assert moves[1]["duration"] == 2000
    down_moves = [a for a in scroll_down[0]["actions"] if a["type"] == "pointerMove"]
    assert (down_moves[0]["y"], down_moves[1]["y"]) == (1050, 550)
    up_moves = [a for a in scroll_up[0]["actions"] if a["type"] == "pointerMove"]
    assert (up_moves[0]["y"], up_moves[1]["y"]) == (550, 1050)


def test_ui_suite_missing_counter_soft_fails_without_abort(ui_app):
    client, _ = ui_app
    client.remove("xpath", "//*[@resource-id='button-counter']")

    result = _run(_ctx(client), ui_suite())
    outcomes = _by_step(result)

    assert len(result.outcomes) == 8
    assert outcomes["Verify counter updated"].status is StepStatus.SOFT_FAILED
    assert outcomes["Verify counter updated"].reason == "button counter not found"
    assert outcomes["Toggle switch"].ok


def test_ui_suite_unchanged_counter_soft_fails(ui_app):
    client, _ = ui_app
    client.on_click.pop("el-alert-ok")

    outcomes = _by_step(_run(_ctx(client), ui_suite()))

    assert outcomes["Verify counter updated"].status is StepStatus.SOFT_FAILED
    assert "did not change" in outcomes["Verify counter updated"].reason


def test_ui_suite_verification_skipped_when_button_missing(ui_app):
    client, _ = ui_app
    client.remove("xpath", "//*[@resource-id='test-button']")

    outcomes = _by_step(_run(_ctx(client), ui_suite()))

    assert outcomes["Press test button"].reason == "test button not found"
    assert outcomes["Verify counter updated"].status is StepStatus.SKIPPED


def test_missing_tab_still_runs_dependent_steps():
    client = FakeAppiumClient()
    result = _run(_ctx(client), network_suite())

    assert len(result.outcomes) == 4
    assert result.outcomes[0].reason == "Network tab not found"
    assert result.outcomes[1].reason == "GET request button not found"
    assert result.outcomes[2].ok


def test_network_suite_checks_status_markers():
    client = FakeAppiumClient()
    client.add_logical("tab-network")
    client.add_logical("network-get-button")
    client.add_logical("network-post-button")
    status = client.add_logical("network-status", text="Idle")
    client.add_logical("network-data", text="x" * 80)
    client.on_click["el-network-get-button"] = lambda: client.texts.__setitem__(status, "Downloaded 2 KB")

    outcomes = _by_step(_run(_ctx(client), network_suite()))

    assert outcomes["GET request"].ok
    assert outcomes["POST request"].status is StepStatus.SOFT_FAILED
    assert "unexpected network status" in outcomes["POST request"].reason


def test_performance_suite_polls_when_enabled():
    client = FakeAppiumClient()
    client.add_logical("tab-performance")
    client.add_logical("cpu-test-button")
    client.add_logical("memory-test-button")
    result_id = client.add_logical("performance-result", text="Fibonacci(40) = 102334155, Time: 9s")
    client.on_click["el-memory-test-button"] = lambda: client.texts.__setitem__(
        result_id, "Sorted 1000000 elements, Time: 2s"
    )
    sleep = RecordingSleep()
    ctx = build_context(client, app_package=APP_PACKAGE, sleep=sleep, poll_for_results=True)

    outcomes = _by_step(_run(ctx, performance_suite()))

    assert outcomes["CPU test"].ok
    assert outcomes["Memory test"].ok
    assert 20.0 not in sleep.calls


def test_performance_suite_uses_fixed_waits_by_default():
    client = FakeAppiumClient()
    client.add_logical("cpu-test-button")
    client.add_logical("performance-result", text="Fibonacci done, Time: 1s")
    sleep = RecordingSleep()
    ctx = build_context(client, app_package=APP_PACKAGE, sleep=sleep, waits=Waits())

    _run(ctx, performance_suite())

    assert 20.0 in sleep.calls
    assert 8.0 not in sleep.calls


def test_permissions_suite_handles_absent_dialogs_and_returns_from_browser():
    client = FakeAppiumClient()
    client.add_logical("tab-permissions")
    for kind in ("camera", "location", "storage", "contacts"):
        client.add_logical(f"request-{kind}-button")
    client.add("xpath", "//*[@text='While using the app']", "el-while-using")
    client.add_logical("vibrate-button")
    client.add_logical("open-browser-button")

    result = _run(_ctx(client), permissions_suite())

    assert all(o.ok for o in result.outcomes), [(o.step, o.reason) for o in result.outcomes]
    assert client.clicked.count("el-while-using") == 4
    # No alert anywhere: back for 4 requests + vibrate, plus one to leave the browser.
    assert client.keys == [4] * 6
    assert len(client.performed) == 1


def test_storage_suite_prepares_data_and_reads_results():
    client = FakeAppiumClient()
    for logical_id in (
        "tab-storage",
        "tab-ui",
        "text-input",
        "copy-clipboard-button",
        "paste-clipboard-button",
        "save-storage-button",
        "load-storage-button",
        "clear-storage-button",
    ):
        client.add_logical(logical_id)
    client.add_logical("clipboard-content", text="Test Data 123")
    client.add("id", "android:id/button1", "el-alert-ok")

    result = _run(_ctx(client), storage_suite())
    outcomes = _by_step(result)

    assert outcomes["Prepare test data"].ok
    assert outcomes["Paste from clipboard"].ok
    assert outcomes["Load from storage"].reason == "storage content not found"
    assert outcomes["Clear storage"].ok
    assert client.sent_text == [("el-text-input", "Test Data 123")]
    assert client.clicked[:3] == ["el-tab-storage", "el-tab-ui", "el-tab-storage"]


def test_tab_navigation_visits_every_tab_in_order():
    client = FakeAppiumClient()
    for tab in ("tab-ui", "tab-network", "tab-performance", "tab-permissions", "tab-storage"):
        client.add_logical(tab)

    result = _run(_ctx(client), tab_navigation_suite())

    assert [o.step for o in result.outcomes] == [
        "Open UI tab",
        "Open Network tab",
        "Open Performance tab",
        "Open Permissions tab",
        "Open Storage tab",
    ]
    assert client.clicked == ["el-tab-ui", "el-tab-network", "el-tab-performance", "el-tab-permissions", "el-tab-storage"]


def test_build_suites_defaults_to_catalog_order():
    assert [s.name for s in build_suites()] == list(SUITE_CATALOG)
    assert [s.name for s in build_suites(["Storage", "UI"])] == ["Storage", "UI"]


def test_build_suites_rejects_unknown_names():
    with pytest.raises(ConfigError):
        build_suites(["Bluetooth"])


def test_logical_id_catalog_is_unique():
    assert len(LOGICAL_IDS) == len(set(LOGICAL_IDS))
    assert "button-counter" in LOGICAL_IDS
