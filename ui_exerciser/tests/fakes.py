"""In-memory stand-in for AppiumHTTPClient used across the test modules."""
from __future__ import annotations

from typing import Any, Callable, Optional

from ui_exerciser.mobile.appium_http_client import WebDriverElementRef

APP_PACKAGE = "com.nativebridge.io"


def xpath_for(logical_id: str) -> tuple[str, str]:
    return ("xpath", f"//*[@resource-id='{logical_id}']")


class FakeAppiumClient:
    def __init__(self) -> None:
        self.session_id: Optional[str] = None
        self.elements: dict[tuple[str, str], list[str]] = {}
        self.texts: dict[str, str] = {}
        self.attributes: dict[tuple[str, str], str] = {}
        self.rects: dict[str, dict[str, int]] = {}
        self.window = {"x": 0, "y": 0, "width": 1080, "height": 2400}
        self.find_errors: set[tuple[str, str]] = set()
        self.click_errors: set[str] = set()
        self.on_click: dict[str, Callable[[], None]] = {}
        self.fail_actions = False
        self.fail_keys = False

        self.find_calls: list[tuple[str, str]] = []
        self.clicked: list[str] = []
        self.cleared: list[str] = []
        self.sent_text: list[tuple[str, str]] = []
        self.performed: list[list[dict[str, Any]]] = []
        self.keys: list[int] = []
        self.timeouts: list[int] = []
        self.deleted = 0

    # -- test setup helpers ----------------------------------------------

    def add(self, using: str, value: str, element_id: str, *, text: str = "", rect: Optional[dict] = None) -> None:
        self.elements.setdefault((using, value), []).append(element_id)
        self.texts.setdefault(element_id, text)
        self.rects[element_id] = rect or {"x": 100, "y": 200, "width": 300, "height": 100}

    def add_logical(self, logical_id: str, *, text: str = "", rect: Optional[dict] = None) -> str:
        element_id = f"el-{logical_id}"
        self.add(*xpath_for(logical_id), element_id, text=text, rect=rect)
        return element_id

    def remove(self, using: str, value: str) -> None:
        self.elements.pop((using, value), None)

    # -- client surface --------------------------------------------------

    def create_session(self, payload: dict[str, Any]) -> str:
        self.session_id = "fake-session"
        return self.session_id

    def delete_session(self) -> None:
        self.deleted += 1
        self.session_id = None

    def set_timeouts(self, *, implicit_ms: int) -> None:
        self.timeouts.append(implicit_ms)

    def find_elements(self, *, using: str, value: str) -> list[WebDriverElementRef]:
        self.find_calls.append((using, value))
        if (using, value) in self.find_errors:
            raise RuntimeError(f"locator engine unavailable for {using}={value}")
        return [WebDriverElementRef(element_id=e) for e in self.elements.get((using, value), [])]

    def get_element_rect(self, element: WebDriverElementRef) -> dict[str, int]:
        return dict(self.rects[element.element_id])

    def get_element_text(self, element: WebDriverElementRef) -> str:
        return self.texts.get(element.element_id, "")

    def get_element_attribute(self, element: WebDriverElementRef, name: str) -> Optional[str]:
        return self.attributes.get((element.element_id, name))

    def get_window_rect(self) -> dict[str, int]:
        return dict(self.window)

    def click(self, element: WebDriverElementRef) -> None:
        if element.element_id in self.click_errors:
            raise RuntimeError(f"element {element.element_id} is not clickable")
        self.clicked.append(element.element_id)
        callback = self.on_click.get(element.element_id)
        if callback is not None:
            callback()

    def clear(self, element: WebDriverElementRef) -> None:
        self.cleared.append(element.element_id)

    def send_keys(self, element: WebDriverElementRef, *, text: str) -> None:
        self.sent_text.append((element.element_id, text))
        self.attributes[(element.element_id, "text")] = text

    def perform_actions(self, actions: list[dict[str, Any]]) -> None:
        if self.fail_actions:
            raise RuntimeError("actions endpoint rejected the sequence")
        self.performed.append(actions)

    def press_keycode(self, *, keycode: int, metastate: Optional[int] = None) -> None:
        if self.fail_keys:
            raise RuntimeError("pressKey not supported")
        self.keys.append(keycode)


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
