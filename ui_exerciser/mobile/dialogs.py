from __future__ import annotations

import time
from typing import Any, Callable, Optional, Protocol

from .appium_http_client import ANDROID_KEYCODE_BACK, WebDriverElementRef
from .locators import Locator
from .probing import first_successful_probe
from .waits import Waits


class DialogClient(Protocol):
    def find_elements(self, *, using: str, value: str) -> list[WebDriverElementRef]: ...

    def click(self, element: WebDriverElementRef) -> None: ...

    def press_keycode(self, *, keycode: int, metastate: Optional[int] = None) -> None: ...


ALERT_CANDIDATES: tuple[Locator, ...] = (
    Locator(using="id", value="android:id/button1"),
    Locator(using="xpath", value="//*[@text='OK']"),
    Locator(using="xpath", value="//*[@text='ok']"),
)

PERMISSION_CANDIDATES: tuple[Locator, ...] = (
    Locator(using="xpath", value="//*[@text='Allow']"),
    Locator(using="xpath", value="//*[@text='ALLOW']"),
    Locator(using="xpath", value="//*[@text='While using the app']"),
    Locator(using="id", value="com.android.permissioncontroller:id/permission_allow_button"),
    Locator(using="id", value="com.android.permissioncontroller:id/permission_allow_foreground_only_button"),
)


def press_back(client: DialogClient) -> bool:
    try:
        client.press_keycode(keycode=ANDROID_KEYCODE_BACK)
    except Exception as e:
        print(f"    ⚠ Hardware back failed: {e}")
        return False
    return True


class DialogPolicy:
    """
    Best-effort dismissal of transient system dialogs.

    An absent dialog is a normal outcome for both operations. Alerts fall back
    to hardware back; permission prompts do not, since an already granted
    permission never shows one.
    """

    def __init__(
        self,
        client: DialogClient,
        *,
        waits: Waits = Waits(),
        sleep: Callable[[float], None] = time.sleep,
        alert_candidates: tuple[Locator, ...] = ALERT_CANDIDATES,
        permission_candidates: tuple[Locator, ...] = PERMISSION_CANDIDATES,
    ) -> None:
        self.client = client
        self.waits = waits
        self.sleep = sleep
        self.alert_candidates = alert_candidates
        self.permission_candidates = permission_candidates

    def _click_first(self, candidates: tuple[Locator, ...]) -> Optional[Locator]:
        def _probe(locator: Locator) -> Any:
            elements = self.client.find_elements(using=locator.using, value=locator.value)
            if not elements:
                return None
            self.client.click(elements[0])
            return True

        hit = first_successful_probe(candidates, _probe)
        return hit[0] if hit else None

    def dismiss_alert(self) -> bool:
        clicked = self._click_first(self.alert_candidates)
        if clicked is not None:
            self.sleep(self.waits.alert_settle_s)
            return True
        press_back(self.client)
        return True

    def dismiss_permission_dialog(self) -> None:
        self.sleep(self.waits.permission_settle_s)
        clicked = self._click_first(self.permission_candidates)
        if clicked is not None:
            print(f"    Permission granted via {clicked.using}={clicked.value!r}")
            self.sleep(self.waits.alert_settle_s)
