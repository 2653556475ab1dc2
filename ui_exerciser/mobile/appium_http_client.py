from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import requests


ANDROID_KEYCODE_BACK = 4


class AppiumHTTPError(RuntimeError):
    def __init__(
        self,
        *,
        message: str,
        method: str,
        url: str,
        status_code: Optional[int] = None,
        response_json: Optional[dict[str, Any]] = None,
        response_text: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.status_code = status_code
        self.response_json = response_json
        self.response_text = response_text


@dataclass(frozen=True)
class WebDriverElementRef:
    element_id: str


def _extract_webdriver_value(payload: dict[str, Any]) -> Any:
    # W3C WebDriver typically wraps in {"value": ...}
    if "value" in payload:
        return payload["value"]
    return payload


def _extract_element_id(element_obj: Any) -> str:
    if not isinstance(element_obj, dict):
        raise ValueError(f"Unexpected element payload type: {type(element_obj)}")

    w3c_key = "element-6066-11e4-a52e-4f735466cecf"
    if w3c_key in element_obj and element_obj[w3c_key]:
        return str(element_obj[w3c_key])

    # Legacy JSONWire key
    if "ELEMENT" in element_obj and element_obj["ELEMENT"]:
        return str(element_obj["ELEMENT"])

    raise ValueError(f"Could not extract element id from payload keys: {list(element_obj.keys())}")


def _require_rect(value: Any, *, method: str, url: str, response: dict[str, Any], what: str) -> dict[str, int]:
    if not isinstance(value, dict):
        raise AppiumHTTPError(
            message=f"Unexpected {what} response shape (expected object)",
            method=method,
            url=url,
            response_json=response,
        )
    required = {"x", "y", "width", "height"}
    if not required.issubset(set(value.keys())):
        raise AppiumHTTPError(
            message=f"{what} missing keys (expected {sorted(required)})",
            method=method,
            url=url,
            response_json=response,
        )
    return {k: int(value[k]) for k in required}


class AppiumHTTPClient:
    """
    Minimal Appium client using WebDriver HTTP endpoints.

    Only the endpoints the exerciser needs are wrapped: session management,
    element lookup/interaction, W3C pointer actions and the `mobile:`
    script extensions used for hardware keys.
    """

    def __init__(self, server_url: str, *, timeout_s: float = 30.0) -> None:
        if not server_url:
            raise ValueError("server_url is required")
        self.server_url = server_url.rstrip("/")
        self.timeout_s = timeout_s
        self.session_id: Optional[str] = None
        self._session = requests.Session()

    def _request(self, method: str, path: str, *, json: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        url = f"{self.server_url}{path}"
        try:
            response = self._session.request(method, url, json=json, timeout=self.timeout_s)
        except requests.RequestException as e:
            raise AppiumHTTPError(
                message=f"Failed to call Appium server: {e}",
                method=method,
                url=url,
            ) from e

        response_text = None
        response_json: Optional[dict[str, Any]] = None
        try:
            response_json = response.json()
        except ValueError:
            response_text = response.text

        if response.status_code >= 400:
            details = None
            if isinstance(response_json, dict):
                value = _extract_webdriver_value(response_json)
                if isinstance(value, dict):
                    details = value.get("error") or value.get("message")
            raise AppiumHTTPError(
                message=f"Appium HTTP {response.status_code} for {method} {path}"
                + (f": {details}" if details else ""),
                method=method,
                url=url,
                status_code=response.status_code,
                response_json=response_json,
                response_text=response_text,
            )

        if not isinstance(response_json, dict):
            raise AppiumHTTPError(
                message=f"Appium returned non-JSON response for {method} {path}",
                method=method,
                url=url,
                status_code=response.status_code,
                response_text=response_text,
            )

        return response_json

    def _session_path(self, suffix: str = "") -> str:
        self._require_session()
        return f"/session/{self.session_id}{suffix}"

    def create_session(self, session_payload: dict[str, Any]) -> str:
        """
        Create an Appium session.

        `session_payload` must be a valid WebDriver session creation payload:
          {"capabilities": {"alwaysMatch": {...}, "firstMatch": [{}]}}
        """
        if not isinstance(session_payload, dict) or not session_payload:
            raise ValueError("session_payload must be a non-empty dict")

        response = self._request("POST", "/session", json=session_payload)

        # Common shapes:
        # - {"value": {"sessionId": "...", "capabilities": {...}}}
        # - {"sessionId": "...", "value": {...}}
        value = _extract_webdriver_value(response)
        session_id = None
        if isinstance(value, dict):
            session_id = value.get("sessionId")
        session_id = session_id or response.get("sessionId")

        if not session_id:
            raise AppiumHTTPError(
                message="Appium did not return a sessionId in the create_session response",
                method="POST",
                url=f"{self.server_url}/session",
                response_json=response,
            )

        self.session_id = str(session_id)
        return self.session_id

    def delete_session(self) -> None:
        if not self.session_id:
            return
        session_id = self.session_id
        try:
            self._request("DELETE", f"/session/{session_id}")
        finally:
            self.session_id = None

    def set_timeouts(self, *, implicit_ms: int) -> None:
        if implicit_ms < 0:
            raise ValueError("implicit_ms must be >= 0")
        self._request("POST", self._session_path("/timeouts"), json={"implicit": int(implicit_ms)})

    def get_window_rect(self) -> dict[str, int]:
        path = self._session_path("/window/rect")
        response = self._request("GET", path)
        return _require_rect(
            _extract_webdriver_value(response),
            method="GET",
            url=f"{self.server_url}{path}",
            response=response,
            what="/window/rect",
        )

    def find_elements(self, *, using: str, value: str) -> list[WebDriverElementRef]:
        path = self._session_path("/elements")
        if not using or not value:
            raise ValueError("'using' and 'value' are required to find elements")
        response = self._request("POST", path, json={"using": using, "value": value})
        payload = _extract_webdriver_value(response)
        if not isinstance(payload, list):
            raise AppiumHTTPError(
                message="Unexpected /elements response shape (expected list)",
                method="POST",
                url=f"{self.server_url}{path}",
                response_json=response,
            )
        return [WebDriverElementRef(element_id=_extract_element_id(item)) for item in payload]

    def get_element_text(self, element: WebDriverElementRef) -> str:
        path = self._session_path(f"/element/{element.element_id}/text")
        response = self._request("GET", path)
        value = _extract_webdriver_value(response)
        if not isinstance(value, str):
            raise AppiumHTTPError(
                message="Unexpected element /text response shape (expected string)",
                method="GET",
                url=f"{self.server_url}{path}",
                response_json=response,
            )
        return value

    def get_element_attribute(self, element: WebDriverElementRef, name: str) -> Optional[str]:
        path = self._session_path(f"/element/{element.element_id}/attribute/{name}")
        response = self._request("GET", path)
        value = _extract_webdriver_value(response)
        if value is None:
            return None
        return str(value)

    def get_element_rect(self, element: WebDriverElementRef) -> dict[str, int]:
        path = self._session_path(f"/element/{element.element_id}/rect")
        response = self._request("GET", path)
        return _require_rect(
            _extract_webdriver_value(response),
            method="GET",
            url=f"{self.server_url}{path}",
            response=response,
            what="element /rect",
        )

    def click(self, element: WebDriverElementRef) -> None:
        self._request("POST", self._session_path(f"/element/{element.element_id}/click"), json={})

    def clear(self, element: WebDriverElementRef) -> None:
        self._request("POST", self._session_path(f"/element/{element.element_id}/clear"), json={})

    def send_keys(self, element: WebDriverElementRef, *, text: str) -> None:
        if text is None:
            raise ValueError("text must not be None")
        # WebDriver spec accepts both `text` and `value`; many servers expect `value` as an array of chars.
        self._request(
            "POST",
            self._session_path(f"/element/{element.element_id}/value"),
            json={"text": text, "value": list(text)},
        )

    def perform_actions(self, actions: list[dict[str, Any]]) -> None:
        if not actions:
            raise ValueError("actions must be a non-empty list of input sources")
        self._request("POST", self._session_path("/actions"), json={"actions": actions})

    def execute_script(self, script: str, args: Optional[list[Any]] = None) -> Any:
        if not script:
            raise ValueError("script is required")
        response = self._request(
            "POST",
            self._session_path("/execute/sync"),
            json={"script": script, "args": list(args or [])},
        )
        return _extract_webdriver_value(response)

    def press_keycode(self, *, keycode: int, metastate: Optional[int] = None) -> None:
        params: dict[str, Any] = {"keycode": int(keycode)}
        if metastate is not None:
            params["metastate"] = int(metastate)
        self.execute_script("mobile: pressKey", [params])

    def _require_session(self) -> None:
        if not self.session_id:
            raise RuntimeError("No active Appium session. Call create_session() first.")
