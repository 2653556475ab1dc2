from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .env import server_url_from_env
from .errors import ConfigError
from .waits import Waits


DEFAULT_APPIUM_SERVER_URL = "http://127.0.0.1:4723"


def load_json_file(path: str) -> dict[str, Any]:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"JSON file not found: {file_path}")
    if file_path.is_dir():
        raise IsADirectoryError(f"Expected a JSON file but found a directory: {file_path}")

    raw = file_path.read_text(encoding="utf-8")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected top-level JSON object in {file_path}")
    return data


def require_key(obj: dict[str, Any], key: str, *, context: str) -> Any:
    if key not in obj:
        raise ConfigError(f"Missing required key '{key}' in {context}")
    return obj[key]


@dataclass(frozen=True)
class SessionConfig:
    """
    Pass-through capabilities for the device session.

    The exerciser never interprets these; they only shape the new-session payload.
    """

    app_package: str
    app_activity: str
    platform_name: str = "Android"
    automation_name: str = "UiAutomator2"
    new_command_timeout_s: int = 300
    no_reset: bool = True
    ensure_webviews_have_pages: bool = True
    native_web_screenshot: bool = True
    implicit_wait_s: float = 10.0

    def to_session_payload(self) -> dict[str, Any]:
        always_match = {
            "platformName": self.platform_name,
            "appium:automationName": self.automation_name,
            "appium:appPackage": self.app_package,
            "appium:appActivity": self.app_activity,
            "appium:newCommandTimeout": self.new_command_timeout_s,
            "appium:noReset": self.no_reset,
            "appium:ensureWebviewsHavePages": self.ensure_webviews_have_pages,
            "appium:nativeWebScreenshot": self.native_web_screenshot,
        }
        return {"capabilities": {"alwaysMatch": always_match, "firstMatch": [{}]}}


@dataclass(frozen=True)
class RunConfig:
    appium_server_url: str
    session: SessionConfig
    waits: Waits = field(default_factory=Waits)
    poll_for_results: bool = False
    suites: Optional[list[str]] = None


def _as_non_empty_str(value: Any, *, field: str, context: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{context}: '{field}' must be a non-empty string")
    return value.strip()


def _as_bool(value: Any, *, field: str, context: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{context}: '{field}' must be true or false")
    return value


def _as_non_negative_float(value: Any, *, field: str, context: str) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{context}: '{field}' must be a number")
    try:
        parsed = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{context}: '{field}' must be a number") from e
    if parsed < 0:
        raise ConfigError(f"{context}: '{field}' must be >= 0")
    return parsed


def parse_session_config(raw: Any, *, context: str) -> SessionConfig:
    if not isinstance(raw, dict):
        raise ConfigError(f"{context}: 'session' must be an object")
    ctx = f"{context}: session"
    app_package = _as_non_empty_str(require_key(raw, "app_package", context=ctx), field="app_package", context=ctx)
    app_activity = raw.get("app_activity") or f"{app_package}.MainActivity"

    timeout = _as_non_negative_float(
        raw.get("new_command_timeout_s", 300), field="new_command_timeout_s", context=ctx
    )
    return SessionConfig(
        app_package=app_package,
        app_activity=_as_non_empty_str(app_activity, field="app_activity", context=ctx),
        platform_name=_as_non_empty_str(raw.get("platform_name", "Android"), field="platform_name", context=ctx),
        automation_name=_as_non_empty_str(
            raw.get("automation_name", "UiAutomator2"), field="automation_name", context=ctx
        ),
        new_command_timeout_s=int(timeout),
        no_reset=_as_bool(raw.get("no_reset", True), field="no_reset", context=ctx),
        ensure_webviews_have_pages=_as_bool(
            raw.get("ensure_webviews_have_pages", True), field="ensure_webviews_have_pages", context=ctx
        ),
        native_web_screenshot=_as_bool(
            raw.get("native_web_screenshot", True), field="native_web_screenshot", context=ctx
        ),
        implicit_wait_s=_as_non_negative_float(
            raw.get("implicit_wait_s", 10), field="implicit_wait_s", context=ctx
        ),
    )


def parse_run_config(raw: dict[str, Any], *, context: str) -> RunConfig:
    server_url = raw.get("appium_server_url") or server_url_from_env() or DEFAULT_APPIUM_SERVER_URL
    session = parse_session_config(require_key(raw, "session", context=context), context=context)

    waits_raw = raw.get("waits", {})
    if not isinstance(waits_raw, dict):
        raise ConfigError(f"{context}: 'waits' must be an object when provided")
    waits = Waits().with_overrides(waits_raw)
    if "wait_scale" in raw:
        waits = waits.scaled(_as_non_negative_float(raw["wait_scale"], field="wait_scale", context=context))

    suites_raw = raw.get("suites")
    suites: Optional[list[str]] = None
    if suites_raw is not None:
        if not isinstance(suites_raw, list) or not suites_raw:
            raise ConfigError(f"{context}: 'suites' must be a non-empty list when provided")
        suites = [
            _as_non_empty_str(item, field=f"suites[{idx}]", context=context) for idx, item in enumerate(suites_raw, 1)
        ]

    return RunConfig(
        appium_server_url=_as_non_empty_str(server_url, field="appium_server_url", context=context),
        session=session,
        waits=waits,
        poll_for_results=_as_bool(raw.get("poll_for_results", False), field="poll_for_results", context=context),
        suites=suites,
    )


def load_run_config(path: str) -> RunConfig:
    return parse_run_config(load_json_file(path), context=path)
