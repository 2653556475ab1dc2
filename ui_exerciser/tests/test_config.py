"""Tests for run configuration loading."""
import json
import tempfile
from pathlib import Path

import pytest

from ui_exerciser.mobile.config import (
    DEFAULT_APPIUM_SERVER_URL,
    load_json_file,
    load_run_config,
    parse_run_config,
)
from ui_exerciser.mobile.errors import ConfigError
from ui_exerciser.mobile.waits import Waits


def _write(payload) -> str:
    with tempfile.NamedTemporaryFile(mode="w", delete=False, suffix=".json") as f:
        f.write(payload if isinstance(payload, str) else json.dumps(payload))
        return f.name


def test_minimal_config_uses_defaults(monkeypatch):
    monkeypatch.delenv("APPIUM_SERVER_URL", raising=False)
    config = parse_run_config({"session": {"app_package": "com.nativebridge.io"}}, context="test")

    assert config.appium_server_url == DEFAULT_APPIUM_SERVER_URL
    assert config.session.app_activity == "com.nativebridge.io.MainActivity"
    assert config.session.no_reset is True
    assert config.waits == Waits()
    assert config.suites is None


def test_server_url_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("APPIUM_SERVER_URL", "http://device-host:4723")
    config = parse_run_config({"session": {"app_package": "a.b"}}, context="test")
    assert config.appium_server_url == "http://device-host:4723"


def test_session_payload_carries_pass_through_capabilities():
    config = parse_run_config(
        {"appium_server_url": "http://x", "session": {"app_package": "com.nativebridge.io"}}, context="test"
    )
    caps = config.session.to_session_payload()["capabilities"]["alwaysMatch"]

    assert caps["platformName"] == "Android"
    assert caps["appium:automationName"] == "UiAutomator2"
    assert caps["appium:appPackage"] == "com.nativebridge.io"
    assert caps["appium:newCommandTimeout"] == 300
    assert caps["appium:noReset"] is True
    assert caps["appium:ensureWebviewsHavePages"] is True
    assert caps["appium:nativeWebScreenshot"] is True


def test_wait_overrides_and_scale():
    config = parse_run_config(
        {"session": {"app_package": "a.b"}, "waits": {"cpu_test": 30, "network_s": 4}, "wait_scale": 0.5},
        context="test",
    )
    assert config.waits.cpu_test_s == 15.0
    assert config.waits.network_s == 2.0
    assert config.waits.tab_settle_s == 0.5


def test_unknown_wait_is_rejected():
    with pytest.raises(ConfigError):
        parse_run_config({"session": {"app_package": "a.b"}, "waits": {"coffee": 1}}, context="test")


def test_missing_session_is_rejected():
    with pytest.raises(ConfigError):
        parse_run_config({}, context="test")


def test_non_boolean_flag_is_rejected():
    with pytest.raises(ConfigError):
        parse_run_config({"session": {"app_package": "a.b", "no_reset": "yes"}}, context="test")


def test_load_run_config_from_file():
    path = _write({"appium_server_url": "http://x", "session": {"app_package": "a.b"}, "suites": ["UI"]})
    try:
        config = load_run_config(path)
        assert config.suites == ["UI"]
    finally:
        Path(path).unlink()


def test_load_json_file_rejects_non_object():
    path = _write("[1, 2]")
    try:
        with pytest.raises(ConfigError):
            load_json_file(path)
    finally:
        Path(path).unlink()


def test_load_json_file_missing_file():
    with pytest.raises(FileNotFoundError):
        load_json_file("/nonexistent/run.json")


def test_example_config_is_valid():
    example = Path(__file__).resolve().parents[1] / "mobile_examples" / "nativebridge.example.json"
    config = load_run_config(str(example))
    assert config.session.app_package == "com.nativebridge.io"
