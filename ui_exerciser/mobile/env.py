from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

SERVER_URL_ENV = "APPIUM_SERVER_URL"

_DOTENV_LOADED = False


def _repo_root() -> Path:
    # ui_exerciser/mobile/env.py -> repo root is two levels up
    return Path(__file__).resolve().parents[2]


def _parse_line(raw_line: str) -> Optional[tuple[str, str]]:
    line = raw_line.strip()
    if not line or line.startswith("#"):
        return None
    line = line.removeprefix("export ").strip()
    key, sep, value = line.partition("=")
    key = key.strip()
    if not sep or not key:
        return None
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        value = value[1:-1]
    return key, value


def load_dotenv(*, path: Optional[str | Path] = None, override: bool = False) -> dict[str, str]:
    """
    Read KEY=VALUE pairs from a .env file into os.environ.

    Variables already set in the environment win unless override=True.
    Returns the keys that were set.
    """
    dotenv_path = Path(path).expanduser().resolve() if path is not None else (_repo_root() / ".env")
    if not dotenv_path.exists():
        return {}
    if dotenv_path.is_dir():
        raise RuntimeError(f".env path is a directory: {dotenv_path}")

    loaded: dict[str, str] = {}
    for raw_line in dotenv_path.read_text(encoding="utf-8").splitlines():
        parsed = _parse_line(raw_line)
        if parsed is None:
            continue
        key, value = parsed
        if not override and key in os.environ:
            continue
        os.environ[key] = value
        loaded[key] = value
    return loaded


def ensure_dotenv_loaded() -> dict[str, str]:
    """Load the repo-root .env once per process."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return {}
    loaded = load_dotenv()
    _DOTENV_LOADED = True
    return loaded


def server_url_from_env() -> Optional[str]:
    value = os.environ.get(SERVER_URL_ENV, "").strip()
    return value or None
