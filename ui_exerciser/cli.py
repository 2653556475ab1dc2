#!/usr/bin/env python3
"""
CLI entry point for the UI exerciser.
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from typing import Optional

from ui_exerciser.mobile.config import load_run_config
from ui_exerciser.mobile.env import ensure_dotenv_loaded
from ui_exerciser.mobile.errors import ConfigError, SessionError
from ui_exerciser.mobile.runner import run_exerciser
from ui_exerciser.mobile.suites import SUITE_CATALOG


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description=(
            "Drive the NativeBridge debug app through its UI suites over Appium. "
            "Step failures are reported and never stop the run."
        )
    )
    p.add_argument(
        "--config",
        default="ui_exerciser/mobile_examples/nativebridge.example.json",
        help="Run config JSON path (session capabilities, waits, suites).",
    )
    p.add_argument(
        "--server-url",
        default="",
        help="Appium server URL (overrides the config file and APPIUM_SERVER_URL).",
    )
    p.add_argument(
        "--suite",
        action="append",
        default=[],
        help="Suite to run; repeat to run several in the given order (default: all).",
    )
    p.add_argument(
        "--wait-scale",
        type=float,
        default=None,
        help="Multiply every settle delay (e.g. 2.0 for a slow emulator).",
    )
    p.add_argument(
        "--list-suites",
        action="store_true",
        help="Print the suite catalog and exit.",
    )
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = _parser().parse_args(argv)

    if args.list_suites:
        for name in SUITE_CATALOG:
            print(name)
        return 0

    ensure_dotenv_loaded()
    try:
        config = load_run_config(args.config)
        if args.wait_scale is not None:
            if args.wait_scale < 0:
                raise ConfigError("--wait-scale must be >= 0")
            config = dataclasses.replace(config, waits=config.waits.scaled(args.wait_scale))
        if args.server_url:
            config = dataclasses.replace(config, appium_server_url=args.server_url)
        if args.suite:
            config = dataclasses.replace(config, suites=list(args.suite))
    except (ConfigError, OSError) as e:
        print(f"✗ Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        result = run_exerciser(config)
    except SessionError as e:
        print(f"✗ Run aborted: {e}", file=sys.stderr)
        return 1
    except ConfigError as e:
        print(f"✗ Configuration error: {e}", file=sys.stderr)
        return 2

    if result.soft_failures or result.skipped:
        print(
            f"\n⚠ All suites completed with {result.soft_failures} soft failure(s) "
            f"and {result.skipped} skipped step(s)"
        )
    else:
        print("\n✓ All suites completed successfully")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
