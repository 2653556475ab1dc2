from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from .appium_http_client import AppiumHTTPClient
from .config import RunConfig
from .context import build_context
from .orchestrator import SuiteResult, run_suites
from .session import ClientFactory, open_session
from .suites import build_suites


@dataclass(frozen=True)
class ExerciserRunResult:
    session_id: Optional[str]
    suites: list[SuiteResult]

    @property
    def soft_failures(self) -> int:
        return sum(s.soft_failed for s in self.suites)

    @property
    def skipped(self) -> int:
        return sum(s.skipped for s in self.suites)


def _print_summary(results: list[SuiteResult]) -> None:
    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)
    for result in results:
        print(f"  {result.summary_line()}")
        for outcome in result.outcomes:
            if not outcome.ok:
                print(f"    - {outcome.step}: {outcome.status.value} ({outcome.reason})")


def run_exerciser(
    config: RunConfig,
    *,
    client_factory: ClientFactory = AppiumHTTPClient,
    sleep: Callable[[float], None] = time.sleep,
) -> ExerciserRunResult:
    """
    Open one session, run the configured suites against it, tear it down.

    Raises SessionError when the session cannot be created; every other
    failure is recorded as a step outcome.
    """
    suites = build_suites(config.suites)

    print("\n=== NativeBridge UI Exerciser ===")
    print(f"Appium: {config.appium_server_url}")
    print(f"App: {config.session.app_package}/{config.session.app_activity}")

    with open_session(config.session, server_url=config.appium_server_url, client_factory=client_factory) as client:
        session_id = getattr(client, "session_id", None)
        ctx = build_context(
            client,
            app_package=config.session.app_package,
            waits=config.waits,
            sleep=sleep,
            poll_for_results=config.poll_for_results,
        )
        ctx.wait(config.waits.app_launch_s)
        results = run_suites(ctx, suites)
        _print_summary(results)

    return ExerciserRunResult(session_id=session_id, suites=results)
