"""
Appium-facing core of the exerciser.

- Locators: logical ids resolved through ordered fallback strategies.
- Gestures: swipe/long-press/tap synthesized as W3C pointer waypoints.
- Dialogs: best-effort alert and permission prompt dismissal.
- Orchestrator: ordered suites of soft-failing steps.

The session is created once by the runner and passed explicitly to every
component through ExerciserContext.
"""

from .appium_http_client import AppiumHTTPClient, AppiumHTTPError, WebDriverElementRef
from .context import ExerciserContext, build_context
from .dialogs import DialogPolicy
from .errors import ConfigError, ExerciserError, SessionError
from .gestures import GesturePath, GestureSynthesizer, build_long_press_path, build_swipe_path
from .locators import Bounds, LocatorResolver, ResolvedElement
from .orchestrator import Step, StepOutcome, Suite, SuiteResult, run_suite, run_suites
from .runner import run_exerciser

__all__ = [
    "AppiumHTTPClient",
    "AppiumHTTPError",
    "WebDriverElementRef",
    "ExerciserContext",
    "build_context",
    "DialogPolicy",
    "ConfigError",
    "ExerciserError",
    "SessionError",
    "GesturePath",
    "GestureSynthesizer",
    "build_long_press_path",
    "build_swipe_path",
    "Bounds",
    "LocatorResolver",
    "ResolvedElement",
    "Step",
    "StepOutcome",
    "Suite",
    "SuiteResult",
    "run_suite",
    "run_suites",
    "run_exerciser",
]
