from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Optional

from .context import ExerciserContext


class StepStatus(str, enum.Enum):
    PASSED = "passed"
    SOFT_FAILED = "soft_failed"
    SKIPPED = "skipped"


class SuiteState(str, enum.Enum):
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass(frozen=True)
class StepOutcome:
    status: StepStatus
    reason: Optional[str] = None
    step: str = ""

    @classmethod
    def passed(cls) -> "StepOutcome":
        return cls(status=StepStatus.PASSED)

    @classmethod
    def soft_failed(cls, reason: str) -> "StepOutcome":
        return cls(status=StepStatus.SOFT_FAILED, reason=reason)

    @classmethod
    def skipped(cls, reason: str) -> "StepOutcome":
        return cls(status=StepStatus.SKIPPED, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status is StepStatus.PASSED

    def named(self, step: str) -> "StepOutcome":
        return StepOutcome(status=self.status, reason=self.reason, step=step)


StepAction = Callable[[ExerciserContext], Optional[StepOutcome]]


@dataclass(frozen=True)
class Step:
    """
    One self-contained unit of a suite.

    `action` returns None for a pass or an explicit outcome. When `requires`
    names an earlier step of the same suite that did not pass, the step is
    reported as skipped without running.
    """

    name: str
    action: StepAction
    requires: Optional[str] = None


@dataclass(frozen=True)
class Suite:
    name: str
    steps: tuple[Step, ...]
    navigation: Optional[Step] = None

    def all_steps(self) -> tuple[Step, ...]:
        if self.navigation is None:
            return self.steps
        return (self.navigation,) + self.steps


@dataclass
class SuiteResult:
    name: str
    outcomes: list[StepOutcome] = field(default_factory=list)
    state: SuiteState = SuiteState.RUNNING

    def _count(self, status: StepStatus) -> int:
        return sum(1 for o in self.outcomes if o.status is status)

    @property
    def passed(self) -> int:
        return self._count(StepStatus.PASSED)

    @property
    def soft_failed(self) -> int:
        return self._count(StepStatus.SOFT_FAILED)

    @property
    def skipped(self) -> int:
        return self._count(StepStatus.SKIPPED)

    def summary_line(self) -> str:
        return (
            f"{self.name}: {self.passed} passed, {self.soft_failed} soft-failed, "
            f"{self.skipped} skipped ({len(self.outcomes)} step(s))"
        )


def _print_outcome(outcome: StepOutcome) -> None:
    if outcome.status is StepStatus.PASSED:
        print("  ✓ passed")
    elif outcome.status is StepStatus.SKIPPED:
        print(f"  ⚠ skipped: {outcome.reason}")
    else:
        print(f"  ✗ soft-failed: {outcome.reason}")


def run_step(ctx: ExerciserContext, step: Step, *, earlier: dict[str, StepOutcome]) -> StepOutcome:
    if step.requires is not None:
        prerequisite = earlier.get(step.requires)
        if prerequisite is None or not prerequisite.ok:
            return StepOutcome.skipped(f"requires {step.requires}").named(step.name)
    try:
        outcome = step.action(ctx)
    except Exception as e:
        return StepOutcome.soft_failed(f"{type(e).__name__}: {e}").named(step.name)
    return (outcome or StepOutcome.passed()).named(step.name)


def run_suite(ctx: ExerciserContext, suite_name: str, steps: list[Step] | tuple[Step, ...]) -> SuiteResult:
    """
    Run every step in declared order and record one outcome per step.

    Step errors never escape; the suite always completes.
    """
    result = SuiteResult(name=suite_name)
    earlier: dict[str, StepOutcome] = {}

    print(f"\n=== Suite: {suite_name} ===")
    for idx, step in enumerate(steps, 1):
        print(f"\n[{idx}/{len(steps)}] {step.name}")
        outcome = run_step(ctx, step, earlier=earlier)
        _print_outcome(outcome)
        result.outcomes.append(outcome)
        earlier[step.name] = outcome

    result.state = SuiteState.COMPLETED
    return result


def run_suites(ctx: ExerciserContext, suites: list[Suite]) -> list[SuiteResult]:
    return [run_suite(ctx, suite.name, suite.all_steps()) for suite in suites]
