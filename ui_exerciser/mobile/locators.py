from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from .appium_http_client import WebDriverElementRef
from .probing import first_successful_probe


class ElementFinder(Protocol):
    def find_elements(self, *, using: str, value: str) -> list[WebDriverElementRef]: ...

    def get_element_rect(self, element: WebDriverElementRef) -> dict[str, int]: ...


@dataclass(frozen=True)
class Locator:
    using: str
    value: str


@dataclass(frozen=True)
class LocatorStrategy:
    kind: str
    build: Callable[[str, str], Locator]


@dataclass(frozen=True)
class LocatorCandidate:
    kind: str
    locator: Locator


@dataclass(frozen=True)
class LocatorSpec:
    logical_id: str
    candidates: tuple[LocatorCandidate, ...]


@dataclass(frozen=True)
class Bounds:
    x: int
    y: int
    width: int
    height: int

    @property
    def center(self) -> tuple[int, int]:
        return self.x + self.width // 2, self.y + self.height // 2

    @classmethod
    def from_rect(cls, rect: dict[str, int]) -> "Bounds":
        return cls(x=int(rect["x"]), y=int(rect["y"]), width=int(rect["width"]), height=int(rect["height"]))


@dataclass(frozen=True)
class ResolvedElement:
    """A live UI node and its bounds at resolution time. Do not keep across steps."""

    logical_id: str
    element: WebDriverElementRef
    bounds: Bounds
    strategy: str


def _resource_id_xpath(logical_id: str, app_package: str) -> Locator:
    return Locator(using="xpath", value=f"//*[@resource-id='{logical_id}']")


def _bare_id(logical_id: str, app_package: str) -> Locator:
    return Locator(using="id", value=logical_id)


def _fully_qualified_id(logical_id: str, app_package: str) -> Locator:
    return Locator(using="id", value=f"{app_package}:id/{logical_id}")


# Priority order matters: React Native testIDs surface as a bare resource-id,
# native views as "<package>:id/<name>".
DEFAULT_STRATEGIES: tuple[LocatorStrategy, ...] = (
    LocatorStrategy(kind="resource-id-xpath", build=_resource_id_xpath),
    LocatorStrategy(kind="bare-id", build=_bare_id),
    LocatorStrategy(kind="fully-qualified-id", build=_fully_qualified_id),
)


def build_locator_spec(
    logical_id: str,
    *,
    app_package: str,
    strategies: tuple[LocatorStrategy, ...] = DEFAULT_STRATEGIES,
) -> LocatorSpec:
    if not logical_id or not logical_id.strip():
        raise ValueError("logical_id must be a non-empty string")
    return LocatorSpec(
        logical_id=logical_id,
        candidates=tuple(
            LocatorCandidate(kind=s.kind, locator=s.build(logical_id, app_package)) for s in strategies
        ),
    )


class LocatorResolver:
    """
    Resolve logical element ids to live elements via ordered fallback strategies.

    Stateless: every call queries the device again.
    """

    def __init__(
        self,
        client: ElementFinder,
        *,
        app_package: str,
        strategies: tuple[LocatorStrategy, ...] = DEFAULT_STRATEGIES,
    ) -> None:
        self.client = client
        self.app_package = app_package
        self.strategies = strategies

    def spec_for(self, logical_id: str) -> LocatorSpec:
        return build_locator_spec(logical_id, app_package=self.app_package, strategies=self.strategies)

    def _probe(self, candidate: LocatorCandidate) -> Optional[tuple[WebDriverElementRef, Bounds]]:
        elements = self.client.find_elements(using=candidate.locator.using, value=candidate.locator.value)
        if not elements:
            return None
        element = elements[0]
        return element, Bounds.from_rect(self.client.get_element_rect(element))

    def resolve(
        self, logical_id: str, label: Optional[str] = None, *, quiet: bool = False
    ) -> Optional[ResolvedElement]:
        """
        Return the first element any strategy yields, or None (not found).

        Lookup errors of any kind fall through to the next strategy.
        """
        spec = self.spec_for(logical_id)
        hit = first_successful_probe(spec.candidates, self._probe)
        if hit is None:
            if not quiet:
                print(f"    ⚠ Could not find {label or logical_id} (id={logical_id!r})")
            return None
        candidate, (element, bounds) = hit
        return ResolvedElement(logical_id=logical_id, element=element, bounds=bounds, strategy=candidate.kind)
