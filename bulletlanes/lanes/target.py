"""
Render target resolution.

A screen can be pointed at a target either by selector (a registered
surface name) or by handing over the surface itself. Both forms are
resolved once, at construction, into a Surface; nothing downstream looks
at the original reference again.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from bulletlanes.exceptions import ConfigurationError
from bulletlanes.lanes.geometry import Rect

logger = logging.getLogger(__name__)


@dataclass
class Surface:
    """A rectangular area bullets are drawn into."""
    name: str
    width: float
    height: float
    left: float = 0.0
    top: float = 0.0

    def measure(self) -> Rect:
        return Rect(self.left, self.top, self.width, self.height)


@dataclass(frozen=True)
class Selector:
    """Reference to a surface by its registered name."""
    value: str


@dataclass(frozen=True)
class ElementHandle:
    """Reference to a concrete surface object."""
    element: Any


TargetRef = Union[Selector, ElementHandle]


class SurfaceRegistry:
    """Name -> Surface lookup used to resolve selectors."""

    def __init__(self):
        self._surfaces: Dict[str, Surface] = {}

    def register(self, surface: Surface) -> Surface:
        self._surfaces[surface.name] = surface
        return surface

    def unregister(self, name: str) -> None:
        self._surfaces.pop(name, None)

    def query(self, selector: str) -> Optional[Surface]:
        # Accept CSS-ish '#name' spellings
        return self._surfaces.get(selector.lstrip('#'))

    def __contains__(self, name: str) -> bool:
        return self.query(name) is not None


default_registry = SurfaceRegistry()


def as_target_ref(target: Any) -> TargetRef:
    """Wrap a raw str or Surface in the matching TargetRef variant."""
    if isinstance(target, (Selector, ElementHandle)):
        return target
    if isinstance(target, str):
        return Selector(target)
    if target is None:
        raise ConfigurationError("The display target of the bullet screen must be set")
    return ElementHandle(target)


def resolve_target(target: Any, registry: Optional[SurfaceRegistry] = None) -> Surface:
    """
    Resolve a target reference into a Surface.

    Args:
        target: Selector string, Surface, or an explicit TargetRef
        registry: Registry used for selectors (defaults to the module registry)

    Raises:
        ConfigurationError: If the target is missing, unknown or not a surface
    """
    ref = as_target_ref(target)
    registry = registry if registry is not None else default_registry

    if isinstance(ref, Selector):
        surface = registry.query(ref.value)
        if surface is None:
            raise ConfigurationError("The display target does not exist", target=ref.value)
        logger.debug("Resolved selector %r to surface %s", ref.value, surface.name)
        return surface

    if not isinstance(ref.element, Surface):
        raise ConfigurationError(
            "The display target must be a Surface",
            target=type(ref.element).__name__,
        )
    return ref.element
