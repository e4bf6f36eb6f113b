"""
Map camera transitions.

This module drives the map viewport when the selected spot changes. Moving
between two spots is a three-phase flight: recede to a wide view over the
old spot, traverse at that wide zoom to the new spot, then approach the new
spot at its close-in zoom. A newer request always preempts the running one.

The controller only talks to a MapSurface, so the same sequencing works for
the SSE-driven browser map and for the recording surface used in tests.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from logic.config import Settings

logger = logging.getLogger(__name__)

SPOT_ZOOM = 8
OVERVIEW_ZOOM = 4


@dataclass(frozen=True)
class FocusPoint:
    """A coordinate and zoom level the map should center on."""

    latitude: float
    longitude: float
    zoom: float

    def same_place(self, other: "FocusPoint") -> bool:
        return self.latitude == other.latitude and self.longitude == other.longitude

    def to_dict(self) -> Dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude, "zoom": self.zoom}


WORLD_VIEW = FocusPoint(20.0, 0.0, 2)


def focus_for_spot(spot: Optional[Dict[str, Any]], zoom: float = SPOT_ZOOM) -> Optional[FocusPoint]:
    """Focus point for a selected spot, or None when nothing is selected."""
    if spot is None:
        return None
    return FocusPoint(float(spot["latitude"]), float(spot["longitude"]), zoom)


@dataclass(frozen=True)
class TransitionRequest:
    previous: Optional[FocusPoint]
    current: Optional[FocusPoint]


class CameraPhase(str, Enum):
    IDLE = "idle"
    RECEDING = "receding"
    TRAVERSING = "traversing"
    APPROACHING = "approaching"


class MapSurface(Protocol):
    """Viewport operations the controller needs from a map widget.

    stop() must halt any motion in progress and guarantee that the pending
    on_complete callback of that motion is never invoked.
    """

    def set_viewport(self, latitude: float, longitude: float, zoom: float) -> None:
        ...

    def fly_to(
            self,
            latitude: float,
            longitude: float,
            zoom: float,
            duration: float,
            on_complete: Optional[Callable[[], None]] = None,
    ) -> None:
        ...

    def stop(self) -> None:
        ...


Step = Tuple[CameraPhase, FocusPoint, float]


class CameraTransitionController:
    """Turns transition requests into viewport moves on a MapSurface.

    Each request takes a new generation number. Phase completion callbacks
    capture the generation they were issued under and are ignored once a
    newer request exists, so a superseded flight can never resume.

    Args:
        surface: Map surface to drive.
        recede_seconds: Duration of the recede phase.
        traverse_seconds: Duration of the traverse phase.
        approach_seconds: Duration of the approach phase.
        overview_zoom: Wide zoom used by the recede and traverse phases.
    """

    def __init__(
            self,
            surface: MapSurface,
            recede_seconds: float = 1.0,
            traverse_seconds: float = 1.0,
            approach_seconds: float = 1.5,
            overview_zoom: float = OVERVIEW_ZOOM,
    ):
        self._surface = surface
        self.recede_seconds = recede_seconds
        self.traverse_seconds = traverse_seconds
        self.approach_seconds = approach_seconds
        self.overview_zoom = overview_zoom

        self._generation = 0
        self._task: Optional[asyncio.Task] = None
        self._disposed = False

        self.phase = CameraPhase.IDLE
        self.viewport: Optional[FocusPoint] = None

    @classmethod
    def from_settings(cls, surface: MapSurface, settings: Settings) -> "CameraTransitionController":
        return cls(
            surface,
            recede_seconds=settings.recede_seconds,
            traverse_seconds=settings.traverse_seconds,
            approach_seconds=settings.approach_seconds,
            overview_zoom=settings.overview_zoom,
        )

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_animating(self) -> bool:
        return self._task is not None and not self._task.done()

    def on_selection(self, previous: Optional[Dict[str, Any]], selected: Optional[Dict[str, Any]]) -> None:
        """SelectionStore listener: focus the newly selected spot."""
        self.request(focus_for_spot(previous), focus_for_spot(selected))

    def plan(self, previous: FocusPoint, current: FocusPoint) -> List[Step]:
        """Phases needed to move from previous to current.

        Args:
            previous: Focus point of the earlier selection.
            current: Focus point to end on.

        Returns:
            Ordered (phase, target, duration) steps. Empty when the viewport
            is already exactly at current.
        """
        if previous.same_place(current):
            if self.viewport == current:
                return []
            return [(CameraPhase.APPROACHING, current, self.approach_seconds)]

        wide_previous = FocusPoint(previous.latitude, previous.longitude, self.overview_zoom)
        wide_current = FocusPoint(current.latitude, current.longitude, self.overview_zoom)
        return [
            (CameraPhase.RECEDING, wide_previous, self.recede_seconds),
            (CameraPhase.TRAVERSING, wide_current, self.traverse_seconds),
            (CameraPhase.APPROACHING, current, self.approach_seconds),
        ]

    def request(
            self, previous: Optional[FocusPoint], current: Optional[FocusPoint]
    ) -> Optional[asyncio.Task]:
        """Start a transition, preempting any transition in flight.

        Must be called from the event loop that should run the animation.

        Args:
            previous: Where the camera is coming from, or None for a first focus.
            current: Where the camera should end up, or None for nothing.

        Returns:
            Task running the phase sequence, or None when no animation is needed.
        """
        if self._disposed:
            return None

        self._generation += 1
        token = self._generation
        self._halt()

        if current is None:
            self._set_phase(CameraPhase.IDLE)
            return None

        if previous is None:
            self._surface.set_viewport(current.latitude, current.longitude, current.zoom)
            self.viewport = current
            self._set_phase(CameraPhase.IDLE)
            return None

        steps = self.plan(previous, current)
        if not steps:
            self._set_phase(CameraPhase.IDLE)
            return None

        self._task = asyncio.get_running_loop().create_task(self._run(token, steps))
        return self._task

    def submit(self, transition: TransitionRequest) -> Optional[asyncio.Task]:
        return self.request(transition.previous, transition.current)

    def dispose(self) -> None:
        """Halt any flight and ignore all further requests and callbacks."""
        self._disposed = True
        self._generation += 1
        self._halt()
        self._set_phase(CameraPhase.IDLE)

    def _halt(self) -> None:
        if self._task is not None and not self._task.done():
            self._surface.stop()
            self._task.cancel()
            # Interrupted mid-flight: the real viewport is somewhere in between.
            self.viewport = None
        self._task = None

    def _set_phase(self, phase: CameraPhase) -> None:
        if phase != self.phase:
            logger.debug("Camera %s -> %s (generation %d)", self.phase.value, phase.value, self._generation)
        self.phase = phase

    async def _run(self, token: int, steps: List[Step]) -> None:
        for phase, target, duration in steps:
            if token != self._generation:
                return
            self._set_phase(phase)
            await self._fly(token, target, duration)
            if token != self._generation:
                return
            self.viewport = target
        self._set_phase(CameraPhase.IDLE)

    async def _fly(self, token: int, target: FocusPoint, duration: float) -> None:
        done = asyncio.get_running_loop().create_future()

        def on_complete() -> None:
            if token == self._generation and not done.done():
                done.set_result(None)

        self._surface.fly_to(target.latitude, target.longitude, target.zoom, duration, on_complete)
        try:
            # The duration doubles as the completion timeout.
            await asyncio.wait_for(done, timeout=duration)
        except asyncio.TimeoutError:
            logger.debug("Camera phase %s timed out after %.2fs", self.phase.value, duration)
