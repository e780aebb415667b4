"""
recenter.py
Viewer location feed, viewport and the recenter reaction.

The hosting application publishes viewer locations into a LocationFeed.
RecenterController subscribes to it and re-centers the Viewport every time
both coordinates are known; a partial location leaves the viewport alone.
"""

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .config import DEFAULT_CENTER, DEFAULT_ZOOM, RECENTER_ZOOM

logger = logging.getLogger(__name__)

NO_LOCATION_YET = "no-location-yet"
CENTERED = "centered"


@dataclass(frozen=True)
class ViewerLocation:
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def coerce(cls, value: Any) -> "ViewerLocation":
        if value is None:
            return cls()
        if isinstance(value, ViewerLocation):
            return value
        if isinstance(value, Mapping):
            return cls(latitude=value.get("latitude"), longitude=value.get("longitude"))
        raise TypeError(f"Cannot read a viewer location from {type(value).__name__}")

    @property
    def complete(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class Viewport:
    """Center and zoom of the map view, mutated only through set_view."""

    def __init__(self, center: Sequence[float] = DEFAULT_CENTER, zoom: int = DEFAULT_ZOOM):
        self.center: Tuple[float, float] = (center[0], center[1])
        self.zoom = zoom
        self.changes = 0

    def __repr__(self) -> str:
        return f"Viewport(center={list(self.center)}, zoom={self.zoom})"

    def set_view(self, center: Sequence[float], zoom: int) -> None:
        self.center = (center[0], center[1])
        self.zoom = zoom
        self.changes += 1


def recenter(viewport: Viewport, latitude, longitude, zoom: int = RECENTER_ZOOM) -> bool:
    """Center ``viewport`` on (latitude, longitude) when both are defined."""
    if latitude is None or longitude is None:
        return False
    viewport.set_view([latitude, longitude], zoom)
    return True


class RecenterController:
    def __init__(self, viewport: Viewport, zoom: int = RECENTER_ZOOM):
        self.viewport = viewport
        self.zoom = zoom
        self.state = NO_LOCATION_YET

    def on_location(self, location: Any) -> bool:
        loc = ViewerLocation.coerce(location)
        if not recenter(self.viewport, loc.latitude, loc.longitude, self.zoom):
            return False
        if self.state != CENTERED:
            logger.debug("Viewport centered on viewer for the first time")
        self.state = CENTERED
        logger.debug("Recentered viewport on %s, %s", loc.latitude, loc.longitude)
        return True

    __call__ = on_location


LocationListener = Callable[[ViewerLocation], Any]


class LocationFeed:
    """Viewer location owned by the hosting application; consumers subscribe to changes."""

    def __init__(self, initial: Any = None):
        self._current = ViewerLocation.coerce(initial)
        self._listeners: List[LocationListener] = []
        self._lock = threading.Lock()

    @property
    def current(self) -> ViewerLocation:
        return self._current

    def subscribe(self, callback: LocationListener, replay: bool = True) -> None:
        """Register ``callback``; with ``replay`` it is called with the current value."""
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)
            current = self._current
        if replay:
            callback(current)

    def unsubscribe(self, callback: LocationListener) -> None:
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def publish(self, location: Any) -> ViewerLocation:
        loc = ViewerLocation.coerce(location)
        with self._lock:
            self._current = loc
            listeners = list(self._listeners)
        for callback in listeners:
            try:
                callback(loc)
            except Exception:
                logger.exception("Location listener failed")
        return loc
