"""
store.py
Marker model and the per-category MarkerStore.

A MarkerStore holds one immutable snapshot (tuple) of Markers. The only
writer is the fetch completion for its category; readers (renderer, export)
take snapshots and never see a half-written store.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Marker:
    geocode: Tuple[Any, Any]
    popup: Any
    category: str
    contact: Optional[Any] = None
    address: Optional[Any] = None
    has_contact: bool = False
    has_address: bool = False

    @property
    def latitude(self) -> Any:
        return self.geocode[0]

    @property
    def longitude(self) -> Any:
        return self.geocode[1]

    def to_dict(self) -> Dict[str, Any]:
        """Uniform marker shape; contact/address only for categories that carry them."""
        out: Dict[str, Any] = {"geocode": [self.geocode[0], self.geocode[1]], "popUp": self.popup}
        if self.has_contact:
            out["contact"] = self.contact
        if self.has_address:
            out["address"] = self.address
        return out


Subscriber = Callable[["MarkerStore", Tuple[Marker, ...]], None]


class MarkerStore:
    """Owned, replace-only cell of Markers for one category."""

    def __init__(self, category: str):
        self.category = category
        self._markers: Tuple[Marker, ...] = ()
        self._lock = threading.Lock()
        self._subscribers: List[Subscriber] = []
        self._discarded = False
        self._version = 0

    def __len__(self) -> int:
        return len(self._markers)

    def __iter__(self):
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"MarkerStore({self.category!r}, markers={len(self)}, version={self._version})"

    @property
    def version(self) -> int:
        return self._version

    @property
    def discarded(self) -> bool:
        return self._discarded

    def snapshot(self) -> Tuple[Marker, ...]:
        return self._markers

    def replace(self, markers: Iterable[Marker]) -> bool:
        """
        Swap the whole contents for ``markers``.

        Returns False (and changes nothing) once the store has been discarded.
        """
        new_markers = tuple(markers)
        with self._lock:
            if self._discarded:
                logger.debug("Ignoring late update for discarded %s store", self.category)
                return False
            self._markers = new_markers
            self._version += 1
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(self, new_markers)
            except Exception:
                logger.exception("Subscriber failed for %s store", self.category)
        return True

    def subscribe(self, callback: Subscriber) -> None:
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def discard(self) -> None:
        """Tear the store down; later replacements become no-ops."""
        with self._lock:
            self._discarded = True
            self._subscribers.clear()


def create_stores(categories) -> Dict[str, MarkerStore]:
    """One empty store per category, keyed by category key."""
    return {category.key: MarkerStore(category.key) for category in categories}
