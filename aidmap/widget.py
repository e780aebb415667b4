"""
widget.py
The map widget lifecycle: mount, location updates, render, unmount.

mount() creates one empty MarkerStore per category and starts exactly one
fetch per category. Every store replacement re-composes the cluster layer;
every complete viewer location re-centers the viewport. unmount() discards
the stores so fetches that finish afterwards change nothing.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait as wait_futures
from typing import Any, Dict, Iterable, Optional, Tuple

import folium

from .categories import CATEGORIES, CategoryConfig
from .fetch import FetchOutcome, submit_fetches
from .map_create import create_map
from .recenter import LocationFeed, RecenterController, Viewport
from .store import Marker, MarkerStore, create_stores

logger = logging.getLogger(__name__)


class MapWidget:
    def __init__(
        self,
        client,
        location_feed: Optional[LocationFeed] = None,
        categories: Iterable[CategoryConfig] = CATEGORIES,
        **map_options: Any,
    ):
        self.client = client
        self.location_feed = location_feed if location_feed is not None else LocationFeed()
        self.categories = tuple(categories)
        self.map_options = map_options
        self.viewport = Viewport()
        self.recenter = RecenterController(self.viewport)
        self.stores: Dict[str, MarkerStore] = {}
        self.render_count = 0
        self._map: Optional[folium.Map] = None
        self._render_lock = threading.RLock()
        self._cancel_event = threading.Event()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._futures: Dict[Any, str] = {}
        self._mounted = False

    @property
    def mounted(self) -> bool:
        return self._mounted

    # ----------------------------
    # Lifecycle
    # ----------------------------

    def mount(self, wait: bool = True) -> "MapWidget":
        """Create the stores and start one fetch per category (once per mount)."""
        if self._mounted:
            return self
        self._mounted = True
        self._cancel_event = threading.Event()
        self.stores = create_stores(self.categories)
        for store in self.stores.values():
            store.subscribe(self._on_store_change)
        self.location_feed.subscribe(self._on_location)
        self._recompose()

        self._executor = ThreadPoolExecutor(
            max_workers=max(1, len(self.categories)), thread_name_prefix="aidmap-fetch"
        )
        self._futures = submit_fetches(
            self._executor, self.client, self.stores, self.categories, self._cancel_event
        )
        if wait:
            self.wait_for_fetches()
        return self

    def wait_for_fetches(self, timeout: Optional[float] = None) -> Dict[str, FetchOutcome]:
        """Block until the mount fetches finish; returns outcomes of the finished ones."""
        done, _ = wait_futures(list(self._futures), timeout=timeout)
        return {self._futures[f]: f.result() for f in done}

    def unmount(self) -> None:
        if not self._mounted:
            return
        self._mounted = False
        self._cancel_event.set()
        for store in self.stores.values():
            store.discard()
        self.location_feed.unsubscribe(self._on_location)
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
        logger.debug("Map widget unmounted")

    def __enter__(self) -> "MapWidget":
        return self.mount()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unmount()

    # ----------------------------
    # Inputs
    # ----------------------------

    def set_location(self, location: Any) -> None:
        """Push the hosting application's latest viewer location."""
        self.location_feed.publish(location)

    def _on_location(self, location) -> None:
        if self.recenter.on_location(location):
            self._recompose()

    def _on_store_change(self, store: MarkerStore, markers: Tuple[Marker, ...]) -> None:
        logger.debug("%s store replaced with %d markers", store.category, len(markers))
        self._recompose()

    # ----------------------------
    # Output
    # ----------------------------

    def _recompose(self) -> None:
        with self._render_lock:
            self._map = create_map(self.stores, self.viewport, categories=self.categories, **self.map_options)
            self.render_count += 1

    def render(self) -> folium.Map:
        with self._render_lock:
            if self._map is None:
                self._recompose()
            return self._map

    def markers(self) -> Dict[str, Tuple[Marker, ...]]:
        """Current snapshot of every store."""
        return {key: store.snapshot() for key, store in self.stores.items()}
