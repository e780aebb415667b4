import html
import logging
import math
import os
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import folium
from branca.element import MacroElement
from folium import Html, Popup
from folium.plugins import MarkerCluster
from jinja2 import Template as JinjaTemplate

from .categories import CATEGORIES, CategoryConfig
from .config import DEFAULT_CENTER, DEFAULT_ZOOM, ICON_SIZE, TILES_ATTRIBUTION, TILES_URL
from .recenter import Viewport
from .store import Marker

logger = logging.getLogger(__name__)


# ----------------------------
# Helpers: popup content
# ----------------------------

def _esc(value: Any) -> str:
    """HTML-escape arbitrary record data for popup output."""
    if value is None:
        return ""
    escaped = html.escape(str(value))
    # Keep Jinja from treating {{ }} or {% %} in record data as template tags
    escaped = escaped.replace('{', '&#123;').replace('}', '&#125;')
    # Popup HTML is embedded in a JS template literal
    return escaped.replace('\\', '&#92;').replace('`', '&#96;')


def _popup_html(marker: Marker, category: CategoryConfig) -> str:
    lines = []
    for attr, prefix in category.popup_lines:
        lines.append(f"<p>{_esc(prefix)}{_esc(getattr(marker, attr, None))}</p>")
    return "\n".join(lines)


def _marker_icon(category: CategoryConfig) -> folium.CustomIcon:
    # One icon instance per marker: folium attaches the icon as a child element
    return folium.CustomIcon(icon_image=category.icon_url, icon_size=ICON_SIZE)


def _snapshot(store: Any) -> Tuple[Marker, ...]:
    if store is None:
        return ()
    if hasattr(store, "snapshot"):
        return store.snapshot()
    return tuple(store)


class _SetView(MacroElement):
    """Imperative ``map.setView(center, zoom)`` emitted after the map is created."""

    _template = JinjaTemplate(
        """
        {% macro script(this, kwargs) %}
        {{this._parent.get_name()}}.setView({{ this.center|tojson }}, {{ this.zoom }});
        {% endmacro %}
        """
    )

    def __init__(self, center, zoom: int):
        super().__init__()
        self._name = "SetView"
        self.center = [float(center[0]), float(center[1])]
        self.zoom = int(zoom)


# ----------------------------
# Core
# ----------------------------

def _add_category_markers(
    cluster: MarkerCluster,
    markers: Iterable[Marker],
    category: CategoryConfig,
    popup_width: int = 300,
) -> int:
    """Add one clustered pin per marker; returns how many were placed."""
    placed = 0
    for marker in markers:
        try:
            location = [float(marker.latitude), float(marker.longitude)]
        except (TypeError, ValueError):
            location = None
        if location is None or not all(math.isfinite(v) for v in location):
            logger.debug("Skipping %s marker with unusable geocode %r", category.key, marker.geocode)
            continue
        popup_obj = Popup(Html(_popup_html(marker, category), script=True), max_width=popup_width)
        folium.Marker(
            location=location,
            icon=_marker_icon(category),
            popup=popup_obj,
        ).add_to(cluster)
        placed += 1
    return placed


# ----------------------------
# Public API
# ----------------------------

def create_map(
    stores: Mapping[str, Any],
    viewport: Optional[Viewport] = None,
    *,
    categories: Iterable[CategoryConfig] = CATEGORIES,
    tiles_url: str = TILES_URL,
    attribution: str = TILES_ATTRIBUTION,
    popup_width: int = 300,
) -> folium.Map:
    """
    Compose the clustered map from the current snapshot of every store.

    stores maps category key -> MarkerStore (or any iterable of Markers).
    A missing store renders as an empty category. When ``viewport`` has been
    moved away from its initial state, the page re-centers on it once loaded.
    """
    m = folium.Map(location=list(DEFAULT_CENTER), zoom_start=DEFAULT_ZOOM, tiles=None)
    folium.TileLayer(tiles=tiles_url, attr=attribution, name="OpenStreetMap").add_to(m)

    cluster = MarkerCluster(name="Markers", chunked_loading=True)
    cluster.add_to(m)

    counts: Dict[str, int] = {}
    for category in categories:
        counts[category.key] = _add_category_markers(
            cluster, _snapshot(stores.get(category.key)), category, popup_width=popup_width
        )
    logger.debug("Composed cluster layer: %s", counts)

    if viewport is not None and viewport.changes:
        m.add_child(_SetView(viewport.center, viewport.zoom))
    return m


def marker_counts(m: folium.Map) -> List[int]:
    """Number of markers in each cluster layer of ``m`` (in insertion order)."""
    return [
        sum(1 for child in layer._children.values() if isinstance(child, folium.Marker))
        for layer in m._children.values()
        if isinstance(layer, MarkerCluster)
    ]


def render_html(m: folium.Map) -> str:
    return m.get_root().render()


def save_map(m: folium.Map, output_path: str) -> str:
    """Write the map page to ``output_path`` and return the path."""
    out_dir = os.path.dirname(output_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    m.save(output_path)
    return output_path
