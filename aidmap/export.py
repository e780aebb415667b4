"""
export.py
Flatten the marker stores into a table (one row per marker).
"""

from typing import Any, Mapping

import pandas as pd

COLUMNS = ["category", "latitude", "longitude", "label", "contact", "address"]


def markers_frame(stores: Mapping[str, Any]) -> pd.DataFrame:
    rows = []
    for key, store in stores.items():
        markers = store.snapshot() if hasattr(store, "snapshot") else tuple(store)
        for marker in markers:
            rows.append({
                "category": key,
                "latitude": marker.latitude,
                "longitude": marker.longitude,
                "label": marker.popup,
                "contact": marker.contact,
                "address": marker.address,
            })
    return pd.DataFrame(rows, columns=COLUMNS)


def write_markers_csv(stores: Mapping[str, Any], csv_path: str) -> str:
    """Write every marker to ``csv_path``; returns the path."""
    markers_frame(stores).to_csv(csv_path, index=False)
    return csv_path
