# Project structure:
#
# aidmap_project/
# ├── aidmap/                       # Python package
# │   ├── __init__.py
# │   ├── config.py                 # constants and environment settings
# │   ├── categories.py             # per-category field mappings and icons
# │   ├── normalize.py              # raw record -> Marker
# │   ├── store.py                  # Marker and per-category MarkerStore
# │   ├── backend.py                # PostgREST "select all" client
# │   ├── fetch.py                  # concurrent per-category fetches
# │   ├── recenter.py               # viewer location feed and viewport
# │   ├── map_create.py             # folium cluster renderer
# │   ├── widget.py                 # mount / render / unmount lifecycle
# │   └── export.py                 # marker table export
# ├── app.py                        # command line entry point
# └── tests/

import os
from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigError

# Backend collections
FOOD_COLLECTION = "food"
SHELTERS_COLLECTION = "shelters"
CLINICS_COLLECTION = "sex_health_clinics"
CUNY_FOOD_COLLECTION = "cuny_food"

# Base map
TILES_URL = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"
TILES_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
)
DEFAULT_CENTER = (40.768538, -73.964741)
DEFAULT_ZOOM = 13
RECENTER_ZOOM = 13

# Icons (display size in pixels)
ICON_SIZE = (38, 38)
FOOD_ICON_URL = "https://www.svgrepo.com/show/494450/food-market-purchasing.svg"
SHELTER_ICON_URL = "https://www.svgrepo.com/show/126102/shelter.svg"
CLINIC_ICON_URL = "https://www.svgrepo.com/show/326199/health-worker.svg"
CUNY_FOOD_ICON_URL = "https://www.svgrepo.com/show/533533/school-flag.svg"

DEFAULT_OUTPUT_HTML = "aidmap.html"
REST_PATH = "/rest/v1"


def _env_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"AIDMAP_HTTP_TIMEOUT must be a number, got {raw!r}")
    return value if value > 0 else None


@dataclass(frozen=True)
class Settings:
    supabase_url: str
    supabase_key: str
    http_timeout: Optional[float] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """Build settings from SUPABASE_* / AIDMAP_* environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            supabase_url=env.get("SUPABASE_URL", "").strip().rstrip("/"),
            supabase_key=env.get("SUPABASE_KEY", "").strip(),
            http_timeout=_env_timeout(env.get("AIDMAP_HTTP_TIMEOUT")),
            log_level=env.get("AIDMAP_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )

    def require_backend(self) -> "Settings":
        missing = [
            name
            for name, value in (("SUPABASE_URL", self.supabase_url), ("SUPABASE_KEY", self.supabase_key))
            if not value
        ]
        if missing:
            raise ConfigError(f"Missing backend settings: {', '.join(missing)}")
        return self
