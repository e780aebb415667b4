"""
fetch.py
Issue one read per category and feed each result into its MarkerStore.

Fetches are independent: a failing category is logged and leaves its store
as it was, while the other categories populate normally. Nothing here
retries.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional

from .categories import CATEGORIES, CategoryConfig
from .normalize import normalize_records
from .store import MarkerStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchOutcome:
    category: str
    ok: bool
    count: int = 0
    error: Optional[str] = None
    applied: bool = False


def fetch_category(
    client,
    category: CategoryConfig,
    store: MarkerStore,
    cancel_event: Optional[threading.Event] = None,
) -> FetchOutcome:
    """Read ``category``'s collection, normalize it and replace ``store``."""
    logger.info("Fetching %s...", category.title or category.key)
    try:
        records = list(client.select_all(category.collection) or [])
        markers = normalize_records(records, category)
    except Exception as exc:
        logger.error("Error fetching %s: %s", category.title or category.key, exc)
        return FetchOutcome(category.key, ok=False, error=str(exc))

    if cancel_event is not None and cancel_event.is_set():
        logger.debug("Discarding %s result that arrived after teardown", category.key)
        return FetchOutcome(category.key, ok=True, count=len(markers))

    applied = store.replace(markers)
    logger.info("Prepared %d of %d %s records as markers",
                len(markers), len(records), category.title or category.key)
    return FetchOutcome(category.key, ok=True, count=len(markers), applied=applied)


def submit_fetches(
    executor: ThreadPoolExecutor,
    client,
    stores: Mapping[str, MarkerStore],
    categories: Iterable[CategoryConfig] = CATEGORIES,
    cancel_event: Optional[threading.Event] = None,
):
    """Schedule one fetch per category; returns {future: category key}."""
    return {
        executor.submit(fetch_category, client, category, stores[category.key], cancel_event): category.key
        for category in categories
    }


def fetch_all(
    client,
    stores: Mapping[str, MarkerStore],
    categories: Iterable[CategoryConfig] = CATEGORIES,
    *,
    max_workers: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
    progress_callback=None,
) -> Dict[str, FetchOutcome]:
    """
    Fetch every category concurrently and wait for all of them.

    Returns {category key: FetchOutcome}. Category failures are reported in
    the outcome, never raised.
    """
    categories = list(categories)
    if not categories:
        return {}
    outcomes: Dict[str, FetchOutcome] = {}
    workers = max_workers or len(categories)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="aidmap-fetch") as executor:
        futures = submit_fetches(executor, client, stores, categories, cancel_event)
        for future in as_completed(futures):
            key = futures[future]
            outcomes[key] = future.result()
            if progress_callback:
                progress_callback(len(outcomes))
    return outcomes
