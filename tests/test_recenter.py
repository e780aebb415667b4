import pytest

from aidmap.config import DEFAULT_CENTER, DEFAULT_ZOOM
from aidmap.recenter import (
    CENTERED,
    NO_LOCATION_YET,
    LocationFeed,
    RecenterController,
    ViewerLocation,
    Viewport,
    recenter,
)


def test_recenter_sets_center_and_fixed_zoom():
    viewport = Viewport()
    assert recenter(viewport, 40.0, -74.0) is True
    assert viewport.center == (40.0, -74.0)
    assert viewport.zoom == 13


def test_recenter_noop_on_partial_location():
    viewport = Viewport()
    assert recenter(viewport, None, -74.0) is False
    assert recenter(viewport, 40.0, None) is False
    assert viewport.center == DEFAULT_CENTER
    assert viewport.zoom == DEFAULT_ZOOM
    assert viewport.changes == 0


def test_controller_follows_successive_locations():
    viewport = Viewport()
    controller = RecenterController(viewport)
    assert controller.state == NO_LOCATION_YET
    controller.on_location({"latitude": 40.0, "longitude": -74.0})
    assert controller.state == CENTERED
    assert viewport.center == (40.0, -74.0)
    controller.on_location({"latitude": 40.1, "longitude": -74.0})
    assert viewport.center == (40.1, -74.0)
    assert viewport.zoom == 13


def test_same_location_twice_is_idempotent():
    once, twice = Viewport(), Viewport()
    RecenterController(once).on_location(ViewerLocation(40.0, -74.0))
    controller = RecenterController(twice)
    controller.on_location(ViewerLocation(40.0, -74.0))
    controller.on_location(ViewerLocation(40.0, -74.0))
    assert (once.center, once.zoom) == (twice.center, twice.zoom)


def test_partial_updates_never_move_viewport():
    viewport = Viewport()
    controller = RecenterController(viewport)
    for loc in [{}, {"latitude": 40.0}, {"longitude": -74.0}, None, ViewerLocation(latitude=41.0)]:
        assert controller.on_location(loc) is False
    assert controller.state == NO_LOCATION_YET
    assert viewport.changes == 0


def test_partial_update_after_center_keeps_last_center():
    viewport = Viewport()
    controller = RecenterController(viewport)
    controller({"latitude": 40.0, "longitude": -74.0})
    controller({"latitude": 41.0})
    assert viewport.center == (40.0, -74.0)
    assert controller.state == CENTERED


def test_viewer_location_coerce():
    assert ViewerLocation.coerce({"latitude": 1.0, "longitude": 2.0}).complete
    assert not ViewerLocation.coerce(None).complete
    with pytest.raises(TypeError):
        ViewerLocation.coerce((1.0, 2.0))


def test_feed_notifies_subscribers():
    feed = LocationFeed()
    seen = []
    feed.subscribe(seen.append, replay=False)
    feed.publish({"latitude": 40.0, "longitude": -74.0})
    assert seen == [ViewerLocation(40.0, -74.0)]
    assert feed.current == ViewerLocation(40.0, -74.0)


def test_feed_replays_current_value_on_subscribe():
    feed = LocationFeed({"latitude": 40.0, "longitude": -74.0})
    viewport = Viewport()
    feed.subscribe(RecenterController(viewport).on_location)
    assert viewport.center == (40.0, -74.0)


def test_feed_unsubscribe():
    feed = LocationFeed()
    seen = []
    feed.subscribe(seen.append, replay=False)
    feed.unsubscribe(seen.append)
    feed.publish({"latitude": 1.0, "longitude": 2.0})
    assert seen == []


def test_failing_listener_does_not_block_others(caplog):
    feed = LocationFeed()
    seen = []

    def broken(loc):
        raise RuntimeError("boom")

    feed.subscribe(broken, replay=False)
    feed.subscribe(seen.append, replay=False)
    with caplog.at_level("ERROR", logger="aidmap.recenter"):
        loc = feed.publish({"latitude": 40.0, "longitude": -74.0})
    assert seen == [loc]
    assert feed.current == loc
    assert any("Location listener failed" in r.getMessage() for r in caplog.records)
