import threading

from aidmap.categories import SHELTERS
from aidmap.map_create import marker_counts
from aidmap.recenter import CENTERED, LocationFeed
from aidmap.widget import MapWidget

from conftest import FakeClient, SHELTER_RECORD


class BlockingClient(FakeClient):
    """Holds every select_all until ``release`` is set."""

    def __init__(self, data):
        super().__init__(data)
        self.release = threading.Event()
        self.started = threading.Event()

    def select_all(self, collection):
        self.started.set()
        self.release.wait(5)
        return super().select_all(collection)


def test_mount_fetches_each_category_once(fake_client):
    widget = MapWidget(fake_client).mount()
    widget.mount()
    assert sorted(fake_client.calls) == ["cuny_food", "food", "sex_health_clinics", "shelters"]
    assert {k: len(v) for k, v in widget.markers().items()} == {
        "food": 1, "shelters": 1, "clinics": 1, "cuny_food": 1,
    }
    assert marker_counts(widget.render()) == [4]
    widget.unmount()


def test_store_changes_recompose_the_map(fake_client):
    widget = MapWidget(fake_client).mount()
    # initial empty composition plus one per populated store
    assert widget.render_count == 5
    widget.unmount()


def test_failed_category_does_not_stop_rendering(failing_food_client):
    with MapWidget(failing_food_client) as widget:
        outcomes = widget.wait_for_fetches()
        assert outcomes["food"].ok is False
        assert len(widget.stores["food"]) == 0
        assert marker_counts(widget.render()) == [3]


def test_location_updates_recenter_viewport(fake_client):
    feed = LocationFeed()
    widget = MapWidget(fake_client, location_feed=feed).mount()
    before = widget.render_count
    widget.set_location({"latitude": 40.0, "longitude": -74.0})
    assert widget.viewport.center == (40.0, -74.0)
    assert widget.viewport.zoom == 13
    assert widget.recenter.state == CENTERED
    feed.publish({"latitude": 40.1, "longitude": -74.0})
    assert widget.viewport.center == (40.1, -74.0)
    assert widget.render_count == before + 2
    widget.unmount()


def test_partial_location_changes_nothing(fake_client):
    widget = MapWidget(fake_client).mount()
    before = widget.render_count
    widget.set_location({"latitude": 40.0})
    widget.set_location({"longitude": -74.0})
    assert widget.viewport.changes == 0
    assert widget.render_count == before
    widget.unmount()


def test_location_known_before_mount_is_applied():
    feed = LocationFeed({"latitude": 40.5, "longitude": -73.8})
    widget = MapWidget(FakeClient(), location_feed=feed).mount()
    assert widget.viewport.center == (40.5, -73.8)
    widget.unmount()


def test_unmount_stops_following_location(fake_client):
    feed = LocationFeed()
    widget = MapWidget(fake_client, location_feed=feed).mount()
    widget.unmount()
    feed.publish({"latitude": 40.0, "longitude": -74.0})
    assert widget.viewport.changes == 0


def test_late_result_after_unmount_is_ignored():
    client = BlockingClient({"shelters": [SHELTER_RECORD]})
    widget = MapWidget(client, categories=[SHELTERS]).mount(wait=False)
    assert client.started.wait(5)
    widget.unmount()
    renders = widget.render_count
    client.release.set()
    outcomes = widget.wait_for_fetches(timeout=5)
    assert outcomes["shelters"].applied is False
    assert len(widget.stores["shelters"]) == 0
    assert widget.render_count == renders


def test_non_finite_coordinate_does_not_block_rendering(all_data):
    data = dict(all_data, shelters=[dict(SHELTER_RECORD, Latitude="NaN"), SHELTER_RECORD])
    with MapWidget(FakeClient(data)) as widget:
        assert len(widget.stores["shelters"]) == 2
        assert marker_counts(widget.render()) == [4]
        assert widget.render_count == 5
