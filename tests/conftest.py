import threading

import pytest

from aidmap.exceptions import BackendError


FOOD_RECORD = {
    "LATITUDE": 40.7,
    "LONGITUDE": -73.9,
    "PROGRAM": "Community Pantry",
    "PHONE": "555-1234",
    "ADDRESS": "1 Main St",
}
SHELTER_RECORD = {"Latitude": 40.81, "Longitude": -73.95, "Center Name": "Harlem Center"}
CLINIC_RECORD = {"LATITUDE": 40.69, "LONGITUDE": -73.98, "Clinic Name": "Fort Greene Clinic"}
CUNY_RECORD = {"Latitude": 40.82, "Longitude": -73.94, "School": "City College", "phone": "212-650-0000"}


class FakeClient:
    """In-memory stand-in for CollectionClient."""

    def __init__(self, data=None, errors=None):
        self.data = data or {}
        self.errors = errors or {}
        self.calls = []
        self.closed = False
        self._lock = threading.Lock()

    def select_all(self, collection):
        with self._lock:
            self.calls.append(collection)
        if collection in self.errors:
            raise self.errors[collection]
        return self.data.get(collection, [])

    def close(self):
        self.closed = True


@pytest.fixture
def all_data():
    return {
        "food": [FOOD_RECORD],
        "shelters": [SHELTER_RECORD],
        "sex_health_clinics": [CLINIC_RECORD],
        "cuny_food": [CUNY_RECORD],
    }


@pytest.fixture
def fake_client(all_data):
    return FakeClient(all_data)


@pytest.fixture
def failing_food_client(all_data):
    return FakeClient(all_data, errors={"food": BackendError("food", "connection refused")})
