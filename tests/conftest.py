import pytest
from fakes import PARIS, PARIS_POIS, PARIS_STATION, FakeGeocoder, FakePOILookup
from app.schemas.itinerary import EstimateRequest
from app.services.estimator import ItineraryEstimator


@pytest.fixture
def paris_geocoder():
    return FakeGeocoder({"Paris": PARIS, "Paris Central Station": PARIS_STATION})


@pytest.fixture
def paris_pois():
    return FakePOILookup(PARIS_POIS)


@pytest.fixture
def make_estimator():
    def _make(geocoder, poi_lookup, parallel=False):
        return ItineraryEstimator(geocoder=geocoder, poi_lookup=poi_lookup, parallel=parallel)

    return _make


@pytest.fixture
def paris_request():
    def _make(**overrides):
        fields = {
            "destination": "Paris",
            "days": 1,
            "style": "culture",
            "budget": "standard",
            "travelers": "solo",
        }
        fields.update(overrides)
        return EstimateRequest(**fields)

    return _make
