import pytest
from fakes import PARIS, PARIS_STATION, FakeGeocoder, FakePOILookup, make_pois
from app.services.costs import MEAL_HOP_KM
from app.services.estimator import (
    STYLE_KEYWORDS,
    TIME_SLOTS,
    DestinationNotFoundError,
    score_pois,
    suggest_style,
)
from app.services.geo import haversine_distance_km
from app.services.templates import render_itinerary
from app.schemas.itinerary import POI
from app.utils.validators import assert_itinerary_valid

SLOT_LABELS = [s.label for s in TIME_SLOTS]


@pytest.mark.parametrize("num_days", [1, 2, 3, 5])
def test_every_day_has_five_slots_and_a_return_leg(
    num_days, paris_geocoder, make_estimator, paris_request
):
    estimator = make_estimator(paris_geocoder, FakePOILookup(make_pois(20)))
    itinerary = estimator.estimate(paris_request(days=num_days))

    assert len(itinerary.days) == num_days
    for i, day in enumerate(itinerary.days, start=1):
        assert day.day == i
        assert day.label == f"Day {i}"
        assert [s.label for s in day.slots] == SLOT_LABELS
        assert day.return_leg is not None

    assert_itinerary_valid(itinerary, allow_warnings=False)


def test_poi_cursor_is_shared_across_days(paris_geocoder, make_estimator, paris_request):
    """Three activity slots a day over four days consume twelve distinct POIs."""
    estimator = make_estimator(paris_geocoder, FakePOILookup(make_pois(15)))
    itinerary = estimator.estimate(paris_request(days=4))

    visited = [s.poi_name for d in itinerary.days for s in d.slots if not s.is_meal]
    assert None not in visited
    assert len(visited) == 12
    assert len(set(visited)) == 12, "a POI was visited twice"
    # All candidates score 0 so fetch order is kept
    assert visited == [f"Spot {i}" for i in range(1, 13)]


def test_exhausted_pois_fall_back_to_city_center(
    paris_geocoder, make_estimator, paris_request
):
    estimator = make_estimator(paris_geocoder, FakePOILookup(make_pois(2)))
    itinerary = estimator.estimate(paris_request(days=2))

    day1, day2 = itinerary.days
    assert day1.slots[0].poi_name == "Spot 1"
    assert day1.slots[2].poi_name == "Spot 2"

    sunset = day1.slots[3]
    assert sunset.poi_name is None
    assert sunset.location == "City Center"
    assert sunset.activity == "Explore the city center"

    for slot in day2.slots:
        if not slot.is_meal:
            assert slot.location == "City Center"

    # After a city-center stop the next leg from there is free of distance
    afternoon = day2.slots[2]
    assert afternoon.transport.origin == "Restaurant"
    assert afternoon.transport.distance_km == pytest.approx(0.0)


def test_culture_trip_to_paris_prefers_culture_pois(
    paris_geocoder, paris_pois, make_estimator, paris_request
):
    estimator = make_estimator(paris_geocoder, paris_pois)
    itinerary = estimator.estimate(paris_request())

    assert itinerary.anchor.source == "station"
    assert itinerary.anchor.name == "Central Station / Transport Hub"
    assert (itinerary.anchor.lat, itinerary.anchor.lon) == PARIS_STATION

    visited = [s.poi_name for s in itinerary.days[0].slots if not s.is_meal]
    assert visited == ["Louvre Museum", "Notre-Dame Cathedral", "Palace of Versailles"]
    for name in visited:
        assert any(w in name.lower() for w in STYLE_KEYWORDS["culture"])


def test_pois_are_fetched_around_city_center_not_anchor(
    paris_geocoder, paris_pois, make_estimator, paris_request
):
    estimator = make_estimator(paris_geocoder, paris_pois)
    estimator.estimate(paris_request(lodging="Hotel Lutetia"))

    assert paris_pois.calls == [(PARIS[0], PARIS[1], 10.0, 50)]


def test_anchor_prefers_lodging(make_estimator, paris_request):
    geocoder = FakeGeocoder(
        {
            "Paris": PARIS,
            "Hotel Lutetia, Paris": (48.8510, 2.3270),
            "Paris Central Station": PARIS_STATION,
        }
    )
    estimator = make_estimator(geocoder, FakePOILookup(make_pois(3)))
    itinerary = estimator.estimate(paris_request(lodging="Hotel Lutetia"))

    assert itinerary.anchor.source == "lodging"
    assert itinerary.anchor.name == "Hotel Lutetia"
    assert "Paris Central Station" not in geocoder.queries
    assert itinerary.days[0].start_name == "Hotel Lutetia"
    assert itinerary.days[0].slots[0].transport.origin == "Hotel Lutetia"


def test_unknown_lodging_uses_city_center_without_station_lookup(
    paris_geocoder, make_estimator, paris_request
):
    estimator = make_estimator(paris_geocoder, FakePOILookup(make_pois(3)))
    itinerary = estimator.estimate(paris_request(lodging="Nowhere Inn"))

    assert paris_geocoder.queries == ["Paris", "Nowhere Inn, Paris"]
    assert itinerary.anchor.source == "city_center"
    assert itinerary.anchor.name == "Paris City Center (Hotel not found)"
    assert (itinerary.anchor.lat, itinerary.anchor.lon) == PARIS
    assert itinerary.days[0].slots[0].transport.origin == "Paris City Center (Hotel not found)"


def test_anchor_falls_back_to_city_center(make_estimator, paris_request):
    geocoder = FakeGeocoder({"Paris": PARIS})
    estimator = make_estimator(geocoder, FakePOILookup(make_pois(3)))

    plain = estimator.estimate(paris_request())
    assert plain.anchor.source == "city_center"
    assert plain.anchor.name == "Paris City Center"
    assert (plain.anchor.lat, plain.anchor.lon) == PARIS

    with_hotel = estimator.estimate(paris_request(lodging="Nowhere Inn"))
    assert with_hotel.anchor.name == "Paris City Center (Hotel not found)"


def test_unknown_destination_aborts_before_other_lookups(make_estimator, paris_request):
    geocoder = FakeGeocoder({})
    pois = FakePOILookup(make_pois(5))
    estimator = make_estimator(geocoder, pois)

    with pytest.raises(DestinationNotFoundError) as exc:
        estimator.estimate(paris_request(destination="Atlantis"))

    assert exc.value.destination == "Atlantis"
    assert geocoder.queries == ["Atlantis"]
    assert pois.calls == []


def test_economy_family_activity_uses_activity_table(
    paris_geocoder, make_estimator, paris_request
):
    estimator = make_estimator(paris_geocoder, FakePOILookup(make_pois(3)))
    itinerary = estimator.estimate(paris_request(budget="economy", travelers="family"))

    morning, lunch, afternoon, sunset, dinner = itinerary.days[0].slots
    # flat 5 x 3, not x 4
    assert morning.activity_cost == 15
    assert afternoon.activity_cost == 15
    assert sunset.activity_cost == 15
    # meals use the meal table: base x 0.6 x 4
    assert lunch.activity_cost == pytest.approx(20 * 0.6 * 4)
    assert dinner.activity_cost == pytest.approx(35 * 0.6 * 4)


def test_meals_are_a_short_hop_and_do_not_move(
    paris_geocoder, make_estimator, paris_request
):
    rows = make_pois(3)
    estimator = make_estimator(paris_geocoder, FakePOILookup(rows))
    day = estimator.estimate(paris_request()).days[0]

    morning, lunch, afternoon, sunset, dinner = day.slots
    assert lunch.transport.distance_km == MEAL_HOP_KM
    assert dinner.transport.distance_km == MEAL_HOP_KM
    assert lunch.location == "Local Restaurant"
    assert lunch.activity == "Enjoy a local meal (standard style)"

    assert morning.transport.origin == "Central Station / Transport Hub"
    assert lunch.transport.origin == "Spot 1"
    assert afternoon.transport.origin == "Restaurant"
    assert sunset.transport.origin == "Spot 2"
    assert dinner.transport.origin == "Spot 3"

    # The afternoon leg starts where the morning stop was
    (_, lat1, lon1), (_, lat2, lon2), (_, lat3, lon3) = rows
    assert afternoon.transport.distance_km == pytest.approx(
        haversine_distance_km(lat1, lon1, lat2, lon2)
    )

    assert day.return_leg.origin == "Restaurant"
    assert day.return_leg.distance_km == pytest.approx(
        haversine_distance_km(lat3, lon3, PARIS_STATION[0], PARIS_STATION[1])
    )


def test_day_and_grand_totals(paris_geocoder, paris_pois, make_estimator, paris_request):
    estimator = make_estimator(paris_geocoder, paris_pois)
    itinerary = estimator.estimate(paris_request(days=2, budget="luxury", travelers="couple"))

    for day in itinerary.days:
        parts = sum(s.transport.cost + s.activity_cost for s in day.slots)
        assert day.total == pytest.approx(parts + day.return_leg.cost)
    assert itinerary.total == pytest.approx(sum(d.total for d in itinerary.days))


def test_zero_pois_uses_synthetic_fallback(paris_geocoder, make_estimator, paris_request):
    estimator = make_estimator(paris_geocoder, FakePOILookup([]))
    itinerary = estimator.estimate(paris_request(style="relax"))

    assert itinerary.poi_source == "fallback"
    morning, _, afternoon, sunset, _ = itinerary.days[0].slots
    # "City Park" matches the relax keywords and jumps ahead
    assert [morning.poi_name, afternoon.poi_name, sunset.poi_name] == [
        "City Park",
        "Central Main Square",
        "Historic Old Town",
    ]


def test_fallback_pois_sit_next_to_city_center(paris_geocoder, make_estimator):
    estimator = make_estimator(paris_geocoder, FakePOILookup([]))
    pois, source = estimator.fetch_candidates(
        paris_geocoder.geocode("Paris")
    )

    assert source == "fallback"
    assert [(p.name, p.lat, p.lon) for p in pois] == [
        ("Central Main Square", PARIS[0] + 0.001, PARIS[1] + 0.001),
        ("Historic Old Town", PARIS[0] - 0.002, PARIS[1]),
        ("City Park", PARIS[0], PARIS[1] - 0.002),
    ]


def test_failing_poi_lookup_is_not_fatal(paris_geocoder, make_estimator, paris_request):
    estimator = make_estimator(
        paris_geocoder, FakePOILookup(error=RuntimeError("service down"))
    )
    itinerary = estimator.estimate(paris_request(style="food"))

    assert itinerary.poi_source == "fallback"
    assert itinerary.days[0].slots[0].poi_name == "Central Main Square"


def test_scoring_adds_style_and_visual_bonuses():
    pois = [
        POI(name="Harbour Wharf", lat=0, lon=0),
        POI(name="Trevi Fountain", lat=0, lon=0),
        POI(name="Fountain Market", lat=0, lon=0),
        POI(name="Bus Depot", lat=0, lon=0),
    ]
    ranked = score_pois(pois, "food", ["FOUNTAIN", " "])

    assert [(p.name, p.score) for p in ranked] == [
        ("Fountain Market", 8),
        ("Harbour Wharf", 5),
        ("Trevi Fountain", 3),
        ("Bus Depot", 0),
    ]
    # inputs are left untouched
    assert all(p.score == 0 for p in pois)


def test_scoring_is_stable_for_ties():
    pois = [POI(name=f"Place {c}", lat=0, lon=0) for c in "ABCDE"]
    ranked = score_pois(pois, "adventure", [])
    assert [p.name for p in ranked] == [p.name for p in pois]


def test_estimate_is_deterministic(paris_geocoder, paris_pois, make_estimator, paris_request):
    request = paris_request(days=3, lodging="Nowhere Inn", visual_keywords=["tower"])

    first = make_estimator(paris_geocoder, paris_pois).estimate(request)
    second = make_estimator(paris_geocoder, paris_pois).estimate(request)

    assert first == second
    assert render_itinerary(first) == render_itinerary(second)


def test_parallel_and_sequential_lookups_agree(
    paris_geocoder, paris_pois, make_estimator, paris_request
):
    request = paris_request(days=2)
    sequential = make_estimator(paris_geocoder, paris_pois, parallel=False).estimate(request)
    parallel = make_estimator(paris_geocoder, paris_pois, parallel=True).estimate(request)

    assert sequential == parallel


@pytest.mark.parametrize(
    "keywords, expected",
    [
        (["seashore", "sandbar"], "relax"),
        (["Alps"], "adventure"),
        (["castle"], "culture"),
        (["hot dog, red hot"], "food"),
        (["tabby cat", "palace"], None),
        ([], None),
    ],
)
def test_suggest_style(keywords, expected):
    assert suggest_style(keywords) == expected
