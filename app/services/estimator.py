from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
from urllib.parse import quote

from app.core.config import settings
from app.schemas.itinerary import (
    POI,
    Anchor,
    Coordinates,
    DayPlan,
    EstimateRequest,
    Itinerary,
    SlotPlan,
    TransportLeg,
    TravelNote,
)
from app.services.costs import (
    MEAL_HOP_KM,
    activity_cost,
    meal_cost,
    transport_cost,
)
from app.services.geo import geocoding_client, haversine_distance_km
from app.services.wikipedia import poi_client
from app.utils.logger import get_logger

logger = get_logger(__name__)


# Configuration

STYLE_KEYWORDS = {
    "adventure": ["park", "mount", "hill", "trail", "tower", "bridge", "zoo", "forest"],
    "culture": [
        "museum",
        "cathedral",
        "church",
        "palace",
        "castle",
        "theatre",
        "opera",
        "temple",
        "monument",
    ],
    "food": ["market", "square", "plaza", "street", "wharf"],
    "relax": ["garden", "park", "beach", "lake", "river", "plaza"],
}

STYLE_KEYWORD_BONUS = 5
VISUAL_KEYWORD_BONUS = 3

# Checked in order against the classifier's top label
VISUAL_STYLE_HINTS = [
    (("beach", "sea", "shore", "sand"), "relax"),
    (("mountain", "cliff", "alps", "valley"), "adventure"),
    (("palace", "church", "castle", "building"), "culture"),
    (("food", "fruit", "vegetable", "hot dog"), "food"),
]

# Used when the POI lookup comes back empty: (name, dlat, dlon)
FALLBACK_POIS = [
    ("Central Main Square", 0.001, 0.001),
    ("Historic Old Town", -0.002, 0.0),
    ("City Park", 0.0, -0.002),
]

STATION_ANCHOR_NAME = "Central Station / Transport Hub"
CITY_CENTER_LABEL = "City Center"
RESTAURANT_LOCATION = "Local Restaurant"
RESTAURANT_LABEL = "Restaurant"


@dataclass(frozen=True)
class TimeSlot:
    time: str
    label: str
    cost_base: float
    is_meal: bool = False


TIME_SLOTS: Tuple[TimeSlot, ...] = (
    TimeSlot("09:00 - 11:00", "Morning Activity", 15),
    TimeSlot("11:30 - 13:00", "Lunch Break", 20, is_meal=True),
    TimeSlot("13:30 - 16:00", "Afternoon Exploration", 15),
    TimeSlot("16:30 - 18:00", "Sunset / Relax", 10),
    TimeSlot("19:00 - 21:00", "Dinner", 35, is_meal=True),
)


class DestinationNotFoundError(Exception):
    """The destination could not be geocoded; no itinerary can be built."""

    def __init__(self, destination: str):
        self.destination = destination
        super().__init__(f"Could not locate destination '{destination}'")


# Helpers


def suggest_style(visual_keywords: Sequence[str]) -> Optional[str]:
    """Map the top image-classifier label to a travel style, if it hints one."""
    if not visual_keywords:
        return None
    top = str(visual_keywords[0]).lower()
    for hints, style in VISUAL_STYLE_HINTS:
        if any(h in top for h in hints):
            return style
    return None


def fallback_pois(center: Coordinates) -> List[POI]:
    return [
        POI(name=name, lat=center.lat + dlat, lon=center.lon + dlon)
        for name, dlat, dlon in FALLBACK_POIS
    ]


def score_pois(
    pois: Sequence[POI], style: str, visual_keywords: Sequence[str] = ()
) -> List[POI]:
    """
    Rank POIs by how well their names match the trip.

    +5 when the name contains any keyword of the travel style, +3 when it
    contains any visual keyword (both case-insensitive). Ties keep fetch order.
    """
    target_words = STYLE_KEYWORDS.get(style, [])
    keywords = [k.strip().lower() for k in visual_keywords if k and k.strip()]

    scored: List[POI] = []
    for poi in pois:
        name = poi.name.lower()
        score = 0
        if any(w in name for w in target_words):
            score += STYLE_KEYWORD_BONUS
        if any(k in name for k in keywords):
            score += VISUAL_KEYWORD_BONUS
        scored.append(poi.model_copy(update={"score": score}))

    # sorted() is stable
    return sorted(scored, key=lambda p: p.score, reverse=True)


def build_travel_notes(destination: str, budget: str) -> List[TravelNote]:
    maps_url = (
        "https://www.google.com/maps/dir/?api=1&destination="
        + quote(destination, safe="-_.!~*'()")
    )
    return [
        TravelNote(title="Preparation", text="Check visa requirements for the country."),
        TravelNote(
            title="Transport", text="Check Flights/Trains on Google Maps", url=maps_url
        ),
        TravelNote(
            title="Packing",
            text="Bring comfortable walking shoes for the detailed itinerary!",
        ),
        TravelNote(
            title="Budget Tip",
            text=f"Since you chose {budget}, try using local public transport instead of taxis.",
        ),
        TravelNote(
            title="Family/Group",
            text="Ensure you book restaurant tables in advance for larger groups.",
        ),
    ]


# Estimator


class ItineraryEstimator:
    """
    Builds a day-by-day schedule with transport and activity cost estimates.

    Collaborators:
        geocoder: object with geocode(query) -> Optional[Coordinates]
        poi_lookup: object with nearby(lat, lon, radius_km, limit) -> List[POI]
    """

    def __init__(self, geocoder=None, poi_lookup=None, parallel: Optional[bool] = None):
        self.geocoder = geocoder or geocoding_client
        self.poi_lookup = poi_lookup or poi_client
        self.parallel = settings.PARALLEL_LOOKUPS if parallel is None else parallel

    # lookups

    def _geocode(self, query: str) -> Optional[Coordinates]:
        try:
            return self.geocoder.geocode(query)
        except Exception as e:
            logger.warning("Geocoder raised for '%s': %s", query, e)
            return None

    def resolve_anchor(
        self, destination: str, lodging: Optional[str], city: Coordinates
    ) -> Anchor:
        """
        Pick the point each day starts and ends at.

        A named lodging is used when it resolves, otherwise the city center
        (labelled as such). Without a lodging the central station is tried
        before the city center.
        """
        lodging = (lodging or "").strip()

        if lodging:
            coords = self._geocode(f"{lodging}, {destination}")
            if coords:
                return Anchor(name=lodging, lat=coords.lat, lon=coords.lon, source="lodging")
            logger.info("Lodging '%s' not found in %s, using city center", lodging, destination)
            return Anchor(
                name=f"{destination} City Center (Hotel not found)",
                lat=city.lat,
                lon=city.lon,
                source="city_center",
            )

        coords = self._geocode(f"{destination} Central Station")
        if coords:
            return Anchor(
                name=STATION_ANCHOR_NAME, lat=coords.lat, lon=coords.lon, source="station"
            )

        return Anchor(
            name=f"{destination} City Center", lat=city.lat, lon=city.lon, source="city_center"
        )

    def fetch_candidates(self, city: Coordinates) -> Tuple[List[POI], str]:
        """POIs around the city center, or the synthetic fallback set."""
        try:
            pois = list(
                self.poi_lookup.nearby(
                    city.lat, city.lon, settings.POI_RADIUS_KM, settings.POI_LIMIT
                )
            )
        except Exception as e:
            logger.warning("POI lookup raised: %s", e)
            pois = []

        if not pois:
            logger.info("No POIs returned, using fallback POIs")
            return fallback_pois(city), "fallback"
        return pois, "lookup"

    def _gather(
        self, request: EstimateRequest, city: Coordinates
    ) -> Tuple[Anchor, Tuple[List[POI], str]]:
        # Both lookups only depend on the city center
        if not self.parallel:
            anchor = self.resolve_anchor(request.destination, request.lodging, city)
            return anchor, self.fetch_candidates(city)

        with ThreadPoolExecutor(max_workers=2) as pool:
            anchor_future = pool.submit(
                self.resolve_anchor, request.destination, request.lodging, city
            )
            pois_future = pool.submit(self.fetch_candidates, city)
            return anchor_future.result(), pois_future.result()

    # scheduling

    def build_day(
        self,
        day_number: int,
        anchor: Anchor,
        city: Coordinates,
        ranked: List[POI],
        cursor: int,
        budget: str,
        travelers: str,
    ) -> Tuple[DayPlan, int]:
        """
        Fill the five time slots of one day.

        Returns the day and the advanced POI cursor; the cursor is shared by
        the whole trip so no POI is visited twice.
        """
        day_total = 0.0
        current_lat, current_lon = anchor.lat, anchor.lon
        prev_label = anchor.name
        slots: List[SlotPlan] = []

        for slot in TIME_SLOTS:
            poi_name = None
            poi_index = None

            if slot.is_meal:
                activity = f"Enjoy a local meal ({budget} style)"
                location = RESTAURANT_LOCATION
                cost = meal_cost(slot.cost_base, budget, travelers)
                # Restaurant assumed a short hop from the previous stop
                distance = MEAL_HOP_KM
                next_lat, next_lon = current_lat, current_lon
            else:
                if cursor < len(ranked):
                    place = ranked[cursor]
                    poi_index = cursor
                    cursor += 1
                    activity = f"Visit {place.name}"
                    location = poi_name = place.name
                    next_lat, next_lon = place.lat, place.lon
                else:
                    activity = "Explore the city center"
                    location = CITY_CENTER_LABEL
                    next_lat, next_lon = city.lat, city.lon
                cost = activity_cost(slot.cost_base, budget, travelers)
                distance = haversine_distance_km(
                    current_lat, current_lon, next_lat, next_lon
                )

            leg_cost = transport_cost(distance, budget, travelers)
            day_total += leg_cost
            day_total += cost

            slots.append(
                SlotPlan(
                    time=slot.time,
                    label=slot.label,
                    activity=activity,
                    location=location,
                    is_meal=slot.is_meal,
                    poi_name=poi_name,
                    poi_index=poi_index,
                    transport=TransportLeg(
                        origin=prev_label, distance_km=distance, cost=leg_cost
                    ),
                    activity_cost=cost,
                )
            )

            if slot.is_meal:
                prev_label = RESTAURANT_LABEL
            else:
                current_lat, current_lon = next_lat, next_lon
                prev_label = location

        return_distance = haversine_distance_km(
            current_lat, current_lon, anchor.lat, anchor.lon
        )
        return_cost = transport_cost(return_distance, budget, travelers)
        day_total += return_cost

        day = DayPlan(
            day=day_number,
            label=f"Day {day_number}",
            start_name=anchor.name,
            slots=slots,
            return_leg=TransportLeg(
                origin=prev_label, distance_km=return_distance, cost=return_cost
            ),
            total=day_total,
        )
        return day, cursor

    # orchestrator

    def estimate(self, request: EstimateRequest) -> Itinerary:
        """
        Build an itinerary estimate.

        Raises:
            DestinationNotFoundError: the destination could not be geocoded
        """
        logger.info(
            f"Estimating {request.days}-day {request.style} trip to "
            f"{request.destination} ({request.budget}, {request.travelers})"
        )

        # 1) City center; nothing else runs without it
        city = self._geocode(request.destination)
        if city is None:
            raise DestinationNotFoundError(request.destination)

        # 2) Anchor + candidate POIs
        anchor, (pois, poi_source) = self._gather(request, city)
        logger.info(f"Anchor: {anchor.name} ({anchor.source})")

        # 3) Rank
        ranked = score_pois(pois, request.style, request.visual_keywords)

        # 4) Days, one POI cursor for the whole trip
        days: List[DayPlan] = []
        cursor = 0
        total = 0.0
        for day_number in range(1, request.days + 1):
            day, cursor = self.build_day(
                day_number,
                anchor,
                city,
                ranked,
                cursor,
                request.budget,
                request.travelers,
            )
            days.append(day)
            total += day.total

        logger.info(
            f"Estimate complete: {len(days)} days, {cursor}/{len(ranked)} POIs used, "
            f"total={total:.2f}"
        )

        return Itinerary(
            destination=request.destination,
            style=request.style,
            budget=request.budget,
            travelers=request.travelers,
            anchor=anchor,
            poi_source=poi_source,
            notes=build_travel_notes(request.destination, request.budget),
            days=days,
            total=total,
        )
