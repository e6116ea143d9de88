from pydantic import BaseModel
from typing import Any, Dict, List, Literal, Optional

TravelStyle = Literal["adventure", "culture", "food", "relax"]
BudgetTier = Literal["economy", "standard", "luxury"]
TravelerGroup = Literal["solo", "couple", "family", "friends"]
AnchorSource = Literal["lodging", "station", "city_center"]


class Coordinates(BaseModel):
    lat: float
    lon: float


class POI(BaseModel):
    name: str
    lat: float
    lon: float
    score: int = 0


class Anchor(BaseModel):
    name: str
    lat: float
    lon: float
    source: AnchorSource


class TransportLeg(BaseModel):
    origin: str
    distance_km: float
    cost: float


class SlotPlan(BaseModel):
    time: str
    label: str
    activity: str
    location: str
    is_meal: bool
    poi_name: Optional[str] = None
    # Rank of the POI in the trip's candidate list
    poi_index: Optional[int] = None
    transport: TransportLeg
    activity_cost: float


class DayPlan(BaseModel):
    day: int
    label: str
    start_name: str
    slots: List[SlotPlan]
    return_leg: TransportLeg
    total: float


class EstimateRequest(BaseModel):
    destination: str
    days: int
    style: TravelStyle = "culture"
    budget: BudgetTier = "standard"
    travelers: TravelerGroup = "solo"
    lodging: Optional[str] = None
    visual_keywords: List[str] = []


class TravelNote(BaseModel):
    title: str
    text: str
    url: Optional[str] = None


class Itinerary(BaseModel):
    destination: str
    style: TravelStyle
    budget: BudgetTier
    travelers: TravelerGroup
    anchor: Anchor
    poi_source: Literal["lookup", "fallback"]
    notes: List[TravelNote]
    days: List[DayPlan]
    total: float


class EstimateResponse(BaseModel):
    status: str
    itinerary: Itinerary
    html: str
    summary: Dict[str, Any]
