from typing import Any, Dict, List, Optional
from app.core.config import settings
from app.schemas.itinerary import EstimateRequest, Itinerary
from app.services.costs import round_currency
from app.services.estimator import suggest_style
from app.utils.logger import get_logger

logger = get_logger(__name__)

TRAVEL_STYLES = ("adventure", "culture", "food", "relax")
BUDGET_TIERS = ("economy", "standard", "luxury")
TRAVELER_GROUPS = ("solo", "couple", "family", "friends")

DEFAULT_STYLE = "culture"
DEFAULT_BUDGET = "standard"
DEFAULT_TRAVELERS = "solo"

# ============================================================================
# Frontend → Backend Transformation
# ============================================================================


def _clean_enum(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip().lower()
    return value or None


def _raw_keywords(payload: Dict[str, Any]) -> Any:
    raw = payload.get("visual_keywords")
    if raw is None:
        raw = payload.get("keywords")
    return raw


def extract_visual_keywords(payload: Dict[str, Any]) -> List[str]:
    """
    Collect classifier labels from the payload.

    Accepts `visual_keywords` or `keywords` as a list of labels. A bare
    string is one label; classifier labels may contain commas themselves.
    Order is kept (best prediction first).
    """
    raw = _raw_keywords(payload)
    if not raw:
        return []
    if isinstance(raw, str):
        raw = [raw]
    return [str(k).strip() for k in raw if k is not None and str(k).strip()]


def parse_days(value: Any) -> Optional[int]:
    """Whole number of days, or None if the value is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def transform_frontend_payload(payload: Dict[str, Any]) -> EstimateRequest:
    """
    Transform the planner form payload into an EstimateRequest.

    Transformations:
    - Trim destination and lodging (`lodging` or the form's `hotel` field)
    - Lower-case the enumerations
    - Infer the travel style from the visual keywords when none was picked
    - Default budget to standard and travelers to solo

    Example:
        Input:
        {
            "destination": " Paris ",
            "days": "2",
            "budget": "Economy",
            "travelers": "family",
            "hotel": "Hotel Lutetia",
            "visual_keywords": ["palace", "fountain"]
        }

        Output:
        EstimateRequest(
            destination="Paris", days=2, style="culture", budget="economy",
            travelers="family", lodging="Hotel Lutetia",
            visual_keywords=["palace", "fountain"],
        )
    """
    keywords = extract_visual_keywords(payload)

    style = _clean_enum(payload.get("style"))
    if style is None:
        style = suggest_style(keywords) or DEFAULT_STYLE
        logger.info(f"No style given, using '{style}'")

    lodging = payload.get("lodging")
    if lodging is None:
        lodging = payload.get("hotel")
    lodging = str(lodging).strip() if lodging is not None else ""

    return EstimateRequest(
        destination=str(payload["destination"]).strip(),
        days=parse_days(payload.get("days")),
        style=style,
        budget=_clean_enum(payload.get("budget")) or DEFAULT_BUDGET,
        travelers=_clean_enum(payload.get("travelers")) or DEFAULT_TRAVELERS,
        lodging=lodging or None,
        visual_keywords=keywords,
    )


# ============================================================================
# Backend → Frontend Transformation
# ============================================================================


def bucket_list_text(itinerary: Itinerary) -> str:
    """Label used when the planner saves a trip to the bucket list."""
    return f"Trip to {itinerary.destination} ({itinerary.style}, {itinerary.budget})"


def transform_response_to_frontend(itinerary: Itinerary, html: str) -> Dict[str, Any]:
    """
    Build the planner response.

    Args:
        itinerary: Estimator output
        html: Rendered itinerary fragment

    Returns:
        {
            "status": "success",
            "itinerary": {...},
            "html": str,
            "summary": {"total": int, "days": int, "anchor": str,
                        "bucket_list_text": str}
        }
    """
    return {
        "status": "success",
        "itinerary": itinerary.model_dump(),
        "html": html,
        "summary": {
            "total": round_currency(itinerary.total),
            "days": len(itinerary.days),
            "anchor": itinerary.anchor.name,
            "bucket_list_text": bucket_list_text(itinerary),
        },
    }


# ============================================================================
# Validation Helpers
# ============================================================================


def validate_estimate_payload(
    payload: Dict[str, Any],
) -> tuple[bool, Optional[str]]:
    """
    Validate the planner payload before processing.

    Required fields:
    - destination (non-empty string)
    - days (whole number between 1 and MAX_TRIP_DAYS)

    Optional enumerations (style, budget, travelers) must be known values.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(payload, dict):
        return False, "Payload must be an object"

    if not payload.get("destination"):
        return False, "Destination is required"

    if not isinstance(payload.get("destination"), str):
        return False, "Destination must be a string"

    if not payload["destination"].strip():
        return False, "Destination cannot be empty"

    days = parse_days(payload.get("days"))
    if days is None:
        return False, "Days must be a whole number"
    if not 1 <= days <= settings.MAX_TRIP_DAYS:
        return False, f"Days must be between 1 and {settings.MAX_TRIP_DAYS}"

    for field, allowed in (
        ("style", TRAVEL_STYLES),
        ("budget", BUDGET_TIERS),
        ("travelers", TRAVELER_GROUPS),
    ):
        value = _clean_enum(payload.get(field))
        if value is not None and value not in allowed:
            return False, f"Unknown {field} '{payload.get(field)}' (expected one of {', '.join(allowed)})"

    return validate_visual_keywords(payload)


def validate_visual_keywords(
    payload: Dict[str, Any],
) -> tuple[bool, Optional[str]]:
    """Keywords, when present, must be a list of labels or a single label."""
    if not isinstance(payload, dict):
        return False, "Payload must be an object"

    raw = _raw_keywords(payload)
    if raw is None or isinstance(raw, (str, list, tuple)):
        return True, None
    return False, "Visual keywords must be a list of labels"
