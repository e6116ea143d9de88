from fastapi import APIRouter, HTTPException
from app.schemas.itinerary import EstimateResponse
from app.services.estimator import (
    DestinationNotFoundError,
    ItineraryEstimator,
    suggest_style,
)
from app.services.templates import render_itinerary
from app.services.transformers import (
    extract_visual_keywords,
    transform_frontend_payload,
    transform_response_to_frontend,
    validate_estimate_payload,
    validate_visual_keywords,
)
from app.utils.logger import get_logger
from app.utils.validators import validate_itinerary

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["itinerary"])

DESTINATION_ERROR_MESSAGE = (
    "Failed to generate itinerary. "
    "Please try a different destination or check your connection."
)


@router.post("/itinerary/estimate", response_model=EstimateResponse)
def estimate_itinerary(payload: dict):
    """
    Estimate a day-by-day itinerary with costs from the planner form.

    Flow:
    1. Validate payload
    2. Transform planner payload → EstimateRequest
    3. Run the estimator (geocode, anchor, POIs, schedule, costs)
    4. Render the HTML fragment
    5. Return response

    Args:
        payload: Planner form payload

    Returns:
        {
            "status": "success",
            "itinerary": {...},
            "html": str,
            "summary": {"total": int, "days": int, "anchor": str,
                        "bucket_list_text": str}
        }

    Raises:
        HTTPException: 400 for invalid payload, 404 when the destination
        cannot be located, 500 for processing errors
    """
    is_valid, error_msg = validate_estimate_payload(payload)
    if not is_valid:
        raise HTTPException(status_code=400, detail=error_msg)

    try:
        request = transform_frontend_payload(payload)
        itinerary = ItineraryEstimator().estimate(request)

        report = validate_itinerary(itinerary)
        for v in report["violations"]:
            logger.warning(f"Estimate check ({v['severity']}): {v['message']}")

        html = render_itinerary(itinerary)
        return transform_response_to_frontend(itinerary, html)

    except DestinationNotFoundError as e:
        logger.warning(str(e))
        raise HTTPException(
            status_code=404,
            detail={
                "status": "error",
                "error": str(e),
                "message": DESTINATION_ERROR_MESSAGE,
            },
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to estimate itinerary")
        raise HTTPException(
            status_code=500,
            detail={
                "status": "error",
                "error": str(e),
                "message": DESTINATION_ERROR_MESSAGE,
            },
        )


@router.post("/itinerary/style")
def suggest_itinerary_style(payload: dict):
    """
    Suggest a travel style from image-classifier labels.

    Args:
        payload: {"visual_keywords": [str, ...]} (best prediction first)

    Returns:
        {"style": str | None, "keywords": [str, ...]}

    Raises:
        HTTPException: 400 when the keywords are not a list of labels
    """
    is_valid, error_msg = validate_visual_keywords(payload)
    if not is_valid:
        raise HTTPException(status_code=400, detail=error_msg)

    keywords = extract_visual_keywords(payload)
    return {"style": suggest_style(keywords), "keywords": keywords}
