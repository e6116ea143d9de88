from typing import Any, Dict, List

from app.schemas.itinerary import Itinerary
from app.services.costs import MIN_TRANSPORT_COST
from app.services.estimator import TIME_SLOTS

# Float sums are rebuilt in a different order here
TOTAL_TOLERANCE = 1e-6


# Validation Functions


def validate_itinerary(itinerary: Itinerary) -> Dict[str, Any]:
    """
    Check an estimate against the scheduling and costing rules.

    Returns:
        {
            "valid": bool,
            "violations": [{"type": str, "severity": str, "message": str, "day": int}],
            "stats": {...}
        }
    """
    violations: List[Dict[str, Any]] = []
    stats = {
        "total_days": len(itinerary.days),
        "pois_visited": 0,
        "city_center_fallbacks": 0,
        "min_transport_cost": None,
    }

    expected_labels = [s.label for s in TIME_SLOTS]
    seen_pois: Dict[Any, int] = {}
    leg_costs: List[float] = []

    for day in itinerary.days:
        # 1. Fixed slot template
        labels = [s.label for s in day.slots]
        if labels != expected_labels:
            violations.append(
                {
                    "type": "slot_template",
                    "severity": "error",
                    "message": f"{day.label}: slots {labels} do not match the daily template",
                    "day": day.day,
                }
            )

        running = 0.0
        for slot in day.slots:
            leg_costs.append(slot.transport.cost)
            running += slot.transport.cost
            running += slot.activity_cost

            # 2. POIs are consumed at most once per trip
            if slot.poi_name:
                stats["pois_visited"] += 1
                # Distinct places may share a name; the candidate rank tells them apart
                key = slot.poi_index if slot.poi_index is not None else slot.poi_name
                if key in seen_pois:
                    violations.append(
                        {
                            "type": "poi_reused",
                            "severity": "error",
                            "message": f"{day.label}: {slot.poi_name} already visited on day {seen_pois[key]}",
                            "day": day.day,
                        }
                    )
                else:
                    seen_pois[key] = day.day
            elif not slot.is_meal:
                stats["city_center_fallbacks"] += 1

        leg_costs.append(day.return_leg.cost)
        running += day.return_leg.cost

        # 3. Day total is the sum of its parts
        if abs(running - day.total) > TOTAL_TOLERANCE:
            violations.append(
                {
                    "type": "day_total",
                    "severity": "error",
                    "message": f"{day.label}: total {day.total:.2f} != sum of parts {running:.2f}",
                    "day": day.day,
                }
            )

    # 4. Transport floor
    for cost in leg_costs:
        if cost < MIN_TRANSPORT_COST:
            violations.append(
                {
                    "type": "transport_floor",
                    "severity": "error",
                    "message": f"Transport leg priced at {cost:.2f}, below {MIN_TRANSPORT_COST}",
                    "day": None,
                }
            )
    if leg_costs:
        stats["min_transport_cost"] = min(leg_costs)

    # 5. Grand total
    day_sum = sum(d.total for d in itinerary.days)
    if abs(day_sum - itinerary.total) > TOTAL_TOLERANCE:
        violations.append(
            {
                "type": "grand_total",
                "severity": "error",
                "message": f"Grand total {itinerary.total:.2f} != sum of days {day_sum:.2f}",
                "day": None,
            }
        )

    # Repeated city-center stops are allowed but worth flagging
    if stats["city_center_fallbacks"]:
        violations.append(
            {
                "type": "pois_exhausted",
                "severity": "warning",
                "message": f"{stats['city_center_fallbacks']} slots fell back to the city center",
                "day": None,
            }
        )

    return {
        "valid": len([v for v in violations if v["severity"] == "error"]) == 0,
        "violations": violations,
        "stats": stats,
    }


def assert_itinerary_valid(itinerary: Itinerary, allow_warnings: bool = True) -> None:
    """
    Assert the estimate is valid, raise AssertionError if not.

    Args:
        allow_warnings: If False, warnings also cause assertion failure
    """
    result = validate_itinerary(itinerary)

    errors = [v for v in result["violations"] if v["severity"] == "error"]
    warnings = [v for v in result["violations"] if v["severity"] == "warning"]

    if errors:
        raise AssertionError(
            f"Itinerary has {len(errors)} errors:\n"
            + "\n".join(f"  - {v['message']}" for v in errors)
        )

    if not allow_warnings and warnings:
        raise AssertionError(
            f"Itinerary has {len(warnings)} warnings:\n"
            + "\n".join(f"  - {v['message']}" for v in warnings)
        )
