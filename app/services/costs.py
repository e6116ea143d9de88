import math

# Configuration

# Food/activity price level per budget tier
BUDGET_MULTIPLIERS = {"economy": 0.6, "standard": 1.0, "luxury": 2.5}

# (base fee, per-km rate): bus/metro, taxi, private driver
TRANSPORT_RATES = {
    "economy": (1.50, 0.50),
    "standard": (5.00, 1.50),
    "luxury": (15.00, 3.00),
}

# Public transport is paid per head; taxis only grow for bigger groups
ECONOMY_TRANSPORT_GROUP_MULTIPLIERS = {"couple": 2, "family": 4, "friends": 3}
PREMIUM_TRANSPORT_GROUP_MULTIPLIERS = {"family": 1.5, "friends": 1.5}

# Meals and activities scale with different tables; do not merge them
MEAL_GROUP_MULTIPLIERS = {"couple": 2, "family": 4, "friends": 3}
ACTIVITY_GROUP_MULTIPLIERS = {"couple": 2, "family": 3}

ECONOMY_ACTIVITY_FLAT = 5
MIN_TRANSPORT_COST = 2.0
MEAL_HOP_KM = 0.5


def transport_cost(distance_km: float, budget: str, travelers: str) -> float:
    """Base fee + km * rate for the tier, scaled by group, floored at 2.0."""
    base, rate = TRANSPORT_RATES[budget]
    cost = base + distance_km * rate

    if budget == "economy":
        cost *= ECONOMY_TRANSPORT_GROUP_MULTIPLIERS.get(travelers, 1)
    else:
        cost *= PREMIUM_TRANSPORT_GROUP_MULTIPLIERS.get(travelers, 1)

    return max(cost, MIN_TRANSPORT_COST)


def meal_cost(base: float, budget: str, travelers: str) -> float:
    return base * BUDGET_MULTIPLIERS[budget] * MEAL_GROUP_MULTIPLIERS.get(travelers, 1)


def activity_cost(base: float, budget: str, travelers: str) -> float:
    if budget == "economy":
        cost = ECONOMY_ACTIVITY_FLAT
    else:
        cost = base * BUDGET_MULTIPLIERS[budget]
    return cost * ACTIVITY_GROUP_MULTIPLIERS.get(travelers, 1)


def round_currency(value: float) -> int:
    """Round half up to whole currency units (2.5 -> 3, not banker's 2)."""
    return int(math.floor(value + 0.5))
