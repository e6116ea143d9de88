"""HTML fragments for the itinerary estimate shown in the trip planner."""

from html import escape

from app.schemas.itinerary import DayPlan, Itinerary, SlotPlan, TravelNote
from app.services.costs import round_currency


def fmt_money(value: float) -> str:
    return f"${round_currency(value)}"


def fmt_km(value: float) -> str:
    return f"{value:.1f}km"


ESSENTIALS_HTML = """
<div class="travel-essentials">
    <h3>🧳 Travel Essentials for {destination}</h3>
    <ul>
{items}
    </ul>
</div>
"""

SUMMARY_HTML = """
<div class="trip-summary">
    <h2>Total Trip Estimate: {total}</h2>
    <p>(Includes food &amp; activities for {travelers} travel group)</p>
</div>
"""

DAY_HTML = """
<div class="day-plan" data-day="{day}">
    <div class="day-header">
        <h3>{label}</h3>
        <div class="day-start">Starting from: <strong>{start_name}</strong></div>
    </div>
    <div class="day-body">
{slots}
        <div class="return-trip">🚕 Return Trip to {start_name} ({return_km}): ~{return_cost}</div>
        <div class="day-total">Day Total: {total}</div>
    </div>
</div>
"""

SLOT_HTML = """        <div class="slot{meal_class}">
            <div class="slot-time">{time}</div>
            <div class="slot-body">
                <div class="slot-activity">{activity}</div>
                <div class="slot-label">{label}</div>
                <div class="slot-transport">🚕 Trip from <strong>{origin}</strong> ({distance}): ~{transport_cost}</div>
            </div>
            <div class="slot-cost">Activity: ~{cost}</div>
        </div>"""


def render_note(note: TravelNote) -> str:
    if note.url:
        body = f'<a href="{escape(note.url)}" target="_blank">{escape(note.text)}</a>'
    else:
        body = escape(note.text)
    return f"        <li><strong>{escape(note.title)}:</strong> {body}</li>"


def render_activity(slot: SlotPlan) -> str:
    if slot.poi_name:
        return f"Visit <strong>{escape(slot.poi_name)}</strong>"
    return escape(slot.activity)


def render_slot(slot: SlotPlan) -> str:
    return SLOT_HTML.format(
        meal_class=" slot-meal" if slot.is_meal else "",
        time=escape(slot.time),
        activity=render_activity(slot),
        label=escape(slot.label),
        origin=escape(slot.transport.origin),
        distance=fmt_km(slot.transport.distance_km),
        transport_cost=fmt_money(slot.transport.cost),
        cost=fmt_money(slot.activity_cost),
    )


def render_day(day: DayPlan) -> str:
    return DAY_HTML.format(
        day=day.day,
        label=escape(day.label),
        start_name=escape(day.start_name),
        slots="\n".join(render_slot(s) for s in day.slots),
        return_km=fmt_km(day.return_leg.distance_km),
        return_cost=fmt_money(day.return_leg.cost),
        total=fmt_money(day.total),
    )


def render_itinerary(itinerary: Itinerary) -> str:
    """Advisory block, then the grand-total banner, then one block per day."""
    essentials = ESSENTIALS_HTML.format(
        destination=escape(itinerary.destination),
        items="\n".join(render_note(n) for n in itinerary.notes),
    )
    summary = SUMMARY_HTML.format(
        total=fmt_money(itinerary.total),
        travelers=escape(itinerary.travelers),
    )
    days = "".join(render_day(d) for d in itinerary.days)
    return essentials + summary + days
