"""Appointment slot generation and appointment helpers.

Times are local wall-clock "HH:MM" strings on a calendar date. Functions that
compare against the current time take an optional naive ``now``.
"""

import math
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Sequence

from collision_claims.models.appointment import (
    Appointment,
    AppointmentStatus,
    AppointmentType,
    BodyShopSchedule,
    LoanerCarRequest,
    TimeSlot,
    TimeWindow,
)

RESCHEDULE_CUTOFF = timedelta(hours=2)
REMINDER_WINDOW_HOURS = 24
LOANER_VEHICLE_TYPES = ("sedan", "suv", "truck", "any")
DELIVERY_AVERAGE_MPH = 30
DELIVERY_PREP_MINUTES = 15

DEFAULT_SHOP_SCHEDULE: list[BodyShopSchedule] = [
    BodyShopSchedule(
        day_of_week=day,
        open_time="08:00",
        close_time="17:00",
        slot_duration=30,
        break_times=[TimeWindow(start="12:00", end="13:00")],
        max_concurrent_appointments=3,
    )
    for day in range(1, 6)  # Monday-Friday
]

APPOINTMENT_TYPES: dict[AppointmentType, dict[str, Any]] = {
    AppointmentType.DROP_OFF: {
        "label": "Drop Off Vehicle",
        "description": "Bring your vehicle to the shop to begin repairs",
        "icon": "🚗",
        "default_duration": 30,
        "requires_vehicle": True,
        "allows_loaner_car": True,
        "allows_delivery": False,
    },
    AppointmentType.INSPECTION: {
        "label": "In-Person Inspection",
        "description": "Schedule a technician to inspect your vehicle",
        "icon": "🔍",
        "default_duration": 60,
        "requires_vehicle": True,
        "allows_loaner_car": False,
        "allows_delivery": False,
    },
    AppointmentType.PICKUP: {
        "label": "Pick Up Vehicle",
        "description": "Retrieve your repaired vehicle from the shop",
        "icon": "✅",
        "default_duration": 30,
        "requires_vehicle": False,
        "allows_loaner_car": False,
        "allows_delivery": False,
    },
    AppointmentType.DELIVERY: {
        "label": "Vehicle Delivery",
        "description": "Have your repaired vehicle delivered to you",
        "icon": "🚚",
        "default_duration": 0,  # varies by distance
        "requires_vehicle": False,
        "allows_loaner_car": False,
        "allows_delivery": True,
    },
}

STATUS_COLORS = {
    AppointmentStatus.CONFIRMED: "#34C759",
    AppointmentStatus.PENDING: "#FF9500",
    AppointmentStatus.COMPLETED: "#007AFF",
    AppointmentStatus.CANCELLED: "#FF3B30",
    AppointmentStatus.RESCHEDULED: "#8E8E93",
}

STATUS_LABELS = {
    AppointmentStatus.CONFIRMED: "Confirmed",
    AppointmentStatus.PENDING: "Pending Confirmation",
    AppointmentStatus.COMPLETED: "Completed",
    AppointmentStatus.CANCELLED: "Cancelled",
    AppointmentStatus.RESCHEDULED: "Rescheduled",
}

_CLOSED = (AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED)


def day_of_week(d: date) -> int:
    """0 = Sunday .. 6 = Saturday."""
    return (d.weekday() + 1) % 7


def parse_time(value: str) -> int:
    """ "HH:MM" -> minutes after midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_time(minutes: int) -> str:
    """Minutes after midnight -> "HH:MM" (wraps past midnight)."""
    minutes %= 24 * 60
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _schedule_for(
    d: date, schedules: BodyShopSchedule | Sequence[BodyShopSchedule]
) -> BodyShopSchedule | None:
    if isinstance(schedules, BodyShopSchedule):
        schedules = [schedules]
    weekday = day_of_week(d)
    for schedule in schedules:
        if schedule.day_of_week == weekday:
            return schedule
    return None


def _overlaps_break(start: int, end: int, schedule: BodyShopSchedule) -> bool:
    return any(
        start < parse_time(b.end) and end > parse_time(b.start) for b in schedule.break_times
    )


def generate_time_slots(
    day: date,
    schedules: BodyShopSchedule | Sequence[BodyShopSchedule],
    existing_appointments: Iterable[Appointment] = (),
) -> list[TimeSlot]:
    """Bookable slots for a date.

    Returns an empty list when no schedule covers the date's weekday. Slots
    run from open to close in fixed steps, skipping any that overlap a break;
    each carries its non-cancelled booking count and is available while that
    count is below the shop's concurrent-appointment limit.
    """
    schedule = _schedule_for(day, schedules)
    if schedule is None:
        return []

    appointments = [
        a
        for a in existing_appointments
        if a.scheduled_date == day and a.status != AppointmentStatus.CANCELLED
    ]
    close = parse_time(schedule.close_time)
    current = parse_time(schedule.open_time)
    slots: list[TimeSlot] = []

    while current < close:
        end = current + schedule.slot_duration
        if not _overlaps_break(current, end, schedule):
            start_str = format_time(current)
            bookings = sum(1 for a in appointments if a.time_slot.start == start_str)
            slots.append(
                TimeSlot(
                    id=f"slot-{day.isoformat()}-{len(slots)}",
                    date=day,
                    start_time=start_str,
                    end_time=format_time(end),
                    is_available=bookings < schedule.max_concurrent_appointments,
                    max_capacity=schedule.max_concurrent_appointments,
                    current_bookings=bookings,
                )
            )
        current = end

    return slots


def get_available_dates(
    start: date,
    days_ahead: int,
    schedules: Sequence[BodyShopSchedule],
) -> list[date]:
    """Dates in [start, start + days_ahead) whose weekday has a schedule."""
    open_days = {s.day_of_week for s in schedules}
    return [
        start + timedelta(days=i)
        for i in range(days_ahead)
        if day_of_week(start + timedelta(days=i)) in open_days
    ]


def appointment_start(appointment: Appointment) -> datetime:
    minutes = parse_time(appointment.time_slot.start)
    return datetime.combine(appointment.scheduled_date, datetime.min.time()) + timedelta(
        minutes=minutes
    )


def format_appointment_date(d: date, today: date | None = None) -> str:
    """Today, Tomorrow, or e.g. "Mon, Mar 9"."""
    today = today or date.today()
    if d == today:
        return "Today"
    if d == today + timedelta(days=1):
        return "Tomorrow"
    return f"{d.strftime('%a, %b')} {d.day}"


def format_time_slot(start: str, end: str) -> str:
    """ "09:00", "09:30" -> "9:00 AM - 9:30 AM"."""

    def _ampm(value: str) -> str:
        hours, minutes = (int(p) for p in value.split(":"))
        suffix = "PM" if hours >= 12 else "AM"
        return f"{hours % 12 or 12}:{minutes:02d} {suffix}"

    return f"{_ampm(start)} - {_ampm(end)}"


def get_appointment_type_info(appointment_type: AppointmentType) -> dict[str, str]:
    config = APPOINTMENT_TYPES[AppointmentType(appointment_type)]
    return {
        "label": config["label"],
        "icon": config["icon"],
        "description": config["description"],
    }


def get_appointment_status_color(status: AppointmentStatus | str) -> str:
    try:
        return STATUS_COLORS[AppointmentStatus(status)]
    except ValueError:
        return "#8E8E93"


def get_appointment_status_label(status: AppointmentStatus | str) -> str:
    try:
        return STATUS_LABELS[AppointmentStatus(status)]
    except ValueError:
        return str(status)


def can_reschedule_appointment(appointment: Appointment, now: datetime | None = None) -> bool:
    """False for cancelled/completed appointments or within 2 hours of the start."""
    if appointment.status in _CLOSED:
        return False
    now = now or datetime.now()
    return appointment_start(appointment) > now + RESCHEDULE_CUTOFF


def can_cancel_appointment(appointment: Appointment) -> bool:
    return appointment.status not in _CLOSED


def get_time_until_appointment(appointment: Appointment, now: datetime | None = None) -> str:
    now = now or datetime.now()
    start = appointment_start(appointment)
    diff = start - now
    if diff.total_seconds() < 0:
        return "Past"

    minutes = math.floor(diff.total_seconds() / 60)
    hours = math.floor(diff.total_seconds() / 3600)
    days = math.floor(diff.total_seconds() / 86400)
    if minutes < 60:
        return f"In {minutes} minutes"
    if hours < 24:
        return f"In {hours} hour{'s' if hours != 1 else ''}"
    if days < 7:
        return f"In {days} day{'s' if days != 1 else ''}"
    return format_appointment_date(appointment.scheduled_date, now.date())


def needs_reminder(appointment: Appointment, now: datetime | None = None) -> bool:
    """Confirmed, not yet reminded, and starting within the next 24 hours."""
    if appointment.reminder_sent or appointment.status != AppointmentStatus.CONFIRMED:
        return False
    now = now or datetime.now()
    hours = (appointment_start(appointment) - now).total_seconds() / 3600
    return 0 < hours <= REMINDER_WINDOW_HOURS


def sort_appointments(appointments: Iterable[Appointment]) -> list[Appointment]:
    return sorted(appointments, key=appointment_start)


def filter_appointments_by_status(
    appointments: Iterable[Appointment], statuses: Iterable[AppointmentStatus]
) -> list[Appointment]:
    wanted = {AppointmentStatus(s) for s in statuses}
    return [a for a in appointments if a.status in wanted]


def get_upcoming_appointments(
    appointments: Iterable[Appointment], now: datetime | None = None
) -> list[Appointment]:
    now = now or datetime.now()
    return [a for a in appointments if a.status not in _CLOSED and appointment_start(a) > now]


def get_past_appointments(
    appointments: Iterable[Appointment], now: datetime | None = None
) -> list[Appointment]:
    now = now or datetime.now()
    return [
        a
        for a in appointments
        if appointment_start(a) <= now or a.status == AppointmentStatus.COMPLETED
    ]


def validate_loaner_car_request(request: LoanerCarRequest) -> dict[str, Any]:
    errors: list[str] = []
    if request.needed and request.preferences and request.preferences.type:
        if request.preferences.type not in LOANER_VEHICLE_TYPES:
            errors.append("Invalid vehicle type preference")
    return {"is_valid": not errors, "errors": errors}


def estimate_delivery_duration(distance_miles: float) -> int:
    """Minutes: city driving at 30 mph plus 15 minutes of prep."""
    travel = distance_miles / DELIVERY_AVERAGE_MPH * 60
    return math.ceil(travel + DELIVERY_PREP_MINUTES)


def get_recommended_appointment_types(claim_status: str) -> list[AppointmentType]:
    if claim_status in ("draft", "analyzing", "pending_review"):
        return [AppointmentType.INSPECTION]
    if claim_status == "approved":
        return [AppointmentType.DROP_OFF]
    if claim_status == "completed":
        return [AppointmentType.PICKUP, AppointmentType.DELIVERY]
    return [AppointmentType.DROP_OFF, AppointmentType.INSPECTION, AppointmentType.PICKUP]
