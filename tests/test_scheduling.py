"""Tests for time-slot generation and appointment helpers."""

from datetime import date, datetime

import pytest

from collision_claims.models.appointment import (
    Appointment,
    AppointmentStatus,
    AppointmentType,
    BodyShopSchedule,
    LoanerCarPreferences,
    LoanerCarRequest,
    TimeSlot,
    TimeWindow,
)
from collision_claims.tools.scheduling import (
    DEFAULT_SHOP_SCHEDULE,
    can_cancel_appointment,
    can_reschedule_appointment,
    day_of_week,
    estimate_delivery_duration,
    filter_appointments_by_status,
    format_appointment_date,
    format_time_slot,
    generate_time_slots,
    get_appointment_status_color,
    get_appointment_status_label,
    get_appointment_type_info,
    get_available_dates,
    get_past_appointments,
    get_recommended_appointment_types,
    get_time_until_appointment,
    get_upcoming_appointments,
    needs_reminder,
    sort_appointments,
    validate_loaner_car_request,
)

MONDAY = date(2026, 3, 9)
SUNDAY = date(2026, 3, 8)


def _appointment(
    start: str = "09:00",
    day: date = MONDAY,
    status: AppointmentStatus = AppointmentStatus.CONFIRMED,
    appointment_id: str = "appt-1",
    **extra,
) -> Appointment:
    hours, minutes = start.split(":")
    end_minutes = int(hours) * 60 + int(minutes) + 30
    return Appointment(
        id=appointment_id,
        claim_id="claim-1",
        type=AppointmentType.DROP_OFF,
        status=status,
        scheduled_date=day,
        time_slot=TimeWindow(start=start, end=f"{end_minutes // 60:02d}:{end_minutes % 60:02d}"),
        **extra,
    )


@pytest.fixture
def simple_schedule():
    """Monday 09:00-11:00, hourly slots, one booking each."""
    return BodyShopSchedule(
        day_of_week=1,
        open_time="09:00",
        close_time="11:00",
        slot_duration=60,
        max_concurrent_appointments=1,
    )


class TestGenerateTimeSlots:
    """Tests for generate_time_slots."""

    def test_default_schedule_skips_lunch_break(self):
        slots = generate_time_slots(MONDAY, DEFAULT_SHOP_SCHEDULE)
        starts = [s.start_time for s in slots]
        assert len(slots) == 16
        assert starts[0] == "08:00"
        assert slots[-1].end_time == "17:00"
        assert "11:30" in starts
        assert "12:00" not in starts and "12:30" not in starts
        assert "13:00" in starts

    def test_slot_ids_are_sequential(self):
        slots = generate_time_slots(MONDAY, DEFAULT_SHOP_SCHEDULE)
        assert [s.id for s in slots[:2]] == ["slot-2026-03-09-0", "slot-2026-03-09-1"]
        assert slots[-1].id == "slot-2026-03-09-15"

    def test_slot_carries_its_date(self):
        slots = generate_time_slots(MONDAY, DEFAULT_SHOP_SCHEDULE)
        assert all(s.date == MONDAY for s in slots)
        parsed = TimeSlot.model_validate(slots[0].model_dump(mode="json"))
        assert parsed.date == MONDAY
        assert TimeSlot.model_fields["date"].annotation is date

    def test_no_schedule_for_weekday(self):
        assert generate_time_slots(SUNDAY, DEFAULT_SHOP_SCHEDULE) == []

    def test_single_schedule_accepted(self, simple_schedule):
        slots = generate_time_slots(MONDAY, simple_schedule)
        assert [(s.start_time, s.end_time) for s in slots] == [("09:00", "10:00"), ("10:00", "11:00")]

    def test_booking_counts_and_availability(self):
        booked = [
            _appointment("09:00", appointment_id="a"),
            _appointment("09:00", appointment_id="b"),
            _appointment("09:00", appointment_id="c"),
            _appointment("09:30", appointment_id="d"),
        ]
        slots = {s.start_time: s for s in generate_time_slots(MONDAY, DEFAULT_SHOP_SCHEDULE, booked)}
        assert slots["09:00"].current_bookings == 3
        assert slots["09:00"].is_available is False
        assert slots["09:30"].current_bookings == 1
        assert slots["09:30"].is_available is True
        assert slots["09:30"].max_capacity == 3

    def test_cancelled_bookings_free_the_slot(self, simple_schedule):
        booked = [_appointment("09:00", status=AppointmentStatus.CANCELLED)]
        slots = generate_time_slots(MONDAY, simple_schedule, booked)
        assert slots[0].current_bookings == 0
        assert slots[0].is_available is True

    def test_other_days_do_not_count(self, simple_schedule):
        booked = [_appointment("09:00", day=date(2026, 3, 16))]
        assert generate_time_slots(MONDAY, simple_schedule, booked)[0].current_bookings == 0

    def test_fully_booked_day(self):
        slots = generate_time_slots(MONDAY, DEFAULT_SHOP_SCHEDULE)
        booked = [
            _appointment(s.start_time, appointment_id=f"{s.id}-{n}")
            for s in slots
            for n in range(3)
        ]
        result = generate_time_slots(MONDAY, DEFAULT_SHOP_SCHEDULE, booked)
        assert len(result) == 16
        assert all(not s.is_available for s in result)

    def test_break_overlap_excludes_partial_slots(self):
        schedule = BodyShopSchedule(
            day_of_week=1,
            open_time="09:00",
            close_time="11:00",
            slot_duration=60,
            break_times=[TimeWindow(start="09:30", end="09:45")],
        )
        assert [s.start_time for s in generate_time_slots(MONDAY, schedule)] == ["10:00"]


class TestDates:
    """Tests for date helpers."""

    def test_day_of_week_starts_sunday(self):
        assert day_of_week(SUNDAY) == 0
        assert day_of_week(MONDAY) == 1
        assert day_of_week(date(2026, 3, 14)) == 6

    def test_available_dates_skip_weekend(self):
        dates = get_available_dates(date(2026, 3, 6), 7, DEFAULT_SHOP_SCHEDULE)
        assert dates == [
            date(2026, 3, 6),
            date(2026, 3, 9),
            date(2026, 3, 10),
            date(2026, 3, 11),
            date(2026, 3, 12),
        ]

    def test_format_appointment_date(self):
        assert format_appointment_date(MONDAY, MONDAY) == "Today"
        assert format_appointment_date(date(2026, 3, 10), MONDAY) == "Tomorrow"
        assert format_appointment_date(date(2026, 3, 12), MONDAY) == "Thu, Mar 12"

    def test_format_time_slot(self):
        assert format_time_slot("09:00", "09:30") == "9:00 AM - 9:30 AM"
        assert format_time_slot("12:00", "13:30") == "12:00 PM - 1:30 PM"
        assert format_time_slot("00:15", "00:45") == "12:15 AM - 12:45 AM"


class TestEligibility:
    """Tests for reschedule/cancel rules."""

    def test_reschedule_blocked_within_two_hours(self):
        appointment = _appointment("09:00")
        assert can_reschedule_appointment(appointment, datetime(2026, 3, 9, 6, 59)) is True
        assert can_reschedule_appointment(appointment, datetime(2026, 3, 9, 7, 0)) is False
        assert can_reschedule_appointment(appointment, datetime(2026, 3, 9, 8, 30)) is False

    @pytest.mark.parametrize("status", [AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED])
    def test_closed_appointments(self, status):
        appointment = _appointment("09:00", status=status)
        assert can_reschedule_appointment(appointment, datetime(2026, 3, 1)) is False
        assert can_cancel_appointment(appointment) is False

    def test_cancel_allowed_even_when_imminent(self):
        assert can_cancel_appointment(_appointment("09:00", status=AppointmentStatus.PENDING))


class TestAppointmentTiming:
    """Tests for time-until text and reminders."""

    @pytest.mark.parametrize(
        "now,expected",
        [
            (datetime(2026, 3, 9, 8, 15), "In 45 minutes"),
            (datetime(2026, 3, 9, 8, 0), "In 1 hour"),
            (datetime(2026, 3, 8, 9, 0), "In 1 day"),
            (datetime(2026, 3, 5, 9, 0), "In 4 days"),
            (datetime(2026, 3, 1, 9, 0), "Mon, Mar 9"),
            (datetime(2026, 3, 9, 9, 1), "Past"),
        ],
    )
    def test_time_until(self, now, expected):
        assert get_time_until_appointment(_appointment("09:00"), now) == expected

    def test_needs_reminder_window(self):
        appointment = _appointment("09:00")
        assert needs_reminder(appointment, datetime(2026, 3, 8, 9, 0)) is True
        assert needs_reminder(appointment, datetime(2026, 3, 8, 8, 59)) is False
        assert needs_reminder(appointment, datetime(2026, 3, 9, 9, 0)) is False

    def test_no_reminder_when_sent_or_unconfirmed(self):
        now = datetime(2026, 3, 9, 6, 0)
        assert needs_reminder(_appointment("09:00", reminder_sent=True), now) is False
        assert needs_reminder(_appointment("09:00", status=AppointmentStatus.PENDING), now) is False


class TestAppointmentLists:
    """Tests for sorting and filtering."""

    @pytest.fixture
    def appointments(self):
        return [
            _appointment("14:00", appointment_id="late"),
            _appointment("09:00", appointment_id="early"),
            _appointment("10:00", day=date(2026, 3, 2), appointment_id="last-week"),
            _appointment("11:00", status=AppointmentStatus.CANCELLED, appointment_id="cancelled"),
            _appointment("08:00", status=AppointmentStatus.COMPLETED, appointment_id="done"),
        ]

    def test_sort(self, appointments):
        assert [a.id for a in sort_appointments(appointments)] == [
            "last-week",
            "done",
            "early",
            "cancelled",
            "late",
        ]

    def test_filter_by_status(self, appointments):
        result = filter_appointments_by_status(appointments, [AppointmentStatus.CANCELLED])
        assert [a.id for a in result] == ["cancelled"]

    def test_upcoming_and_past(self, appointments):
        now = datetime(2026, 3, 9, 9, 30)
        assert [a.id for a in get_upcoming_appointments(appointments, now)] == ["late"]
        assert {a.id for a in get_past_appointments(appointments, now)} == {
            "early",
            "last-week",
            "done",
        }


class TestAppointmentHelpers:
    """Tests for type info, status display, loaners, and delivery."""

    def test_type_info(self):
        info = get_appointment_type_info(AppointmentType.INSPECTION)
        assert info["label"] == "In-Person Inspection"
        assert set(info) == {"label", "icon", "description"}

    def test_status_display(self):
        assert get_appointment_status_color("confirmed") == "#34C759"
        assert get_appointment_status_color("lost") == "#8E8E93"
        assert get_appointment_status_label(AppointmentStatus.PENDING) == "Pending Confirmation"
        assert get_appointment_status_label("lost") == "lost"

    def test_loaner_request_validation(self):
        ok = LoanerCarRequest(needed=True, preferences=LoanerCarPreferences(type="suv"))
        bad = LoanerCarRequest(needed=True, preferences=LoanerCarPreferences(type="limo"))
        unneeded = LoanerCarRequest(needed=False, preferences=LoanerCarPreferences(type="limo"))
        assert validate_loaner_car_request(ok) == {"is_valid": True, "errors": []}
        assert validate_loaner_car_request(bad) == {
            "is_valid": False,
            "errors": ["Invalid vehicle type preference"],
        }
        assert validate_loaner_car_request(unneeded)["is_valid"] is True

    def test_delivery_duration(self):
        assert estimate_delivery_duration(15) == 45
        assert estimate_delivery_duration(0) == 15
        assert estimate_delivery_duration(10) == 35

    def test_recommended_types(self):
        assert get_recommended_appointment_types("pending_review") == [AppointmentType.INSPECTION]
        assert get_recommended_appointment_types("approved") == [AppointmentType.DROP_OFF]
        assert get_recommended_appointment_types("completed") == [
            AppointmentType.PICKUP,
            AppointmentType.DELIVERY,
        ]
        assert len(get_recommended_appointment_types("rejected")) == 3
