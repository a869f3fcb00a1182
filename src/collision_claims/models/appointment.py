"""Pydantic models for shop schedules, time slots, and appointments."""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class AppointmentType(str, Enum):
    DROP_OFF = "drop_off"
    INSPECTION = "inspection"
    PICKUP = "pickup"
    DELIVERY = "delivery"


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    RESCHEDULED = "rescheduled"


class TimeWindow(BaseModel):
    """Start/end pair in 24-hour "HH:MM" form."""

    start: str = Field(..., description="Start time (HH:MM)")
    end: str = Field(..., description="End time (HH:MM)")


class BodyShopSchedule(BaseModel):
    """Opening hours for one weekday. day_of_week uses 0 = Sunday .. 6 = Saturday."""

    body_shop_id: str = Field(default="", description="Body shop ID")
    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday, 6 = Saturday")
    open_time: str = Field(..., description="Opening time (HH:MM)")
    close_time: str = Field(..., description="Closing time (HH:MM)")
    slot_duration: int = Field(default=30, gt=0, description="Slot length in minutes")
    break_times: list[TimeWindow] = Field(default_factory=list, description="Closed windows")
    max_concurrent_appointments: int = Field(default=3, description="Bookings allowed per slot")


class TimeSlot(BaseModel):
    id: str = Field(..., description="Slot ID (slot-YYYY-MM-DD-index)")
    date: dt.date = Field(..., description="Slot date")
    start_time: str = Field(..., description="Start time (HH:MM)")
    end_time: str = Field(..., description="End time (HH:MM)")
    is_available: bool = Field(..., description="True when bookings are below capacity")
    max_capacity: int = Field(..., description="Bookings allowed")
    current_bookings: int = Field(default=0, description="Non-cancelled bookings")


class LoanerCarPreferences(BaseModel):
    type: Optional[str] = Field(default=None, description="sedan, suv, truck, or any")
    features: list[str] = Field(default_factory=list)


class AssignedVehicle(BaseModel):
    make: str
    model: str
    year: int
    license_plate: str


class LoanerCarRequest(BaseModel):
    needed: bool = Field(default=False)
    preferences: Optional[LoanerCarPreferences] = Field(default=None)
    approved: Optional[bool] = Field(default=None)
    assigned_vehicle: Optional[AssignedVehicle] = Field(default=None)


class DeliveryAddress(BaseModel):
    street: str
    city: str
    state: str
    zip_code: str


class Appointment(BaseModel):
    """Booked shop visit. scheduled_date plus time_slot.start give the local start time."""

    id: str = Field(..., description="Appointment ID")
    claim_id: str = Field(..., description="Related claim ID")
    customer_id: str = Field(default="")
    customer_name: str = Field(default="")
    customer_phone: str = Field(default="")
    body_shop_id: str = Field(default="")
    body_shop_name: str = Field(default="")
    type: AppointmentType = Field(..., description="Appointment type")
    status: AppointmentStatus = Field(default=AppointmentStatus.PENDING)
    scheduled_date: dt.date = Field(..., description="Appointment date")
    time_slot: TimeWindow = Field(..., description="Booked time window")
    duration: int = Field(default=30, description="Duration in minutes")
    loaner_car_request: Optional[LoanerCarRequest] = Field(default=None)
    delivery_address: Optional[DeliveryAddress] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    reminder_sent: bool = Field(default=False)
    created_at: Optional[dt.datetime] = Field(default=None)
    updated_at: Optional[dt.datetime] = Field(default=None)
    confirmed_at: Optional[dt.datetime] = Field(default=None)
    cancelled_at: Optional[dt.datetime] = Field(default=None)
    cancellation_reason: Optional[str] = Field(default=None)
    rescheduled_from: Optional[str] = Field(default=None, description="Original appointment ID")
