"""
Request/response schemas for the booking API.

Field names follow the browser form (camelCase). The request model accepts
any value for the checked fields; the booking rules live in validation.py.
"""
from typing import Any, Optional

from pydantic import BaseModel

from models import Booking


class BookingCreate(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Any = None
    personnummer: Any = None
    destination: Optional[str] = None
    date: Any = None
    people: Any = None


class BookingRead(BaseModel):
    id: int
    firstName: str
    lastName: str
    personnummer: str
    destination: str
    date: str
    people: int
    email: str

    @classmethod
    def from_model(cls, booking: Booking) -> "BookingRead":
        return cls(
            id=booking.id,
            firstName=booking.first_name,
            lastName=booking.last_name,
            personnummer=booking.personnummer,
            destination=booking.destination,
            date=booking.travel_date.isoformat(),
            people=booking.people,
            email=booking.email,
        )


class BookingCreated(BaseModel):
    id: int


class BookingDeleted(BaseModel):
    deleted: int


class ErrorResponse(BaseModel):
    error: str
