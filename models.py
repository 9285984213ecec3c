from typing import Optional
from datetime import date
from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint

class Booking(SQLModel, table=True):
    __tablename__ = "bookings"
    __table_args__ = (
        # One active booking per personnummer, enforced by the database too
        UniqueConstraint("personnummer", name="unique_booking_personnummer"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str
    last_name: str
    personnummer: str = Field(index=True)
    destination: str
    travel_date: date
    people: int
    email: str
