"""Booking store - database operations for the bookings table"""

import logging
from typing import List, Optional

from sqlmodel import select
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from errors import DuplicateIdentity, StorageError
from models import Booking

logger = logging.getLogger(__name__)

# Ids are 64-bit integers; anything outside cannot name a stored row
MIN_ID = -(2**63)
MAX_ID = 2**63 - 1


def _storable_id(booking_id: int) -> bool:
    return MIN_ID <= booking_id <= MAX_ID


def _storage_error(exc: SQLAlchemyError) -> StorageError:
    # Surface the driver's message, not SQLAlchemy's wrapper
    orig = getattr(exc, "orig", None)
    return StorageError(str(orig) if orig is not None else str(exc))


class BookingStore:
    """Repository over a single table, one instance per session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, booking: Booking) -> int:
        """Persist a new booking and return its id."""
        try:
            self.session.add(booking)
            await self.session.commit()
            await self.session.refresh(booking)
        except IntegrityError:
            # The unique constraint caught a concurrent booking for the same identity
            await self.session.rollback()
            raise DuplicateIdentity()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Insert failed: {e}")
            raise _storage_error(e) from e
        return booking.id

    async def find_by_identity(self, personnummer: str) -> Optional[Booking]:
        statement = select(Booking).where(Booking.personnummer == personnummer)
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            logger.error(f"Lookup by personnummer failed: {e}")
            raise _storage_error(e) from e
        return result.scalars().first()

    async def list_all(self) -> List[Booking]:
        """All bookings, newest first."""
        statement = select(Booking).order_by(Booking.id.desc())
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            logger.error(f"Listing bookings failed: {e}")
            raise _storage_error(e) from e
        return list(result.scalars().all())

    async def find_by_id(self, booking_id: int) -> Optional[Booking]:
        if not _storable_id(booking_id):
            return None
        try:
            return await self.session.get(Booking, booking_id)
        except SQLAlchemyError as e:
            logger.error(f"Lookup of booking {booking_id} failed: {e}")
            raise _storage_error(e) from e

    async def delete_by_id(self, booking_id: int) -> int:
        """Hard-delete a booking, returning how many rows were removed."""
        if not _storable_id(booking_id):
            return 0
        statement = delete(Booking).where(Booking.id == booking_id)
        try:
            result = await self.session.execute(statement)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Delete of booking {booking_id} failed: {e}")
            raise _storage_error(e) from e
        return result.rowcount
