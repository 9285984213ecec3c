"""Booking service - business logic for creating, listing and removing bookings"""

import logging
from typing import List

from fastapi import BackgroundTasks

from errors import BookingValidationError, DuplicateIdentity
from models import Booking
from notifier import Notifier, cancellation_message, confirmation_message
from schemas import BookingCreate
from store import BookingStore
from validation import validate_booking

logger = logging.getLogger(__name__)


class BookingService:
    """Orchestrates validation, persistence and notification."""

    def __init__(self, store: BookingStore, notifier: Notifier):
        self.store = store
        self.notifier = notifier

    async def create_booking(self, data: BookingCreate, background_tasks: BackgroundTasks) -> int:
        """Validate and store a booking, then queue the confirmation mail.

        All checks run before anything is written. The mail is only queued
        once the insert has committed and is sent after the response.
        """
        try:
            booking = validate_booking(data)
        except BookingValidationError as e:
            logger.warning(f"Rejected booking: {e.message}")
            raise

        existing = await self.store.find_by_identity(booking.personnummer)
        if existing is not None:
            logger.warning(f"Rejected duplicate booking for personnummer {booking.personnummer}")
            raise DuplicateIdentity()

        booking_id = await self.store.insert(booking)
        logger.info(f"Created booking {booking_id} to {booking.destination} on {booking.travel_date}")

        subject, body = confirmation_message(booking)
        background_tasks.add_task(self.notifier.send, booking.email, subject, body)
        return booking_id

    async def list_bookings(self) -> List[Booking]:
        return await self.store.list_all()

    async def delete_booking(self, booking_id: int, background_tasks: BackgroundTasks) -> int:
        """Remove a booking; a missing id is a no-op that returns 0."""
        booking = await self.store.find_by_id(booking_id)
        deleted = await self.store.delete_by_id(booking_id)
        logger.info(f"Deleted {deleted} booking(s) with id {booking_id}")

        if booking is not None and booking.email:
            subject, body = cancellation_message(booking)
            background_tasks.add_task(self.notifier.send, booking.email, subject, body)
        return deleted
