"""
Best-effort email notifications over SMTP.

Mail is a side channel: a missing configuration or a failing relay turns
sends into logged no-ops and never touches the booking that triggered them.
"""

import logging
import smtplib
import ssl
from email.mime.text import MIMEText
from typing import Optional

from config import Settings
from errors import NotificationError
from models import Booking

logger = logging.getLogger(__name__)

SIGNATURE = "Urbansas Bussresor"
CONFIRMATION_SUBJECT = f"Bokningsbekräftelse – {SIGNATURE}"
CANCELLATION_SUBJECT = f"Avbokning – {SIGNATURE}"


def _trip_details(booking: Booking) -> str:
    return (
        f"Destination: {booking.destination}\n"
        f"Datum: {booking.travel_date.isoformat()}\n"
        f"Antal personer: {booking.people}\n\n"
        f"{SIGNATURE}"
    )


def confirmation_message(booking: Booking) -> tuple[str, str]:
    """Subject and body for a new booking"""
    body = f"Hej {booking.first_name}!\n\nDin bokning är genomförd.\n\n" + _trip_details(booking)
    return CONFIRMATION_SUBJECT, body


def cancellation_message(booking: Booking) -> tuple[str, str]:
    """Subject and body for a removed booking"""
    body = f"Hej {booking.first_name}!\n\nDin bokning har tagits bort.\n\n" + _trip_details(booking)
    return CANCELLATION_SUBJECT, body


class Notifier:
    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        from_address: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_address = from_address or username
        self.timeout = timeout
        self.enabled = all((host, port, username, password))

    @classmethod
    def from_settings(cls, settings: Settings) -> "Notifier":
        return cls(
            host=settings.mail_host,
            port=settings.mail_port,
            username=settings.mail_user,
            password=settings.mail_password,
            from_address=settings.mail_from,
            timeout=settings.mail_timeout,
        )

    def _connect(self) -> smtplib.SMTP:
        context = ssl.create_default_context()
        if self.port == 465:
            server = smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=self.timeout)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
            server.ehlo()
            # Upgrade when the relay offers it, plain otherwise
            if server.has_extn("starttls"):
                server.starttls(context=context)
                server.ehlo()
        server.login(self.username, self.password)
        return server

    def verify(self) -> bool:
        """Check the SMTP login once at startup; disable mail if it fails."""
        if not self.enabled:
            logger.info("Mail: SMTP not configured, notifications disabled")
            return False
        try:
            server = self._connect()
            server.quit()
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"Mail: SMTP error {e}, notifications disabled")
            self.enabled = False
            return False
        logger.info(f"Mail: SMTP ready via {self.host}:{self.port}")
        return True

    def _deliver(self, to: str, subject: str, body: str) -> None:
        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to
        try:
            server = self._connect()
            try:
                server.sendmail(self.from_address, [to], msg.as_string())
            finally:
                server.quit()
        except Exception as e:
            raise NotificationError(f"Mail-fel: {e}") from e

    def send(self, to: str, subject: str, body: str) -> None:
        """Send a plain-text mail. Never raises."""
        if not self.enabled:
            return
        try:
            self._deliver(to, subject, body)
        except NotificationError as e:
            logger.error(f"{e.message} (to={to})")
            return
        logger.info(f"Mail sent to {to}: {subject}")
