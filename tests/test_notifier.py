import smtplib
from datetime import date

import pytest

from config import Settings
from models import Booking
from notifier import (
    CANCELLATION_SUBJECT,
    CONFIRMATION_SUBJECT,
    Notifier,
    cancellation_message,
    confirmation_message,
)


class FakeSMTP:
    instances = []
    fail_with = None

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.sent = []
        self.logged_in = None
        self.closed = False
        FakeSMTP.instances.append(self)

    def ehlo(self):
        pass

    def has_extn(self, name):
        return False

    def login(self, user, password):
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        self.logged_in = (user, password)

    def sendmail(self, from_addr, to_addrs, msg):
        self.sent.append((from_addr, to_addrs, msg))

    def quit(self):
        self.closed = True


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def configured_notifier():
    return Notifier(
        host="smtp.example.com",
        port=587,
        username="bokning@example.com",
        password="hemligt",
        from_address="Urbansas <bokning@example.com>",
    )


def test_unconfigured_notifier_is_a_noop(fake_smtp):
    notifier = Notifier.from_settings(Settings(mail_host="smtp.example.com"))
    assert notifier.enabled is False
    assert notifier.verify() is False

    notifier.send("anna@example.com", "Hej", "Text")
    assert fake_smtp.instances == []


def test_mail_port_defaults_to_587(monkeypatch):
    monkeypatch.setenv("MAIL_HOST", "smtp.example.com")
    monkeypatch.setenv("MAIL_USER", "bokning@example.com")
    monkeypatch.setenv("MAIL_PASS", "hemligt")
    monkeypatch.delenv("MAIL_PORT", raising=False)
    monkeypatch.delenv("MAIL_FROM", raising=False)

    settings = Settings.from_env()
    assert settings.mail_port == 587

    notifier = Notifier.from_settings(settings)
    assert notifier.enabled is True
    assert notifier.from_address == "bokning@example.com"


def test_from_address_falls_back_to_user():
    notifier = Notifier(host="h", port=25, username="user@example.com", password="p")
    assert notifier.from_address == "user@example.com"


def test_send_delivers_plain_text(fake_smtp):
    notifier = configured_notifier()
    notifier.send("anna@example.com", CONFIRMATION_SUBJECT, "Hej Anna!")

    (server,) = fake_smtp.instances
    assert (server.host, server.port) == ("smtp.example.com", 587)
    assert server.logged_in == ("bokning@example.com", "hemligt")
    from_addr, to_addrs, _ = server.sent[0]
    assert from_addr == "Urbansas <bokning@example.com>"
    assert to_addrs == ["anna@example.com"]
    assert server.closed


def test_send_swallows_transport_errors(fake_smtp, caplog):
    fake_smtp.fail_with = smtplib.SMTPAuthenticationError(535, b"bad credentials")
    notifier = configured_notifier()

    notifier.send("anna@example.com", "Hej", "Text")

    assert "Mail-fel" in caplog.text


def test_failed_verify_disables_notifier(fake_smtp):
    fake_smtp.fail_with = ConnectionRefusedError("connection refused")
    notifier = configured_notifier()

    assert notifier.verify() is False
    assert notifier.enabled is False

    fake_smtp.instances = []
    notifier.send("anna@example.com", "Hej", "Text")
    assert fake_smtp.instances == []


def test_successful_verify(fake_smtp):
    notifier = configured_notifier()
    assert notifier.verify() is True
    assert notifier.enabled is True
    assert fake_smtp.instances[0].closed


def test_messages_include_trip_details():
    booking = Booking(
        id=1,
        first_name="Anna",
        last_name="Svensson",
        personnummer="1234",
        destination="Paris",
        travel_date=date(2026, 6, 1),
        people=2,
        email="anna@example.com",
    )

    subject, body = confirmation_message(booking)
    assert subject == CONFIRMATION_SUBJECT
    assert body == (
        "Hej Anna!\n\nDin bokning är genomförd.\n\n"
        "Destination: Paris\nDatum: 2026-06-01\nAntal personer: 2\n\n"
        "Urbansas Bussresor"
    )

    subject, body = cancellation_message(booking)
    assert subject == CANCELLATION_SUBJECT
    assert body.startswith("Hej Anna!\n\nDin bokning har tagits bort.")
    assert "Destination: Paris" in body
