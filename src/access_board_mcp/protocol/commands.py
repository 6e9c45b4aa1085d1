"""Command verb constants and request builders.

Each command is identified by a single verb byte which the board echoes
back in its response frame.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import IntEnum

from ..errors import ValidationError
from .framing import build_frame, int_to_hex
from .tags import to_device_form

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"

LATEST_EVENT_INDEX = 0xFFFFFFFF
ALL_SYSTEMS = b"\x01\x01\x01\x01"
SYSTEMS_MASK_SIZE = 4
DEFAULT_VALIDITY_YEARS = 10


class Command(IntEnum):
    """Command verbs."""

    SET_TIME = 0x30
    GET_TIME = 0x32
    ADD_USER = 0x50
    DELETE_USER = 0x52
    GET_USER = 0x5A
    GET_EVENT = 0xB0
    GET_EVENT_COUNT = 0xB4


def build_command(command: Command, serial_number: str, payload: str = "") -> str:
    """Build a single 64-byte request frame for a command."""
    return build_frame(command.value, serial_number, payload)


def format_date(day: date) -> str:
    """Render a date as exactly 8 digits, YYYYMMDD."""
    return f"{day.year:04d}{day.month:02d}{day.day:02d}"


def format_timestamp(when: datetime) -> str:
    """Render a datetime as exactly 14 digits, YYYYMMDDhhmmss."""
    return f"{format_date(when)}{when.hour:02d}{when.minute:02d}{when.second:02d}"


def add_years(day: date, years: int) -> date:
    """Shift ``day`` by whole years, rolling Feb 29 over to Mar 1."""
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        return date(day.year + years, 3, 1)


def build_add_user(
    serial_number: str,
    tag: int,
    valid_from: date | None = None,
    valid_until: date | None = None,
    systems: bytes = ALL_SYSTEMS,
) -> str:
    """Build an Add User request.

    Args:
        serial_number: Board serial number.
        tag: Card number as the board knows it.
        valid_from: First valid day, today when omitted.
        valid_until: Last valid day, ``valid_from`` + 10 years when omitted.
        systems: One flag byte per door/system class.
    """
    if len(systems) != SYSTEMS_MASK_SIZE:
        raise ValidationError(
            f"Systems mask must be {SYSTEMS_MASK_SIZE} bytes, got {len(systems)}"
        )
    if valid_from is None:
        valid_from = date.today()
    if valid_until is None:
        valid_until = add_years(valid_from, DEFAULT_VALIDITY_YEARS)
    if valid_until < valid_from:
        raise ValidationError(f"valid_until {valid_until} is before valid_from {valid_from}")

    payload = (
        to_device_form(tag)
        + format_date(valid_from)
        + format_date(valid_until)
        + bytes(systems).hex().upper()
    )
    return build_command(Command.ADD_USER, serial_number, payload)


def build_get_user(serial_number: str, tag: int) -> str:
    """Build a Get User request."""
    return build_command(Command.GET_USER, serial_number, to_device_form(tag))


def build_delete_user(serial_number: str, tag: int) -> str:
    """Build a Delete User request."""
    return build_command(Command.DELETE_USER, serial_number, to_device_form(tag))


def build_get_event_count(serial_number: str) -> str:
    """Build a Get Event Count request (no payload)."""
    return build_command(Command.GET_EVENT_COUNT, serial_number)


def build_get_event(serial_number: str, index: int = LATEST_EVENT_INDEX) -> str:
    """Build a Get Event request.

    Args:
        serial_number: Board serial number.
        index: Event log position; ``0xFFFFFFFF`` asks for the latest event.
    """
    if not 0 <= index <= LATEST_EVENT_INDEX:
        raise ValidationError(f"Event index must be 0-0xFFFFFFFF, got {index}")
    return build_command(Command.GET_EVENT, serial_number, int_to_hex(index))


def build_get_time(serial_number: str) -> str:
    """Build a Get Time request (no payload)."""
    return build_command(Command.GET_TIME, serial_number)


def build_set_time(serial_number: str, when: datetime | None = None) -> str:
    """Build a Set Time request carrying ``when`` (now if omitted)."""
    if when is None:
        when = datetime.now()
    return build_command(Command.SET_TIME, serial_number, format_timestamp(when))
