"""Response parsing for board replies."""

from __future__ import annotations

from datetime import datetime

from ..errors import ProtocolError
from ..models.access_record import AccessRecord
from ..models.user import UserRecord
from .commands import TIMESTAMP_FORMAT, Command
from .framing import PREAMBLE, Frame, hex_to_int

STATUS_OK = "01"
TIMESTAMP_HEX_LENGTH = 14


def check_frame(frame: Frame, command: Command, serial_number: str | None = None) -> Frame:
    """Verify a response frame answers ``command`` from the expected board.

    Raises:
        ProtocolError: On a wrong preamble, verb or serial number.
    """
    header = frame.header
    if header.preamble != PREAMBLE:
        raise ProtocolError(f"Unexpected preamble {header.preamble!r}")
    if header.verb != command:
        raise ProtocolError(
            f"Expected reply to 0x{command:02X}, got 0x{header.verb:02X}"
        )
    if serial_number is not None and header.serial_number.lower() != serial_number.lower():
        raise ProtocolError(
            f"Reply from board {header.serial_number}, expected {serial_number}"
        )
    return frame


def parse_status(frame: Frame) -> str:
    """Return the status byte of an Add/Delete User reply."""
    return frame.payload[0:2]


def is_success(frame: Frame) -> bool:
    """True when the status byte reports success."""
    return parse_status(frame) == STATUS_OK


def parse_user(frame: Frame) -> UserRecord | None:
    """Parse a Get User reply, None when the board does not know the tag."""
    return UserRecord.from_payload(frame.payload)


def parse_event_count(frame: Frame) -> int:
    """Parse a Get Event Count reply."""
    return hex_to_int(frame.payload[0:8])


def parse_access_record(frame: Frame) -> AccessRecord:
    """Parse a Get Event reply."""
    return AccessRecord.from_payload(frame.payload)


def parse_timestamp(frame: Frame) -> str:
    """Return the literal ``YYYYMMDDhhmmss`` text of a Get Time reply."""
    return frame.payload[0:TIMESTAMP_HEX_LENGTH]


def parse_time(frame: Frame) -> datetime:
    """Parse a Get Time reply into a naive board-local datetime.

    Raises:
        ProtocolError: If the timestamp is not a valid date and time.
    """
    raw = parse_timestamp(frame)
    try:
        return datetime.strptime(raw, TIMESTAMP_FORMAT)
    except ValueError as e:
        raise ProtocolError(f"Invalid board timestamp {raw!r}: {e}") from e
