"""Tag number conversions.

An RFID reader reports a credential as one integer, but the board knows
it by a different number: the 24-bit value is split into an 8-bit
facility prefix and a 16-bit card suffix, and the two decimal numbers
are written side by side. Inside request frames that card number is
then sent as 8 byte-reversed hex digits (the "device form").
"""

from __future__ import annotations

from ..errors import HexFormatError, TagRangeError
from .framing import hex_to_int, is_hex, reverse_bytes

SPLIT_TAG_BITS = 24
DEVICE_TAG_BITS = 32
DEVICE_TAG_HEX_LENGTH = 8


def split_tag(tag: int) -> tuple[int, int]:
    """Split a 24-bit tag into its 8-bit prefix and 16-bit suffix."""
    if not 0 <= tag < 1 << SPLIT_TAG_BITS:
        raise TagRangeError(f"Tag must be 0-{(1 << SPLIT_TAG_BITS) - 1}, got {tag}")
    return tag >> 16, tag & 0xFFFF


def join_tag(prefix: int, suffix: int) -> int:
    """Inverse of :func:`split_tag`."""
    if not 0 <= prefix <= 0xFF or not 0 <= suffix <= 0xFFFF:
        raise TagRangeError(f"Invalid tag parts: prefix={prefix}, suffix={suffix}")
    return (prefix << 16) | suffix


def to_split_decimal(tag: int) -> str:
    """Render ``tag`` in split-decimal form.

    ``to_split_decimal(10978235) == "16733723"`` (0xA7 -> 167,
    0x83BB -> 33723).
    """
    prefix, suffix = split_tag(tag)
    return f"{prefix}{suffix}"


def scanned_to_card_number(tag: int) -> int:
    """Convert the number a reader scans into the number the board stores."""
    return int(to_split_decimal(tag))


def to_device_form(tag: int) -> str:
    """Encode a card number as 8 byte-reversed hex digits."""
    if not 0 <= tag < 1 << DEVICE_TAG_BITS:
        raise TagRangeError(f"Tag must be 0-{(1 << DEVICE_TAG_BITS) - 1}, got {tag}")
    return reverse_bytes(f"{tag:08X}")


def from_device_form(device_hex: str) -> int:
    """Decode a device-form tag field back into the card number."""
    if len(device_hex) != DEVICE_TAG_HEX_LENGTH or not is_hex(device_hex):
        raise HexFormatError(f"Device tag must be 8 hex digits, got {device_hex!r}")
    return hex_to_int(device_hex)


def is_empty_tag(device_hex: str) -> bool:
    """True for the all-zero and all-F placeholders the board uses for "no user"."""
    return device_hex.lower() in ("00000000", "ffffffff")
