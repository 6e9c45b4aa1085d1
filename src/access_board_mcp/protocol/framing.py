"""Frame builder and parser for the board's 64-byte datagrams.

Frames are handled as hex text, two characters per byte. Frame layout::

    +----------+------+----------+---------------+--------------------+
    | Preamble | Verb | Reserved | Serial number |      Payload       |
    | 1 byte   | 1 B  | 2 bytes  | 4 bytes (LE)  | zero padded to 64 B|
    +----------+------+----------+---------------+--------------------+

- Preamble: always 0x17
- Reserved: zero in requests, device state in responses
- Serial number: the board's id, byte-reversed on the wire

Numeric fields are little-endian on the wire while the rest of the
protocol is read as big-endian hex text, so :func:`reverse_bytes` is
applied to serial numbers, tag numbers and record indices.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import FrameSizeError, HexFormatError, ProtocolError

PREAMBLE = "17"
FRAME_SIZE = 64
FRAME_HEX_LENGTH = FRAME_SIZE * 2
HEADER_HEX_LENGTH = 16  # preamble(1) + verb(1) + reserved(2) + serial(4)
SERIAL_HEX_LENGTH = 8

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def is_hex(text: str) -> bool:
    """Return True if ``text`` contains only hex digits."""
    return all(c in _HEX_DIGITS for c in text)


def reverse_bytes(hex_string: str) -> str:
    """Reverse the order of the 2-character byte groups in ``hex_string``.

    ``reverse_bytes("AABBCCDD") == "DDCCBBAA"``. Applying it twice returns
    the original text.

    Raises:
        HexFormatError: If the text has an odd number of characters.
    """
    if len(hex_string) % 2:
        raise HexFormatError(
            f"Hex text must have an even length, got {len(hex_string)}: {hex_string!r}"
        )
    return "".join(
        hex_string[i : i + 2] for i in range(len(hex_string) - 2, -1, -2)
    )


def hex_to_int(hex_string: str) -> int:
    """Decode a byte-reversed hex field into an integer."""
    if not hex_string or not is_hex(hex_string):
        raise HexFormatError(f"Not a hex field: {hex_string!r}")
    return int(reverse_bytes(hex_string), 16)


def int_to_hex(value: int, width: int = 8) -> str:
    """Encode ``value`` as a zero-padded, byte-reversed hex field."""
    if value < 0 or value >= 1 << (width * 4):
        raise HexFormatError(f"{value} does not fit in {width} hex digits")
    return reverse_bytes(f"{value:0{width}X}")


def validate_serial_number(serial_number: str) -> str:
    """Check a board serial number is 8 hex digits and return it."""
    if len(serial_number) != SERIAL_HEX_LENGTH or not is_hex(serial_number):
        raise HexFormatError(
            f"Serial number must be {SERIAL_HEX_LENGTH} hex digits, got {serial_number!r}"
        )
    return serial_number


def _verb_hex(verb: int | str) -> str:
    if isinstance(verb, str):
        if len(verb) != 2 or not is_hex(verb):
            raise HexFormatError(f"Verb must be one hex byte, got {verb!r}")
        return verb
    if not 0 <= verb <= 0xFF:
        raise HexFormatError(f"Verb must be 0-255, got {verb}")
    return f"{verb:02X}"


@dataclass(frozen=True)
class Header:
    """The common prelude present in every frame."""

    preamble: str
    verb: int
    reserved: str
    serial_number: str


@dataclass(frozen=True)
class Frame:
    """A parsed response frame: header plus the raw payload hex."""

    header: Header
    payload: str

    def trimmed_payload(self) -> str:
        """Payload with trailing zero padding bytes removed."""
        payload = self.payload
        while payload.endswith("00"):
            payload = payload[:-2]
        return payload

    def __repr__(self) -> str:
        return (
            f"Frame(verb=0x{self.header.verb:02X}, "
            f"serial={self.header.serial_number}, "
            f"payload={self.trimmed_payload() or '(empty)'})"
        )


def build_header(verb: int | str, serial_number: str) -> str:
    """Build the 8-byte prelude for a request.

    Args:
        verb: Command byte, as an int or two hex digits.
        serial_number: Board serial number in its natural big-endian form.
    """
    validate_serial_number(serial_number)
    return PREAMBLE + _verb_hex(verb) + "0000" + reverse_bytes(serial_number)


def build_frame(verb: int | str, serial_number: str, payload: str = "") -> str:
    """Build a complete 128-character request frame.

    Args:
        verb: Command byte.
        serial_number: Board serial number.
        payload: Verb-specific payload hex text.

    Returns:
        Hex text right-padded with ``0`` to exactly 64 bytes.

    Raises:
        FrameSizeError: If header plus payload exceed 64 bytes.
    """
    if not is_hex(payload):
        raise HexFormatError(f"Payload is not hex text: {payload!r}")
    frame = build_header(verb, serial_number) + payload
    if len(frame) > FRAME_HEX_LENGTH:
        raise FrameSizeError(
            f"Frame is {len(frame) // 2} bytes, limit is {FRAME_SIZE}"
        )
    return frame.ljust(FRAME_HEX_LENGTH, "0")


def parse_header(response_hex: str) -> Header:
    """Slice the prelude out of a response frame."""
    if len(response_hex) < HEADER_HEX_LENGTH or not is_hex(response_hex[:HEADER_HEX_LENGTH]):
        raise ProtocolError(f"Response too short or not hex: {response_hex[:32]!r}")
    return Header(
        preamble=response_hex[0:2],
        verb=int(response_hex[2:4], 16),
        reserved=response_hex[4:8],
        serial_number=reverse_bytes(response_hex[8:16]),
    )


def parse_frame(response_hex: str) -> Frame:
    """Parse a 64-byte response into a :class:`Frame`.

    Raises:
        ProtocolError: If the response is not exactly 64 bytes of hex.
    """
    if len(response_hex) != FRAME_HEX_LENGTH:
        raise ProtocolError(
            f"Response must be {FRAME_SIZE} bytes, got {len(response_hex) / 2:g}"
        )
    if not is_hex(response_hex):
        raise ProtocolError("Response is not hex text")
    return Frame(
        header=parse_header(response_hex),
        payload=response_hex[HEADER_HEX_LENGTH:],
    )
