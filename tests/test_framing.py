"""Tests for byte-order reversal and frame building/parsing."""

import pytest

from access_board_mcp.errors import FrameSizeError, HexFormatError, ProtocolError
from access_board_mcp.protocol.framing import (
    FRAME_HEX_LENGTH,
    PREAMBLE,
    build_frame,
    build_header,
    hex_to_int,
    int_to_hex,
    parse_frame,
    parse_header,
    reverse_bytes,
)

SERIAL = "AABBCCDD"


def test_reverse_bytes():
    """Byte pairs should come out in reverse order."""
    assert reverse_bytes("AABBCCDD") == "DDCCBBAA"
    assert reverse_bytes("0A000000") == "0000000A"


def test_reverse_bytes_empty_and_single():
    """Empty text and a single byte are their own reversal."""
    assert reverse_bytes("") == ""
    assert reverse_bytes("17") == "17"


@pytest.mark.parametrize("text", ["", "00", "1234", "deadbeef", "0102030405060708090a"])
def test_reverse_bytes_self_inverse(text):
    """Reversing twice must return the original text."""
    assert reverse_bytes(reverse_bytes(text)) == text


def test_reverse_bytes_odd_length():
    """Odd-length text is a caller error."""
    with pytest.raises(HexFormatError):
        reverse_bytes("ABC")


def test_hex_to_int_reverses():
    """Numeric fields are little-endian on the wire."""
    assert hex_to_int("0A000000") == 10
    assert hex_to_int("ffffffff") == 0xFFFFFFFF


def test_hex_to_int_rejects_non_hex():
    with pytest.raises(HexFormatError):
        hex_to_int("zz000000")


def test_int_to_hex():
    assert int_to_hex(10) == "0A000000"
    assert int_to_hex(0xFFFFFFFF) == "FFFFFFFF"
    with pytest.raises(HexFormatError):
        int_to_hex(1 << 32)


def test_build_header():
    """Header is preamble + verb + zero reserved + reversed serial."""
    assert build_header("50", SERIAL) == "1750" + "0000" + "DDCCBBAA"


def test_build_header_int_verb():
    """An integer verb is rendered as two hex digits."""
    assert build_header(0xB4, SERIAL) == "17B40000DDCCBBAA"


def test_build_header_bad_serial():
    """Serial numbers must be 8 hex digits."""
    with pytest.raises(HexFormatError):
        build_header(0x50, "AABBCC")
    with pytest.raises(HexFormatError):
        build_header(0x50, "AABBCCGG")


def test_build_frame_size():
    """Every built frame must be exactly 64 bytes."""
    frame = build_frame(0x50, SERIAL, "01020304")
    assert len(frame) == FRAME_HEX_LENGTH
    assert frame.startswith("17500000DDCCBBAA01020304")
    assert frame[24:] == "0" * (FRAME_HEX_LENGTH - 24)


def test_build_frame_empty_payload():
    frame = build_frame(0x32, SERIAL)
    assert frame == "17320000DDCCBBAA".ljust(FRAME_HEX_LENGTH, "0")


def test_build_frame_payload_fills_frame():
    """A payload that exactly fills the frame is allowed."""
    payload = "AB" * 56
    frame = build_frame(0x50, SERIAL, payload)
    assert len(frame) == FRAME_HEX_LENGTH
    assert frame.endswith(payload)


def test_build_frame_too_large():
    """Frames may never exceed 64 bytes."""
    with pytest.raises(FrameSizeError):
        build_frame(0x50, SERIAL, "AB" * 57)


def test_build_frame_rejects_non_hex_payload():
    with pytest.raises(HexFormatError):
        build_frame(0x50, SERIAL, "hello")


def test_parse_header():
    """Header fields are sliced out and the serial is restored."""
    header = parse_header(build_frame(0x5A, SERIAL, "01000000"))
    assert header.preamble == PREAMBLE
    assert header.verb == 0x5A
    assert header.reserved == "0000"
    assert header.serial_number == SERIAL


def test_parse_frame_payload():
    frame = parse_frame(build_frame(0xB4, SERIAL, "05000000"))
    assert frame.header.verb == 0xB4
    assert frame.payload.startswith("05000000")
    assert len(frame.payload) == FRAME_HEX_LENGTH - 16


def test_parse_frame_wrong_length():
    """Responses that are not 64 bytes are protocol errors."""
    with pytest.raises(ProtocolError):
        parse_frame("17320000DDCCBBAA")
    with pytest.raises(ProtocolError):
        parse_frame(build_frame(0x32, SERIAL) + "00")


def test_parse_frame_not_hex():
    with pytest.raises(ProtocolError):
        parse_frame("zz" * 64)


def test_frame_repr():
    """Frame repr should be readable."""
    r = repr(parse_frame(build_frame(0xB4, SERIAL, "05")))
    assert "0xB4" in r
    assert SERIAL in r


def test_frame_repr_keeps_payload_zeros():
    """Only whole zero padding bytes are trimmed from the repr."""
    frame = parse_frame(build_frame(0xB4, SERIAL, "10"))
    assert frame.trimmed_payload() == "10"
    assert "payload=10)" in repr(frame)

    frame = parse_frame(build_frame(0xB4, SERIAL, "0500A0"))
    assert frame.trimmed_payload() == "0500A0"


def test_frame_repr_empty_payload():
    assert "payload=(empty)" in repr(parse_frame(build_frame(0x32, SERIAL)))
