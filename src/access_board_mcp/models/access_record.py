"""Access event record as stored in the board's circular event log.

Layout (hex-character offsets relative to the payload start)::

    +-------+------+--------+------+-------------+-------+----------------+-------+
    | Index | Type | Access | Door | Door status |  Tag  |   Timestamp    | Type2 |
    | 4 B LE| 1 B  | 1 B    | 1 B  | 1 B         | 4 B LE| 7 B YYYYMMDD.. | 1 B   |
    +-------+------+--------+------+-------------+-------+----------------+-------+
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

from ..protocol.framing import hex_to_int

OFF_INDEX = 0            # 4 bytes, byte-reversed
OFF_RECORD_TYPE = 8      # 1 byte
OFF_ACCESS = 10          # 1 byte, "01" = granted
OFF_DOOR = 12            # 1 byte
OFF_DOOR_STATUS = 14     # 1 byte
OFF_TAG = 16             # 4 bytes, byte-reversed
OFF_TIMESTAMP = 24       # 14 digits
OFF_RECORD_TYPE_2 = 38   # 1 byte
RECORD_HEX_LENGTH = 40

ACCESS_GRANTED = "01"
KEYPAD_TAG = 10


@dataclass(frozen=True)
class AccessRecord:
    """One logged access event."""

    index: int
    record_type: str
    access_granted: bool
    door_id: str
    door_status: str
    tag_serial: int
    # Kept exactly as the board sent it, e.g. "20180312105832"
    timestamp: str
    record_type_2: str

    @property
    def keypad_entry(self) -> bool:
        """The board reports keypad entries with tag number 10."""
        return self.tag_serial == KEYPAD_TAG

    @classmethod
    def from_payload(cls, payload: str) -> AccessRecord:
        """Deserialize an event from a Get Event response payload."""
        return cls(
            index=hex_to_int(payload[OFF_INDEX:OFF_RECORD_TYPE]),
            record_type=payload[OFF_RECORD_TYPE:OFF_ACCESS],
            access_granted=payload[OFF_ACCESS:OFF_DOOR] == ACCESS_GRANTED,
            door_id=payload[OFF_DOOR:OFF_DOOR_STATUS],
            door_status=payload[OFF_DOOR_STATUS:OFF_TAG],
            tag_serial=hex_to_int(payload[OFF_TAG:OFF_TIMESTAMP]),
            timestamp=payload[OFF_TIMESTAMP:OFF_RECORD_TYPE_2],
            record_type_2=payload[OFF_RECORD_TYPE_2:RECORD_HEX_LENGTH],
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["keypad_entry"] = self.keypad_entry
        return data
