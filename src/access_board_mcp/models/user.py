"""User (card holder) record returned by Get User."""

from __future__ import annotations

from dataclasses import dataclass

from ..protocol.tags import from_device_form, is_empty_tag

OFF_TAG = 0            # 4 bytes, byte-reversed
OFF_VALID_FROM = 8     # YYYYMMDD
OFF_VALID_UNTIL = 16   # YYYYMMDD
OFF_SYSTEMS = 24       # 4 bytes, one flag per door/system class
USER_HEX_LENGTH = 32


@dataclass(frozen=True)
class UserRecord:
    """A card registered on the board."""

    tag_serial: int
    valid_from: str
    valid_until: str
    enabled_systems: bytes

    @property
    def enabled_system_numbers(self) -> list[int]:
        """1-based numbers of the systems this card may open."""
        return [i + 1 for i, flag in enumerate(self.enabled_systems) if flag]

    @classmethod
    def from_payload(cls, payload: str) -> UserRecord | None:
        """Deserialize a Get User payload, or None if the board has no such user."""
        tag_hex = payload[OFF_TAG:OFF_VALID_FROM]
        if is_empty_tag(tag_hex):
            return None
        return cls(
            tag_serial=from_device_form(tag_hex),
            valid_from=payload[OFF_VALID_FROM:OFF_VALID_UNTIL],
            valid_until=payload[OFF_VALID_UNTIL:OFF_SYSTEMS],
            enabled_systems=bytes.fromhex(payload[OFF_SYSTEMS:USER_HEX_LENGTH]),
        )

    def to_dict(self) -> dict:
        return {
            "tag_serial": self.tag_serial,
            "valid_from": self.valid_from,
            "valid_until": self.valid_until,
            "enabled_systems": self.enabled_systems.hex(),
            "enabled_system_numbers": self.enabled_system_numbers,
        }

    def __repr__(self) -> str:
        return (
            f"UserRecord(tag_serial={self.tag_serial}, "
            f"valid={self.valid_from}-{self.valid_until}, "
            f"systems={self.enabled_systems.hex()})"
        )
