"""Connection settings for a board.

Settings are passed explicitly into :class:`~access_board_mcp.client.BoardClient`;
:meth:`BoardConfig.from_env` builds them from ``ACCESS_BOARD_*`` environment
variables for the server entry point.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ValidationError
from .protocol.framing import FRAME_SIZE, is_hex, validate_serial_number

DEFAULT_PORT = 60000
DEFAULT_TIMEOUT = 5.0
DEFAULT_BUFFER_SIZE = 2045
DEFAULT_RETRY_DELAY = 0.5
ENV_PREFIX = "ACCESS_BOARD_"


def serial_from_mac(mac: str) -> str:
    """Derive a board serial number from the last four bytes of its MAC address."""
    digits = mac.replace(":", "").replace("-", "").replace(".", "")
    if len(digits) != 12 or not is_hex(digits):
        raise ValidationError(f"Not a MAC address: {mac!r}")
    return digits[-8:].upper()


@dataclass(frozen=True)
class BoardConfig:
    """Where the board lives and how long to wait for it."""

    host: str
    serial_number: str
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_TIMEOUT
    buffer_size: int = DEFAULT_BUFFER_SIZE
    retries: int = 0
    retry_delay: float = DEFAULT_RETRY_DELAY
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.host:
            raise ValidationError("Board host must not be empty")
        validate_serial_number(self.serial_number)
        if not 0 < self.port <= 0xFFFF:
            raise ValidationError(f"Port must be 1-65535, got {self.port}")
        if self.timeout <= 0:
            raise ValidationError(f"Timeout must be positive, got {self.timeout}")
        if self.buffer_size < FRAME_SIZE:
            raise ValidationError(
                f"Receive buffer must hold at least {FRAME_SIZE} bytes, got {self.buffer_size}"
            )
        if self.retries < 0:
            raise ValidationError(f"Retries must not be negative, got {self.retries}")
        if self.retry_delay < 0:
            raise ValidationError(f"Retry delay must not be negative, got {self.retry_delay}")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> BoardConfig:
        """Build a config from ``ACCESS_BOARD_*`` variables.

        ``ACCESS_BOARD_HOST`` and ``ACCESS_BOARD_SERIAL`` are required;
        ``ACCESS_BOARD_MAC`` may stand in for the serial number.
        """
        env = os.environ if environ is None else environ

        def get(name: str, default: str | None = None) -> str | None:
            return env.get(ENV_PREFIX + name, default)

        serial = get("SERIAL")
        if not serial and get("MAC"):
            serial = serial_from_mac(get("MAC"))
        if not get("HOST") or not serial:
            raise ValidationError(
                f"{ENV_PREFIX}HOST and {ENV_PREFIX}SERIAL (or {ENV_PREFIX}MAC) must be set"
            )

        try:
            port = int(get("PORT", str(DEFAULT_PORT)))
            timeout = float(get("TIMEOUT", str(DEFAULT_TIMEOUT)))
            buffer_size = int(get("BUFFER_SIZE", str(DEFAULT_BUFFER_SIZE)))
            retries = int(get("RETRIES", "0"))
            retry_delay = float(get("RETRY_DELAY", str(DEFAULT_RETRY_DELAY)))
        except ValueError as e:
            raise ValidationError(f"Invalid board setting: {e}") from e

        return cls(
            host=get("HOST"),
            serial_number=serial,
            port=port,
            timeout=timeout,
            buffer_size=buffer_size,
            retries=retries,
            retry_delay=retry_delay,
            log_level=get("LOG_LEVEL", "INFO").upper(),
        )

    def to_dict(self) -> dict:
        return {
            "host": self.host,
            "port": self.port,
            "serial_number": self.serial_number,
            "timeout": self.timeout,
            "buffer_size": self.buffer_size,
            "retries": self.retries,
            "retry_delay": self.retry_delay,
        }
