"""UDP transport to the access board.

Every transaction is one datagram out and one datagram back on a fresh
socket, which is closed before :meth:`UDPConnection.exchange` returns.
The protocol carries no sequence numbers, so exchanges on one connection
are serialized with a lock to keep replies matched to their requests.
"""

from __future__ import annotations

import logging
import socket
import threading
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

from ..config import DEFAULT_BUFFER_SIZE, DEFAULT_PORT, DEFAULT_TIMEOUT, BoardConfig
from ..errors import BoardTimeoutError, HexFormatError, TransportError, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to attempt a transaction that failed in transit.

    ``attempts`` counts the first try, so the default of 1 never retries.
    """

    attempts: int = 1
    delay: float = 0.0

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValidationError(f"Retry attempts must be at least 1, got {self.attempts}")
        if self.delay < 0:
            raise ValidationError(f"Retry delay must not be negative, got {self.delay}")

    @classmethod
    def from_config(cls, config: BoardConfig) -> RetryPolicy:
        return cls(attempts=config.retries + 1, delay=config.retry_delay)

    def run(self, operation: Callable[[], T]) -> T:
        """Call ``operation``, retrying retriable transport errors."""
        attempt = 1
        while True:
            try:
                return operation()
            except TransportError as e:
                if not e.retriable or attempt >= self.attempts:
                    raise
                logger.warning(
                    "Attempt %d/%d failed: %s, retrying", attempt, self.attempts, e
                )
            if self.delay:
                time.sleep(self.delay)
            attempt += 1


class UDPConnection:
    """Sends request frames to the board and reads its replies.

    Usage::

        conn = UDPConnection("192.168.1.50")
        response_hex = conn.exchange(frame_hex)
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        timeout: float = DEFAULT_TIMEOUT,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self._address = (host, port)
        self._timeout = timeout
        self._buffer_size = buffer_size
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: BoardConfig) -> UDPConnection:
        return cls(
            config.host,
            port=config.port,
            timeout=config.timeout,
            buffer_size=config.buffer_size,
        )

    @property
    def address(self) -> tuple[str, int]:
        return self._address

    def exchange(self, frame_hex: str, timeout: float | None = None) -> str:
        """Send one frame and return the reply as hex text.

        Args:
            frame_hex: Request frame as hex text.
            timeout: Seconds to wait for the reply, overriding the default.

        Raises:
            HexFormatError: If ``frame_hex`` is not valid hex text.
            BoardTimeoutError: If no reply arrives in time.
            TransportError: If the socket cannot send or receive.
        """
        try:
            data = bytes.fromhex(frame_hex)
        except ValueError as e:
            raise HexFormatError(f"Frame is not hex text: {e}") from e

        wait = self._timeout if timeout is None else timeout
        with self._lock:
            logger.debug("TX %s:%d %s", *self._address, frame_hex)
            try:
                with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
                    sock.settimeout(wait)
                    sock.connect(self._address)
                    sock.send(data)
                    reply = sock.recv(self._buffer_size)
            except socket.timeout as e:
                raise BoardTimeoutError(
                    f"No reply from {self._address[0]}:{self._address[1]} within {wait}s",
                    timeout_seconds=wait,
                ) from e
            except OSError as e:
                raise TransportError(
                    f"Exchange with {self._address[0]}:{self._address[1]} failed: {e}"
                ) from e

        response_hex = reply.hex()
        logger.debug("RX %s:%d %s", *self._address, response_hex)
        return response_hex
