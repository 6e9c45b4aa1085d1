"""High-level client for the access board's user, event log and clock commands."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable

from .config import BoardConfig
from .errors import OperationRejectedError, ValidationError
from .models.access_record import AccessRecord
from .models.user import UserRecord
from .protocol.commands import (
    ALL_SYSTEMS,
    LATEST_EVENT_INDEX,
    Command,
    build_add_user,
    build_delete_user,
    build_get_event,
    build_get_event_count,
    build_get_time,
    build_get_user,
    build_set_time,
)
from .protocol.framing import Frame, parse_frame
from .protocol.parser import (
    check_frame,
    is_success,
    parse_access_record,
    parse_event_count,
    parse_status,
    parse_time,
    parse_timestamp,
    parse_user,
)
from .transport.udp_connection import RetryPolicy, UDPConnection

logger = logging.getLogger(__name__)


class BoardClient:
    """Runs request/reply transactions against one board.

    Usage::

        client = BoardClient(BoardConfig(host="192.168.1.50", serial_number="0D1E2F3A"))
        client.add_user(16733723)
        for record in client.list_events(5):
            print(record.timestamp, record.tag_serial)

    Args:
        config: Board address and serial number.
        connection: Anything with an ``exchange(frame_hex, timeout=None)``
            method; a :class:`UDPConnection` built from ``config`` by default.
        retry: Retry policy for transport failures; built from
            ``config.retries`` by default.
    """

    def __init__(
        self,
        config: BoardConfig,
        connection: UDPConnection | None = None,
        retry: RetryPolicy | None = None,
    ) -> None:
        self._config = config
        self._connection = connection or UDPConnection.from_config(config)
        self._retry = retry or RetryPolicy.from_config(config)

    @property
    def config(self) -> BoardConfig:
        return self._config

    @property
    def serial_number(self) -> str:
        return self._config.serial_number

    def transact(
        self,
        command: Command,
        build: Callable[[str], str],
        timeout: float | None = None,
    ) -> Frame:
        """Send one request and return its checked reply frame.

        Args:
            command: Verb the reply must echo.
            build: Called with the serial number, returns the request hex.
            timeout: Per-call reply deadline in seconds.

        Raises:
            TransportError: If the exchange fails after all retries.
            ProtocolError: If the reply is malformed or answers something else.
        """
        request = build(self.serial_number)

        def attempt() -> str:
            return self._connection.exchange(request, timeout=timeout)

        response = self._retry.run(attempt)
        frame = parse_frame(response)
        return check_frame(frame, command, self.serial_number)

    # ─── USERS ───────────────────────────────────────────────────────

    def add_user(
        self,
        tag: int,
        valid_from: date | None = None,
        valid_until: date | None = None,
        systems: bytes = ALL_SYSTEMS,
        check: bool = False,
        timeout: float | None = None,
    ) -> bool:
        """Register a card on the board.

        Without dates the card is valid from today for ten years, on all
        four systems.

        Args:
            tag: Card number as the board knows it.
            valid_from: First valid day.
            valid_until: Last valid day.
            systems: 4-byte mask, one flag byte per door/system class.
            check: Raise :class:`OperationRejectedError` instead of
                returning False when the board refuses.
            timeout: Seconds to wait for the reply, overriding the config.
        """
        frame = self.transact(
            Command.ADD_USER,
            lambda serial: build_add_user(serial, tag, valid_from, valid_until, systems),
            timeout=timeout,
        )
        return self._status(frame, Command.ADD_USER, check, tag)

    def get_user(self, tag: int, timeout: float | None = None) -> UserRecord | None:
        """Look up a card; None if the board does not know it."""
        frame = self.transact(Command.GET_USER, lambda serial: build_get_user(serial, tag), timeout)
        user = parse_user(frame)
        if user is None:
            logger.info("Tag %d is not registered", tag)
        return user

    def delete_user(self, tag: int, check: bool = False, timeout: float | None = None) -> bool:
        """Remove a card from the board."""
        frame = self.transact(Command.DELETE_USER, lambda serial: build_delete_user(serial, tag), timeout)
        return self._status(frame, Command.DELETE_USER, check, tag)

    def _status(self, frame: Frame, command: Command, check: bool, tag: int) -> bool:
        if is_success(frame):
            logger.info("%s succeeded for tag %d", command.name, tag)
            return True
        status = parse_status(frame)
        logger.warning("%s rejected for tag %d (status %s)", command.name, tag, status)
        if check:
            raise OperationRejectedError(command, status)
        return False

    # ─── EVENT LOG ───────────────────────────────────────────────────

    def get_event_count(self, timeout: float | None = None) -> int:
        """Number of events stored in the board's log."""
        frame = self.transact(Command.GET_EVENT_COUNT, build_get_event_count, timeout)
        return parse_event_count(frame)

    def get_event(self, index: int = LATEST_EVENT_INDEX, timeout: float | None = None) -> AccessRecord:
        """Read one event; the latest one when ``index`` is omitted."""
        frame = self.transact(Command.GET_EVENT, lambda serial: build_get_event(serial, index), timeout)
        return parse_access_record(frame)

    def list_events(self, count: int, timeout: float | None = None) -> list[AccessRecord]:
        """Read the latest event and up to ``count`` events before it.

        Records come back newest first. ``count`` is clamped so that no
        more records are requested than the board has stored and no index
        below 1 is requested. ``timeout`` applies to each exchange.
        """
        if count < 0:
            raise ValidationError(f"count must not be negative, got {count}")

        total = self.get_event_count(timeout)
        if total == 0:
            return []

        latest = self.get_event(timeout=timeout)
        available = min(total - 1, latest.index - 1)
        if count > available:
            logger.info(
                "Requested %d earlier events, board holds %d; clamping", count, max(available, 0)
            )
            count = max(available, 0)

        records = [latest]
        for index in range(latest.index - 1, latest.index - count - 1, -1):
            records.append(self.get_event(index, timeout))
        return records

    # ─── CLOCK ───────────────────────────────────────────────────────

    def get_time_raw(self, timeout: float | None = None) -> str:
        """The board clock as the literal ``YYYYMMDDhhmmss`` text it sent."""
        return parse_timestamp(self.transact(Command.GET_TIME, build_get_time, timeout))

    def get_time(self, timeout: float | None = None) -> datetime:
        """The board clock as a naive datetime in the board's local time.

        Raises:
            ProtocolError: If the board sent an invalid timestamp.
        """
        return parse_time(self.transact(Command.GET_TIME, build_get_time, timeout))

    def set_time(self, when: datetime | None = None, timeout: float | None = None) -> None:
        """Set the board clock to ``when``, or to the local time now."""
        when = when or datetime.now()
        self.transact(Command.SET_TIME, lambda serial: build_set_time(serial, when), timeout)
        logger.info("Board clock set to %s", when.isoformat(sep=" ", timespec="seconds"))
