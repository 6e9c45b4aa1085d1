"""Exception hierarchy for board transactions.

Malformed caller input, transport failures and unexpected device replies
are kept apart so callers can tell a retriable network problem from a
board that refused the request.
"""

from __future__ import annotations


class BoardError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(BoardError, ValueError):
    """Caller-supplied value cannot be encoded."""


class HexFormatError(ValidationError):
    """Hex text is not valid or has an odd number of digits."""


class TagRangeError(ValidationError):
    """Tag number is outside the range a wire form can represent."""


class FrameSizeError(ValidationError):
    """Request frame would not fit in the fixed 64-byte frame."""


class TransportError(BoardError, ConnectionError):
    """The datagram exchange with the board failed."""

    retriable = True


class BoardTimeoutError(TransportError, TimeoutError):
    """No reply arrived before the deadline."""

    def __init__(self, description: str = "No reply from board", timeout_seconds: float = 0) -> None:
        super().__init__(description)
        self.timeout_seconds = timeout_seconds


class ProtocolError(BoardError):
    """The board replied with a frame that does not parse as expected."""


class OperationRejectedError(ProtocolError):
    """The board answered but reported a failure status."""

    def __init__(self, command: int, status: str) -> None:
        self.command = command
        self.status = status
        super().__init__(
            f"Board rejected command 0x{command:02X} (status {status!r})"
        )
