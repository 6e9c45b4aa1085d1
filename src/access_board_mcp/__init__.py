"""Client for access-control boards driven over the 0x17 UDP command protocol."""

__version__ = "0.1.0"

from .client import BoardClient
from .config import BoardConfig
from .errors import (
    BoardError,
    BoardTimeoutError,
    OperationRejectedError,
    ProtocolError,
    TransportError,
    ValidationError,
)
from .models import AccessRecord, UserRecord
