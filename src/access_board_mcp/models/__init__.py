"""Data models for records read from the board."""

from .access_record import AccessRecord
from .user import UserRecord
