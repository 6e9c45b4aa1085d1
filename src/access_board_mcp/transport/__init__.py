"""Datagram transport to the board."""

from .udp_connection import RetryPolicy, UDPConnection
