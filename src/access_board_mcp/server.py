"""MCP server entry point for an access-control board.

Exposes user management, event log and clock tools via the Model Context
Protocol using the official Python MCP SDK with stdio transport. The board
is configured through ``ACCESS_BOARD_*`` environment variables.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Any

from mcp.server.fastmcp import FastMCP

from .client import BoardClient
from .config import BoardConfig
from .errors import BoardError, ValidationError
from .protocol.commands import ALL_SYSTEMS
from .protocol.tags import scanned_to_card_number, split_tag, to_device_form

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "access-board",
    instructions="MCP server for a UDP access-control board: cards, event log and clock",
)

_client: BoardClient | None = None


def _get_client() -> BoardClient:
    """Get the board client, creating it from the environment on first use."""
    global _client
    if _client is None:
        _client = BoardClient(BoardConfig.from_env())
    return _client


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"Dates must be YYYY-MM-DD, got {value!r}") from e


def _parse_systems(systems: list[int] | None) -> bytes:
    """Turn 1-based system numbers into the 4-byte mask."""
    if systems is None:
        return ALL_SYSTEMS
    mask = bytearray(4)
    for number in systems:
        if not 1 <= number <= 4:
            raise ValidationError(f"System numbers must be 1-4, got {number}")
        mask[number - 1] = 1
    return bytes(mask)


# ─── USER TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def add_user(
    tag: int,
    valid_from: str | None = None,
    valid_until: str | None = None,
    systems: list[int] | None = None,
) -> dict[str, Any]:
    """Register a card on the board.

    Args:
        tag: Card number as the board stores it (see convert_tag).
        valid_from: First valid day, YYYY-MM-DD (default today).
        valid_until: Last valid day, YYYY-MM-DD (default ten years on).
        systems: Door/system numbers 1-4 the card may open (default all).
    """
    try:
        success = _get_client().add_user(
            tag,
            valid_from=_parse_date(valid_from),
            valid_until=_parse_date(valid_until),
            systems=_parse_systems(systems),
        )
    except BoardError as e:
        return {"error": str(e)}
    return {"success": success, "tag": tag}


@mcp.tool()
def get_user(tag: int) -> dict[str, Any]:
    """Look up a card on the board.

    Args:
        tag: Card number as the board stores it.
    """
    try:
        user = _get_client().get_user(tag)
    except BoardError as e:
        return {"error": str(e)}
    if user is None:
        return {"found": False, "tag": tag}
    result = user.to_dict()
    result["found"] = True
    return result


@mcp.tool()
def delete_user(tag: int) -> dict[str, Any]:
    """Remove a card from the board.

    Args:
        tag: Card number as the board stores it.
    """
    try:
        success = _get_client().delete_user(tag)
    except BoardError as e:
        return {"error": str(e)}
    return {"success": success, "tag": tag}


@mcp.tool()
def convert_tag(scanned: int) -> dict[str, Any]:
    """Convert the number an RFID reader scans into the board's card number.

    Args:
        scanned: 24-bit tag number reported by the reader.
    """
    try:
        prefix, suffix = split_tag(scanned)
        card = scanned_to_card_number(scanned)
        return {
            "scanned": scanned,
            "facility": prefix,
            "card": suffix,
            "card_number": card,
            "device_form": to_device_form(card),
        }
    except BoardError as e:
        return {"error": str(e)}


# ─── EVENT LOG TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def get_event_count() -> dict[str, Any]:
    """Number of access events stored on the board."""
    try:
        return {"count": _get_client().get_event_count()}
    except BoardError as e:
        return {"error": str(e)}


@mcp.tool()
def list_access_records(count: int = 10) -> dict[str, Any]:
    """List the most recent access events, newest first.

    Args:
        count: How many events before the latest one to include.
    """
    try:
        records = _get_client().list_events(count)
    except BoardError as e:
        return {"error": str(e)}
    return {"records": [r.to_dict() for r in records]}


# ─── CLOCK TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def get_board_time() -> dict[str, Any]:
    """Read the board's clock."""
    try:
        when = _get_client().get_time()
    except BoardError as e:
        return {"error": str(e)}
    return {"time": when.isoformat(sep=" ")}


@mcp.tool()
def set_board_time(time: str | None = None) -> dict[str, Any]:
    """Set the board's clock.

    Args:
        time: ISO date and time, e.g. 2024-03-12T10:58:32 (default now).
    """
    try:
        when = datetime.fromisoformat(time) if time else datetime.now()
    except ValueError:
        return {"error": f"Invalid time {time!r}, expected ISO format"}
    try:
        _get_client().set_time(when)
    except BoardError as e:
        return {"error": str(e)}
    return {"set": True, "time": when.isoformat(sep=" ", timespec="seconds")}


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("board://config")
def resource_config() -> str:
    """Board address and serial number in use."""
    try:
        return json.dumps(_get_client().config.to_dict())
    except BoardError as e:
        return json.dumps({"error": str(e)})


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    config_error = None
    try:
        level = BoardConfig.from_env().log_level
    except BoardError as e:
        level, config_error = "INFO", e
    logging.basicConfig(level=getattr(logging, level, logging.INFO))
    if config_error is not None:
        logger.warning("Board not configured yet: %s", config_error)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
