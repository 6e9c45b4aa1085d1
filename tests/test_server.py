"""Tests for the MCP tool functions."""

from __future__ import annotations

import json
import sys
from unittest.mock import MagicMock, patch

from access_board_mcp.client import BoardClient
from access_board_mcp.config import BoardConfig
from access_board_mcp.errors import BoardTimeoutError
from access_board_mcp.models.user import UserRecord


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_instance.prompt.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
        # Remove cached server module so it re-imports with our mock
        sys.modules.pop("access_board_mcp.server", None)
        import access_board_mcp.server as server_mod

    return server_mod


def _server_with_client():
    server = _get_server_module()
    client = MagicMock(spec=BoardClient)
    client.config = BoardConfig(host="192.0.2.10", serial_number="AABBCCDD")
    server._client = client
    return server, client


def test_add_user_tool():
    server, client = _server_with_client()
    client.add_user.return_value = True

    result = server.add_user(16733723, valid_from="2024-03-12", valid_until="2034-03-12", systems=[1, 3])

    assert result == {"success": True, "tag": 16733723}
    _, kwargs = client.add_user.call_args
    assert kwargs["systems"] == b"\x01\x00\x01\x00"
    assert kwargs["valid_from"].isoformat() == "2024-03-12"


def test_add_user_tool_bad_input():
    server, client = _server_with_client()
    assert "error" in server.add_user(1, valid_from="12/03/2024")
    assert "error" in server.add_user(1, systems=[5])
    client.add_user.assert_not_called()


def test_get_user_tool_absent():
    server, client = _server_with_client()
    client.get_user.return_value = None
    assert server.get_user(5) == {"found": False, "tag": 5}


def test_get_user_tool_found():
    server, client = _server_with_client()
    client.get_user.return_value = UserRecord(5, "20240312", "20340312", b"\x01\x01\x01\x01")
    result = server.get_user(5)
    assert result["found"] is True
    assert result["enabled_system_numbers"] == [1, 2, 3, 4]


def test_tool_reports_transport_error():
    """Board errors come back as an error entry, not an exception."""
    server, client = _server_with_client()
    client.get_event_count.side_effect = BoardTimeoutError("No reply from board")
    assert server.get_event_count() == {"error": "No reply from board"}


def test_convert_tag_tool():
    server = _get_server_module()
    result = server.convert_tag(10978235)
    assert result["facility"] == 167
    assert result["card"] == 33723
    assert result["card_number"] == 16733723
    assert "error" in server.convert_tag(1 << 24)


def test_set_board_time_tool():
    server, client = _server_with_client()
    result = server.set_board_time("2018-03-12T10:58:32")
    assert result == {"set": True, "time": "2018-03-12 10:58:32"}
    assert "error" in server.set_board_time("yesterday")


def test_config_resource():
    server, _ = _server_with_client()
    data = json.loads(server.resource_config())
    assert data["serial_number"] == "AABBCCDD"
