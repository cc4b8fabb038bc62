# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Defines the MCP tools a client (Claude Desktop, Cursor, an agent, ...)
#   can call.  Each tool is a thin wrapper around core.dispatcher: it
#   declares typed, documented parameters, hands them to the dispatcher,
#   and turns the OperationResult into an MCP response.
#
# HOW IT WORKS (the flow):
#   1. The client calls a tool by name (e.g., "kweenkl")
#   2. FastMCP validates the argument types and routes to the function below
#   3. The function drops unsupplied (None) arguments and calls the dispatcher
#   4. Success → the display text is returned as text content
#      Error   → ToolError(display text), which FastMCP sends as isError=true
#
# TOOLS:
#   kweenkl                   Send a push notification (always available)
#   kweenkl_list_channels     ┐
#   kweenkl_create_channel    │ Only registered when KWEENKL_DEVICE_TOKEN
#   kweenkl_update_channel    │ is configured
#   kweenkl_delete_channel    ┘
#
# RUNNING THIS SERVER:
#   python main.py                      (stdio, for MCP clients)
#   python main.py --list-tools         (print what would be advertised)
# =============================================================================

import json
import logging
import sys
from typing import Annotated, Any, Callable, Optional

import httpx
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from core.config import Settings, load_settings
from core.dispatcher import Dispatcher
from core.models import PRIORITIES, Operation, OperationResult

SERVER_NAME = "kweenkl"

logger = logging.getLogger("kweenkl.mcp")

# =============================================================================
# Logging Setup
# =============================================================================
# Logs go to STDERR.  In stdio mode STDOUT *is* the MCP transport, and any
# stray log line there would corrupt the JSON-RPC stream.
#
# ANSI COLOR CODES:
#     - CYAN for incoming tool calls (tool name + parameters)
#     - GREEN for successful results
#     - RED for error results
#     - YELLOW for intermediate status messages
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_RED = "\033[31m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

# Never echo these in full.
_SECRET_PARAMS = {"webhook_token"}


def configure_logging(debug: bool = False) -> None:
    """Send all logging to stderr; DEBUG level when debug is on."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    # httpx logs full request URLs at INFO, and webhook URLs carry the token.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _mask(value: Any) -> str:
    text = str(value)
    if len(text) <= 8:
        return "***"
    return f"{text[:4]}…{text[-4:]}"


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    shown = {
        k: (_mask(v) if k in _SECRET_PARAMS else v)
        for k, v in params.items()
        if v is not None
    }
    param_str = ", ".join(f"{k}={v!r}" for k, v in shown.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: OperationResult) -> OperationResult:
    """Log the result as compact JSON, GREEN on success and RED on error."""
    color = _RED if result.is_error else _GREEN
    payload = json.dumps(result.to_content(), ensure_ascii=False, separators=(",", ":"))
    logger.info(f"{color}  ← {tool_name} response: {payload}{_RESET}")
    return result


def _finish(tool_name: str, result: OperationResult) -> str:
    _log_response(tool_name, result)
    if result.is_error:
        raise ToolError(result.display_text)
    return result.display_text


def _supplied(**params) -> dict[str, Any]:
    """Keep only the arguments the caller actually passed."""
    return {k: v for k, v in params.items() if v is not None}


# =============================================================================
# Tool descriptions
# =============================================================================
# The client's model reads these to decide WHEN to call each tool, so they
# say what the tool does and where its inputs come from.
# =============================================================================
DESCRIPTIONS: dict[Operation, str] = {
    Operation.SEND_NOTIFICATION: (
        "Send a push notification using kweenkl. The verb 'kweenkl' means to "
        "send a notification. Use this to notify users about important events, "
        "updates, or information that requires immediate attention."
    ),
    Operation.LIST_CHANNELS: (
        "List all your kweenkl notification channels with their webhook URLs. "
        "Use this to see what channels you have and get their webhook tokens."
    ),
    Operation.CREATE_CHANNEL: (
        "Create a new kweenkl notification channel. Returns the channel details "
        "including the webhook URL that you can use to send notifications."
    ),
    Operation.UPDATE_CHANNEL: (
        "Update a kweenkl channel's name, description, color, or icon. Use this "
        "to rename or modify existing channels."
    ),
    Operation.DELETE_CHANNEL: (
        "Delete a kweenkl notification channel. This permanently removes the "
        "channel and all its notifications. Use with caution!"
    ),
}


def _build_tools(dispatcher: Dispatcher) -> dict[Operation, Callable]:
    """Create one async tool function per operation, bound to ``dispatcher``."""

    # =========================================================================
    # TOOL 1: kweenkl  (send a notification)
    # =========================================================================
    async def kweenkl(
        webhook_token: Annotated[str, Field(
            description="The webhook token for your kweenkl channel. Format: "
            "UUID-like string. Can be found in the kweenkl iOS app by opening "
            "a channel and viewing 'Channel Info'.",
        )],
        message: Annotated[str, Field(
            description="The notification message content. Should be clear, "
            "concise, and actionable. Maximum recommended length: 500 "
            "characters for optimal mobile display.",
        )],
        title: Annotated[Optional[str], Field(
            description="Optional title for the notification. Should be brief "
            "(max 50 chars recommended). If omitted, only the message will be "
            "shown.",
        )] = None,
        priority: Annotated[Optional[str], Field(
            description="Priority level for the notification: 'low', 'normal' "
            "or 'high'. 'high' = urgent/critical alerts, 'normal' = standard "
            "updates, 'low' = non-urgent information.",
            json_schema_extra={"enum": list(PRIORITIES)},
        )] = None,
        payload: Annotated[Optional[dict[str, Any]], Field(
            description="Optional custom JSON payload for additional metadata "
            "(e.g., action buttons, deep links, custom data).",
        )] = None,
    ) -> str:
        _log_request("kweenkl", webhook_token=webhook_token, message=message,
                     title=title, priority=priority,
                     payload="<object>" if payload is not None else None)
        result = await dispatcher.execute(
            Operation.SEND_NOTIFICATION,
            _supplied(webhook_token=webhook_token, message=message, title=title,
                      priority=priority, payload=payload),
        )
        return _finish("kweenkl", result)

    # =========================================================================
    # TOOL 2: kweenkl_list_channels
    # =========================================================================
    async def kweenkl_list_channels() -> str:
        _log_request("kweenkl_list_channels")
        result = await dispatcher.execute(Operation.LIST_CHANNELS, {})
        return _finish("kweenkl_list_channels", result)

    # =========================================================================
    # TOOL 3: kweenkl_create_channel
    # =========================================================================
    async def kweenkl_create_channel(
        name: Annotated[str, Field(
            description="Name for the new channel (e.g., 'Production Alerts', "
            "'Daily Reports')",
        )],
        description: Annotated[Optional[str], Field(
            description="Optional description of what this channel is for",
        )] = None,
        color: Annotated[Optional[str], Field(
            description="Optional hex color code for the channel (e.g., "
            "'#FF0000' for red). Default: #007AFF",
        )] = None,
        icon: Annotated[Optional[str], Field(
            description="Optional icon name for the channel. Default: 'bell'",
        )] = None,
    ) -> str:
        _log_request("kweenkl_create_channel", name=name, description=description,
                     color=color, icon=icon)
        result = await dispatcher.execute(
            Operation.CREATE_CHANNEL,
            _supplied(name=name, description=description, color=color, icon=icon),
        )
        return _finish("kweenkl_create_channel", result)

    # =========================================================================
    # TOOL 4: kweenkl_update_channel
    # =========================================================================
    # Only the fields passed here are sent.  Passing "" for description
    # clears it on the server; leaving it out keeps it unchanged.
    # =========================================================================
    async def kweenkl_update_channel(
        channel_id: Annotated[str, Field(
            description="The ID of the channel to update (get this from "
            "kweenkl_list_channels)",
        )],
        name: Annotated[Optional[str], Field(description="New name for the channel")] = None,
        description: Annotated[Optional[str], Field(
            description="New description for the channel",
        )] = None,
        color: Annotated[Optional[str], Field(
            description="New hex color code (e.g., '#FF0000')",
        )] = None,
        icon: Annotated[Optional[str], Field(description="New icon name")] = None,
    ) -> str:
        _log_request("kweenkl_update_channel", channel_id=channel_id, name=name,
                     description=description, color=color, icon=icon)
        result = await dispatcher.execute(
            Operation.UPDATE_CHANNEL,
            _supplied(channel_id=channel_id, name=name, description=description,
                      color=color, icon=icon),
        )
        return _finish("kweenkl_update_channel", result)

    # =========================================================================
    # TOOL 5: kweenkl_delete_channel
    # =========================================================================
    async def kweenkl_delete_channel(
        channel_id: Annotated[str, Field(
            description="The ID of the channel to delete (get this from "
            "kweenkl_list_channels)",
        )],
    ) -> str:
        _log_request("kweenkl_delete_channel", channel_id=channel_id)
        result = await dispatcher.execute(
            Operation.DELETE_CHANNEL, _supplied(channel_id=channel_id)
        )
        return _finish("kweenkl_delete_channel", result)

    return {
        Operation.SEND_NOTIFICATION: kweenkl,
        Operation.LIST_CHANNELS: kweenkl_list_channels,
        Operation.CREATE_CHANNEL: kweenkl_create_channel,
        Operation.UPDATE_CHANNEL: kweenkl_update_channel,
        Operation.DELETE_CHANNEL: kweenkl_delete_channel,
    }


# =============================================================================
# Create the FastMCP server instance
# =============================================================================
def create_server(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastMCP:
    """Build the kweenkl MCP server.

    Args:
        settings: Configuration; read from the environment when omitted.
        transport: Optional httpx transport for outbound calls (tests pass
            an httpx.MockTransport).

    Returns:
        A FastMCP server with ``kweenkl`` registered, plus the channel
        management tools when a device token is configured.
    """
    settings = settings or load_settings()
    dispatcher = Dispatcher(settings, transport=transport)

    mcp = FastMCP(
        SERVER_NAME,
        instructions=(
            "kweenkl sends push notifications to the kweenkl iOS app. Use the "
            "'kweenkl' tool with a channel's webhook token to notify its "
            "subscribers."
        ),
    )

    tools = _build_tools(dispatcher)
    for operation in dispatcher.available_operations():
        mcp.tool(
            tools[operation],
            name=operation.value,
            description=DESCRIPTIONS[operation],
        )

    _log_status(
        "Registered tools: "
        + ", ".join(op.value for op in dispatcher.available_operations())
    )
    if not settings.channel_management_enabled:
        _log_status("Channel management disabled (KWEENKL_DEVICE_TOKEN not set)")
    return mcp
