# =============================================================================
# core/normalizer.py  —  Transport outcome → OperationResult
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Every tool call ends here.  Whatever came back from the transport (an
#   HTTP response with any status, or a connection failure) is turned into
#   one short, human-readable message plus an is_error flag.
#
# FAILURE TEXT:
#   "❌ Failed to <verb>: <reason>" where <reason> is, in order:
#     1. error.message from a JSON error body
#     2. the raw response body
#     3. "HTTP <status>"
#   For a transport failure, <reason> is the exception description.
#
# FIELD SPELLINGS:
#   The kweenkl API has answered both in snake_case and in camelCase.  Any
#   field we read is looked up through an ordered list of candidate names;
#   the first one present wins (see first_present).
#
# MALFORMED BODIES:
#   A body that is not valid JSON is treated as if it carried no fields at
#   all.  Parsing never raises out of this module.
# =============================================================================

import logging
from typing import Any, Callable, Iterable, Optional

from core.models import (
    ChannelDescriptor,
    Operation,
    OperationResult,
    TransportFailure,
    TransportOutcome,
    TransportResponse,
)

logger = logging.getLogger(__name__)

SUBSCRIBERS_KEYS = ("subscribers_notified", "subscribersNotified")
NOTIFICATION_ID_KEYS = ("notification_id", "notificationId")
WEBHOOK_URL_KEYS = ("webhook_url", "webhookUrl")
NOTIFICATION_COUNT_KEYS = ("notification_count", "notificationCount")
DELETED_CHANNEL_KEYS = ("deleted_channel", "deletedChannel")

NO_CHANNELS_TEXT = (
    "📭 No channels found. Create your first channel with kweenkl_create_channel!"
)


def normalize(operation: Operation, outcome: TransportOutcome) -> OperationResult:
    if isinstance(outcome, TransportFailure):
        return failure(operation, outcome.reason)

    if not outcome.ok:
        reason = error_reason(outcome)
        logger.debug("Error response (%s): %s", outcome.status_code, reason)
        return failure(operation, reason)

    return _RENDERERS[operation](_safe_json(outcome))


def failure(operation: Operation, reason: str) -> OperationResult:
    return OperationResult.error(f"❌ Failed to {operation.verb}: {reason}")


def error_reason(response: TransportResponse) -> str:
    """Best available explanation for a non-2xx response."""
    body = _safe_json(response)
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        message = error.get("message")
        if message:
            return str(message)

    if response.text.strip():
        return response.text.strip()
    return f"HTTP {response.status_code}"


def first_present(data: Any, keys: Iterable[str], default: Any = None) -> Any:
    """Return the value of the first key in ``keys`` that ``data`` carries.

    A key mapped to null counts as absent.
    """
    if not isinstance(data, dict):
        return default
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def parse_channel(raw: Any) -> ChannelDescriptor:
    return ChannelDescriptor(
        id=str(first_present(raw, ("id",), "unknown")),
        name=str(first_present(raw, ("name",), "unknown")),
        webhook_url=str(first_present(raw, WEBHOOK_URL_KEYS, "unknown")),
        notification_count=first_present(raw, NOTIFICATION_COUNT_KEYS, 0),
        description=first_present(raw, ("description",)),
        color=first_present(raw, ("color",)),
        icon=first_present(raw, ("icon",)),
    )


# --- Success renderers, one per operation ---


def _render_send(data: Any) -> OperationResult:
    subscribers = first_present(data, SUBSCRIBERS_KEYS, 0)
    notification_id = first_present(data, NOTIFICATION_ID_KEYS, "unknown")
    logger.debug(
        "Notification sent: subscribers=%s id=%s", subscribers, notification_id
    )
    return OperationResult(
        f"✅ Successfully kweenkled!\n"
        f"📱 {subscribers} subscriber(s) notified\n"
        f"🆔 Notification ID: {notification_id}"
    )


def _render_list(data: Any) -> OperationResult:
    if isinstance(data, list):
        raw_channels = data
    else:
        raw_channels = first_present(data, ("channels",), [])
    if not isinstance(raw_channels, list):
        raw_channels = []

    channels = [parse_channel(raw) for raw in raw_channels if isinstance(raw, dict)]
    if not channels:
        return OperationResult(NO_CHANNELS_TEXT)

    lines = [f"📢 Your kweenkl channels ({len(channels)}):", ""]
    for i, channel in enumerate(channels, start=1):
        lines.append(f"{i}. **{channel.name}**")
        lines.append(f"   ID: {channel.id}")
        lines.append(f"   Webhook: {channel.webhook_url}")
        lines.append(f"   Notifications: {channel.notification_count}")
        if channel.description:
            lines.append(f"   Description: {channel.description}")
        lines.append("")
    return OperationResult("\n".join(lines))


def _render_create(data: Any) -> OperationResult:
    channel = parse_channel(first_present(data, ("channel",), {}))
    # The create endpoint reports the webhook URL next to the channel.
    webhook_url = first_present(data, WEBHOOK_URL_KEYS, channel.webhook_url)
    return OperationResult(
        f"✅ Channel created!\n\n"
        f"**{channel.name}**\n"
        f"ID: {channel.id}\n"
        f"Webhook URL: {webhook_url}\n\n"
        f"You can now send notifications to this channel!"
    )


def _render_update(data: Any) -> OperationResult:
    channel = parse_channel(first_present(data, ("channel",), {}))
    return OperationResult(
        f"✅ Channel updated!\n\n"
        f"**{channel.name}**\n"
        f"ID: {channel.id}\n"
        f"Webhook: {channel.webhook_url}"
    )


def _render_delete(data: Any) -> OperationResult:
    deleted = first_present(data, DELETED_CHANNEL_KEYS, {})
    name = first_present(deleted, ("name",), "unknown")
    return OperationResult(f'✅ Channel "{name}" deleted successfully.')


_RENDERERS: dict[Operation, Callable[[Any], OperationResult]] = {
    Operation.SEND_NOTIFICATION: _render_send,
    Operation.LIST_CHANNELS: _render_list,
    Operation.CREATE_CHANNEL: _render_create,
    Operation.UPDATE_CHANNEL: _render_update,
    Operation.DELETE_CHANNEL: _render_delete,
}


def _safe_json(response: TransportResponse) -> Optional[Any]:
    if not response.text:
        return None
    try:
        return response.json()
    except ValueError:
        logger.debug("Response body is not valid JSON; using fallbacks")
        return None
