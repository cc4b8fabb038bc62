# =============================================================================
# core/validation.py  —  Input validation (before any network call)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns a raw parameter bag (whatever the caller sent) into the typed
#   parameter object for one operation, or into an error OperationResult.
#
# CONTRACT:
#   validate() never raises.  If it returns an OperationResult, the
#   dispatcher stops right there and no HTTP request is made.
#
# WHAT IS *NOT* VALIDATED:
#   Token and channel id formats, colors, icons, payload structure.  The
#   remote service owns those rules; we only check presence and the
#   priority enum.
# =============================================================================

from typing import Any, Callable, Optional, Union

from core.config import Settings
from core.models import (
    CHANNEL_FIELDS,
    PRIORITIES,
    ChannelCreate,
    ChannelListQuery,
    ChannelRef,
    ChannelUpdate,
    NotificationRequest,
    Operation,
    OperationParams,
    OperationResult,
)

DEVICE_TOKEN_MISSING = (
    "❌ Device token not configured. Set KWEENKL_DEVICE_TOKEN environment "
    "variable to use channel management."
)

Validated = Union[OperationParams, OperationResult]


def validate(
    operation: Operation,
    params: Optional[dict[str, Any]],
    settings: Settings,
) -> Validated:
    """Validate ``params`` for ``operation``.

    Returns the typed parameters on success, or an error OperationResult.
    """
    params = params or {}

    if operation.requires_device_token and not settings.channel_management_enabled:
        return OperationResult.error(DEVICE_TOKEN_MISSING)

    return _VALIDATORS[operation](params)


# --- Per-operation validators ---


def _validate_send(params: dict[str, Any]) -> Validated:
    webhook_token = params.get("webhook_token")
    message = params.get("message")
    if not _is_filled(webhook_token) or not _is_filled(message):
        return OperationResult.error(
            "❌ Error: webhook_token and message are required parameters "
            "and must be non-empty strings."
        )

    priority = _optional_text(params, "priority")
    if priority is not None and priority not in PRIORITIES:
        return OperationResult.error(
            f"❌ Error: priority must be one of: {', '.join(PRIORITIES)}"
        )

    return NotificationRequest(
        webhook_token=webhook_token,
        message=message,
        title=_optional_text(params, "title"),
        priority=priority,
        payload=params.get("payload"),
    )


def _validate_list(params: dict[str, Any]) -> Validated:
    return ChannelListQuery()


def _validate_create(params: dict[str, Any]) -> Validated:
    name = params.get("name")
    if not _is_filled(name):
        return OperationResult.error("❌ Error: name is required to create a channel.")

    return ChannelCreate(
        name=name,
        description=_optional_text(params, "description"),
        color=_optional_text(params, "color"),
        icon=_optional_text(params, "icon"),
    )


def _validate_update(params: dict[str, Any]) -> Validated:
    channel_id = params.get("channel_id")
    if not _is_filled(channel_id):
        return _channel_id_required()

    # Presence, not truthiness: an explicit "" is a real change.
    changes = {
        key: params[key] for key in CHANNEL_FIELDS if params.get(key) is not None
    }
    if not changes:
        return OperationResult.error(
            "❌ No fields to update. Provide at least one of: "
            + ", ".join(CHANNEL_FIELDS)
        )

    return ChannelUpdate(channel_id=channel_id, changes=changes)


def _validate_delete(params: dict[str, Any]) -> Validated:
    channel_id = params.get("channel_id")
    if not _is_filled(channel_id):
        return _channel_id_required()
    return ChannelRef(channel_id=channel_id)


_VALIDATORS: dict[Operation, Callable[[dict[str, Any]], Validated]] = {
    Operation.SEND_NOTIFICATION: _validate_send,
    Operation.LIST_CHANNELS: _validate_list,
    Operation.CREATE_CHANNEL: _validate_create,
    Operation.UPDATE_CHANNEL: _validate_update,
    Operation.DELETE_CHANNEL: _validate_delete,
}


# --- Helpers ---


def _is_filled(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _optional_text(params: dict[str, Any], key: str) -> Optional[str]:
    """An optional field that only counts when it is a non-empty value."""
    value = params.get(key)
    if value is None or value == "":
        return None
    return value


def _channel_id_required() -> OperationResult:
    return OperationResult.error("❌ Error: channel_id is required.")
