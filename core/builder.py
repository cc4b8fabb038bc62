# =============================================================================
# core/builder.py  —  Validated parameters → outbound HTTP request
# =============================================================================
#
# A pure mapping: no I/O, no clock, no environment reads.  Given the same
# operation, parameters and settings it always produces the same request.
#
# ENDPOINTS:
#   kweenkl                  POST   {api}/webhook/{webhook_token}
#   kweenkl_list_channels    GET    {api}/api/v1/channels
#   kweenkl_create_channel   POST   {api}/api/v1/channels
#   kweenkl_update_channel   PATCH  {api}/api/v1/channels/{channel_id}
#   kweenkl_delete_channel   DELETE {api}/api/v1/channels/{channel_id}
#
# Path segments (webhook token, channel id) are inserted verbatim.
# =============================================================================

from typing import Any, Callable, Optional

from core.config import Settings
from core.models import (
    ChannelCreate,
    ChannelUpdate,
    ChannelRef,
    HttpRequest,
    NotificationRequest,
    Operation,
    OperationParams,
)

JSON_CONTENT_TYPE = {"Content-Type": "application/json"}


def build_request(
    operation: Operation,
    params: OperationParams,
    settings: Settings,
) -> HttpRequest:
    return _BUILDERS[operation](params, settings)


def _build_send(params: NotificationRequest, settings: Settings) -> HttpRequest:
    body: dict[str, Any] = {"message": params.message}
    _put_if_given(body, "title", params.title)
    _put_if_given(body, "priority", params.priority)
    _put_if_given(body, "payload", params.payload)

    return HttpRequest(
        method="POST",
        url=f"{settings.api_url}/webhook/{params.webhook_token}",
        headers=dict(JSON_CONTENT_TYPE),
        json_body=body,
    )


def _build_list(params, settings: Settings) -> HttpRequest:
    return HttpRequest(
        method="GET",
        url=_channels_url(settings),
        headers=_auth_headers(settings),
    )


def _build_create(params: ChannelCreate, settings: Settings) -> HttpRequest:
    body: dict[str, Any] = {"name": params.name}
    _put_if_given(body, "description", params.description)
    _put_if_given(body, "color", params.color)
    _put_if_given(body, "icon", params.icon)

    return HttpRequest(
        method="POST",
        url=_channels_url(settings),
        headers={**_auth_headers(settings), **JSON_CONTENT_TYPE},
        json_body=body,
    )


def _build_update(params: ChannelUpdate, settings: Settings) -> HttpRequest:
    return HttpRequest(
        method="PATCH",
        url=_channels_url(settings, params.channel_id),
        headers={**_auth_headers(settings), **JSON_CONTENT_TYPE},
        json_body=dict(params.changes),
    )


def _build_delete(params: ChannelRef, settings: Settings) -> HttpRequest:
    return HttpRequest(
        method="DELETE",
        url=_channels_url(settings, params.channel_id),
        headers=_auth_headers(settings),
    )


_BUILDERS: dict[Operation, Callable[[Any, Settings], HttpRequest]] = {
    Operation.SEND_NOTIFICATION: _build_send,
    Operation.LIST_CHANNELS: _build_list,
    Operation.CREATE_CHANNEL: _build_create,
    Operation.UPDATE_CHANNEL: _build_update,
    Operation.DELETE_CHANNEL: _build_delete,
}


def _put_if_given(body: dict[str, Any], key: str, value: Any) -> None:
    # Omitted means omitted: never serialize an absent field as null.
    if value is not None:
        body[key] = value


def _channels_url(settings: Settings, channel_id: Optional[str] = None) -> str:
    url = f"{settings.api_url}/api/v1/channels"
    if channel_id is not None:
        url = f"{url}/{channel_id}"
    return url


def _auth_headers(settings: Settings) -> dict[str, str]:
    return {"Authorization": f"Bearer {settings.device_token}"}
