# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the *shape* of every piece of information that
# flows through one tool call.  Every one of them is request-scoped: it is
# created, used and thrown away inside a single invocation.  Nothing here is
# ever stored.
#
# THE FLOW OF TYPES:
#   raw params (dict)
#     → NotificationRequest / ChannelCreate / ...   (validation.py)
#     → HttpRequest                                  (builder.py)
#     → TransportResponse | TransportFailure         (transport.py)
#     → OperationResult                              (normalizer.py)
#
# OPTIONAL FIELDS:
#   An optional field set to None means "the caller did not supply it".
#   The builder only inserts keys that were supplied, so None never reaches
#   the wire as a JSON null.
# =============================================================================

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


# -----------------------------------------------------------------------------
# Operation — the fixed set of things a caller can ask for
# -----------------------------------------------------------------------------
# The enum values are the tool names advertised over MCP.  Anything that is
# not one of these values is an unknown operation (see Operation.from_name).
# -----------------------------------------------------------------------------
class Operation(str, Enum):
    """One named unit of functionality exposed to callers."""

    SEND_NOTIFICATION = "kweenkl"
    LIST_CHANNELS = "kweenkl_list_channels"
    CREATE_CHANNEL = "kweenkl_create_channel"
    UPDATE_CHANNEL = "kweenkl_update_channel"
    DELETE_CHANNEL = "kweenkl_delete_channel"

    @property
    def requires_device_token(self) -> bool:
        """Channel management needs the admin (device) credential."""
        return self is not Operation.SEND_NOTIFICATION

    @property
    def verb(self) -> str:
        """Phrase used in failure messages: "Failed to <verb>: ..."."""
        return _VERBS[self]

    @classmethod
    def from_name(cls, name: str) -> Optional["Operation"]:
        try:
            return cls(name)
        except ValueError:
            return None


_VERBS: dict[Operation, str] = {
    Operation.SEND_NOTIFICATION: "send notification",
    Operation.LIST_CHANNELS: "list channels",
    Operation.CREATE_CHANNEL: "create channel",
    Operation.UPDATE_CHANNEL: "update channel",
    Operation.DELETE_CHANNEL: "delete channel",
}

MANAGEMENT_OPERATIONS: tuple[Operation, ...] = tuple(
    op for op in Operation if op.requires_device_token
)

PRIORITIES: tuple[str, ...] = ("low", "normal", "high")

# Fields a channel update may carry.  Order matters for error messages.
CHANNEL_FIELDS: tuple[str, ...] = ("name", "description", "color", "icon")


# -----------------------------------------------------------------------------
# Validated parameters, one type per operation
# -----------------------------------------------------------------------------
@dataclass
class NotificationRequest:
    """Parameters for sending one push notification to a channel."""

    webhook_token: str                 # Opaque token issued by kweenkl per channel
    message: str                       # Required, non-empty
    title: Optional[str] = None
    priority: Optional[str] = None     # One of PRIORITIES; never defaulted locally
    payload: Any = None                # Arbitrary JSON, passed through untouched


@dataclass
class ChannelListQuery:
    """Listing channels takes no parameters."""


@dataclass
class ChannelCreate:
    name: str
    description: Optional[str] = None
    color: Optional[str] = None        # e.g. "#FF0000"
    icon: Optional[str] = None         # e.g. "bell"


@dataclass
class ChannelUpdate:
    """A partial update.

    ``changes`` holds ONLY the fields the caller supplied.  An explicit empty
    string is a supplied value and is sent; a missing key is not sent.
    """

    channel_id: str
    changes: dict[str, str] = field(default_factory=dict)


@dataclass
class ChannelRef:
    channel_id: str


OperationParams = Union[
    NotificationRequest, ChannelListQuery, ChannelCreate, ChannelUpdate, ChannelRef
]


# -----------------------------------------------------------------------------
# ChannelDescriptor — a channel as the remote service describes it
# -----------------------------------------------------------------------------
# Owned entirely by kweenkl.  We only ever render these for the caller.
# -----------------------------------------------------------------------------
@dataclass
class ChannelDescriptor:
    id: str
    name: str
    webhook_url: str
    notification_count: int = 0
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None


# -----------------------------------------------------------------------------
# HttpRequest — what the builder hands to the transport
# -----------------------------------------------------------------------------
@dataclass
class HttpRequest:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    json_body: Optional[dict[str, Any]] = None   # None = no body at all


# -----------------------------------------------------------------------------
# Transport outcomes
# -----------------------------------------------------------------------------
# The two are kept as separate types because they produce different error
# text: an HTTP error carries the API's reason, a transport failure carries
# the exception's description.
# -----------------------------------------------------------------------------
@dataclass
class TransportResponse:
    """The remote service answered (with any status code)."""

    status_code: int
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Decode the body.  Raises ValueError on malformed JSON."""
        return json.loads(self.text)


@dataclass
class TransportFailure:
    """The request never got an HTTP answer (DNS, connect, timeout, ...)."""

    reason: str


TransportOutcome = Union[TransportResponse, TransportFailure]


# -----------------------------------------------------------------------------
# OperationResult — the ONLY thing a caller ever gets back
# -----------------------------------------------------------------------------
@dataclass
class OperationResult:
    """Human-readable outcome of one operation."""

    display_text: str
    is_error: bool = False

    @classmethod
    def error(cls, text: str) -> "OperationResult":
        return cls(display_text=text, is_error=True)

    def to_content(self) -> dict[str, Any]:
        """Render in MCP ``CallToolResult`` shape."""
        return {
            "content": [{"type": "text", "text": self.display_text}],
            "isError": self.is_error,
        }
