# =============================================================================
# core/dispatcher.py  —  Operation name → full request/response pipeline
# =============================================================================
#
# HOW ONE CALL FLOWS:
#   1. Resolve the operation name   (unknown name → UnknownOperationError)
#   2. validation.validate          (error → return it, no network call)
#   3. builder.build_request
#   4. TransportClient.execute      (exactly one HTTP request)
#   5. normalizer.normalize         (→ OperationResult)
#
# CAPABILITIES:
#   available_operations() is the list callers may discover.  It reads the
#   same Settings.channel_management_enabled flag that validation enforces,
#   so what is advertised and what is allowed never disagree.
#
# A Dispatcher holds only read-only settings and a transport client, so any
# number of dispatch() calls may run concurrently.
# =============================================================================

import logging
from typing import Any, Optional

import httpx

from core.builder import build_request
from core.config import Settings
from core.errors import UnknownOperationError
from core.models import MANAGEMENT_OPERATIONS, Operation, OperationResult
from core.normalizer import normalize
from core.transport import TransportClient
from core.validation import validate

logger = logging.getLogger(__name__)


class Dispatcher:
    """Runs kweenkl operations end to end."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.client = TransportClient(
            timeout=settings.request_timeout, transport=transport
        )

    def available_operations(self) -> list[Operation]:
        operations = [Operation.SEND_NOTIFICATION]
        if self.settings.channel_management_enabled:
            operations.extend(MANAGEMENT_OPERATIONS)
        return operations

    async def dispatch(
        self, name: str, params: Optional[dict[str, Any]] = None
    ) -> OperationResult:
        """Run the operation called ``name``.

        Raises:
            UnknownOperationError: ``name`` is not a kweenkl operation.
        """
        operation = Operation.from_name(name)
        if operation is None:
            logger.warning("Unknown operation requested: %s", name)
            raise UnknownOperationError(name)
        return await self.execute(operation, params)

    async def execute(
        self, operation: Operation, params: Optional[dict[str, Any]] = None
    ) -> OperationResult:
        logger.debug("Executing %s", operation.value)

        validated = validate(operation, params, self.settings)
        if isinstance(validated, OperationResult):
            logger.debug("Rejected %s: %s", operation.value, validated.display_text)
            return validated

        request = build_request(operation, validated, self.settings)
        outcome = await self.client.execute(request)
        return normalize(operation, outcome)
