# =============================================================================
# core/transport.py  —  One outbound HTTP request, nothing more
# =============================================================================
#
# RULES:
#   - Exactly one request per call to execute().  No retries.
#   - A fresh httpx.AsyncClient per call; nothing is kept between calls.
#   - Every request is bounded by the configured timeout.
#   - Connection-level failures and URLs httpx refuses to send come back as
#     TransportFailure, never raised.
#
# TESTING:
#   Pass an httpx transport (usually httpx.MockTransport) to the constructor
#   and every request goes to it instead of the network.
# =============================================================================

import logging
import re
from typing import Optional

import httpx

from core.models import HttpRequest, TransportFailure, TransportOutcome, TransportResponse

logger = logging.getLogger(__name__)

_WEBHOOK_TOKEN = re.compile(r"(/webhook/)[^?#]+")


class TransportClient:
    """Executes HttpRequest descriptors against the kweenkl API."""

    def __init__(
        self,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self._transport = transport

    async def execute(self, request: HttpRequest) -> TransportOutcome:
        logger.debug("%s %s", request.method, redact_url(request.url))
        if request.json_body is not None:
            logger.debug("Request body keys: %s", sorted(request.json_body))

        kwargs = {}
        if request.json_body is not None:
            kwargs["json"] = request.json_body

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.request(
                    method=request.method,
                    url=request.url,
                    headers=request.headers,
                    **kwargs,
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            reason = str(e) or type(e).__name__
            logger.debug("Transport failure: %s", reason)
            return TransportFailure(reason=reason)

        logger.debug("Response status: %s", response.status_code)
        return TransportResponse(status_code=response.status_code, text=response.text)


def redact_url(url: str) -> str:
    """Hide the webhook token in a URL before it goes into a log line."""
    return _WEBHOOK_TOKEN.sub(r"\1***", url)
