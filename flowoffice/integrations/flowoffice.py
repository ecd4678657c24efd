"""FlowOffice integration client.

Implements the host's execution context: it hands out the configured
credentials and performs single authenticated HTTP calls against the
FlowOffice API. Endpoint-level validation lives in ``transport.invoker``.
"""

from __future__ import annotations

from typing import Any

import httpx

from flowoffice.common.exceptions import ExternalServiceError, TransportError
from flowoffice.config import settings
from flowoffice.integrations.base import BaseIntegration
from flowoffice.transport import endpoints
from flowoffice.transport.context import Credentials
from flowoffice.transport.schemas import ApiKeyValidation
from flowoffice.transport.invoker import invoke_endpoint


class FlowOfficeClient(BaseIntegration):
    """Authenticated FlowOffice API access for one request scope."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__("flowoffice")
        self._api_key = api_key if api_key is not None else settings.FLOWOFFICE_API_KEY
        self._base_url = base_url if base_url is not None else settings.FLOWOFFICE_BASE_URL
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}", "Accept": "application/json"}

    async def get_credentials(self) -> Credentials:
        return Credentials(api_key=self._api_key, base_url=self._base_url or None)

    async def request_with_authentication(
        self, method: str, url: str, body: Any | None = None
    ) -> Any:
        kwargs: dict[str, Any] = {"headers": self._headers()}
        if body is not None:
            kwargs["json"] = body

        try:
            async with httpx.AsyncClient(
                timeout=settings.FLOWOFFICE_TIMEOUT_SECONDS, transport=self._transport
            ) as client:
                resp = await client.request(method, url, **kwargs)
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            self.logger.error("%s %s failed with status %d", method, url, e.response.status_code)
            raise TransportError(
                f"{method} {url} returned {e.response.status_code}",
                upstream_status=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            self.logger.error("%s %s failed: %s", method, url, e)
            raise TransportError(f"{method} {url} failed: {e}") from e

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    async def health_check(self) -> bool:
        if not self._api_key:
            self.logger.warning("FlowOffice health check skipped: no API key configured")
            return False
        try:
            result = await invoke_endpoint(endpoints.VALIDATE_API_KEY, self, lenient=True)
        except ExternalServiceError as e:
            self.logger.error("FlowOffice health check failed: %s", e.detail)
            return False
        if isinstance(result, ApiKeyValidation):
            return result.valid is True
        return True
