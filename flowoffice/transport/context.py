"""Collaborators supplied by the host runtime to every operation."""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import BaseModel

FALLBACK_BASE_URL = "https://api.flow-office.eu"


class Credentials(BaseModel):
    api_key: str
    base_url: str | None = None


class ExecutionContext(Protocol):
    async def get_credentials(self) -> Credentials: ...

    async def request_with_authentication(
        self, method: str, url: str, body: Any | None = None
    ) -> Any:
        """Perform one authenticated call, returning parsed JSON or raw text.

        Raises ``TransportError`` on network, auth or HTTP status failures.
        """
        ...


async def resolve_base_url(context: ExecutionContext) -> str:
    creds = await context.get_credentials()
    base_url = creds.base_url or FALLBACK_BASE_URL
    return base_url[:-1] if base_url.endswith("/") else base_url
