from abc import ABC, abstractmethod
from typing import Any

from flowoffice.common.logging import get_logger


class BaseIntegration(ABC):
    """Shared plumbing for clients of external services.

    Subclasses report reachability through ``health_check``; ``probe`` wraps
    it into the entry shown by the ``/health`` endpoint.
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = get_logger(f"integrations.{name}")

    @abstractmethod
    async def health_check(self) -> bool:
        """Return True when the service is reachable and accepts our credentials."""
        ...

    async def probe(self) -> dict[str, Any]:
        healthy = await self.health_check()
        if not healthy:
            self.logger.warning("%s integration reported unhealthy", self.name)
        return {"name": self.name, "healthy": healthy}
