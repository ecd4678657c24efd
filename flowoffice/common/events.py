"""In-process bus carrying workflow events emitted by triggers."""

from __future__ import annotations

from collections import deque
from datetime import datetime, timezone
from typing import Any

from flowoffice.common.logging import get_logger

logger = get_logger("events")

MAX_PENDING_EVENTS = 1000


class WorkflowEventBus:
    """Queues events per trigger until the host drains them."""

    def __init__(self, max_pending: int = MAX_PENDING_EVENTS):
        self._pending: dict[str, deque[dict[str, Any]]] = {}
        self._max_pending = max_pending

    async def emit(self, trigger_id: str, event: str, data: dict[str, Any]) -> None:
        queue = self._pending.setdefault(trigger_id, deque(maxlen=self._max_pending))
        if len(queue) == queue.maxlen:
            logger.warning("Event queue for trigger %s is full, dropping oldest event", trigger_id)
        queue.append({
            "event": event,
            "data": data,
            "trigger_id": trigger_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })
        logger.info("Emitted %s for trigger %s (%d pending)", event, trigger_id, len(queue))

    def drain(self, trigger_id: str) -> list[dict[str, Any]]:
        queue = self._pending.pop(trigger_id, None)
        return list(queue) if queue else []

    def pending(self, trigger_id: str) -> int:
        return len(self._pending.get(trigger_id, ()))


bus = WorkflowEventBus()
