"""Domain event constants and publisher.

Submission and deletion flows call `publish()` after their transaction has
committed. Events are logged for observability and kept in a bounded
in-memory buffer that tests and diagnostics can read back.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Deque, Dict, List

logger = logging.getLogger(__name__)

RESPONSE_SUBMITTED = "response.submitted"
RESPONSE_DELETED = "response.deleted"
QUESTION_UPDATED = "question.updated"

EVENT_BUFFER_SIZE = 1000

EVENT_BUFFER: Deque[Dict[str, Any]] = deque(maxlen=EVENT_BUFFER_SIZE)


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    """Publish a domain event to the log and the in-memory buffer."""
    logger.info("event_publish type=%s payload=%s", event_type, payload)
    EVENT_BUFFER.append({"type": event_type, "payload": payload})


def get_buffered_events(clear: bool = True) -> List[Dict[str, Any]]:
    """Return buffered domain events; optionally clear the buffer."""
    events = list(EVENT_BUFFER)
    if clear:
        EVENT_BUFFER.clear()
    return events


__all__ = [
    "RESPONSE_SUBMITTED",
    "RESPONSE_DELETED",
    "QUESTION_UPDATED",
    "publish",
    "get_buffered_events",
    "EVENT_BUFFER",
]
