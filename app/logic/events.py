"""Domain event constants and publisher.

Defines event type constants and a simple publish() callable used by the
program service after each committed mutation.
"""

from __future__ import annotations

from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)

PROGRAM_CREATED = "program.created"
BLOCK_CREATED = "block.created"
BLOCK_DELETED = "block.deleted"
REPEATED_BLOCK_CREATED = "block.repeated_created"
BLOCK_QUESTION_ADDED = "block.question_added"
BLOCK_QUESTION_REMOVED = "block.question_removed"
QUESTION_CREATED = "question.created"
QUESTION_UPDATED = "question.updated"


# In-memory buffer for domain events (test-only visibility)
EVENT_BUFFER: List[Dict[str, Any]] = []


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    """Publish a domain event by logging it and buffering it for observers."""
    logger.info("event_publish type=%s payload=%s", event_type, payload)
    EVENT_BUFFER.append({"type": event_type, "payload": payload})


def get_buffered_events(clear: bool = True) -> List[Dict[str, Any]]:
    """Return buffered domain events; optionally clear the buffer."""
    events = list(EVENT_BUFFER)
    if clear:
        EVENT_BUFFER.clear()
    return events


__all__ = [
    "PROGRAM_CREATED",
    "BLOCK_CREATED",
    "BLOCK_DELETED",
    "REPEATED_BLOCK_CREATED",
    "BLOCK_QUESTION_ADDED",
    "BLOCK_QUESTION_REMOVED",
    "QUESTION_CREATED",
    "QUESTION_UPDATED",
    "publish",
    "get_buffered_events",
    "EVENT_BUFFER",
]
