"""Process-local single-writer locks, one per program id.

Mutations of a program hold its lock for the whole load-validate-persist
cycle; reads never take it. Programs never share a lock.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator

logger = logging.getLogger(__name__)


class ProgramLockRegistry:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def _lock_for(self, program_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(program_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[program_id] = lock
            return lock

    @contextmanager
    def writer(self, program_id: str) -> Iterator[None]:
        lock = self._lock_for(str(program_id))
        lock.acquire()
        try:
            yield
        finally:
            lock.release()


PROGRAM_LOCKS = ProgramLockRegistry()

__all__ = ["ProgramLockRegistry", "PROGRAM_LOCKS"]
