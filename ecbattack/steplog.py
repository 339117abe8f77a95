"""
Append-only narration of the attack, kept for display to a learner.
"""

import logging
from typing import Iterator, List, Tuple

logger = logging.getLogger(__name__)


class StepLog:
    def __init__(self):
        self._entries: List[str] = []

    def append(self, message: str) -> None:
        self._entries.append(str(message))
        logger.info(message)

    def entries(self) -> Tuple[str, ...]:
        """All entries in append order (a snapshot, not a live view)."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries())

    def __repr__(self):
        return f"StepLog({len(self._entries)} entries)"
