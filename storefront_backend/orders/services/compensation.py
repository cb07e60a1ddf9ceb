# orders/services/compensation.py

"""
COMPENSATION STACK

Bounded list of undo actions for a multi-step write that has no
surrounding transaction.

- push() only after the step that needs undoing has succeeded
- unwind() runs actions newest first; an action that fails is logged
  and the remaining actions still run
- discard() once the steps that could fail are behind us
"""

from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)


class CompensationStack:
    def __init__(self):
        self._actions: list[tuple[str, Callable[[], object]]] = []

    def __len__(self):
        return len(self._actions)

    def push(self, label: str, action: Callable[[], object]) -> None:
        self._actions.append((label, action))

    def discard(self) -> None:
        self._actions.clear()

    def unwind(self) -> list[str]:
        """Run every registered action. Returns the labels of actions that failed."""
        failed = []
        while self._actions:
            label, action = self._actions.pop()
            try:
                action()
            except Exception:
                logger.exception("Compensation failed", extra={"compensation": label})
                failed.append(label)
        return failed
