#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
AlignWeaver v0.1.0

Progress reporting and cancellation for long-running assembly stages.

Every stage receives a ProgressListener, reports its subtask and counters to
it, and polls is_cancelled() at least once per read or contig.

Author: AlignWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations
import logging
import threading
from typing import Optional, Protocol

from .errors import CancelledError

logger = logging.getLogger(__name__)


# ============================================================================
#                           PROGRESS PROTOCOL
# ============================================================================

class ProgressListener(Protocol):
    """
    Protocol defining the progress sink consumed by the assembly core.

    is_cancelled() is polled from the worker and must be cheap and
    thread-safe.
    """

    def set_subtask(self, label: str) -> None:
        ...

    def set_maximum(self, maximum: int) -> None:
        ...

    def set_progress(self, value: int) -> None:
        ...

    def increment_progress(self) -> None:
        ...

    def is_cancelled(self) -> bool:
        ...


class CancellationToken:
    """Thread-safe cancellation flag backed by threading.Event."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation of the running stage."""
        self._event.set()

    def clear(self) -> None:
        self._event.clear()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


# ============================================================================
#                           IMPLEMENTATIONS
# ============================================================================

class SilentProgress:
    """
    Progress listener that only tracks counters.

    Used as the default when the caller does not supply a listener.
    """

    def __init__(self, token: Optional[CancellationToken] = None):
        self.token = token or CancellationToken()
        self.subtask = ""
        self.maximum = 0
        self.progress = 0

    def set_subtask(self, label: str) -> None:
        self.subtask = label

    def set_maximum(self, maximum: int) -> None:
        self.maximum = maximum

    def set_progress(self, value: int) -> None:
        self.progress = value

    def increment_progress(self) -> None:
        self.progress += 1

    def is_cancelled(self) -> bool:
        return self.token.cancelled

    def cancel(self) -> None:
        self.token.cancel()


class LoggingProgress(SilentProgress):
    """
    Progress listener that reports to the log.

    Subtasks are logged at INFO; counters are logged at DEBUG every
    `report_every` increments so that large inputs do not flood the log.
    """

    def __init__(
        self,
        token: Optional[CancellationToken] = None,
        report_every: int = 10000,
        log: Optional[logging.Logger] = None
    ):
        super().__init__(token)
        self.report_every = max(1, report_every)
        self.logger = log or logger

    def set_subtask(self, label: str) -> None:
        super().set_subtask(label)
        self.logger.info(label)

    def increment_progress(self) -> None:
        super().increment_progress()
        if self.progress % self.report_every == 0:
            self.logger.debug(f"  {self.subtask}: {self.progress:,}/{self.maximum:,}")


def check_cancelled(progress: ProgressListener) -> None:
    """
    Raise CancelledError if the listener requests an abort.

    Args:
        progress: Listener to poll

    Raises:
        CancelledError: If progress.is_cancelled() returns True
    """
    if progress.is_cancelled():
        raise CancelledError(f"Cancelled during: {getattr(progress, 'subtask', '') or 'assembly'}")

# AlignWeaver v0.1.0
# Any usage is subject to this software's license.
