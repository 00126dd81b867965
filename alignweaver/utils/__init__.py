"""
AlignWeaver v0.1.0

Utility modules for AlignWeaver.

Author: AlignWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from .errors import (
    AssemblyError,
    CancelledError,
    InvalidStateError,
)
from .progress import (
    ProgressListener,
    CancellationToken,
    SilentProgress,
    LoggingProgress,
    check_cancelled,
)

__all__ = [
    "AssemblyError",
    "CancelledError",
    "InvalidStateError",
    "ProgressListener",
    "CancellationToken",
    "SilentProgress",
    "LoggingProgress",
    "check_cancelled",
]
