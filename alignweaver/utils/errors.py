#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
AlignWeaver v0.1.0

Error kinds raised by the assembly stages.

Author: AlignWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""


class AssemblyError(Exception):
    """Base class for assembly failures."""
    pass


class CancelledError(AssemblyError):
    """Raised when the progress listener requests an abort."""
    pass


class InvalidStateError(AssemblyError):
    """Raised when an operation is requested out of its required sequence."""
    pass

# AlignWeaver v0.1.0
# Any usage is subject to this software's license.
