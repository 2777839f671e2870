"""Stable public API surface for FaultKit.

This module is the supported import path for library users.
"""

from __future__ import annotations

import logging

from faultpack.bridge import (
    FAULT_DOMAIN,
    Captured,
    CapturedRuntimeFault,
    CapturePolicy,
    Completed,
    ErrorDescriptor,
    ErrorSlot,
    ExceptionBridge,
    ExecutionUnit,
    Outcome,
    protect,
)
from faultpack.bridge import catch_exception as _catch_exception
from faultpack.bridge import run_or_raise as _run_or_raise
from faultpack.bridge import run_protected as _run_protected

__version__ = "0.1.0"

logging.getLogger("faultkit").addHandler(logging.NullHandler())
logging.getLogger("faultpack").addHandler(logging.NullHandler())


def run_protected(unit: ExecutionUnit, out_error: ErrorSlot) -> bool:
    """Run a unit of work, converting a raised exception into an error descriptor.

    Args:
        unit: Zero-argument callable, invoked exactly once on the calling thread.
        out_error: Caller-owned slot. Written only when ``unit`` raises.

    Returns:
        ``True`` if ``unit`` returned normally, ``False`` if a fault was captured
        into ``out_error.error``.
    """
    return _run_protected(unit, out_error)


def catch_exception(unit: ExecutionUnit, *, policy: CapturePolicy | None = None) -> Outcome:
    """Run a unit of work and return its outcome as a value.

    Args:
        unit: Zero-argument callable, invoked exactly once on the calling thread.
        policy: Optional capture policy. Defaults to intercepting ``Exception``.

    Returns:
        ``Completed()`` or ``Captured(error=...)``.
    """
    return _catch_exception(unit, policy=policy)


def run_or_raise(unit: ExecutionUnit, *, policy: CapturePolicy | None = None) -> None:
    """Run a unit of work, re-raising any captured fault as ``CapturedRuntimeFault``.

    Args:
        unit: Zero-argument callable, invoked exactly once on the calling thread.
        policy: Optional capture policy.

    Raises:
        CapturedRuntimeFault: If ``unit`` raised an intercepted exception. The
            original exception type does not cross this call.
    """
    _run_or_raise(unit, policy=policy)


__all__ = [
    "__version__",
    "FAULT_DOMAIN",
    "ExecutionUnit",
    "ErrorDescriptor",
    "ErrorSlot",
    "Completed",
    "Captured",
    "Outcome",
    "CapturePolicy",
    "CapturedRuntimeFault",
    "ExceptionBridge",
    "run_protected",
    "catch_exception",
    "run_or_raise",
    "protect",
]
