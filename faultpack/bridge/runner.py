"""Protected-call boundary that turns runtime faults into plain data."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import wraps
import logging
from typing import Any, Callable, ParamSpec

from faultpack.bridge.descriptor import describe_exception
from faultpack.bridge.outcome import Captured, Completed, ErrorSlot, Outcome
from faultpack.bridge.policy import DEFAULT_CAPTURE_POLICY, CapturePolicy

logger = logging.getLogger(__name__)

P = ParamSpec("P")

ExecutionUnit = Callable[[], Any]


@dataclass(frozen=True, slots=True)
class ExceptionBridge:
    """Runs units of work in a protected region and reports faults as descriptors.

    The bridge keeps nothing between calls apart from its immutable policy, so
    one instance can serve any number of threads.
    """

    policy: CapturePolicy = field(default_factory=lambda: DEFAULT_CAPTURE_POLICY)

    def catch(self, unit: ExecutionUnit) -> Outcome:
        """Invoke ``unit`` once and return ``Completed`` or ``Captured``.

        Exceptions outside ``policy.intercept`` propagate unchanged. The unit's
        return value is discarded.
        """
        try:
            unit()
        except self.policy.intercept as error:
            descriptor = describe_exception(error, policy=self.policy)
            logger.debug("Captured %s in protected call: %s", descriptor.name, descriptor.message)
            return Captured(error=descriptor)
        return Completed()

    def run_protected(self, unit: ExecutionUnit, out_error: ErrorSlot) -> bool:
        """Invoke ``unit`` once; on a fault write ``out_error.error`` and return False.

        ``out_error`` is left untouched when the unit completes.
        """
        outcome = self.catch(unit)
        if isinstance(outcome, Captured):
            out_error.error = outcome.error
            return False
        return True

    def run_or_raise(self, unit: ExecutionUnit) -> None:
        """Invoke ``unit`` once and raise ``CapturedRuntimeFault`` if it faulted."""
        # Raising outside the except block keeps the native exception off the chain.
        self.catch(unit).raise_for_fault()


_DEFAULT_BRIDGE = ExceptionBridge()


def _bridge_for(policy: CapturePolicy | None) -> ExceptionBridge:
    if policy is None:
        return _DEFAULT_BRIDGE
    return ExceptionBridge(policy=policy)


def run_protected(unit: ExecutionUnit, out_error: ErrorSlot) -> bool:
    return _DEFAULT_BRIDGE.run_protected(unit, out_error)


def catch_exception(unit: ExecutionUnit, *, policy: CapturePolicy | None = None) -> Outcome:
    return _bridge_for(policy).catch(unit)


def run_or_raise(unit: ExecutionUnit, *, policy: CapturePolicy | None = None) -> None:
    _bridge_for(policy).run_or_raise(unit)


def protect(
    func: Callable[P, Any] | None = None,
    *,
    policy: CapturePolicy | None = None,
) -> Any:
    """Decorator that makes every call of a procedure return an ``Outcome``.

    Usable bare (``@protect``) or with a policy (``@protect(policy=...)``).
    Call arguments are bound into a zero-argument unit; the wrapped function's
    return value is discarded.
    """

    def decorator(target: Callable[P, Any]) -> Callable[P, Outcome]:
        bridge = _bridge_for(policy)

        @wraps(target)
        def wrapped(*args: P.args, **kwargs: P.kwargs) -> Outcome:
            return bridge.catch(lambda: target(*args, **kwargs))

        return wrapped

    if func is not None:
        return decorator(func)
    return decorator
