"""Bridge subsystem exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from faultpack.bridge.descriptor import ErrorDescriptor


class BridgeError(Exception):
    """Base class for bridge subsystem errors."""


class CapturedRuntimeFault(BridgeError):
    """A runtime fault captured at a protected-call boundary.

    Raised only by the opt-in throwing conveniences. The original exception
    is never attached; everything known about it lives on ``descriptor``.
    """

    def __init__(self, descriptor: "ErrorDescriptor") -> None:
        super().__init__(descriptor.message)
        self.descriptor = descriptor


class DescriptorValidationError(BridgeError):
    """Error descriptor payload failed schema validation."""


class CapturePolicyConfigError(ValueError):
    """Raised when a capture policy config payload is invalid."""
