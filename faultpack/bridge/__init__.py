"""Exception bridge subsystem for FaultPack."""

from faultpack.bridge.descriptor import ErrorDescriptor, describe_exception
from faultpack.bridge.exceptions import (
    BridgeError,
    CapturedRuntimeFault,
    CapturePolicyConfigError,
    DescriptorValidationError,
)
from faultpack.bridge.outcome import Captured, Completed, ErrorSlot, Outcome
from faultpack.bridge.policy import (
    DEFAULT_CAPTURE_POLICY,
    CapturePolicy,
    build_capture_policy,
    capture_policy_from_config,
)
from faultpack.bridge.runner import (
    ExceptionBridge,
    ExecutionUnit,
    catch_exception,
    protect,
    run_or_raise,
    run_protected,
)
from faultpack.bridge.schema import (
    ERROR_DESCRIPTOR_SCHEMA,
    FAULT_DOMAIN,
    validate_descriptor_payload,
)

__all__ = [
    "BridgeError",
    "CapturedRuntimeFault",
    "CapturePolicyConfigError",
    "DescriptorValidationError",
    "FAULT_DOMAIN",
    "ERROR_DESCRIPTOR_SCHEMA",
    "validate_descriptor_payload",
    "ErrorDescriptor",
    "describe_exception",
    "Completed",
    "Captured",
    "Outcome",
    "ErrorSlot",
    "CapturePolicy",
    "DEFAULT_CAPTURE_POLICY",
    "build_capture_policy",
    "capture_policy_from_config",
    "ExceptionBridge",
    "ExecutionUnit",
    "catch_exception",
    "run_protected",
    "run_or_raise",
    "protect",
]
