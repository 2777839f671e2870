from decimal import InvalidOperation

import pytest

from faultpack.bridge import (
    DEFAULT_CAPTURE_POLICY,
    CapturePolicy,
    CapturePolicyConfigError,
    build_capture_policy,
    capture_policy_from_config,
)


def test_default_policy_intercepts_exception_only() -> None:
    assert DEFAULT_CAPTURE_POLICY == CapturePolicy()
    assert DEFAULT_CAPTURE_POLICY.intercept == (Exception,)
    assert DEFAULT_CAPTURE_POLICY.capture_traceback is True
    assert DEFAULT_CAPTURE_POLICY.max_traceback_frames == 32
    assert DEFAULT_CAPTURE_POLICY.max_cause_depth == 8


def test_build_policy_deduplicates_and_strips() -> None:
    policy = build_capture_policy(
        intercept=(KeyError, KeyError, ValueError),
        metadata_attributes=(" code ", "", "code", "reason"),
    )

    assert policy.intercept == (KeyError, ValueError)
    assert policy.metadata_attributes == ("code", "reason")


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"intercept": ()}, "at least one exception type"),
        ({"intercept": (int,)}, "must be exception classes"),
        ({"intercept": (ValueError("x"),)}, "must be exception classes"),
        ({"max_traceback_frames": -1}, "cannot be negative"),
        ({"max_traceback_frames": True}, "must be an integer"),
        ({"max_cause_depth": -2}, "cannot be negative"),
        ({"max_cause_depth": "3"}, "must be an integer"),
        ({"metadata_attributes": (3,)}, "must contain strings"),
    ],
)
def test_build_policy_rejects_invalid_values(kwargs: dict, message: str) -> None:
    with pytest.raises(CapturePolicyConfigError, match=message):
        build_capture_policy(**kwargs)


def test_policy_from_config_resolves_exception_paths() -> None:
    policy = capture_policy_from_config(
        {
            "intercept": ["builtins:LookupError", "decimal.InvalidOperation"],
            "capture_traceback": False,
            "max_cause_depth": 1,
            "metadata_attributes": ["code"],
        }
    )

    assert policy.intercept == (LookupError, InvalidOperation)
    assert policy.capture_traceback is False
    assert policy.max_cause_depth == 1
    assert policy.metadata_attributes == ("code",)
    assert policy.max_traceback_frames == DEFAULT_CAPTURE_POLICY.max_traceback_frames


def test_policy_from_config_extends_base_policy() -> None:
    base = build_capture_policy(intercept=(ValueError,), max_traceback_frames=4)

    policy = capture_policy_from_config({"capture_cause": False}, base_policy=base)

    assert policy.intercept == (ValueError,)
    assert policy.max_traceback_frames == 4
    assert policy.capture_cause is False


@pytest.mark.parametrize(
    ("config", "message"),
    [
        ({"unknown": 1}, "Unsupported capture config keys: unknown"),
        ({"intercept": "builtins:ValueError"}, "must be a list of strings"),
        ({"intercept": [1]}, "must be a list of strings"),
        ({"intercept": ["ValueError"]}, "Invalid exception path"),
        ({"intercept": ["no_such_module_xyz:Error"]}, "Cannot import module"),
        ({"intercept": ["builtins:NoSuchError"]}, "does not resolve"),
        ({"intercept": ["builtins:len"]}, "is not an exception class"),
        ({"capture_traceback": "yes"}, "'capture_traceback' must be a boolean"),
        ({"capture_cause": 0}, "'capture_cause' must be a boolean"),
        ({"max_traceback_frames": -5}, "cannot be negative"),
    ],
)
def test_policy_from_config_rejects_invalid_config(config: dict, message: str) -> None:
    with pytest.raises(CapturePolicyConfigError, match=message):
        capture_policy_from_config(config)


def test_config_error_is_value_error() -> None:
    assert issubclass(CapturePolicyConfigError, ValueError)


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"intercept": ()}, "at least one exception type"),
        ({"intercept": [ValueError]}, "must be a tuple"),
        ({"intercept": (str,)}, "must be exception classes"),
        ({"max_cause_depth": -1}, "cannot be negative"),
        ({"metadata_attributes": ("code", 1)}, "must contain strings"),
    ],
)
def test_direct_construction_enforces_policy_invariants(kwargs: dict, message: str) -> None:
    with pytest.raises(CapturePolicyConfigError, match=message):
        CapturePolicy(**kwargs)
