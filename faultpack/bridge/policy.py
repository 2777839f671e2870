"""Capture policy controls for protected calls."""

from __future__ import annotations

from dataclasses import dataclass
import importlib
from typing import Any, Mapping

from faultpack.bridge.exceptions import CapturePolicyConfigError

DEFAULT_MAX_TRACEBACK_FRAMES = 32
DEFAULT_MAX_CAUSE_DEPTH = 8


@dataclass(frozen=True, slots=True)
class CapturePolicy:
    """Policy for which exceptions are intercepted and how they are described.

    Invalid values raise ``CapturePolicyConfigError`` at construction.
    """

    intercept: tuple[type[BaseException], ...] = (Exception,)
    capture_traceback: bool = True
    max_traceback_frames: int = DEFAULT_MAX_TRACEBACK_FRAMES
    capture_cause: bool = True
    max_cause_depth: int = DEFAULT_MAX_CAUSE_DEPTH
    metadata_attributes: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.intercept, tuple):
            raise CapturePolicyConfigError("Capture policy 'intercept' must be a tuple.")
        if not self.intercept:
            raise CapturePolicyConfigError(
                "Capture policy must intercept at least one exception type."
            )
        for candidate in self.intercept:
            if not isinstance(candidate, type) or not issubclass(candidate, BaseException):
                raise CapturePolicyConfigError(
                    "Capture policy 'intercept' entries must be exception classes, "
                    f"got {candidate!r}."
                )
        _check_count(self.max_traceback_frames, key="max_traceback_frames")
        _check_count(self.max_cause_depth, key="max_cause_depth")
        if not isinstance(self.metadata_attributes, tuple) or not all(
            isinstance(name, str) for name in self.metadata_attributes
        ):
            raise CapturePolicyConfigError("metadata_attributes must contain strings.")


def _check_count(value: Any, *, key: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise CapturePolicyConfigError(f"{key} must be an integer.")
    if value < 0:
        raise CapturePolicyConfigError(f"{key} cannot be negative.")


DEFAULT_CAPTURE_POLICY = CapturePolicy()


def build_capture_policy(
    *,
    intercept: tuple[type[BaseException], ...] = (Exception,),
    capture_traceback: bool = True,
    max_traceback_frames: int = DEFAULT_MAX_TRACEBACK_FRAMES,
    capture_cause: bool = True,
    max_cause_depth: int = DEFAULT_MAX_CAUSE_DEPTH,
    metadata_attributes: tuple[str, ...] = (),
) -> CapturePolicy:
    """Build a validated capture policy with duplicates and blank names removed."""
    unique_intercept: list[Any] = []
    for candidate in intercept:
        if candidate not in unique_intercept:
            unique_intercept.append(candidate)

    names: list[str] = []
    for name in metadata_attributes:
        if not isinstance(name, str):
            raise CapturePolicyConfigError("metadata_attributes must contain strings.")
        stripped = name.strip()
        if stripped and stripped not in names:
            names.append(stripped)

    return CapturePolicy(
        intercept=tuple(unique_intercept),
        capture_traceback=capture_traceback,
        max_traceback_frames=max_traceback_frames,
        capture_cause=capture_cause,
        max_cause_depth=max_cause_depth,
        metadata_attributes=tuple(names),
    )


def capture_policy_from_config(
    config: Mapping[str, Any],
    *,
    base_policy: CapturePolicy = DEFAULT_CAPTURE_POLICY,
) -> CapturePolicy:
    """Create a capture policy from a config mapping.

    ``intercept`` entries are import paths such as ``"builtins:LookupError"``
    or ``"decimal.InvalidOperation"``.
    """
    supported_keys = {
        "intercept",
        "capture_traceback",
        "max_traceback_frames",
        "capture_cause",
        "max_cause_depth",
        "metadata_attributes",
    }
    unknown = sorted(set(config.keys()) - supported_keys)
    if unknown:
        raise CapturePolicyConfigError("Unsupported capture config keys: " + ", ".join(unknown))

    intercept = base_policy.intercept
    if "intercept" in config:
        intercept = tuple(
            _resolve_exception_class(path)
            for path in _read_string_list(config, key="intercept")
        )

    capture_traceback = config.get("capture_traceback", base_policy.capture_traceback)
    if not isinstance(capture_traceback, bool):
        raise CapturePolicyConfigError("capture config key 'capture_traceback' must be a boolean.")

    capture_cause = config.get("capture_cause", base_policy.capture_cause)
    if not isinstance(capture_cause, bool):
        raise CapturePolicyConfigError("capture config key 'capture_cause' must be a boolean.")

    metadata_attributes = base_policy.metadata_attributes
    if "metadata_attributes" in config:
        metadata_attributes = _read_string_list(config, key="metadata_attributes")

    return build_capture_policy(
        intercept=intercept,
        capture_traceback=capture_traceback,
        max_traceback_frames=config.get("max_traceback_frames", base_policy.max_traceback_frames),
        capture_cause=capture_cause,
        max_cause_depth=config.get("max_cause_depth", base_policy.max_cause_depth),
        metadata_attributes=metadata_attributes,
    )


def _resolve_exception_class(path: str) -> type[BaseException]:
    if ":" in path:
        module_name, _, qualname = path.partition(":")
    else:
        module_name, _, qualname = path.rpartition(".")
    if not module_name or not qualname:
        raise CapturePolicyConfigError(
            f"Invalid exception path {path!r}. Use 'module:QualName' or 'module.QualName'."
        )

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as error:
        raise CapturePolicyConfigError(
            f"Cannot import module {module_name!r} for exception path {path!r} ({error})"
        ) from error

    for part in qualname.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as error:
            raise CapturePolicyConfigError(
                f"Exception path {path!r} does not resolve: missing {part!r}."
            ) from error

    if not isinstance(target, type) or not issubclass(target, BaseException):
        raise CapturePolicyConfigError(f"Exception path {path!r} is not an exception class.")
    return target


def _read_string_list(config: Mapping[str, Any], *, key: str) -> tuple[str, ...]:
    value = config[key]
    if not isinstance(value, list):
        raise CapturePolicyConfigError(f"capture config key '{key}' must be a list of strings.")
    result: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise CapturePolicyConfigError(
                f"capture config key '{key}' must be a list of strings."
            )
        if item.strip():
            result.append(item.strip())
    return tuple(result)
