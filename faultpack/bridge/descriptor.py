"""Error descriptor value type and exception extraction."""

from __future__ import annotations

from collections.abc import Mapping
import copy
from dataclasses import dataclass, field
import traceback as traceback_module
from types import MappingProxyType
from typing import Any

from faultpack.bridge.policy import DEFAULT_CAPTURE_POLICY, CapturePolicy
from faultpack.bridge.schema import FAULT_DOMAIN, validate_descriptor_payload
from faultpack.core.canonical import canonical_json, canonicalize, string_keyed

_OS_ERROR_ATTRIBUTES = ("errno", "strerror", "filename", "filename2")


@dataclass(frozen=True, slots=True)
class ErrorDescriptor:
    """Plain-data description of a runtime fault captured at a bridge boundary.

    ``metadata`` is a read-only view over a private copy. Descriptors compare
    by value but are unhashable.
    """

    name: str
    message: str
    metadata: Mapping[str, Any] = field(default_factory=dict)
    notes: tuple[str, ...] = ()
    traceback: tuple[str, ...] = ()
    cause: ErrorDescriptor | None = None
    domain: str = FAULT_DOMAIN

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(string_keyed(self.metadata)))

    @property
    def summary(self) -> str:
        return f"{self.name}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain,
            "name": self.name,
            "message": self.message,
            "metadata": canonicalize(self.metadata),
            "notes": list(self.notes),
            "traceback": list(self.traceback),
            "cause": self.cause.to_dict() if self.cause is not None else None,
        }

    def to_json(self) -> str:
        return canonical_json(self.to_dict())

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ErrorDescriptor:
        """Rebuild a descriptor from its serialized form.

        Raises:
            DescriptorValidationError: If ``raw`` does not match the descriptor schema.
        """
        validate_descriptor_payload(raw)
        return cls._from_payload(raw)

    @classmethod
    def _from_payload(cls, raw: dict[str, Any]) -> ErrorDescriptor:
        raw_cause = raw.get("cause")
        return cls(
            domain=raw["domain"],
            name=raw["name"],
            message=raw["message"],
            metadata=dict(raw["metadata"]),
            notes=tuple(raw.get("notes", ())),
            traceback=tuple(raw.get("traceback", ())),
            cause=cls._from_payload(raw_cause) if raw_cause is not None else None,
        )


def describe_exception(
    error: BaseException,
    *,
    policy: CapturePolicy = DEFAULT_CAPTURE_POLICY,
) -> ErrorDescriptor:
    """Build an error descriptor from a caught exception.

    Extraction never raises: an exception whose ``__str__`` or attributes
    fail is still described, with placeholder text where needed.
    """
    return _describe(error, policy=policy, depth=0, seen=set())


def _describe(
    error: BaseException,
    *,
    policy: CapturePolicy,
    depth: int,
    seen: set[int],
) -> ErrorDescriptor:
    seen.add(id(error))
    name = error.__class__.__name__

    cause: ErrorDescriptor | None = None
    if policy.capture_cause and depth < policy.max_cause_depth:
        chained = _chained_exception(error)
        # Cycles are possible when a handler re-raises an earlier exception.
        if chained is not None and id(chained) not in seen:
            cause = _describe(chained, policy=policy, depth=depth + 1, seen=seen)

    return ErrorDescriptor(
        name=name,
        message=_extract_message(error, fallback=name),
        metadata=_extract_metadata(error, policy=policy),
        notes=_extract_notes(error),
        traceback=_format_traceback(error, policy=policy),
        cause=cause,
    )


def _chained_exception(error: BaseException) -> BaseException | None:
    if error.__cause__ is not None:
        return error.__cause__
    if error.__suppress_context__:
        return None
    return error.__context__


def _extract_message(error: BaseException, *, fallback: str) -> str:
    try:
        text = str(error).strip()
    except Exception:
        return f"<unprintable {fallback} object>"
    return text or fallback


def _extract_metadata(error: BaseException, *, policy: CapturePolicy) -> dict[str, Any]:
    metadata: dict[str, Any] = {}

    explicit = _safe_getattr(error, "metadata")
    if isinstance(explicit, Mapping):
        try:
            metadata.update(string_keyed(explicit))
        except Exception:
            metadata["metadata"] = "<unreadable mapping>"

    instance_attributes = getattr(error, "__dict__", None) or {}
    for key, value in instance_attributes.items():
        if not isinstance(key, str) or key.startswith("_") or key == "metadata":
            continue
        metadata.setdefault(key, value)

    if isinstance(error, OSError):
        for key in _OS_ERROR_ATTRIBUTES:
            value = getattr(error, key, None)
            if value is not None:
                metadata.setdefault(key, value)

    for key in policy.metadata_attributes:
        if key in metadata:
            continue
        value = _safe_getattr(error, key)
        if value is not None:
            metadata[key] = value

    return {key: _snapshot(value) for key, value in metadata.items()}


def _snapshot(value: Any) -> Any:
    # Detach from the live exception; values that refuse deepcopy fall back to plain data.
    try:
        return copy.deepcopy(value)
    except Exception:
        return canonicalize(value)


def _extract_notes(error: BaseException) -> tuple[str, ...]:
    notes = _safe_getattr(error, "__notes__")
    if not isinstance(notes, (list, tuple)):
        return ()
    return tuple(_note_text(note) for note in notes)


def _note_text(note: Any) -> str:
    try:
        return str(note)
    except Exception:
        return "<unprintable note>"


def _format_traceback(error: BaseException, *, policy: CapturePolicy) -> tuple[str, ...]:
    if not policy.capture_traceback or policy.max_traceback_frames == 0:
        return ()
    frames = traceback_module.extract_tb(error.__traceback__)
    return tuple(
        f"{frame.filename}:{frame.lineno} in {frame.name}"
        for frame in frames[-policy.max_traceback_frames :]
    )


def _safe_getattr(error: BaseException, name: str) -> Any:
    try:
        return getattr(error, name, None)
    except Exception:
        return None
