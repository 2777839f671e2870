"""JSON schema and validation for serialized error descriptors."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from jsonschema import Draft202012Validator

from faultpack.bridge.exceptions import DescriptorValidationError

FAULT_DOMAIN = "CapturedRuntimeFault"

ERROR_DESCRIPTOR_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "FaultKit Error Descriptor",
    "type": "object",
    "required": ["domain", "name", "message", "metadata"],
    "additionalProperties": False,
    "properties": {
        "domain": {"type": "string", "const": FAULT_DOMAIN},
        "name": {"type": "string", "minLength": 1},
        "message": {"type": "string", "minLength": 1},
        "metadata": {"type": "object"},
        "notes": {"type": "array", "items": {"type": "string"}},
        "traceback": {"type": "array", "items": {"type": "string"}},
        "cause": {"anyOf": [{"type": "null"}, {"$ref": "#"}]},
    },
}


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    return Draft202012Validator(ERROR_DESCRIPTOR_SCHEMA)


def validate_descriptor_payload(payload: Any) -> None:
    """Validate a serialized error descriptor mapping."""
    errors = sorted(_validator().iter_errors(payload), key=lambda err: list(err.path))
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.path) or "$"
        raise DescriptorValidationError(
            f"Invalid error descriptor at {location}: {first.message}"
        )
