"""Core helpers for FaultPack."""

from faultpack.core.canonical import canonical_json, canonicalize

__all__ = ["canonicalize", "canonical_json"]
