"""Result shapes for protected calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, NoReturn, Union

from faultpack.bridge.descriptor import ErrorDescriptor
from faultpack.bridge.exceptions import CapturedRuntimeFault


@dataclass(frozen=True, slots=True)
class Completed:
    """The unit returned normally."""

    ok: Literal[True] = True

    @property
    def error(self) -> None:
        return None

    def raise_for_fault(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class Captured:
    """The unit raised; ``error`` describes the intercepted fault."""

    error: ErrorDescriptor
    ok: Literal[False] = False

    def raise_for_fault(self) -> NoReturn:
        raise CapturedRuntimeFault(self.error)


Outcome = Union[Completed, Captured]


@dataclass(slots=True)
class ErrorSlot:
    """Caller-owned output slot, written only when a protected call fails."""

    error: ErrorDescriptor | None = None
