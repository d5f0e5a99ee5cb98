"""Errors raised by bitpm."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models.bit_id import BitId
    from .models.specs_results import SpecsResults

__all__ = [
    "BitError",
    "ComponentNotFoundInline",
    "ComponentSpecsFailed",
    "IdentityIncomplete",
    "InvalidBitId",
    "InvalidCompilerInterface",
    "InvalidVersion",
    "SpecsRunnerError",
]


class BitError(Exception):
    """Base class for bitpm errors."""


class InvalidBitId(BitError, ValueError):
    """Raised when a canonical component id string cannot be parsed."""

    def __init__(self, value: str):
        super().__init__(f"invalid component id: {value!r}")
        self.value = value


class InvalidVersion(BitError, ValueError):
    """Raised when a component record carries a version that is not an integer."""

    def __init__(self, value: object):
        super().__init__(f"invalid component version: {value!r}")
        self.value = value


class IdentityIncomplete(BitError):
    """Raised when a fully-qualified id is requested before scope and version are set."""

    def __init__(self, box: str, name: str):
        super().__init__(
            f"cant produce id for {box}/{name} because scope or version are missing"
        )


class ComponentNotFoundInline(BitError):
    """Raised when loading a component from a working directory that does not exist."""

    def __init__(self, bit_dir: str):
        super().__init__(f"component not found at {bit_dir}")
        self.bit_dir = bit_dir


class InvalidCompilerInterface(BitError):
    """Raised when a loaded compiler plugin has no compile capability."""

    def __init__(self, compiler_id: BitId):
        super().__init__(f'"{compiler_id}" does not have a valid compiler interface')
        self.compiler_id = compiler_id


class ComponentSpecsFailed(BitError):
    """Raised when specs ran but reported failures and the caller asked to reject."""

    def __init__(self, specs_results: SpecsResults | None = None):
        super().__init__("component's specs does not pass, fix them and commit")
        self.specs_results = specs_results


class SpecsRunnerError(BitError):
    """Raised when the tester process crashes or produces unreadable output."""
