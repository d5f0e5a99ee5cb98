"""bitpm: versioned components with pluggable build and test environments."""

from .component import Component, Dist, Impl, License, Misc, Specs
from .exceptions import (
    BitError,
    ComponentNotFoundInline,
    ComponentSpecsFailed,
    IdentityIncomplete,
    InvalidBitId,
    InvalidCompilerInterface,
    InvalidVersion,
    SpecsRunnerError,
)
from .models import BitId, BitIds, Doclet, SpecsResults

__all__ = [
    "BitError",
    "BitId",
    "BitIds",
    "Component",
    "ComponentNotFoundInline",
    "ComponentSpecsFailed",
    "Dist",
    "Doclet",
    "IdentityIncomplete",
    "Impl",
    "InvalidBitId",
    "InvalidCompilerInterface",
    "InvalidVersion",
    "License",
    "Misc",
    "Specs",
    "SpecsResults",
    "SpecsRunnerError",
]
