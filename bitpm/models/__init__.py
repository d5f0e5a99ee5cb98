"""Value models for component identity, docs and specs results."""

from .bit_id import BitId, BitIds
from .doclet import DocArg, DocReturns, Doclet, parse_docs
from .specs_results import SpecError, SpecResult, SpecsResults, Stats

__all__ = [
    "BitId",
    "BitIds",
    "DocArg",
    "DocReturns",
    "Doclet",
    "SpecError",
    "SpecResult",
    "SpecsResults",
    "Stats",
    "parse_docs",
]
