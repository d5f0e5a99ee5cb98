"""Component entity and its artifacts."""

from .component import Component
from .sources import Dist, Impl, License, Loaded, Misc, MiscFile, Source, Specs, Unloaded, is_present

__all__ = [
    "Component",
    "Dist",
    "Impl",
    "License",
    "Loaded",
    "Misc",
    "MiscFile",
    "Source",
    "Specs",
    "Unloaded",
    "is_present",
]
