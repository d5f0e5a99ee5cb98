"""Interfaces of the object store (scope) and plugins that components talk to.

The scope itself lives outside this package. Anything implementing these
protocols can be handed to `Component.build` and `Component.run_specs`.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Awaitable, Protocol, TypeVar

if TYPE_CHECKING:
    from .component import Component
    from .models.bit_id import BitId
    from .models.specs_results import SpecsResults

T = TypeVar("T")


class Compiler(Protocol):
    """In-process compiler plugin."""

    def compile(self, src: str) -> Any:
        """Return a mapping (or object) with `code` and `map` (or `mappings`)."""
        ...


class ScopeSources(Protocol):
    """Persistence capabilities of a scope."""

    async def update_dist(self, *, source: Component) -> None: ...

    async def modify_specs_results(
        self, *, source: Component, specs_results: SpecsResults
    ) -> None: ...


class Scope(Protocol):
    """Object store holding components and plugin environments."""

    sources: ScopeSources

    async def install_environment(
        self, *, ids: list[BitId], consumer: Any = None, verbose: bool = False
    ) -> None: ...

    def load_environment(
        self, bit_id: BitId, *, path_only: bool = False, bare_scope: bool = False
    ) -> Any:
        """Resolve a plugin; with path_only, return the path of its executable."""
        ...

    async def put(
        self, components: list[Component], *, message: str | None = None
    ) -> None:
        """Store components; message describes the change when committing."""
        ...


async def resolve(value: T | Awaitable[T]) -> T:
    """Await value if a collaborator returned an awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value


def compile_output(result: Any) -> tuple[str, Any]:
    """Normalize a compiler's return value to (code, map)."""
    if isinstance(result, str):
        return result, None
    if isinstance(result, dict):
        mappings = result.get("map", result.get("mappings"))
        return result.get("code", ""), mappings
    code = getattr(result, "code", "")
    mappings = getattr(result, "map", None)
    if mappings is None:
        mappings = getattr(result, "mappings", None)
    return code, mappings
