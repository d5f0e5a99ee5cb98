"""Lazily loaded component artifacts (implementation, specs, misc, dist, license)."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

from ..constants import DEFAULT_DIST_DIRNAME, DEFAULT_LICENSE_FILENAME
from ..scope import resolve

if TYPE_CHECKING:
    from ..models.bit_id import BitId
    from ..scope import Scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Unloaded:
    """Artifact that still lives on disk."""

    path: str


@dataclass(frozen=True)
class Loaded:
    """Artifact content held in memory."""

    src: str


SourceState = Union[Unloaded, Loaded]


def resolve_state(state: SourceState) -> Loaded:
    """Resolve a state to its loaded form, reading the file if needed."""
    if isinstance(state, Loaded):
        return state
    with open(state.path, encoding="utf-8") as f:
        return Loaded(f.read())


def is_present(artifact: Any) -> bool:
    """Check whether an optional artifact is set and has something to write."""
    if artifact is None:
        return False
    if isinstance(artifact, License):
        return not artifact.is_empty
    return True


def write_file(path: Path, content: str, force: bool) -> bool:
    """Write content to path unless it exists and force is off.

    Returns:
        True if the file was written.
    """
    if path.exists() and not force:
        logger.debug(f"Skipping existing file: {path}")
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return True


def _camel_case(name: str) -> str:
    words = [w for w in re.split(r"[^A-Za-z0-9]+", name) if w]
    if not words:
        return "component"
    head, *rest = words
    ident = head[0].lower() + head[1:] + "".join(w[:1].upper() + w[1:] for w in rest)
    return ident if not ident[0].isdigit() else f"_{ident}"


async def _plugin_template(
    name: str, plugin_id: BitId | None, scope: Scope | None
) -> str | None:
    """Ask a plugin for its starter template, if it offers one."""
    if plugin_id is None or scope is None:
        return None
    try:
        plugin = await resolve(scope.load_environment(plugin_id, bare_scope=True))
    except Exception as e:
        logger.warning(f"Could not load {plugin_id} for a template: {e}")
        return None
    get_template = getattr(plugin, "get_template", None)
    if not callable(get_template):
        return None
    return await resolve(get_template(name))


class Source:
    """A single text artifact, loaded from disk on first access."""

    def __init__(self, src: str = "", *, path: str | Path | None = None):
        self._state: SourceState = (
            Unloaded(str(path)) if path is not None else Loaded(src)
        )

    @classmethod
    def load(cls, path: str | Path):
        return cls(path=path)

    @property
    def is_loaded(self) -> bool:
        return isinstance(self._state, Loaded)

    @property
    def src(self) -> str:
        self._state = resolve_state(self._state)
        return self._state.src

    def write(self, directory: str | Path, filename: str, force: bool = True) -> bool:
        return write_file(Path(directory) / filename, self.src, force)

    def serialize(self) -> dict[str, Any]:
        return {"src": self.src}

    @classmethod
    def deserialize(cls, record: dict[str, Any] | str):
        if isinstance(record, str):
            return cls(record)
        return cls(record.get("src") or "")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._state!r})"


class Impl(Source):
    """Component implementation."""

    @classmethod
    async def create(
        cls, name: str, compiler_id: BitId | None = None, scope: Scope | None = None
    ) -> "Impl":
        template = await _plugin_template(name, compiler_id, scope)
        if template is None:
            template = (
                "/**\n"
                f" * {name}\n"
                f" * @name {name}\n"
                " * @param {*} input\n"
                " * @returns {*}\n"
                " */\n"
                f"module.exports = function {_camel_case(name)}(input) {{\n"
                "  return input;\n"
                "};\n"
            )
        return cls(template)


class Specs(Source):
    """Component specs (tests)."""

    @classmethod
    async def create(
        cls, name: str, tester_id: BitId | None = None, scope: Scope | None = None
    ) -> "Specs":
        template = await _plugin_template(name, tester_id, scope)
        if template is None:
            template = (
                f"const {_camel_case(name)} = require(__impl__);\n"
                "\n"
                f"describe('{name}', () => {{\n"
                "  it('should be implemented', () => {\n"
                f"    if (typeof {_camel_case(name)} !== 'function') throw new Error('not implemented');\n"
                "  });\n"
                "});\n"
            )
        return cls(template)


class License(Source):
    """License text; may be empty, in which case nothing is written."""

    @property
    def is_empty(self) -> bool:
        return not self.src

    def write(  # type: ignore[override]
        self,
        directory: str | Path,
        filename: str = DEFAULT_LICENSE_FILENAME,
        force: bool = True,
    ) -> bool:
        if self.is_empty:
            return False
        return super().write(directory, filename, force)


class Dist(Source):
    """Compiled implementation plus its source map."""

    def __init__(
        self,
        src: str = "",
        mappings: Any = None,
        *,
        path: str | Path | None = None,
    ):
        super().__init__(src, path=path)
        self.mappings = mappings

    def write(self, directory: str | Path, filename: str, force: bool = True) -> bool:
        dist_dir = Path(directory) / DEFAULT_DIST_DIRNAME
        written = write_file(dist_dir / filename, self.src, force)
        if self.mappings:
            mappings = (
                self.mappings
                if isinstance(self.mappings, str)
                else json.dumps(self.mappings)
            )
            write_file(dist_dir / f"{filename}.map", mappings, force)
        return written

    def serialize(self) -> dict[str, Any]:
        return {"code": self.src, "map": self.mappings}

    @classmethod
    def deserialize(cls, record: dict[str, Any]) -> "Dist":
        return cls(record.get("code") or "", record.get("map"))


@dataclass
class MiscFile:
    """One auxiliary file of a component."""

    name: str
    state: SourceState

    @property
    def content(self) -> str:
        self.state = resolve_state(self.state)
        return self.state.src


class Misc:
    """Auxiliary files that travel with a component."""

    def __init__(self, files: list[MiscFile] | None = None):
        self.files = files or []

    @classmethod
    def load(cls, paths: list[str | Path]) -> "Misc":
        return cls([MiscFile(Path(p).name, Unloaded(str(p))) for p in paths])

    @property
    def src(self) -> dict[str, str]:
        return {f.name: f.content for f in self.files}

    def write(
        self,
        directory: str | Path,
        filenames: list[str] | None = None,
        force: bool = True,
    ) -> list[str]:
        """Write every file, optionally renamed by position from filenames."""
        written = []
        for index, misc_file in enumerate(self.files):
            name = misc_file.name
            if filenames and index < len(filenames):
                name = filenames[index]
            if write_file(Path(directory) / name, misc_file.content, force):
                written.append(name)
        return written

    def serialize(self) -> list[dict[str, str]]:
        return [{"name": f.name, "content": f.content} for f in self.files]

    @classmethod
    def deserialize(cls, record: list[dict[str, str]]) -> "Misc":
        return cls(
            [MiscFile(item["name"], Loaded(item.get("content") or "")) for item in record]
        )

    def __len__(self) -> int:
        return len(self.files)
