"""Component entity: artifacts, identity, persistence and build/test orchestration."""

from __future__ import annotations

import json
import logging
import math
import re
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from ..config.loader import load_bit_config, write_bit_config
from ..config.models import BitConfig, ConsumerBitConfig
from ..constants import (
    DEFAULT_BIT_VERSION,
    DEFAULT_BOX_NAME,
    DEFAULT_IMPL_NAME,
    DEFAULT_SPECS_NAME,
    NO_PLUGIN_TYPE,
)
from ..exceptions import (
    ComponentNotFoundInline,
    ComponentSpecsFailed,
    IdentityIncomplete,
    InvalidCompilerInterface,
    InvalidVersion,
)
from ..models.bit_id import BitId, BitIds
from ..models.doclet import Doclet, parse_docs
from ..models.specs_results import SpecsResults
from ..scope import compile_output, resolve
from ..specs_runner import default_runner
from .sources import Dist, Impl, License, Misc, Specs, is_present

if TYPE_CHECKING:
    from ..scope import Scope
    from ..specs_runner import SpecsRunner

logger = logging.getLogger(__name__)

PathLike = str | Path


def _compile_if_needed(compiler: Any, src: str) -> str:
    compile_ = getattr(compiler, "compile", None)
    if compiler is None or not callable(compile_):
        return src
    code, _ = compile_output(compile_(src))
    return code


_LEADING_INT_RE = re.compile(r"^\s*[+-]?\d+")


def _coerce_version(version: Any) -> int | None:
    """Read a version the way records carry it: leading integer digits win."""
    if version is None:
        return None
    if isinstance(version, int) and not isinstance(version, bool):
        return version
    if isinstance(version, float) and math.isfinite(version):
        return int(version)
    if isinstance(version, str):
        if not version.strip():
            return None
        match = _LEADING_INT_RE.match(version)
        if match:
            return int(match.group())
    raise InvalidVersion(version)


class Component:
    """A versioned unit of source code with its specs, docs and metadata.

    Artifacts given as paths are read from disk on first access. `build` and
    `run_specs` attach their results (`dist`, `specs_results`) to this
    instance, so calls on one instance must not overlap.
    """

    def __init__(
        self,
        *,
        name: str,
        impl: Impl | PathLike,
        box: str | None = None,
        version: int | None = None,
        scope: str | None = None,
        impl_file: str | None = None,
        specs_file: str | None = None,
        misc_files: list[str] | None = None,
        compiler_id: BitId | None = None,
        tester_id: BitId | None = None,
        dependencies: BitIds | None = None,
        package_dependencies: dict[str, str] | None = None,
        specs: Specs | PathLike | None = None,
        misc: Misc | list[PathLike] | None = None,
        docs: list[Doclet] | None = None,
        dist: Dist | None = None,
        specs_results: SpecsResults | None = None,
        license: License | None = None,
        deprecate: str | None = None,
    ):
        self.name = name
        self.box = box or DEFAULT_BOX_NAME
        self.version = version
        self.scope = scope
        self.impl_file = impl_file or DEFAULT_IMPL_NAME
        self.specs_file = specs_file or DEFAULT_SPECS_NAME
        self.misc_files = list(misc_files or [])
        self.compiler_id = compiler_id
        self.tester_id = tester_id
        self.dependencies = dependencies if dependencies is not None else BitIds()
        self.package_dependencies = dict(package_dependencies or {})
        self._impl = impl
        self._specs = specs
        self._misc = misc
        self._docs = docs
        self.dist = dist
        self.specs_results = specs_results
        self.license = license
        self.deprecate = deprecate

    def __repr__(self) -> str:
        version = f"@{self.version}" if self.version is not None else ""
        return f"Component({self.box}/{self.name}{version})"

    # Lazy artifacts

    @property
    def impl(self) -> Impl:
        if not isinstance(self._impl, Impl):
            self._impl = Impl.load(self._impl)
        return self._impl

    @impl.setter
    def impl(self, value: Impl | PathLike) -> None:
        self._impl = value
        self._docs = None

    @property
    def specs(self) -> Specs | None:
        if self._specs is None:
            return None
        if not isinstance(self._specs, Specs):
            self._specs = Specs.load(self._specs)
        return self._specs

    @specs.setter
    def specs(self, value: Specs | PathLike | None) -> None:
        self._specs = value

    @property
    def misc(self) -> Misc | None:
        if self._misc is None:
            return None
        if not isinstance(self._misc, Misc):
            self._misc = Misc.load(list(self._misc))
        return self._misc

    @misc.setter
    def misc(self, value: Misc | list[PathLike] | None) -> None:
        self._misc = value

    @property
    def docs(self) -> list[Doclet]:
        if self._docs is None:
            self._docs = parse_docs(self.impl.src)
        return self._docs

    @property
    def id(self) -> BitId:
        """Fully-qualified id; requires scope and version."""
        if not self.scope or self.version is None:
            raise IdentityIncomplete(self.box, self.name)
        return BitId(
            scope=self.scope,
            box=self.box,
            name=self.name,
            version=str(self.version),
        )

    # Disk persistence

    def to_bit_config(self) -> BitConfig:
        return BitConfig(
            version=self.version,
            scope=self.scope,
            impl_file=self.impl_file,
            spec_file=self.specs_file,
            misc_files=self.misc_files,
            compiler=str(self.compiler_id) if self.compiler_id else NO_PLUGIN_TYPE,
            tester=str(self.tester_id) if self.tester_id else NO_PLUGIN_TYPE,
            dependencies=self.dependencies.to_plain_mapping(),
            package_dependencies=self.package_dependencies,
        )

    def write_bit_config(self, bit_dir: PathLike, force: bool = True) -> "Component":
        write_bit_config(self.to_bit_config(), bit_dir, override=force)
        return self

    def write(
        self, bit_dir: PathLike, with_bit_config: bool = False, force: bool = True
    ) -> "Component":
        """Write artifacts to bit_dir in order, stopping at the first failure.

        Order: impl, specs, misc, dist, config, license. When this call
        created bit_dir and a step fails, bit_dir is removed again.
        """
        bit_dir = Path(bit_dir)
        created = not bit_dir.exists()
        bit_dir.mkdir(parents=True, exist_ok=True)

        steps: list[tuple[Callable[[], bool], Callable[[], Any]]] = [
            (lambda: True, lambda: self.impl.write(bit_dir, self.impl_file, force)),
            (
                lambda: is_present(self.specs),
                lambda: self.specs.write(bit_dir, self.specs_file, force),
            ),
            (
                lambda: is_present(self.misc),
                lambda: self.misc.write(bit_dir, self.misc_files, force),
            ),
            (
                lambda: is_present(self.dist),
                lambda: self.dist.write(bit_dir, self.impl_file, force),
            ),
            (lambda: with_bit_config, lambda: self.write_bit_config(bit_dir, force)),
            (
                lambda: is_present(self.license),
                lambda: self.license.write(bit_dir, force=force),
            ),
        ]

        try:
            for should_run, action in steps:
                if should_run():
                    action()
        except Exception:
            if created:
                shutil.rmtree(bit_dir, ignore_errors=True)
            raise

        logger.debug(f"Wrote {self!r} to {bit_dir}")
        return self

    # Orchestration

    async def build(
        self,
        scope: Scope,
        *,
        environment: bool = False,
        save: bool = False,
        consumer: Any = None,
        verbose: bool = False,
    ) -> str | None:
        """Compile the implementation with the component's compiler.

        Returns:
            The compiled code, or None when the component has no compiler.
        """
        if self.compiler_id is None:
            logger.debug(f"{self!r} has no compiler, skipping build")
            return None

        if environment:
            await scope.install_environment(
                ids=[self.compiler_id], consumer=consumer, verbose=verbose
            )

        compiler = await resolve(
            scope.load_environment(self.compiler_id, bare_scope=consumer is None)
        )
        compile_ = getattr(compiler, "compile", None)
        if not callable(compile_):
            raise InvalidCompilerInterface(self.compiler_id)

        code, mappings = compile_output(compile_(self.impl.src))
        self.dist = Dist(code, mappings)
        logger.info(f"Built {self!r} with {self.compiler_id}")

        if save:
            await scope.sources.update_dist(source=self)

        return code

    async def run_specs(
        self,
        scope: Scope,
        *,
        reject_on_failure: bool = False,
        consumer: Any = None,
        environment: bool = False,
        save: bool = False,
        verbose: bool = False,
        runner: SpecsRunner | None = None,
    ) -> SpecsResults | None:
        """Compile impl and specs, run them with the tester and record the results.

        Returns:
            Specs results, or None when there is no tester or nothing to run.

        Raises:
            ComponentSpecsFailed: specs failed and reject_on_failure was set.
        """
        specs = self.specs
        if self.tester_id is None or specs is None or not specs.src:
            logger.debug(f"{self!r} has no tester or specs, skipping")
            return None

        if environment:
            ids = [bit_id for bit_id in (self.compiler_id, self.tester_id) if bit_id]
            await scope.install_environment(ids=ids, consumer=consumer, verbose=verbose)

        bare_scope = consumer is None
        tester_file_path = await resolve(
            scope.load_environment(self.tester_id, path_only=True, bare_scope=bare_scope)
        )
        compiler = None
        if self.compiler_id is not None:
            compiler = await resolve(
                scope.load_environment(self.compiler_id, bare_scope=bare_scope)
            )

        impl_src = _compile_if_needed(compiler, self.impl.src)
        specs_src = _compile_if_needed(compiler, specs.src)

        raw_results = await (runner or default_runner).run(
            scope=scope,
            tester_file_path=tester_file_path,
            impl_src=impl_src,
            specs_src=specs_src,
            tester_id=self.tester_id,
        )
        self.specs_results = SpecsResults.create_from_raw(raw_results)
        logger.info(
            f"Specs for {self!r} {'passed' if self.specs_results.pass_ else 'failed'}"
        )

        if reject_on_failure and not self.specs_results.pass_:
            raise ComponentSpecsFailed(self.specs_results)

        if save:
            await scope.sources.modify_specs_results(
                source=self, specs_results=self.specs_results
            )

        return self.specs_results

    # Object serialization

    def to_object(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "box": self.box,
            "version": str(self.version) if self.version is not None else None,
            "scope": self.scope,
            "implFile": self.impl_file,
            "specsFile": self.specs_file,
            "miscFiles": self.misc_files,
            "compilerId": str(self.compiler_id) if self.compiler_id else None,
            "testerId": str(self.tester_id) if self.tester_id else None,
            "dependencies": self.dependencies.to_plain_mapping(),
            "packageDependencies": self.package_dependencies,
            "specs": self.specs.serialize() if self.specs is not None else None,
            "impl": self.impl.serialize(),
            "misc": self.misc.serialize() if self.misc is not None else None,
            "docs": [doc.model_dump() for doc in self.docs],
            "dist": self.dist.serialize() if self.dist is not None else None,
            "specsResults": (
                self.specs_results.serialize() if self.specs_results is not None else None
            ),
            "license": self.license.serialize() if self.license is not None else None,
            "deprecate": str(self.deprecate) if self.deprecate else None,
        }

    def to_string(self) -> str:
        return json.dumps(self.to_object())

    @classmethod
    def from_object(cls, obj: dict[str, Any]) -> "Component":
        docs = obj.get("docs")
        return cls(
            name=obj["name"],
            box=obj["box"],
            version=_coerce_version(obj.get("version")),
            scope=obj.get("scope"),
            impl_file=obj.get("implFile"),
            specs_file=obj.get("specsFile"),
            misc_files=obj.get("miscFiles"),
            compiler_id=BitId.parse_plugin(obj.get("compilerId")),
            tester_id=BitId.parse_plugin(obj.get("testerId")),
            dependencies=BitIds.from_plain_mapping(obj.get("dependencies")),
            package_dependencies=obj.get("packageDependencies"),
            impl=Impl.deserialize(obj["impl"]),
            specs=Specs.deserialize(obj["specs"]) if obj.get("specs") is not None else None,
            misc=Misc.deserialize(obj["misc"]) if obj.get("misc") is not None else None,
            docs=[Doclet.model_validate(doc) for doc in docs] if docs is not None else None,
            dist=Dist.deserialize(obj["dist"]) if obj.get("dist") else None,
            specs_results=(
                SpecsResults.deserialize(obj["specsResults"])
                if obj.get("specsResults")
                else None
            ),
            license=License.deserialize(obj["license"]) if obj.get("license") else None,
            deprecate=obj.get("deprecate"),
        )

    @classmethod
    def from_string(cls, text: str) -> "Component":
        return cls.from_object(json.loads(text))

    # Construction

    @classmethod
    async def create(
        cls,
        name: str,
        box: str,
        consumer_config: ConsumerBitConfig,
        *,
        scope_name: str | None = None,
        with_specs: bool = False,
        scope: Scope | None = None,
    ) -> "Component":
        """Scaffold a new component from the workspace defaults.

        Plugins that offer `get_template(name)` provide the starter sources.
        """
        compiler_id = consumer_config.compiler_id
        tester_id = consumer_config.tester_id
        impl = await Impl.create(name, compiler_id, scope)
        specs = await Specs.create(name, tester_id, scope) if with_specs else None

        return cls(
            name=name,
            box=box,
            version=DEFAULT_BIT_VERSION,
            scope=scope_name,
            impl_file=consumer_config.impl_file,
            specs_file=consumer_config.spec_file,
            misc_files=consumer_config.misc_files,
            compiler_id=compiler_id,
            tester_id=tester_id,
            impl=impl,
            specs=specs,
        )

    @classmethod
    def load_from_inline(
        cls, bit_dir: PathLike, consumer_config: ConsumerBitConfig | None = None
    ) -> "Component":
        """Load a component from a working directory (box/name layout)."""
        bit_dir = Path(bit_dir)
        if not bit_dir.is_dir():
            raise ComponentNotFoundInline(str(bit_dir))

        config = load_bit_config(bit_dir, consumer_config)
        specs_path = bit_dir / config.spec_file

        return cls(
            name=bit_dir.name,
            box=bit_dir.parent.name,
            version=config.version,
            scope=config.scope,
            impl_file=config.impl_file,
            specs_file=config.spec_file,
            misc_files=config.misc_files,
            compiler_id=config.compiler_id,
            tester_id=config.tester_id,
            dependencies=config.dependency_ids,
            package_dependencies=config.package_dependencies,
            impl=bit_dir / config.impl_file,
            specs=specs_path if specs_path.exists() else None,
            misc=[bit_dir / misc_file for misc_file in config.misc_files],
        )
