"""Run a tester plugin against compiled component sources."""

from __future__ import annotations

import asyncio
import json
import logging
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from .constants import DEFAULT_IMPL_NAME, DEFAULT_SPECS_NAME
from .exceptions import SpecsRunnerError

if TYPE_CHECKING:
    from .models.bit_id import BitId
    from .scope import Scope

logger = logging.getLogger(__name__)


def _absolute_tester_path(tester_file_path: str) -> str:
    """Resolve a relative tester path against the current directory, not the run's temp dir."""
    path = Path(tester_file_path)
    if not path.is_absolute() and path.exists():
        return str(path.resolve())
    return str(tester_file_path)


class SpecsRunner(Protocol):
    """Executes specs and returns the tester's raw results."""

    async def run(
        self,
        *,
        scope: Scope,
        tester_file_path: str,
        impl_src: str,
        specs_src: str,
        tester_id: BitId,
    ) -> dict[str, Any]: ...


class SubprocessSpecsRunner:
    """Run the tester as a child process.

    The tester is called with the implementation and specs file paths and
    must print its raw results as JSON on stdout:

        {"tests": [{"title": ..., "pass": ..., "err": ...}],
         "stats": {"start": ..., "end": ...}, "failures": [...]}
    """

    def __init__(self, timeout: float = 120, python: str | None = None):
        self._timeout = timeout
        self._python = python or sys.executable

    def _command(self, tester_file_path: str, impl_path: Path, specs_path: Path) -> list[str]:
        command = [str(tester_file_path), str(impl_path), str(specs_path)]
        if str(tester_file_path).endswith(".py"):
            command.insert(0, self._python)
        return command

    def _execute(self, command: list[str], cwd: str) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                cwd=cwd,
            )
        except subprocess.TimeoutExpired as e:
            raise SpecsRunnerError(f"Timeout running tester {command[0]}") from e
        except FileNotFoundError as e:
            raise SpecsRunnerError(f"Tester not found: {command[0]}") from e

    async def run(
        self,
        *,
        scope: Scope,
        tester_file_path: str,
        impl_src: str,
        specs_src: str,
        tester_id: BitId,
    ) -> dict[str, Any]:
        with tempfile.TemporaryDirectory(prefix="bitpm-specs-") as tmp_dir:
            impl_path = Path(tmp_dir) / DEFAULT_IMPL_NAME
            specs_path = Path(tmp_dir) / DEFAULT_SPECS_NAME
            impl_path.write_text(impl_src, encoding="utf-8")
            specs_path.write_text(specs_src, encoding="utf-8")

            command = self._command(
                _absolute_tester_path(tester_file_path), impl_path, specs_path
            )
            logger.debug(f"Running specs with {tester_id}: {command}")
            result = await asyncio.to_thread(self._execute, command, tmp_dir)

        try:
            raw = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise SpecsRunnerError(
                f"Tester {tester_id} exited with {result.returncode} "
                f"without readable results: {result.stderr.strip()}"
            ) from e

        if not isinstance(raw, dict):
            raise SpecsRunnerError(f"Tester {tester_id} returned {type(raw).__name__}, expected an object")
        return raw


default_runner = SubprocessSpecsRunner()
