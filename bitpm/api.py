"""High-level component workflows: commit from a workspace, put into a scope."""

from __future__ import annotations

import base64
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .component import Component

if TYPE_CHECKING:
    from .config.models import ConsumerBitConfig
    from .scope import Scope
    from .specs_runner import SpecsRunner

logger = logging.getLogger(__name__)


def to_base64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def from_base64(text: str) -> str:
    return base64.b64decode(text.encode("ascii")).decode("utf-8")


def pack_components(components: list[Component]) -> str:
    """Encode components for transport to another scope."""
    return to_base64(json.dumps([c.to_object() for c in components]))


def unpack_components(component_objects: str) -> list[Component]:
    records = json.loads(from_base64(component_objects))
    if isinstance(records, dict):
        records = [records]
    return [Component.from_object(record) for record in records]


async def commit(
    bit_dir: Path | str,
    message: str,
    scope: Scope,
    consumer_config: ConsumerBitConfig | None = None,
    *,
    force: bool = False,
    verbose: bool = False,
    consumer: Any = None,
    runner: SpecsRunner | None = None,
) -> Component:
    """Build a workspace component, run its specs and put it into the scope.

    Args:
        message: Description of the change, stored with the component.
        force: Commit even when specs fail.

    Raises:
        ComponentSpecsFailed: specs failed and force was not set.
    """
    component = Component.load_from_inline(bit_dir, consumer_config)
    await component.build(scope, consumer=consumer, verbose=verbose)
    await component.run_specs(
        scope,
        reject_on_failure=not force,
        consumer=consumer,
        verbose=verbose,
        runner=runner,
    )
    await scope.put([component], message=message)
    logger.info(f"Committed {component.box}/{component.name}: {message}")
    return component


async def put(component_objects: str, scope: Scope) -> list[Component]:
    """Decode base64 component records and store them in the scope."""
    components = unpack_components(component_objects)
    await scope.put(components)
    logger.info(f"Put {len(components)} component(s) into scope")
    return components
