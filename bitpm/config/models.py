"""Configuration models for bitpm projects and components."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from ..constants import DEFAULT_IMPL_NAME, DEFAULT_SPECS_NAME, NO_PLUGIN_TYPE
from ..models.bit_id import BitId, BitIds


class ConsumerBitConfig(BaseModel):
    """Project-level defaults applied to every component in a workspace."""

    impl_file: str = Field(default=DEFAULT_IMPL_NAME, description="Implementation filename")
    spec_file: str = Field(default=DEFAULT_SPECS_NAME, description="Specs filename")
    misc_files: list[str] = Field(default_factory=list, description="Extra files to ship")
    compiler: str = Field(
        default=NO_PLUGIN_TYPE, description="Compiler component id, or 'none'"
    )
    tester: str = Field(default=NO_PLUGIN_TYPE, description="Tester component id, or 'none'")
    dependencies: dict[str, Any] = Field(default_factory=dict)
    package_dependencies: dict[str, str] = Field(default_factory=dict)

    @property
    def compiler_id(self) -> BitId | None:
        return BitId.parse_plugin(self.compiler)

    @property
    def tester_id(self) -> BitId | None:
        return BitId.parse_plugin(self.tester)

    @property
    def dependency_ids(self) -> BitIds:
        return BitIds.from_plain_mapping(self.dependencies)


class BitConfig(ConsumerBitConfig):
    """Component-level config stored next to a component's sources."""

    version: int | None = Field(default=None)
    scope: str | None = Field(default=None)
