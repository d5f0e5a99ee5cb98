"""Component identity and identity sets."""

from __future__ import annotations

import re
from typing import Any, Iterable, Iterator

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..constants import DEFAULT_BOX_NAME, NO_PLUGIN_TYPE
from ..exceptions import InvalidBitId

_SEGMENT_RE = re.compile(r"^[A-Za-z0-9_.\-]+\Z")
VERSION_DELIMITER = "@"
ID_DELIMITER = "/"


class BitId(BaseModel):
    """Reference to a component version (scope/box/name@version format)."""

    model_config = ConfigDict(frozen=True)

    scope: str | None = None
    box: str = DEFAULT_BOX_NAME
    name: str
    version: str | None = None

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raw = ID_DELIMITER.join(
                str(data[key]) for key in ("scope", "box", "name") if data.get(key)
            )
            if data.get("version") is not None:
                raw = f"{raw}{VERSION_DELIMITER}{data['version']}"
            raise InvalidBitId(raw) from e

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)

    @field_validator("scope", "box", "name", "version")
    @classmethod
    def _check_segment(cls, value: str | None) -> str | None:
        if value is not None and not _SEGMENT_RE.match(value):
            raise ValueError(f"invalid id segment: {value!r}")
        return value

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"BitId({self.to_string()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitId):
            return NotImplemented
        return self.to_string() == other.to_string()

    def __hash__(self) -> int:
        return hash(self.to_string())

    def to_string(self) -> str:
        """Convert to canonical id string."""
        parts = [self.box, self.name]
        if self.scope:
            parts.insert(0, self.scope)
        canonical = ID_DELIMITER.join(parts)
        if self.version:
            canonical = f"{canonical}{VERSION_DELIMITER}{self.version}"
        return canonical

    def without_version(self) -> "BitId":
        return BitId(scope=self.scope, box=self.box, name=self.name)

    @classmethod
    def parse(cls, id_str: str) -> "BitId":
        """Parse canonical id string.

        Formats:
        - scope/box/name@version
        - box/name@version
        - name (uses the default box)
        The version suffix is optional in every format.
        """
        if not isinstance(id_str, str) or not id_str.strip():
            raise InvalidBitId(str(id_str))

        text = id_str.strip()
        version = None
        if VERSION_DELIMITER in text:
            text, version = text.rsplit(VERSION_DELIMITER, 1)
            if not _SEGMENT_RE.match(version):
                raise InvalidBitId(id_str)

        parts = text.split(ID_DELIMITER)
        if any(not _SEGMENT_RE.match(part) for part in parts):
            raise InvalidBitId(id_str)

        if len(parts) == 3:
            scope, box, name = parts
        elif len(parts) == 2:
            scope = None
            box, name = parts
        elif len(parts) == 1:
            scope = None
            box = DEFAULT_BOX_NAME
            name = parts[0]
        else:
            raise InvalidBitId(id_str)

        return cls(scope=scope, box=box, name=name, version=version)

    @classmethod
    def parse_plugin(cls, value: str | None) -> "BitId | None":
        """Parse a compiler/tester id, treating the no-plugin sentinel as absent."""
        if value is None or value == "" or value == NO_PLUGIN_TYPE:
            return None
        return cls.parse(value)


class BitIds:
    """Ordered set of component ids, unique by canonical string."""

    def __init__(self, ids: Iterable[BitId] | None = None):
        self._ids: dict[str, BitId] = {}
        for bit_id in ids or ():
            self.add(bit_id)

    def add(self, bit_id: BitId) -> None:
        key = bit_id.to_string()
        if key not in self._ids:
            self._ids[key] = bit_id

    def contains(self, bit_id: BitId) -> bool:
        return bit_id.to_string() in self._ids

    def __contains__(self, bit_id: object) -> bool:
        return isinstance(bit_id, BitId) and self.contains(bit_id)

    def __iter__(self) -> Iterator[BitId]:
        return iter(list(self._ids.values()))

    def __len__(self) -> int:
        return len(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitIds):
            return NotImplemented
        return list(self._ids) == list(other._ids)

    def __repr__(self) -> str:
        return f"BitIds({list(self._ids)!r})"

    def to_plain_mapping(self) -> dict[str, bool]:
        """Convert to a flat mapping for serialization."""
        return {key: True for key in self._ids}

    @classmethod
    def from_plain_mapping(
        cls, mapping: dict[str, Any] | list[str] | None
    ) -> "BitIds":
        """Rebuild from a mapping of id string -> truthy value (or a list of id strings)."""
        if not mapping:
            return cls()
        keys = mapping.keys() if isinstance(mapping, dict) else mapping
        return cls(BitId.parse(key) for key in keys)

