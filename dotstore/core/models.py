"""Data models for dotstore."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Literal, TypeAlias, Union

from dotstore.core.exceptions import InvalidDocumentError

Document: TypeAlias = Union[
    None, bool, int, float, str, list["Document"], dict[str, "Document"]
]


class DocumentKind(Enum):
    """Tags for the variants a document node can take."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    MAP = "map"

    @property
    def is_container(self) -> bool:
        return self in (DocumentKind.ARRAY, DocumentKind.MAP)


def kind_of(value: object) -> DocumentKind:
    """Classify a single node. Children are not inspected."""
    if value is None:
        return DocumentKind.NULL
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return DocumentKind.BOOL
    if isinstance(value, int):
        return DocumentKind.NUMBER
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidDocumentError(f"Non-finite number {value!r} is not a document")
        return DocumentKind.NUMBER
    if isinstance(value, str):
        return DocumentKind.STRING
    if isinstance(value, list):
        return DocumentKind.ARRAY
    if isinstance(value, dict):
        return DocumentKind.MAP
    raise InvalidDocumentError(f"Value of type {type(value).__name__} is not a document")


class Absent(Enum):
    """Marker for "nothing stored here", distinct from a stored null."""

    ABSENT = "absent"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT: Literal[Absent.ABSENT] = Absent.ABSENT


class DecodePolicy(Enum):
    """How maps are materialized when a document is read back."""

    AS_MAP = "map"
    AS_STRUCT = "struct"


@dataclass(frozen=True)
class KeyPath:
    """A parsed dot-delimited key."""

    segments: tuple[str, ...]

    @property
    def root(self) -> str:
        """First segment: names the partition and the record key."""
        return self.segments[0]

    @property
    def sub_path(self) -> tuple[str, ...]:
        """Segments addressing a node inside the root record."""
        return self.segments[1:]

    def __str__(self) -> str:
        return ".".join(self.segments)

    def __len__(self) -> int:
        return len(self.segments)
