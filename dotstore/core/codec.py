"""Document serialization.

Documents are stored as canonical JSON in UTF-8: map keys sorted, no
insignificant whitespace, NaN and Infinity rejected. The same document
always encodes to the same bytes.

Decoding supports two policies:
    - AS_MAP: maps come back as dicts, in stored key order
    - AS_STRUCT: the decoded value is validated into a caller-supplied
      shape (dataclass, TypedDict, pydantic model, ...) with pydantic
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter, ValidationError

from dotstore.core.exceptions import CorruptDataError, InvalidDocumentError
from dotstore.core.models import DecodePolicy, Document, DocumentKind, kind_of


def validate_document(value: object) -> None:
    """Raise InvalidDocumentError unless value is a document all the way down."""
    _validate(value, set())


def _validate(node: object, ancestors: set[int]) -> None:
    kind = kind_of(node)
    if not kind.is_container:
        return
    if id(node) in ancestors:
        raise InvalidDocumentError("Document contains a reference cycle")
    ancestors.add(id(node))
    if kind is DocumentKind.ARRAY:
        for child in node:  # type: ignore[union-attr]
            _validate(child, ancestors)
    else:
        for key, child in node.items():  # type: ignore[union-attr]
            if not isinstance(key, str):
                raise InvalidDocumentError(
                    f"Map key {key!r} is a {type(key).__name__}, expected str"
                )
            _validate(child, ancestors)
    ancestors.discard(id(node))


def encode(document: Document) -> bytes:
    """Serialize a document to bytes."""
    validate_document(document)
    text = json.dumps(
        document,
        ensure_ascii=False,
        separators=(",", ":"),
        sort_keys=True,
        allow_nan=False,
    )
    return text.encode("utf-8")


def decode(
    data: bytes,
    policy: DecodePolicy = DecodePolicy.AS_MAP,
    shape: Any = None,
) -> Any:
    """Deserialize bytes produced by encode().

    With AS_STRUCT, ``shape`` is required and the result is an instance of it.
    """
    if policy is DecodePolicy.AS_STRUCT and shape is None:
        raise ValueError("AS_STRUCT decoding requires a target shape")

    try:
        text = bytes(data).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CorruptDataError(f"Stored value is not valid UTF-8: {exc}") from exc

    try:
        document = json.loads(
            text,
            object_pairs_hook=_unique_pairs,
            parse_constant=_reject_constant,
        )
    except json.JSONDecodeError as exc:
        raise CorruptDataError(f"Stored value is not valid JSON: {exc}") from exc

    if policy is DecodePolicy.AS_STRUCT:
        return to_struct(document, shape)
    return document


def to_struct(document: Document, shape: Any) -> Any:
    """Validate an already decoded document into ``shape``."""
    try:
        return _adapter_for(shape).validate_python(document)
    except ValidationError as exc:
        raise CorruptDataError(
            f"Stored value does not fit {getattr(shape, '__name__', shape)!s}: {exc}"
        ) from exc


@lru_cache(maxsize=128)
def _adapter_for(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


def _unique_pairs(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise CorruptDataError(f"Duplicate map key '{key}' in stored value")
        result[key] = value
    return result


def _reject_constant(name: str) -> None:
    raise CorruptDataError(f"Non-standard JSON constant '{name}' in stored value")
