"""Conversion of component maps and changes to plain data and to packet bytes."""

from __future__ import annotations

import io
from collections.abc import Mapping
from typing import Any, BinaryIO, Dict, List, Optional, Tuple, Union

from .changes import REMOVED_PREFIX, ComponentChanges
from .component import ComponentRegistry, ErasedComponentType, read_varint, write_varint
from .map import ComponentMap

_REMOVED_PLACEHOLDER = 0
"""Value written for removed entries; some formats cannot hold an empty value."""


def _resolve(registry: ComponentRegistry, text: Any) -> ErasedComponentType:
    entry = registry.get(text)
    if entry is None:
        entry = next((e for e in registry if str(e.id) == str(text)), None)
    if entry is None:
        raise ValueError(f"unable to find the component type {text}")
    return entry


def _expect_mapping(data: Any) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected a map, got {type(data).__qualname__}")
    return data


def serialize_map(component_map: ComponentMap, cx: Any = None) -> Dict[str, Any]:
    """Plain data for the persistent components of ``component_map``.

    Transient components are left out.
    """
    result: Dict[str, Any] = {}
    for ty, value in component_map:
        codec = ty.serde_codec
        if codec is not None:
            result[str(ty.id)] = codec.serialize(value, cx)
    return result


def deserialize_map(data: Any, registry: ComponentRegistry, cx: Any = None) -> ComponentMap:
    """Rebuild a simple component map from plain data.

    Raises ``ValueError`` for unknown or transient component types.
    """
    builder = ComponentMap.builder()
    for key, raw in _expect_mapping(data).items():
        ty = _resolve(registry, key)
        codec = ty.serde_codec
        if codec is None:
            raise ValueError(
                f"invalid type: transient component type {ty.id}, "
                "expected persistent component type"
            )
        builder.insert(ty, codec.deserialize(raw, cx))
    return builder.build()


def serialize_changes(changes: ComponentChanges, cx: Any = None) -> Dict[str, Any]:
    """Plain data for the persistent entries of ``changes``.

    Removed types are written with a ``!`` prefix and a placeholder value.
    """
    result: Dict[str, Any] = {}
    for ty, value in changes:
        if ty.is_transient():
            continue
        if value is None:
            result[f"{REMOVED_PREFIX}{ty.id}"] = _REMOVED_PLACEHOLDER
        else:
            codec = ty.serde_codec
            if codec is None:
                raise ValueError(f"missing serde codec for {ty.id}")
            result[str(ty.id)] = codec.serialize(value, cx)
    return result


def deserialize_changes(data: Any, registry: ComponentRegistry, cx: Any = None) -> ComponentChanges:
    """Rebuild component changes from plain data.

    Raises ``ValueError`` for unknown, malformed or transient component types.
    """
    entries: List[Tuple[ErasedComponentType, Optional[Any]]] = []
    for key, raw in _expect_mapping(data).items():
        if not isinstance(key, str):
            raise ValueError(f"invalid type: expected a string key, got {key!r}")
        removed = key.startswith(REMOVED_PREFIX)
        name = key[len(REMOVED_PREFIX):] if removed else key
        ty = _resolve(registry, name)
        if ty.is_transient():
            raise ValueError(f"the component type {ty.id} is not serializable")
        if removed:
            entries.append((ty, None))
        else:
            codec = ty.serde_codec
            assert codec is not None
            entries.append((ty, codec.deserialize(raw, cx)))
    return ComponentChanges(entries)


def encode_changes(changes: ComponentChanges, cx: Any = None) -> bytes:
    """Encode ``changes`` into packet bytes.

    The layout is the count of present entries, the count of removed entries,
    then each present entry (raw id and value) followed by each removed raw id.
    """
    entries = list(changes)
    present = [(ty, value) for ty, value in entries if value is not None]
    absent = [ty for ty, value in entries if value is None]
    buf = bytearray()
    write_varint(buf, len(present))
    write_varint(buf, len(absent))
    for ty, value in present:
        write_varint(buf, ty.raw_id)
        ty.packet_codec.encode(value, buf, cx)
    for ty in absent:
        write_varint(buf, ty.raw_id)
    return bytes(buf)


def _read_type(stream: BinaryIO, registry: ComponentRegistry) -> ErasedComponentType:
    raw_id = read_varint(stream)
    entry = registry.by_raw_id(raw_id)
    if entry is None:
        raise ValueError(f"unknown component type raw id {raw_id}")
    return entry


def decode_changes(
    data: Union[bytes, bytearray, memoryview, BinaryIO],
    registry: ComponentRegistry,
    cx: Any = None,
) -> ComponentChanges:
    """Decode changes written by :func:`encode_changes`.

    Raises ``EOFError`` on truncated data and ``ValueError`` on unknown raw ids.
    """
    stream: BinaryIO = io.BytesIO(bytes(data)) if isinstance(data, (bytes, bytearray, memoryview)) else data
    present = read_varint(stream)
    absent = read_varint(stream)
    entries: List[Tuple[ErasedComponentType, Optional[Any]]] = []
    for _ in range(present):
        ty = _read_type(stream, registry)
        entries.append((ty, ty.packet_codec.decode(stream, cx)))
    for _ in range(absent):
        entries.append((_read_type(stream, registry), None))
    return ComponentChanges(entries)