import io
import json
import struct
from dataclasses import dataclass

import pytest

from cubecore.component import (
    ComponentRegistry,
    ComponentType,
    PacketCodec,
    SerdeCodec,
    read_varint,
    write_varint,
)
from cubecore.map import ComponentMap
from cubecore.serial import (
    decode_changes,
    deserialize_changes,
    deserialize_map,
    encode_changes,
    serialize_changes,
    serialize_map,
)


@dataclass(frozen=True)
class Foo:
    value: int
    info: str


def _read_exact(stream, n):
    data = stream.read(n)
    if len(data) != n:
        raise EOFError("truncated")
    return data


def _edcode_encode(value, buf, cx):
    buf.extend(struct.pack(">i", value.value))
    raw = value.info.encode("utf-8")
    write_varint(buf, len(raw))
    buf.extend(raw)


def _edcode_decode(stream, cx):
    (value,) = struct.unpack(">i", _read_exact(stream, 4))
    length = read_varint(stream)
    return Foo(value, _read_exact(stream, length).decode("utf-8"))


def _blob_encode(value, buf, cx):
    raw = json.dumps({"value": value.value, "info": value.info}).encode("utf-8")
    write_varint(buf, len(raw))
    buf.extend(raw)


def _blob_decode(stream, cx):
    length = read_varint(stream)
    return Foo(**json.loads(_read_exact(stream, length)))


EDCODE = PacketCodec(_edcode_encode, _edcode_decode)
BLOB = PacketCodec(_blob_encode, _blob_decode)
SERDE = SerdeCodec(
    lambda v, cx: {"value": v.value, "info": v.info},
    lambda d, cx: Foo(d["value"], d["info"]),
)

TRANSIENT = ComponentType.builder(Foo).packet_codec(EDCODE).build()
PERSISTENT = ComponentType.builder(Foo).packet_codec(BLOB).serde_codec(SERDE).build()


@pytest.fixture
def registry():
    reg = ComponentRegistry()
    reg.register("test:foo_transient_edcode", TRANSIENT)
    reg.register("test:foo_persistent", PERSISTENT)
    return reg


@pytest.fixture
def base(registry):
    builder = ComponentMap.builder()
    builder.insert(registry.get("test:foo_transient_edcode"), Foo(114, "hello"))
    builder.insert(registry.get("test:foo_persistent"), Foo(514, "world"))
    return builder.build()


def test_map_serde(registry, base):
    data = serialize_map(base)
    assert data == {"test:foo_persistent": {"value": 514, "info": "world"}}
    restored = deserialize_map(json.loads(json.dumps(data)), registry)
    assert len(restored) == 1
    assert restored.get(PERSISTENT) == Foo(514, "world")
    assert restored.get(TRANSIENT) is None


def test_map_serde_empty(registry):
    restored = deserialize_map(serialize_map(ComponentMap()), registry)
    assert restored.is_empty()


def test_deserialize_map_unknown_type(registry):
    with pytest.raises(ValueError, match="unable to find"):
        deserialize_map({"test:missing": {}}, registry)


def test_deserialize_map_transient_type(registry):
    with pytest.raises(ValueError, match="transient"):
        deserialize_map({"test:foo_transient_edcode": {"value": 1, "info": "x"}}, registry)


def test_deserialize_map_not_a_mapping(registry):
    with pytest.raises(ValueError):
        deserialize_map([1, 2], registry)


def test_changes_serde_additions(registry, base):
    patched = ComponentMap.patched(base)
    assert patched.remove(TRANSIENT) is not None
    patched.insert(registry.get("test:foo_persistent"), Foo(1919, "wlg"))
    changes = patched.changes()

    data = serialize_changes(changes)
    assert data == {"test:foo_persistent": {"value": 1919, "info": "wlg"}}
    restored = deserialize_changes(json.loads(json.dumps(data)), registry)
    assert len(restored) == 1
    assert restored[PERSISTENT].value == 1919


def test_changes_serde_removals(registry, base):
    patched = ComponentMap.patched(base)
    assert patched.remove(PERSISTENT) is not None
    changes = patched.changes()

    data = serialize_changes(changes)
    assert data == {"!test:foo_persistent": 0}
    restored = deserialize_changes(data, registry)
    assert len(restored) == 1
    assert PERSISTENT in restored
    assert restored[PERSISTENT] is None


def test_deserialize_changes_transient_rejected(registry):
    with pytest.raises(ValueError, match="not serializable"):
        deserialize_changes({"!test:foo_transient_edcode": 0}, registry)


def test_deserialize_changes_unknown(registry):
    with pytest.raises(ValueError, match="unable to find"):
        deserialize_changes({"test:nope": 0}, registry)


def test_changes_edcode(registry, base):
    patched = ComponentMap.patched(base)
    assert patched.remove(TRANSIENT) is not None
    patched.insert(registry.get("test:foo_persistent"), Foo(1919, "wlg"))
    changes = patched.changes()

    data = encode_changes(changes)
    restored = decode_changes(data, registry)
    assert len(restored) == 2
    assert restored[TRANSIENT] is None
    assert restored[PERSISTENT].value == 1919
    assert restored[PERSISTENT].info == "wlg"


def test_encode_changes_layout(registry):
    builder = ComponentChangesBuilder = None  # noqa: F841
    from cubecore.changes import ComponentChanges

    b = ComponentChanges.builder()
    b.remove(registry.get("test:foo_persistent"))
    data = encode_changes(b.build())
    assert data == bytes([0, 1, 1])


def test_decode_changes_from_stream(registry, base):
    patched = ComponentMap.patched(base)
    patched.remove(PERSISTENT)
    stream = io.BytesIO(encode_changes(patched.changes()))
    restored = decode_changes(stream, registry)
    assert restored[PERSISTENT] is None
    assert len(restored) == 1


def test_decode_changes_unknown_raw_id(registry):
    with pytest.raises(ValueError, match="raw id 99"):
        decode_changes(bytes([0, 1, 99]), registry)


def test_decode_changes_truncated(registry, base):
    patched = ComponentMap.patched(base)
    patched.insert(registry.get("test:foo_persistent"), Foo(7, "seven"))
    data = encode_changes(patched.changes())
    with pytest.raises(EOFError):
        decode_changes(data[:-2], registry)


def test_context_reaches_codecs():
    seen = []
    codec = SerdeCodec(
        lambda v, cx: seen.append(cx) or v.value,
        lambda d, cx: seen.append(cx) or Foo(d, "from-cx"),
    )
    reg = ComponentRegistry()
    ty = reg.register("test:cx", ComponentType.builder(Foo).packet_codec(EDCODE).serde_codec(codec).build())
    builder = ComponentMap.builder()
    builder.insert(ty, Foo(3, "three"))
    data = serialize_map(builder.build(), cx="ctx")
    restored = deserialize_map(data, reg, cx="ctx")
    assert data == {"test:cx": 3}
    assert restored.get(ty) == Foo(3, "from-cx")
    assert seen == ["ctx", "ctx"]