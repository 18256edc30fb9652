# cubecore

Building blocks for a voxel game engine, in plain Python with no
third-party dependencies:

- `cubecore.context` – values paired with a local context (`WithLocalCx`,
  `with_context`) and lookup of context data by key through a
  `ContextTable` and a `DynamicContext`; a missing key raises
  `ContextNotFoundError`.
- `cubecore.input` – player movement input (`Input`, `KeyboardInput`,
  `movement_modifier`, `CursorMovement`).
- `cubecore.callbacks` – slider callbacks for integer options
  (`ValidatingIntSliderCallbacks`, `SuppliableIntCallbacks`, and
  `ModifiedSliderCallbacks` made by `with_modifier`).
- `cubecore.block` and `cubecore.fluid` – block and fluid settings, raw
  blocks and fluids, and block and fluid states.
- `cubecore.component` – typed component types with packet and serde
  codecs, a `ComponentRegistry`, and `write_varint` / `read_varint`.
- `cubecore.changes` – `ComponentChanges`: additions, modifications and
  removals of components.
- `cubecore.map` – `ComponentMap`, either simple or patched over a base map.
- `cubecore.serial` – component maps and changes to plain data
  (`serialize_map`, `deserialize_map`, `serialize_changes`,
  `deserialize_changes`) and to packet bytes (`encode_changes`,
  `decode_changes`).

## Installing

```
pip install .
```

## A short tour

### Components

```python
from cubecore.component import (
    ComponentRegistry, ComponentType, PacketCodec, SerdeCodec,
    read_varint, write_varint,
)
from cubecore.map import ComponentMap
from cubecore.serial import decode_changes, encode_changes, serialize_map

registry = ComponentRegistry()
durability = registry.register(
    "game:durability",
    ComponentType.builder(int)
    .packet_codec(PacketCodec(
        encode=lambda value, buf, cx: write_varint(buf, value),
        decode=lambda stream, cx: read_varint(stream),
    ))
    .serde_codec(SerdeCodec(
        serialize=lambda value, cx: value,
        deserialize=lambda data, cx: int(data),
    ))
    .build(),
)

builder = ComponentMap.builder()
builder.insert(durability, 100)
defaults = builder.build()

components = ComponentMap.patched(defaults)
components.insert(durability, 80)
assert components.get(durability) == 80
assert defaults.get(durability) == 100
assert len(components.changes()) == 1

assert serialize_map(components) == {"game:durability": 80}

data = encode_changes(components.changes())
assert decode_changes(data, registry)[durability] == 80
```

A component type without a serde codec is transient: serialization skips
it, and deserializing it raises `ValueError`. Building a component type
without a packet codec raises `ValueError`. Inserting a value of the wrong
type raises `TypeError`.

In serialized changes, a removed component is written under its identifier
prefixed with `!`.

### Dynamic contexts

```python
from cubecore.context import ContextTable, DynamicContext

table = ContextTable()
table.enable("message", lambda cx: cx["message"])
dyn = DynamicContext({"message": 114}, table)
assert dyn.acquire("message") == 114
```

### Input and sliders

```python
from cubecore.input import KeyboardInput, movement_modifier
from cubecore.callbacks import ValidatingIntSliderCallbacks

assert movement_modifier(True, False) == 1.0

keys = KeyboardInput(movement_forward=1.0)
keys.tick(0.5)
assert keys.movement_input() == (0.0, 0.0)

slider = ValidatingIntSliderCallbacks(min=0, max=10)
assert slider.to_slider_progress(5) == 0.5
assert slider.validate(11) is None
```

## What the package does not do

It is a library only: there is no command to run, no game loop, no
rendering and no storage. It has no item or item-stack types and no
enumerations of game options. Serialization produces plain Python data
(dictionaries, numbers, strings) and packet bytes; it does not read or
write any particular file format of its own.

## Running the tests

```
pip install .[test]
pytest
```