"""Component types, their codecs and the registry that gives them identifiers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    Any,
    BinaryIO,
    Callable,
    Dict,
    Generic,
    Hashable,
    Iterator,
    List,
    Optional,
    Tuple,
    Type,
    TypeVar,
)

T = TypeVar("T")

ComponentKey = Tuple[type, bool]
"""Identity of a component type inside maps: its value type and whether it is transient."""

_MAX_U32 = 0xFFFFFFFF


@dataclass(frozen=True)
class PacketCodec:
    """Encodes component values into packets and decodes them back.

    ``encode(value, buf, cx)`` appends the value to a ``bytearray``;
    ``decode(stream, cx)`` reads a value from a binary stream.
    """

    encode: Callable[[Any, bytearray, Any], None]
    decode: Callable[[BinaryIO, Any], Any]


@dataclass(frozen=True)
class SerdeCodec:
    """Converts component values to plain data and back.

    ``serialize(value, cx)`` returns plain data; ``deserialize(data, cx)``
    rebuilds the value.
    """

    serialize: Callable[[Any, Any], Any]
    deserialize: Callable[[Any, Any], Any]


class TypeBuilder(Generic[T]):
    """Builds a :class:`ComponentType` from its codecs."""

    def __init__(
        self,
        value_type: Type[T],
        serde_codec: Optional[SerdeCodec] = None,
        packet_codec: Optional[PacketCodec] = None,
    ) -> None:
        self.value_type = value_type
        self._serde_codec = serde_codec
        self._packet_codec = packet_codec

    def serde_codec(self, codec: SerdeCodec) -> "TypeBuilder[T]":
        """Return a builder that also uses ``codec`` for serialization."""
        return TypeBuilder(self.value_type, codec, self._packet_codec)

    def packet_codec(self, codec: PacketCodec) -> "TypeBuilder[T]":
        """Return a builder that also uses ``codec`` for packets."""
        return TypeBuilder(self.value_type, self._serde_codec, codec)

    def build(self) -> "ComponentType[T]":
        """Build the component type; raises ``ValueError`` without a packet codec."""
        if self._packet_codec is None:
            raise ValueError("packet codec is required")
        return ComponentType(self.value_type, self._packet_codec, self._serde_codec)

    def __repr__(self) -> str:
        return f"TypeBuilder({self.value_type.__qualname__})"


@dataclass(frozen=True)
class ComponentType(Generic[T]):
    """Type of a component value.

    A component type without a serde codec is transient: it is never
    written when components are serialized.
    """

    value_type: Type[T]
    packet_codec: PacketCodec
    serde_codec: Optional[SerdeCodec] = None

    @classmethod
    def builder(cls, value_type: Type[T]) -> TypeBuilder[T]:
        """Start building a component type for values of ``value_type``."""
        return TypeBuilder(value_type)

    def is_transient(self) -> bool:
        """Whether values of this type are skipped by serialization."""
        return self.serde_codec is None

    @property
    def key(self) -> ComponentKey:
        return (self.value_type, self.is_transient())

    def check_value(self, value: Any) -> Any:
        """Return ``value``, raising ``TypeError`` if it is not of this type's value type."""
        if not isinstance(value, self.value_type):
            raise TypeError(
                f"the type {type(value).__qualname__} does not match the component type "
                f"{self.value_type.__qualname__}"
            )
        return value


@dataclass(frozen=True, eq=False)
class ErasedComponentType:
    """A component type registered under an identifier and a raw numeric id."""

    id: Hashable
    raw_id: int
    component_type: ComponentType[Any]

    @property
    def value_type(self) -> type:
        return self.component_type.value_type

    @property
    def packet_codec(self) -> PacketCodec:
        return self.component_type.packet_codec

    @property
    def serde_codec(self) -> Optional[SerdeCodec]:
        return self.component_type.serde_codec

    @property
    def key(self) -> ComponentKey:
        return self.component_type.key

    def is_transient(self) -> bool:
        """Whether values of this type are skipped by serialization."""
        return self.component_type.is_transient()

    def check_value(self, value: Any) -> Any:
        """Return ``value``, raising ``TypeError`` if it does not fit this type."""
        return self.component_type.check_value(value)

    def downcast(self, value_type: Type[T]) -> Optional[ComponentType[T]]:
        """The typed component type if it holds values of ``value_type``, else ``None``."""
        if self.component_type.value_type is value_type:
            return self.component_type
        return None

    def __str__(self) -> str:
        return str(self.id)

    def __repr__(self) -> str:
        return f"ErasedComponentType({self.id!r})"


class ComponentRegistry:
    """Registry of component types, addressable by identifier and by raw id."""

    def __init__(self) -> None:
        self._entries: List[ErasedComponentType] = []
        self._by_id: Dict[Hashable, ErasedComponentType] = {}

    def register(self, id: Hashable, component_type: ComponentType[Any]) -> ErasedComponentType:
        """Register ``component_type`` under ``id``; raises ``ValueError`` on a duplicate id."""
        if id in self._by_id:
            raise ValueError(f"component type {id} is already registered")
        entry = ErasedComponentType(id, len(self._entries), component_type)
        self._entries.append(entry)
        self._by_id[id] = entry
        return entry

    def get(self, id: Hashable) -> Optional[ErasedComponentType]:
        """The registration under ``id``, or ``None``."""
        return self._by_id.get(id)

    def by_raw_id(self, raw_id: int) -> Optional[ErasedComponentType]:
        """The registration with raw id ``raw_id``, or ``None``."""
        if 0 <= raw_id < len(self._entries):
            return self._entries[raw_id]
        return None

    def __contains__(self, id: object) -> bool:
        return id in self._by_id

    def __iter__(self) -> Iterator[ErasedComponentType]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ComponentRegistry({[entry.id for entry in self._entries]!r})"


def write_varint(buf: bytearray, value: int) -> None:
    """Append ``value`` as an unsigned 32-bit variable-length integer."""
    if not 0 <= value <= _MAX_U32:
        raise ValueError(f"varint value out of range: {value}")
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            buf.append(byte | 0x80)
        else:
            buf.append(byte)
            return


def read_varint(stream: BinaryIO) -> int:
    """Read an unsigned 32-bit variable-length integer from ``stream``."""
    result = 0
    for shift in range(0, 35, 7):
        chunk = stream.read(1)
        if not chunk:
            raise EOFError("unexpected end of data while reading a varint")
        byte = chunk[0]
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            if result > _MAX_U32:
                raise ValueError("varint does not fit in 32 bits")
            return result
    raise ValueError("varint is too long")