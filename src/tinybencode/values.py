"""
In-memory representation of bencoded data.

The four variants below are the only kinds of values the format knows about.
They are immutable once constructed. A ByteString always holds its own copy
of the bytes, so a decoded tree never keeps the input buffer alive.
"""

from typing import Iterable, Tuple

from tinybencode.exception import KeyNotFound
from tinybencode.numerals import int_to_digits

printable_min = 32
printable_max = 126
placeholder = "."


class Value(object):
    __slots__ = ()

    def __init_subclass__(cls, **kwargs):
        if cls.__module__ != __name__:
            raise TypeError("%s cannot be extended" % Value.__name__)
        super().__init_subclass__(**kwargs)

    def __setattr__(self, name, value):
        raise AttributeError("%s is immutable" % self.__class__.__name__)

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return type(self) is type(other) and self._key() == other._key()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self.__class__.__name__, self._key()))

    def _key(self):
        raise NotImplementedError

    def encode(self) -> bytes:
        from tinybencode.bencode import encode

        return encode(self)


class Integer(Value):
    __slots__ = ("_value",)

    def __init__(self, value: int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError("Integer expects an int, got %r" % type(value).__name__)
        object.__setattr__(self, "_value", value)

    @property
    def value(self) -> int:
        return self._value

    def _key(self):
        return self._value

    def __int__(self):
        return self._value

    def __str__(self):
        return int_to_digits(self._value).decode()

    def __repr__(self):
        return "Integer(%s)" % self


class ByteString(Value):
    __slots__ = ("_value",)

    def __init__(self, value=b""):
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError(
                "ByteString expects bytes, got %r" % type(value).__name__
            )
        object.__setattr__(self, "_value", bytes(value))

    @property
    def value(self) -> bytes:
        return self._value

    def _key(self):
        return self._value

    def __len__(self):
        return len(self._value)

    def __bytes__(self):
        return self._value

    def __str__(self):
        return "".join(
            chr(c) if printable_min <= c <= printable_max else placeholder
            for c in self._value
        )

    def __repr__(self):
        return "ByteString(%r)" % self._value


class List(Value):
    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Value] = ()):
        items = tuple(items)
        for item in items:
            if not isinstance(item, Value):
                raise TypeError(
                    "List elements must be values, got %r" % type(item).__name__
                )
        object.__setattr__(self, "_items", items)

    @property
    def value(self) -> Tuple[Value, ...]:
        return self._items

    def _key(self):
        return self._items

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def __getitem__(self, index):
        return self._items[index]

    def __str__(self):
        return "[\n" + "".join("%s\n" % item for item in self._items) + "]"

    def __repr__(self):
        return "List([%s])" % ", ".join(repr(item) for item in self._items)


def key_bytes(key) -> bytes:
    """Return the raw bytes used to look up ``key`` in a Dictionary"""
    if isinstance(key, ByteString):
        return key.value
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    if isinstance(key, str):
        return key.encode()
    raise TypeError("invalid dictionary key type %r" % type(key).__name__)


class Dictionary(Value):
    """Mapping from byte string keys to values.

    The pairs keep the order they were given in; ``encode`` sorts them.
    Lookups go through an index keyed by the raw key bytes.
    """

    __slots__ = ("_pairs", "_index")

    def __init__(self, pairs=()):
        if hasattr(pairs, "items"):
            pairs = pairs.items()
        result = []
        index = {}
        for key, value in pairs:
            if not isinstance(key, ByteString):
                key = ByteString(key_bytes(key))
            if not isinstance(value, Value):
                raise TypeError(
                    "Dictionary values must be values, got %r" % type(value).__name__
                )
            if key.value in index:
                raise ValueError("duplicate dictionary key %r" % key.value)
            index[key.value] = value
            result.append((key, value))
        object.__setattr__(self, "_pairs", tuple(result))
        object.__setattr__(self, "_index", index)

    @property
    def value(self) -> Tuple[Tuple[ByteString, Value], ...]:
        return self._pairs

    def _key(self):
        return frozenset(self._index.items())

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return type(other) is Dictionary and self._index == other._index

    def __hash__(self):
        return hash((self.__class__.__name__, self._key()))

    def get(self, key) -> Value:
        """Return the value stored under ``key``.

        Unlike dict.get there is no default: a missing key raises KeyNotFound,
        which is also a KeyError.
        """
        try:
            return self._index[key_bytes(key)]
        except KeyError:
            raise KeyNotFound(
                "key %r not present in dictionary" % key_bytes(key)
            ) from None

    __getitem__ = get

    def __contains__(self, key):
        try:
            return key_bytes(key) in self._index
        except TypeError:
            return False

    def __len__(self):
        return len(self._pairs)

    def __iter__(self):
        return (key for key, _ in self._pairs)

    def keys(self):
        return [key for key, _ in self._pairs]

    def values(self):
        return [value for _, value in self._pairs]

    def items(self):
        return list(self._pairs)

    def __str__(self):
        return (
            "{\n"
            + "".join("%s => %s\n" % (key, value) for key, value in self._pairs)
            + "}"
        )

    def __repr__(self):
        return "Dictionary([%s])" % ", ".join(
            "(%r, %r)" % pair for pair in self._pairs
        )
