"""
The MIT License

Copyright (c) 2015 Fred Stober

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
THE SOFTWARE.
"""

import logging
import re
import sys
from typing import Tuple

from tinybencode.exception import (
    DuplicateKey,
    InvalidFormat,
    InvalidLength,
    MalformedInteger,
    MissingData,
    MissingLengthSeparator,
    MissingTerminator,
    NestingTooDeep,
    NonByteStringKey,
    TrailingData,
    TruncatedData,
    TruncatedDictionary,
    TruncatedList,
    UnsortedKeys,
)
from tinybencode.numerals import digits_to_int, int_to_digits
from tinybencode.values import ByteString, Dictionary, Integer, List, Value


# Encoding functions ##############################################


def bencode_proc(result, x):
    t = type(x)
    if t == Integer:
        result.extend((b"i", int_to_digits(x.value), b"e"))
    elif t == ByteString:
        result.extend((str(len(x.value)).encode(), b":", x.value))
    elif t == List:
        result.append(b"l")
        for item in x:
            bencode_proc(result, item)
        result.append(b"e")
    elif t == Dictionary:
        result.append(b"d")
        for k, v in sorted(x.items(), key=lambda pair: pair[0].value):
            bencode_proc(result, k)
            bencode_proc(result, v)
        result.append(b"e")
    else:
        raise TypeError("cannot bencode object of type %r" % t.__name__)


def encode(value: Value) -> bytes:
    """Return the canonical encoding of ``value`` (dictionary keys sorted)"""
    result = []
    bencode_proc(result, value)
    return b"".join(result)


# Decoding functions ##############################################

bdecode_marker_int = ord("i")
bdecode_marker_str_min = ord("0")
bdecode_marker_str_max = ord("9")
bdecode_marker_list = ord("l")
bdecode_marker_dict = ord("d")
bdecode_marker_end = ord("e")

integer_pattern = re.compile(rb"-?[0-9]+")
canonical_integer_pattern = re.compile(rb"0|-?[1-9][0-9]*")
length_pattern = re.compile(rb"[0-9]+")
canonical_length_pattern = re.compile(rb"0|[1-9][0-9]*")

duplicate_key_policies = ("reject", "last")
non_key_markers = (bdecode_marker_int, bdecode_marker_list, bdecode_marker_dict)

default_max_depth = 200


def max_depth_limit():
    """Deepest nesting the decoder can follow within the recursion limit"""
    # two frames per level, a quarter of the stack left to the caller
    return sys.getrecursionlimit() // 4


class BDecoder(object):
    def __init__(self, user_setup={}):
        """Decoder configured by ``user_setup``:

        max_depth -- maximum nesting of lists and dictionaries
        strict -- reject integers, lengths and key orders that are not canonical
        duplicate_keys -- "reject" repeated dictionary keys, or keep the "last"
        """
        setup = {
            "max_depth": min(default_max_depth, max_depth_limit()),
            "strict": False,
            "duplicate_keys": "reject",
        }
        unknown = set(user_setup) - set(setup)
        if unknown:
            raise ValueError(
                "unknown decoder setting(s): %s" % ", ".join(sorted(unknown))
            )
        setup.update(user_setup)
        max_depth = setup["max_depth"]
        if (
            isinstance(max_depth, bool)
            or not isinstance(max_depth, int)
            or max_depth < 0
        ):
            raise ValueError("max_depth must be a non-negative integer: %r" % max_depth)
        if max_depth > max_depth_limit():
            raise ValueError(
                "max_depth %d exceeds the recursion limit bound %d"
                % (max_depth, max_depth_limit())
            )
        if setup["duplicate_keys"] not in duplicate_key_policies:
            raise ValueError(
                "duplicate_keys must be one of %s: %r"
                % (", ".join(duplicate_key_policies), setup["duplicate_keys"])
            )
        self._max_depth = max_depth
        self._strict = bool(setup["strict"])
        self._last_wins = setup["duplicate_keys"] == "last"
        self._log = logging.getLogger(self.__class__.__name__)

    def decode(self, buffer, offset=0) -> Tuple[Value, int]:
        """Decode the value starting at ``offset``.

        Returns the value and the offset of the first byte after it.
        """
        msg = self._prepare(buffer)
        if offset < 0:
            raise ValueError("offset must not be negative: %d" % offset)
        return self._decode_proc(msg, offset, 0)

    def decode_one(self, buffer) -> Value:
        result, _ = self.decode(buffer)
        return result

    def decode_exact(self, buffer) -> Value:
        msg = self._prepare(buffer)
        result, pos = self._decode_proc(msg, 0, 0)
        if pos != len(msg):
            raise self._error(
                TrailingData,
                "%d byte(s) of data after valid prefix" % (len(msg) - pos),
                pos,
            )
        return result

    @staticmethod
    def _prepare(buffer):
        if not isinstance(buffer, (bytes, bytearray, memoryview)):
            raise TypeError("can only decode bytes, got %r" % type(buffer).__name__)
        return bytes(buffer)

    def _error(self, error_class, message, pos):
        if self._log.isEnabledFor(logging.DEBUG):
            self._log.debug(
                "%s at offset %d: %s" % (error_class.__name__, pos, message)
            )
        return error_class(message, pos)

    def _decode_proc(self, msg, pos, depth):
        if pos >= len(msg):
            raise self._error(MissingData, "no data to decode", pos)
        t = msg[pos]
        if t == bdecode_marker_int:
            return self._decode_int(msg, pos)
        elif t >= bdecode_marker_str_min and t <= bdecode_marker_str_max:
            return self._decode_str(msg, pos)
        elif t == bdecode_marker_list:
            return self._decode_list(msg, pos, depth + 1)
        elif t == bdecode_marker_dict:
            return self._decode_dict(msg, pos, depth + 1)
        raise self._error(InvalidFormat, "invalid token %r" % bytes((t,)), pos)

    def _decode_int(self, msg, pos):
        start = pos + 1
        end = msg.find(b"e", start)
        if end < 0:
            raise self._error(MissingTerminator, "integer is not terminated", pos)
        body = msg[start:end]
        if not integer_pattern.fullmatch(body):
            raise self._error(MalformedInteger, "invalid integer %r" % body, pos)
        if self._strict and not canonical_integer_pattern.fullmatch(body):
            raise self._error(MalformedInteger, "non-canonical integer %r" % body, pos)
        return (Integer(digits_to_int(body)), end + 1)

    def _decode_str(self, msg, pos):
        sep = msg.find(b":", pos)
        if sep < 0:
            raise self._error(
                MissingLengthSeparator, "byte string length has no separator", pos
            )
        length = msg[pos:sep]
        if not length_pattern.fullmatch(length):
            raise self._error(InvalidLength, "invalid length %r" % length, pos)
        if self._strict and not canonical_length_pattern.fullmatch(length):
            raise self._error(InvalidLength, "non-canonical length %r" % length, pos)
        sep += 1
        significant = length.lstrip(b"0")
        if len(significant) > len(str(len(msg))):
            raise self._error(
                TruncatedData,
                "byte string length %d digit(s) long exceeds the buffer"
                % len(significant),
                pos,
            )
        n = int(significant or b"0")
        if sep + n > len(msg):
            raise self._error(
                TruncatedData,
                "byte string needs %d byte(s), %d available" % (n, len(msg) - sep),
                pos,
            )
        return (ByteString(msg[sep : sep + n]), sep + n)

    def _check_depth(self, pos, depth):
        if depth > self._max_depth:
            raise self._error(
                NestingTooDeep, "nesting exceeds %d level(s)" % self._max_depth, pos
            )

    def _decode_list(self, msg, pos, depth):
        self._check_depth(pos, depth)
        start = pos
        result = []
        pos += 1
        while True:
            if pos >= len(msg):
                raise self._error(TruncatedList, "list is not terminated", start)
            if msg[pos] == bdecode_marker_end:
                break
            v, pos = self._decode_proc(msg, pos, depth)
            result.append(v)
        return (List(result), pos + 1)

    def _decode_dict(self, msg, pos, depth):
        self._check_depth(pos, depth)
        start = pos
        # raw key -> (key, value), in order of first appearance
        result = {}
        last_key = None
        pos += 1
        while True:
            if pos >= len(msg):
                raise self._error(
                    TruncatedDictionary, "dictionary is not terminated", start
                )
            if msg[pos] == bdecode_marker_end:
                break
            if msg[pos] in non_key_markers:
                raise self._error(
                    NonByteStringKey, "dictionary key is not a byte string", pos
                )
            key_pos = pos
            k, pos = self._decode_proc(msg, pos, depth)
            if k.value in result and not self._last_wins:
                raise self._error(DuplicateKey, "duplicate key %r" % k.value, key_pos)
            if self._strict and last_key is not None and k.value <= last_key:
                raise self._error(
                    UnsortedKeys, "key %r is out of order" % k.value, key_pos
                )
            if pos >= len(msg) or msg[pos] == bdecode_marker_end:
                raise self._error(
                    TruncatedDictionary, "key %r has no value" % k.value, key_pos
                )
            v, pos = self._decode_proc(msg, pos, depth)
            if k.value in result:
                k = result[k.value][0]
            result[k.value] = (k, v)
            last_key = k.value
        return (Dictionary(result.values()), pos + 1)


def decode(buffer, offset=0, user_setup={}) -> Tuple[Value, int]:
    return BDecoder(user_setup).decode(buffer, offset)


def decode_one(buffer, user_setup={}) -> Value:
    """Decode the first value in ``buffer``, ignoring anything after it"""
    return BDecoder(user_setup).decode_one(buffer)


def decode_exact(buffer, user_setup={}) -> Value:
    """Decode ``buffer``, which must hold exactly one value"""
    return BDecoder(user_setup).decode_exact(buffer)


# Lookup ##########################################################


def get(dictionary: Dictionary, key) -> Value:
    """Return the value stored under ``key``; raises KeyNotFound on a miss"""
    if type(dictionary) != Dictionary:
        raise TypeError("expected a Dictionary, got %r" % type(dictionary).__name__)
    return dictionary.get(key)
