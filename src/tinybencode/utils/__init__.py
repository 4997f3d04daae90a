"""
The MIT License

Copyright (c) 2014 Fred Stober

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

from typing import Union

from tinybencode.bencode import decode_one
from tinybencode.values import ByteString, Dictionary, Integer, List, Value

Native = Union[int, bytes, list, dict]


def to_value(x) -> Value:
    """Build a value tree from plain Python objects.

    Strings are stored as their UTF-8 encoding, tuples become lists.
    """
    t = type(x)
    if isinstance(x, Value):
        return x
    elif t == str:
        return ByteString(x.encode())
    elif t in (bytes, bytearray, memoryview):
        return ByteString(x)
    elif t == int:
        return Integer(x)
    elif t == dict:
        return Dictionary((k, to_value(v)) for k, v in x.items())
    elif t in (list, tuple):
        return List(to_value(item) for item in x)
    raise TypeError("cannot convert %r to a bencode value" % t.__name__)


def to_python(value: Value) -> Native:
    t = type(value)
    if t == Integer:
        return value.value
    elif t == ByteString:
        return value.value
    elif t == List:
        return [to_python(item) for item in value]
    elif t == Dictionary:
        return {k.value: to_python(v) for k, v in value.items()}
    raise TypeError("not a bencode value: %r" % t.__name__)


def read_file(path, user_setup={}) -> Value:
    with open(path, "rb") as f:
        data = f.read()
    return decode_one(data, user_setup)
