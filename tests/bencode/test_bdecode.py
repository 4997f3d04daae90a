import logging

from pytest import raises

from tinybencode.bencode import (
    BDecoder,
    decode,
    decode_exact,
    decode_one,
    max_depth_limit,
)
from tinybencode.exception import (
    DecodeError,
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
from tinybencode.values import ByteString, Dictionary, Integer, List


def test_int():
    assert decode_one(b"i1e") == Integer(1)
    assert decode_one(b"i-1e") == Integer(-1)
    assert decode_one(b"i0e") == Integer(0)
    assert decode_one(b"i12345e") == Integer(12345)


def test_big_int():
    assert decode_one(b"i123456789012345678901234567890e") == Integer(
        123456789012345678901234567890
    )
    assert decode_one(b"i-98765432109876543210e") == Integer(-98765432109876543210)


def test_string():
    assert decode_one(b"4:test") == ByteString(b"test")
    assert decode_one(b"1:e") == ByteString(b"e")
    assert decode_one(b"13:longer string") == ByteString(b"longer string")
    assert decode_one(b"4:\0\0\0\0") == ByteString(b"\0\0\0\0")


def test_empty_string():
    value, pos = decode(b"0:")
    assert value == ByteString(b"")
    assert value.value == b""
    assert pos == 2


def test_empty_list():
    assert decode(b"le") == (List(), 2)


def test_empty_dict():
    assert decode(b"de") == (Dictionary(), 2)


def test_nested():
    value, pos = decode(b"l3:abei43ee")
    assert value == List([ByteString(b"abe"), Integer(43)])
    assert pos == 11

    assert decode_one(b"l3:abeli10eei43ee") == List(
        [ByteString(b"abe"), List([Integer(10)]), Integer(43)]
    )
    assert decode_one(b"d3:abe2:efe") == Dictionary({b"abe": ByteString(b"ef")})


def test_dict_keeps_input_order():
    value = decode_one(b"d1:bi2e1:ai1ee")
    assert [k.value for k in value.keys()] == [b"b", b"a"]


def test_offset():
    msg = b"i1e4:spamli2ee"
    value, pos = decode(msg, 3)
    assert value == ByteString(b"spam")
    assert pos == 9
    value, pos = decode(msg, pos)
    assert value == List([Integer(2)])
    assert pos == len(msg)


def test_bytearray_and_memoryview():
    assert decode_one(bytearray(b"3:abc")) == ByteString(b"abc")
    assert decode_one(memoryview(b"xx3:abc")[2:]) == ByteString(b"abc")


def test_values_own_their_bytes():
    msg = bytearray(b"3:abc")
    value = decode_one(msg)
    msg[2:5] = b"xyz"
    assert value.value == b"abc"


def test_decode_one_ignores_trailing_data():
    assert decode_one(b"i1eGARBAGE") == Integer(1)


def test_decode_exact():
    assert decode_exact(b"l1:ae") == List([ByteString(b"a")])
    with raises(TrailingData) as e:
        decode_exact(b"4:too long")
    assert e.value.offset == 6


def test_missing_data():
    with raises(MissingData):
        decode(b"")
    with raises(MissingData):
        decode(b"i1e", 3)


def test_invalid_format():
    with raises(InvalidFormat) as e:
        decode(b"qqq not valid bencoded data")
    assert e.value.offset == 0
    with raises(InvalidFormat):
        decode(b"lxe")


def test_missing_terminator():
    with raises(MissingTerminator):
        decode(b"i10")
    with raises(MissingTerminator):
        decode(b"i")


def test_malformed_integer():
    for msg in (b"i^e", b"ie", b"i-e", b"i1-2e", b"i 1e", b"i+1e", b"i1_0e"):
        with raises(MalformedInteger):
            decode(msg)


def test_missing_length_separator():
    with raises(MissingLengthSeparator):
        decode(b"5abcde")


def test_invalid_length():
    with raises(InvalidLength):
        decode(b"5x:abcde")
    with raises(InvalidLength):
        decode(b"l1-:ae")


def test_truncated_data():
    with raises(TruncatedData):
        decode(b"5:ab")
    with raises(TruncatedData):
        decode(b"4000:nelly the elephant packed her trunk wrong")


def test_truncated_list():
    with raises(TruncatedList):
        decode(b"l")
    with raises(TruncatedList):
        decode(b"li1e")


def test_truncated_dict():
    with raises(TruncatedDictionary):
        decode(b"d")
    with raises(TruncatedDictionary):
        decode(b"d1:a")
    with raises(TruncatedDictionary):
        decode(b"d1:ae")
    with raises(TruncatedDictionary):
        decode(b"d1:ai1e")


def test_non_bytestring_key():
    with raises(NonByteStringKey):
        decode(b"di5ei10ee")
    with raises(NonByteStringKey):
        decode(b"dlei1ee")
    with raises(NonByteStringKey):
        decode(b"ddei1ee")


def test_errors_share_base_class():
    with raises(DecodeError):
        decode(b"l")


def test_nested_error_propagates():
    with raises(TruncatedData):
        decode(b"ld1:al5:abee")


def test_duplicate_key():
    with raises(DuplicateKey) as e:
        decode(b"d1:ai1e1:ai2ee")
    assert e.value.offset == 7


def test_duplicate_key_last_wins():
    value = decode_one(b"d1:ai1e1:bi3e1:ai2ee", {"duplicate_keys": "last"})
    assert value == Dictionary({b"a": Integer(2), b"b": Integer(3)})
    assert [k.value for k in value.keys()] == [b"a", b"b"]


def test_nesting_too_deep():
    depth = 1000
    with raises(NestingTooDeep):
        decode(b"l" * depth + b"e" * depth)
    with raises(NestingTooDeep):
        decode(b"d1:a" * depth + b"e" * depth)


def test_max_depth_setting():
    assert decode_one(b"lli1eee", {"max_depth": 2}) == List([List([Integer(1)])])
    with raises(NestingTooDeep):
        decode(b"llleee", 0, {"max_depth": 2})
    assert decode_one(b"i1e", {"max_depth": 0}) == Integer(1)
    with raises(NestingTooDeep):
        decode(b"le", 0, {"max_depth": 0})


def test_permissive_by_default():
    assert decode_one(b"i-0e") == Integer(0)
    assert decode_one(b"i007e") == Integer(7)
    assert decode_one(b"03:abc") == ByteString(b"abc")
    assert decode_one(b"d1:bi1e1:ai2ee") == Dictionary(
        {b"a": Integer(2), b"b": Integer(1)}
    )


def test_strict():
    strict = {"strict": True}
    assert decode_one(b"i0e", strict) == Integer(0)
    assert decode_one(b"i-10e", strict) == Integer(-10)
    assert decode_one(b"0:", strict) == ByteString(b"")
    assert decode_one(b"d1:ai1e1:bi2ee", strict) == Dictionary(
        {b"a": Integer(1), b"b": Integer(2)}
    )
    with raises(MalformedInteger):
        decode(b"i-0e", 0, strict)
    with raises(MalformedInteger):
        decode(b"i03e", 0, strict)
    with raises(InvalidLength):
        decode(b"03:abc", 0, strict)
    with raises(UnsortedKeys):
        decode(b"d1:bi1e1:ai2ee", 0, strict)


def test_invalid_setup():
    with raises(ValueError):
        BDecoder({"depth": 3})
    with raises(ValueError):
        BDecoder({"max_depth": -1})
    with raises(ValueError):
        BDecoder({"duplicate_keys": "first"})


def test_bad_arguments():
    with raises(TypeError):
        decode("i1e")
    with raises(ValueError):
        decode(b"i1e", -1)


def test_rejection_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="BDecoder"):
        with raises(MissingTerminator):
            decode(b"i10")
    assert "MissingTerminator at offset 0" in caplog.text


def test_huge_length_prefix():
    with raises(TruncatedData):
        decode(b"1" * 5000 + b":abc")
    assert decode_one(b"0" * 5000 + b"3:abc") == ByteString(b"abc")


def test_integer_beyond_str_digit_limit():
    assert decode_one(b"i1" + b"0" * 5000 + b"e") == Integer(10**5000)
    assert decode_one(b"i-" + b"9" * 6000 + b"e") == Integer(1 - 10**6000)


def test_max_depth_bounded_by_recursion_limit():
    with raises(ValueError):
        BDecoder({"max_depth": max_depth_limit() + 1})
    with raises(ValueError):
        BDecoder({"max_depth": 10000})
    with raises(NestingTooDeep):
        decode(b"l" * 5000 + b"e" * 5000, 0, {"max_depth": max_depth_limit()})
