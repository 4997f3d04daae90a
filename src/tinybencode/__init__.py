from tinybencode.bencode import (
    BDecoder,
    decode,
    decode_exact,
    decode_one,
    encode,
    get,
)
from tinybencode.exception import (
    BEncodingError,
    DecodeError,
    DuplicateKey,
    InvalidFormat,
    InvalidLength,
    KeyNotFound,
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
from tinybencode.values import ByteString, Dictionary, Integer, List, Value

__version__ = "0.1.0"
