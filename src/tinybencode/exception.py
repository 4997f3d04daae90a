class BEncodingError(Exception):
    pass


class DecodeError(BEncodingError):
    """Raised when a buffer is not well-formed bencoded data.

    ``offset`` is the position in the buffer where the problem was found.
    """

    def __init__(self, message, offset=None):
        if offset is not None:
            message = "%s (at offset %d)" % (message, offset)
        BEncodingError.__init__(self, message)
        self.offset = offset


class MissingData(DecodeError):
    pass


class InvalidFormat(DecodeError):
    pass


class MissingTerminator(DecodeError):
    pass


class MalformedInteger(DecodeError):
    pass


class MissingLengthSeparator(DecodeError):
    pass


class InvalidLength(DecodeError):
    pass


class TruncatedData(DecodeError):
    pass


class TruncatedList(DecodeError):
    pass


class TruncatedDictionary(DecodeError):
    pass


class NonByteStringKey(DecodeError):
    pass


class DuplicateKey(DecodeError):
    pass


class UnsortedKeys(DecodeError):
    pass


class NestingTooDeep(DecodeError):
    pass


class TrailingData(DecodeError):
    pass


class KeyNotFound(BEncodingError, KeyError):
    def __str__(self):
        return BEncodingError.__str__(self)
