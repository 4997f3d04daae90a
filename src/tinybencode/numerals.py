"""
Decimal conversion for integers of any size.

int() and str() refuse numerals above the interpreter's digit limit
(sys.get_int_max_str_digits), so large values are split into halves
that stay below it.
"""

chunk_digits = 1000
log10_2 = 0.30103


def digits_to_int(digits: bytes) -> int:
    """Parse an ASCII numeral with an optional leading minus sign"""
    if digits[:1] == b"-":
        return -_parse(digits[1:])
    return _parse(digits)


def _parse(digits):
    if len(digits) <= chunk_digits:
        return int(digits)
    half = len(digits) // 2
    return _parse(digits[:-half]) * 10**half + _parse(digits[-half:])


def int_to_digits(value: int) -> bytes:
    if value < 0:
        return b"-" + _format(-value)
    return _format(value)


def _format(value):
    if value.bit_length() <= chunk_digits * 3:
        return str(value).encode()
    half = max(1, int(value.bit_length() * log10_2) // 2)
    high, low = divmod(value, 10**half)
    if not high:
        return _format(low)
    return _format(high) + _format(low).rjust(half, b"0")
