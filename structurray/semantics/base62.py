"""Base62 naming codec for pseudo-array fields.

Keys are the shortest alphanumeric strings in index order:

    0 -> "0", 9 -> "9", 10 -> "a", 35 -> "z", 36 -> "A", 61 -> "Z", 62 -> "10"

The output never contains anything but ASCII letters and digits, so it is
always a valid serde key and, behind a leading underscore, a valid Rust
identifier.
"""

ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
BASE = len(ALPHABET)
U32_MAX = 2**32 - 1

_DIGIT_VALUES = {ch: value for value, ch in enumerate(ALPHABET)}


def encode(n: int) -> str:
    """Encode a u32 value; encode(0) is "0", never the empty string."""
    if not 0 <= n <= U32_MAX:
        raise ValueError(f"base62 input must be within [0, {U32_MAX}], got {n}")
    if n == 0:
        return ALPHABET[0]

    digits = []
    while n:
        n, remainder = divmod(n, BASE)
        digits.append(ALPHABET[remainder])
    # Remainders come out least significant first
    return "".join(reversed(digits))


def decode(key: str) -> int:
    """Inverse of encode() on canonical keys.

    Rejects empty strings, characters outside the alphabet, leading zero
    digits and values that do not fit in a u32.
    """
    if not key:
        raise ValueError("empty base62 key")
    if len(key) > 1 and key[0] == ALPHABET[0]:
        raise ValueError(f"base62 key {key!r} has a leading zero digit")

    value = 0
    for ch in key:
        try:
            value = value * BASE + _DIGIT_VALUES[ch]
        except KeyError:
            raise ValueError(f"invalid base62 character {ch!r} in {key!r}") from None
    if value > U32_MAX:
        raise ValueError(f"base62 key {key!r} exceeds the u32 range")
    return value


def encoded_length(n: int) -> int:
    """Number of characters encode(n) produces."""
    length = 1
    while n >= BASE:
        n //= BASE
        length += 1
    return length
