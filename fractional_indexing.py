"""
Fractional indexing for ordering lists within a board and cards within a list.

Every item carries a short base-62 string key (0-9, A-Z, a-z). Keys compare with
plain byte ordering, so a new key can always be generated between two existing
ones without renumbering any sibling.

A key is an integer part followed by a fractional part. The integer part is
self-delimiting: its head character fixes its length ('a'..'z' -> 2..27,
'Z'..'A' -> 2..27), so no separator is needed. The fractional part subdivides
the gap between keys that share an integer part and never ends in '0'.

Requires COLLATE "C" (or any byte-order collation) on the database column that
stores the key. Case-insensitive or locale-aware collation breaks the ordering.

Based on the algorithm described by David Greenspan:
https://observablehq.com/@dgreensp/implementing-fractional-indexing
"""

import logging
from typing import List, Optional

logger = logging.getLogger(__name__)

# Base-62 alphabet, sorted by ASCII byte value: 0-9 (48-57), A-Z (65-90), a-z (97-122)
ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
BASE = len(ALPHABET)  # 62

# Reserved: the smallest integer part, never a valid key on its own
SMALLEST_INTEGER = "A" + ALPHABET[0] * 26
# Integer zero, the key handed out for the first item of an empty collection
INTEGER_ZERO = "a0"

_DIGIT_VALUES = {c: i for i, c in enumerate(ALPHABET)}


class FractionalIndexError(ValueError):
    """Base class for order key failures."""


class MalformedKeyError(FractionalIndexError):
    """Key violates the structural rules (bad head, wrong length, trailing zero, sentinel)."""


class OrderViolation(FractionalIndexError):
    """Lower bound is not strictly below the upper bound."""


class RangeExhausted(FractionalIndexError):
    """Integer part cannot be incremented past 'z...' or decremented past 'A...'."""


def _digit_value(c: str) -> int:
    """Convert alphabet character to integer (0-61)."""
    try:
        return _DIGIT_VALUES[c]
    except KeyError:
        raise MalformedKeyError(f"invalid order key digit: {c!r}") from None


def get_integer_length(head: str) -> int:
    """
    Length of the integer part that starts with ``head``.

    Examples:
        >>> get_integer_length('a')
        2
        >>> get_integer_length('z')
        27
        >>> get_integer_length('Z')
        2
        >>> get_integer_length('A')
        27
    """
    if len(head) == 1 and "a" <= head <= "z":
        return ord(head) - ord("a") + 2
    if len(head) == 1 and "A" <= head <= "Z":
        return ord("Z") - ord(head) + 2
    raise MalformedKeyError(f"invalid order key head: {head!r}")


def validate_integer(integer_part: str) -> None:
    """Raise MalformedKeyError unless the length matches the head character."""
    if not integer_part or len(integer_part) != get_integer_length(integer_part[0]):
        raise MalformedKeyError(f"invalid integer part of order key: {integer_part!r}")


def get_integer_part(key: str) -> str:
    """Return the leading integer part of ``key``."""
    if not key:
        raise MalformedKeyError("invalid order key: empty string")
    integer_part_length = get_integer_length(key[0])
    if integer_part_length > len(key):
        raise MalformedKeyError(f"invalid order key: {key!r}")
    return key[:integer_part_length]


def validate_order_key(key: str) -> None:
    """
    Check that ``key`` is a well-formed order key.

    Raises:
        MalformedKeyError: If the key is not a string, uses characters outside
            the alphabet, has an integer part of the wrong length, ends its
            fractional part in '0', or is the reserved SMALLEST_INTEGER.
    """
    if not isinstance(key, str):
        raise MalformedKeyError(f"order key must be a string, got {type(key).__name__}")
    if key == SMALLEST_INTEGER:
        raise MalformedKeyError(f"invalid order key: {key!r}")
    for c in key:
        _digit_value(c)
    integer_part = get_integer_part(key)
    if key[len(integer_part):].endswith(ALPHABET[0]):
        raise MalformedKeyError(f"invalid order key (trailing zero): {key!r}")


def is_valid_order_key(key) -> bool:
    """Check if a key is valid without raising."""
    try:
        validate_order_key(key)
    except MalformedKeyError:
        return False
    return True


def increment_integer(x: str) -> Optional[str]:
    """
    Add one to an integer part.

    Returns None on overflow, i.e. when ``x`` is already the largest integer of
    the 'z' band.

    Examples:
        >>> increment_integer('a0')
        'a1'
        >>> increment_integer('az')
        'b00'
        >>> increment_integer('Zz')
        'a0'
    """
    validate_integer(x)
    head = x[0]
    digits = [_digit_value(c) for c in x[1:]]

    carry = True
    for i in range(len(digits) - 1, -1, -1):
        digits[i] += 1
        if digits[i] == BASE:
            digits[i] = 0
        else:
            carry = False
            break

    if not carry:
        return head + "".join(ALPHABET[d] for d in digits)

    if head == "Z":
        # Wrapped past the last uppercase integer, the next band is integer zero
        return INTEGER_ZERO
    if head == "z":
        return None

    new_head = chr(ord(head) + 1)
    if new_head > "a":
        digits.append(0)
    else:
        digits.pop()
    return new_head + "".join(ALPHABET[d] for d in digits)


def decrement_integer(x: str) -> Optional[str]:
    """
    Subtract one from an integer part.

    Returns None on underflow, i.e. when ``x`` is the smallest integer of the
    'A' band.

    Examples:
        >>> decrement_integer('a1')
        'a0'
        >>> decrement_integer('a0')
        'Za'
        >>> decrement_integer('Z0')
        'Yzz'
    """
    validate_integer(x)
    head = x[0]
    digits = [_digit_value(c) for c in x[1:]]

    borrow = True
    for i in range(len(digits) - 1, -1, -1):
        digits[i] -= 1
        if digits[i] == -1:
            digits[i] = BASE - 1
        else:
            borrow = False
            break

    if not borrow:
        return head + "".join(ALPHABET[d] for d in digits)

    if head == "a":
        # Borrow from integer zero into the uppercase bands
        return "Z" + head + "".join(ALPHABET[d] for d in digits[:-1])
    if head == "A":
        return None

    new_head = chr(ord(head) - 1)
    if new_head < "Z":
        digits.append(BASE - 1)
    else:
        digits.pop()
    return new_head + "".join(ALPHABET[d] for d in digits)


def midpoint(a: str, b: Optional[str]) -> str:
    """
    Find the shortest digit string strictly between fractional parts ``a`` and ``b``.

    ``a`` may be empty (the lowest possible fraction). ``b`` of None means there
    is no upper limit.

    Examples:
        >>> midpoint('', None)
        'V'
        >>> midpoint('V', 'X')
        'W'
        >>> midpoint('V', 'W')
        'VV'
    """
    if b is not None and a >= b:
        raise OrderViolation(f"{a!r} >= {b!r}")
    if a.endswith(ALPHABET[0]) or (b is not None and b.endswith(ALPHABET[0])):
        raise MalformedKeyError("trailing zero")

    if b:
        # Skip the common prefix, a missing digit in a counts as '0'
        n = 0
        while n < len(b) and (a[n] if n < len(a) else ALPHABET[0]) == b[n]:
            n += 1
        if n > 0:
            return b[:n] + midpoint(a[n:], b[n:])

    digit_a = _digit_value(a[0]) if a else 0
    digit_b = _digit_value(b[0]) if b is not None else BASE

    if digit_b - digit_a > 1:
        # Round half up
        return ALPHABET[(digit_a + digit_b + 1) // 2]

    if b is not None and len(b) > 1:
        return b[:1]
    return ALPHABET[digit_a] + midpoint(a[1:], None)


def generate_key_between(a: Optional[str], b: Optional[str]) -> str:
    """
    Generate a key that sorts strictly between ``a`` and ``b``.

    Args:
        a: Key before the new position, or None for the start of the collection
        b: Key after the new position, or None for the end of the collection

    Returns:
        A new key with ``a < key < b``

    Raises:
        MalformedKeyError: If ``a`` or ``b`` is not a valid key
        OrderViolation: If ``a >= b``
        RangeExhausted: If the integer part cannot grow any further

    Examples:
        >>> generate_key_between(None, None)
        'a0'
        >>> generate_key_between('a0', None)
        'a1'
        >>> generate_key_between(None, 'a0')
        'Za'
        >>> generate_key_between('a0', 'a1')
        'a0V'
    """
    if a is not None:
        validate_order_key(a)
    if b is not None:
        validate_order_key(b)
    if a is not None and b is not None and a >= b:
        raise OrderViolation(f"Invalid ordering: a={a!r} must be < b={b!r}")

    if a is None:
        if b is None:
            return INTEGER_ZERO

        ib = get_integer_part(b)
        fb = b[len(ib):]
        if ib == SMALLEST_INTEGER:
            return ib + midpoint("", fb)
        if ib < b:
            return ib
        result = decrement_integer(ib)
        if result is None:
            logger.warning(f"Order key range exhausted: cannot decrement {ib!r}")
            raise RangeExhausted(f"cannot decrement any more: {ib!r}")
        if result == SMALLEST_INTEGER:
            # The sentinel itself is reserved, subdivide below it instead
            return result + midpoint("", None)
        return result

    ia = get_integer_part(a)
    fa = a[len(ia):]

    if b is None:
        incremented = increment_integer(ia)
        if incremented is None:
            logger.warning(f"Order key range exhausted: cannot increment {ia!r}")
            raise RangeExhausted(f"cannot increment any more: {ia!r}")
        if not fa:
            return incremented
        return ia + midpoint(fa, None)

    ib = get_integer_part(b)
    fb = b[len(ib):]
    if ia == ib:
        return ia + midpoint(fa, fb)

    incremented = increment_integer(ia)
    if incremented is None:
        logger.warning(f"Order key range exhausted: cannot increment {ia!r}")
        raise RangeExhausted(f"cannot increment any more: {ia!r}")
    if incremented < b:
        return incremented
    return ia + midpoint(fa, None)


def generate_n_keys_between(a: Optional[str], b: Optional[str], n: int) -> List[str]:
    """
    Generate ``n`` increasing keys that all sort strictly between ``a`` and ``b``.

    With both bounds present the range is bisected recursively, which keeps key
    length logarithmic in ``n`` instead of growing with every insert.

    Raises:
        ValueError: If ``n`` is not a non-negative integer
        MalformedKeyError, OrderViolation, RangeExhausted: As generate_key_between
    """
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise ValueError(f"n must be a non-negative integer, got {n!r}")
    if n == 0:
        return []
    if n == 1:
        return [generate_key_between(a, b)]

    if b is None:
        c = generate_key_between(a, b)
        result = [c]
        for _ in range(n - 1):
            c = generate_key_between(c, b)
            result.append(c)
        return result

    if a is None:
        c = generate_key_between(a, b)
        result = [c]
        for _ in range(n - 1):
            c = generate_key_between(a, c)
            result.append(c)
        result.reverse()
        return result

    mid = n // 2
    c = generate_key_between(a, b)
    return [
        *generate_n_keys_between(a, c, mid),
        c,
        *generate_n_keys_between(c, b, n - mid - 1),
    ]


def rebalance_keys(count: int) -> List[str]:
    """
    Fresh, evenly spaced keys for renumbering a whole sibling group.

    Never called automatically. A caller that hits RangeExhausted (or finds keys
    growing too long) can reassign these to its siblings, in their current order.

    Examples:
        >>> rebalance_keys(3)
        ['a0', 'a1', 'a2']
    """
    keys = generate_n_keys_between(None, None, count)
    logger.debug(f"Generated {len(keys)} rebalanced order keys")
    return keys
