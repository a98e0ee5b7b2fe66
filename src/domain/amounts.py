"""Overflow-checked arithmetic for token amounts and timestamps

Amounts are signed 128-bit integers, timestamps unsigned 64-bit seconds.
Python integers never overflow, so the bounds are enforced explicitly.
"""

I128_MIN = -(2 ** 127)
I128_MAX = 2 ** 127 - 1
U64_MAX = 2 ** 64 - 1


class ArithmeticOverflowError(ArithmeticError):
    """Result of an amount computation falls outside the 128-bit range"""

    def __init__(self, operation: str, left: int, right: int):
        self.operation = operation
        self.left = left
        self.right = right
        super().__init__(f"{operation} overflow: {left}, {right}")


def checked_add(left: int, right: int) -> int:
    result = left + right
    if result < I128_MIN or result > I128_MAX:
        raise ArithmeticOverflowError("add", left, right)
    return result


def checked_sub(left: int, right: int) -> int:
    result = left - right
    if result < I128_MIN or result > I128_MAX:
        raise ArithmeticOverflowError("sub", left, right)
    return result


def saturating_add_u64(left: int, right: int) -> int:
    """Add two unsigned 64-bit values, clamping at U64_MAX instead of wrapping"""
    return min(left + right, U64_MAX)
