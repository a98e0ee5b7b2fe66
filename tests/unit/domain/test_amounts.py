"""Unit tests for overflow-checked amount arithmetic"""

import pytest
from src.domain.amounts import (
    I128_MAX,
    I128_MIN,
    U64_MAX,
    ArithmeticOverflowError,
    checked_add,
    checked_sub,
    saturating_add_u64,
)


class TestCheckedArithmetic:

    def test_add_within_range(self):
        assert checked_add(10_000000, 5_000000) == 15_000000

    def test_add_up_to_max(self):
        assert checked_add(I128_MAX - 1, 1) == I128_MAX

    def test_add_past_max_raises(self):
        with pytest.raises(ArithmeticOverflowError) as exc_info:
            checked_add(I128_MAX, 1)

        assert exc_info.value.operation == "add"

    def test_sub_past_min_raises(self):
        with pytest.raises(ArithmeticOverflowError):
            checked_sub(I128_MIN, 1)

    def test_sub_to_zero(self):
        assert checked_sub(10_000000, 10_000000) == 0

    def test_overflow_error_is_arithmetic_error(self):
        assert issubclass(ArithmeticOverflowError, ArithmeticError)


class TestSaturatingAdd:

    def test_plain_sum(self):
        assert saturating_add_u64(1, 2) == 3

    def test_clamps(self):
        assert saturating_add_u64(U64_MAX - 100, 200) == U64_MAX
        assert saturating_add_u64(U64_MAX, U64_MAX) == U64_MAX
