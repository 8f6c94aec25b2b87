"""
Тесты для Fixed-Point Codec

Проверяет:
1. Масштабирование в точной десятичной арифметике
2. Отказ от лишней точности (FixedPointPrecisionError) и явное усечение toward zero
3. Отклонение bool, NaN/Inf и нечислового ввода
4. Обратную конверсию и альтернативные масштабы
"""

from decimal import Decimal

import pytest

from src.core.config import BASE_DECIMALS, UINT128_MAX
from src.core.errors import EncodingError, FixedPointPrecisionError
from src.core.math import (
    FixedPointCodec,
    from_fixed_point,
    to_decimal,
    to_fixed_point,
    to_fixed_point_str,
)


class TestToFixedPoint:
    """Тесты для to_fixed_point"""

    def test_default_scale_is_nine(self) -> None:
        """Масштаб по умолчанию — 9 знаков"""
        assert BASE_DECIMALS == 9
        assert to_fixed_point(1) == 1_000_000_000

    def test_integer_input(self) -> None:
        assert to_fixed_point(100) == 100_000_000_000

    def test_string_input(self) -> None:
        assert to_fixed_point("1.5") == 1_500_000_000
        assert to_fixed_point(" 0.001 ") == 1_000_000

    def test_decimal_input(self) -> None:
        assert to_fixed_point(Decimal("123.456789012")) == 123_456_789_012

    def test_float_uses_shortest_repr(self) -> None:
        """float 0.1 → 100000000, а не двоичное приближение"""
        assert to_fixed_point(0.1) == 100_000_000
        assert to_fixed_point(0.3) == 300_000_000

    def test_zero(self) -> None:
        assert to_fixed_point(0) == 0
        assert to_fixed_point("0.000") == 0

    def test_excess_precision_rejected(self) -> None:
        """Лишний знак без truncate → ошибка, не молчаливое округление"""
        with pytest.raises(FixedPointPrecisionError) as exc_info:
            to_fixed_point("0.0000000015")
        assert "decimal places" in str(exc_info.value)

    def test_excess_precision_is_encoding_error(self) -> None:
        with pytest.raises(EncodingError):
            to_fixed_point("1.0000000001")

    def test_trailing_zeros_are_not_excess_precision(self) -> None:
        assert to_fixed_point("1.500000000000") == 1_500_000_000

    def test_truncate_toward_zero(self) -> None:
        assert to_fixed_point("0.0000000015", truncate=True) == 1
        assert to_fixed_point("0.0000000019", truncate=True) == 1
        assert to_fixed_point("-0.0000000015", truncate=True) == -1

    def test_rejects_bool(self) -> None:
        with pytest.raises(EncodingError):
            to_fixed_point(True)

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity", float("nan"), float("inf")])
    def test_rejects_non_finite(self, value) -> None:
        with pytest.raises(EncodingError):
            to_fixed_point(value)

    @pytest.mark.parametrize("value", ["abc", "", "1,5"])
    def test_rejects_non_numeric_string(self, value: str) -> None:
        with pytest.raises(EncodingError):
            to_fixed_point(value)

    def test_rejects_unsupported_type(self) -> None:
        with pytest.raises(EncodingError):
            to_fixed_point([1])  # type: ignore[arg-type]

    def test_rejects_negative_scale(self) -> None:
        with pytest.raises(ValueError):
            to_fixed_point(1, scale=-1)

    def test_u128_max_exact(self) -> None:
        """Большие значения масштабируются без потери точности"""
        assert to_fixed_point("340282366920938463463.374607431768211455", scale=18) == UINT128_MAX

    def test_string_form(self) -> None:
        assert to_fixed_point_str(100) == "100000000000"
        assert to_fixed_point_str("0.5", scale=2) == "50"

    def test_long_fraction_rejected(self) -> None:
        """Цифра за 100-й значащей позицией не теряется округлением контекста"""
        value = "1." + "0" * 99 + "1"
        with pytest.raises(FixedPointPrecisionError):
            to_fixed_point(value)
        assert to_fixed_point(value, truncate=True) == 1_000_000_000

    def test_long_integer_exact(self) -> None:
        assert to_fixed_point(10**100 + 1, 0) == 10**100 + 1
        assert to_fixed_point(Decimal(10**120 + 7)) == (10**120 + 7) * 10**9

    def test_long_value_truncates_toward_zero(self) -> None:
        value = "-" + "9" * 110 + ".9999999999"
        assert to_fixed_point(value, truncate=True) == -(int("9" * 110) * 10**9 + 999_999_999)


class TestFromFixedPoint:
    """Тесты для from_fixed_point"""

    def test_basic(self) -> None:
        assert from_fixed_point(1_500_000_000) == Decimal("1.5")

    def test_inverse(self) -> None:
        """Инвариант: from(to(v)) == v"""
        for value in ["0", "1", "100.25", "0.000000001", "98765.4321"]:
            assert from_fixed_point(to_fixed_point(value)) == Decimal(value)

    def test_long_value_exact(self) -> None:
        value = 10**150 + 123
        assert to_fixed_point(from_fixed_point(value)) == value
        assert str(from_fixed_point(value)) == "1" + "0" * 140 + "0.000000123"

    def test_rejects_non_integer(self) -> None:
        with pytest.raises(EncodingError):
            from_fixed_point(1.5)  # type: ignore[arg-type]
        with pytest.raises(EncodingError):
            from_fixed_point(True)


class TestFixedPointCodec:
    """Тесты для FixedPointCodec (инъекция масштаба)"""

    @pytest.mark.parametrize(
        "scale,value,expected",
        [
            (6, "1.5", 1_500_000),
            (9, "1.5", 1_500_000_000),
            (18, "1.5", 1_500_000_000_000_000_000),
            (0, "42", 42),
        ],
    )
    def test_encode_with_scale(self, scale: int, value: str, expected: int) -> None:
        assert FixedPointCodec(scale).encode(value) == expected

    def test_precision_depends_on_scale(self) -> None:
        """7 знаков допустимы при scale=9, но не при scale=6"""
        assert FixedPointCodec(9).encode("0.1234567") == 123_456_700
        with pytest.raises(FixedPointPrecisionError):
            FixedPointCodec(6).encode("0.1234567")
        assert FixedPointCodec(6).encode("0.1234567", truncate=True) == 123_456

    def test_decode(self) -> None:
        assert FixedPointCodec(6).decode(2_500_000) == Decimal("2.5")

    def test_encode_str(self) -> None:
        assert FixedPointCodec(6).encode_str("2.5") == "2500000"

    def test_invalid_scale(self) -> None:
        with pytest.raises(ValueError):
            FixedPointCodec(-1)

    def test_codec_is_immutable(self) -> None:
        codec = FixedPointCodec(6)
        with pytest.raises(AttributeError):
            codec.scale = 9  # type: ignore[misc]


def test_to_decimal_float_repr() -> None:
    assert to_decimal(0.1) == Decimal("0.1")
