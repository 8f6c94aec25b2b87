"""
Fixed-Point Codec — конверсия десятичных значений в целые fixed-point

Все денежные и количественные поля ордера проходят через этот модуль перед
кодированием и хэшированием. Off-chain и on-chain арифметика обязаны
совпадать бит в бит, поэтому:

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Масштабирование выполняется в точной десятичной арифметике (не float)
2. Округление только toward zero и только по явному запросу (truncate=True)
3. Лишняя точность без truncate → FixedPointPrecisionError, никогда не молчаливое округление
4. NaN/Inf и bool отклоняются

ФОРМУЛЫ:
    to_fixed_point(v, scale)   = trunc(v × 10^scale)
    from_fixed_point(n, scale) = n × 10^(-scale)
"""

from dataclasses import dataclass
from decimal import (
    ROUND_DOWN,
    Context,
    Decimal,
    Inexact,
    InvalidOperation,
    localcontext,
)
from typing import Union

from src.core.config import BASE_DECIMALS
from src.core.errors import EncodingError, FixedPointPrecisionError

DecimalLike = Union[Decimal, int, str, float]

# Минимальная точность контекста: u128 (39 цифр) + масштаб + запас
_MIN_CONTEXT_PRECISION = 100


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def _validate_scale(scale: int) -> None:
    if isinstance(scale, bool) or not isinstance(scale, int) or scale < 0:
        raise ValueError(f"scale must be a non-negative integer, got {scale!r}")


def _exact_context(digits: int) -> Context:
    """
    Контекст, в котором scaleb не округляет: точность не меньше числа цифр
    коэффициента. Любое округление (Inexact) — исключение, а не результат.
    """
    return Context(
        prec=max(digits, _MIN_CONTEXT_PRECISION),
        traps=[Inexact, InvalidOperation],
    )


def to_decimal(value: DecimalLike) -> Decimal:
    """
    Приведение входного значения к Decimal без потери точности.

    float конвертируется через repr (кратчайшее представление), а не через
    двоичное значение: Decimal(0.1) != Decimal("0.1").

    Raises:
        EncodingError: Для bool, NaN/Inf или нечислового ввода
    """
    if isinstance(value, bool):
        raise EncodingError(f"Boolean is not a numeric value: {value!r}")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as e:
            raise EncodingError(f"Not a decimal number: {value!r}") from e
    else:
        raise EncodingError(f"Unsupported numeric type: {type(value).__name__}")

    if not result.is_finite():
        raise EncodingError(f"Value must be finite, got {value!r}")

    return result


# =============================================================================
# КОНВЕРТЕРЫ
# =============================================================================


def to_fixed_point(
    value: DecimalLike,
    scale: int = BASE_DECIMALS,
    *,
    truncate: bool = False,
) -> int:
    """
    Конверсия: десятичное значение → целое fixed-point.

    Args:
        value: Десятичное значение (например, Decimal("100.5"))
        scale: Количество десятичных знаков (default: BASE_DECIMALS)
        truncate: Разрешить отбрасывание лишних знаков toward zero

    Returns:
        value × 10^scale как int

    Raises:
        FixedPointPrecisionError: Если остаётся дробная часть и truncate=False
        EncodingError: Для невалидного ввода

    Examples:
        >>> to_fixed_point("1.5")
        1500000000
        >>> to_fixed_point("0.0000000015", truncate=True)
        1
        >>> to_fixed_point("-0.0000000015", truncate=True)
        -1
    """
    _validate_scale(scale)
    decimal_value = to_decimal(value)

    try:
        with localcontext(_exact_context(len(decimal_value.as_tuple().digits))):
            scaled = decimal_value.scaleb(scale)
            integral = scaled.to_integral_value(rounding=ROUND_DOWN)
    except Inexact as e:
        raise FixedPointPrecisionError(
            f"Value {decimal_value} cannot be scaled by 10^{scale} exactly"
        ) from e

    if integral != scaled and not truncate:
        raise FixedPointPrecisionError(
            f"Value {decimal_value} has more than {scale} decimal places "
            f"(use truncate=True to drop the remainder)"
        )

    return int(integral)


def from_fixed_point(value: int, scale: int = BASE_DECIMALS) -> Decimal:
    """
    Конверсия: целое fixed-point → Decimal (точная обратная операция).

    Examples:
        >>> from_fixed_point(1500000000)
        Decimal('1.500000000')
    """
    _validate_scale(scale)
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"Fixed-point value must be an integer, got {value!r}")

    with localcontext(_exact_context(len(str(abs(value))))):
        return Decimal(value).scaleb(-scale)


def to_fixed_point_str(
    value: DecimalLike,
    scale: int = BASE_DECIMALS,
    *,
    truncate: bool = False,
) -> str:
    """Десятичная строка fixed-point значения (формат аргументов контракта)."""
    return str(to_fixed_point(value, scale, truncate=truncate))


# =============================================================================
# CODEC С ФИКСИРОВАННЫМ МАСШТАБОМ
# =============================================================================


@dataclass(frozen=True)
class FixedPointCodec:
    """Codec с одним зафиксированным масштабом.

    Масштаб передаётся явно (инъекция), а не читается из глобального
    состояния.
    """

    scale: int = BASE_DECIMALS

    def __post_init__(self):
        _validate_scale(self.scale)

    def encode(self, value: DecimalLike, *, truncate: bool = False) -> int:
        return to_fixed_point(value, self.scale, truncate=truncate)

    def decode(self, value: int) -> Decimal:
        return from_fixed_point(value, self.scale)

    def encode_str(self, value: DecimalLike, *, truncate: bool = False) -> str:
        return to_fixed_point_str(value, self.scale, truncate=truncate)
