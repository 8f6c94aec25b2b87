"""
Canonical Encoder — каноническая бинарная кодировка ордера

Главная граница корректности протокола: контракт выполняет ту же кодировку
независимо, расхождение ломает проверку подписи без ошибки декодирования.

LAYOUT (161 байт, фиксированный):
    offset  field          width  encoding
    0       market         32     raw address bytes
    32      maker          32     raw address bytes
    64      flags          1      bit0 = is_buy, bit1 = reduce_only
    65      price          16     u128 big-endian
    81      quantity       16     u128 big-endian
    97      leverage       16     u128 big-endian
    113     trigger_price  16     u128 big-endian
    129     expiration     16     u128 big-endian
    145     salt           16     u128 big-endian

Изменение порядка полей, ширины или битов флагов — breaking change протокола.
"""

from typing import Final, Tuple

from src.core.config import ADDRESS_LENGTH, UINT128_BYTES, UINT128_MAX
from src.core.domain.address import address_to_bytes
from src.core.domain.order import Order
from src.core.errors import FieldOverflowError

# =============================================================================
# КОНСТАНТЫ КОДИРОВКИ
# =============================================================================

FLAG_IS_BUY: Final[int] = 0x01
FLAG_REDUCE_ONLY: Final[int] = 0x02

# Порядок u128 полей после флагов
UINT128_FIELDS: Final[Tuple[str, ...]] = (
    "price",
    "quantity",
    "leverage",
    "trigger_price",
    "expiration",
    "salt",
)

ORDER_ENCODING_LENGTH: Final[int] = 2 * ADDRESS_LENGTH + 1 + len(UINT128_FIELDS) * UINT128_BYTES


# =============================================================================
# ПРИМИТИВЫ
# =============================================================================


def encode_flags(is_buy: bool, reduce_only: bool) -> bytes:
    """Один байт флагов: bit0 = is_buy, bit1 = reduce_only."""
    flags = 0
    if is_buy:
        flags |= FLAG_IS_BUY
    if reduce_only:
        flags |= FLAG_REDUCE_ONLY
    return bytes([flags])


def encode_uint128(value: int, field: str = "value") -> bytes:
    """
    u128 big-endian, 16 байт.

    Raises:
        FieldOverflowError: Если value < 0 или value > UINT128_MAX
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise FieldOverflowError(f"{field} must be an integer, got {value!r}")
    if value < 0 or value > UINT128_MAX:
        raise FieldOverflowError(
            f"{field}={value} does not fit into {UINT128_BYTES * 8}-bit unsigned integer"
        )
    return value.to_bytes(UINT128_BYTES, "big")


def encode_address(address: str, field: str = "address") -> bytes:
    """
    Сырые байты адреса (ADDRESS_LENGTH).

    Raises:
        FieldOverflowError: Если адрес не помещается в ADDRESS_LENGTH байт
    """
    try:
        return address_to_bytes(address)
    except ValueError as e:
        raise FieldOverflowError(f"{field}: {e}") from e


# =============================================================================
# ORDER
# =============================================================================


def encode_order(order: Order) -> bytes:
    """
    Каноническая кодировка ордера.

    Детерминирована: один и тот же логический ордер → одни и те же байты на
    любой платформе. Любое изменение поля (включая salt) меняет результат.

    Args:
        order: Ордер (fixed-point поля уже масштабированы)

    Returns:
        ORDER_ENCODING_LENGTH байт

    Raises:
        FieldOverflowError: Если поле не помещается в свою ширину
    """
    parts = [
        encode_address(order.market, "market"),
        encode_address(order.maker, "maker"),
        encode_flags(order.is_buy, order.reduce_only),
    ]
    parts.extend(encode_uint128(getattr(order, name), name) for name in UINT128_FIELDS)

    return b"".join(parts)
