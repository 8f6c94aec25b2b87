"""
Order — Модель торгового ордера для perpetual-биржи

Immutable Pydantic модели:
- Order: каноническое представление торгового намерения
- SignedOrder: Order + typed_signature (подпись с тегом кривой)

Все числовые поля — целые fixed-point (масштаб BASE_DECIMALS), кроме
expiration (timestamp, мс) и salt (nonce). Одинаковые значения полей
(включая salt) всегда дают одинаковую кодировку и хэш.
"""

import time
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator

from src.core.config import DEFAULT_CONFIG, ProtocolConfig
from src.core.domain.address import ZERO_ADDRESS, normalize_address
from src.core.math.fixed_point import FixedPointCodec

NumericInput = Union[Decimal, int, str, float]


# =============================================================================
# ORDER MODEL
# =============================================================================


class Order(BaseModel):
    """
    Торговый ордер.

    Immutable модель (frozen=True). Изменение поля = новый ордер через replace().
    Целочисленные поля строгие: float и bool отклоняются, масштабирование
    выполняется только через fixed-point codec.
    """

    # Идентификация
    market: str = Field(..., description="Адрес perpetual-рынка")
    maker: str = Field(..., description="Адрес владельца ордера")

    # Флаги
    is_buy: bool = Field(..., strict=True, description="Сторона: True = покупка")
    reduce_only: bool = Field(
        False, strict=True, description="Ордер не может увеличивать абсолютный размер позиции"
    )

    # Fixed-point поля
    price: int = Field(..., ge=0, strict=True, description="Цена (fixed-point)")
    quantity: int = Field(..., ge=0, strict=True, description="Количество (fixed-point)")
    trigger_price: int = Field(0, ge=0, strict=True, description="Trigger цена (fixed-point)")
    leverage: int = Field(..., ge=0, strict=True, description="Плечо (fixed-point)")

    # Время и nonce
    expiration: int = Field(..., ge=0, strict=True, description="Время истечения (мс)")
    salt: int = Field(..., ge=0, strict=True, description="Nonce клиента")

    model_config = {"frozen": True}  # Immutable

    @field_validator("market", "maker", mode="before")
    @classmethod
    def validate_address(cls, v: Any) -> str:
        """Нормализация адреса к 0x + 64 hex"""
        return normalize_address(v)

    def replace(self, **changes: Any) -> "Order":
        """
        Новый ордер с изменёнными полями.

        В отличие от model_copy(update=...), значения проходят валидацию.
        """
        data = self.model_dump()
        data.update(changes)
        return Order(**data)

    @property
    def side(self) -> str:
        return "buy" if self.is_buy else "sell"


class SignedOrder(Order):
    """
    Подписанный ордер.

    Создаётся один раз одним подписантом и никогда не изменяется.
    typed_signature: hex (без 0x) — 1 байт тега кривой + подпись
    (64 байта ed25519, 65 байт r || s || v secp256k1).
    """

    typed_signature: str = Field(..., min_length=2, description="Подпись с тегом кривой (hex)")

    @field_validator("typed_signature")
    @classmethod
    def validate_signature_hex(cls, v: str) -> str:
        """Проверка, что подпись — hex-строка"""
        body = v[2:] if v.lower().startswith("0x") else v
        try:
            bytes.fromhex(body)
        except ValueError as e:
            raise ValueError(f"typed_signature must be hex: {e}") from e
        return body.lower()

    @property
    def order(self) -> Order:
        """Неподписанный ордер (без typed_signature)."""
        return Order(**self.model_dump(exclude={"typed_signature"}))

    def signature_bytes(self) -> bytes:
        return bytes.fromhex(self.typed_signature)


# =============================================================================
# ФАБРИКА
# =============================================================================


def create_order(
    *,
    market: str = ZERO_ADDRESS,
    maker: str = ZERO_ADDRESS,
    is_buy: bool = False,
    reduce_only: bool = False,
    price: NumericInput = 1,
    quantity: NumericInput = 1,
    leverage: NumericInput = 1,
    trigger_price: NumericInput = 0,
    expiration: Optional[int] = None,
    salt: Optional[int] = None,
    config: ProtocolConfig = DEFAULT_CONFIG,
) -> Order:
    """
    Создание ордера из человекочитаемых десятичных значений.

    price, quantity, leverage и trigger_price масштабируются через
    FixedPointCodec(config.scale); лишняя точность → FixedPointPrecisionError.

    Args:
        expiration: Время истечения (default: config.default_expiration)
        salt: Nonce (default: текущее время в миллисекундах)
        config: Конфигурация протокола (масштаб)

    Returns:
        Order с fixed-point полями
    """
    codec = FixedPointCodec(config.scale)

    return Order(
        market=market,
        maker=maker,
        is_buy=is_buy,
        reduce_only=reduce_only,
        price=codec.encode(price),
        quantity=codec.encode(quantity),
        leverage=codec.encode(leverage),
        trigger_price=codec.encode(trigger_price),
        expiration=config.default_expiration if expiration is None else expiration,
        salt=int(time.time() * 1000) if salt is None else salt,
    )
