"""
FillInstruction — Инструкция исполнения maker/taker пары

Результат Trader.setup_trade: два независимо подписанных ордера плюс
согласованные объём и цена исполнения. Не сохраняется — создаётся на каждую
попытку сделки и передаётся слою settlement.

Инвариант: 0 < fill_quantity <= min(maker_order.quantity, taker_order.quantity)
"""

from typing import Any, Dict

from pydantic import BaseModel, Field, model_validator

from src.core.domain.order import Order, SignedOrder
from src.core.errors import FillQuantityError


class FillInstruction(BaseModel):
    """
    Инструкция исполнения.

    Immutable модель (frozen=True). Подписи хранятся как hex-строки.
    """

    maker_order: Order = Field(..., description="Ордер maker (лежащий в книге)")
    maker_signature: str = Field(..., min_length=2, description="Typed signature maker (hex)")
    taker_order: Order = Field(..., description="Ордер taker (пересекающий)")
    taker_signature: str = Field(..., min_length=2, description="Typed signature taker (hex)")
    fill_quantity: int = Field(..., strict=True, description="Объём исполнения (fixed-point)")
    fill_price: int = Field(..., ge=0, strict=True, description="Цена исполнения (fixed-point)")

    model_config = {"frozen": True}  # Immutable

    @model_validator(mode="after")
    def validate_fill_quantity(self) -> "FillInstruction":
        """Проверка границ объёма исполнения"""
        max_fill = min(self.maker_order.quantity, self.taker_order.quantity)
        if self.fill_quantity <= 0:
            raise FillQuantityError(
                f"fill_quantity must be positive, got {self.fill_quantity}"
            )
        if self.fill_quantity > max_fill:
            raise FillQuantityError(
                f"fill_quantity {self.fill_quantity} exceeds "
                f"min(maker, taker) quantity {max_fill}"
            )
        return self

    def to_call_args(self) -> Dict[str, Any]:
        """
        Payload для слоя settlement.

        Числовые поля — десятичные строки fixed-point целых (ширина u128),
        подписи — hex-строки, адреса — нормализованный hex.

        Returns:
            dict, соответствующий схеме src/core/contracts/schema/fill_instruction.json
        """
        return {
            "maker_order": order_call_args(self.maker_order),
            "maker_signature": self.maker_signature,
            "taker_order": order_call_args(self.taker_order),
            "taker_signature": self.taker_signature,
            "fill_quantity": str(self.fill_quantity),
            "fill_price": str(self.fill_price),
        }


def order_call_args(order: Order) -> Dict[str, Any]:
    """Поля ордера в формате аргументов контракта."""
    return {
        "market": order.market,
        "is_buy": order.is_buy,
        "price": str(order.price),
        "quantity": str(order.quantity),
        "leverage": str(order.leverage),
        "reduce_only": order.reduce_only,
        "maker": order.maker,
        "expiration": str(order.expiration),
        "salt": str(order.salt),
        "trigger_price": str(order.trigger_price),
    }


def signed_order_call_args(signed_order: SignedOrder) -> Dict[str, Any]:
    """Payload подписанного ордера (схема src/core/contracts/schema/signed_order.json)."""
    return {
        "order": order_call_args(signed_order),
        "typed_signature": signed_order.typed_signature,
    }
