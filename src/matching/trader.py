"""
Trader — подготовка maker/taker сделки

Пара maker + taker ордеров → FillInstruction:
1. Taker ордер: явный или зеркальный (mirror_order) к maker ордеру
2. Оба ордера подписываются независимо ключами своих владельцев
3. fill_quantity: явный или min(maker.quantity, taker.quantity)
4. fill_price: явная или цена maker (maker-price priority)

Trader не проверяет маржу и допустимость плеча — это ответственность
контракта. Задача Trader: корректная пара, подписи, объём и цена.
"""

import logging
from typing import Optional, Tuple

from src.core.domain.fill import FillInstruction
from src.core.domain.order import Order
from src.core.errors import FillQuantityError
from src.signing.keys import Keypair
from src.signing.signer import OrderSigner, sign_order

logger = logging.getLogger(__name__)


def mirror_order(order: Order, taker_address: str) -> Order:
    """
    Зеркальный ордер для неявного контрагента.

    Те же рынок, цена, количество, плечо, trigger, reduce_only, expiration и
    salt; противоположная сторона; maker = адрес taker.
    """
    return order.replace(maker=taker_address, is_buy=not order.is_buy)


def resolve_fill(
    maker_order: Order,
    taker_order: Order,
    quantity: Optional[int] = None,
    price: Optional[int] = None,
) -> Tuple[int, int]:
    """
    Выбор объёма и цены исполнения.

    Args:
        quantity: Явный объём (partial fill) или None
        price: Явная цена или None (цена maker)

    Returns:
        (fill_quantity, fill_price)

    Raises:
        FillQuantityError: Объём вне (0, min(maker.quantity, taker.quantity)]
    """
    max_fill = min(maker_order.quantity, taker_order.quantity)

    fill_quantity = max_fill if quantity is None else quantity
    if fill_quantity <= 0:
        raise FillQuantityError(f"fill quantity must be positive, got {fill_quantity}")
    if fill_quantity > max_fill:
        raise FillQuantityError(
            f"fill quantity {fill_quantity} exceeds min(maker, taker) quantity {max_fill}"
        )

    fill_price = maker_order.price if price is None else price
    return fill_quantity, fill_price


class Trader:
    """Подготовка сделок между maker и taker."""

    @staticmethod
    def setup_trade(
        maker: Keypair,
        taker: Keypair,
        maker_order: Order,
        taker_order: Optional[Order] = None,
        quantity: Optional[int] = None,
        price: Optional[int] = None,
    ) -> FillInstruction:
        """
        Синхронная подготовка сделки (локальные ключи).

        Args:
            maker: Ключевая пара maker
            taker: Ключевая пара taker
            maker_order: Ордер maker
            taker_order: Ордер taker (default: mirror_order(maker_order, taker.address))
            quantity: Явный объём исполнения (fixed-point)
            price: Явная цена исполнения (fixed-point)

        Returns:
            FillInstruction
        """
        if taker_order is None:
            taker_order = mirror_order(maker_order, taker.address)

        fill_quantity, fill_price = resolve_fill(maker_order, taker_order, quantity, price)

        instruction = FillInstruction(
            maker_order=maker_order,
            maker_signature=sign_order(maker_order, maker),
            taker_order=taker_order,
            taker_signature=sign_order(taker_order, taker),
            fill_quantity=fill_quantity,
            fill_price=fill_price,
        )
        logger.debug(
            f"Trade prepared: maker={maker_order.maker} taker={taker_order.maker} "
            f"qty={fill_quantity} price={fill_price}"
        )
        return instruction

    @staticmethod
    async def setup_normal_trade(
        maker: Keypair,
        taker: Keypair,
        maker_order: Order,
        taker_order: Optional[Order] = None,
        quantity: Optional[int] = None,
        price: Optional[int] = None,
    ) -> FillInstruction:
        """
        Асинхронная подготовка сделки.

        Подписание может приостанавливаться на удалённом key manager;
        в остальном совпадает с setup_trade.
        """
        if taker_order is None:
            taker_order = mirror_order(maker_order, taker.address)

        fill_quantity, fill_price = resolve_fill(maker_order, taker_order, quantity, price)

        signed_maker = await OrderSigner(maker).get_signed_order(maker_order)
        signed_taker = await OrderSigner(taker).get_signed_order(taker_order)

        return FillInstruction(
            maker_order=maker_order,
            maker_signature=signed_maker.typed_signature,
            taker_order=taker_order,
            taker_signature=signed_taker.typed_signature,
            fill_quantity=fill_quantity,
            fill_price=fill_price,
        )
