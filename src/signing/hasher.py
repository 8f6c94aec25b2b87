"""
Order Hasher — SHA-256 дайджест канонической кодировки

Дайджест (32 байта), а не сырая кодировка, подписывается обеими кривыми и
служит ключом отмены ордера в слое settlement.
"""

import hashlib
from typing import Final

from src.core.domain.order import Order
from src.signing.encoder import encode_order

ORDER_HASH_ALGORITHM: Final[str] = "sha256"
ORDER_HASH_LENGTH: Final[int] = 32


def get_order_hash(order: Order) -> bytes:
    """Чистая функция: sha256(encode_order(order))."""
    return hashlib.new(ORDER_HASH_ALGORITHM, encode_order(order)).digest()


def get_order_hash_hex(order: Order) -> str:
    return get_order_hash(order).hex()


def cancellation_key(order: Order) -> str:
    """Ключ on-chain отмены ордера (hex хэша ордера)."""
    return get_order_hash_hex(order)
