"""
Multi-Curve Signer/Verifier — подпись, проверка и восстановление ключа

Вход подписи фиксирован протоколом: 32-байтный хэш ордера для обеих кривых.
Вызывающий код не может подписать иное представление ордера.

Typed signature (hex):
    flag (1 байт, тег кривой) || signature
    ed25519:   00 || R || S        (65 байт)
    secp256k1: 01 || r || s || v   (66 байт)

Исходы проверки:
- True/False: структурно корректная подпись (False — чужой ключ, изменённый ордер)
- SignatureFormatError: неверная длина, не-hex, кривая подписи != кривая ключа
- UnsupportedCurveError: неизвестный тег кривой
"""

import inspect
import logging
from typing import Optional, Tuple, Union

from src.core.domain.address import normalize_address
from src.core.domain.order import Order, SignedOrder
from src.core.errors import SignatureFormatError
from src.signing.hasher import get_order_hash
from src.signing.keys import (
    Curve,
    Keypair,
    PublicKey,
    decode_hex_bytes,
    keypair_from_secret,
    recover_secp256k1_public_key,
)

logger = logging.getLogger(__name__)


# =============================================================================
# TYPED SIGNATURE
# =============================================================================


def encode_typed_signature(curve: Curve, signature: bytes) -> bytes:
    """flag || signature"""
    if len(signature) != curve.signature_length:
        raise SignatureFormatError(
            f"{curve.value} signature must be {curve.signature_length} bytes, got {len(signature)}"
        )
    return bytes([curve.flag]) + signature


def decode_typed_signature(typed_signature: Union[bytes, str]) -> Tuple[Curve, bytes]:
    """
    Разбор typed signature.

    Returns:
        (curve, signature без тега)

    Raises:
        SignatureFormatError: Неверная длина или не-hex
        UnsupportedCurveError: Неизвестный тег кривой
    """
    data = decode_hex_bytes(typed_signature, "signature")
    if not data:
        raise SignatureFormatError("typed signature is empty")

    curve = Curve.from_flag(data[0])
    if len(data) != 1 + curve.signature_length:
        raise SignatureFormatError(
            f"{curve.value} typed signature must be {1 + curve.signature_length} bytes, "
            f"got {len(data)}"
        )
    return curve, data[1:]


# =============================================================================
# SIGN / VERIFY
# =============================================================================


def sign_order(order: Order, keypair: Keypair) -> str:
    """
    Подпись ордера.

    Args:
        order: Ордер
        keypair: Ключевая пара (кривая определяет тег подписи)

    Returns:
        Typed signature (hex)
    """
    digest = get_order_hash(order)
    raw_signature = keypair.sign_digest(digest)
    if inspect.isawaitable(raw_signature):
        if inspect.iscoroutine(raw_signature):
            raw_signature.close()
        raise TypeError(
            f"{type(keypair).__name__} signs asynchronously, use OrderSigner.get_signed_order"
        )

    signature = encode_typed_signature(keypair.curve, raw_signature)
    logger.debug(f"Signed order {digest.hex()} with {keypair.curve.value}")
    return signature.hex()


def sign(order: Order, private_key: Union[bytes, str], curve: Union[Curve, str]) -> str:
    """Подпись ордера сырым секретом заданной кривой."""
    return sign_order(order, keypair_from_secret(private_key, curve))


def verify_order(order: Order, signature: Union[bytes, str], public_key: PublicKey) -> bool:
    """
    Проверка подписи ордера.

    Никогда не бросает исключение для структурно корректной, но неверной
    подписи: чужой ключ или изменённое содержимое ордера → False.

    Raises:
        SignatureFormatError: Некорректный формат подписи или несовпадение кривых
        UnsupportedCurveError: Неизвестный тег кривой
    """
    curve, raw_signature = decode_typed_signature(signature)
    if curve != public_key.curve:
        raise SignatureFormatError(
            f"{curve.value} signature cannot be verified with {public_key.curve.value} public key"
        )

    digest = get_order_hash(order)
    is_valid = public_key.verify_digest(digest, raw_signature)
    if not is_valid:
        logger.debug(f"Signature check failed for order {digest.hex()} ({curve.value})")
    return is_valid


# =============================================================================
# RECOVERY
# =============================================================================


def recover_public_key_from_hash(
    order_hash: Union[bytes, str], signature: Union[bytes, str]
) -> Optional[PublicKey]:
    """
    Публичный ключ подписанта из хэша ордера и typed signature.

    Восстановление возможно только для secp256k1 (по recovery id).

    Returns:
        Ключ или None, если подпись не восстанавливает ни одного ключа

    Raises:
        SignatureFormatError: Подпись ed25519, неверная длина хэша или подписи
        UnsupportedCurveError: Неизвестный тег кривой
    """
    curve, raw_signature = decode_typed_signature(signature)
    if curve != Curve.SECP256K1:
        raise SignatureFormatError(f"public key cannot be recovered from a {curve.value} signature")

    return recover_secp256k1_public_key(decode_hex_bytes(order_hash, "order hash"), raw_signature)


def recover_public_key(order: Order, signature: Union[bytes, str]) -> Optional[PublicKey]:
    """Публичный ключ подписанта ордера (см. recover_public_key_from_hash)."""
    return recover_public_key_from_hash(get_order_hash(order), signature)


def verify_hash_for_address(
    order_hash: Union[bytes, str], signature: Union[bytes, str], address: str
) -> bool:
    """
    Подпись хэша сделана ключом, чей адрес равен address.

    Ключ восстанавливается из самой подписи, как это делает контракт.
    """
    digest = decode_hex_bytes(order_hash, "order hash")
    public_key = recover_public_key_from_hash(digest, signature)
    if public_key is None or public_key.to_address() != normalize_address(address):
        return False

    _, raw_signature = decode_typed_signature(signature)
    return public_key.verify_digest(digest, raw_signature)


def verify_order_for_address(
    order: Order,
    signature: Union[bytes, str],
    address: str,
    public_key: Optional[PublicKey] = None,
) -> bool:
    """
    Подпись валидна И адрес ключа совпадает с ожидаемым.

    Без public_key ключ восстанавливается из подписи (только secp256k1);
    для ed25519 ключ передаётся явно.

    Raises:
        SignatureFormatError: ed25519 подпись без public_key, некорректный формат
    """
    if public_key is None:
        return verify_hash_for_address(get_order_hash(order), signature, address)

    if public_key.to_address() != normalize_address(address):
        return False
    return verify_order(order, signature, public_key)


# =============================================================================
# ORDER SIGNER
# =============================================================================


class OrderSigner:
    """
    Подписант ордеров одной ключевой пары.

    Ключ может быть локальным (sign_digest возвращает bytes) или удалённым
    key manager (sign_digest возвращает awaitable). get_signed_order — единственная
    точка приостановки.
    """

    def __init__(self, keypair: Keypair):
        self.keypair = keypair

    @property
    def curve(self) -> Curve:
        return self.keypair.curve

    @property
    def address(self) -> str:
        return self.keypair.address

    def get_order_hash(self, order: Order) -> str:
        return get_order_hash(order).hex()

    def sign_order(self, order: Order) -> str:
        return sign_order(order, self.keypair)

    def verify(self, order: Order, signature: Union[bytes, str]) -> bool:
        return verify_order(order, signature, self.keypair.public_key)

    @staticmethod
    def verify_using_hash(signature: Union[bytes, str], order_hash: str, address: str) -> bool:
        return verify_hash_for_address(order_hash, signature, address)

    @staticmethod
    def verify_using_order(signature: Union[bytes, str], order: Order, address: str) -> bool:
        return verify_order_for_address(order, signature, address)

    async def get_signed_order(self, order: Order) -> SignedOrder:
        """
        Подписанный ордер.

        Returns:
            SignedOrder с typed_signature
        """
        digest = get_order_hash(order)

        raw_signature = self.keypair.sign_digest(digest)
        if inspect.isawaitable(raw_signature):
            raw_signature = await raw_signature

        typed_signature = encode_typed_signature(self.curve, raw_signature).hex()
        logger.debug(f"Signed order {digest.hex()} with {self.curve.value}")

        return SignedOrder(
            **order.model_dump(exclude={"typed_signature"}), typed_signature=typed_signature
        )
