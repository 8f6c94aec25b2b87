"""Signing — каноническая кодировка, хэш и подпись ордеров.

- encoder: фиксированный 161-байтный layout ордера
- hasher: SHA-256 дайджест кодировки
- keys: ключи secp256k1 / ed25519, вывод адреса, восстановление ключа
- signer: typed signature, подпись, проверка и проверка против адреса
"""

from .encoder import ORDER_ENCODING_LENGTH, encode_order
from .hasher import cancellation_key, get_order_hash, get_order_hash_hex
from .keys import (
    Curve,
    Ed25519Keypair,
    Ed25519PublicKey,
    Keypair,
    PublicKey,
    Secp256k1Keypair,
    Secp256k1PublicKey,
    generate_keypair,
    keypair_from_secret,
    public_key_from_bytes,
    recover_address,
    recover_secp256k1_public_key,
)
from .signer import (
    OrderSigner,
    recover_public_key,
    recover_public_key_from_hash,
    sign,
    sign_order,
    verify_hash_for_address,
    verify_order,
    verify_order_for_address,
)

__all__ = [
    "ORDER_ENCODING_LENGTH",
    "encode_order",
    "get_order_hash",
    "get_order_hash_hex",
    "cancellation_key",
    "Curve",
    "PublicKey",
    "Secp256k1PublicKey",
    "Ed25519PublicKey",
    "Keypair",
    "Secp256k1Keypair",
    "Ed25519Keypair",
    "public_key_from_bytes",
    "keypair_from_secret",
    "generate_keypair",
    "recover_address",
    "recover_secp256k1_public_key",
    "OrderSigner",
    "recover_public_key",
    "recover_public_key_from_hash",
    "sign",
    "sign_order",
    "verify_hash_for_address",
    "verify_order",
    "verify_order_for_address",
]
