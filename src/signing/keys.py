"""
Keys — ключи двух кривых, вывод on-chain адреса и восстановление ключа

Публичный ключ — явный sum type: Secp256k1PublicKey | Ed25519PublicKey.
Кривая никогда не выводится из длины байт.

Кривые и теги (один байт, совпадает с сетью):
- ED25519   = 0x00, публичный ключ 32 байта, подпись 64 байта
- SECP256K1 = 0x01, публичный ключ 33 байта (compressed SEC1), подпись 65 байт

Адрес:
    address = "0x" + hex(BLAKE2b-256(flag || public_key_bytes))

Подпись над 32-байтным дайджестом ордера:
- secp256k1: детерминированный ECDSA (RFC 6979), low-S, r || s || v
  (v — recovery id, по нему публичный ключ восстанавливается из подписи)
- ed25519:   pure Ed25519, R || S
"""

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Final, Optional, Type, Union

import coincurve
from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from src.core.config import ADDRESS_LENGTH
from src.core.errors import SignatureFormatError, UnsupportedCurveError

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

SECRET_KEY_LENGTH: Final[int] = 32
DIGEST_LENGTH: Final[int] = 32

SECP256K1_PUBLIC_KEY_LENGTH: Final[int] = 33
ED25519_PUBLIC_KEY_LENGTH: Final[int] = 32

SECP256K1_SIGNATURE_LENGTH: Final[int] = 65
ED25519_SIGNATURE_LENGTH: Final[int] = 64

# Recovery id 2 и 3 — только для r >= n, на практике не встречаются
SECP256K1_MAX_RECOVERY_ID: Final[int] = 3

# Порядок группы secp256k1
SECP256K1_ORDER: Final[int] = (
    0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
)
SECP256K1_HALF_ORDER: Final[int] = SECP256K1_ORDER // 2


# =============================================================================
# CURVE
# =============================================================================


class Curve(str, Enum):
    """Кривая подписи"""

    SECP256K1 = "secp256k1"
    ED25519 = "ed25519"

    @property
    def flag(self) -> int:
        """Однобайтовый тег кривой"""
        return _CURVE_FLAGS[self]

    @property
    def signature_length(self) -> int:
        """Длина подписи без тега"""
        return _SIGNATURE_LENGTHS[self]

    @classmethod
    def from_flag(cls, flag: int) -> "Curve":
        for curve, curve_flag in _CURVE_FLAGS.items():
            if curve_flag == flag:
                return curve
        raise UnsupportedCurveError(f"Unsupported curve flag: 0x{flag:02x}")

    @classmethod
    def parse(cls, value: Union["Curve", str]) -> "Curve":
        """
        Разбор имени кривой (регистр не важен).

        Raises:
            UnsupportedCurveError: Для кривой вне {secp256k1, ed25519}
        """
        if isinstance(value, Curve):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedCurveError(f"Unsupported curve: {value!r}") from None


_CURVE_FLAGS = {
    Curve.ED25519: 0x00,
    Curve.SECP256K1: 0x01,
}

_SIGNATURE_LENGTHS = {
    Curve.ED25519: ED25519_SIGNATURE_LENGTH,
    Curve.SECP256K1: SECP256K1_SIGNATURE_LENGTH,
}


# =============================================================================
# ВСПОМОГАТЕЛЬНЫЕ
# =============================================================================


def decode_hex_bytes(value: Union[bytes, bytearray, str], what: str) -> bytes:
    """bytes или hex-строка (с 0x или без) → bytes."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        body = value[2:] if value.lower().startswith("0x") else value
        try:
            return bytes.fromhex(body)
        except ValueError as e:
            raise SignatureFormatError(f"{what} is not valid hex: {e}") from e
    raise SignatureFormatError(f"{what} must be bytes or hex string, got {type(value).__name__}")


def _check_length(data: bytes, expected: int, what: str) -> None:
    if len(data) != expected:
        raise SignatureFormatError(f"{what} must be {expected} bytes, got {len(data)}")


def _split_secp256k1_signature(signature: bytes):
    """r, s, v из 65-байтной подписи. v вне [0, 3] — ошибка формата."""
    _check_length(signature, SECP256K1_SIGNATURE_LENGTH, "secp256k1 signature")
    recovery_id = signature[64]
    if recovery_id > SECP256K1_MAX_RECOVERY_ID:
        raise SignatureFormatError(f"secp256k1 recovery id must be 0..3, got {recovery_id}")
    r = int.from_bytes(signature[:32], "big")
    s = int.from_bytes(signature[32:64], "big")
    return r, s, recovery_id


# =============================================================================
# PUBLIC KEYS
# =============================================================================


@dataclass(frozen=True)
class PublicKey(ABC):
    """Публичный ключ с явной кривой."""

    raw: bytes

    curve: ClassVar[Curve]
    length: ClassVar[int]

    def __post_init__(self):
        _check_length(self.raw, self.length, f"{self.curve.value} public key")

    @abstractmethod
    def verify_digest(self, digest: bytes, signature: bytes) -> bool:
        """Проверка подписи над дайджестом. Невалидная подпись → False."""

    def to_bytes(self) -> bytes:
        return self.raw

    def to_hex(self) -> str:
        return self.raw.hex()

    def tagged_bytes(self) -> bytes:
        """flag || raw — вход хэша при выводе адреса"""
        return bytes([self.curve.flag]) + self.raw

    def to_address(self) -> str:
        return recover_address(self)


@dataclass(frozen=True)
class Secp256k1PublicKey(PublicKey):
    curve: ClassVar[Curve] = Curve.SECP256K1
    length: ClassVar[int] = SECP256K1_PUBLIC_KEY_LENGTH

    def __post_init__(self):
        super().__post_init__()
        try:
            coincurve.PublicKey(bytes(self.raw))
        except ValueError as e:
            raise SignatureFormatError(f"Invalid secp256k1 public key: {e}") from e

    def verify_digest(self, digest: bytes, signature: bytes) -> bool:
        """
        Проверка r || s || v так же, как это делает контракт: ключ
        восстанавливается из подписи и сравнивается с этим ключом.

        High-S и r, s вне [1, n) → False.
        """
        _check_length(digest, DIGEST_LENGTH, "digest")
        r, s, _ = _split_secp256k1_signature(signature)
        if not (0 < r < SECP256K1_ORDER) or not (0 < s <= SECP256K1_HALF_ORDER):
            return False

        recovered = recover_secp256k1_public_key(digest, signature)
        return recovered is not None and recovered.raw == self.raw


@dataclass(frozen=True)
class Ed25519PublicKey(PublicKey):
    curve: ClassVar[Curve] = Curve.ED25519
    length: ClassVar[int] = ED25519_PUBLIC_KEY_LENGTH

    def verify_digest(self, digest: bytes, signature: bytes) -> bool:
        _check_length(digest, DIGEST_LENGTH, "digest")
        _check_length(signature, ED25519_SIGNATURE_LENGTH, "ed25519 signature")

        try:
            VerifyKey(self.raw).verify(digest, signature)
        except BadSignatureError:
            return False
        return True


_PUBLIC_KEY_TYPES: Final[dict] = {
    Curve.SECP256K1: Secp256k1PublicKey,
    Curve.ED25519: Ed25519PublicKey,
}


def public_key_from_bytes(
    data: Union[bytes, bytearray, str], curve: Union[Curve, str]
) -> PublicKey:
    """
    Публичный ключ из байт (или hex) и явной кривой.

    Raises:
        UnsupportedCurveError: Неизвестная кривая
        SignatureFormatError: Неверная длина или точка не на кривой
    """
    key_type: Type[PublicKey] = _PUBLIC_KEY_TYPES[Curve.parse(curve)]
    return key_type(decode_hex_bytes(data, "public key"))


def recover_secp256k1_public_key(
    digest: bytes, signature: bytes
) -> Optional[Secp256k1PublicKey]:
    """
    Восстановление публичного ключа из подписи r || s || v.

    Returns:
        Ключ, либо None если подпись не восстанавливает ни одного ключа

    Raises:
        SignatureFormatError: Неверная длина дайджеста/подписи или v вне [0, 3]
    """
    _check_length(digest, DIGEST_LENGTH, "digest")
    _split_secp256k1_signature(signature)

    try:
        recovered = coincurve.PublicKey.from_signature_and_message(
            bytes(signature), bytes(digest), hasher=None
        )
    except ValueError:
        # r или s вне группы, либо точка R не существует
        return None
    return Secp256k1PublicKey(recovered.format(compressed=True))


def recover_address(
    public_key: Union[PublicKey, bytes, str], curve: Optional[Union[Curve, str]] = None
) -> str:
    """
    Вывод on-chain адреса из публичного ключа.

    address = "0x" + hex(BLAKE2b-256(flag || public_key_bytes))

    Args:
        public_key: Типизированный ключ, либо сырые байты/hex вместе с curve
        curve: Кривая (обязательна для сырых байт, запрещена для несовпадающего типа)

    Returns:
        Адрес (0x + 64 hex)

    Raises:
        SignatureFormatError: Сырые байты без curve или конфликт кривых
    """
    if not isinstance(public_key, PublicKey):
        if curve is None:
            raise SignatureFormatError("curve is required to derive an address from raw key bytes")
        public_key = public_key_from_bytes(public_key, curve)
    elif curve is not None and Curve.parse(curve) != public_key.curve:
        raise SignatureFormatError(
            f"curve {Curve.parse(curve).value} does not match {public_key.curve.value} public key"
        )

    digest = hashlib.blake2b(public_key.tagged_bytes(), digest_size=ADDRESS_LENGTH).digest()
    return "0x" + digest.hex()


# =============================================================================
# KEYPAIRS
# =============================================================================


class Keypair(ABC):
    """Ключевая пара одной кривой. Секрет — 32 байта."""

    curve: ClassVar[Curve]

    @property
    @abstractmethod
    def public_key(self) -> PublicKey:
        """Публичный ключ"""

    @abstractmethod
    def sign_digest(self, digest: bytes) -> bytes:
        """Подпись над 32-байтным дайджестом (длина — curve.signature_length)"""

    @property
    def address(self) -> str:
        return self.public_key.to_address()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(address={self.address})"


class Secp256k1Keypair(Keypair):
    curve: ClassVar[Curve] = Curve.SECP256K1

    def __init__(self, secret_key: Union[bytes, bytearray, str]):
        secret = decode_hex_bytes(secret_key, "secret key")
        _check_length(secret, SECRET_KEY_LENGTH, "secp256k1 secret key")

        scalar = int.from_bytes(secret, "big")
        if not 0 < scalar < SECP256K1_ORDER:
            raise SignatureFormatError("secp256k1 secret key is out of range")

        self._private_key = coincurve.PrivateKey(secret)
        self._public_key = Secp256k1PublicKey(
            self._private_key.public_key.format(compressed=True)
        )

    @classmethod
    def generate(cls) -> "Secp256k1Keypair":
        return cls(coincurve.PrivateKey().secret)

    @property
    def public_key(self) -> Secp256k1PublicKey:
        return self._public_key

    def sign_digest(self, digest: bytes) -> bytes:
        """r || s || v; libsecp256k1 даёт RFC 6979 nonce и low-S."""
        _check_length(digest, DIGEST_LENGTH, "digest")
        return self._private_key.sign_recoverable(bytes(digest), hasher=None)


class Ed25519Keypair(Keypair):
    curve: ClassVar[Curve] = Curve.ED25519

    def __init__(self, secret_key: Union[bytes, bytearray, str]):
        seed = decode_hex_bytes(secret_key, "secret key")
        _check_length(seed, SECRET_KEY_LENGTH, "ed25519 secret key")

        self._signing_key = SigningKey(seed)
        self._public_key = Ed25519PublicKey(bytes(self._signing_key.verify_key))

    @classmethod
    def generate(cls) -> "Ed25519Keypair":
        return cls(bytes(SigningKey.generate()))

    @property
    def public_key(self) -> Ed25519PublicKey:
        return self._public_key

    def sign_digest(self, digest: bytes) -> bytes:
        _check_length(digest, DIGEST_LENGTH, "digest")
        return self._signing_key.sign(digest).signature


_KEYPAIR_TYPES: Final[dict] = {
    Curve.SECP256K1: Secp256k1Keypair,
    Curve.ED25519: Ed25519Keypair,
}


def keypair_from_secret(
    secret_key: Union[bytes, bytearray, str], curve: Union[Curve, str] = Curve.SECP256K1
) -> Keypair:
    """
    Ключевая пара из 32-байтного секрета.

    Raises:
        UnsupportedCurveError: Неизвестная кривая
        SignatureFormatError: Неверная длина секрета
    """
    return _KEYPAIR_TYPES[Curve.parse(curve)](secret_key)


def generate_keypair(curve: Union[Curve, str] = Curve.SECP256K1) -> Keypair:
    return _KEYPAIR_TYPES[Curve.parse(curve)].generate()
