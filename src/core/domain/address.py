"""
Address — нормализация on-chain адресов

Адрес в канонической форме: "0x" + 64 hex-символа в нижнем регистре (32 байта).
Короткие адреса дополняются нулями слева ("0x2" → 0x00…02), как это делает
сама сеть. Одна каноническая форма на адрес — условие детерминизма кодировки.
"""

from typing import Final, Union

from src.core.config import ADDRESS_LENGTH

_HEX_CHARS: Final[frozenset] = frozenset("0123456789abcdef")

ZERO_ADDRESS: Final[str] = "0x" + "00" * ADDRESS_LENGTH


def normalize_address(value: Union[str, bytes]) -> str:
    """
    Приведение адреса к канонической форме.

    Args:
        value: hex-строка (с префиксом 0x или без) или сырые байты

    Returns:
        "0x" + 64 hex-символа в нижнем регистре

    Raises:
        ValueError: Пустой адрес, не-hex символы или длина больше ADDRESS_LENGTH
    """
    if isinstance(value, (bytes, bytearray)):
        if len(value) > ADDRESS_LENGTH:
            raise ValueError(
                f"Address is {len(value)} bytes, maximum is {ADDRESS_LENGTH}"
            )
        return "0x" + bytes(value).rjust(ADDRESS_LENGTH, b"\x00").hex()

    if not isinstance(value, str):
        raise ValueError(f"Address must be str or bytes, got {type(value).__name__}")

    body = value.strip().lower()
    if body.startswith("0x"):
        body = body[2:]

    if not body:
        raise ValueError("Address must not be empty")
    if not set(body) <= _HEX_CHARS:
        raise ValueError(f"Address contains non-hex characters: {value!r}")
    if len(body) > ADDRESS_LENGTH * 2:
        raise ValueError(
            f"Address {value!r} exceeds {ADDRESS_LENGTH} bytes"
        )

    return "0x" + body.rjust(ADDRESS_LENGTH * 2, "0")


def address_to_bytes(address: str) -> bytes:
    """Сырые байты (ADDRESS_LENGTH) адреса."""
    return bytes.fromhex(normalize_address(address)[2:])
