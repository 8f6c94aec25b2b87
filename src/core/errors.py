"""
Errors — таксономия ошибок протокола подписи ордеров

Политика:
- Ошибки кодирования и формата — ошибки программиста, fail fast
- Невалидная подпись — ожидаемый бизнес-исход, возвращается как False (не exception)
- Ничего не ретраится: все операции детерминированы
"""

from typing import Dict, Final


# =============================================================================
# EXCEPTIONS
# =============================================================================


class OrderProtocolError(Exception):
    """Базовая ошибка протокола подписи ордеров."""
    pass


class EncodingError(OrderProtocolError, ValueError):
    """
    Значение поля не представимо в канонической кодировке.

    Возникает при кодировании, никогда не приводит к молчаливому усечению.
    """
    pass


class FixedPointPrecisionError(EncodingError):
    """Значение содержит больше знаков после запятой, чем допускает масштаб."""
    pass


class FieldOverflowError(EncodingError):
    """Значение поля выходит за пределы фиксированной ширины (u128 / адрес)."""
    pass


class SignatureFormatError(OrderProtocolError, ValueError):
    """
    Структурно некорректная подпись или публичный ключ.

    Неверная длина, не-hex строка, точка не на кривой, несовпадение
    кривой подписи и ключа. Отличается от невалидной подписи (False).
    """
    pass


class UnsupportedCurveError(OrderProtocolError, ValueError):
    """Кривая вне {secp256k1, ed25519}."""
    pass


class FillQuantityError(OrderProtocolError, ValueError):
    """Объём исполнения вне диапазона (0, min(maker.quantity, taker.quantity)]."""
    pass


# =============================================================================
# КОДЫ ОШИБОК КОНТРАКТА
# =============================================================================

CONTRACT_ERROR_CODES: Final[Dict[int, str]] = {
    1: "Minimum order price must be > 0",
    2: "Minimum trade price must be < maximum trade price",
    3: "Trade price is < min allowed price (Maker At Fault)",
    4: "Trade price is > max allowed price (Maker At Fault)",
    5: "Trade price does not conforms to allowed tick size (Maker At Fault)",
}


def describe_contract_error(code: int) -> str:
    """
    Описание abort-кода контракта биржи.

    Args:
        code: Числовой abort-код из ответа контракта

    Returns:
        Текст ошибки или "Unknown contract error <code>"
    """
    return CONTRACT_ERROR_CODES.get(int(code), f"Unknown contract error {code}")
