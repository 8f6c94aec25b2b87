"""
Protocol configuration — константы протокола подписи ордеров

Единственный источник констант, которые обязаны совпадать с контрактом биржи:
- BASE_DECIMALS: масштаб fixed-point для цен, количеств и плеча
- ADDRESS_LENGTH: ширина адреса (market, maker) в байтах
- UINT128_BYTES / UINT128_MAX: ширина числовых полей канонической кодировки

Изменение любой из констант — breaking change протокола.
"""

import os
from dataclasses import dataclass
from typing import Final, Mapping, Optional


# =============================================================================
# КОНСТАНТЫ ПРОТОКОЛА
# =============================================================================

# Количество десятичных знаков fixed-point (совпадает с on-chain арифметикой)
BASE_DECIMALS: Final[int] = 9

# Ширина on-chain адреса в байтах
ADDRESS_LENGTH: Final[int] = 32

# Ширина числового поля в канонической кодировке (u128, big-endian)
UINT128_BYTES: Final[int] = 16
UINT128_MAX: Final[int] = (1 << 128) - 1

# Expiration по умолчанию для ордеров, созданных через create_order
DEFAULT_EXPIRATION: Final[int] = 3655643731

# Переменные окружения
ENV_SCALE: Final[str] = "ORDER_PROTOCOL_SCALE"
ENV_DEFAULT_EXPIRATION: Final[str] = "ORDER_DEFAULT_EXPIRATION"


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class ProtocolConfig:
    """Конфигурация протокола, читается один раз при старте процесса.

    Передаётся явно в codec и create_order, чтобы тесты могли проверять
    альтернативные масштабы без глобального состояния.
    """

    scale: int = BASE_DECIMALS
    default_expiration: int = DEFAULT_EXPIRATION

    def __post_init__(self):
        if self.scale < 0:
            raise ValueError(f"scale must be non-negative, got {self.scale}")
        if self.default_expiration < 0:
            raise ValueError(
                f"default_expiration must be non-negative, got {self.default_expiration}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ProtocolConfig":
        """
        Загрузка конфигурации из переменных окружения.

        Args:
            environ: Источник переменных (default: os.environ)

        Returns:
            ProtocolConfig; отсутствующие переменные заменяются значениями по умолчанию

        Raises:
            ValueError: Если значение переменной не является целым числом
        """
        env = os.environ if environ is None else environ

        scale_raw = env.get(ENV_SCALE)
        expiration_raw = env.get(ENV_DEFAULT_EXPIRATION)

        try:
            scale = int(scale_raw) if scale_raw else BASE_DECIMALS
            expiration = int(expiration_raw) if expiration_raw else DEFAULT_EXPIRATION
        except ValueError as e:
            raise ValueError(f"Invalid order protocol configuration: {e}") from e

        return cls(scale=scale, default_expiration=expiration)


DEFAULT_CONFIG: Final[ProtocolConfig] = ProtocolConfig()
