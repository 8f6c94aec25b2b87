"""Matching — подготовка maker/taker сделок.

Trader подписывает обе стороны и выбирает объём и цену исполнения.
"""

from .trader import Trader, mirror_order, resolve_fill

__all__ = [
    "Trader",
    "mirror_order",
    "resolve_fill",
]
