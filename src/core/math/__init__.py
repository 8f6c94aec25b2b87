"""
Core math modules

Fixed-point арифметика, совпадающая с on-chain целочисленной арифметикой.
"""

from src.core.math.fixed_point import (
    DecimalLike,
    FixedPointCodec,
    from_fixed_point,
    to_decimal,
    to_fixed_point,
    to_fixed_point_str,
)

__all__ = [
    # Types
    "DecimalLike",
    "FixedPointCodec",
    # Functions
    "to_decimal",
    "to_fixed_point",
    "from_fixed_point",
    "to_fixed_point_str",
]
