"""
Domain models and value objects.

Contains the order model (Order, SignedOrder), the fill instruction handed
to the settlement layer, and address normalisation.
"""

from src.core.domain.address import ZERO_ADDRESS, address_to_bytes, normalize_address
from src.core.domain.fill import (
    FillInstruction,
    order_call_args,
    signed_order_call_args,
)
from src.core.domain.order import Order, SignedOrder, create_order

__all__ = [
    # Address
    "ZERO_ADDRESS",
    "normalize_address",
    "address_to_bytes",
    # Order model
    "Order",
    "SignedOrder",
    "create_order",
    # Fill instruction
    "FillInstruction",
    "order_call_args",
    "signed_order_call_args",
]
