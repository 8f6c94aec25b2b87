"""
Settlement payload contracts

JSON Schema проверка payload для слоя settlement (схемы — package data
в src/core/contracts/schema/).
"""

from .validators import (
    FILL_INSTRUCTION,
    PAYLOAD_SCHEMAS,
    SIGNED_ORDER,
    FillInstructionValidator,
    PayloadValidator,
    SignedOrderValidator,
    load_schema,
    schema_dir,
    validate_fill_instruction,
    validate_signed_order,
)

__all__ = [
    # Schemas
    "SIGNED_ORDER",
    "FILL_INSTRUCTION",
    "PAYLOAD_SCHEMAS",
    "schema_dir",
    "load_schema",
    # Validators
    "PayloadValidator",
    "SignedOrderValidator",
    "FillInstructionValidator",
    "validate_signed_order",
    "validate_fill_instruction",
]
