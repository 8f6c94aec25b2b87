"""
Settlement payload contracts

Payload, который уходит слою settlement (FillInstruction.to_call_args,
signed_order_call_args), описан JSON Schema (Draft 2020-12). Схемы лежат
рядом с модулем как package data и читаются через importlib.resources,
поэтому работают и в установленном пакете.

Схемы:
- signed_order: аргументы ордера + typed signature
- fill_instruction: maker/taker пара с подписями, объём и цена исполнения
"""

import json
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, Final, List, Tuple

import jsonschema
from jsonschema import Draft202012Validator

SIGNED_ORDER: Final[str] = "signed_order"
FILL_INSTRUCTION: Final[str] = "fill_instruction"

PAYLOAD_SCHEMAS: Final[Tuple[str, ...]] = (SIGNED_ORDER, FILL_INSTRUCTION)


# =============================================================================
# SCHEMAS
# =============================================================================


def schema_dir():
    """Каталог схем внутри пакета (Traversable)."""
    return resources.files(__package__) / "schema"


@lru_cache(maxsize=None)
def load_schema(schema_name: str) -> Dict[str, Any]:
    """
    Схема payload по имени (кэшируется на процесс).

    Raises:
        FileNotFoundError: Неизвестное имя схемы
        ValueError: Файл не является валидной JSON Schema
    """
    schema_file = schema_dir() / f"{schema_name}.json"
    if not schema_file.is_file():
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    schema = json.loads(schema_file.read_text(encoding="utf-8"))
    try:
        Draft202012Validator.check_schema(schema)
    except jsonschema.SchemaError as e:
        raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e.message}") from e
    return schema


# =============================================================================
# VALIDATORS
# =============================================================================


class PayloadValidator:
    """Проверка одного вида payload против его схемы."""

    schema_name: str = ""

    def __init__(self, schema_name: str = ""):
        self.schema_name = schema_name or self.schema_name
        self._validator = Draft202012Validator(load_schema(self.schema_name))

    def validate(self, payload: Dict[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: Первое (лучшее) нарушение схемы
        """
        self._validator.validate(payload)

    def is_valid(self, payload: Dict[str, Any]) -> bool:
        return self._validator.is_valid(payload)

    def errors(self, payload: Dict[str, Any]) -> List[str]:
        """
        Все нарушения в виде "путь: сообщение", упорядоченные по пути.

        Путь — JSON path до поля ($.maker_order.price), удобно для логов
        слоя settlement.
        """
        found = sorted(self._validator.iter_errors(payload), key=lambda e: list(e.absolute_path))
        return [f"{error.json_path}: {error.message}" for error in found]


class SignedOrderValidator(PayloadValidator):
    schema_name = SIGNED_ORDER


class FillInstructionValidator(PayloadValidator):
    schema_name = FILL_INSTRUCTION


def validate_signed_order(payload: Dict[str, Any]) -> None:
    SignedOrderValidator().validate(payload)


def validate_fill_instruction(payload: Dict[str, Any]) -> None:
    FillInstructionValidator().validate(payload)
