"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов payload для settlement:
- Валидность самих схем
- Валидация правильных данных (в т.ч. сгенерированных из моделей)
- Детекция нарушений required полей
- Детекция нарушений типов и pattern (u128 строки, hex подписи, адреса)
"""

import asyncio
import copy
import json
from importlib import resources

import pytest
from jsonschema import Draft202012Validator, ValidationError

from src.core.contracts import (
    PAYLOAD_SCHEMAS,
    FillInstructionValidator,
    PayloadValidator,
    SignedOrderValidator,
    load_schema,
    schema_dir,
    validate_fill_instruction,
    validate_signed_order,
)
from src.core.domain import create_order, signed_order_call_args
from src.matching import Trader
from src.signing.keys import Ed25519Keypair, Secp256k1Keypair
from src.signing.signer import OrderSigner


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_order():
    """Аргументы ордера в формате контракта."""
    return {
        "market": "0x" + "5e" * 32,
        "maker": "0x" + "cd" * 32,
        "is_buy": True,
        "reduce_only": False,
        "price": "100000000000",
        "quantity": "1000000000",
        "leverage": "1000000000",
        "trigger_price": "0",
        "expiration": "3655643731",
        "salt": "1",
    }


@pytest.fixture
def valid_signed_order(valid_order):
    return {"order": valid_order, "typed_signature": "01" + "ab" * 65}


@pytest.fixture
def valid_fill_instruction(valid_order):
    taker_order = dict(valid_order, is_buy=False, maker="0x" + "ef" * 32)
    return {
        "maker_order": valid_order,
        "maker_signature": "01" + "ab" * 65,
        "taker_order": taker_order,
        "taker_signature": "00" + "cd" * 64,
        "fill_quantity": "1000000000",
        "fill_price": "100000000000",
    }


# =============================================================================
# SCHEMA LOADING
# =============================================================================


class TestSchemaLoading:
    """Загрузка и meta-validation схем из package data"""

    @pytest.mark.parametrize("schema_name", PAYLOAD_SCHEMAS)
    def test_schemas_are_valid(self, schema_name: str) -> None:
        schema = load_schema(schema_name)
        Draft202012Validator.check_schema(schema)
        assert schema["title"] == schema_name

    def test_schema_cached(self) -> None:
        assert load_schema("signed_order") is load_schema("signed_order")

    def test_missing_schema(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_schema("market_state")

    def test_schemas_ship_inside_package(self) -> None:
        """Схемы читаются через importlib.resources из src.core.contracts"""
        package_root = resources.files("src.core.contracts")
        names = sorted(entry.name for entry in schema_dir().iterdir() if entry.name.endswith(".json"))
        assert names == sorted(f"{name}.json" for name in PAYLOAD_SCHEMAS)
        for name in names:
            text = (package_root / "schema" / name).read_text(encoding="utf-8")
            assert isinstance(json.loads(text), dict)

    def test_named_validator(self) -> None:
        assert PayloadValidator("signed_order").schema_name == SignedOrderValidator.schema_name


# =============================================================================
# SIGNED ORDER
# =============================================================================


class TestSignedOrderContract:
    """Тесты контракта signed_order"""

    def test_valid(self, valid_signed_order) -> None:
        validate_signed_order(valid_signed_order)
        assert SignedOrderValidator().is_valid(valid_signed_order)

    @pytest.mark.parametrize("field", ["market", "maker", "is_buy", "price", "salt", "trigger_price"])
    def test_missing_order_field(self, valid_signed_order, field: str) -> None:
        data = copy.deepcopy(valid_signed_order)
        del data["order"][field]
        with pytest.raises(ValidationError):
            validate_signed_order(data)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("price", 100000000000),  # число, а не строка
            ("price", "0100"),  # ведущий ноль
            ("price", "-1"),
            ("price", "1.5"),
            ("salt", "1" * 40),  # шире u128
            ("is_buy", "true"),
            ("maker", "0x2"),  # не нормализован
            ("maker", "0x" + "CD" * 32),  # верхний регистр
        ],
    )
    def test_invalid_order_values(self, valid_signed_order, field: str, value) -> None:
        data = copy.deepcopy(valid_signed_order)
        data["order"][field] = value
        assert not SignedOrderValidator().is_valid(data)

    @pytest.mark.parametrize(
        "signature",
        [
            "0x01" + "ab" * 65,  # префикс 0x
            "02" + "ab" * 65,  # неизвестная кривая
            "01" + "ab" * 64,  # secp256k1 без recovery id
            "00" + "ab" * 65,  # ed25519 длиннее 64 байт
            "01" + "AB" * 65,  # верхний регистр
        ],
    )
    def test_invalid_signature(self, valid_signed_order, signature: str) -> None:
        data = dict(valid_signed_order, typed_signature=signature)
        with pytest.raises(ValidationError):
            validate_signed_order(data)

    def test_additional_properties(self, valid_signed_order) -> None:
        data = dict(valid_signed_order, hash="00")
        errors = SignedOrderValidator().errors(data)
        assert len(errors) == 1
        assert errors[0].startswith("$:")

    def test_generated_payload(self) -> None:
        keypair = Ed25519Keypair.generate()
        order = create_order(market="0x1", maker=keypair.address, price="1.25", salt=3)
        signed = asyncio.run(OrderSigner(keypair).get_signed_order(order))
        validate_signed_order(signed_order_call_args(signed))


# =============================================================================
# FILL INSTRUCTION
# =============================================================================


class TestFillInstructionContract:
    """Тесты контракта fill_instruction"""

    def test_valid(self, valid_fill_instruction) -> None:
        validate_fill_instruction(valid_fill_instruction)

    @pytest.mark.parametrize(
        "field",
        [
            "maker_order",
            "maker_signature",
            "taker_order",
            "taker_signature",
            "fill_quantity",
            "fill_price",
        ],
    )
    def test_missing_field(self, valid_fill_instruction, field: str) -> None:
        data = dict(valid_fill_instruction)
        del data[field]
        assert not FillInstructionValidator().is_valid(data)

    def test_zero_fill_quantity(self, valid_fill_instruction) -> None:
        data = dict(valid_fill_instruction, fill_quantity="0")
        with pytest.raises(ValidationError):
            validate_fill_instruction(data)

    def test_zero_fill_price_allowed(self, valid_fill_instruction) -> None:
        """Правила цены — ответственность контракта"""
        validate_fill_instruction(dict(valid_fill_instruction, fill_price="0"))

    def test_generated_payload(self) -> None:
        maker = Secp256k1Keypair.generate()
        taker = Ed25519Keypair.generate()
        order = create_order(market="0x1", maker=maker.address, is_buy=True, price=250, salt=9)
        trade = Trader.setup_trade(maker, taker, order)
        assert FillInstructionValidator().is_valid(trade.to_call_args())

    def test_errors_report_json_path(self, valid_fill_instruction) -> None:
        data = copy.deepcopy(valid_fill_instruction)
        data["taker_order"]["price"] = "-1"
        errors = FillInstructionValidator().errors(data)
        assert len(errors) == 1
        assert errors[0].startswith("$.taker_order.price:")
