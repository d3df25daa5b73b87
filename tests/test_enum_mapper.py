import json
from decimal import Decimal

import pytest

from erp_api.core.enum_mapper import DEFAULT_FAMILIES, EnumMapper, UnknownLabelError


@pytest.fixture
def mapper():
    return EnumMapper(DEFAULT_FAMILIES)


def test_every_label_round_trips(mapper):
    for family in mapper.families():
        for label in mapper.labels(family):
            assert mapper.to_label(family, mapper.to_code(family, label)) == label


def test_labels_match_case_insensitively(mapper):
    assert mapper.to_code("invoice_status", "Partially Paid") == "PARTIALLY_PAID"
    assert mapper.to_code("payment_method", "credit card") == "CREDIT_CARD"


def test_stored_code_is_accepted(mapper):
    assert mapper.to_code("order_status", "SHIPPED") == "SHIPPED"


def test_missing_value_uses_family_default(mapper):
    assert mapper.to_code("sale_status", None) == "COMPLETED"
    assert mapper.to_code("payment_status", "") == "RECEIVED"
    assert mapper.to_code("discount", None) == "NO_DISCOUNT"


def test_missing_value_without_default_is_rejected(mapper):
    with pytest.raises(UnknownLabelError):
        mapper.to_code("department", None)


def test_unknown_label_lists_allowed_values(mapper):
    with pytest.raises(UnknownLabelError) as exc_info:
        mapper.to_code("transaction_type", "Gift")

    assert isinstance(exc_info.value, ValueError)
    assert "Income, Expense, Transfer" in str(exc_info.value)


def test_unknown_code_passes_through_on_read(mapper):
    assert mapper.to_label("order_status", "LOST_IN_TRANSIT") == "LOST_IN_TRANSIT"
    assert mapper.to_label("order_status", None) is None


def test_discount_percent(mapper):
    assert mapper.discount_percent("10% Off") == Decimal("10")
    assert mapper.discount_percent("FIFTEEN_PERCENT") == Decimal("15")
    assert mapper.discount_percent(None) == Decimal("0")


def test_unknown_family_raises_key_error(mapper):
    with pytest.raises(KeyError):
        mapper.to_code("colour", "Red")


def test_duplicate_codes_are_rejected():
    with pytest.raises(ValueError):
        EnumMapper({"bad": {"default": None, "labels": {"A": "X", "B": "X"}}})


def test_file_overrides_only_named_families(tmp_path):
    path = tmp_path / "labels.json"
    path.write_text(json.dumps({
        "order_status": {"default": "NEW", "labels": {"New": "NEW", "Done": "DONE"}},
    }))

    mapper = EnumMapper.from_file(str(path))

    assert set(mapper.families()) == set(DEFAULT_FAMILIES)
    assert mapper.labels("order_status") == ["New", "Done"]
    assert mapper.to_code("order_status", None) == "NEW"
    assert mapper.to_label("order_status", "DONE") == "Done"
    assert mapper.to_code("invoice_status", "paid") == "PAID"
