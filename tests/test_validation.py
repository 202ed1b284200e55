import pytest

from app import schemas
from app.errors import ValidationFailed
from app.validation import field_errors, validate


def test_validate_maps_rules_to_codes():
    with pytest.raises(ValidationFailed) as exc_info:
        validate(schemas.CustomerUpdate, {"email": "nope", "first_name": "Ana Maria", "last_name": None})

    errors = {e.field: e.as_dict() for e in exc_info.value.errors()}
    assert errors["email"] == {"code": "email", "field": "email", "message": "email validation failed"}
    assert errors["first_name"]["code"] == "alpha"
    assert errors["last_name"]["code"] == "required"


def test_validate_strips_and_returns_model():
    data = validate(schemas.CategoryCreate, {"name": "  Watches ", "description": "All"})

    assert data.name == "Watches"


def test_validate_none_body_reports_every_field():
    with pytest.raises(ValidationFailed) as exc_info:
        validate(schemas.SettingCreate, None)

    assert sorted(e.field for e in exc_info.value.errors()) == ["key", "value"]


def test_field_errors_drop_location_prefix():
    errors = field_errors([
        {"type": "missing", "loc": ("body", "street1"), "msg": "Field required"},
        {"type": "int_parsing", "loc": ("path", "customer_id"), "msg": "bad int"},
        {"type": "list_type", "loc": ("body", "category_ids", 0), "msg": "bad"},
    ])

    assert [(e.code, e.field) for e in errors] == [
        ("required", "street1"),
        ("number", "customer_id"),
        ("array", "category_ids.0"),
    ]
