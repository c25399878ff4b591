"""Item schema validation — name, description, status and email rules.

Invariants:
    - name 2-100 chars after stripping
    - description at most 500 chars, optional
    - status restricted to the four ItemStatus values
    - email must be a valid address
"""

import pytest
from pydantic import ValidationError

from app.core.domain_types import ItemStatus
from app.schemas.item import ItemResponse, ItemWrite


def _valid(**overrides) -> dict:
    data = {
        "name": "Test Item",
        "description": "Test Description",
        "status": "PENDING",
        "email": "test@example.com",
    }
    data.update(overrides)
    return data


def test_valid_item():
    item = ItemWrite(**_valid())
    assert item.status is ItemStatus.PENDING


def test_description_optional():
    item = ItemWrite(**_valid(description=None))
    assert item.description is None


def test_empty_name_rejected():
    with pytest.raises(ValidationError):
        ItemWrite(**_valid(name=""))


def test_whitespace_name_rejected():
    with pytest.raises(ValidationError):
        ItemWrite(**_valid(name="   a  "))


def test_name_is_stripped():
    assert ItemWrite(**_valid(name="  Widget ")).name == "Widget"


def test_description_too_long_rejected():
    with pytest.raises(ValidationError):
        ItemWrite(**_valid(description="a" * 501))


def test_invalid_status_rejected():
    with pytest.raises(ValidationError):
        ItemWrite(**_valid(status="INVALID_STATUS"))


def test_invalid_email_rejected():
    with pytest.raises(ValidationError):
        ItemWrite(**_valid(email="invalid-email"))


def test_response_from_attributes():
    class _Row:
        id = 1
        name = "Test Item"
        description = None
        status = "PROCESSED"
        email = "test@example.com"

    resp = ItemResponse.model_validate(_Row())
    assert resp.status is ItemStatus.PROCESSED
