"""Tests for the admin discount code use cases."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from atelier.application.auth import ADMIN_ROLE, Principal
from atelier.application.create_discount_code import CreateDiscountCodeHandler
from atelier.application.delete_discount_code import DeleteDiscountCodeHandler
from atelier.application.dto import DiscountCodeSpec
from atelier.application.list_discount_codes import ListDiscountCodesHandler
from atelier.application.update_discount_code import UpdateDiscountCodeHandler
from atelier.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    EntityNotFoundError,
    ForbiddenError,
    ValidationError,
)
from tests.factories import save10
from tests.fakes import FakeDiscountCodeRepository

ADMIN = Principal("admin-1", "admin@example.com", ADMIN_ROLE)
CUSTOMER = Principal("user-1", "layla@example.com")


def _spec(**overrides) -> DiscountCodeSpec:
    fields = {
        "code": "spring25",
        "discount_type": "percentage",
        "discount_value": Decimal("25"),
        "min_purchase": Decimal("200"),
        "usage_limit": 50,
    }
    fields.update(overrides)
    return DiscountCodeSpec(**fields)


class TestCreateDiscountCode:

    def test_created_with_zero_uses(self):
        repo = FakeDiscountCodeRepository()

        dto = CreateDiscountCodeHandler(repo).handle(_spec(), ADMIN)

        assert dto.code == "SPRING25"
        assert dto.current_uses == 0
        assert dto.is_active is True
        assert dto.min_order_amount == "200.00"
        assert repo.get_by_code("spring25") is not None

    def test_duplicate_rejected(self):
        repo = FakeDiscountCodeRepository([save10()])
        with pytest.raises(ConflictError, match="already exists"):
            CreateDiscountCodeHandler(repo).handle(_spec(code="save10"), ADMIN)

    def test_unsupported_type_rejected(self):
        with pytest.raises(ValidationError, match="percentage and fixed"):
            CreateDiscountCodeHandler(FakeDiscountCodeRepository()).handle(
                _spec(discount_type="free_shipping"), ADMIN
            )

    def test_value_required(self):
        with pytest.raises(ValidationError, match="Value is required"):
            CreateDiscountCodeHandler(FakeDiscountCodeRepository()).handle(
                _spec(discount_value=None), ADMIN
            )

    def test_customers_forbidden(self):
        with pytest.raises(ForbiddenError):
            CreateDiscountCodeHandler(FakeDiscountCodeRepository()).handle(_spec(), CUSTOMER)

    def test_anonymous_unauthorized(self):
        with pytest.raises(AuthorizationError):
            CreateDiscountCodeHandler(FakeDiscountCodeRepository()).handle(_spec(), None)


class TestUpdateDiscountCode:

    def test_toggle_active(self):
        repo = FakeDiscountCodeRepository([save10()])

        dto = UpdateDiscountCodeHandler(repo).handle("save10", {"is_active": False}, ADMIN)

        assert dto.is_active is False
        assert repo.get_by_code("SAVE10").is_active is False

    def test_general_update_revalidates(self):
        repo = FakeDiscountCodeRepository([save10()])

        with pytest.raises(ValidationError, match="cannot exceed 100"):
            UpdateDiscountCodeHandler(repo).handle(
                "SAVE10", {"discount_value": Decimal("150")}, ADMIN
            )

    def test_general_update_applies_fields(self):
        repo = FakeDiscountCodeRepository([save10()])
        expiry = datetime(2027, 1, 1, tzinfo=timezone.utc)

        dto = UpdateDiscountCodeHandler(repo).handle(
            "SAVE10",
            {"discount_type": "fixed", "discount_value": Decimal("15"),
             "min_purchase": None, "valid_until": expiry},
            ADMIN,
        )

        assert dto.type == "fixed"
        assert dto.value == "15"
        assert dto.min_order_amount is None
        assert dto.expires_at == expiry.isoformat()

    def test_update_never_resets_usage(self):
        repo = FakeDiscountCodeRepository([save10(usage_count=7)])

        dto = UpdateDiscountCodeHandler(repo).handle(
            "SAVE10", {"description": "Spring sale"}, ADMIN
        )

        assert dto.current_uses == 7
        assert dto.description == "Spring sale"

    @pytest.mark.parametrize("value", [None, "false", 0])
    def test_toggle_needs_a_boolean(self, value):
        repo = FakeDiscountCodeRepository([save10()])

        with pytest.raises(ValidationError, match="true or false"):
            UpdateDiscountCodeHandler(repo).handle("SAVE10", {"is_active": value}, ADMIN)

        assert repo.get_by_code("SAVE10").is_active is True

    def test_unknown_field_rejected(self):
        repo = FakeDiscountCodeRepository([save10()])
        with pytest.raises(ValidationError, match="usage_count"):
            UpdateDiscountCodeHandler(repo).handle("SAVE10", {"usage_count": 0}, ADMIN)

    def test_missing_code(self):
        with pytest.raises(EntityNotFoundError):
            UpdateDiscountCodeHandler(FakeDiscountCodeRepository()).handle(
                "GHOST", {"is_active": True}, ADMIN
            )


class TestListAndDeleteDiscountCodes:

    def test_list_is_admin_only(self):
        repo = FakeDiscountCodeRepository([save10()])
        assert [c.code for c in ListDiscountCodesHandler(repo).handle(ADMIN)] == ["SAVE10"]
        with pytest.raises(ForbiddenError):
            ListDiscountCodesHandler(repo).handle(CUSTOMER)

    def test_delete(self):
        repo = FakeDiscountCodeRepository([save10()])
        DeleteDiscountCodeHandler(repo).handle("save10", ADMIN)
        assert repo.get_by_code("SAVE10") is None

    def test_delete_missing(self):
        with pytest.raises(EntityNotFoundError):
            DeleteDiscountCodeHandler(FakeDiscountCodeRepository()).handle("GHOST", ADMIN)
