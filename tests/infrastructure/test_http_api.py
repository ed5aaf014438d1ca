"""End-to-end tests for the FastAPI adapter over in-memory fakes."""

import pytest
from fastapi.testclient import TestClient

from atelier.application.auth import ADMIN_ROLE, Principal
from atelier.application.catalog_cache import CatalogCache
from atelier.application.dto import OrderLineItemDTO
from atelier.application.email_content import OrderEmailComposer
from atelier.domain.exceptions import EmailConfigurationError
from atelier.domain.model.review import Review
from atelier.infrastructure.bootstrap import Container
from atelier.infrastructure.config import Settings
from atelier.infrastructure.http.app import camelize, create_app
from atelier.infrastructure.http.errors import STATUS_BY_KIND
from tests.factories import gown, save10, scarf
from tests.fakes import (
    FakeDiscountCodeRepository,
    FakeEmailSender,
    FakeOrderRepository,
    FakeProductRepository,
    FakeReviewRepository,
    FakeTokenVerifier,
)

ADMIN = {"Authorization": "Bearer admin-token"}
LAYLA = {"Authorization": "Bearer layla-token"}

ADDRESS = {
    "name": "Layla Haddad",
    "address": "12 Palm Street",
    "city": "Riyadh",
    "email": "layla@example.com",
    "countryCode": "SA",
}


def _cart(quantity=1, **extra):
    body = {
        "items": [{"id": "gown-1", "name": "Silk Gown", "price": 120,
                   "quantity": quantity, "size": "M"}],
        "shippingAddress": ADDRESS,
        "total": 120 * quantity,
    }
    body.update(extra)
    return body


@pytest.fixture
def container(tmp_path):
    return Container(
        settings=Settings(data_dir=tmp_path, jwt_secret="unused"),
        catalog_cache=CatalogCache(0),
        product_repo=FakeProductRepository([gown(), scarf()]),
        order_repo=FakeOrderRepository(),
        discount_repo=FakeDiscountCodeRepository([save10()]),
        review_repo=FakeReviewRepository([Review("r1", "gown-1", 5), Review("r2", "gown-1", 4)]),
        token_verifier=FakeTokenVerifier({
            "admin-token": Principal("admin-1", "admin@example.com", ADMIN_ROLE),
            "layla-token": Principal("user-1", "layla@example.com"),
        }),
        email_composer=OrderEmailComposer("Atelier", "https://shop.example.com", "help@example.com"),
        email_sender=FakeEmailSender(),
    )


@pytest.fixture
def client(container):
    return TestClient(create_app(container))


class TestOrderRoutes:

    def test_guest_checkout(self, client, container):
        response = client.post("/orders", json=_cart())

        assert response.status_code == 201
        order = response.json()["order"]
        assert order["userId"] == "guest"
        assert order["status"] == "pending"
        assert order["shippingAddress"]["countryCode"] == "SA"
        assert order["items"][0]["unitPrice"] == "120.00"
        assert container.product_repo.stock_of("gown-1", "M") == 1

    def test_signed_in_checkout(self, client):
        response = client.post("/orders", json=_cart(), headers=LAYLA)
        assert response.json()["order"]["userId"] == "user-1"

    def test_forged_token_still_checks_out_as_guest(self, client):
        response = client.post("/orders", json=_cart(), headers={"Authorization": "Bearer nope"})
        assert response.status_code == 201
        assert response.json()["order"]["userId"] == "guest"

    def test_insufficient_stock(self, client):
        response = client.post("/orders", json=_cart(quantity=3))

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["kind"] == "insufficient_stock"
        assert error["available"] == 2
        assert error["requested"] == 3
        assert error["productId"] == "gown-1"

    def test_malformed_body_is_a_validation_error(self, client):
        body = _cart()
        del body["items"][0]["quantity"]

        response = client.post("/orders", json=body)

        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "validation"

    def test_idempotency_key_header(self, client):
        headers = {"Idempotency-Key": "cart-42"}
        first = client.post("/orders", json=_cart(), headers=headers).json()
        second = client.post("/orders", json=_cart(), headers=headers).json()
        assert first["order"]["id"] == second["order"]["id"]

    def test_listing_needs_a_token(self, client):
        response = client.get("/orders")
        assert response.status_code == 401
        assert response.json()["error"]["kind"] == "authorization"

    def test_listing_with_bad_token(self, client):
        response = client.get("/orders", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_customer_lists_own_orders(self, client):
        client.post("/orders", json=_cart(), headers=LAYLA)
        client.post("/orders", json=_cart())

        orders = client.get("/orders", headers=LAYLA).json()

        assert [o["userId"] for o in orders] == ["user-1"]

    def test_admin_moves_status(self, client):
        order_id = client.post("/orders", json=_cart()).json()["order"]["id"]

        response = client.patch(f"/orders/{order_id}/status", json={"status": "shipped"},
                                 headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["previousStatus"] == "pending"
        assert response.json()["order"]["status"] == "shipped"

    def test_customer_cannot_move_status(self, client):
        order_id = client.post("/orders", json=_cart(), headers=LAYLA).json()["order"]["id"]
        response = client.patch(f"/orders/{order_id}/status", json={"status": "shipped"},
                                headers=LAYLA)
        assert response.status_code == 403

    def test_someone_elses_order_is_not_found(self, client):
        order_id = client.post("/orders", json=_cart()).json()["order"]["id"]
        assert client.get(f"/orders/{order_id}", headers=LAYLA).status_code == 404


class TestCatalogRoutes:

    def test_products_are_camel_cased(self, client):
        products = client.get("/products").json()
        assert {p["id"] for p in products} == {"gown-1", "scarf-1"}
        assert "isOutOfStock" in products[0]

    def test_category_query(self, client):
        assert [p["id"] for p in client.get("/products?category=evening").json()] == ["gown-1"]

    def test_unknown_product(self, client):
        assert client.get("/products/ghost").status_code == 404


class TestDiscountRoutes:

    def test_validate_quote(self, client):
        response = client.post("/discount-codes/validate",
                               json={"code": "save10", "orderAmount": 120})
        assert response.json()["discountAmount"] == "12.00"

    def test_validate_below_minimum(self, client):
        response = client.post("/discount-codes/validate",
                               json={"code": "SAVE10", "orderAmount": 80})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["kind"] == "discount_rejected"
        assert error["message"] == "Add 20.00 more to use this code (minimum order: 100.00)"
        assert error["minOrderRemaining"] == "20.00"

    def test_admin_lifecycle(self, client):
        created = client.post("/discount-codes", headers=ADMIN, json={
            "code": "vip", "type": "fixed", "value": 25, "maxUses": 10,
        })
        assert created.status_code == 201
        assert created.json()["discountCode"]["maxUses"] == 10

        toggled = client.put("/discount-codes/VIP", headers=ADMIN, json={"isActive": False})
        assert toggled.json()["discountCode"]["isActive"] is False

        assert client.delete("/discount-codes/VIP", headers=ADMIN).status_code == 200
        assert [c["code"] for c in client.get("/discount-codes", headers=ADMIN).json()] == [
            "SAVE10"
        ]

    def test_null_toggle_rejected(self, client):
        response = client.put("/discount-codes/SAVE10", headers=ADMIN, json={"isActive": None})

        assert response.status_code == 400
        assert client.get("/discount-codes", headers=ADMIN).json()[0]["isActive"] is True

    def test_customers_cannot_manage_codes(self, client):
        response = client.post("/discount-codes", headers=LAYLA,
                               json={"code": "X", "type": "fixed", "value": 5})
        assert response.status_code == 403
        assert response.json()["error"]["kind"] == "forbidden"


class TestReviewRoutes:

    def test_recalculate(self, client, container):
        response = client.post("/reviews/recalculate", json={"productId": "gown-1"})

        assert response.json()["rating"] == "4.50"
        assert response.json()["reviewCount"] == 2
        assert container.product_repo.get_by_id("gown-1").review_count == 2

    def test_recalculate_without_id(self, client):
        assert client.post("/reviews/recalculate", json={}).status_code == 400


class TestEmailRoutes:

    def _snapshot(self, **address):
        return {
            "id": "order-1700000000000-abc123xyz",
            "userId": "user-1",
            "status": "pending",
            "items": [{"productId": "gown-1", "name": "Silk Gown", "price": "120",
                       "quantity": 1, "size": "M"}],
            "shippingAddress": {**ADDRESS, **address},
            "total": "120",
        }

    def test_confirmation(self, client, container):
        response = client.post("/emails/order-confirmation", json={"order": self._snapshot()})

        assert response.json() == {"success": True, "message": "Confirmation email sent"}
        assert "450.00 SAR" in container.email_sender.sent[0].text

    def test_update(self, client, container):
        response = client.post("/emails/order-update", json={
            "order": self._snapshot(), "previousStatus": "shipped", "newStatus": "delivered",
        })
        assert response.status_code == 200
        assert container.email_sender.sent[0].subject.endswith("- Delivered")

    def test_missing_customer_email(self, client):
        response = client.post("/emails/order-confirmation",
                               json={"order": self._snapshot(email="")})
        assert response.status_code == 400

    def test_missing_configuration(self, client, container):
        container.email_sender.error = EmailConfigurationError("Email configuration missing")
        response = client.post("/emails/order-confirmation", json={"order": self._snapshot()})
        assert response.status_code == 500
        assert response.json()["error"]["kind"] == "email_configuration"


def test_every_error_kind_has_a_status():
    assert STATUS_BY_KIND["trust_boundary"] == 409
    assert STATUS_BY_KIND["email_delivery"] == 502
    assert STATUS_BY_KIND["infrastructure"] == 503


def test_camelize_leaves_free_form_payloads_alone():
    item = OrderLineItemDTO(
        kind="gift_package", line_id="l1", product_id="bundle-9", name="Gift Box",
        unit_price="60.00", quantity=1, line_total="60.00", size="", volume="",
        image="", category="", package_details={"gift_note": "Happy birthday"},
    )

    result = camelize([item])[0]

    assert result["lineTotal"] == "60.00"
    assert result["packageDetails"] == {"gift_note": "Happy birthday"}
