"""FastAPI adapter for the storefront.

Routes stay thin: parse the body, resolve the caller, call one handler,
camelize the DTO it returns.  All error mapping lives in ``errors``.
"""

from __future__ import annotations

import logging
from dataclasses import fields, is_dataclass
from datetime import timedelta
from typing import Any

from fastapi import Depends, FastAPI, Header
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic.alias_generators import to_camel

from atelier.application.auth import Principal
from atelier.application.create_discount_code import CreateDiscountCodeHandler
from atelier.application.delete_discount_code import DeleteDiscountCodeHandler
from atelier.application.list_discount_codes import ListDiscountCodesHandler
from atelier.application.list_orders import ListOrdersHandler
from atelier.application.list_products import ListProductsHandler, ShowProductHandler
from atelier.application.recalculate_rating import RecalculateRatingHandler
from atelier.application.send_order_confirmation import SendOrderConfirmationHandler
from atelier.application.send_order_update import SendOrderUpdateHandler
from atelier.application.show_order import ShowOrderHandler
from atelier.application.submit_order import SubmitOrderHandler
from atelier.application.update_discount_code import UpdateDiscountCodeHandler
from atelier.application.update_order_status import UpdateOrderStatusHandler
from atelier.application.validate_discount import ValidateDiscountHandler
from atelier.infrastructure.bootstrap import Container, build_container
from atelier.infrastructure.http.errors import register_error_handlers
from atelier.infrastructure.http.schemas import (
    DiscountCodeCreateIn,
    DiscountCodeUpdateIn,
    DiscountValidateIn,
    OrderConfirmationEmailIn,
    OrderIn,
    OrderStatusIn,
    OrderUpdateEmailIn,
    RecalculateRatingIn,
)
from atelier.infrastructure.logging_config import configure_logging

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def camelize(value: Any) -> Any:
    """Turn DTO dataclasses into camelCase JSON-ready dicts.

    Free-form dict payloads (package details, payment details) pass
    through untouched.
    """
    if is_dataclass(value) and not isinstance(value, type):
        return {to_camel(f.name): camelize(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [camelize(v) for v in value]
    return value


def bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> str | None:
    return credentials.credentials if credentials else None


def create_app(container: Container | None = None) -> FastAPI:
    container = container or build_container()
    settings = container.settings
    configure_logging(settings.log_level)

    app = FastAPI(title=f"{settings.store_name} storefront")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    submit_order = SubmitOrderHandler(
        order_repo=container.order_repo,
        product_repo=container.product_repo,
        discount_repo=container.discount_repo,
        token_verifier=container.token_verifier,
        idempotency_window=timedelta(seconds=settings.idempotency_window_seconds),
        enforce_client_totals=settings.enforce_client_totals,
    )
    list_orders = ListOrdersHandler(container.order_repo)
    show_order = ShowOrderHandler(container.order_repo)
    update_status = UpdateOrderStatusHandler(container.order_repo)
    list_products = ListProductsHandler(container.product_repo, container.catalog_cache)
    show_product = ShowProductHandler(container.product_repo)
    validate_discount = ValidateDiscountHandler(container.discount_repo)
    create_code = CreateDiscountCodeHandler(container.discount_repo)
    list_codes = ListDiscountCodesHandler(container.discount_repo)
    update_code = UpdateDiscountCodeHandler(container.discount_repo)
    delete_code = DeleteDiscountCodeHandler(container.discount_repo)
    recalculate = RecalculateRatingHandler(container.product_repo, container.review_repo)
    send_confirmation = SendOrderConfirmationHandler(
        container.email_composer, container.email_sender
    )
    send_update = SendOrderUpdateHandler(container.email_composer, container.email_sender)

    def current_principal(token: str | None = Depends(bearer_token)) -> Principal | None:
        # Missing token is left to the handler; a bad one is rejected here.
        if token is None:
            return None
        return container.token_verifier.verify(token)

    # --- Orders ---------------------------------------------------------------

    @app.post("/orders", status_code=201)
    def create_order(
        body: OrderIn,
        token: str | None = Depends(bearer_token),
        idempotency_key: str | None = Header(default=None),
    ):
        order = submit_order.handle(body.to_submission(idempotency_key), auth_token=token)
        return {
            "success": True,
            "order": camelize(order),
            "message": "Order created successfully",
        }

    @app.get("/orders")
    def get_orders(principal: Principal | None = Depends(current_principal)):
        return camelize(list_orders.handle(principal))

    @app.get("/orders/{order_id}")
    def get_order(order_id: str, principal: Principal | None = Depends(current_principal)):
        return camelize(show_order.handle(order_id, principal))

    @app.patch("/orders/{order_id}/status")
    def change_order_status(
        order_id: str,
        body: OrderStatusIn,
        principal: Principal | None = Depends(current_principal),
    ):
        return camelize(update_status.handle(order_id, body.status, principal))

    # --- Catalog --------------------------------------------------------------

    @app.get("/products")
    def get_products(category: str | None = None):
        return camelize(list_products.handle(category))

    @app.get("/products/{product_id}")
    def get_product(product_id: str):
        return camelize(show_product.handle(product_id))

    # --- Discount codes -------------------------------------------------------

    @app.post("/discount-codes/validate")
    def validate_code(body: DiscountValidateIn):
        items = [item.to_spec() for item in body.items] if body.items else None
        return camelize(validate_discount.handle(body.code, body.order_amount, items))

    @app.post("/discount-codes", status_code=201)
    def create_discount_code(
        body: DiscountCodeCreateIn,
        principal: Principal | None = Depends(current_principal),
    ):
        created = create_code.handle(body.to_spec(), principal)
        return {"success": True, "discountCode": camelize(created)}

    @app.get("/discount-codes")
    def get_discount_codes(principal: Principal | None = Depends(current_principal)):
        return camelize(list_codes.handle(principal))

    @app.put("/discount-codes/{code}")
    def edit_discount_code(
        code: str,
        body: DiscountCodeUpdateIn,
        principal: Principal | None = Depends(current_principal),
    ):
        updated = update_code.handle(code, body.to_changes(), principal)
        return {"success": True, "discountCode": camelize(updated)}

    @app.delete("/discount-codes/{code}")
    def remove_discount_code(
        code: str,
        principal: Principal | None = Depends(current_principal),
    ):
        delete_code.handle(code, principal)
        return {"success": True, "message": "Discount code deleted"}

    # --- Reviews --------------------------------------------------------------

    @app.post("/reviews/recalculate")
    def recalculate_rating(body: RecalculateRatingIn):
        rating = recalculate.handle(body.product_id)
        message = (
            "Rating recalculated successfully"
            if rating.review_count
            else "No reviews found for this product"
        )
        return {"success": True, "message": message, **camelize(rating)}

    # --- Notifications --------------------------------------------------------

    @app.post("/emails/order-confirmation")
    def email_order_confirmation(body: OrderConfirmationEmailIn):
        send_confirmation.handle(body.order.to_domain())
        return {"success": True, "message": "Confirmation email sent"}

    @app.post("/emails/order-update")
    def email_order_update(body: OrderUpdateEmailIn):
        send_update.handle(body.order.to_domain(), body.previous_status, body.new_status)
        return {"success": True, "message": "Update email sent"}

    logger.info("Storefront API ready (data dir %s)", settings.data_dir)
    return app
