"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass

from atelier.application.auth import TokenVerifier
from atelier.application.catalog_cache import CatalogCache
from atelier.application.email_content import OrderEmailComposer
from atelier.application.email_sender import EmailSender
from atelier.domain.repository.discount_code_repository import DiscountCodeRepository
from atelier.domain.repository.order_repository import OrderRepository
from atelier.domain.repository.product_repository import ProductRepository
from atelier.domain.repository.review_repository import ReviewRepository
from atelier.infrastructure.config import Settings
from atelier.infrastructure.email.smtp_sender import SmtpEmailSender
from atelier.infrastructure.persistence.json_discount_code_repository import (
    JsonDiscountCodeRepository,
)
from atelier.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from atelier.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from atelier.infrastructure.persistence.json_review_repository import (
    JsonReviewRepository,
)
from atelier.infrastructure.security.jwt_tokens import JwtTokenVerifier


@dataclass
class Container:
    settings: Settings
    catalog_cache: CatalogCache
    product_repo: ProductRepository
    order_repo: OrderRepository
    discount_repo: DiscountCodeRepository
    review_repo: ReviewRepository
    token_verifier: TokenVerifier
    email_composer: OrderEmailComposer
    email_sender: EmailSender


def build_container(settings: Settings | None = None) -> Container:
    settings = settings or Settings()
    data_dir = settings.data_dir
    cache: CatalogCache = CatalogCache(settings.catalog_cache_ttl_seconds)

    return Container(
        settings=settings,
        catalog_cache=cache,
        product_repo=JsonProductRepository(
            data_dir / "products.json", on_write=cache.invalidate
        ),
        order_repo=JsonOrderRepository(data_dir / "orders.json"),
        discount_repo=JsonDiscountCodeRepository(data_dir / "discount_codes.json"),
        review_repo=JsonReviewRepository(data_dir / "reviews.json"),
        token_verifier=JwtTokenVerifier(settings.jwt_secret, settings.jwt_algorithm),
        email_composer=OrderEmailComposer(
            store_name=settings.store_name,
            base_url=settings.base_url,
            support_email=settings.support_email,
        ),
        email_sender=SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.email_user,
            password=settings.email_pass,
            sender_name=settings.store_name,
            timeout=settings.smtp_timeout_seconds,
        ),
    )
