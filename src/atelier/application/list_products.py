"""Application service: List / Show Products use cases (query).

Customer-facing reads: inactive products are invisible here.
"""

from __future__ import annotations

from atelier.application.catalog_cache import CatalogCache
from atelier.application.dto import ProductDTO
from atelier.application.mapping import product_to_dto
from atelier.domain.exceptions import EntityNotFoundError
from atelier.domain.repository.product_repository import ProductRepository


class ListProductsHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        cache: CatalogCache[list[ProductDTO]] | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._cache = cache

    def handle(self, category: str | None = None) -> list[ProductDTO]:
        if self._cache is None:
            return self._load(category)
        return self._cache.get_or_load(("list", category), lambda: self._load(category))

    def _load(self, category: str | None) -> list[ProductDTO]:
        return [
            product_to_dto(p)
            for p in self._product_repo.list_all()
            if p.is_active and (category is None or p.category == category)
        ]


class ShowProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str) -> ProductDTO:
        product = self._product_repo.get_by_id(product_id)
        if product is None or not product.is_active:
            raise EntityNotFoundError(f"Product {product_id} not found")
        return product_to_dto(product)
