"""Product aggregate.

Products live independently of orders.  Admin screens own most of a
product's fields; the core only ever touches per-size stock counts, the
out-of-stock flag and the derived rating fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from atelier.domain.exceptions import InsufficientStockError, ValidationError
from atelier.domain.model.value_objects import Money

MAX_RATING = Decimal("5")


@dataclass
class ProductSize:
    """One purchasable variant of a product.

    ``stock_count`` of ``None`` means stock is not tracked for this size.
    """

    size: str
    volume: str = ""
    original_price: Money | None = None
    discounted_price: Money | None = None
    stock_count: int | None = None

    def __post_init__(self) -> None:
        if self.stock_count is not None and self.stock_count < 0:
            raise ValidationError(
                f"Stock count for size {self.size} cannot be negative"
            )
        if (
            self.original_price is not None
            and self.discounted_price is not None
            and self.discounted_price > self.original_price
        ):
            raise ValidationError(
                f"Discounted price {self.discounted_price} exceeds original "
                f"price {self.original_price} for size {self.size}"
            )

    @property
    def effective_price(self) -> Money:
        """The price actually charged; ``original_price`` is display-only."""
        if self.discounted_price is not None:
            return self.discounted_price
        if self.original_price is not None:
            return self.original_price
        return Money.zero()

    @property
    def is_tracked(self) -> bool:
        return self.stock_count is not None


@dataclass
class Product:
    """A product in the catalog.

    This is an aggregate root.  ``is_out_of_stock`` is stored for readers
    but always recomputed from the sizes and ``out_of_stock_override``
    whenever stock changes.
    """

    id: str
    name: str
    sizes: list[ProductSize] = field(default_factory=list)
    category: str = ""
    image: str = ""
    rating: Decimal = Decimal("0")
    review_count: int = 0
    is_active: bool = True
    is_out_of_stock: bool = False
    out_of_stock_override: bool = False

    # --- Stock ----------------------------------------------------------------

    def find_size(self, size: str) -> ProductSize | None:
        for entry in self.sizes:
            if entry.size == size:
                return entry
        return None

    def check_available(self, size: str, quantity: int) -> None:
        """Raise InsufficientStockError if a tracked size cannot cover *quantity*.

        Sizes the product does not list, and untracked sizes, always pass.
        """
        entry = self.find_size(size)
        if entry is None or not entry.is_tracked:
            return
        if quantity > entry.stock_count:
            raise InsufficientStockError(
                product_id=self.id,
                product_name=self.name,
                size=size,
                available=entry.stock_count,
                requested=quantity,
            )

    def decrement_stock(self, size: str, quantity: int) -> bool:
        """Take *quantity* units of *size* out of stock.

        Returns False (and changes nothing) when the size is absent or
        untracked.  Raises InsufficientStockError when the tracked count is
        too low, so the caller never floors a count below what was sold.
        """
        if quantity <= 0:
            raise ValidationError("Decrement quantity must be positive")
        entry = self.find_size(size)
        if entry is None or not entry.is_tracked:
            return False
        self.check_available(size, quantity)
        entry.stock_count -= quantity
        self.refresh_stock_flag()
        return True

    def restock(self, size: str, quantity: int) -> None:
        """Give back units previously taken by ``decrement_stock``."""
        if quantity <= 0:
            raise ValidationError("Restock quantity must be positive")
        entry = self.find_size(size)
        if entry is None or not entry.is_tracked:
            return
        entry.stock_count += quantity
        self.refresh_stock_flag()

    def set_stock(self, size: str, stock_count: int | None) -> None:
        entry = self.find_size(size)
        if entry is None:
            raise ValidationError(f"Product {self.id} has no size '{size}'")
        if stock_count is not None and stock_count < 0:
            raise ValidationError("Stock count cannot be negative")
        entry.stock_count = stock_count
        self.refresh_stock_flag()

    @property
    def all_sizes_depleted(self) -> bool:
        if not self.sizes:
            return False
        return all(s.is_tracked and s.stock_count <= 0 for s in self.sizes)

    def refresh_stock_flag(self) -> None:
        self.is_out_of_stock = self.out_of_stock_override or self.all_sizes_depleted

    # --- Ratings --------------------------------------------------------------

    def apply_rating(self, rating: Decimal, review_count: int) -> None:
        """Store the aggregated rating, rounded half-up to two decimals."""
        if review_count < 0:
            raise ValidationError("Review count cannot be negative")
        if rating < 0 or rating > MAX_RATING:
            raise ValidationError(f"Rating must be between 0 and 5, got {rating}")
        self.rating = rating.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        self.review_count = review_count
