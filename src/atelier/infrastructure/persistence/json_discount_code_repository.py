"""JSON-file-backed implementation of DiscountCodeRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Callable

from atelier.domain.exceptions import ConflictError, EntityNotFoundError, ValidationError
from atelier.domain.model.discount import DiscountCode, DiscountType, normalize_code
from atelier.domain.model.value_objects import Money
from atelier.domain.repository.discount_code_repository import DiscountCodeRepository
from atelier.infrastructure.persistence.json_file import JsonFile


class JsonDiscountCodeRepository(DiscountCodeRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- DiscountCodeRepository interface -------------------------------------

    def get_by_code(self, code: str) -> DiscountCode | None:
        wanted = normalize_code(code)
        for raw in self._file.read():
            if raw["code"] == wanted:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[DiscountCode]:
        codes = [self._to_domain(raw) for raw in self._file.read()]
        codes.sort(key=lambda c: c.created_at, reverse=True)
        return codes

    def add(self, discount_code: DiscountCode) -> None:
        with self._file.transaction() as records:
            if any(raw["code"] == discount_code.code for raw in records):
                raise ConflictError(f"Discount code {discount_code.code} already exists")
            records.append(self._to_raw(discount_code))

    def save(self, discount_code: DiscountCode) -> None:
        """Update a code's editable fields.

        ``usage_count`` is kept from the stored record: it only moves
        through ``increment_usage``/``release_usage``.
        """
        with self._file.transaction() as records:
            for i, raw in enumerate(records):
                if raw["code"] == discount_code.code:
                    updated = self._to_raw(discount_code)
                    updated["usage_count"] = raw.get("usage_count", 0)
                    records[i] = updated
                    break
            else:
                raise EntityNotFoundError(f"Discount code {discount_code.code} not found")

    def delete(self, code: str) -> bool:
        wanted = normalize_code(code)
        with self._file.transaction() as records:
            before = len(records)
            records[:] = [r for r in records if r["code"] != wanted]
            return len(records) != before

    def increment_usage(self, code: str) -> DiscountCode:
        return self._mutate(code, lambda c: c.record_use())

    def release_usage(self, code: str) -> None:
        def release(c: DiscountCode) -> None:
            c.usage_count = max(0, c.usage_count - 1)

        self._mutate(code, release)

    # --- Atomic update --------------------------------------------------------

    def _mutate(self, code: str, change: Callable[[DiscountCode], None]) -> DiscountCode:
        wanted = normalize_code(code)
        with self._file.transaction() as records:
            for i, raw in enumerate(records):
                if raw["code"] == wanted:
                    discount_code = self._to_domain(raw)
                    change(discount_code)
                    records[i] = self._to_raw(discount_code)
                    break
            else:
                raise EntityNotFoundError(f"Discount code {wanted} not found")
        return discount_code

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _money(raw: str | None) -> Money | None:
        return Money(Decimal(str(raw))) if raw is not None else None

    @staticmethod
    def _to_raw(code: DiscountCode) -> dict:
        return {
            "code": code.code,
            "description": code.description,
            "discount_type": code.discount_type.value,
            "discount_value": str(code.discount_value),
            "min_purchase": code.min_purchase.to_plain() if code.min_purchase else None,
            "max_discount": code.max_discount.to_plain() if code.max_discount else None,
            "valid_until": code.valid_until.isoformat() if code.valid_until else None,
            "usage_limit": code.usage_limit,
            "usage_count": code.usage_count,
            "is_active": code.is_active,
            "created_at": code.created_at.isoformat(),
            "updated_at": code.updated_at.isoformat(),
        }

    @classmethod
    def _to_domain(cls, raw: dict) -> DiscountCode:
        try:
            discount_type = DiscountType(raw["discount_type"])
        except ValueError as exc:
            raise ValidationError(
                f"Discount code {raw['code']} has unsupported type {raw['discount_type']!r}"
            ) from exc
        valid_until = raw.get("valid_until")
        return DiscountCode(
            code=raw["code"],
            discount_type=discount_type,
            discount_value=Decimal(str(raw["discount_value"])),
            description=raw.get("description"),
            min_purchase=cls._money(raw.get("min_purchase")),
            max_discount=cls._money(raw.get("max_discount")),
            valid_until=datetime.fromisoformat(valid_until) if valid_until else None,
            usage_limit=raw.get("usage_limit"),
            usage_count=raw.get("usage_count", 0),
            is_active=raw.get("is_active", True),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
