# syncpos/database/repositories/catalog_repo.py
from __future__ import annotations

from ...dto import CategoryDTO, ProductDTO, ProductSupplierDTO, UnitDTO
from .base import DomainError, SyncRepo


class CategoriesRepo(SyncRepo[CategoryDTO]):
    table = "categories"
    dto_cls = CategoryDTO

    def _validate_parent(self, dto: CategoryDTO, tenant_id: str) -> None:
        # 0 / NULL mean top-level
        if not dto.parent_id:
            return
        if dto.local_id is not None and dto.parent_id == dto.local_id:
            raise DomainError("A category cannot be its own parent.")
        if self.get_by_id(dto.parent_id, tenant_id) is None:
            raise DomainError("Parent category does not exist.")

    def create_local(self, dto: CategoryDTO, tenant_id: str) -> CategoryDTO:
        self._validate_parent(dto, tenant_id)
        return super().create_local(dto, tenant_id)

    def update_local(self, dto: CategoryDTO, tenant_id: str) -> bool:
        self._validate_parent(dto, tenant_id)
        return super().update_local(dto, tenant_id)


class UnitsRepo(SyncRepo[UnitDTO]):
    table = "units"
    dto_cls = UnitDTO


class ProductsRepo(SyncRepo[ProductDTO]):
    table = "products"
    dto_cls = ProductDTO

    def find_by_barcode(self, barcode: str, tenant_id: str) -> ProductDTO | None:
        return self._fetch_one(
            "barcode = ? AND tenant_id = ? AND is_deleted = 0", (barcode.strip(), tenant_id)
        )

    def list_low_stock(self, tenant_id: str) -> list[ProductDTO]:
        return self._fetch_all(
            "tenant_id = ? AND is_deleted = 0 AND is_active = 1 AND current_stock <= min_stock_level",
            (tenant_id,),
            order="name",
        )


class ProductSuppliersRepo(SyncRepo[ProductSupplierDTO]):
    table = "product_suppliers"
    dto_cls = ProductSupplierDTO

    def list_for_product(self, product_id: int, tenant_id: str) -> list[ProductSupplierDTO]:
        return self._fetch_all(
            "product_id = ? AND tenant_id = ? AND is_deleted = 0", (product_id, tenant_id)
        )
