# syncpos/database/repositories/parties_repo.py
from ...dto import CustomerDTO, SupplierDTO
from .base import SyncRepo


class SuppliersRepo(SyncRepo[SupplierDTO]):
    table = "suppliers"
    dto_cls = SupplierDTO


class CustomersRepo(SyncRepo[CustomerDTO]):
    table = "customers"
    dto_cls = CustomerDTO

    def search(self, term: str, tenant_id: str) -> list[CustomerDTO]:
        """LIKE match on name / email / phone."""
        pattern = f"%{term.strip()}%"
        return self._fetch_all(
            "tenant_id = ? AND is_deleted = 0 AND (name LIKE ? OR email LIKE ? OR phone LIKE ?)",
            (tenant_id, pattern, pattern, pattern),
            order="name",
        )
