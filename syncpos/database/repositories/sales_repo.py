# syncpos/database/repositories/sales_repo.py
from __future__ import annotations

import dataclasses
from typing import Optional

from ...dto import PaymentDTO, SaleDTO, SaleItemDTO, StockLedgerDTO
from ..tx import immediate_tx
from .base import SyncRepo


class SaleItemsRepo(SyncRepo[SaleItemDTO]):
    table = "sale_items"
    dto_cls = SaleItemDTO

    def list_for_sale(self, sale_id: int, tenant_id: str) -> list[SaleItemDTO]:
        return self._fetch_all("sale_id = ? AND tenant_id = ? AND is_deleted = 0", (sale_id, tenant_id))


class SalesRepo(SyncRepo[SaleDTO]):
    """
    Sale headers. Reads return headers only (`items` empty); loading or
    writing items is explicit so a header and its lines always come from
    one transaction.
    """

    table = "sales"
    dto_cls = SaleDTO

    def get_with_items(self, local_id: int, tenant_id: str) -> Optional[SaleDTO]:
        sale = self.get_by_id(local_id, tenant_id)
        if sale is None:
            return None
        sale.items = SaleItemsRepo(self.conn).list_for_sale(local_id, tenant_id)
        return sale

    def create_with_items(
        self, sale: SaleDTO, items: list[SaleItemDTO], tenant_id: str
    ) -> SaleDTO:
        """Insert header and lines atomically; returns the header with stored items."""
        items_repo = SaleItemsRepo(self.conn)
        with immediate_tx(self.conn):
            header = self._insert(sale, tenant_id)
            header.items = [
                items_repo._insert(
                    dataclasses.replace(item, sale_id=header.local_id),
                    tenant_id,
                )
                for item in items
            ]
        return header


class PaymentsRepo(SyncRepo[PaymentDTO]):
    table = "payments"
    dto_cls = PaymentDTO

    def list_for_sale(self, sale_id: int, tenant_id: str) -> list[PaymentDTO]:
        return self._fetch_all("sale_id = ? AND tenant_id = ? AND is_deleted = 0", (sale_id, tenant_id))


class StockLedgerRepo(SyncRepo[StockLedgerDTO]):
    table = "stock_ledger"
    dto_cls = StockLedgerDTO

    def on_hand(self, product_id: int, tenant_id: str) -> float:
        row = self.conn.execute(
            "SELECT COALESCE(SUM(quantity_delta), 0.0) AS q FROM stock_ledger "
            "WHERE product_id = ? AND tenant_id = ? AND is_deleted = 0",
            (product_id, tenant_id),
        ).fetchone()
        return float(row["q"])
