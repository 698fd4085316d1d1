# backend/learnhub/db/repositories/invoice_repository.py
from typing import Any, Dict, List, Optional
from uuid import UUID
from sqlalchemy import select, update, func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.db.models.invoice import Invoice, InvoiceItem, InvoiceSequence
from learnhub.db.repositories.base import BaseRepository
from learnhub.pricing.invoicing import year_bounds


class InvoiceRepository(BaseRepository[Invoice]):
    """Repository for Invoice operations"""

    def __init__(self, session: AsyncSession):
        super().__init__(Invoice, session)

    async def count_in_year(self, year: int) -> int:
        """Count invoices created in [year-01-01, year+1-01-01)"""
        start, end = year_bounds(year)
        result = await self.session.execute(
            select(func.count(Invoice.id))
            .where(Invoice.created_at >= start)
            .where(Invoice.created_at < end)
        )
        return result.scalar() or 0

    async def next_sequence(self, year: int) -> int:
        """
        Allocate the next invoice sequence number for a year.

        The per-year counter row is incremented with UPDATE ... RETURNING so
        concurrent transactions serialize on the row lock. The first
        allocation of a year seeds the counter from the invoices already on
        file, so numbering continues from whatever exists.
        """
        value = await self._increment(year)
        if value is not None:
            return value

        seed = await self.count_in_year(year)
        insert = pg_insert if self.session.bind.dialect.name == "postgresql" else sqlite_insert
        await self.session.execute(
            insert(InvoiceSequence)
            .values(year=year, last_value=seed)
            .on_conflict_do_nothing(index_elements=["year"])
        )

        value = await self._increment(year)
        if value is None:
            raise RuntimeError(f"Invoice sequence for {year} could not be allocated")
        return value

    async def _increment(self, year: int) -> Optional[int]:
        result = await self.session.execute(
            update(InvoiceSequence)
            .where(InvoiceSequence.year == year)
            .values(last_value=InvoiceSequence.last_value + 1)
            .returning(InvoiceSequence.last_value)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none()

    async def create_with_items(self, obj_in: Dict[str, Any], items: List[Dict[str, Any]]) -> Invoice:
        """Create an invoice together with its line items"""
        invoice = Invoice(**obj_in, items=[InvoiceItem(**item) for item in items])
        self.session.add(invoice)
        await self.session.flush()
        return invoice

    async def get_by_activation(self, course_activation_id: UUID) -> Optional[Invoice]:
        result = await self.session.execute(
            select(Invoice)
            .where(Invoice.course_activation_id == course_activation_id)
            .order_by(Invoice.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()
