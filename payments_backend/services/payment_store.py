import asyncio
import logging
from typing import Optional
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from payments_backend.core.exceptions import StoreError
from payments_backend.db.models import PaymentEvent
from payments_backend.schemas.webhook import PaymentFields

logger = logging.getLogger(__name__)

# if the event is redelivered, nothing happens in this insert.
# postgres and sqlite both understand ON CONFLICT ... DO NOTHING
insert_payment_sql = """
INSERT INTO payments (event_id, status, amount, currency, email, contact, created_at)
VALUES (:event_id, :status, :amount, :currency, :email, :contact, CURRENT_TIMESTAMP)
ON CONFLICT (event_id) DO NOTHING
"""


class PaymentStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], timeout: float = 10.0):
        self.session_factory = session_factory
        self.timeout = timeout

    async def insert_if_absent(self, event_id: str, fields: PaymentFields) -> bool:
        """
        Insert one payment event unless a row with the same event_id exists.
        Returns True when a row was written, False for a duplicate.

        The unique index on event_id decides, so concurrent deliveries of the
        same event still produce a single row.
        """
        try:
            return await asyncio.wait_for(self._insert(event_id, fields), timeout=self.timeout)
        except (SQLAlchemyError, asyncio.TimeoutError) as e:
            logger.error(f"failed to store payment event {event_id}: {e}", exc_info=True)
            raise StoreError()

    async def _insert(self, event_id: str, fields: PaymentFields) -> bool:
        async with self.session_factory() as db:
            result = await db.execute(text(insert_payment_sql), {
                "event_id": event_id,
                "status": fields.status,
                "amount": fields.amount,
                "currency": fields.currency,
                "email": fields.email,
                "contact": fields.contact,
            })
            await db.commit()
            return result.rowcount > 0

    async def get(self, event_id: str) -> Optional[PaymentEvent]:
        async with self.session_factory() as db:
            result = await db.execute(
                select(PaymentEvent).where(PaymentEvent.event_id == event_id)
            )
            return result.scalar_one_or_none()

    async def count(self) -> int:
        async with self.session_factory() as db:
            result = await db.execute(select(func.count()).select_from(PaymentEvent))
            return result.scalar_one()
