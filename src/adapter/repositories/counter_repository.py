"""SQLAlchemy implementation of CounterRepository

Atomic increment-and-fetch on the invoice_counters table.
"""

from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.counter_repository import CounterRepository
from src.domain.invoice_counter import InvoiceCounter

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlAlchemyCounterRepository(CounterRepository):
    """
    Counter persistence using a single upsert statement

    INSERT ... ON CONFLICT (key) DO UPDATE SET value = value + 1 RETURNING value

    The row is created on first use with value 1 and only ever incremented,
    so concurrent callers never read the same value and no lock is taken.
    Runs inside the caller's transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def increment(self, key: str) -> int:
        dialect = self.session.get_bind().dialect.name
        insert = _INSERTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Atomic counter increment is not supported on '{dialect}'")

        table = InvoiceCounter.__table__
        statement = (
            insert(table)
            .values(key=key, value=1)
            .on_conflict_do_update(
                index_elements=[table.c.key],
                set_={"value": table.c.value + 1},
            )
            .returning(table.c.value)
        )
        result = await self.session.execute(statement)
        return int(result.scalar_one())
