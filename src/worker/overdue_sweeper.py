"""Overdue Sweep Background Worker

Periodically moves unpaid invoices past their due date to overdue.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.invoicing import SweepOverdueInvoices, SweepResultDTO

logger = logging.getLogger(__name__)


class OverdueSweeperWorker:
    """
    Background worker for the overdue sweep

    Features:
    - Re-runs recalculation on sent, viewed and partial_paid invoices past due
    - Can run once or continuously
    - Configurable interval (default: hourly)

    Usage:
        # Run once
        worker = OverdueSweeperWorker()
        result = await worker.run_once()

        # Run continuously
        worker = OverdueSweeperWorker()
        await worker.run_forever(interval_seconds=3600)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        session_factory: Optional[sessionmaker] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            session_factory: Existing session factory (the engine is then not owned)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.engine = None

        if session_factory is not None:
            self.async_session_factory = session_factory
        else:
            self.engine = create_async_engine(self.db_uri, echo=False, future=True)
            self.async_session_factory = sessionmaker(
                self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
            )

        logger.info("OverdueSweeperWorker initialized")

    async def run_once(self, now: Optional[datetime] = None) -> SweepResultDTO:
        """
        Run the sweep once

        Returns:
            SweepResultDTO with the invoices moved to overdue
        """
        if not ApplicationConfig.OVERDUE_SWEEP_ENABLED:
            logger.info("Overdue sweep is disabled, skipping")
            return SweepResultDTO(
                invoices_checked=0,
                invoices_updated=0,
                updated_invoice_ids=[],
                swept_at=now or datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            uow = SqlAlchemyUnitOfWork(session)
            invoice_repo = SqlAlchemyInvoiceRepository(session)

            use_case = SweepOverdueInvoices(uow=uow, invoice_repo=invoice_repo)
            result = await use_case.execute(now=now)

            if result.is_err():
                logger.error(f"Overdue sweep failed: {result.error.message}")
                raise RuntimeError(f"Overdue sweep failed: {result.error.message}")

            return result.value

    async def run_forever(self, interval_seconds: int = 3600):
        """
        Run the sweep continuously at the given interval

        Args:
            interval_seconds: Seconds between runs (default: 1 hour)
        """
        logger.info(f"Starting continuous overdue sweep with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Overdue sweep cycle complete. "
                    f"Checked {result.invoices_checked} invoices, "
                    f"moved {result.invoices_updated} to overdue "
                    f"in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Overdue sweep cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        if self.engine is not None:
            await self.engine.dispose()
        logger.info("OverdueSweeperWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m src.worker.overdue_sweeper --once

        # Run continuously (default: OVERDUE_SWEEP_INTERVAL_SECONDS)
        python -m src.worker.overdue_sweeper

        # Run continuously with custom interval (in seconds)
        python -m src.worker.overdue_sweeper --interval 600
    """
    import argparse

    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Overdue Invoice Sweep Worker")
    parser.add_argument(
        "--once", action="store_true", help="Run once and exit"
    )
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.OVERDUE_SWEEP_INTERVAL_SECONDS,
        help="Interval between runs in seconds"
    )
    args = parser.parse_args()

    worker = OverdueSweeperWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Overdue sweep complete:")
            print(f"  Invoices checked: {result.invoices_checked}")
            print(f"  Moved to overdue: {result.invoices_updated}")
            print(f"  Execution time: {result.execution_time_ms}ms")
            for invoice_id in result.updated_invoice_ids:
                print(f"  - {invoice_id}")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
