"""Unit tests for OverdueSweeperWorker

Tests cover:
- Worker initialization
- run_once with the sweep enabled and disabled
- Error handling
- run_forever keeps going after a failed cycle
"""

import asyncio
import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

from libs.result import Error, Return
from src.app.use_cases.invoicing.dtos import SweepResultDTO
from src.worker.overdue_sweeper import OverdueSweeperWorker


@pytest.fixture
def mock_session_factory():
    """Session factory yielding a mock async session"""
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session)


@pytest.fixture
def sample_sweep_result():
    return SweepResultDTO(
        invoices_checked=3,
        invoices_updated=2,
        updated_invoice_ids=["inv_1", "inv_2"],
        swept_at=datetime(2024, 6, 1, 3, 0, 0),
        execution_time_ms=12,
    )


class TestOverdueSweeperWorkerInit:

    @patch("src.worker.overdue_sweeper.ApplicationConfig")
    @patch("src.worker.overdue_sweeper.create_async_engine")
    def test_initializes_with_default_config(self, mock_create_engine, mock_app_config):
        """
        Given: No custom configuration provided
        When: Worker is initialized
        Then: Uses DB_URI from ApplicationConfig and owns its engine
        """
        mock_app_config.DB_URI = "sqlite+aiosqlite:///./invoices.db"
        mock_create_engine.return_value = MagicMock()

        worker = OverdueSweeperWorker()

        assert worker.db_uri == "sqlite+aiosqlite:///./invoices.db"
        mock_create_engine.assert_called_once()
        assert worker.engine is mock_create_engine.return_value

    @patch("src.worker.overdue_sweeper.create_async_engine")
    def test_uses_given_session_factory(self, mock_create_engine, mock_session_factory):
        worker = OverdueSweeperWorker(session_factory=mock_session_factory)

        assert worker.async_session_factory is mock_session_factory
        assert worker.engine is None
        mock_create_engine.assert_not_called()


@pytest.mark.asyncio
class TestOverdueSweeperWorkerRunOnce:

    @patch("src.worker.overdue_sweeper.ApplicationConfig")
    @patch("src.worker.overdue_sweeper.SweepOverdueInvoices")
    @patch("src.worker.overdue_sweeper.SqlAlchemyInvoiceRepository")
    @patch("src.worker.overdue_sweeper.SqlAlchemyUnitOfWork")
    async def test_run_once_executes_sweep(
        self,
        mock_uow_class,
        mock_invoice_repo_class,
        mock_use_case_class,
        mock_app_config,
        mock_session_factory,
        sample_sweep_result,
    ):
        """
        Given: The sweep is enabled
        When: run_once is called
        Then: The sweep use case runs on a fresh session and its result is returned
        """
        # Arrange
        mock_app_config.OVERDUE_SWEEP_ENABLED = True
        mock_use_case = MagicMock()
        mock_use_case.execute = AsyncMock(return_value=Return.ok(sample_sweep_result))
        mock_use_case_class.return_value = mock_use_case
        now = datetime(2024, 6, 1, 3, 0, 0)

        # Act
        worker = OverdueSweeperWorker(session_factory=mock_session_factory)
        result = await worker.run_once(now=now)

        # Assert
        assert result.invoices_updated == 2
        mock_use_case.execute.assert_awaited_once_with(now=now)
        mock_session_factory.assert_called_once()
        mock_use_case_class.assert_called_once_with(
            uow=mock_uow_class.return_value, invoice_repo=mock_invoice_repo_class.return_value
        )

    @patch("src.worker.overdue_sweeper.ApplicationConfig")
    @patch("src.worker.overdue_sweeper.SweepOverdueInvoices")
    async def test_run_once_skips_when_disabled(
        self, mock_use_case_class, mock_app_config, mock_session_factory
    ):
        mock_app_config.OVERDUE_SWEEP_ENABLED = False

        worker = OverdueSweeperWorker(session_factory=mock_session_factory)
        result = await worker.run_once()

        assert result.invoices_checked == 0
        assert result.invoices_updated == 0
        assert result.execution_time_ms == 0
        mock_use_case_class.assert_not_called()
        mock_session_factory.assert_not_called()

    @patch("src.worker.overdue_sweeper.ApplicationConfig")
    @patch("src.worker.overdue_sweeper.SweepOverdueInvoices")
    async def test_run_once_raises_on_error(
        self, mock_use_case_class, mock_app_config, mock_session_factory
    ):
        mock_app_config.OVERDUE_SWEEP_ENABLED = True
        mock_use_case = MagicMock()
        mock_use_case.execute = AsyncMock(return_value=Return.err(
            Error(code="OVERDUE_SWEEP_FAILED", message="Failed to sweep overdue invoices")
        ))
        mock_use_case_class.return_value = mock_use_case

        worker = OverdueSweeperWorker(session_factory=mock_session_factory)

        with pytest.raises(RuntimeError, match="Failed to sweep overdue invoices"):
            await worker.run_once()


@pytest.mark.asyncio
class TestOverdueSweeperWorkerRunForever:

    @patch("src.worker.overdue_sweeper.asyncio.sleep")
    async def test_failed_cycle_does_not_stop_the_loop(
        self, mock_sleep, mock_session_factory, sample_sweep_result
    ):
        worker = OverdueSweeperWorker(session_factory=mock_session_factory)
        worker.run_once = AsyncMock(side_effect=[RuntimeError("db down"), sample_sweep_result])
        mock_sleep.side_effect = [None, asyncio.CancelledError()]

        with pytest.raises(asyncio.CancelledError):
            await worker.run_forever(interval_seconds=60)

        assert worker.run_once.await_count == 2
        mock_sleep.assert_awaited_with(60)

    async def test_shutdown_disposes_owned_engine(self, mock_session_factory):
        worker = OverdueSweeperWorker(session_factory=mock_session_factory)
        worker.engine = MagicMock()
        worker.engine.dispose = AsyncMock()

        await worker.shutdown()

        worker.engine.dispose.assert_awaited_once()
