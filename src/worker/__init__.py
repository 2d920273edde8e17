"""Background workers for the invoice ledger"""
from .overdue_sweeper import OverdueSweeperWorker

__all__ = ["OverdueSweeperWorker"]
