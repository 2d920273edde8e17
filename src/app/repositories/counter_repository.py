"""Counter Repository Interface"""

from abc import ABC, abstractmethod


class CounterRepository(ABC):
    """
    Keyed sequence storage

    increment() must be atomic: concurrent callers for the same key never
    observe the same value, without any lock held by the caller.
    """

    @abstractmethod
    async def increment(self, key: str) -> int:
        """
        Increment the counter for key and return the new value

        A missing counter is created at 0 first, so the first value is 1.
        """
        pass
