"""Document Storage Interface

Durable storage for rendered invoice documents. The invoice keeps only the
reference returned by save().
"""

from abc import ABC, abstractmethod
from typing import Optional


class DocumentStorage(ABC):

    @abstractmethod
    async def save(self, filename: str, content: bytes) -> str:
        """
        Store content and return its artifact reference
        """
        pass

    @abstractmethod
    async def read(self, reference: str) -> Optional[bytes]:
        """
        Returns:
            Stored bytes, or None when the artifact no longer exists
        """
        pass

    @abstractmethod
    async def delete(self, reference: str) -> bool:
        """
        Returns:
            True if an artifact was removed, False if there was nothing to remove
        """
        pass
