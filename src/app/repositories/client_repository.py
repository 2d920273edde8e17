"""Client Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.client import Client


class ClientRepository(ABC):

    @abstractmethod
    async def create(self, client: Client) -> Client:
        pass

    @abstractmethod
    async def get_by_id(self, client_id: str) -> Optional[Client]:
        pass

    @abstractmethod
    async def get_for_owner(self, client_id: str, owner_id: str) -> Optional[Client]:
        """
        Retrieve a client only if it belongs to owner_id

        Returns:
            Client if found and owned, None otherwise
        """
        pass

    @abstractmethod
    async def list_for_owner(self, owner_id: str) -> List[Client]:
        pass
