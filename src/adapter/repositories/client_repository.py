"""SQLAlchemy implementation of ClientRepository"""

from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.client_repository import ClientRepository
from src.domain.client import Client


class SqlAlchemyClientRepository(ClientRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, client: Client) -> Client:
        self.session.add(client)
        await self.session.flush()
        await self.session.refresh(client)
        return client

    async def get_by_id(self, client_id: str) -> Optional[Client]:
        statement = select(Client).where(Client.id == client_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_for_owner(self, client_id: str, owner_id: str) -> Optional[Client]:
        statement = (
            select(Client)
            .where(Client.id == client_id)
            .where(Client.owner_id == owner_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list_for_owner(self, owner_id: str) -> List[Client]:
        statement = (
            select(Client)
            .where(Client.owner_id == owner_id)
            .order_by(Client.created_at.desc())
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
