"""Client use cases

The minimal client surface needed to issue and deliver invoices.
"""

import logging
from typing import List
from libs.result import Result, Return, Error
from src.app.repositories.client_repository import ClientRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.client import Client
from .dtos import ClientResponseDTO, CreateClientCommandDTO

logger = logging.getLogger(__name__)


def _to_dto(client: Client) -> ClientResponseDTO:
    return ClientResponseDTO(
        id=client.id,
        owner_id=client.owner_id,
        name=client.name,
        email=client.email,
        company_name=client.company_name,
        company_address=client.company_address,
        gst_no=client.gst_no,
        created_at=client.created_at,
    )


class CreateClient:
    def __init__(self, uow: UnitOfWork, client_repo: ClientRepository):
        self.uow = uow
        self.client_repo = client_repo

    async def execute(self, command: CreateClientCommandDTO) -> Result[ClientResponseDTO]:
        try:
            client = await self.client_repo.create(
                Client(
                    owner_id=command.owner_id,
                    name=command.name,
                    email=command.email,
                    company_name=command.company_name,
                    company_address=command.company_address,
                    gst_no=command.gst_no,
                )
            )
            await self.uow.commit()
            logger.info(f"Client {client.id} created for owner {command.owner_id}")
            return Return.ok(_to_dto(client))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create client for owner {command.owner_id}: {e}")
            return Return.err(
                Error(
                    code="CREATE_CLIENT_FAILED",
                    message="Failed to create client",
                    reason=str(e),
                )
            )


class GetClient:
    def __init__(self, client_repo: ClientRepository):
        self.client_repo = client_repo

    async def execute(self, client_id: str, owner_id: str) -> Result[ClientResponseDTO]:
        client = await self.client_repo.get_for_owner(client_id, owner_id)
        if not client:
            return Return.err(
                Error(
                    code="CLIENT_NOT_FOUND",
                    message=f"Client with ID {client_id} not found",
                    kind="not_found",
                    details={"field": "client_id"},
                )
            )
        return Return.ok(_to_dto(client))


class ListClients:
    def __init__(self, client_repo: ClientRepository):
        self.client_repo = client_repo

    async def execute(self, owner_id: str) -> Result[List[ClientResponseDTO]]:
        clients = await self.client_repo.list_for_owner(owner_id)
        return Return.ok([_to_dto(client) for client in clients])
