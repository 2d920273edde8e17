"""Client API Routes"""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import get_current_user
from src.api.error import ClientError
from src.api.schemas.invoice_request import CreateClientRequestSchema
from src.app.use_cases.invoicing import CreateClient, GetClient, ListClients
from src.app.use_cases.invoicing.dtos import ClientResponseDTO, CreateClientCommandDTO
from src.adapter.repositories.client_repository import SqlAlchemyClientRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.domain.actor import UserActor

router = APIRouter(prefix="/clients", tags=["Clients"])


@router.post("", response_model=ClientResponseDTO, status_code=status.HTTP_201_CREATED)
async def create_client(
    request: CreateClientRequestSchema,
    user: UserActor = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    command = CreateClientCommandDTO(owner_id=user.user_id, **request.model_dump())
    use_case = CreateClient(SqlAlchemyUnitOfWork(session), SqlAlchemyClientRepository(session))
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("", response_model=List[ClientResponseDTO])
async def list_clients(
    user: UserActor = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    result = await ListClients(SqlAlchemyClientRepository(session)).execute(user.user_id)
    return result.value


@router.get("/{client_id}", response_model=ClientResponseDTO)
async def get_client(
    client_id: str,
    user: UserActor = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    result = await GetClient(SqlAlchemyClientRepository(session)).execute(client_id, user.user_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
