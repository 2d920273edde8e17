"""Actor

The principal behind a mutation: the issuing user, the invoiced client, or the
system itself (automatic status derivation).
"""

from typing import Annotated, Literal, Union
from pydantic import Field
from src.domain.base import DomainModel


class UserActor(DomainModel):
    role: Literal["user"] = "user"
    user_id: str = Field(..., min_length=1, description="Issuing user id")

    @property
    def identity(self) -> str:
        return self.user_id


class ClientActor(DomainModel):
    role: Literal["client"] = "client"
    client_id: str = Field(..., min_length=1, description="Client id")

    @property
    def identity(self) -> str:
        return self.client_id


class SystemActor(DomainModel):
    role: Literal["system"] = "system"

    @property
    def identity(self) -> str:
        return "system"


Actor = Annotated[
    Union[UserActor, ClientActor, SystemActor],
    Field(discriminator="role"),
]

# Actors that may record a payment (system never does)
PaymentActor = Annotated[
    Union[UserActor, ClientActor],
    Field(discriminator="role"),
]

SYSTEM = SystemActor()
