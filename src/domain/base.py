import uuid
from pydantic import BaseModel as PydanticBaseModel, ConfigDict
from sqlmodel import SQLModel


def generate_uuid() -> str:
    return uuid.uuid4().hex


class BaseModel(SQLModel):
    """Base class for table-backed entities"""


class DomainModel(PydanticBaseModel):
    """Base class for the invoice aggregate and its embedded value objects"""

    model_config = ConfigDict(validate_assignment=True)
