"""Result type shared by use cases

A use case never raises for an expected failure. It returns a Result holding
either the value or an Error describing what went wrong.
"""

from typing import Any, Dict, Generic, Optional, TypeVar
from pydantic import BaseModel, Field

T = TypeVar("T")


class Error(BaseModel):
    """Failure description carried by an err Result"""

    code: str = Field(..., description="Machine readable error code")
    message: str = Field(..., description="Human readable message")
    reason: Optional[str] = Field(default=None, description="Underlying cause")
    kind: Optional[str] = Field(
        default=None,
        description="Error category (not_found, validation, conflict, unauthorized)",
    )
    details: Dict[str, Any] = Field(
        default_factory=dict,
        description="Context such as entity id or offending field",
    )


class Result(Generic[T]):
    def __init__(self, value: Optional[T] = None, error: Optional[Error] = None):
        self.value = value
        self.error = error

    def is_ok(self) -> bool:
        return self.error is None

    def is_err(self) -> bool:
        return self.error is not None

    def __repr__(self) -> str:
        if self.is_ok():
            return f"Result.ok({self.value!r})"
        return f"Result.err({self.error!r})"


class Return:
    @staticmethod
    def ok(value: T) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: Error) -> Result[Any]:
        return Result(error=error)
