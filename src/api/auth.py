"""Request principal extraction

Turns the bearer token into the Actor used by the use cases. The token is
issued elsewhere; this service only verifies it.
"""

import logging
from typing import Optional, Union
from fastapi import Depends, Header, status
from jose import JWTError, jwt
from config import ApplicationConfig
from libs.result import Error
from src.api.error import ClientError
from src.domain.actor import ClientActor, UserActor

logger = logging.getLogger(__name__)

RequestActor = Union[UserActor, ClientActor]


def _unauthenticated(message: str) -> ClientError:
    return ClientError(
        Error(code="UNAUTHENTICATED", message=message, kind="unauthorized"),
        status_code=status.HTTP_401_UNAUTHORIZED,
    )


def _forbidden(message: str) -> ClientError:
    return ClientError(Error(code="FORBIDDEN_ROLE", message=message, kind="unauthorized"))


def actor_from_claims(claims: dict) -> RequestActor:
    """
    Build the actor from token claims

    Expects "role" (user | client) and "sub"; "user_id"/"client_id" are
    accepted in place of "sub".
    """
    role = claims.get("role", "user")
    if role == "user":
        user_id = claims.get("sub") or claims.get("user_id")
        if user_id:
            return UserActor(user_id=str(user_id))
    elif role == "client":
        client_id = claims.get("sub") or claims.get("client_id")
        if client_id:
            return ClientActor(client_id=str(client_id))
    raise _unauthenticated("Token does not identify a user or client")


def decode_token(token: str) -> dict:
    return jwt.decode(
        token,
        ApplicationConfig.JWT_SECRET,
        algorithms=[ApplicationConfig.JWT_ALGORITHM],
    )


async def get_current_actor(
    authorization: Optional[str] = Header(default=None),
    x_actor_role: Optional[str] = Header(default=None),
    x_actor_id: Optional[str] = Header(default=None),
) -> RequestActor:
    if ApplicationConfig.AUTH_DISABLED and x_actor_id:
        return actor_from_claims({"role": x_actor_role or "user", "sub": x_actor_id})

    if not authorization or not authorization.lower().startswith("bearer "):
        raise _unauthenticated("Missing bearer token")

    try:
        claims = decode_token(authorization.split(" ", 1)[1].strip())
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise _unauthenticated("Invalid or expired token")

    return actor_from_claims(claims)


async def get_current_user(actor: RequestActor = Depends(get_current_actor)) -> UserActor:
    if not isinstance(actor, UserActor):
        raise _forbidden("This operation is only available to the issuing user")
    return actor


async def get_current_client(actor: RequestActor = Depends(get_current_actor)) -> ClientActor:
    if not isinstance(actor, ClientActor):
        raise _forbidden("This operation is only available to clients")
    return actor
