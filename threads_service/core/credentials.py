from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, Header
from ..config import Settings, get_settings
from .errors import ErrorKind, ServiceError

@dataclass(frozen=True)
class CredentialContext:
    """Bearer token and Threads user id for the duration of one request."""

    bearer_token: str
    user_id: str

    def __repr__(self) -> str:
        return f"CredentialContext(user_id={self.user_id!r})"

async def get_credentials(
    x_access_token: Optional[str] = Header(None, alias="x-access-token"),
    x_user_id: Optional[str] = Header(None, alias="x-user-id"),
    settings: Settings = Depends(get_settings),
) -> CredentialContext:
    """
    Build the per-request credential context.

    The token is not validated locally; the upstream platform is the only
    authority on whether it is still good.
    """
    if not x_access_token:
        raise ServiceError(ErrorKind.UNAUTHENTICATED)
    return CredentialContext(
        bearer_token=x_access_token,
        user_id=x_user_id or settings.THREADS_USER_ID,
    )
