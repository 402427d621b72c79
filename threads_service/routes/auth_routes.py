from fastapi import APIRouter, Body, Depends, Query
from typing import Dict, Optional
from ..core.credentials import CredentialContext, get_credentials
from ..core.errors import ErrorKind, ServiceError
from ..core.result import Err
from ..models.threads_models import (
    AuthorizationUrlResponse, CodeExchangeRequest, RefreshTokenResponse, TokenExchangeResponse
)
from ..platforms.instagram import InstagramOAuth
from ..utils.logger import get_logger
from .dependencies import get_instagram_handler

logger = get_logger(__name__)
router = APIRouter()

@router.get("/profile")
async def get_profile(
    credentials: CredentialContext = Depends(get_credentials),
    oauth_handler: InstagramOAuth = Depends(get_instagram_handler)
) -> Dict:
    result = await oauth_handler.get_user_profile(credentials.bearer_token)
    if isinstance(result, Err):
        raise ServiceError(result.error)
    return result.value

@router.post("/instagram", response_model=TokenExchangeResponse)
async def exchange_code(
    request: Optional[CodeExchangeRequest] = Body(None),
    oauth_handler: InstagramOAuth = Depends(get_instagram_handler)
) -> TokenExchangeResponse:
    if request is None or not request.code:
        raise ServiceError(ErrorKind.BAD_REQUEST, "Authorization code missing")

    result = await oauth_handler.get_access_token(request.code)
    if isinstance(result, Err):
        raise ServiceError(result.error)
    return TokenExchangeResponse(**result.value)

@router.get("/instagram/authorize", response_model=AuthorizationUrlResponse)
async def authorize(
    state: Optional[str] = Query(None, description="Opaque CSRF state echoed back on the callback"),
    oauth_handler: InstagramOAuth = Depends(get_instagram_handler)
) -> AuthorizationUrlResponse:
    state = state or oauth_handler.generate_state()
    return AuthorizationUrlResponse(
        authorization_url=oauth_handler.get_authorization_url(state=state),
        state=state
    )

@router.get("/refresh-token", response_model=RefreshTokenResponse)
async def refresh_token(
    credentials: CredentialContext = Depends(get_credentials),
    oauth_handler: InstagramOAuth = Depends(get_instagram_handler)
) -> RefreshTokenResponse:
    result = await oauth_handler.refresh_token(credentials.bearer_token)
    if isinstance(result, Err):
        raise ServiceError(result.error)
    return RefreshTokenResponse(**result.value)
