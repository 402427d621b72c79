from pydantic import BaseModel
from typing import Optional

class CodeExchangeRequest(BaseModel):
    """Request model for the authorization-code exchange."""
    code: Optional[str] = None

class InstagramUser(BaseModel):
    """Minimal identity resolved from a fresh access token."""
    id: str
    username: str

class TokenExchangeResponse(BaseModel):
    """Response model for a completed Instagram login."""
    access_token: str
    user: InstagramUser

class RefreshTokenResponse(BaseModel):
    """Response model for a renewed long-lived token."""
    access_token: str
    expires_in: Optional[int] = None

class AuthorizationUrlResponse(BaseModel):
    """Response model for the consent redirect."""
    authorization_url: str
    state: str

class PostResponse(BaseModel):
    """Response model for published threads."""
    message: str = "Thread posted successfully!"
    thread_id: str
