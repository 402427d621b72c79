from typing import Dict, List, Optional
from urllib.parse import urlencode
from ..config import DEFAULT_INSTAGRAM_SCOPES
from ..core.errors import ErrorKind
from ..core.oauth_base import OAuthBase
from ..core.result import Err, Ok, Result
from ..utils.logger import get_logger

logger = get_logger(__name__)

class InstagramOAuth(OAuthBase):
    """Instagram login: code exchange, profile lookup and token refresh."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        callback_url: str,
        auth_url: str = "https://api.instagram.com/oauth/authorize",
        api_url: str = "https://api.instagram.com",
        graph_url: str = "https://graph.instagram.com",
        scopes: Optional[List[str]] = None,
        timeout: float = 30.0,
    ):
        super().__init__(client_id, client_secret, callback_url, timeout=timeout)
        self.auth_url = auth_url
        self.token_url = f"{api_url.rstrip('/')}/oauth/access_token"
        self.graph_url = graph_url.rstrip('/')
        self.default_scope = list(scopes or DEFAULT_INSTAGRAM_SCOPES)

    def get_authorization_url(self, state: Optional[str] = None, scopes: Optional[List[str]] = None) -> str:
        """
        Get Instagram authorization URL.

        Args:
            state: Optional state parameter for CSRF protection
            scopes: OAuth scopes to request, defaults to the handler's scopes

        Returns:
            Authorization URL string
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.callback_url,
            "scope": ",".join(scopes or self.default_scope),
            "response_type": "code",
            "state": state
        }
        query = urlencode({k: v for k, v in params.items() if v is not None})
        return f"{self.auth_url}?{query}"

    async def get_access_token(self, code: str) -> Result[Dict, ErrorKind]:
        """
        Exchange authorization code for access token.
        This is a two-step process:
        1. Exchange code for a short-lived access token and the platform user id
        2. Resolve the user's id and username with that token

        Args:
            code: Authorization code from callback

        Returns:
            Ok({"access_token", "user": {"id", "username"}}) or
            Err(AUTH_EXCHANGE_FAILED)
        """
        async with self.session() as session:
            # Step 1: Exchange code for access token
            token = await self._request(
                session,
                "POST",
                self.token_url,
                data={
                    "client_id": self.client_id,
                    "client_secret": self._client_secret,
                    "grant_type": "authorization_code",
                    "redirect_uri": self.callback_url,
                    "code": code
                }
            )
            if isinstance(token, Ok):
                token = self._require(token.value, "access_token", "user_id")
            if isinstance(token, Err):
                logger.error(f"OAuth error exchanging code: {token.error}")
                return Err(ErrorKind.AUTH_EXCHANGE_FAILED)

            access_token = token.value["access_token"]
            platform_user_id = token.value["user_id"]

            # Step 2: Resolve the user behind the token
            user = await self._request(
                session,
                "GET",
                f"{self.graph_url}/{platform_user_id}",
                params={"fields": "id,username", "access_token": access_token}
            )
            if isinstance(user, Ok):
                user = self._require(user.value, "id", "username")
            if isinstance(user, Err):
                logger.error(f"OAuth error resolving user {platform_user_id}: {user.error}")
                return Err(ErrorKind.AUTH_EXCHANGE_FAILED)

        logger.info(f"Instagram login completed for user {user.value['id']}")
        return Ok({
            "access_token": access_token,
            "user": {
                "id": str(user.value["id"]),
                "username": user.value["username"]
            }
        })

    async def get_user_profile(self, token: str) -> Result[Dict, ErrorKind]:
        """
        Get user profile information.

        Args:
            token: Access token

        Returns:
            Ok with the raw profile object or Err(PROFILE_FETCH_FAILED)
        """
        async with self.session() as session:
            profile = await self._request(
                session,
                "GET",
                f"{self.graph_url}/me",
                params={
                    "fields": "id,username,account_type,media_count",
                    "access_token": token
                }
            )
        if isinstance(profile, Err):
            logger.error(f"Failed to fetch profile: {profile.error}")
            return Err(ErrorKind.PROFILE_FETCH_FAILED)
        return Ok(profile.value)

    async def refresh_token(self, access_token: str) -> Result[Dict, ErrorKind]:
        """
        Refresh long-lived access token.

        Args:
            access_token: Current long-lived access token

        Returns:
            Ok({"access_token", "expires_in"}) or Err(REFRESH_FAILED)
        """
        async with self.session() as session:
            data = await self._request(
                session,
                "GET",
                f"{self.graph_url}/refresh_access_token",
                params={
                    "grant_type": "ig_refresh_token",
                    "access_token": access_token
                }
            )
        if isinstance(data, Ok):
            data = self._require(data.value, "access_token")
        if isinstance(data, Err):
            logger.error(f"Failed to refresh token: {data.error}")
            return Err(ErrorKind.REFRESH_FAILED)
        return Ok({
            "access_token": data.value["access_token"],
            "expires_in": data.value.get("expires_in")
        })
