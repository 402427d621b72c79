import secrets
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from .errors import ErrorKind
from .graph_client import GraphClientBase
from .result import Result
from ..utils.logger import get_logger

logger = get_logger(__name__)

class OAuthBase(GraphClientBase, ABC):
    """Base class for OAuth implementations."""

    def __init__(self, client_id: str, client_secret: str, callback_url: str, timeout: float = 30.0):
        super().__init__(timeout=timeout)
        self.client_id = client_id
        self._client_secret = client_secret
        self.callback_url = callback_url

    def generate_state(self) -> str:
        """Generate an opaque CSRF state value for the authorization redirect."""
        state = secrets.token_urlsafe(24)
        logger.debug(f"Generated state for {self.__class__.__name__}")
        return state

    @abstractmethod
    def get_authorization_url(self, state: Optional[str] = None, scopes: Optional[List[str]] = None) -> str:
        """Get the authorization URL for OAuth flow."""
        pass

    @abstractmethod
    async def get_access_token(self, code: str) -> Result[Dict, ErrorKind]:
        """Exchange authorization code for access token."""
        pass

    @abstractmethod
    async def refresh_token(self, access_token: str) -> Result[Dict, ErrorKind]:
        """Renew a long-lived access token."""
        pass
