import asyncio
from typing import Any, Dict
import aiohttp
from .result import Err, Ok, RemoteFailure, Result
from ..utils.logger import get_logger

logger = get_logger(__name__)

class GraphClientBase:
    """Shared request handling for the Meta Graph API clients."""

    def __init__(self, timeout: float = 30.0):
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    def session(self) -> aiohttp.ClientSession:
        """Open a client session bounded by the configured timeout."""
        return aiohttp.ClientSession(timeout=self.timeout)

    async def _request(
        self,
        session: aiohttp.ClientSession,
        method: str,
        url: str,
        **kwargs: Any
    ) -> Result[Dict, RemoteFailure]:
        """
        Issue one upstream call and capture every way it can fail.

        Args:
            session: Open client session
            method: HTTP method
            url: Absolute endpoint URL
            **kwargs: Passed through to ``session.request`` (params, data, ...)

        Returns:
            Ok with the decoded JSON object, or Err describing the failure
        """
        try:
            async with session.request(method, url, **kwargs) as response:
                logger.debug(f"{method} {_strip_query(url)} -> {response.status}")
                if response.status >= 300:
                    body = await response.text(errors="replace")
                    return Err(RemoteFailure("status", body, response.status))
                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    return Err(RemoteFailure("malformed", str(e), response.status))
                if not isinstance(data, dict):
                    return Err(RemoteFailure("malformed", f"expected an object, got {type(data).__name__}", response.status))
                if 'error' in data:
                    return Err(RemoteFailure("status", str(data['error']), response.status))
                return Ok(data)
        except asyncio.TimeoutError:
            return Err(RemoteFailure("timeout", f"{method} {_strip_query(url)} exceeded {self.timeout.total}s"))
        except aiohttp.ClientError as e:
            return Err(RemoteFailure("network", str(e)))

    @staticmethod
    def _require(data: Dict, *keys: str) -> Result[Dict, RemoteFailure]:
        """Check that a response body carries the given keys."""
        missing = [key for key in keys if data.get(key) in (None, "")]
        if missing:
            return Err(RemoteFailure("malformed", f"missing {', '.join(missing)} in response"))
        return Ok(data)

def _strip_query(url: str) -> str:
    return url.split("?", 1)[0]
