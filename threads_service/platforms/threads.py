import asyncio
from enum import Enum
from typing import Dict, Optional
import aiohttp
from ..core.credentials import CredentialContext
from ..core.errors import ErrorKind
from ..core.graph_client import GraphClientBase
from ..core.result import Err, Ok, RemoteFailure, Result
from ..utils.logger import get_logger
from ..utils.staging import StagedUpload

logger = get_logger(__name__)

class PublishStage(str, Enum):
    START = "START"
    CREATE_IMAGE_CONTAINER = "CREATE_IMAGE_CONTAINER"
    CREATE_TEXT_CONTAINER = "CREATE_TEXT_CONTAINER"
    PUBLISH = "PUBLISH"
    DONE = "DONE"
    ERROR = "ERROR"

class ThreadsPublisher(GraphClientBase):
    """Two-phase Threads publishing: create a media container, then publish it."""

    def __init__(self, graph_url: str = "https://graph.threads.net/v1.0", timeout: float = 30.0):
        super().__init__(timeout=timeout)
        self.graph_url = graph_url.rstrip('/')

    def _container_url(self, user_id: str) -> str:
        return f"{self.graph_url}/{user_id}/threads"

    def _publish_url(self, user_id: str) -> str:
        return f"{self.graph_url}/{user_id}/threads_publish"

    async def create_image_container(
        self,
        session: aiohttp.ClientSession,
        credentials: CredentialContext,
        staged: StagedUpload,
        caption: str
    ) -> Result[str, RemoteFailure]:
        """
        Create an IMAGE container from a staged upload.

        Args:
            session: Open client session
            credentials: Per-request token and user id
            staged: Image staged on disk
            caption: Post caption

        Returns:
            Ok with the creation id
        """
        try:
            payload = await asyncio.get_running_loop().run_in_executor(None, staged.read_bytes)
        except OSError as e:
            return Err(RemoteFailure("staging", f"could not read {staged.path}: {str(e)}"))

        form = aiohttp.FormData()
        form.add_field(
            "image",
            payload,
            filename=staged.filename,
            content_type=staged.content_type
        )
        form.add_field("media_type", "IMAGE")
        form.add_field("caption", caption)
        form.add_field("access_token", credentials.bearer_token)

        result = await self._request(session, "POST", self._container_url(credentials.user_id), data=form)
        return self._extract_id(result)

    async def create_text_container(
        self,
        session: aiohttp.ClientSession,
        credentials: CredentialContext,
        text: str
    ) -> Result[str, RemoteFailure]:
        """Create a TEXT container; everything travels in the query string."""
        result = await self._request(
            session,
            "POST",
            self._container_url(credentials.user_id),
            params={
                "media_type": "TEXT",
                "text": text,
                "access_token": credentials.bearer_token
            }
        )
        return self._extract_id(result)

    async def publish_container(
        self,
        session: aiohttp.ClientSession,
        credentials: CredentialContext,
        creation_id: str
    ) -> Result[str, RemoteFailure]:
        """Publish a previously created container and return the publish id."""
        result = await self._request(
            session,
            "POST",
            self._publish_url(credentials.user_id),
            params={
                "creation_id": creation_id,
                "access_token": credentials.bearer_token
            }
        )
        return self._extract_id(result)

    async def create_post(
        self,
        credentials: CredentialContext,
        staged: Optional[StagedUpload] = None,
        caption: str = ""
    ) -> Result[str, ErrorKind]:
        """
        Create a thread, with an image when one was staged.

        Args:
            credentials: Per-request token and user id
            staged: Optional staged image
            caption: Caption, or the whole text of a text-only thread

        Returns:
            Ok with the publish id or Err(PUBLISH_FAILED)
        """
        stage = PublishStage.START
        logger.debug(f"Publishing for user {credentials.user_id}: {stage.value}")

        async with self.session() as session:
            if staged is not None:
                stage = PublishStage.CREATE_IMAGE_CONTAINER
                logger.debug(f"{stage.value}: {staged.filename} ({staged.content_type}, {staged.size} bytes)")
                container = await self.create_image_container(session, credentials, staged, caption)
            else:
                stage = PublishStage.CREATE_TEXT_CONTAINER
                logger.debug(f"{stage.value}: {len(caption)} characters")
                container = await self.create_text_container(session, credentials, caption)

            if isinstance(container, Err):
                return self._fail(stage, container.error)

            stage = PublishStage.PUBLISH
            logger.debug(f"{stage.value}: creation id {container.value}")
            published = await self.publish_container(session, credentials, container.value)
            if isinstance(published, Err):
                return self._fail(stage, published.error)

        logger.info(f"Published thread {published.value} for user {credentials.user_id}")
        logger.debug(f"Publishing for user {credentials.user_id}: {PublishStage.DONE.value}")
        return Ok(published.value)

    @staticmethod
    def _fail(stage: PublishStage, failure: RemoteFailure) -> Err:
        logger.error(f"Threads post error at {stage.value} -> {PublishStage.ERROR.value}: {failure}")
        return Err(ErrorKind.PUBLISH_FAILED)

    def _extract_id(self, result: Result[Dict, RemoteFailure]) -> Result[str, RemoteFailure]:
        if isinstance(result, Ok):
            result = self._require(result.value, "id")
        if isinstance(result, Err):
            return result
        return Ok(str(result.value["id"]))
