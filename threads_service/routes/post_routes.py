from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import Optional
from ..config import Settings, get_settings
from ..core.credentials import CredentialContext, get_credentials
from ..core.errors import ServiceError
from ..core.result import Err
from ..models.threads_models import PostResponse
from ..platforms.threads import ThreadsPublisher
from ..utils.logger import get_logger
from ..utils.staging import staged_upload
from .dependencies import get_threads_publisher

logger = get_logger(__name__)
router = APIRouter()

@router.post("/post", response_model=PostResponse)
async def create_post(
    credentials: CredentialContext = Depends(get_credentials),
    image: Optional[UploadFile] = File(None),
    caption: str = Form(""),
    publisher: ThreadsPublisher = Depends(get_threads_publisher),
    settings: Settings = Depends(get_settings)
) -> PostResponse:
    logger.debug("=== Processing Post Request ===")
    logger.debug(f"User ID: {credentials.user_id}")
    logger.debug(f"Has image: {'yes' if image is not None and image.filename else 'no'}")

    async with staged_upload(image, settings.UPLOAD_DIR, max_bytes=settings.MAX_UPLOAD_BYTES) as staged:
        result = await publisher.create_post(credentials, staged, caption)

    if isinstance(result, Err):
        raise ServiceError(result.error)
    return PostResponse(thread_id=result.value)
