"""
Temporary on-disk placement of uploaded images.

An upload is checked against the allowed MIME types and the size limit while
it is streamed into the upload directory. ``staged_upload`` wraps the whole
lifetime so the file is removed however the publish attempt ends.
"""

import asyncio
import os
import tempfile
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Optional, Sequence, Union
from fastapi import UploadFile
from ..core.errors import ErrorKind, ServiceError
from .logger import get_logger

logger = get_logger(__name__)

ALLOWED_MIME_TYPES = ("image/jpeg", "image/png", "image/gif")
MAX_UPLOAD_BYTES = 5 * 1024 * 1024
CHUNK_SIZE = 64 * 1024

_SUFFIXES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
}

@dataclass(frozen=True)
class StagedUpload:
    path: Path
    filename: str
    content_type: str
    size: int

    def read_bytes(self) -> bytes:
        with open(self.path, "rb") as staged_file:
            return staged_file.read()

def discard_staged(path: Union[str, Path]) -> bool:
    """Best-effort removal of a staged file. Returns True if a file was removed."""
    try:
        os.unlink(path)
        logger.debug(f"Removed staged upload {path}")
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.error(f"Failed to delete staged upload {path}: {str(e)}")
        return False

async def stage_upload(
    upload: UploadFile,
    upload_dir: Union[str, Path],
    max_bytes: int = MAX_UPLOAD_BYTES,
    allowed_types: Sequence[str] = ALLOWED_MIME_TYPES,
) -> StagedUpload:
    """
    Validate an uploaded image and write it to the upload directory.

    Raises:
        ServiceError(INVALID_UPLOAD): disallowed MIME type or more than
            ``max_bytes`` bytes. No file is left behind in either case.
    """
    content_type = upload.content_type or ""
    if content_type not in allowed_types:
        logger.debug(f"Rejected upload {upload.filename!r} with type {content_type!r}")
        raise ServiceError(
            ErrorKind.INVALID_UPLOAD,
            "Invalid file type. Only JPEG, PNG, and GIF are allowed."
        )

    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)

    loop = asyncio.get_running_loop()
    size = 0
    with tempfile.NamedTemporaryFile(
        dir=directory, prefix="upload-", suffix=_SUFFIXES.get(content_type, ""), delete=False
    ) as tmp_file:
        tmp_path = Path(tmp_file.name)
        try:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise ServiceError(
                        ErrorKind.INVALID_UPLOAD,
                        f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB."
                    )
                await loop.run_in_executor(None, tmp_file.write, chunk)
        except BaseException:
            tmp_file.close()
            discard_staged(tmp_path)
            raise

    logger.debug(f"Staged upload {upload.filename!r} ({content_type}, {size} bytes) at {tmp_path}")
    return StagedUpload(
        path=tmp_path,
        filename=upload.filename or tmp_path.name,
        content_type=content_type,
        size=size
    )

@asynccontextmanager
async def staged_upload(
    upload: Optional[UploadFile],
    upload_dir: Union[str, Path],
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> AsyncIterator[Optional[StagedUpload]]:
    """
    Stage ``upload`` for the duration of the block and remove it afterwards.

    Yields None when the request carried no image.
    """
    if upload is None or not upload.filename:
        yield None
        return

    staged = await stage_upload(upload, upload_dir, max_bytes=max_bytes)
    try:
        yield staged
    finally:
        discard_staged(staged.path)
