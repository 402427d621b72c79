import io
import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers
from threads_service.core import CredentialContext, ErrorKind, RemoteFailure, ServiceError, get_credentials
from threads_service.utils.staging import (
    MAX_UPLOAD_BYTES, discard_staged, stage_upload, staged_upload
)


def make_upload(data: bytes, filename: str = "photo.png", content_type: str = "image/png") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type})
    )


@pytest.mark.asyncio
async def test_stage_upload_writes_file(tmp_path):
    """Test staging an allowed image."""
    staged = await stage_upload(make_upload(b"png-bytes"), tmp_path)

    assert staged.path.parent == tmp_path
    assert staged.path.suffix == ".png"
    assert staged.filename == "photo.png"
    assert staged.content_type == "image/png"
    assert staged.size == 9
    assert staged.read_bytes() == b"png-bytes"


@pytest.mark.asyncio
async def test_staged_names_do_not_collide(tmp_path):
    first = await stage_upload(make_upload(b"a"), tmp_path)
    second = await stage_upload(make_upload(b"b"), tmp_path)
    assert first.path != second.path


@pytest.mark.asyncio
async def test_stage_upload_rejects_one_byte_over_limit(tmp_path):
    with pytest.raises(ServiceError) as exc_info:
        await stage_upload(make_upload(b"\x00" * (MAX_UPLOAD_BYTES + 1), "big.jpg", "image/jpeg"), tmp_path)

    assert exc_info.value.kind == ErrorKind.INVALID_UPLOAD
    assert exc_info.value.status_code == 400
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_stage_upload_accepts_exact_limit(tmp_path):
    staged = await stage_upload(make_upload(b"\x00" * MAX_UPLOAD_BYTES, "big.jpg", "image/jpeg"), tmp_path)
    assert staged.size == MAX_UPLOAD_BYTES


@pytest.mark.asyncio
@pytest.mark.parametrize("content_type", ["image/webp", "application/pdf", ""])
async def test_stage_upload_rejects_mime_type(tmp_path, content_type):
    with pytest.raises(ServiceError) as exc_info:
        await stage_upload(make_upload(b"data", "file.bin", content_type), tmp_path)

    assert exc_info.value.kind == ErrorKind.INVALID_UPLOAD
    assert not tmp_path.exists() or list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_staged_upload_removes_file_on_success(tmp_path):
    async with staged_upload(make_upload(b"gif-bytes", "a.gif", "image/gif"), tmp_path) as staged:
        assert staged.path.exists()
    assert not staged.path.exists()


@pytest.mark.asyncio
async def test_staged_upload_removes_file_on_error(tmp_path):
    with pytest.raises(RuntimeError):
        async with staged_upload(make_upload(b"jpeg-bytes", "a.jpg", "image/jpeg"), tmp_path) as staged:
            raise RuntimeError("upstream exploded")
    assert not staged.path.exists()
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_staged_upload_without_image(tmp_path):
    async with staged_upload(None, tmp_path) as staged:
        assert staged is None
    async with staged_upload(make_upload(b"", filename=""), tmp_path) as staged:
        assert staged is None


@pytest.mark.asyncio
async def test_staged_upload_tolerates_file_already_gone(tmp_path):
    async with staged_upload(make_upload(b"png-bytes"), tmp_path) as staged:
        staged.path.unlink()
    assert list(tmp_path.iterdir()) == []


def test_discard_staged_reports_missing_file(tmp_path):
    target = tmp_path / "upload-x.png"
    target.write_bytes(b"x")
    assert discard_staged(target) is True
    assert discard_staged(target) is False


@pytest.mark.asyncio
async def test_get_credentials_requires_token(test_settings):
    with pytest.raises(ServiceError) as exc_info:
        await get_credentials(x_access_token=None, x_user_id=None, settings=test_settings)
    assert exc_info.value.kind == ErrorKind.UNAUTHENTICATED
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_get_credentials_falls_back_to_configured_user(test_settings):
    credentials = await get_credentials(x_access_token="tok", x_user_id=None, settings=test_settings)
    assert credentials == CredentialContext(bearer_token="tok", user_id="555")
    assert "tok" not in repr(credentials)


def test_error_kinds_map_to_status_codes():
    assert ErrorKind.BAD_REQUEST.status_code == 400
    assert ErrorKind.PUBLISH_FAILED.status_code == 500
    assert ServiceError(ErrorKind.BAD_REQUEST, "Authorization code missing").message == "Authorization code missing"
    assert ServiceError(ErrorKind.REFRESH_FAILED).message == "Failed to refresh token"


def test_remote_failure_text():
    assert str(RemoteFailure("status", "bad token", 400)) == "status (HTTP 400): bad token"
    assert str(RemoteFailure("timeout", "too slow")) == "timeout: too slow"
