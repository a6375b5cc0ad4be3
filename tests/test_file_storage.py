import asyncio
import io

import pytest
from fastapi import HTTPException, UploadFile
from starlette.datastructures import Headers

from workhub.core import config
from workhub.services.file_storage import save_upload


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "UPLOAD_DIR", str(tmp_path))
    monkeypatch.setattr(config, "PUBLIC_BASE_URL", "http://files.test/")
    return tmp_path


def _upload(content, filename="receipt.png"):
    return UploadFile(file=io.BytesIO(content), filename=filename)


def test_save_upload_writes_file(upload_dir):
    url = asyncio.run(save_upload(_upload(b"png-bytes", "my receipt (1).png"), "receipts"))

    assert url.startswith("http://files.test/uploads/receipts/")
    assert url.endswith("-my_receipt__1_.png")
    stored = list((upload_dir / "receipts").iterdir())
    assert len(stored) == 1
    assert stored[0].read_bytes() == b"png-bytes"


def test_empty_upload_rejected():
    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(save_upload(_upload(b""), "receipts"))
    assert exc_info.value.status_code == 400


def test_oversized_upload_rejected(monkeypatch):
    monkeypatch.setattr(config, "MAX_UPLOAD_BYTES", 4)
    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(save_upload(_upload(b"12345"), "receipts"))
    assert exc_info.value.status_code == 413


def test_disallowed_content_type_rejected(upload_dir):
    upload = UploadFile(
        file=io.BytesIO(b"not a pdf"),
        filename="cv.docx",
        headers=Headers({"content-type": "application/msword"}),
    )

    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(save_upload(upload, "cvs", allowed_types=("application/pdf",)))

    assert exc_info.value.status_code == 400
    assert not (upload_dir / "cvs").exists()
