"""
Local file storage for uploaded attachments (payment receipts, CVs).

Files are written under UPLOAD_DIR/<folder>/ and addressed by a stable URL
below PUBLIC_BASE_URL/uploads/.
"""
import logging
import re
import time
from pathlib import Path
from typing import Optional, Sequence

from fastapi import UploadFile, HTTPException

from workhub.core import config

logger = logging.getLogger(__name__)


def _safe_filename(filename: str) -> str:
    name = Path(filename or "upload").name
    name = re.sub(r"[^A-Za-z0-9._-]", "_", name)
    return name or "upload"


async def save_upload(file: UploadFile, folder: str, allowed_types: Optional[Sequence[str]] = None) -> str:
    """
    Store an uploaded file and return its public URL.

    Args:
        file: FastAPI UploadFile
        folder: Sub-folder of the upload directory (e.g. "receipts")
        allowed_types: Accepted content types; any type when omitted

    Returns:
        URL of the stored file

    Raises:
        HTTPException on empty, oversized or disallowed uploads
    """
    if allowed_types and file.content_type not in allowed_types:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type: {file.content_type}. Allowed: {', '.join(allowed_types)}"
        )

    content = await file.read()

    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    if len(content) > config.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {config.MAX_UPLOAD_BYTES // (1024 * 1024)}MB"
        )

    target_dir = Path(config.UPLOAD_DIR) / folder
    target_dir.mkdir(parents=True, exist_ok=True)

    stored_name = f"{int(time.time() * 1000)}-{_safe_filename(file.filename)}"
    (target_dir / stored_name).write_bytes(content)

    url = f"{config.PUBLIC_BASE_URL.rstrip('/')}/uploads/{folder}/{stored_name}"
    logger.info(f"Upload stored: folder={folder}, name={stored_name}, bytes={len(content)}")
    return url
