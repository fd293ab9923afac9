"""
Reading multipart uploads into the form the services accept
"""

from fastapi import HTTPException, UploadFile, status
from typing import List, Optional

from assetvault.core.config import settings
from assetvault.services.records import UploadedFile


async def read_uploads(files: Optional[List[UploadFile]]) -> List[UploadedFile]:
    """
    Read uploaded files, enforcing the count and size limits

    Raises:
        HTTPException: 400 when too many files are sent or one is too large
    """
    files = files or []
    if len(files) > settings.MAX_UPLOAD_FILES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {settings.MAX_UPLOAD_FILES} files per upload",
        )

    uploads = []
    for upload in files:
        content = await upload.read()
        if len(content) > settings.MAX_UPLOAD_SIZE:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File '{upload.filename}' exceeds {settings.MAX_UPLOAD_SIZE} bytes",
            )
        uploads.append(UploadedFile(
            original_name=upload.filename or "",
            content=content,
            mime_type=upload.content_type or "application/octet-stream",
        ))
    return uploads
