"""
Download endpoint for uploaded attachments
"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
import logging

from assetvault.api.deps import get_current_user, get_storage
from assetvault.core.exceptions import NotFoundError
from assetvault.core.security import AuthenticatedUser, require_client_id
from assetvault.services.file_storage import LocalFileStorage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{file_path:path}")
async def download_file(
    file_path: str,
    user: AuthenticatedUser = Depends(get_current_user),
    storage: LocalFileStorage = Depends(get_storage),
):
    """
    Serve a stored file by the url recorded on its asset

    Only files under the caller's own tenant/client directory are served;
    anything else answers like a missing file.
    """
    client_id = require_client_id(user)
    target = storage.scoped_file([user.tenant_id, client_id], file_path)
    if target is None:
        raise NotFoundError("File")
    return FileResponse(target)
