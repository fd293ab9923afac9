"""
Client administration endpoints (superadmin only)
"""

from fastapi import APIRouter, Depends
import logging

from assetvault.api.deps import get_client_service, require_superadmin
from assetvault.core.security import AuthenticatedUser
from assetvault.services.clients import ClientService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def list_clients(
    user: AuthenticatedUser = Depends(require_superadmin),
    service: ClientService = Depends(get_client_service),
):
    return [client.to_dict() for client in service.list_clients(user.tenant_id)]


@router.get("/{client_id}")
async def get_client(
    client_id: str,
    user: AuthenticatedUser = Depends(require_superadmin),
    service: ClientService = Depends(get_client_service),
):
    return service.get_client(client_id, user.tenant_id).to_dict()


@router.delete("/{client_id}")
async def delete_client(
    client_id: str,
    user: AuthenticatedUser = Depends(require_superadmin),
    service: ClientService = Depends(get_client_service),
):
    """
    Delete a client and everything it owns

    The client is removed even when some cascade branches fail; those
    failures are listed in the response.
    """
    result = service.delete_client(client_id, user.tenant_id)
    return result.to_dict()
