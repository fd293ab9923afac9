"""
Client administration and the client cascade delete
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Type

from sqlalchemy.orm import Session, sessionmaker

from assetvault.core.database_utils import get_db_session
from assetvault.core.exceptions import CascadeError, CascadeResult, NotFoundError
from assetvault.models.asset import Asset
from assetvault.models.base import BaseModel
from assetvault.models.client import Client, User
from assetvault.models.notification import Notification
from assetvault.models.showroom import Showroom, ShowroomAsset
from assetvault.services.file_storage import LocalFileStorage

logger = logging.getLogger(__name__)

# Collections owned by a client, removed together with it
CASCADE_MODELS: Dict[str, Type[BaseModel]] = {
    "assets": Asset,
    "showrooms": Showroom,
    "showroom_assets": ShowroomAsset,
    "notifications": Notification,
    "users": User,
}


class ClientService:
    """
    Tenant-level client operations

    Each cascade branch runs in its own session so that one failing branch
    leaves the others committed.
    """

    def __init__(self, session_factory: sessionmaker, storage: LocalFileStorage, max_workers: int = 6):
        self.session_factory = session_factory
        self.storage = storage
        self.max_workers = max_workers

    def list_clients(self, tenant_id: str) -> List[Client]:
        with get_db_session(self.session_factory) as db:
            return db.query(Client).filter(Client.tenant_id == tenant_id).order_by(Client.name).all()

    def get_client(self, client_id: str, tenant_id: str) -> Client:
        with get_db_session(self.session_factory) as db:
            client = self._find(db, client_id, tenant_id)
            if client is None:
                raise NotFoundError("Client")
            return client

    @staticmethod
    def _find(db: Session, client_id: str, tenant_id: str) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id, Client.tenant_id == tenant_id).first()

    def _delete_rows(self, model: Type[BaseModel], client_id: str, tenant_id: str) -> int:
        with get_db_session(self.session_factory) as db:
            return db.query(model).filter(
                model.tenant_id == tenant_id,
                model.client_id == client_id,
            ).delete(synchronize_session=False)

    def _delete_files(self, client_id: str, tenant_id: str) -> int:
        return 1 if self.storage.delete_tree([tenant_id, client_id]) else 0

    def _branches(self, client_id: str, tenant_id: str) -> Dict[str, Callable[[], int]]:
        branches: Dict[str, Callable[[], int]] = {
            name: (lambda model=model: self._delete_rows(model, client_id, tenant_id))
            for name, model in CASCADE_MODELS.items()
        }
        branches["files"] = lambda: self._delete_files(client_id, tenant_id)
        return branches

    def delete_client(self, client_id: str, tenant_id: str) -> CascadeResult:
        """
        Delete a client together with everything it owns

        All branches run in parallel and independently; the client row is
        deleted even when a branch fails. Failures are reported in the result.

        Args:
            client_id: Client to delete
            tenant_id: Tenant of the caller

        Returns:
            CascadeResult with per-branch counts and failures

        Raises:
            NotFoundError: if the client does not exist in the tenant
        """
        with get_db_session(self.session_factory) as db:
            if self._find(db, client_id, tenant_id) is None:
                raise NotFoundError("Client")

        result = CascadeResult()
        branches = self._branches(client_id, tenant_id)

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="cascade") as pool:
            futures = {name: pool.submit(branch) for name, branch in branches.items()}

            for name, future in futures.items():
                try:
                    result.counts[name] = future.result()
                except Exception as e:
                    logger.error(f"Cascade delete of {name} for client {client_id} failed: {e}")
                    result.failures.append(CascadeError(name, e))

        with get_db_session(self.session_factory) as db:
            client = self._find(db, client_id, tenant_id)
            if client is not None:
                db.delete(client)
        result.deleted = True

        if result.ok:
            logger.info(f"Deleted client {client_id}: {result.counts}")
        else:
            logger.warning(
                f"Deleted client {client_id} with {len(result.failures)} failed cascade branch(es)"
            )
        return result
