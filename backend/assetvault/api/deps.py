"""
FastAPI dependencies: database session, caller identity and services
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session, sessionmaker
from typing import Generator, Optional
import logging

from assetvault.core.config import settings
from assetvault.core.encryption import FieldEncryption
from assetvault.core.security import AuthenticatedUser, AuthenticationError, decode_access_token
from assetvault.services.assets import AssetService
from assetvault.services.clients import ClientService
from assetvault.services.file_storage import LocalFileStorage
from assetvault.services.notifications import NotificationLedger
from assetvault.services.showrooms import ShowroomService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_session_factory(request: Request) -> sessionmaker:
    return request.app.state.session_factory


def get_encryption(request: Request) -> FieldEncryption:
    return request.app.state.encryption


def get_storage(request: Request) -> LocalFileStorage:
    return request.app.state.storage


def get_db(session_factory: sessionmaker = Depends(get_session_factory)) -> Generator[Session, None, None]:
    """
    Dependency to get database session
    """
    db = session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    """
    Caller identity from the bearer token
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return decode_access_token(credentials.credentials, settings.JWT_SECRET_KEY, settings.JWT_ALGORITHM)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_superadmin(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
    if not user.is_superadmin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Superadmin role required")
    return user


def get_asset_service(
    db: Session = Depends(get_db),
    encryption: FieldEncryption = Depends(get_encryption),
    storage: LocalFileStorage = Depends(get_storage),
) -> AssetService:
    return AssetService(db, encryption, storage)


def get_showroom_service(
    db: Session = Depends(get_db),
    encryption: FieldEncryption = Depends(get_encryption),
    storage: LocalFileStorage = Depends(get_storage),
) -> ShowroomService:
    return ShowroomService(db, encryption, storage)


def get_notification_ledger(db: Session = Depends(get_db)) -> NotificationLedger:
    return NotificationLedger(db, list_limit=settings.NOTIFICATION_LIST_LIMIT)


def get_client_service(
    session_factory: sessionmaker = Depends(get_session_factory),
    storage: LocalFileStorage = Depends(get_storage),
) -> ClientService:
    return ClientService(session_factory, storage)
