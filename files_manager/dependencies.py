from functools import lru_cache
from typing import Optional

import redis
from fastapi import Depends, Security
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from files_manager.celery_app.queue import ThumbnailQueue
from files_manager.config import FOLDER_PATH, REDIS_URL
from files_manager.database import get_db
from files_manager.exceptions import Unauthorized
from files_manager.models.user_model import User
from files_manager.services.auth_service import AuthService
from files_manager.services.file_service import FileService
from files_manager.services.session_store import SessionStore
from files_manager.services.storage import LocalStorage

token_scheme = APIKeyHeader(name="X-Token", auto_error=False)


@lru_cache
def get_session_store() -> SessionStore:
    return SessionStore(redis.from_url(REDIS_URL))


@lru_cache
def get_queue() -> ThumbnailQueue:
    return ThumbnailQueue()


def get_storage() -> LocalStorage:
    return LocalStorage(FOLDER_PATH)


def get_auth_service(db: Session = Depends(get_db),
                     sessions: SessionStore = Depends(get_session_store)) -> AuthService:
    return AuthService(db, sessions)


def get_file_service(db: Session = Depends(get_db),
                     storage: LocalStorage = Depends(get_storage),
                     queue=Depends(get_queue)) -> FileService:
    return FileService(db, storage, queue)


def get_current_user(token: Optional[str] = Security(token_scheme),
                     auth: AuthService = Depends(get_auth_service)) -> User:
    return auth.current_user(token)


def get_optional_user_id(token: Optional[str] = Security(token_scheme),
                         auth: AuthService = Depends(get_auth_service)) -> Optional[int]:
    return auth.resolve_session(token)


def get_current_user_id(token: Optional[str] = Security(token_scheme),
                        auth: AuthService = Depends(get_auth_service)) -> int:
    user_id = auth.resolve_session(token)
    if user_id is None:
        raise Unauthorized()
    return user_id
