import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from files_manager.database import get_db, is_alive
from files_manager.dependencies import get_auth_service, get_file_service, get_session_store
from files_manager.exceptions import InternalError
from files_manager.schemas.user_schema import StatsResponse, StatusResponse
from files_manager.services.auth_service import AuthService
from files_manager.services.file_service import FileService
from files_manager.services.session_store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/status", response_model=StatusResponse,
            summary="Health of the backing stores",
            description="""
                Reports whether Redis and the database answer.
            """)
def get_status(db: Session = Depends(get_db), sessions: SessionStore = Depends(get_session_store)):
    return {"redis": sessions.is_alive(), "db": is_alive(db)}


@router.get("/stats", response_model=StatsResponse,
            summary="Number of users and files",
            responses={
                500: {"description": "Database error"}
            })
def get_stats(auth: AuthService = Depends(get_auth_service), files: FileService = Depends(get_file_service)):
    try:
        return {"users": auth.count_users(), "files": files.count_files()}
    except SQLAlchemyError as e:
        logger.exception("Error fetching stats")
        raise InternalError() from e
