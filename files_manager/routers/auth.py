from typing import Optional

from fastapi import APIRouter, Depends, Response, Security, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from files_manager.dependencies import get_auth_service, token_scheme
from files_manager.exceptions import Unauthorized
from files_manager.schemas.user_schema import TokenResponse
from files_manager.services.auth_service import AuthService

router = APIRouter()
basic_scheme = HTTPBasic(auto_error=False)


@router.get("/connect", response_model=TokenResponse, summary="User login to account",
            description="""
                Signs the user in with Basic authentication (email:password)
                and returns a session token valid for 24 hours.
            """,
            responses={
                401: {"description": "Unauthorized"}
            })
def connect(credentials: Optional[HTTPBasicCredentials] = Security(basic_scheme),
            auth: AuthService = Depends(get_auth_service)):
    if credentials is None:
        raise Unauthorized()
    return {"token": auth.login(credentials.username, credentials.password)}


@router.get("/disconnect", status_code=status.HTTP_204_NO_CONTENT,
            summary="Logging out of your user account",
            description="""
                Deletes the session behind the X-Token header.
            """,
            responses={
                401: {"description": "Unauthorized"}
            })
def disconnect(token: Optional[str] = Security(token_scheme),
               auth: AuthService = Depends(get_auth_service)):
    auth.logout(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
