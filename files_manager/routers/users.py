from fastapi import APIRouter, Depends, status

from files_manager.dependencies import get_auth_service, get_current_user
from files_manager.models.user_model import User
from files_manager.schemas.user_schema import UserCreate, UserResponse
from files_manager.services.auth_service import AuthService

router = APIRouter()


@router.post("", response_model=UserResponse, summary="new user registration",
             description="""
                Creates a new user. The email address must be unique,
                the password is stored as a one-way digest.
             """,
             responses={
                 400: {"description": "Missing email, Missing password or Already exist"},
                 201: {"description": "User created"},
             },
             status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, auth: AuthService = Depends(get_auth_service)):
    return auth.signup(user.email, user.password)


@router.get("/me", response_model=UserResponse,
            summary="Displaying user information",
            description="""
                Returns the id and email of the user owning the X-Token.
            """,
            responses={
                401: {"description": "Unauthorized"}
            })
def read_current_user(user: User = Depends(get_current_user)):
    return user
