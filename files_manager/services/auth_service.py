import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from files_manager.exceptions import Unauthorized, ValidationError
from files_manager.models.user_model import User
from files_manager.services.session_store import SessionStore
from files_manager.utils.auth import generate_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Session, sessions: SessionStore):
        self.db = db
        self.sessions = sessions

    def signup(self, email: Optional[str], password: Optional[str]) -> User:
        if not email:
            raise ValidationError("Missing email")
        if not password:
            raise ValidationError("Missing password")

        if self.db.query(User).filter(User.email == email).first():
            raise ValidationError("Already exist")

        user = User(email=email, password_hash=hash_password(password))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # a concurrent signup took the email between the check and the insert
            self.db.rollback()
            raise ValidationError("Already exist")
        self.db.refresh(user)
        logger.info("User created: %s (ID: %d)", email, user.id)
        return user

    def login(self, email: Optional[str], password: Optional[str]) -> str:
        if not email or not password:
            raise Unauthorized()

        user = self.db.query(User).filter(User.email == email).first()
        if not user or not verify_password(password, user.password_hash):
            logger.info("Rejected login for %s", email)
            raise Unauthorized()

        token = generate_token()
        self.sessions.create(token, user.id)
        logger.info("Session opened for user %d", user.id)
        return token

    def logout(self, token: Optional[str]) -> None:
        user_id = self.sessions.get(token)
        if user_id is None:
            raise Unauthorized()
        self.sessions.delete(token)
        logger.info("Session closed for user %d", user_id)

    def resolve_session(self, token: Optional[str]) -> Optional[int]:
        return self.sessions.get(token)

    def current_user(self, token: Optional[str]) -> User:
        user_id = self.resolve_session(token)
        if user_id is None:
            raise Unauthorized()
        user = self.db.get(User, user_id)
        if user is None:
            raise Unauthorized()
        return user

    def count_users(self) -> int:
        return self.db.query(func.count(User.id)).scalar()
