from uuid import uuid4

from passlib.context import CryptContext

from files_manager.config import PASSWORD_SCHEMES

pwd_context = CryptContext(schemes=PASSWORD_SCHEMES, deprecated="auto")

def hash_password(password: str):
    return pwd_context.hash(password)

def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)

def generate_token() -> str:
    return str(uuid4())
