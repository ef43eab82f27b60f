import logging
import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE", "sqlite:///./files_manager.db")
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

FOLDER_PATH = os.getenv("FOLDER_PATH", "/tmp/files_manager")

SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", 24 * 60 * 60))
PAGE_SIZE = int(os.getenv("PAGE_SIZE", 20))

# comma separated list of passlib scheme names, first one is used for new digests
PASSWORD_SCHEMES = [s.strip() for s in os.getenv("PASSWORD_SCHEMES", "pbkdf2_sha256").split(",") if s.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(level: str = LOG_LEVEL):
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
