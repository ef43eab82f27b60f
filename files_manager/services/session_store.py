import logging
from typing import Optional

import redis

from files_manager.config import SESSION_TTL_SECONDS

logger = logging.getLogger(__name__)

SESSION_PREFIX = "auth_"


class SessionStore:
    """Token to user id mapping kept in Redis with a fixed expiry.

    Reads never extend the expiry. Any Redis error on lookup is logged and
    reported as a missing session.
    """

    def __init__(self, client: redis.Redis, ttl: int = SESSION_TTL_SECONDS):
        self.client = client
        self.ttl = ttl

    @staticmethod
    def _key(token: str) -> str:
        return f"{SESSION_PREFIX}{token}"

    def is_alive(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError:
            logger.exception("Redis ping failed")
            return False

    def create(self, token: str, user_id: int) -> None:
        self.client.setex(self._key(token), self.ttl, str(user_id))

    def get(self, token: Optional[str]) -> Optional[int]:
        if not token:
            return None
        try:
            value = self.client.get(self._key(token))
        except redis.RedisError:
            logger.exception("Session lookup failed")
            return None
        if value is None:
            return None
        if isinstance(value, bytes):
            value = value.decode()
        try:
            return int(value)
        except ValueError:
            logger.warning("Malformed session value for token %s", token)
            return None

    def delete(self, token: str) -> bool:
        return bool(self.client.delete(self._key(token)))
