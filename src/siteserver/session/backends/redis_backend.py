from typing import Generic, Optional, Type
from fastapi_sessions.backends.session_backend import (
    BackendError,
    SessionBackend,
    SessionModel,
)
from redis.asyncio import Redis
from redis import RedisError, ConnectionError as RedisConnectionError
from pydantic import ValidationError
import logging
from fastapi_sessions.frontends.session_frontend import ID

logger = logging.getLogger(__name__)


class RedisBackend(Generic[ID, SessionModel], SessionBackend[ID, SessionModel]):
    """Session store keeping each session as a JSON string that expires after ``ttl`` seconds."""

    def __init__(
        self,
        redis_client: Redis,
        session_model: Type[SessionModel],
        ttl: int,
        key_prefix: str = "session:",
    ):
        self.redis_client = redis_client
        self.session_model = session_model
        self.ttl = ttl
        self.key_prefix = key_prefix

    def _key(self, session_id: ID) -> str:
        return f"{self.key_prefix}{session_id}"

    def _handle_redis_error(self, operation: str, session_id: ID, error: Exception) -> None:
        """Centralized error handling for Redis operations."""
        if isinstance(error, RedisConnectionError):
            logger.error(f"Redis connection failed during {operation} for session {session_id}: {error}")
            raise BackendError(f"Database connection error during {operation}")
        elif isinstance(error, RedisError):
            logger.error(f"Redis error during {operation} for session {session_id}: {error}")
            raise BackendError(f"Database error during {operation}")
        else:
            logger.error(f"Unexpected error during {operation} for session {session_id}: {error}")
            raise BackendError(f"Unexpected error during {operation}")

    async def create(self, session_id: ID, data: SessionModel) -> None:
        try:
            created = await self.redis_client.set(
                self._key(session_id), data.model_dump_json(), ex=self.ttl, nx=True
            )
            if not created:
                raise BackendError("create can't overwrite an existing session")
            logger.debug(f"Session {session_id} created successfully")
        except BackendError:
            raise
        except (RedisError, ValueError) as e:
            self._handle_redis_error("session creation", session_id, e)

    async def read(self, session_id: ID) -> Optional[SessionModel]:
        try:
            raw = await self.redis_client.get(self._key(session_id))
            if raw is None:
                return None

            try:
                return self.session_model.model_validate_json(raw)
            except ValidationError as e:
                logger.error(f"Invalid session data format for session {session_id}: {e}")
                raise BackendError("Corrupted session data")

        except BackendError:
            raise
        except RedisError as e:
            self._handle_redis_error("session read", session_id, e)

    async def update(self, session_id: ID, data: SessionModel) -> None:
        try:
            updated = await self.redis_client.set(
                self._key(session_id), data.model_dump_json(), ex=self.ttl, xx=True
            )
            if not updated:
                raise BackendError("Session does not exist, cannot update")
            logger.debug(f"Session {session_id} updated successfully")
        except BackendError:
            raise
        except (RedisError, ValueError) as e:
            self._handle_redis_error("session update", session_id, e)

    async def delete(self, session_id: ID) -> None:
        try:
            deleted_count = await self.redis_client.delete(self._key(session_id))

            if deleted_count == 0:
                logger.warning(f"Session {session_id} was not deleted, may have been removed concurrently")
            else:
                logger.debug(f"Session {session_id} deleted successfully")

        except RedisError as e:
            self._handle_redis_error("session deletion", session_id, e)
