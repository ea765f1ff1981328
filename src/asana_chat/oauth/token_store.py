"""Per-user Asana access token storage."""

import logging
from typing import Protocol

import redis.asyncio as redis

logger = logging.getLogger(__name__)


def token_key(user_id: str) -> str:
    """Storage key for a user's access token."""
    return f"asana_access_token_{user_id}"


class TokenStore(Protocol):
    """Protocol for storing access tokens keyed by user id."""

    async def get(self, user_id: str) -> str | None:
        """Return the stored token, or None if the user never connected."""
        ...

    async def set(self, user_id: str, token: str) -> None:
        """Store (or overwrite) the user's token."""
        ...

    async def close(self) -> None:
        """Release any held connections."""
        ...


class RedisTokenStore:
    """Token store backed by Redis. Tokens are stored without a TTL."""

    def __init__(self, client: redis.Redis) -> None:
        """Initialize with a redis.asyncio client (decode_responses=True)."""
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisTokenStore":
        """Create store from a redis:// or rediss:// URL."""
        return cls(redis.from_url(url, decode_responses=True))

    async def get(self, user_id: str) -> str | None:
        value = await self._client.get(token_key(user_id))
        return value or None

    async def set(self, user_id: str, token: str) -> None:
        await self._client.set(token_key(user_id), token)
        logger.info(f"[TokenStore] Stored access token for user {user_id}")

    async def close(self) -> None:
        await self._client.aclose()


class InMemoryTokenStore:
    """Process-local token store for development and tests."""

    def __init__(self, tokens: dict[str, str] | None = None) -> None:
        """Initialize store, optionally seeded with user id to token pairs."""
        self._tokens: dict[str, str] = {
            token_key(user_id): token for user_id, token in (tokens or {}).items()
        }

    async def get(self, user_id: str) -> str | None:
        return self._tokens.get(token_key(user_id))

    async def set(self, user_id: str, token: str) -> None:
        self._tokens[token_key(user_id)] = token

    async def close(self) -> None:
        self._tokens.clear()
