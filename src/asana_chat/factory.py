"""Dependency injection factory."""

import logging
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI

from asana_chat.asana.client import AsanaClient, create_asana_client_factory
from asana_chat.chat.dispatcher import Dispatcher
from asana_chat.config import Config
from asana_chat.oauth.manager import OAuthTokenManager
from asana_chat.oauth.token_store import InMemoryTokenStore, RedisTokenStore, TokenStore

logger = logging.getLogger(__name__)

# Process-wide instances, built once and handed to collaborators explicitly.
# None of them hold per-user authentication state.
_config: Config | None = None
_token_store: TokenStore | None = None
_client_factory: Callable[[str], AsanaClient] | None = None


def get_config() -> Config:
    """Get or create Config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def get_token_store() -> TokenStore:
    """Get or create the token store (Redis when configured)."""
    global _token_store
    if _token_store is None:
        config = get_config()
        if config.redis_url:
            _token_store = RedisTokenStore.from_url(config.redis_url)
        else:
            logger.warning("[Factory] REDIS_URL not set, tokens are kept in memory only")
            _token_store = InMemoryTokenStore()
    return _token_store


def get_client_factory() -> Callable[[str], AsanaClient]:
    """Get or create the per-token Asana client factory."""
    global _client_factory
    if _client_factory is None:
        _client_factory = create_asana_client_factory(get_config())
    return _client_factory


def get_oauth_manager() -> OAuthTokenManager:
    """Create OAuthTokenManager for dependency injection."""
    return OAuthTokenManager(get_config(), get_token_store())


def get_dispatcher() -> Dispatcher:
    """Create Dispatcher for dependency injection."""
    return Dispatcher(get_oauth_manager(), get_client_factory())


async def close_token_store() -> None:
    """Close the token store if one was created."""
    global _token_store
    if _token_store is None:
        return
    try:
        await _token_store.close()
    except Exception as e:
        logger.error(f"[Factory] Failed to close token store: {e}")
    _token_store = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle - startup and shutdown."""
    logger.info("[Lifespan] Initializing token store...")
    get_token_store()
    try:
        yield
    finally:
        logger.info("[Lifespan] Closing token store...")
        await close_token_store()


def create_app() -> FastAPI:
    """Create FastAPI application (composition root)."""
    from asana_chat.api.chat import router as chat_router
    from asana_chat.api.oauth import router as oauth_router

    app = FastAPI(
        title="AsanaChat",
        description="Manage Asana tasks through chat commands",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(chat_router, prefix="/api")
    app.include_router(oauth_router, prefix="/api")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
