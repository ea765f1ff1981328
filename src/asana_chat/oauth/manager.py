"""Asana OAuth authorization and token exchange."""

import logging
from urllib.parse import quote, urlencode

import httpx

from asana_chat.config import Config
from asana_chat.oauth.token_store import TokenStore

logger = logging.getLogger(__name__)


class OAuthExchangeError(Exception):
    """Token endpoint did not return an access token."""


class OAuthTokenManager:
    """Builds authorization URLs and exchanges authorization codes for tokens.

    The OAuth ``state`` parameter carries the user id and is the only value
    used to correlate the callback with a user; no separate CSRF nonce is
    issued. Refresh tokens and expiry are not tracked.
    """

    def __init__(
        self,
        config: Config,
        token_store: TokenStore,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize with app config and the store tokens are written to."""
        self._config = config
        self._token_store = token_store
        self._transport = transport

    @property
    def authorize_endpoint(self) -> str:
        return f"{self._config.oauth_host.rstrip('/')}/-/oauth_authorize"

    @property
    def token_endpoint(self) -> str:
        return f"{self._config.oauth_host.rstrip('/')}/-/oauth_token"

    def build_authorization_url(self, user_id: str) -> str:
        """Build the URL the user opens to grant access.

        Args:
            user_id: Chat user id, echoed back by Asana as ``state``

        Returns:
            Authorization URL
        """
        params = {
            "client_id": self._config.asana_client_id,
            "redirect_uri": self._config.callback_url,
            "response_type": "code",
            "state": user_id,
        }
        return f"{self.authorize_endpoint}?{urlencode(params, quote_via=quote, safe='')}"

    async def exchange_code_for_token(self, code: str, state: str) -> bool:
        """Exchange an authorization code and store the token for ``state``.

        Args:
            code: Authorization code from the callback
            state: State from the callback, interpreted as the user id

        Returns:
            True once the token is stored

        Raises:
            OAuthExchangeError: If the token endpoint rejects the exchange
            httpx.HTTPError: If the token endpoint cannot be reached
        """
        form = {
            "grant_type": "authorization_code",
            "client_id": self._config.asana_client_id,
            "client_secret": self._config.asana_client_secret,
            "redirect_uri": self._config.callback_url,
            "code": code,
        }
        async with httpx.AsyncClient(
            timeout=self._config.http_timeout, transport=self._transport
        ) as client:
            response = await client.post(self.token_endpoint, data=form)

        if not response.is_success:
            raise OAuthExchangeError(
                f"Failed to fetch access token: HTTP {response.status_code}"
            )

        access_token = response.json().get("access_token")
        if not access_token:
            raise OAuthExchangeError("Token response has no access_token")

        await self._token_store.set(state, access_token)
        logger.info(f"[OAuth] Connected Asana account for user {state}")
        return True

    async def handle_callback(self, code: str, state: str) -> bool:
        """Complete the OAuth flow; never raises.

        Returns:
            True if the token was stored, False otherwise
        """
        try:
            return await self.exchange_code_for_token(code, state)
        except Exception as e:
            logger.error(f"[OAuth] Error during OAuth callback for user {state}: {e}")
            return False

    async def get_token(self, user_id: str) -> str | None:
        """Read the user's token straight from the store."""
        return await self._token_store.get(user_id)
