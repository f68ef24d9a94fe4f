"""In-memory token holder that plugs into :class:`BearerAuth`."""

import logging
from typing import Any

from interceptor_client.auth.credentials import CredentialResolver
from interceptor_client.models import Response

logger = logging.getLogger(__name__)

ACCESS_TOKEN_ENV = "API_ACCESS_TOKEN"
REFRESH_TOKEN_ENV = "API_REFRESH_TOKEN"


class TokenStore:
    """Holds the current access and refresh tokens.

    The setters take the login/refresh :class:`Response` and read the
    token out of its JSON body, so the bound methods can be handed to
    ``BearerAuth`` directly.
    """

    def __init__(
        self,
        access_token: str | None = None,
        refresh_token: str | None = None,
        *,
        access_token_key: str = "access_token",
        refresh_token_key: str = "refresh_token",
    ) -> None:
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.access_token_key = access_token_key
        self.refresh_token_key = refresh_token_key

    @classmethod
    def from_env(
        cls,
        *,
        access_env: str = ACCESS_TOKEN_ENV,
        refresh_env: str = REFRESH_TOKEN_ENV,
        resolver: CredentialResolver | None = None,
        **kwargs: Any,
    ) -> "TokenStore":
        """Seed a store from environment variables (or a .env file)."""
        resolver = resolver or CredentialResolver()
        return cls(
            resolver.resolve(env_var_name=access_env),
            resolver.resolve(env_var_name=refresh_env),
            **kwargs,
        )

    def _extract(self, response: Response, key: str) -> str | None:
        if isinstance(response.data, dict):
            return response.data.get(key)
        return None

    def get_access_token(self) -> str | None:
        return self.access_token

    def get_refresh_token(self) -> str | None:
        return self.refresh_token

    def set_access_token(self, response: Response) -> None:
        token = self._extract(response, self.access_token_key)
        if token is None:
            logger.warning(f"Response from {response.config.url} has no '{self.access_token_key}' field")
            return
        self.access_token = token

    def set_refresh_token(self, response: Response) -> None:
        token = self._extract(response, self.refresh_token_key)
        if token is None:
            logger.debug(f"Response from {response.config.url} has no '{self.refresh_token_key}' field")
            return
        self.refresh_token = token

    def clear(self) -> None:
        self.access_token = None
        self.refresh_token = None
