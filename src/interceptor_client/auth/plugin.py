"""Bearer token plugin with refresh-on-401.

Applying the plugin to a client registers three interceptors:

1. a request interceptor that adds ``Authorization: Bearer <token>``
2. a response error interceptor that refreshes the token once a request
   gets a 401, then retries that request
3. a response interceptor that captures tokens from successful logins

Each application gets its own :class:`AuthState`, so the refresh budget is
per client. Concurrent 401s on one client share a single refresh call.

Example:
    ```python
    from interceptor_client import Client
    from interceptor_client.auth import BearerAuth, TokenStore

    store = TokenStore.from_env()
    client = Client(base_url="https://api.example.com")
    client.use(BearerAuth.from_store(store, max_refresh=2))
    ```
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from interceptor_client.errors.exceptions import HTTPStatusError, RefreshTokenMissingError
from interceptor_client.models import RequestConfig, Response
from interceptor_client.pipeline import resolve

if TYPE_CHECKING:
    from interceptor_client.auth.tokens import TokenStore
    from interceptor_client.client import Client

logger = logging.getLogger(__name__)

TokenGetter = Callable[[], Any]
TokenSetter = Callable[[Response], Any]
ErrorCallback = Callable[[Exception], Any]


@dataclass
class AuthState:
    """Mutable state for one application of the plugin to one client."""

    refresh_attempts: int = 0
    refresh_task: "asyncio.Task[None] | None" = None


class BearerAuth:
    """Plugin that injects bearer tokens and refreshes them on 401.

    Args:
        get_access_token: Returns the current access token, or None.
        set_access_token: Called with the refresh or login response.
        get_refresh_token: Returns the current refresh token, or None.
        set_refresh_token: Called with the refresh response.
        refresh_path: URL posted to when a refresh is needed.
        login_path: URL whose 200 responses carry a fresh access token.
        max_refresh: Refresh attempts allowed over the life of one client.
        on_error: Called with errors the plugin does not handle.
        on_refresh_error: Called when a refresh attempt fails.
        refresh_body_key: JSON key the refresh token is posted under.

    Every callable may be a plain function or a coroutine function.
    """

    def __init__(
        self,
        get_access_token: TokenGetter,
        set_access_token: TokenSetter,
        get_refresh_token: TokenGetter,
        set_refresh_token: TokenSetter,
        *,
        refresh_path: str = "/refresh",
        login_path: str = "/login",
        max_refresh: int = 1,
        on_error: ErrorCallback | None = None,
        on_refresh_error: ErrorCallback | None = None,
        refresh_body_key: str = "refreshToken",
    ) -> None:
        self.get_access_token = get_access_token
        self.set_access_token = set_access_token
        self.get_refresh_token = get_refresh_token
        self.set_refresh_token = set_refresh_token
        self.refresh_path = refresh_path
        self.login_path = login_path
        self.max_refresh = max_refresh
        self.on_error = on_error
        self.on_refresh_error = on_refresh_error
        self.refresh_body_key = refresh_body_key

    @classmethod
    def from_store(cls, store: "TokenStore", **options: Any) -> "BearerAuth":
        return cls(
            store.get_access_token,
            store.set_access_token,
            store.get_refresh_token,
            store.set_refresh_token,
            **options,
        )

    def __call__(self, client: "Client") -> None:
        session = AuthSession(self, client, AuthState())
        client.interceptors.request.use(session.inject_token)
        client.interceptors.response.use(on_rejected=session.handle_error)
        client.interceptors.response.use(session.capture_login)


class AuthSession:
    """Interceptors for one client, sharing one :class:`AuthState`."""

    def __init__(self, auth: BearerAuth, client: "Client", state: AuthState) -> None:
        self.auth = auth
        self.client = client
        self.state = state

    async def inject_token(self, config: RequestConfig) -> RequestConfig:
        token = await resolve(self.auth.get_access_token())
        if token:
            return config.with_headers({"Authorization": f"Bearer {token}"})
        return config

    async def capture_login(self, response: Response) -> Response:
        if response.config.url == self.auth.login_path and response.status == 200:
            logger.debug(f"Capturing access token from {response.config.url}")
            await resolve(self.auth.set_access_token(response))
        return response

    def _can_refresh(self, error: Exception) -> bool:
        if not isinstance(error, HTTPStatusError) or error.status != 401 or error.config is None:
            return False
        # A 401 from the refresh endpoint itself means the refresh failed
        if error.config.url == self.auth.refresh_path:
            return False
        if self.state.refresh_task is not None:
            # Requests made by the refresh itself must not wait on it
            if asyncio.current_task() is self.state.refresh_task:
                return False
            return True
        if self.state.refresh_attempts < self.auth.max_refresh:
            return True
        logger.warning(f"Refresh budget of {self.auth.max_refresh} exhausted, not refreshing")
        return False

    async def handle_error(self, error: Exception) -> Response:
        if self._can_refresh(error):
            await self._refresh(error.config)
            logger.debug(f"Retrying {error.config.method} {error.config.url} with refreshed token")
            return await self.client.request(error.config)

        if self.auth.on_error is not None:
            await resolve(self.auth.on_error(error))
        raise error

    async def _refresh(self, config: RequestConfig) -> None:
        """Run a refresh, or wait for the one already in flight."""
        if self.state.refresh_task is None:
            self.state.refresh_attempts += 1
            logger.info(
                f"Access token rejected, refreshing (attempt {self.state.refresh_attempts}/{self.auth.max_refresh})"
            )
            self.state.refresh_task = asyncio.create_task(self._run_refresh(config))
            self.state.refresh_task.add_done_callback(_consume_refresh_result)
        await asyncio.shield(self.state.refresh_task)

    async def _run_refresh(self, config: RequestConfig) -> None:
        try:
            refresh_token = await resolve(self.auth.get_refresh_token())
            if not refresh_token:
                raise RefreshTokenMissingError("No refresh token available", config=config)

            response = await self.client.post(self.auth.refresh_path, {self.auth.refresh_body_key: refresh_token})
            await resolve(self.auth.set_access_token(response))
            await resolve(self.auth.set_refresh_token(response))
            logger.info("Access token refreshed")
        except Exception as exc:
            logger.warning(f"Token refresh failed: {exc}")
            if self.auth.on_refresh_error is not None:
                await resolve(self.auth.on_refresh_error(exc))
            raise
        finally:
            self.state.refresh_task = None


def _consume_refresh_result(task: "asyncio.Task[None]") -> None:
    # Waiters may all have been cancelled; mark the failure as retrieved
    if not task.cancelled():
        task.exception()
