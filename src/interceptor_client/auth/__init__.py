"""Authentication for the client pipeline.

This module provides:
- BearerAuth, a plugin that injects bearer tokens and refreshes them on 401
- TokenStore, an in-memory token holder that plugs into BearerAuth
- CredentialResolver, for seeding tokens from the environment or a .env file

Example:
    ```python
    from interceptor_client.auth import BearerAuth, TokenStore

    store = TokenStore.from_env()
    client.use(BearerAuth.from_store(store, refresh_path="/auth/refresh"))
    ```
"""

from interceptor_client.auth.credentials import CredentialResolver
from interceptor_client.auth.exceptions import CredentialError, CredentialNotFoundError
from interceptor_client.auth.plugin import AuthState, BearerAuth
from interceptor_client.auth.tokens import TokenStore

__all__ = [
    "AuthState",
    "BearerAuth",
    "CredentialError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "TokenStore",
]
