"""Credential resolution used to seed the token store.

Resolution order (highest to lowest priority):
1. Explicitly provided value
2. Environment variable (including values loaded from a .env file)
3. Default value

Credentials are never logged; only their source is.
"""

import logging
import os
from threading import Lock

from dotenv import load_dotenv

from interceptor_client.auth.exceptions import CredentialNotFoundError

logger = logging.getLogger(__name__)


class CredentialResolver:
    """Resolve a credential from an explicit value, the environment or a default.

    Args:
        dotenv_path: Path to a .env file. If None, python-dotenv searches
            parent directories.
        load_dotenv: Whether to load the .env file at all.

    Example:
        ```python
        resolver = CredentialResolver()
        token = resolver.resolve(env_var_name="API_ACCESS_TOKEN")
        ```
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path

        if load_dotenv:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for credential resolution")
            except Exception as e:
                logger.warning(f"Failed to load .env file: {e}")
            # Mark as attempted either way
            self._dotenv_loaded = True

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Resolve a credential, first match wins.

        Raises:
            CredentialNotFoundError: If required=True and nothing was found.
        """
        if value is not None:
            result, source = value, "explicit parameter"
        elif env_var_name and os.environ.get(env_var_name):
            result, source = os.environ[env_var_name], f"environment variable '{env_var_name}'"
        elif default is not None:
            result, source = default, "default value"
        else:
            result, source = None, None

        if result is None:
            if required:
                message = "Required credential not found"
                if env_var_name:
                    message += f" (checked env var '{env_var_name}')"
                raise CredentialNotFoundError(message, env_var_name=env_var_name)
            logger.debug(f"Credential not resolved (env var: {env_var_name})")
            return None

        logger.debug(f"Resolved credential from {source} (***)")
        return result
