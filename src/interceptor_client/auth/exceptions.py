"""Exceptions raised while resolving stored tokens.

These are configuration errors raised before any request is made, so they
sit outside the pipeline's ``RequestError`` family.

Example:
    ```python
    from interceptor_client.auth.exceptions import CredentialNotFoundError

    if not token:
        raise CredentialNotFoundError("Access token not found", env_var_name="API_ACCESS_TOKEN")
    ```
"""


class CredentialError(Exception):
    """Base exception for credential-related errors."""

    pass


class CredentialNotFoundError(CredentialError):
    """Raised when a required credential cannot be resolved.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name
