"""Authentication module for loading Confluence credentials.

Credentials are read from environment variables, optionally populated from a
.env file through python-dotenv. The resulting Credentials tuple is the only
thing the API wrapper needs; nothing is cached at module level.
"""

import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError


class Credentials(NamedTuple):
    """Confluence API credentials."""
    url: str
    user: str
    api_token: str


class Authenticator:
    """Loads and validates Confluence credentials.

    Required environment variables:
        CONFLUENCE_URL: Confluence instance URL (e.g., https://yourinstance.atlassian.net/wiki)
        CONFLUENCE_USER: Confluence user email address
        CONFLUENCE_API_TOKEN: Confluence API token

    Credentials can also be passed explicitly, in which case the
    environment is not consulted.

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials()
        >>> print(f"Connecting to {creds.url}")
    """

    def __init__(self, credentials: Optional[Credentials] = None):
        """Initialize the authenticator.

        Args:
            credentials: Explicit credentials; when omitted they are loaded
                from the environment (and a .env file, if present).
        """
        self._credentials = credentials
        if credentials is None:
            load_dotenv()

    def get_credentials(self) -> Credentials:
        """Get Confluence credentials.

        Returns:
            Credentials: A named tuple containing url, user, and api_token

        Raises:
            InvalidCredentialsError: If any required credential is missing
        """
        if self._credentials is not None:
            return self._credentials

        url = os.getenv('CONFLUENCE_URL')
        user = os.getenv('CONFLUENCE_USER')
        api_token = os.getenv('CONFLUENCE_API_TOKEN')

        if not url or not user or not api_token:
            raise InvalidCredentialsError(
                user=user if user else "unknown",
                endpoint=url if url else "unknown"
            )

        return Credentials(url=url.rstrip('/'), user=user, api_token=api_token)
