"""
OAuth 2.0 credential management for the Slides and Drive APIs.
Handles the installed-app authorization flow, token storage and refresh.
"""

from pathlib import Path
from typing import Optional, List

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from gslides_mcp.utils.exceptions import ConfigurationError
from gslides_mcp.utils.logging_config import get_logger

logger = get_logger(__name__)

# Slides API scopes
SLIDES_SCOPES = [
    "https://www.googleapis.com/auth/presentations",
    "https://www.googleapis.com/auth/drive.file",
    "https://www.googleapis.com/auth/drive",
]


class OAuthAuth:
    """
    OAuth 2.0 authentication for user-specific access.
    Loads the stored token, refreshes it when expired and persists the result.
    """

    def __init__(
        self,
        token_path: Path,
        client_secrets_path: Optional[Path] = None,
        scopes: Optional[List[str]] = None
    ):
        """
        Initialize OAuth authentication.

        Args:
            token_path: Path to store/load the authorized user token
            client_secrets_path: OAuth client secrets file, needed only for authorize()
            scopes: List of OAuth scopes to request
        """
        self.token_path = Path(token_path)
        self.client_secrets_path = Path(client_secrets_path) if client_secrets_path else None
        self.scopes = scopes or list(SLIDES_SCOPES)
        self._credentials: Optional[Credentials] = None

    def get_credentials(self) -> Credentials:
        """
        Get stored OAuth credentials, refreshing them if expired.

        Returns:
            OAuth credentials

        Raises:
            ConfigurationError: If no token is stored or it cannot be refreshed
        """
        if self._credentials is None:
            if not self.token_path.exists():
                raise ConfigurationError(
                    f"OAuth token not found at {self.token_path}. "
                    "Run with --authorize to complete the OAuth flow first.",
                    config_key="token_path"
                )
            self._credentials = Credentials.from_authorized_user_file(
                str(self.token_path),
                self.scopes
            )

        if self._credentials.expired and self._credentials.refresh_token:
            try:
                self._credentials.refresh(Request())
            except RefreshError as e:
                self._credentials = None
                raise ConfigurationError(
                    f"Token refresh failed. Please re-authorize: {e}",
                    config_key="token_path",
                    cause=e
                ) from e
            self._save_token(self._credentials)

        return self._credentials

    def authorize(self) -> Credentials:
        """
        Run the installed-app flow in a local browser and store the token.

        Returns:
            OAuth credentials

        Raises:
            ConfigurationError: If the client secrets file is missing
        """
        if self.client_secrets_path is None or not self.client_secrets_path.exists():
            raise ConfigurationError(
                f"OAuth client secrets not found at {self.client_secrets_path}",
                config_key="client_secrets_path"
            )

        flow = InstalledAppFlow.from_client_secrets_file(
            str(self.client_secrets_path),
            scopes=self.scopes
        )
        credentials = flow.run_local_server(port=0, access_type="offline", prompt="consent")
        self._save_token(credentials)
        self._credentials = credentials
        logger.info(f"Stored OAuth token at {self.token_path}")
        return credentials

    def _save_token(self, credentials: Credentials) -> None:
        """Save token to file."""
        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.token_path, "w") as token:
            token.write(credentials.to_json())
