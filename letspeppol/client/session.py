"""
LetsPeppol API session

Holds the connection settings of one API surface and rebuilds the
HttpTransport whenever the token or log file changes.
"""

import copy
from typing import Any, Dict, Optional

from letspeppol.utils.logging_config import get_logger
from .transport import HttpTransport, DEFAULT_TIMEOUT

logger = get_logger('letspeppol.client.session')

USER_AGENT = 'LetsPeppol Python SDK'


def merge_options(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge overrides into a copy of defaults; overrides win."""
    merged = copy.copy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_options(merged[key], value)
        else:
            merged[key] = value
    return merged


def build_client_options(
    token: Optional[str],
    client_options: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Derive the full transport configuration for a token and caller options."""
    defaults = {
        'headers': {
            'Accept': 'application/json',
            'Content-Type': 'application/json',
            'User-Agent': USER_AGENT,
        },
        'timeout': DEFAULT_TIMEOUT,
    }

    if token:
        defaults['headers']['Authorization'] = f"Bearer {token}"

    return merge_options(defaults, client_options or {})


class Session:
    """
    HTTP session to one LetsPeppol API surface.

    Do not keep the object returned by get_client() across set_token() or
    set_log_file(): those build a new transport, and the old one keeps
    sending the old token.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        client_options: Optional[Dict[str, Any]] = None,
        log_file: Optional[str] = None,
    ):
        """
        Create a session.

        Args:
            base_url: Base API URL, trailing slashes are stripped
            token: Optional JWT for authenticated requests
            client_options: Transport options merged over the defaults
            log_file: Optional path for request/response logging
        """
        self._base_url = base_url.rstrip('/')
        self._token = token
        self._client_options = dict(client_options or {})
        self._log_file = log_file

        self._client = self.build_client(token, log_file)

    def build_client(self, token: Optional[str], log_file: Optional[str]) -> HttpTransport:
        """
        Build a transport for token and log_file without touching this session.

        Raises:
            ConfigurationError: On unknown options or an unusable log file path
        """
        options = build_client_options(token, self._client_options)
        client = HttpTransport(self._base_url, options, log_file)

        logger.debug(
            "LetsPeppol transport created",
            extra={
                'base_url': self._base_url,
                'authenticated': bool(token),
                'logging': bool(log_file),
            }
        )
        return client

    def install_client(
        self,
        client: HttpTransport,
        token: Optional[str],
        log_file: Optional[str],
    ) -> None:
        """Switch to a transport made by build_client() with the same token and log_file."""
        self._token = token
        self._log_file = log_file
        self._client = client

    def get_client(self) -> HttpTransport:
        """The transport currently used for requests."""
        return self._client

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def log_file(self) -> Optional[str]:
        return self._log_file

    @property
    def client_options(self) -> Dict[str, Any]:
        return dict(self._client_options)

    def get_base_url(self) -> str:
        return self._base_url

    def get_token(self) -> Optional[str]:
        return self._token

    def get_log_file(self) -> Optional[str]:
        return self._log_file

    def set_token(self, token: str) -> None:
        """Store a new JWT and rebuild the transport with it.

        Nothing changes when the rebuild fails.
        """
        client = self.build_client(token, self._log_file)
        self.install_client(client, token, self._log_file)

    def set_log_file(self, log_file: Optional[str]) -> None:
        """Enable logging to log_file, or disable it with None.

        Nothing changes when the rebuild fails.
        """
        client = self.build_client(self._token, log_file)
        self.install_client(client, self._token, log_file)

    def close(self) -> None:
        self._client.close()
