"""
Unified LetsPeppol API client

Provides access to all LetsPeppol API surfaces:
- KYC: authentication and registration
- Proxy: document transmission and registry
- App: document management and business logic

One Session per surface; the JWT is always the same on all three.
"""

from typing import Any, Dict, Optional

from letspeppol.config import LetsPeppolConfig, DEFAULT_CONFIG
from letspeppol.utils.logging_config import get_logger
from .app_client import AppClient
from .exceptions import LetsPeppolError
from .kyc_client import KycClient
from .proxy_client import ProxyClient
from .session import Session, merge_options

logger = get_logger('letspeppol.client')


class LetsPeppolClient:
    """
    Facade over the KYC, Proxy and App clients.

    Usage:
        with LetsPeppolClient() as client:
            client.authenticate('user@example.com', 'secret')
            documents = client.proxy.get_all_new_documents()
    """

    def __init__(
        self,
        kyc_url: Optional[str] = None,
        proxy_url: Optional[str] = None,
        app_url: Optional[str] = None,
        token: Optional[str] = None,
        log_file: Optional[str] = None,
        client_options: Optional[Dict[str, Any]] = None,
        config: Optional[LetsPeppolConfig] = None,
    ):
        """
        Initialize the client.

        Args:
            kyc_url: KYC API base URL (default from config)
            proxy_url: Proxy API base URL (default from config)
            app_url: App API base URL (default from config)
            token: Optional JWT for authenticated requests
            log_file: Optional request/response log path, shared by all surfaces
            client_options: Transport options applied to every session
            config: Optional configuration; DEFAULT_CONFIG when omitted
        """
        self.config = config or DEFAULT_CONFIG

        token = token or self.config.TOKEN
        log_file = log_file or self.config.LOG_FILE
        options = merge_options(self.config.client_options(), client_options or {})

        self.kyc_session = Session(kyc_url or self.config.KYC_URL, token, options, log_file)
        self.proxy_session = Session(proxy_url or self.config.PROXY_URL, token, options, log_file)
        self.app_session = Session(app_url or self.config.APP_URL, token, options, log_file)

        # Tokens from authentication and Peppol (un)registration must reach every surface
        self._kyc_client = KycClient(self.kyc_session, token_listener=self.set_token)
        self._proxy_client = ProxyClient(self.proxy_session)
        self._app_client = AppClient(self.app_session)

    @classmethod
    def with_token(cls, token: str, **kwargs) -> 'LetsPeppolClient':
        """Create a client that is already authenticated with token."""
        return cls(**kwargs).set_token(token)

    @classmethod
    def from_config(cls, config: LetsPeppolConfig, **kwargs) -> 'LetsPeppolClient':
        return cls(config=config, **kwargs)

    @property
    def kyc(self) -> KycClient:
        return self._kyc_client

    @property
    def proxy(self) -> ProxyClient:
        return self._proxy_client

    @property
    def app(self) -> AppClient:
        return self._app_client

    def _sessions(self):
        return (self.kyc_session, self.proxy_session, self.app_session)

    def _rebuild_sessions(self, token: Optional[str], log_file: Optional[str]) -> None:
        """Give all three sessions new transports, or leave all three untouched."""
        built = []
        try:
            for session in self._sessions():
                built.append(session.build_client(token, log_file))
        except LetsPeppolError:
            for client in built:
                client.close()
            raise

        for session, client in zip(self._sessions(), built):
            session.install_client(client, token, log_file)

    def set_token(self, token: str) -> 'LetsPeppolClient':
        """Set the JWT on all three sessions."""
        self._rebuild_sessions(token, self.get_log_file())
        return self

    def get_token(self) -> Optional[str]:
        return self.kyc_session.get_token()

    def set_log_file(self, log_file: Optional[str]) -> 'LetsPeppolClient':
        """Enable (path) or disable (None) request logging on all three sessions."""
        self._rebuild_sessions(self.get_token(), log_file)
        return self

    def get_log_file(self) -> Optional[str]:
        return self.kyc_session.get_log_file()

    def authenticate(self, email: str, password: str) -> str:
        """
        Authenticate against KYC and share the token with every surface.

        The KYC client hands the token to set_token(), which updates all
        three sessions or none of them.

        Returns:
            JWT token

        Raises:
            AuthenticationError: If authentication fails
        """
        token = self._kyc_client.authenticate(email, password)
        logger.info("Token distributed to all API surfaces")
        return token

    def close(self):
        """Close all sessions."""
        for session in self._sessions():
            session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
