"""
LetsPeppol SDK Configuration

Base URLs for the three API surfaces plus connection and logging defaults.
A config instance is passed explicitly to the client; there is no
process-wide mutable configuration.
"""

import os
from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass
class LetsPeppolConfig:
    """LetsPeppol API configuration settings."""

    # API endpoints
    KYC_URL: str = "https://kyc.letspeppol.org"
    PROXY_URL: str = "https://proxy.letspeppol.org"
    APP_URL: str = "https://app.letspeppol.org"

    # Connection settings
    REQUEST_TIMEOUT: float = 30  # seconds
    USER_AGENT: str = "LetsPeppol Python SDK"

    # Request/response audit log, disabled when None
    LOG_FILE: Optional[str] = None

    # Pre-issued JWT, skips authenticate() when set
    TOKEN: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'LetsPeppolConfig':
        """Load configuration from environment variables.

        Raises:
            ConfigurationError: If LETSPEPPOL_TIMEOUT is not a number
        """
        # letspeppol.client imports this module
        from letspeppol.client.exceptions import ConfigurationError

        timeout = os.environ.get('LETSPEPPOL_TIMEOUT', str(cls.REQUEST_TIMEOUT))
        try:
            timeout = float(timeout)
        except ValueError as e:
            raise ConfigurationError(f"LETSPEPPOL_TIMEOUT must be a number, got {timeout!r}") from e

        return cls(
            KYC_URL=os.environ.get('LETSPEPPOL_KYC_URL', cls.KYC_URL),
            PROXY_URL=os.environ.get('LETSPEPPOL_PROXY_URL', cls.PROXY_URL),
            APP_URL=os.environ.get('LETSPEPPOL_APP_URL', cls.APP_URL),
            REQUEST_TIMEOUT=timeout,
            LOG_FILE=os.environ.get('LETSPEPPOL_LOG_FILE') or None,
            TOKEN=os.environ.get('LETSPEPPOL_TOKEN') or None,
        )

    def client_options(self) -> Dict[str, Any]:
        """Session options derived from this config."""
        return {
            'timeout': self.REQUEST_TIMEOUT,
            'headers': {'User-Agent': self.USER_AGENT},
        }


# Default configuration instance
DEFAULT_CONFIG = LetsPeppolConfig()
