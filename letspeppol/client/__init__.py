"""
LetsPeppol API Client

HTTP clients for the LetsPeppol KYC, Proxy and App REST APIs.
"""

from .letspeppol_client import LetsPeppolClient
from .session import Session
from .transport import HttpTransport
from .kyc_client import KycClient
from .proxy_client import ProxyClient
from .app_client import AppClient
from .exceptions import (
    LetsPeppolError,
    ApiError,
    AuthenticationError,
    ServerError,
    ConfigurationError,
)

__all__ = [
    'LetsPeppolClient',
    'Session',
    'HttpTransport',
    'KycClient',
    'ProxyClient',
    'AppClient',
    'LetsPeppolError',
    'ApiError',
    'AuthenticationError',
    'ServerError',
    'ConfigurationError',
]
