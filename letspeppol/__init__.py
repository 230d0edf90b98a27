"""
LetsPeppol SDK

Python client for the LetsPeppol e-invoicing platform.
"""

from .config import LetsPeppolConfig, DEFAULT_CONFIG
from .client import (
    LetsPeppolClient,
    Session,
    KycClient,
    ProxyClient,
    AppClient,
    LetsPeppolError,
    ApiError,
    AuthenticationError,
    ServerError,
    ConfigurationError,
)

__version__ = '1.0.0'

__all__ = [
    'LetsPeppolConfig',
    'DEFAULT_CONFIG',
    'LetsPeppolClient',
    'Session',
    'KycClient',
    'ProxyClient',
    'AppClient',
    'LetsPeppolError',
    'ApiError',
    'AuthenticationError',
    'ServerError',
    'ConfigurationError',
]
