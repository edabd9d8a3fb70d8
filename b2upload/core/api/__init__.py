"""B2 native API module."""
from .client import B2APIClient
from .errors import B2APIError
from .config import APIConfig, TimeoutConfig, DEFAULT_AUTHORIZE_URL
from .auth import AuthorizationService, parse_authorization

__all__ = [
    'B2APIClient',
    'B2APIError',
    'APIConfig',
    'TimeoutConfig',
    'DEFAULT_AUTHORIZE_URL',
    'AuthorizationService',
    'parse_authorization',
]
