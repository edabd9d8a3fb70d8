"""
API configuration module.

Endpoints, timeouts and worker limits for the B2 API client.
"""
from dataclasses import dataclass, field
from typing import Dict, Any

import aiohttp

DEFAULT_AUTHORIZE_URL = 'https://api.backblazeb2.com/b2api/v3/b2_authorize_account'


@dataclass(frozen=True)
class TimeoutConfig:
    """
    Timeout configuration.
    
    Every request is a single attempt bounded by `total`.
    """
    total: float = 60.0
    connect: float = 10.0
    
    def to_aiohttp_timeout(self) -> aiohttp.ClientTimeout:
        """Convert to aiohttp ClientTimeout."""
        return aiohttp.ClientTimeout(total=self.total, connect=self.connect)


@dataclass(frozen=True)
class APIConfig:
    """
    Complete API configuration.
    
    Attributes:
        authorize_url: Account authorization endpoint
        api_version: Version segment used for calls against the session's API URL
        timeout: Per-request timeouts
        user_agent: User-Agent header sent with every request
        max_workers: Upper bound on concurrent file uploads
        limit: Connection pool size
    """
    authorize_url: str = DEFAULT_AUTHORIZE_URL
    api_version: str = 'v3'
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    user_agent: str = 'b2upload/1.0.0'
    max_workers: int = 5
    limit: int = 20
    
    @classmethod
    def default(cls) -> 'APIConfig':
        """Create default configuration."""
        return cls()
    
    def endpoint(self, api_url: str, operation: str) -> str:
        """
        Build the URL of an API operation.
        
        Args:
            api_url: API base URL returned by authorization
            operation: Operation name without the b2_ prefix (e.g. 'list_file_names')
        """
        return f"{api_url.rstrip('/')}/b2api/{self.api_version}/b2_{operation}"
    
    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {'limit': self.limit}
    
    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        return {
            'headers': {'User-Agent': self.user_agent},
            'timeout': self.timeout.to_aiohttp_timeout(),
        }
