"""
Async B2 API client.

Thin wrapper over a shared aiohttp session. It knows how to send JSON
calls and raw uploads and turns non-2xx answers into B2APIError; it does
not know anything about what the calls mean.
"""
import json
import time
from typing import Any, AsyncIterable, Dict, Mapping, Optional, Union

import aiohttp

from .config import APIConfig
from .errors import B2APIError
from ..logging import get_logger


class B2APIClient:
    """
    Asynchronous HTTP client for the B2 native API.
    
    One session (and connection pool) is shared by every request of a run,
    so concurrent workers reuse connections.
    
    Example:
        >>> async with B2APIClient() as client:
        ...     data = await client.get_json(url, headers={'Authorization': 'Basic ...'})
    """
    
    def __init__(
        self,
        config: Optional[APIConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize API client.
        
        Args:
            config: API configuration (uses defaults if not provided)
            session: Optional externally managed session
        """
        self._config = config or APIConfig.default()
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger('b2upload.api')
    
    @property
    def config(self) -> APIConfig:
        """Get current configuration."""
        return self._config
    
    async def __aenter__(self) -> 'B2APIClient':
        await self._ensure_session()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
    
    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(**self._config.get_connector_kwargs()),
                **self._config.get_session_kwargs()
            )
            self._owns_session = True
        return self._session
    
    async def close(self):
        """Close session if we own it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            self._session = None
    
    async def get_json(self, url: str, headers: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """
        Send a GET request and decode the JSON answer.
        
        Raises:
            B2APIError: If the service answers with a non-2xx status
            aiohttp.ClientError: On transport failures
            asyncio.TimeoutError: If the request exceeds the configured timeout
        """
        return await self._send('GET', url, headers=headers)
    
    async def post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Mapping[str, str]] = None
    ) -> Dict[str, Any]:
        """Send a JSON body with POST and decode the JSON answer."""
        return await self._send('POST', url, headers=headers, json=payload)
    
    async def post_bytes(
        self,
        url: str,
        data: Union[bytes, AsyncIterable[bytes]],
        headers: Optional[Mapping[str, str]] = None
    ) -> Dict[str, Any]:
        """
        Send a raw body with POST and decode the JSON answer.
        
        An async iterable body is streamed; pass Content-Length in headers
        so it is not sent chunked.
        """
        return await self._send('POST', url, headers=headers, data=data)
    
    async def _send(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        session = await self._ensure_session()
        start = time.time()
        async with session.request(method, url, **kwargs) as response:
            body = await response.text()
            elapsed = time.time() - start
            self._logger.debug(f"{method} {url} -> {response.status} in {elapsed:.2f}s")
            if response.status < 200 or response.status >= 300:
                raise B2APIError(response.status, body)
            if not body:
                return {}
            try:
                data = json.loads(body)
            except ValueError as e:
                raise B2APIError(response.status, body) from e
            return data if isinstance(data, dict) else {}
