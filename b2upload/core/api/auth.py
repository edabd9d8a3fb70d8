"""
Async authorization service.

Exchanges the account credential for a Session. The authorization
response has changed shape between API versions and key types, so the
fields are looked up in several places.
"""
import asyncio
import base64
from typing import Any, Dict, Iterable, Tuple

import aiohttp

from .client import B2APIClient
from .errors import B2APIError
from ..exceptions import AuthError, AuthFailure
from ..logging import get_logger
from ..session import Session

# Lookup order: top level, then apiInfo.storageApi, then apiInfo.b2.
# A later shape only fills fields that are still empty.
_NESTED_SHAPES: Tuple[Tuple[str, ...], ...] = (
    ('apiInfo', 'storageApi'),
    ('apiInfo', 'b2'),
)
_FIELDS = ('apiUrl', 'downloadUrl', 'bucketId')


def _dig(data: Dict[str, Any], path: Iterable[str]) -> Dict[str, Any]:
    node: Any = data
    for key in path:
        if not isinstance(node, dict):
            return {}
        node = node.get(key)
    return node if isinstance(node, dict) else {}


def _string_field(node: Dict[str, Any], name: str) -> str:
    value = node.get(name)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise AuthError(
            f"Authorization response field {name} is {type(value).__name__}, expected a string",
            reason=AuthFailure.MALFORMED_RESPONSE
        )
    return value


def parse_authorization(data: Dict[str, Any]) -> Session:
    """
    Build a Session from a b2_authorize_account response.
    
    Args:
        data: Decoded JSON response
        
    Returns:
        Session with every field that could be resolved
        
    Raises:
        AuthError: If no shape yields an API URL or a bucket ID, or a
            field holds something other than a string
    """
    resolved = {name: _string_field(data, name) for name in _FIELDS}

    for path in _NESTED_SHAPES:
        shape = _dig(data, path)
        for name in _FIELDS:
            if not resolved[name]:
                resolved[name] = _string_field(shape, name)

    if not resolved['apiUrl']:
        raise AuthError(
            "Authorization response has no apiUrl; check the application key permissions",
            reason=AuthFailure.MISSING_API_URL
        )
    if not resolved['bucketId']:
        raise AuthError(
            "Authorization succeeded but no bucketId was returned; "
            "use an application key restricted to a single bucket",
            reason=AuthFailure.MISSING_BUCKET_ID
        )
    
    return Session(
        api_url=resolved['apiUrl'],
        download_url=resolved['downloadUrl'],
        bucket_id=resolved['bucketId'],
        auth_token=_string_field(data, 'authorizationToken'),
        account_id=_string_field(data, 'accountId')
    )


class AuthorizationService:
    """
    Asynchronous account authorization.
    
    Sends a single b2_authorize_account request using HTTP basic auth.
    """
    
    def __init__(self, client: B2APIClient):
        self._client = client
        self._logger = get_logger('b2upload.auth')
    
    @staticmethod
    def basic_auth_header(token: str) -> str:
        """Encode a "keyId:applicationKey" credential as a basic-auth header value."""
        return 'Basic ' + base64.b64encode(token.encode('utf-8')).decode('ascii')
    
    async def authorize(self, token: str) -> Session:
        """
        Authorize the account.
        
        Args:
            token: Credential as "keyId:applicationKey"
            
        Returns:
            Session for the rest of the run
            
        Raises:
            AuthError: If the request fails or the response is incomplete
        """
        url = self._client.config.authorize_url
        self._logger.info("Authorizing B2 account")
        try:
            data = await self._client.get_json(
                url,
                headers={'Authorization': self.basic_auth_header(token)}
            )
        except B2APIError as e:
            raise AuthError(
                f"Authorization failed (status {e.status}): {e.message}",
                reason=AuthFailure.REQUEST_FAILED,
                status=e.status
            ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise AuthError(
                f"Authorization request failed: {e!r}",
                reason=AuthFailure.REQUEST_FAILED
            ) from e
        
        if not data:
            raise AuthError(
                "Authorization response is empty",
                reason=AuthFailure.MALFORMED_RESPONSE
            )
        
        session = parse_authorization(data)
        self._logger.info("B2 API URL and bucket ID resolved")
        self._logger.debug(f"Authorized: {session!r}")
        return session
