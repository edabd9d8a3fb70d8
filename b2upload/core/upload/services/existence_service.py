"""
Existence check service.

A key exists only if listing from that key returns it as the first name;
a longer name that merely starts with the key does not count.
"""
import asyncio
from typing import Optional, Tuple

import aiohttp

from ..paths import PublicURLBuilder
from ...api import B2APIClient, B2APIError
from ...exceptions import ExistenceCheckError
from ...session import Session


class ExistenceChecker:
    """Checks whether a remote key is already stored in the bucket."""
    
    def __init__(self, client: B2APIClient, url_builder: PublicURLBuilder):
        self._client = client
        self._url_builder = url_builder
    
    async def exists(self, session: Session, remote_key: str) -> Tuple[Optional[str], bool]:
        """
        Look up a remote key.
        
        Args:
            session: Authorized session
            remote_key: Key to look up
            
        Returns:
            (public_url, True) if the key exists, (None, False) otherwise
            
        Raises:
            ExistenceCheckError: If the listing request fails or its
                ``files`` field is not a list
        """
        url = self._client.config.endpoint(session.api_url, 'list_file_names')
        payload = {
            'bucketId': session.bucket_id,
            'startFileName': remote_key,
            'maxFileCount': 1,
        }
        try:
            data = await self._client.post_json(
                url,
                payload,
                headers={'Authorization': session.auth_token}
            )
        except B2APIError as e:
            raise ExistenceCheckError(f"Listing {remote_key} failed (status {e.status}): {e.message}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ExistenceCheckError(f"Listing {remote_key} failed: {e!r}") from e
        
        files = data.get('files') or []
        if not isinstance(files, list):
            raise ExistenceCheckError(
                f"Listing {remote_key} returned malformed files: {type(files).__name__}"
            )
        if files and isinstance(files[0], dict) and files[0].get('fileName') == remote_key:
            return self._url_builder.build_url(session, remote_key), True
        return None, False
