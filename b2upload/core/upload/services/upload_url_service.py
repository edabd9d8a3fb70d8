"""
Upload URL service.

Obtains the upload endpoint and token used by every transfer of a run.
"""
import asyncio

import aiohttp

from ...api import B2APIClient, B2APIError
from ...exceptions import UploadURLError
from ...logging import get_logger
from ...session import Session, UploadCredential


class UploadURLProvider:
    """
    Calls b2_get_upload_url once per run.
    
    Responsibilities:
    - Post the bucket ID with the session token
    - Validate the answer and wrap it in an UploadCredential
    """
    
    def __init__(self, client: B2APIClient):
        self._client = client
        self._logger = get_logger('b2upload.upload.url')
    
    async def get_upload_url(self, session: Session) -> UploadCredential:
        """
        Get an upload endpoint for the session's bucket.
        
        Raises:
            UploadURLError: If the call fails or the answer is incomplete
        """
        if not session.bucket_id:
            raise UploadURLError("Bucket ID is missing; cannot request an upload URL")
        
        url = self._client.config.endpoint(session.api_url, 'get_upload_url')
        self._logger.info("Requesting upload URL")
        try:
            data = await self._client.post_json(
                url,
                {'bucketId': session.bucket_id},
                headers={'Authorization': session.auth_token}
            )
        except B2APIError as e:
            raise UploadURLError(f"Getting upload URL failed (status {e.status}): {e.message}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise UploadURLError(f"Getting upload URL failed: {e!r}") from e
        
        upload_url = data.get('uploadUrl')
        upload_token = data.get('authorizationToken')
        if not upload_url or not upload_token:
            raise UploadURLError("Upload URL response is missing uploadUrl or authorizationToken")
        
        return UploadCredential(upload_url=upload_url, upload_token=upload_token)
