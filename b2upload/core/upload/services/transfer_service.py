"""
File transfer service.

Sends one local file to the upload endpoint with b2_upload_file. The body
is streamed from disk with a fixed Content-Length.
"""
import asyncio
import mimetypes
import time
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Optional
from urllib.parse import quote

import aiofiles
import aiohttp

from ..hashing import ContentHasher
from ...api import B2APIClient, B2APIError
from ...exceptions import LocalIOError, TransferAPIError
from ...logging import get_logger
from ...session import UploadCredential

DEFAULT_CONTENT_TYPE = 'application/octet-stream'
# Tells B2 not to verify a SHA-1; integrity is covered by the MD5 header.
SHA1_DO_NOT_VERIFY = 'do_not_verify'


def guess_content_type(path: Path) -> str:
    """Guess a MIME type from the (lower-cased) file extension."""
    content_type, _ = mimetypes.guess_type('file' + path.suffix.lower())
    return content_type or DEFAULT_CONTENT_TYPE


def encode_file_name(remote_key: str) -> str:
    """Percent-encode a key for the X-Bz-File-Name header, keeping '/'."""
    return quote(remote_key, safe='/')


class FileTransfer:
    """
    Uploads a single file to B2.
    
    Responsibilities:
    - Stat the local file and stream it in chunks
    - Build the b2_upload_file headers
    - Translate service answers into TransferAPIError
    """
    
    def __init__(
        self,
        client: B2APIClient,
        hasher: Optional[ContentHasher] = None,
        chunk_size: int = ContentHasher.CHUNK_SIZE
    ):
        self._client = client
        self._hasher = hasher or ContentHasher()
        self._chunk_size = chunk_size
        self._logger = get_logger('b2upload.upload.transfer')
    
    async def _open(self, path: Path):
        try:
            return await aiofiles.open(path, 'rb')
        except OSError as e:
            raise LocalIOError(f"Cannot open local file {path}: {e}", path=path) from e
    
    async def _iter_chunks(self, handle) -> AsyncIterator[bytes]:
        while True:
            chunk = await handle.read(self._chunk_size)
            if not chunk:
                break
            yield chunk
    
    def build_headers(
        self,
        credential: UploadCredential,
        remote_key: str,
        content_type: str,
        size: int,
        md5_hex: str
    ) -> Dict[str, str]:
        """Build the request headers required by b2_upload_file."""
        return {
            'Authorization': credential.upload_token,
            'X-Bz-File-Name': encode_file_name(remote_key),
            'Content-Type': content_type,
            'Content-Length': str(size),
            'X-Bz-Content-Md5': md5_hex,
            'X-Bz-Content-Sha1': SHA1_DO_NOT_VERIFY,
        }
    
    async def upload(
        self,
        local_path: Path,
        remote_key: str,
        credential: UploadCredential,
        md5_hex: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Upload a file.
        
        Args:
            local_path: File to send
            remote_key: Key to store it under
            credential: Shared upload endpoint and token (read only)
            md5_hex: Precomputed MD5; computed here if not given
            
        Returns:
            Decoded b2_upload_file response
            
        Raises:
            LocalIOError: If the file cannot be opened, stat'ed or read
            TransferAPIError: If the service rejects the upload or the request fails
        """
        try:
            size = local_path.stat().st_size
        except OSError as e:
            raise LocalIOError(f"Cannot stat local file {local_path}: {e}", path=local_path) from e
        
        if md5_hex is None:
            md5_hex = await self._hasher.hash_file(local_path)
        
        headers = self.build_headers(
            credential,
            remote_key,
            guess_content_type(local_path),
            size,
            md5_hex
        )

        handle = await self._open(local_path)
        start = time.time()
        try:
            response = await self._client.post_bytes(
                credential.upload_url,
                self._iter_chunks(handle),
                headers=headers
            )
        except B2APIError as e:
            raise TransferAPIError(
                f"Upload failed (status {e.status}): {e.body}",
                status=e.status,
                body=e.body
            ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransferAPIError(f"Upload request failed: {e!r}") from e
        finally:
            await handle.close()
        
        elapsed = time.time() - start
        size_kb = size / 1024
        speed_kbps = (size_kb / elapsed) if elapsed > 0 else 0
        self._logger.debug(f"Uploaded {remote_key} ({size_kb:.1f} KB) in {elapsed:.2f}s ({speed_kbps:.1f} KB/s)")
        return response
