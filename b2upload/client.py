"""
B2Uploader - High-level async uploader for Backblaze B2.

Example:
    >>> config = UploaderConfig(owner="alice", token="keyId:key", bucket="images")
    >>> async with B2Uploader(config) as uploader:
    ...     for result in await uploader.upload_files(["a.png", "b.jpg"]):
    ...         print(result.local_path, result.public_url or result.error)
"""
import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from .core.api import APIConfig, AuthorizationService, B2APIClient
from .core.config import UploaderConfig
from .core.exceptions import B2Exception, UploadURLError
from .core.logging import get_logger
from .core.session import Session, UploadCredential
from .core.upload import (
    ContentHasher,
    ExistenceChecker,
    FileTransfer,
    PublicURLBuilder,
    RemotePathBuilder,
    UploadResult,
    UploadURLProvider,
    UploadWorkerPool,
)

logger = get_logger('b2upload.client')


class B2Uploader:
    """
    Uploads batches of local files to a B2 bucket.
    
    The run is: authorize once, get one upload URL, then let the worker
    pool process the files. Authorization failures raise; everything after
    that is reported per file.
    """
    
    def __init__(
        self,
        config: UploaderConfig,
        api_config: Optional[APIConfig] = None,
        today: Callable[[], datetime.date] = datetime.date.today
    ):
        """
        Initialize uploader.
        
        Args:
            config: Validated uploader configuration
            api_config: Endpoints and timeouts (uses defaults if not provided)
            today: Clock used for the date part of remote keys
        """
        self._config = config
        self._api_config = api_config or APIConfig.default()
        self._client = B2APIClient(self._api_config)
        self._hasher = ContentHasher()
        self._path_builder = RemotePathBuilder(self._hasher, today=today)
        self._url_builder = PublicURLBuilder(config)
        self._session: Optional[Session] = None
        self.last_worker_count = 0
    
    @property
    def config(self) -> UploaderConfig:
        return self._config
    
    @property
    def session(self) -> Optional[Session]:
        """Session of the current run, or None before authorize()."""
        return self._session
    
    async def __aenter__(self) -> 'B2Uploader':
        await self._client.__aenter__()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
    
    async def close(self):
        """Release the HTTP session."""
        await self._client.close()
    
    async def authorize(self) -> Session:
        """
        Authorize the account.
        
        Raises:
            AuthError: If authorization fails; the run must stop
        """
        self._session = await AuthorizationService(self._client).authorize(self._config.token)
        return self._session
    
    async def get_upload_credential(self) -> UploadCredential:
        """Request the upload endpoint shared by the whole batch."""
        session = await self._require_session()
        return await UploadURLProvider(self._client).get_upload_url(session)
    
    def build_public_url(self, remote_key: str) -> str:
        """Public URL of a remote key for the current session."""
        if self._session is None:
            raise B2Exception("Not authorized; call authorize() first")
        return self._url_builder.build_url(self._session, remote_key)
    
    async def build_key(self, local_path: Union[str, Path]) -> str:
        """Remote key a local file would be stored under today."""
        return await self._path_builder.build_key(local_path, self._config.owner)
    
    async def upload_files(self, paths: Iterable[Union[str, Path]]) -> List[UploadResult]:
        """
        Upload files, skipping those already present.
        
        Authorizes first if needed. If the upload URL cannot be obtained,
        every file gets a failed result carrying that error.
        
        Args:
            paths: Local file paths (already expanded)
            
        Returns:
            One UploadResult per path, in completion order
            
        Raises:
            AuthError: If authorization fails
        """
        paths = list(paths)
        session = await self._require_session()
        
        credential: Optional[UploadCredential] = None
        credential_error: Optional[UploadURLError] = None
        if paths:
            try:
                credential = await self.get_upload_credential()
            except UploadURLError as e:
                logger.error(f"Could not get upload URL: {e}")
                credential_error = e
        
        pool = UploadWorkerPool(
            config=self._config,
            session=session,
            path_builder=self._path_builder,
            existence_checker=ExistenceChecker(self._client, self._url_builder),
            transfer=FileTransfer(self._client, self._hasher),
            url_builder=self._url_builder,
            pool_size=self._api_config.max_workers
        )
        results = await pool.upload_all(paths, credential, credential_error)
        self.last_worker_count = pool.last_worker_count
        return results
    
    async def _require_session(self) -> Session:
        if self._session is None:
            await self.authorize()
        return self._session
