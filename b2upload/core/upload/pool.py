"""
Upload worker pool.

Fans a batch of files out to a fixed number of worker coroutines and
collects exactly one UploadResult per file. Results come back in
completion order, not in submission order.
"""
import asyncio
import time
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .models import TaskState, UploadResult, UploadTask
from .paths import PublicURLBuilder, RemotePathBuilder
from .services import ExistenceChecker, FileTransfer
from ..config import UploaderConfig
from ..exceptions import B2Exception, ExistenceCheckError, UploadURLError
from ..logging import get_logger
from ..session import Session, UploadCredential

logger = get_logger('b2upload.upload.pool')

DEFAULT_POOL_SIZE = 5


def worker_count(task_count: int, pool_size: int = DEFAULT_POOL_SIZE) -> int:
    """Number of workers used for a batch: min(pool_size, task_count)."""
    return max(0, min(pool_size, task_count))


class UploadWorkerPool:
    """
    Drives a batch of files through existence check, hashing and transfer.
    
    Each worker handles one task at a time:
    
    1. derive the remote key (hash the file)
    2. check whether the key exists; if it does, the task is skipped
    3. otherwise upload the file with the shared credential
    4. build the public URL
    
    A failure in one task never stops the others.
    
    Example:
        >>> pool = UploadWorkerPool(config, session, paths, checker, transfer, url_builder)
        >>> results = await pool.upload_all(["a.png", "b.png"], credential)
    """
    
    def __init__(
        self,
        config: UploaderConfig,
        session: Session,
        path_builder: RemotePathBuilder,
        existence_checker: ExistenceChecker,
        transfer: FileTransfer,
        url_builder: PublicURLBuilder,
        pool_size: int = DEFAULT_POOL_SIZE
    ):
        self._config = config
        self._session = session
        self._paths = path_builder
        self._checker = existence_checker
        self._transfer = transfer
        self._urls = url_builder
        self._pool_size = pool_size
        self.last_worker_count = 0
    
    async def upload_all(
        self,
        paths: Iterable[Union[str, Path, UploadTask]],
        credential: Optional[UploadCredential],
        credential_error: Optional[UploadURLError] = None
    ) -> List[UploadResult]:
        """
        Upload a batch of files.
        
        Args:
            paths: Local files (or prepared tasks)
            credential: Upload endpoint shared by every worker
            credential_error: Set when the credential could not be obtained;
                every task then fails with this error instead of aborting the batch
            
        Returns:
            One result per input, in completion order
        """
        tasks = [p if isinstance(p, UploadTask) else UploadTask.from_path(p) for p in paths]
        count = len(tasks)
        workers = worker_count(count, self._pool_size)
        self.last_worker_count = workers
        if count == 0:
            return []
        
        if credential is None and credential_error is None:
            credential_error = UploadURLError("No upload credential available")
        
        # Both queues are sized for the whole batch and fed before workers start.
        queue: asyncio.Queue = asyncio.Queue(maxsize=count)
        results: asyncio.Queue = asyncio.Queue(maxsize=count)
        for task in tasks:
            queue.put_nowait(task)
        
        start = time.time()
        logger.info(f"Uploading {count} files with {workers} workers")
        await asyncio.gather(*(
            self._worker(index, queue, results, credential, credential_error)
            for index in range(workers)
        ))
        logger.info(f"Batch of {count} files finished in {time.time() - start:.2f}s")
        
        collected: List[UploadResult] = []
        while not results.empty():
            collected.append(results.get_nowait())
        return collected
    
    async def _worker(
        self,
        index: int,
        queue: asyncio.Queue,
        results: asyncio.Queue,
        credential: Optional[UploadCredential],
        credential_error: Optional[UploadURLError]
    ) -> None:
        while True:
            try:
                task = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            
            if credential_error is not None:
                error = UploadURLError(f"Cannot upload, no upload URL: {credential_error.message}")
                error.__cause__ = credential_error
                result = UploadResult.failed(task.local_path, error)
            else:
                result = await self._run_task(task, credential)
            
            logger.debug(f"Worker {index} finished {task.local_path}: {result.state.value}")
            results.put_nowait(result)
    
    async def _run_task(self, task: UploadTask, credential: UploadCredential) -> UploadResult:
        """Process one task; always returns a result."""
        path = task.local_path
        remote_key = ''
        try:
            remote_key, digest = await self._paths.build_key_with_digest(path, self._config.owner)
            logger.info(f"Processing {path.name} -> {remote_key}")
            
            try:
                public_url, exists = await self._checker.exists(self._session, remote_key)
            except ExistenceCheckError as e:
                logger.warning(f"Existence check failed for {remote_key}, uploading anyway: {e}")
                public_url, exists = None, False
            logger.debug(f"{path.name}: {TaskState.EXISTENCE_CHECKED.value} (exists={exists})")
            
            if exists:
                logger.info(f"Skipping {path.name}: {remote_key} already exists")
                return UploadResult(
                    local_path=path,
                    public_url=public_url or self._urls.build_url(self._session, remote_key),
                    skipped=True,
                    remote_key=remote_key,
                    state=TaskState.SKIPPED
                )
            
            logger.debug(f"{path.name}: {TaskState.UPLOADING.value}")
            await self._transfer.upload(path, remote_key, credential, md5_hex=digest)
            return UploadResult(
                local_path=path,
                public_url=self._urls.build_url(self._session, remote_key),
                remote_key=remote_key,
                state=TaskState.SUCCEEDED
            )
        except B2Exception as e:
            logger.error(f"Upload of {path} failed: {e}")
            return UploadResult.failed(path, e, remote_key)
        except Exception as e:
            logger.exception(f"Unexpected error uploading {path}")
            return UploadResult.failed(path, e, remote_key)
