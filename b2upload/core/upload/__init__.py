"""
Upload module for B2 file uploads.

Leaf components (hashing, key and URL building, API services) are composed
by UploadWorkerPool, which runs a bounded number of concurrent uploads.
"""
from .models import UploadTask, UploadResult, TaskState
from .hashing import ContentHasher
from .paths import RemotePathBuilder, PublicURLBuilder, build_public_url
from .services import UploadURLProvider, ExistenceChecker, FileTransfer
from .pool import UploadWorkerPool, worker_count, DEFAULT_POOL_SIZE

__all__ = [
    # Models
    'UploadTask',
    'UploadResult',
    'TaskState',
    
    # Building blocks
    'ContentHasher',
    'RemotePathBuilder',
    'PublicURLBuilder',
    'build_public_url',
    
    # Services
    'UploadURLProvider',
    'ExistenceChecker',
    'FileTransfer',
    
    # Pool
    'UploadWorkerPool',
    'worker_count',
    'DEFAULT_POOL_SIZE',
]
