"""
b2upload - Async uploader for Backblaze B2 with existence-based deduplication.

Usage:
    >>> from b2upload import B2Uploader, UploaderConfig
    >>> 
    >>> config = UploaderConfig(owner="alice", token="keyId:key", bucket="images")
    >>> async with B2Uploader(config) as uploader:
    ...     results = await uploader.upload_files(["photo.png"])
"""
import logging

__version__ = '1.0.0'

from .client import B2Uploader
from .core.config import UploaderConfig
from .core.api import APIConfig, TimeoutConfig, B2APIClient, B2APIError
from .core.session import Session, UploadCredential
from .core.upload import UploadResult, UploadTask, TaskState
from .core.exceptions import (
    B2Exception,
    ConfigError,
    AuthError,
    AuthFailure,
    UploadURLError,
    ExistenceCheckError,
    LocalIOError,
    TransferAPIError,
    PathGenerationError,
)


def setup_logging(level=logging.INFO):
    """
    Configure logging for b2upload modules.
    
    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'b2upload',
        'b2upload.api',
        'b2upload.auth',
        'b2upload.client',
        'b2upload.upload',
        'b2upload.upload.pool',
        'b2upload.upload.transfer',
        'b2upload.upload.url',
        'b2upload.upload.hash',
    ]
    
    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'B2Uploader',
    'UploaderConfig',
    'APIConfig',
    'TimeoutConfig',
    'B2APIClient',
    'B2APIError',
    'Session',
    'UploadCredential',
    'UploadResult',
    'UploadTask',
    'TaskState',
    'B2Exception',
    'ConfigError',
    'AuthError',
    'AuthFailure',
    'UploadURLError',
    'ExistenceCheckError',
    'LocalIOError',
    'TransferAPIError',
    'PathGenerationError',
    'setup_logging',
    '__version__',
]
