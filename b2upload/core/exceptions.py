"""
Custom exceptions for B2 upload operations.

Fatal errors (ConfigError, AuthError) abort a run before any file is
processed. Every other error is scoped to a single file and ends up in
that file's UploadResult.
"""
from enum import Enum
from pathlib import Path
from typing import Optional, Union


class B2Exception(Exception):
    """Base exception for all b2upload errors."""
    
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(B2Exception):
    """Exception raised when a required configuration field is missing or invalid."""
    
    def __init__(self, message: str, field: Optional[str] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            field: Name of the offending configuration field
        """
        self.field = field
        super().__init__(message)


class AuthFailure(str, Enum):
    """Reasons an account authorization can fail."""
    MISSING_API_URL = "missing_api_url"
    MISSING_BUCKET_ID = "missing_bucket_id"
    REQUEST_FAILED = "request_failed"
    MALFORMED_RESPONSE = "malformed_response"


class AuthError(B2Exception):
    """Exception raised when account authorization fails."""
    
    def __init__(
        self,
        message: str,
        reason: AuthFailure,
        status: Optional[int] = None
    ) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            reason: Which step of the authorization failed
            status: HTTP status of the authorization response (if any)
        """
        self.reason = reason
        self.status = status
        super().__init__(message)


class UploadURLError(B2Exception):
    """Exception raised when the upload endpoint and token cannot be obtained."""
    pass


class ExistenceCheckError(B2Exception):
    """Exception raised when listing the bucket for an existing key fails."""
    pass


class LocalIOError(B2Exception):
    """Exception raised when a local file cannot be opened, stat'ed or read."""
    
    def __init__(self, message: str, path: Union[str, Path, None] = None) -> None:
        self.path = path
        super().__init__(message)


class PathGenerationError(LocalIOError):
    """Exception raised when the remote key of a file cannot be derived."""
    pass


class TransferAPIError(B2Exception):
    """Exception raised when the service rejects a file transfer."""
    
    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        body: str = ""
    ) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            status: HTTP status code (None for transport failures)
            body: Raw response body returned by the service
        """
        self.status = status
        self.body = body
        super().__init__(message)
