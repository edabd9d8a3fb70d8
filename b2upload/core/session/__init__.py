"""Session models for authorized B2 access."""
from .models import Session, UploadCredential

__all__ = [
    'Session',
    'UploadCredential',
]
