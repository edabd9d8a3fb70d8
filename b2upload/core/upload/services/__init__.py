"""Upload services module."""
from .upload_url_service import UploadURLProvider
from .existence_service import ExistenceChecker
from .transfer_service import FileTransfer, guess_content_type, encode_file_name

__all__ = [
    'UploadURLProvider',
    'ExistenceChecker',
    'FileTransfer',
    'guess_content_type',
    'encode_file_name',
]
