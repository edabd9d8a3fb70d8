"""
Session data models.

Both values are produced once per run and only ever read afterwards,
so concurrent workers can share them without locking.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Session:
    """
    Result of a successful account authorization.
    
    Attributes:
        api_url: Base URL for API calls (get_upload_url, list_file_names)
        download_url: Base URL for public downloads
        bucket_id: Identifier of the bucket the key is allowed to write to
        auth_token: Account authorization token for API calls
        account_id: B2 account identifier
    """
    api_url: str
    download_url: str
    bucket_id: str
    auth_token: str
    account_id: str = ''
    
    def __repr__(self) -> str:
        return (
            f"Session(api_url={self.api_url!r}, download_url={self.download_url!r}, "
            f"bucket_id={self.bucket_id!r}, account_id={self.account_id!r})"
        )


@dataclass(frozen=True)
class UploadCredential:
    """
    Upload endpoint and token returned by b2_get_upload_url.
    
    Obtained once per run and reused for every file; it is not renewed
    when it expires.
    """
    upload_url: str
    upload_token: str
    
    def __repr__(self) -> str:
        return f"UploadCredential(upload_url={self.upload_url!r})"
