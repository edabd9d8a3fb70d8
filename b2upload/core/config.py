"""
Uploader configuration.

UploaderConfig is built once at startup and passed explicitly to the
uploader. It is validated on construction so that a bad configuration
fails before any network call is made.
"""
from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigError


@dataclass(frozen=True)
class UploaderConfig:
    """
    Resolved configuration for one upload run.
    
    Attributes:
        owner: Namespace prefix for remote keys (e.g. "alice")
        token: B2 credential as "keyId:applicationKey"
        bucket: Bucket name, used for download URLs
        public_url: Optional custom public domain; when set, the owner prefix
            is dropped from public URLs because the domain already implies it
    
    Example:
        >>> cfg = UploaderConfig(owner="alice", token="id:key", bucket="imgs")
        >>> cfg.has_public_url
        False
    """
    owner: str
    token: str
    bucket: str
    public_url: Optional[str] = None
    
    def __post_init__(self):
        """Normalize and validate fields."""
        for name in ('owner', 'token', 'bucket'):
            value = getattr(self, name)
            value = value.strip() if isinstance(value, str) else ''
            object.__setattr__(self, name, value)
        
        if not self.token:
            raise ConfigError("B2 token is not set; add 'token' to the configuration", field='token')
        if not self.bucket:
            raise ConfigError("B2 bucket is not set; add 'bucket' to the configuration", field='bucket')
        if not self.owner:
            raise ConfigError("Owner (profile username) is not set", field='owner')
        
        public_url = self.public_url.strip() if self.public_url else None
        if public_url and not public_url.startswith(('http://', 'https://')):
            raise ConfigError(
                f"Public URL must start with http:// or https://, got {public_url!r}",
                field='public_url'
            )
        object.__setattr__(self, 'public_url', public_url or None)
    
    @property
    def has_public_url(self) -> bool:
        """True if a custom public domain overrides the B2 download URL."""
        return self.public_url is not None
    
    def __repr__(self) -> str:
        return (
            f"UploaderConfig(owner={self.owner!r}, bucket={self.bucket!r}, "
            f"public_url={self.public_url!r}, token='***')"
        )
