"""
Remote key and public URL construction.

Remote keys have the form {owner}/{YYYY}/{MMDD}/{md5[:16]}{.ext}. The date
is part of the key, so the same content uploaded on another day gets a new
key; on the same day it maps to the same key, which is what makes
existence-based deduplication work.
"""
import datetime
from pathlib import Path
from typing import Callable, Optional, Union

from .hashing import ContentHasher
from ..config import UploaderConfig
from ..exceptions import LocalIOError, PathGenerationError
from ..session import Session


def file_extension(local_path: Union[str, Path]) -> str:
    """
    Return the extension of a file name, dot included.
    
    Everything from the last dot of the base name counts, so a dotfile
    such as ".bashrc" keeps its whole name as the extension. A lone
    trailing dot yields no extension.
    """
    name = Path(local_path).name
    dot = name.rfind('.')
    if dot < 0 or dot == len(name) - 1:
        return ''
    return name[dot:]


class RemotePathBuilder:
    """
    Derives remote object keys from file content, owner and current day.
    
    Example:
        >>> builder = RemotePathBuilder(today=lambda: datetime.date(2024, 1, 1))
        >>> builder.key_for("abcdef0123456789ffff", "photo.PNG", "alice")
        'alice/2024/0101/abcdef0123456789.PNG'
    """
    
    def __init__(
        self,
        hasher: Optional[ContentHasher] = None,
        today: Callable[[], datetime.date] = datetime.date.today
    ):
        """
        Initialize path builder.
        
        Args:
            hasher: Content hasher (default ContentHasher())
            today: Clock returning the current date
        """
        self._hasher = hasher or ContentHasher()
        self._today = today
    
    @property
    def hasher(self) -> ContentHasher:
        return self._hasher
    
    def key_for(
        self,
        hex_digest: str,
        local_path: Union[str, Path],
        owner: str,
        day: Optional[datetime.date] = None
    ) -> str:
        """Build a key from an already computed digest."""
        day = day or self._today()
        name = ContentHasher.key_component(hex_digest) + file_extension(local_path)
        key = f"{owner}/{day:%Y}/{day:%m%d}/{name}"
        return key.replace('\\', '/')
    
    async def build_key(self, local_path: Union[str, Path], owner: str) -> str:
        """
        Hash a file and derive its remote key.
        
        Raises:
            PathGenerationError: If the file cannot be hashed
        """
        key, _ = await self.build_key_with_digest(local_path, owner)
        return key
    
    async def build_key_with_digest(self, local_path: Union[str, Path], owner: str):
        """Like build_key, but also return the full hex digest for reuse."""
        try:
            digest = await self._hasher.hash_file(local_path)
        except LocalIOError as e:
            raise PathGenerationError(f"Cannot derive remote path: {e.message}", path=local_path) from e
        return self.key_for(digest, local_path, owner), digest


class PublicURLBuilder:
    """
    Maps remote keys to public URLs.
    
    With a custom domain the owner prefix is dropped, since the domain
    already identifies the owner. Otherwise the B2 download URL is used:
    {download_url}/file/{bucket}/{key}.
    """
    
    def __init__(self, config: UploaderConfig):
        self._config = config
    
    def build_url(self, session: Session, remote_key: str) -> str:
        if self._config.public_url:
            owner_prefix = self._config.owner + '/'
            path = remote_key[len(owner_prefix):] if remote_key.startswith(owner_prefix) else remote_key
            return f"{self._config.public_url.rstrip('/')}/{path.lstrip('/')}"
        
        return f"{session.download_url.rstrip('/')}/file/{self._config.bucket}/{remote_key}"


def build_public_url(config: UploaderConfig, session: Session, remote_key: str) -> str:
    """Functional form of PublicURLBuilder.build_url."""
    return PublicURLBuilder(config).build_url(session, remote_key)
