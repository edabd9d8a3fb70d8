"""
Content hashing.

MD5 serves both as the integrity header of the transfer and as the
source of the deterministic remote key. It is not used for security.
"""
import hashlib
from pathlib import Path
from typing import Union

import aiofiles

from ..exceptions import LocalIOError
from ..logging import get_logger


class ContentHasher:
    """
    Streams a file through MD5 without loading it in memory.
    
    Uses aiofiles for non-blocking I/O operations.
    """
    
    CHUNK_SIZE = 1024 * 1024
    KEY_LENGTH = 16
    
    def __init__(self, chunk_size: int = CHUNK_SIZE):
        self._chunk_size = chunk_size
        self._logger = get_logger('b2upload.upload.hash')
    
    async def hash_file(self, path: Union[str, Path]) -> str:
        """
        Compute the hex MD5 digest of a file.
        
        Args:
            path: Path to the file
            
        Returns:
            32-character lowercase hex digest
            
        Raises:
            LocalIOError: If the file cannot be opened or read
        """
        digest = hashlib.md5()
        try:
            async with aiofiles.open(path, 'rb') as f:
                while True:
                    chunk = await f.read(self._chunk_size)
                    if not chunk:
                        break
                    digest.update(chunk)
        except OSError as e:
            raise LocalIOError(f"Cannot read {path} for hashing: {e}", path=path) from e
        
        hex_digest = digest.hexdigest()
        self._logger.debug(f"MD5 {path}: {hex_digest}")
        return hex_digest
    
    @classmethod
    def key_component(cls, hex_digest: str) -> str:
        """Truncate a hex digest to the prefix used in remote keys."""
        return hex_digest[:cls.KEY_LENGTH]
