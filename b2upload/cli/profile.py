"""
Configuration file and tag profiles.

b2upload.toml holds the account credential plus one or more tag profiles:

    token = "keyId:applicationKey"
    bucket = "my-bucket"
    base_url = "https://img.example.com"   # optional

    [tag]
    default = "blog"

    [tag.blog]
    username = "alice"
    url = "https://img.example.com"         # optional, falls back to base_url
"""
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from ..core.config import UploaderConfig
from ..core.exceptions import ConfigError
from ..core.logging import get_logger

CONFIG_FILE_NAME = 'b2upload.toml'
DEFAULT_TAG = 'private'

logger = get_logger('b2upload.cli.profile')


def search_paths(cwd: Optional[Path] = None, home: Optional[Path] = None) -> list:
    """Candidate config files: current directory first, then home."""
    cwd = cwd or Path.cwd()
    try:
        home = home or Path.home()
    except RuntimeError:
        home = None
    paths = [cwd / CONFIG_FILE_NAME]
    if home is not None:
        paths.append(home / CONFIG_FILE_NAME)
    return paths


def find_config_file(candidates: Iterable[Path]) -> Optional[Path]:
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def load_config_file(path: Optional[Path], required: bool = False) -> Dict[str, Any]:
    """
    Read a TOML config file.
    
    A missing file gives an empty mapping, unless it is required (given
    explicitly by the user), in which case ConfigError is raised. A file
    that cannot be parsed is logged as a warning and gives an empty mapping.
    """
    if path is None:
        return {}
    try:
        with open(path, 'rb') as f:
            return tomllib.load(f)
    except FileNotFoundError:
        if required:
            raise ConfigError(f"Config file not found: {path}", field='config')
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Failed to read config file {path}: {e}")
        return {}


@dataclass(frozen=True)
class Profile:
    """A resolved tag profile."""
    tag: str
    username: str
    url: Optional[str]
    token: str
    bucket: str
    
    def to_config(self) -> UploaderConfig:
        """Validate the profile into an UploaderConfig."""
        return UploaderConfig(
            owner=self.username,
            token=self.token,
            bucket=self.bucket,
            public_url=self.url
        )


def resolve_profile(data: Dict[str, Any], tag: Optional[str] = None) -> Profile:
    """
    Pick a tag profile.
    
    Tag priority: explicit tag, then tag.default, then "private". The
    profile url falls back to the global base_url; if neither is set the
    B2 download URL is used for public links.
    
    Raises:
        ConfigError: If the selected tag has no username
    """
    tags = data.get('tag') if isinstance(data.get('tag'), dict) else {}
    tag_name = tag or tags.get('default') or DEFAULT_TAG
    section = tags.get(tag_name)
    section = section if isinstance(section, dict) else {}
    
    username = str(section.get('username') or '').strip()
    if not username:
        raise ConfigError(
            f"Profile [tag.{tag_name}] is missing or has no username",
            field='owner'
        )
    
    url = section.get('url') or data.get('base_url') or None
    return Profile(
        tag=tag_name,
        username=username,
        url=str(url).strip() if url else None,
        token=str(data.get('token') or ''),
        bucket=str(data.get('bucket') or '')
    )
