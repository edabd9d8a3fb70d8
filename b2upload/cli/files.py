"""Expansion of command line arguments into local file paths."""
import glob
from pathlib import Path
from typing import Callable, Iterable, List, Optional


def find_files(path_or_pattern: str) -> List[Path]:
    """
    Expand one argument into files.
    
    A directory yields its direct children that are files; anything else
    is treated as a glob pattern (a plain file name matches itself).
    
    Raises:
        ValueError: If the argument is empty
    """
    if not path_or_pattern:
        raise ValueError("File path or pattern must not be empty")
    
    path = Path(path_or_pattern)
    if path.is_dir():
        return sorted(child for child in path.iterdir() if child.is_file())
    
    return sorted(Path(match) for match in glob.glob(path_or_pattern) if Path(match).is_file())


def collect_files(
    patterns: Iterable[str],
    on_error: Optional[Callable[[str, Exception], None]] = None
) -> List[Path]:
    """
    Expand every argument, dropping duplicates while keeping first-seen order.
    
    Args:
        patterns: Files, directories or glob patterns
        on_error: Called with (pattern, error) for arguments that fail to expand
    """
    seen = set()
    files: List[Path] = []
    for pattern in patterns:
        try:
            matches = find_files(pattern)
        except (OSError, ValueError) as e:
            if on_error:
                on_error(pattern, e)
            continue
        for match in matches:
            key = match.resolve()
            if key not in seen:
                seen.add(key)
                files.append(match)
    return files
