"""
Data models for upload module.

Uses dataclasses for immutable, type-safe data structures.
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union


class TaskState(str, Enum):
    """
    Lifecycle of a single upload task.
    
    QUEUED -> EXISTENCE_CHECKED -> SKIPPED
                                -> UPLOADING -> SUCCEEDED | FAILED
    """
    QUEUED = "queued"
    EXISTENCE_CHECKED = "existence_checked"
    UPLOADING = "uploading"
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    
    @property
    def is_terminal(self) -> bool:
        return self in (TaskState.SKIPPED, TaskState.SUCCEEDED, TaskState.FAILED)


@dataclass(frozen=True)
class UploadTask:
    """A local file waiting to be uploaded; consumed by exactly one worker."""
    local_path: Path
    
    @classmethod
    def from_path(cls, path: Union[str, Path]) -> 'UploadTask':
        """Create a task from a str or Path, normalizing the path."""
        return cls(local_path=Path(path))


@dataclass(frozen=True)
class UploadResult:
    """
    Outcome of one upload task.
    
    Attributes:
        local_path: Local file the task was created from
        public_url: Public URL of the remote object (empty on failure)
        error: Exception that ended the task, if any
        skipped: True if the object already existed and nothing was sent
        remote_key: Remote object key (empty if it could not be derived)
        state: Terminal state of the task
    """
    local_path: Path
    public_url: str = ''
    error: Optional[Exception] = None
    skipped: bool = False
    remote_key: str = ''
    state: TaskState = TaskState.SUCCEEDED
    
    @property
    def ok(self) -> bool:
        """Returns True if the file is available remotely."""
        return self.error is None
    
    @classmethod
    def failed(
        cls,
        local_path: Path,
        error: Exception,
        remote_key: str = ''
    ) -> 'UploadResult':
        return cls(
            local_path=local_path,
            error=error,
            remote_key=remote_key,
            state=TaskState.FAILED
        )
