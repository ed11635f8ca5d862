"""
Data models and constants for filestore
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


WELCOME_TEXT = (
    "Welcome to the File Storage API! "
    "Use paths like /path/to/file.txt to interact with files."
)

COPY_FROM_HEADER = "X-Copy-From"


class Message(Enum):
    """Response messages returned in {"message": ...} bodies"""
    FILE_CREATED = "File created successfully"
    FILE_UPDATED = "File updated successfully"
    FILE_COPIED = "File copied successfully"
    FILE_OVERWRITTEN = "File overwritten successfully"
    FILE_DELETED = "File deleted successfully"
    DIRECTORY_DELETED = "Directory deleted successfully"
    SOURCE_NOT_FOUND = "Source file not found"
    NOT_FOUND = "File or directory not found"
    FILE_NOT_FOUND = "File not found"


class EntryKind(Enum):
    """Kind of filesystem entry a path resolves to"""
    FILE = "file"
    DIRECTORY = "directory"


@dataclass
class MessageResponse:
    """Standard status/error response body"""
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message}


@dataclass
class FileInfo:
    """Metadata the filesystem natively tracks for a file"""
    size: int
    modified: float


@dataclass
class WriteResult:
    """Outcome of a PUT: whether the destination is new and bytes written"""
    created: bool
    size: int


@dataclass
class ServerConfig:
    """Server configuration"""
    addr: str = "0.0.0.0"
    port: int = 8080


@dataclass
class StorageConfig:
    """Storage configuration"""
    root: str = "Storage"


@dataclass
class LoggingConfig:
    """Logging configuration"""
    json: bool = False
    file: str = ""
    level: str = "INFO"
    max_size_mb: int = 100
    backup_count: int = 5


@dataclass
class Config:
    """Main configuration container"""
    server: ServerConfig = field(default_factory=ServerConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
