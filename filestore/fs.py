"""
Filesystem operations for filestore

Every externally supplied path is joined to the storage root by
``resolve_path`` and nowhere else.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import AsyncIterable, List

import aiofiles
import aiofiles.os

from .models import FileInfo

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


class FileSystemError(Exception):
    """Generic filesystem error"""
    pass


class ResourceNotFoundError(FileSystemError):
    """Raised when a path does not resolve to the expected entry"""
    pass


class SourceNotFoundError(ResourceNotFoundError):
    """Raised when the source of a copy is not an existing file"""
    pass


def resolve_path(root_path: Path, rel_path: str) -> Path:
    """
    Join a request path onto the storage root

    Plain ``os.path.join`` semantics: no normalization, no ``..`` check.
    An absolute ``rel_path`` replaces the root entirely.

    Args:
        root_path: Storage root directory
        rel_path: Path captured from the request URL

    Returns:
        Joined path (not resolved)
    """
    return Path(os.path.join(root_path, rel_path))


async def is_file(path: Path) -> bool:
    return await aiofiles.os.path.isfile(path)


async def is_dir(path: Path) -> bool:
    return await aiofiles.os.path.isdir(path)


async def ensure_parent_directory(path: Path) -> None:
    """Create the parent directory chain of path if missing"""
    parent = os.path.dirname(path)
    if parent:
        await aiofiles.os.makedirs(parent, exist_ok=True)


async def write_stream(path: Path, chunks: AsyncIterable[bytes]) -> int:
    """
    Replace file content with the given byte chunks

    The file is truncated on open. A failure midway leaves a partial file.

    Returns:
        Number of bytes written
    """
    bytes_written = 0
    async with aiofiles.open(path, 'wb') as f:
        async for chunk in chunks:
            if not chunk:
                continue
            bytes_written += len(chunk)
            await f.write(chunk)
    return bytes_written


async def copy_file(source: Path, destination: Path) -> int:
    """Copy source bytes over destination, overwriting it"""
    if await aiofiles.os.path.exists(destination) and await aiofiles.os.path.samefile(source, destination):
        raise shutil.SameFileError(f"{source} and {destination} are the same file")

    bytes_copied = 0
    async with aiofiles.open(source, 'rb') as src, aiofiles.open(destination, 'wb') as dst:
        while True:
            chunk = await src.read(CHUNK_SIZE)
            if not chunk:
                break
            bytes_copied += len(chunk)
            await dst.write(chunk)
    return bytes_copied


async def read_file(path: Path) -> bytes:
    async with aiofiles.open(path, 'rb') as f:
        return await f.read()


async def list_names(path: Path) -> List[str]:
    """Names of immediate children, in enumeration order"""
    return await aiofiles.os.listdir(path)


async def stat_file(path: Path) -> FileInfo:
    stat = await aiofiles.os.stat(path)
    return FileInfo(size=stat.st_size, modified=stat.st_mtime)


async def remove_file(path: Path) -> None:
    await aiofiles.os.remove(path)


def remove_tree(path: Path) -> None:
    """Remove a directory and all of its contents"""
    shutil.rmtree(path)
