"""Storage root bound to the per-method file store operations."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import AsyncIterable, List, Union

from . import fs
from .fs import ResourceNotFoundError, SourceNotFoundError
from .models import EntryKind, FileInfo, WriteResult
from .utils import format_file_size

logger = logging.getLogger(__name__)


class FileStore:
    """All filesystem operations under a single storage root."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info(f"Ensured storage root exists: {self.root}")

    def resolve(self, rel_path: str) -> Path:
        return fs.resolve_path(self.root, rel_path)

    async def write(self, rel_path: str, chunks: AsyncIterable[bytes]) -> WriteResult:
        """Create or overwrite a file with the given body."""
        target = self.resolve(rel_path)
        await fs.ensure_parent_directory(target)

        existed = await fs.is_file(target)
        result = WriteResult(created=not existed, size=await fs.write_stream(target, chunks))
        logger.info(
            f"{'Created' if result.created else 'Updated'} file: {target} ({format_file_size(result.size)})"
        )
        return result

    async def copy(self, rel_path: str, source_path: str) -> WriteResult:
        """
        Copy an existing file under the root onto rel_path.

        The parent chain of the destination is created before the source is
        checked, so a missing source still leaves those directories behind.
        """
        target = self.resolve(rel_path)
        await fs.ensure_parent_directory(target)

        source = self.resolve(source_path.lstrip('/'))
        if not await fs.is_file(source):
            raise SourceNotFoundError(f"Source file not found: {source_path}")

        existed = await fs.is_file(target)
        result = WriteResult(created=not existed, size=await fs.copy_file(source, target))
        logger.info(f"Copied file: {source} -> {target} ({format_file_size(result.size)})")
        return result

    async def read(self, rel_path: str) -> Union[List[str], bytes]:
        """Child names for a directory, raw bytes for a file."""
        target = self.resolve(rel_path)
        logger.debug("Reading entry", extra={"path": rel_path})

        if await fs.is_dir(target):
            return await fs.list_names(target)
        if await fs.is_file(target):
            return await fs.read_file(target)
        raise ResourceNotFoundError(f"Path not found: {rel_path}")

    async def file_info(self, rel_path: str) -> FileInfo:
        """Metadata for a file. Directories count as missing."""
        target = self.resolve(rel_path)
        if not await fs.is_file(target):
            raise ResourceNotFoundError(f"File not found: {rel_path}")
        return await fs.stat_file(target)

    async def delete(self, rel_path: str) -> EntryKind:
        target = self.resolve(rel_path)

        if await fs.is_file(target):
            await fs.remove_file(target)
            logger.info(f"Deleted file: {target}")
            return EntryKind.FILE
        if await fs.is_dir(target):
            fs.remove_tree(target)
            logger.info(f"Deleted directory: {target}")
            return EntryKind.DIRECTORY
        raise ResourceNotFoundError(f"Path not found: {rel_path}")


__all__ = [
    "FileStore",
    "ResourceNotFoundError",
    "SourceNotFoundError",
]
