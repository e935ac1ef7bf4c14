"""
Storage backends for template sources.
Provides the asynchronous "read bytes by path" capability the renderer
fetches template sources through.
"""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from collections import Counter
from pathlib import Path
from typing import Dict, Optional, Union

import aiofiles

from templar.exceptions import StorageError, TemplateNotFoundError


class TemplateStorage(ABC):
    """Abstract base class for template storage backends"""

    @abstractmethod
    async def read_bytes(self, path: str) -> bytes:
        """Read the full contents stored at path.

        Raises TemplateNotFoundError when nothing exists at path and
        StorageError for any other read failure. Implementations make a
        single attempt.
        """
        pass


class LocalTemplateStorage(TemplateStorage):
    """Local filesystem storage backend"""

    def __init__(self, base_path: Optional[Union[str, Path]] = None):
        self.base_path = Path(base_path) if base_path is not None else None
        self.logger = logging.getLogger("templar.storage.local")

    def _resolve(self, path: str) -> Path:
        file_path = Path(path)
        if self.base_path is not None and not file_path.is_absolute():
            file_path = self.base_path / file_path
        return file_path

    async def read_bytes(self, path: str) -> bytes:
        file_path = self._resolve(path)
        try:
            async with aiofiles.open(file_path, 'rb') as f:
                data = await f.read()
        except FileNotFoundError as e:
            raise TemplateNotFoundError(f"Template not found: {file_path}", path=str(file_path)) from e
        except IsADirectoryError as e:
            raise TemplateNotFoundError(f"Template path is a directory: {file_path}", path=str(file_path)) from e
        except OSError as e:
            raise StorageError(f"Unable to read template {file_path}: {e.strerror or e}", path=str(file_path)) from e

        self.logger.debug(f"Read {len(data)} bytes from {file_path}")
        return data


class InMemoryTemplateStorage(TemplateStorage):
    """Dictionary backed storage, keyed by the full template path"""

    def __init__(self, files: Optional[Dict[str, Union[bytes, str]]] = None, latency: float = 0.0):
        self.files: Dict[str, bytes] = {}
        self.latency = latency
        self.reads: Counter = Counter()
        self.fail_with: Optional[Exception] = None
        for path, content in (files or {}).items():
            self.add(path, content)

    def add(self, path: str, content: Union[bytes, str]) -> None:
        """Store content at path, replacing anything already there"""
        if isinstance(content, str):
            content = content.encode('utf-8')
        self.files[os.path.normpath(path)] = content

    def remove(self, path: str) -> bool:
        return self.files.pop(os.path.normpath(path), None) is not None

    def read_count(self, path: str) -> int:
        return self.reads[os.path.normpath(path)]

    @property
    def total_reads(self) -> int:
        return sum(self.reads.values())

    async def read_bytes(self, path: str) -> bytes:
        key = os.path.normpath(path)
        self.reads[key] += 1
        # yield to the loop on every read
        await asyncio.sleep(self.latency)
        if self.fail_with is not None:
            raise self.fail_with
        try:
            return self.files[key]
        except KeyError:
            raise TemplateNotFoundError(f"Template not found: {path}", path=path) from None


__all__ = ['TemplateStorage', 'LocalTemplateStorage', 'InMemoryTemplateStorage']
