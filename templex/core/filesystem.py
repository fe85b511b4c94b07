"""
Filesystem access used by module resolution and cross-file extraction.

Reads happen off the event loop so that they are suspension points for the
caller's scheduler.
"""
import asyncio
import logging
from pathlib import Path
from typing import Union

from templex.core.config import config
from templex.core.error_handling import FileReadError
from templex.core.error_utilities.retry import retry_async

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class FileSystem:
    """Asynchronous view of the local filesystem."""

    async def exists(self, path: PathLike) -> bool:
        """Return True if ``path`` is an existing regular file."""
        return await asyncio.to_thread(Path(path).is_file)

    async def read(self, path: PathLike) -> str:
        """
        Read a UTF-8 text file, retrying once if it is momentarily unreadable.

        Raises:
            FileReadError: If the file still cannot be read after the retry
        """
        return await retry_async(
            self._read_once,
            Path(path),
            initial_wait=config.get('files', 'read_retry_delay', 0.05),
            exceptions=(FileReadError,),
        )

    async def _read_once(self, path: Path) -> str:
        try:
            return await asyncio.to_thread(path.read_text, encoding='utf8')
        except FileNotFoundError:
            raise
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(str(path), str(e)) from e
