"""
Default flat-file access for the users file.

No handle is kept open between calls; each read or write opens,
uses and closes the file inside a worker thread.
"""
import asyncio
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


async def read_users_file(path: PathLike) -> str:
    """
    Read the users file as UTF-8 text.

    Raises:
        OSError: If the file is missing or unreadable
    """
    return await asyncio.to_thread(Path(path).read_text, encoding="utf-8")


def _write_text(path: Path, data: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data, encoding="utf-8")


async def write_users_file(path: PathLike, data: str) -> None:
    """
    Replace the users file contents, creating parent directories as needed.

    Raises:
        OSError: If the file cannot be written
    """
    await asyncio.to_thread(_write_text, Path(path), data)
