"""
Local disk storage for uploaded files.

Files are stored flat in one directory under a UUID4-based name that keeps
the original extension. The returned access path is relative to the
``/uploads`` static mount.
"""

import shutil
import uuid
from pathlib import Path, PurePath
from typing import BinaryIO, Optional

from starlette.concurrency import run_in_threadpool

from core.logging import get_logger


logger = get_logger(__name__)


class LocalUploadStorage:
    """
    Stores uploads on the local filesystem.

    Usage:
        uploads = LocalUploadStorage("uploads")
        uploads.setup()
        url = await uploads.save("caneca.png", fileobj)  # "/uploads/<uuid>.png"
    """

    URL_PREFIX = "/uploads"

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def setup(self) -> None:
        """Create the upload directory if needed."""
        self.directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def generate_name(original_filename: Optional[str]) -> str:
        suffix = PurePath(original_filename or "").suffix.lower()
        return f"{uuid.uuid4().hex}{suffix}"

    async def save(self, original_filename: Optional[str], fileobj: BinaryIO) -> str:
        """
        Write an uploaded file to disk.

        Args:
            original_filename: Client-side name, used only for its extension
            fileobj: Readable binary stream positioned at the start

        Returns:
            The access path, e.g. ``/uploads/3f2c...9a.png``
        """
        name = self.generate_name(original_filename)
        target = self.directory / name

        def _write() -> None:
            with target.open("wb") as out:
                shutil.copyfileobj(fileobj, out)

        await run_in_threadpool(_write)

        logger.info(
            "Upload stored",
            filename=name,
            original_filename=original_filename,
        )
        return f"{self.URL_PREFIX}/{name}"

    def path_for(self, url: Optional[str]) -> Optional[Path]:
        """Map an access path back to a file inside the upload directory."""
        if not url or not url.startswith(self.URL_PREFIX + "/"):
            return None
        name = url[len(self.URL_PREFIX) + 1:]
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            return None
        return self.directory / name

    async def remove(self, url: Optional[str]) -> bool:
        """
        Delete a previously stored file.

        Returns True if a file was removed. Paths outside the upload
        directory are ignored; filesystem errors are logged, not raised.
        """
        path = self.path_for(url)
        if path is None:
            return False

        def _unlink() -> bool:
            try:
                path.unlink()
            except FileNotFoundError:
                return False
            except OSError as e:
                logger.warning(
                    "Could not remove upload",
                    filename=path.name,
                    error=str(e),
                )
                return False
            return True

        removed = await run_in_threadpool(_unlink)
        if removed:
            logger.info("Upload removed", filename=path.name)
        return removed
