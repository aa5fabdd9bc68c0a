"""
Directory-backed photo storage.

Uploaded images are stored under generated names (uuid4 + original
extension) that are unrelated to the owning item's id.
"""
from typing import BinaryIO, Iterator, Optional
import logging
import os
import shutil
import uuid

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".jpg"
CHUNK_SIZE = 64 * 1024


class PhotoStore:
    def __init__(self, directory: str):
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def path_for(self, name: str) -> str:
        # Stored names never contain directories
        return os.path.join(self.directory, os.path.basename(name))

    def save(self, stream: BinaryIO, original_name: Optional[str]) -> str:
        """
        Write an uploaded photo to disk.

        Args:
            stream: Binary file-like object positioned at the start of the upload
            original_name: Client-side file name, used only for its extension

        Returns:
            str: Generated file name to store on the item
        """
        extension = os.path.splitext(os.path.basename(original_name or ""))[1] or DEFAULT_EXTENSION
        name = f"{uuid.uuid4()}{extension}"
        path = self.path_for(name)
        try:
            with open(path, "wb") as fh:
                shutil.copyfileobj(stream, fh)
                fh.flush()
                os.fsync(fh.fileno())
        except Exception:
            # No partial uploads left behind
            if os.path.exists(path):
                os.remove(path)
            logger.error(f"Failed to save photo {name}")
            raise
        logger.info(f"Saved photo {name}")
        return name

    def exists(self, name: Optional[str]) -> bool:
        return bool(name) and os.path.isfile(self.path_for(name))

    def read(self, name: Optional[str]) -> Optional[Iterator[bytes]]:
        """
        Open a stored photo for streaming.

        Returns:
            Iterator over the file's bytes, or None when the name is empty or
            the file is missing
        """
        if not self.exists(name):
            return None
        return self._iter_chunks(self.path_for(name))

    @staticmethod
    def _iter_chunks(path: str) -> Iterator[bytes]:
        with open(path, "rb") as fh:
            while True:
                chunk = fh.read(CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk

    def delete(self, name: Optional[str]) -> None:
        """Remove a stored photo. A missing file is not an error."""
        if not name:
            return
        try:
            os.remove(self.path_for(name))
            logger.info(f"Deleted photo {name}")
        except FileNotFoundError:
            logger.warning(f"Photo {name} already gone")
