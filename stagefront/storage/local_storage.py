import logging
import random
import time
from pathlib import Path

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

# Upload field name -> directory under the upload root
FIELD_DIRECTORIES = {
    "video": "videos",
    "audio": "audio",
}
DEFAULT_DIRECTORY = "images"


class UploadTooLargeError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def has_content(upload: UploadFile | None) -> bool:
    """True if the form field carried a file (browsers send empty parts for blank inputs)."""
    return upload is not None and bool(upload.filename)


class LocalStorage:
    def __init__(self, upload_dir: str | Path, max_bytes: int | None = None):
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes

    def ensure_directories(self) -> None:
        for name in {DEFAULT_DIRECTORY, *FIELD_DIRECTORIES.values()}:
            (self.upload_dir / name).mkdir(parents=True, exist_ok=True)

    def _unique_name(self, field: str, original: str) -> str:
        suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
        return f"{field}-{suffix}-{Path(original).name}"

    async def save(self, field: str, file: UploadFile) -> str:
        """Save an uploaded file under its field's directory and return the relative path."""
        directory = FIELD_DIRECTORIES.get(field, DEFAULT_DIRECTORY)
        relative = f"{directory}/{self._unique_name(field, file.filename or field)}"

        # Read at most one byte past the cap.
        if self.max_bytes is None:
            content = await file.read()
        else:
            content = await file.read(self.max_bytes + 1)
        if self.max_bytes is not None and len(content) > self.max_bytes:
            raise UploadTooLargeError(
                f"File size must not exceed {self.max_bytes} bytes."
            )

        target = self.upload_dir / relative
        await run_in_threadpool(self._write, target, content)
        logger.info("Stored upload", extra={"field": field, "path": relative, "size": len(content)})
        return relative

    @staticmethod
    def _write(target: Path, content: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as f:
            f.write(content)

    def get_file_path(self, relative_path: str) -> Path:
        """Get full path to a stored file"""
        return self.upload_dir / relative_path

    def delete(self, relative_path: str) -> bool:
        """Delete a stored file"""
        file_path = self.get_file_path(relative_path)
        if file_path.exists():
            file_path.unlink()
            return True
        return False
