"""Sheet Music Storage — saves uploaded scores under the uploads directory.

Invariants:
    - Stored file names are server-generated (uuid + lower-cased extension); the client
      name is never used as a path component
    - Returned paths are relative to the uploads mount: "uploads/sheet-music/<name>"
    - An upload is read in chunks and refused as soon as it passes max_bytes

Design Decisions:
    - Disk writes are blocking: the async wrapper pushes them to the threadpool,
      the same way password hashing is kept off the event loop
"""

import logging
import uuid
from pathlib import Path

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from lessonbook.core.errors import BookingValidationError, FileStorageError, FileTooLargeError

logger = logging.getLogger(__name__)

SHEET_MUSIC_SUBDIR = "sheet-music"
ALLOWED_EXTENSIONS = frozenset({".pdf", ".jpg", ".jpeg", ".png", ".gif"})
READ_CHUNK_BYTES = 64 * 1024


def allowed_extension(filename: str) -> str:
    """Lower-cased extension of filename, or raise INVALID_FILE_TYPE."""
    extension = Path(filename or "").suffix.lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise BookingValidationError(
            "Invalid file type. Only PDF and image files are allowed.",
            "INVALID_FILE_TYPE",
        )
    return extension


async def read_capped(upload: UploadFile, max_bytes: int) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await upload.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            logger.warning(
                "Upload refused, size cap exceeded",
                extra={"upload_name": upload.filename, "max_bytes": max_bytes},
            )
            raise FileTooLargeError(max_bytes)
        chunks.append(chunk)
    return b"".join(chunks)


def save_sheet_music(uploads_dir: str, filename: str, content: bytes) -> str:
    """Persist content and return its public relative path."""
    if not content:
        raise BookingValidationError("No file uploaded.", "NO_FILE")
    extension = allowed_extension(filename)
    target_dir = Path(uploads_dir) / SHEET_MUSIC_SUBDIR
    stored_name = f"{uuid.uuid4()}{extension}"
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        (target_dir / stored_name).write_bytes(content)
    except OSError as e:
        logger.error(f"Failed to store sheet music {stored_name}: {e}")
        raise FileStorageError("Failed to upload sheet music.")
    logger.info(f"Sheet music stored: {stored_name}")
    return f"uploads/{SHEET_MUSIC_SUBDIR}/{stored_name}"


async def save_sheet_music_async(uploads_dir: str, filename: str, content: bytes) -> str:
    return await run_in_threadpool(save_sheet_music, uploads_dir, filename, content)
