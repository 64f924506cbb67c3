"""Image uploads: store each file under a generated name inside the upload directory."""

from __future__ import annotations

import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import BinaryIO

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class UploadError(Exception):
    """A file could not be written to the upload directory."""


def build_filename(original: str | None, default_extension: str) -> str:
    """Generated id + the original extension (lower-cased), or the default when there is none."""
    extension = os.path.splitext(original or "")[1].lower()
    if not extension or extension == ".":
        extension = default_extension
    return f"{uuid.uuid4().hex}{extension}"


def public_path(filename: str, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    return f"{settings.upload_url_prefix.rstrip('/')}/{filename}"


def local_path(path: str, settings: Settings | None = None) -> Path:
    """Map a stored image path back to the file on disk."""
    settings = settings or get_settings()
    return Path(settings.upload_dir) / os.path.basename(path)


def _write_file(source: BinaryIO, destination: Path) -> None:
    source.seek(0)
    with open(destination, "wb") as out:
        shutil.copyfileobj(source, out)


async def save_uploads(files: list[UploadFile], settings: Settings | None = None) -> list[str]:
    """
    Persist every file and return their public paths in upload order.
    On the first failure the files already written are removed and UploadError is raised.
    """
    settings = settings or get_settings()
    upload_dir = Path(settings.upload_dir)
    saved: list[str] = []
    try:
        upload_dir.mkdir(parents=True, exist_ok=True)
        for upload in files:
            filename = build_filename(upload.filename, settings.default_image_extension)
            await run_in_threadpool(_write_file, upload.file, upload_dir / filename)
            saved.append(public_path(filename, settings))
    except OSError as e:
        logger.exception("Saving upload failed after %d file(s): %s", len(saved), e)
        discard_uploads(saved, settings)
        raise UploadError("Could not store uploaded file.") from e
    return saved


def discard_uploads(paths: list[str], settings: Settings | None = None) -> None:
    """Remove stored files; files that are already gone are ignored."""
    settings = settings or get_settings()
    for path in paths:
        try:
            local_path(path, settings).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove upload %s: %s", path, e)
