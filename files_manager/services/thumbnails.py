"""Resized derivatives of uploaded images."""

import io
import logging

from PIL import Image
from sqlalchemy.orm import Session

from files_manager.exceptions import ThumbnailJobError
from files_manager.models.file_model import File, FileType, ThumbnailStatus
from files_manager.services.storage import write_atomic

logger = logging.getLogger(__name__)

THUMBNAIL_WIDTHS = (500, 250, 100)


def thumbnail_path(local_path: str, width: int) -> str:
    return f"{local_path}_{width}"


def render_thumbnail(source_path: str, width: int) -> bytes:
    """Resize an image to the given width, keeping its aspect ratio and format."""
    with Image.open(source_path) as img:
        fmt = img.format or "PNG"
        height = max(1, round(img.height * width / img.width))
        resized = img.resize((width, height), Image.Resampling.LANCZOS)

    if fmt == "JPEG" and resized.mode not in ("RGB", "L"):
        resized = resized.convert("RGB")

    output = io.BytesIO()
    resized.save(output, format=fmt)
    return output.getvalue()


def generate_thumbnails(local_path: str) -> list[str]:
    paths = []
    for width in THUMBNAIL_WIDTHS:
        path = thumbnail_path(local_path, width)
        write_atomic(path, render_thumbnail(local_path, width))
        logger.debug("Wrote %dpx thumbnail: %s", width, path)
        paths.append(path)
    return paths


def process_thumbnail_job(job: dict, db: Session) -> File:
    """Generate every derivative for the image a job points at.

    The record moves to ready only when all widths were written; any
    failure moves it to failed and is raised again so the queue sees the
    job as failed.

    Raises:
        ThumbnailJobError: If the job payload is incomplete or the record
            is not an image of that owner.
    """
    file_id = job.get("fileId")
    user_id = job.get("userId")
    if not file_id:
        raise ThumbnailJobError("Missing fileId")
    if not user_id:
        raise ThumbnailJobError("Missing userId")

    try:
        record = (
            db.query(File)
            .filter(File.id == int(file_id), File.user_id == int(user_id), File.type == FileType.IMAGE.value)
            .first()
        )
    except (TypeError, ValueError):
        record = None
    if record is None:
        raise ThumbnailJobError("File not found")

    logger.info("Generating thumbnails for file %d", record.id)
    try:
        generate_thumbnails(record.local_path)
    except Exception:
        logger.exception("Thumbnail generation failed for file %d", record.id)
        record.thumbnail_status = ThumbnailStatus.FAILED.value
        db.commit()
        raise

    record.thumbnail_status = ThumbnailStatus.READY.value
    db.commit()
    logger.info("Thumbnails ready for file %d", record.id)
    return record
