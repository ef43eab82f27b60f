"""Business logic for file and folder records."""

import base64
import binascii
import logging
import mimetypes
from typing import Optional, Protocol

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from files_manager.config import PAGE_SIZE
from files_manager.exceptions import InternalError, NotFound, ValidationError
from files_manager.models.file_model import File, FileType, ROOT_ID, ThumbnailStatus
from files_manager.services.storage import LocalStorage
from files_manager.services.thumbnails import THUMBNAIL_WIDTHS, thumbnail_path

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


class JobQueue(Protocol):
    def enqueue(self, file_id: int, user_id: int) -> None: ...


def parse_id(value) -> Optional[int]:
    """Turn a client supplied id into an int, None when it can't be one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


class FileService:
    def __init__(self, db: Session, storage: LocalStorage, queue: JobQueue, page_size: int = PAGE_SIZE):
        self.db = db
        self.storage = storage
        self.queue = queue
        self.page_size = page_size

    def upload(self, user_id: int, name: Optional[str], type_: Optional[str],
               parent_id=ROOT_ID, is_public: bool = False, data: Optional[str] = None) -> File:
        """Validate and store a folder, file or image.

        Content is written to disk before the record is inserted, so a record
        never points at a missing file. If the insert fails the written file
        is removed.

        Raises:
            ValidationError: On a missing or inconsistent field.
            InternalError: If the disk or the database write fails.
        """
        if not name:
            raise ValidationError("Missing name")
        if type_ not in {t.value for t in FileType}:
            raise ValidationError("Missing type")
        if type_ != FileType.FOLDER.value and not data:
            raise ValidationError("Missing data")

        parent = self._resolve_parent(parent_id)
        record = File(
            user_id=user_id,
            name=name,
            type=type_,
            is_public=bool(is_public),
            parent_id=parent,
        )

        if type_ == FileType.FOLDER.value:
            return self._insert(record)

        try:
            content = base64.b64decode(data)
        except (binascii.Error, ValueError):
            raise ValidationError("Missing data")

        try:
            record.local_path = self.storage.save(content)
        except OSError as e:
            raise InternalError() from e

        if type_ == FileType.IMAGE.value:
            record.thumbnail_status = ThumbnailStatus.PENDING.value

        try:
            self._insert(record)
        except InternalError:
            self.storage.rollback_save(record.local_path)
            raise

        if type_ == FileType.IMAGE.value:
            self._enqueue_thumbnails(record)
        return record

    def _resolve_parent(self, parent_id) -> int:
        if parent_id in (None, "", ROOT_ID, str(ROOT_ID)):
            return ROOT_ID
        pid = parse_id(parent_id)
        parent = self.db.get(File, pid) if pid is not None else None
        if parent is None:
            raise ValidationError("Parent not found")
        if not parent.is_folder:
            raise ValidationError("Parent is not a folder")
        # parent ownership is deliberately not compared with the uploader
        return parent.id

    def _insert(self, record: File) -> File:
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to insert file record: %s", record.name)
            raise InternalError() from e
        logger.info("File record created: %s (ID: %d, type: %s)", record.name, record.id, record.type)
        return record

    def _enqueue_thumbnails(self, record: File) -> None:
        try:
            self.queue.enqueue(record.id, record.user_id)
        except Exception:
            logger.exception("Failed to enqueue thumbnail job for file %d", record.id)
            self._set_thumbnail_status(record, ThumbnailStatus.FAILED)
            return
        logger.info("Thumbnail job enqueued for file %d", record.id)

    def _set_thumbnail_status(self, record: File, status: ThumbnailStatus) -> None:
        record.thumbnail_status = status.value
        self.db.commit()

    def get(self, user_id: int, file_id) -> File:
        fid = parse_id(file_id)
        if fid is None:
            raise NotFound()
        record = self.db.query(File).filter(File.id == fid, File.user_id == user_id).first()
        if record is None:
            raise NotFound()
        return record

    def list_files(self, user_id: int, parent_id=ROOT_ID, page=0) -> list[File]:
        pid = parse_id(parent_id if parent_id not in (None, "") else ROOT_ID)
        # unparsable pages fall back to the first one
        page = parse_id(page) or 0
        if pid is None or page < 0:
            return []
        return (
            self.db.query(File)
            .filter(File.user_id == user_id, File.parent_id == pid)
            .order_by(File.id)
            .offset(page * self.page_size)
            .limit(self.page_size)
            .all()
        )

    def set_visibility(self, user_id: int, file_id, is_public: bool) -> File:
        fid = parse_id(file_id)
        if fid is None:
            raise NotFound()
        result = self.db.execute(
            update(File)
            .where(File.id == fid, File.user_id == user_id)
            .values(is_public=is_public)
        )
        self.db.commit()
        if result.rowcount == 0:
            raise NotFound()
        logger.info("File %d is_public set to %s", fid, is_public)
        record = self.db.get(File, fid)
        self.db.refresh(record)
        return record

    def publish(self, user_id: int, file_id) -> File:
        return self.set_visibility(user_id, file_id, True)

    def unpublish(self, user_id: int, file_id) -> File:
        return self.set_visibility(user_id, file_id, False)

    def get_content(self, file_id, user_id: Optional[int] = None, size=None) -> tuple[bytes, str]:
        """Return the raw content of a file and its MIME type.

        Private files are only readable by their owner; anyone else gets
        NotFound so the existence of the file is not disclosed.
        """
        fid = parse_id(file_id)
        record = self.db.get(File, fid) if fid is not None else None
        if record is None:
            raise NotFound()

        if not record.is_public and (user_id is None or user_id != record.user_id):
            raise NotFound()

        if record.is_folder:
            raise ValidationError("A folder doesn't have content")

        local_path = record.local_path
        if size is not None:
            width = parse_id(size)
            if width not in THUMBNAIL_WIDTHS:
                raise ValidationError("Invalid size")
            local_path = thumbnail_path(local_path, width)

        if not self.storage.exists(local_path):
            raise NotFound()

        mime_type, _ = mimetypes.guess_type(record.name)
        try:
            content = self.storage.read(local_path)
        except OSError as e:
            logger.exception("Failed to read %s", local_path)
            raise InternalError() from e
        return content, mime_type or DEFAULT_MIME_TYPE

    def count_files(self) -> int:
        return self.db.query(func.count(File.id)).scalar()
