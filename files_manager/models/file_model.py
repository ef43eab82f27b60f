import enum

from files_manager.database import Base
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship

ROOT_ID = 0


class FileType(str, enum.Enum):
    FOLDER = "folder"
    FILE = "file"
    IMAGE = "image"


class ThumbnailStatus(str, enum.Enum):
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


class File(Base):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    is_public = Column(Boolean, nullable=False, default=False)
    # ROOT_ID or the id of a folder, not necessarily owned by user_id
    parent_id = Column(Integer, nullable=False, default=ROOT_ID, index=True)
    local_path = Column(String, nullable=True)
    thumbnail_status = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="files")

    @property
    def is_folder(self) -> bool:
        return self.type == FileType.FOLDER.value
