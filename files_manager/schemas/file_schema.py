from typing import Optional, Union

from pydantic import BaseModel, Field

from files_manager.models.file_model import ROOT_ID


class FileCreate(BaseModel):
    name: Optional[str] = Field(None, example="image.png", description="File or folder name")
    type: Optional[str] = Field(None, example="image", description="One of folder, file, image")
    parentId: Union[int, str] = Field(ROOT_ID, example=0, description="Id of the parent folder, 0 for the root")
    isPublic: bool = Field(False, description="Whether the content can be read without a token")
    data: Optional[str] = Field(None, description="Base64 encoded content, required unless type is folder")


class ReturnFile(BaseModel):
    id: int = Field(..., example=1, description="File identification number")
    userId: int = Field(..., validation_alias="user_id", example=1, description="Owner id")
    name: str = Field(..., example="image.png")
    type: str = Field(..., example="image")
    isPublic: bool = Field(..., validation_alias="is_public")
    parentId: int = Field(..., validation_alias="parent_id", example=0)
    thumbnailStatus: Optional[str] = Field(None, validation_alias="thumbnail_status", example="pending")

    class Config:
        from_attributes = True
