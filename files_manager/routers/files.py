from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from files_manager.dependencies import get_current_user_id, get_file_service, get_optional_user_id
from files_manager.models.file_model import ROOT_ID
from files_manager.schemas.file_schema import FileCreate, ReturnFile
from files_manager.services.file_service import FileService

router = APIRouter()


@router.post("", response_model=ReturnFile, response_model_exclude_none=True,
             status_code=status.HTTP_201_CREATED,
             summary="Upload a file or create a folder",
             description="""
                Creates a folder, or stores the base64 encoded data of a file or
                image. Images get their thumbnails generated in the background.
             """,
             responses={
                 400: {"description": "Validation error",
                       "content": {
                           "application/json": {
                               "examples": {
                                   "name": {"value": {"error": "Missing name"}},
                                   "type": {"value": {"error": "Missing type"}},
                                   "data": {"value": {"error": "Missing data"}},
                                   "parent": {"value": {"error": "Parent not found"}},
                                   "parent_type": {"value": {"error": "Parent is not a folder"}},
                               }
                           }
                       }
                       },
                 401: {"description": "Unauthorized"},
             })
def upload_file(body: FileCreate,
                user_id: int = Depends(get_current_user_id),
                files: FileService = Depends(get_file_service)):
    return files.upload(user_id, body.name, body.type, body.parentId, body.isPublic, body.data)


@router.get("", response_model=list[ReturnFile], response_model_exclude_none=True,
            summary="List the files of a folder",
            description="""
                Returns one page of 20 files whose parent is parentId (0 for the root).
                A page past the end is an empty list.
            """,
            responses={
                401: {"description": "Unauthorized"}
            })
def list_files(parentId: str = Query(str(ROOT_ID)),
               page: Optional[str] = Query(None),
               user_id: int = Depends(get_current_user_id),
               files: FileService = Depends(get_file_service)):
    return files.list_files(user_id, parentId, page)


@router.get("/{file_id}", response_model=ReturnFile, response_model_exclude_none=True,
            summary="Show one file",
            responses={
                401: {"description": "Unauthorized"},
                404: {"description": "Not found"}
            })
def show_file(file_id: str,
              user_id: int = Depends(get_current_user_id),
              files: FileService = Depends(get_file_service)):
    return files.get(user_id, file_id)


@router.put("/{file_id}/publish", response_model=ReturnFile, response_model_exclude_none=True,
            summary="Make a file public",
            responses={
                401: {"description": "Unauthorized"},
                404: {"description": "Not found"}
            })
def publish_file(file_id: str,
                 user_id: int = Depends(get_current_user_id),
                 files: FileService = Depends(get_file_service)):
    return files.publish(user_id, file_id)


@router.put("/{file_id}/unpublish", response_model=ReturnFile, response_model_exclude_none=True,
            summary="Make a file private",
            responses={
                401: {"description": "Unauthorized"},
                404: {"description": "Not found"}
            })
def unpublish_file(file_id: str,
                   user_id: int = Depends(get_current_user_id),
                   files: FileService = Depends(get_file_service)):
    return files.unpublish(user_id, file_id)


@router.get("/{file_id}/data",
            summary="Download the content of a file",
            description="""
                Returns the raw content with a Content-Type guessed from the file name.
                Private files are only served to their owner. size=500, 250 or 100
                returns the matching image thumbnail.
            """,
            responses={
                400: {"description": "A folder doesn't have content"},
                404: {"description": "Not found"},
                200: {"description": "Raw content",
                      "content": {"application/octet-stream": {}}}
            })
def get_file_data(file_id: str,
                  size: Optional[str] = Query(None),
                  user_id: Optional[int] = Depends(get_optional_user_id),
                  files: FileService = Depends(get_file_service)):
    content, mime_type = files.get_content(file_id, user_id, size)
    return Response(content=content, media_type=mime_type)
