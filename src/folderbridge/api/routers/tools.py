"""Tools router - read/write/edit/glob/grep and resources."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from folderbridge.api.dependencies import get_bridge, http_error
from folderbridge.domain.errors import FolderBridgeError
from folderbridge.runtime.bridge import FolderBridge
from folderbridge.services.search_service import DEFAULT_FILE_PATTERN

router = APIRouter(tags=["tools"])


class ReadRequest(BaseModel):
    path: str
    offset: int = Field(default=0, ge=0)
    limit: Optional[int] = Field(default=None, ge=0)

    model_config = {
        "json_schema_extra": {
            "example": {"path": "/website/src/index.ts", "offset": 0, "limit": 200}
        }
    }


class WriteRequest(BaseModel):
    path: str
    content: str

    model_config = {
        "json_schema_extra": {
            "example": {"path": "/website/notes/todo.md", "content": "- ship it\n"}
        }
    }


class EditRequest(BaseModel):
    path: str
    old_text: str
    new_text: str
    replace_all: bool = False

    model_config = {
        "json_schema_extra": {
            "example": {
                "path": "/website/src/config.ts",
                "old_text": "debug: true",
                "new_text": "debug: false",
                "replace_all": False,
            }
        }
    }


class GlobRequest(BaseModel):
    pattern: str
    folder: Optional[str] = None

    model_config = {
        "json_schema_extra": {"example": {"pattern": "src/**/*.ts", "folder": "website"}}
    }


class GrepRequest(BaseModel):
    pattern: str
    folder: Optional[str] = None
    file_pattern: str = DEFAULT_FILE_PATTERN
    ignore_case: bool = False

    model_config = {
        "json_schema_extra": {
            "example": {"pattern": "todo", "file_pattern": "**/*.md", "ignore_case": True}
        }
    }


@router.post("/tools/read")
async def read_file(request: ReadRequest, bridge: FolderBridge = Depends(get_bridge)) -> dict:
    try:
        result = await bridge.files.read(request.path, request.offset, request.limit)
    except FolderBridgeError as exc:
        raise http_error(exc)
    return result.to_dict()


@router.post("/tools/write")
async def write_file(request: WriteRequest, bridge: FolderBridge = Depends(get_bridge)) -> dict:
    try:
        result = await bridge.files.write(request.path, request.content)
    except FolderBridgeError as exc:
        raise http_error(exc)
    return result.to_dict()


@router.post("/tools/edit")
async def edit_file(request: EditRequest, bridge: FolderBridge = Depends(get_bridge)) -> dict:
    try:
        result = await bridge.files.edit(
            request.path,
            request.old_text,
            request.new_text,
            replace_all=request.replace_all,
        )
    except FolderBridgeError as exc:
        raise http_error(exc)
    return result.to_dict()


@router.post("/tools/glob")
async def glob_files(request: GlobRequest, bridge: FolderBridge = Depends(get_bridge)) -> dict:
    try:
        paths = await bridge.search.glob(request.pattern, request.folder)
    except FolderBridgeError as exc:
        raise http_error(exc)
    return {"paths": paths, "count": len(paths)}


@router.post("/tools/grep")
async def grep_files(request: GrepRequest, bridge: FolderBridge = Depends(get_bridge)) -> dict:
    try:
        matches = await bridge.search.grep(
            request.pattern,
            request.folder,
            file_pattern=request.file_pattern,
            ignore_case=request.ignore_case,
        )
    except FolderBridgeError as exc:
        raise http_error(exc)
    return {"matches": [match.to_dict() for match in matches], "count": len(matches)}


@router.get("/resources")
async def list_resources(
    search: Optional[str] = None,
    bridge: FolderBridge = Depends(get_bridge),
) -> List[Dict[str, Any]]:
    """Every tracked file, optionally filtered by a uri substring."""
    items = await bridge.resources.list_resources(search)
    return [item.to_dict() for item in items]


@router.get("/resources/content")
async def get_resource(
    uri: str = Query(..., description="Resource uri (virtual path)"),
    bridge: FolderBridge = Depends(get_bridge),
) -> dict:
    try:
        content = await bridge.resources.get_resource(uri)
    except FolderBridgeError as exc:
        raise http_error(exc)
    return content.to_dict()
