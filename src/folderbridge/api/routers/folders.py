"""Folders router - tracked folder management and tree browsing."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from folderbridge.api.dependencies import get_bridge, http_error
from folderbridge.domain.errors import FolderBridgeError
from folderbridge.runtime.bridge import FolderBridge
from folderbridge.services.folder_registry import StaticPathPicker

router = APIRouter(tags=["folders"])


class AddFolderRequest(BaseModel):
    """Request to start tracking a local directory."""

    path: str

    model_config = {
        "json_schema_extra": {
            "example": {
                "path": "/home/alice/projects/website",
            }
        }
    }


@router.get("/folders")
async def list_folders(bridge: FolderBridge = Depends(get_bridge)) -> List[Dict[str, Any]]:
    """List active tracked folders in registration order."""
    return [folder.to_dict() for folder in bridge.registry.list()]


@router.get("/folders/disconnected")
async def list_disconnected_folders(
    bridge: FolderBridge = Depends(get_bridge),
) -> List[Dict[str, Any]]:
    """Folders remembered on disk that could not be reconnected."""
    return [record.to_dict() for record in bridge.registry.disconnected()]


@router.post("/folders", status_code=201)
async def add_folder(
    request: AddFolderRequest,
    bridge: FolderBridge = Depends(get_bridge),
) -> Optional[Dict[str, Any]]:
    """Track a new folder."""
    try:
        folder = await bridge.registry.add(StaticPathPicker(request.path))
    except FolderBridgeError as exc:
        raise http_error(exc)
    if folder is None:
        raise HTTPException(status_code=400, detail="No directory chosen")
    return folder.to_dict()


@router.delete("/folders/{folder_id}")
async def remove_folder(folder_id: str, bridge: FolderBridge = Depends(get_bridge)) -> dict:
    """Stop tracking a folder. Unknown ids are accepted."""
    removed = await bridge.registry.remove(folder_id)
    return {"status": "removed" if removed else "unknown", "folder_id": folder_id}


@router.get("/folders/{folder_id}/tree")
async def get_folder_tree(folder_id: str, bridge: FolderBridge = Depends(get_bridge)) -> dict:
    """Full, sorted tree of one folder."""
    try:
        tree = await bridge.folder_tree(folder_id)
    except FolderBridgeError as exc:
        raise http_error(exc)
    return tree.to_dict()


@router.get("/tree/expand")
async def expand_directory(
    path: str = Query(..., description="Virtual directory path, e.g. /project/src"),
    bridge: FolderBridge = Depends(get_bridge),
) -> List[Dict[str, Any]]:
    """Direct children of one directory."""
    try:
        nodes = await bridge.trees.expand_one_level(path)
    except FolderBridgeError as exc:
        raise http_error(exc)
    return [node.to_dict() for node in nodes]
