import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from ..core.exceptions import UnknownBookmarkError
from ..dependencies import get_mount_controller
from ..models import BookmarkState, BulkActionResult, ReconcileSummary
from ..services.mount_controller import MountLifecycleController

router = APIRouter(prefix="/api/bookmarks", tags=["bookmarks"])


class BookmarkRequest(BaseModel):
    uri: str = Field(..., min_length=1)


class BookmarkSettingsUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    model_config = ConfigDict(populate_by_name=True)

    uri: str = Field(..., min_length=1)
    enabled: Optional[bool] = None
    create_symlink: Optional[bool] = Field(default=None, alias="createSymlink")
    symlink_path: Optional[str] = Field(default=None, alias="symlinkPath")


def _not_found(e: UnknownBookmarkError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("", response_model=List[BookmarkState])
async def list_bookmarks(
    controller: MountLifecycleController = Depends(get_mount_controller),
) -> List[BookmarkState]:
    """Every network bookmark with its live mount state."""
    return await controller.get_bookmark_states()


@router.get("/status")
async def get_status(controller: MountLifecycleController = Depends(get_mount_controller)):
    summary = await controller.get_status_summary()
    return {**summary.model_dump(mode="json"), "status_text": summary.status_text}


@router.post("/check", response_model=ReconcileSummary)
async def check_all(controller: MountLifecycleController = Depends(get_mount_controller)):
    """Run a manual reconcile pass ("Check All Now")."""
    logging.info("Manual mount check requested", extra={"operation": "api_check_all"})
    return await controller.check_all()


@router.post("/mount-all", response_model=BulkActionResult)
async def mount_all(controller: MountLifecycleController = Depends(get_mount_controller)):
    logging.info("Mount all requested", extra={"operation": "api_mount_all"})
    return await controller.mount_all_enabled()


@router.post("/unmount-all", response_model=BulkActionResult)
async def unmount_all(controller: MountLifecycleController = Depends(get_mount_controller)):
    logging.info("Unmount all requested", extra={"operation": "api_unmount_all"})
    return await controller.unmount_all()


@router.post("/mount")
async def mount_bookmark(
    request: BookmarkRequest,
    controller: MountLifecycleController = Depends(get_mount_controller),
):
    """
    Request a mount of one bookmark. The result arrives over the WebSocket.

    HTTP Status Codes:
        200: Request accepted (``dispatched`` is false if one was already in flight)
        404: Unknown bookmark URI
    """
    try:
        dispatched = controller.mount_now(request.uri)
    except UnknownBookmarkError as e:
        raise _not_found(e)
    return {"uri": request.uri, "dispatched": dispatched}


@router.post("/unmount")
async def unmount_bookmark(
    request: BookmarkRequest,
    controller: MountLifecycleController = Depends(get_mount_controller),
):
    try:
        controller.request_unmount(request.uri)
    except UnknownBookmarkError as e:
        raise _not_found(e)
    return {"uri": request.uri, "requested": True}


@router.patch("/settings", response_model=BookmarkState)
async def update_bookmark_settings(
    update: BookmarkSettingsUpdate,
    controller: MountLifecycleController = Depends(get_mount_controller),
):
    """Toggle auto mount and symlink preferences for one bookmark; persisted immediately."""
    try:
        if update.enabled is not None:
            await controller.set_enabled(update.uri, update.enabled)
        if update.create_symlink is not None or update.symlink_path is not None:
            await controller.set_symlink(update.uri, update.create_symlink, update.symlink_path)
    except UnknownBookmarkError as e:
        raise _not_found(e)

    return await controller.get_bookmark_state(update.uri)


@router.post("/reload-settings")
async def reload_bookmark_settings(
    controller: MountLifecycleController = Depends(get_mount_controller),
):
    """Re-read persisted bookmark settings after they were edited externally."""
    await controller.reload_bookmark_settings()
    return {"success": True, "count": len(controller.bookmarks)}
