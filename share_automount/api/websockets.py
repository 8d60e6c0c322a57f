from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from ..dependencies import get_mount_controller, get_websocket_manager
from ..presentation.event_handlers import build_snapshot
from ..presentation.websocket_manager import WebSocketManager
from ..services.mount_controller import MountLifecycleController

router = APIRouter(prefix="/api/ws", tags=["websockets"])


@router.websocket("/live")
async def websocket_endpoint(
    websocket: WebSocket,
    ws_manager: WebSocketManager = Depends(get_websocket_manager),
    controller: MountLifecycleController = Depends(get_mount_controller),
):
    await ws_manager.connect(websocket)

    try:
        states = await controller.get_bookmark_states()
        summary = await controller.get_status_summary()
        await ws_manager.send_to(websocket, build_snapshot(states, summary))

        while True:
            message = await websocket.receive_text()
            if message == "ping":
                await websocket.send_text("pong")

    except WebSocketDisconnect:
        ws_manager.disconnect(websocket)
