# app/routers/board.py
"""
Board view state + live push channel.
GET  /board         — everything a client needs to render the board.
POST /board/reload  — drop the session and reconnect (after a fatal error).
WS   /board/stream  — full board view on connect and on every change.
"""

import asyncio

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from starlette.requests import HTTPConnection

from app.schemas.board import BoardOut
from app.services.board_service import ParkingBoard
from app.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


def get_board(conn: HTTPConnection) -> ParkingBoard:
    """FastAPI dependency — the board owned by this app instance."""
    return conn.app.state.board


def render_board(board: ParkingBoard, view=None) -> BoardOut:
    return BoardOut.model_validate(view if view is not None else board.view())


@router.get("/board", response_model=BoardOut, summary="Current board view")
def get_board_view(board: ParkingBoard = Depends(get_board)):
    return render_board(board)


@router.post("/board/reload", response_model=BoardOut, summary="Reconnect the board")
async def reload_board(board: ParkingBoard = Depends(get_board)):
    """Equivalent of a page reload: resubscribes and re-runs spot setup."""
    await board.reload()
    return render_board(board)


@router.websocket("/board/stream")
async def stream_board(websocket: WebSocket, board: ParkingBoard = Depends(get_board)):
    await websocket.accept()
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    # Board listeners may fire on the Firestore watch thread
    unsubscribe = board.subscribe(lambda view: loop.call_soon_threadsafe(queue.put_nowait, view))
    client = websocket.client.host if websocket.client else "unknown"
    logger.info(f"🔌 Board stream opened for {client}")

    async def push():
        await websocket.send_json(render_board(board).model_dump(mode="json"))
        while True:
            view = await queue.get()
            await websocket.send_json(render_board(board, view).model_dump(mode="json"))

    async def drain():
        # Clients never send anything useful; this only notices the disconnect
        while True:
            await websocket.receive_text()

    tasks = {asyncio.create_task(push()), asyncio.create_task(drain())}
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                logger.error(f"Board stream error for {client}: {exc}", exc_info=exc)
    finally:
        unsubscribe()
        logger.info(f"🔌 Board stream closed for {client}")
