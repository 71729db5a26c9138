"""
WebSocket Endpoint

每條 WebSocket 連線就是一個參與者身分（connection_id）。
客戶端送 JSON 動作，伺服器回覆對應結果，並推送 room-update：

    -> {"type": "create-room", "name": "Alice"}
    <- {"type": "create-room", "code": "AB2C"}
    -> {"type": "join-room", "code": "ab2c", "name": "Alice"}
    <- {"type": "join-room", "code": "AB2C", "state": {...}}
    -> {"type": "vote", "value": "5"}
    <- {"type": "room-update", "state": {...}}

帶 requestId 的動作，回覆會原樣帶回 requestId
"""
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from typing import Optional
import logging

from schemas import ClientMessage
from core.connection_manager import ConnectionManager
from core.room_registry import RoomRegistry
from core.room_session import RoomSession
from core.exceptions import RoomNotFound
from dependencies import get_registry, get_connection_manager, get_room_session

router = APIRouter(tags=["websocket"])
logger = logging.getLogger(__name__)


def _reply(message: ClientMessage, payload: dict) -> dict:
    payload = {"type": message.type, **payload}
    if message.request_id is not None:
        payload["requestId"] = message.request_id
    return payload


@router.websocket("/ws")
async def room_socket(
    websocket: WebSocket,
    registry: RoomRegistry = Depends(get_registry),
    manager: ConnectionManager = Depends(get_connection_manager),
    session: RoomSession = Depends(get_room_session)
):
    connection_id = await manager.connect(websocket)
    current_room: Optional[str] = None

    try:
        while True:
            data = await websocket.receive_text()

            try:
                message = ClientMessage.model_validate_json(data)
            except ValidationError:
                logger.debug(f"Invalid message from connection {connection_id}: {data[:200]!r}")
                manager.send(connection_id, {"type": "error", "error": "Invalid message"})
                continue

            if message.type == "create-room":
                room = registry.create_room(creator_name=message.name)
                manager.send(connection_id, _reply(message, {"code": room.code}))

            elif message.type == "join-room":
                try:
                    code = registry.get_room(message.code or "").code
                    if current_room is not None and current_room != code:
                        session.leave(current_room, connection_id)
                        current_room = None
                    state = session.join(code, connection_id, message.name)
                except RoomNotFound:
                    manager.send(connection_id, _reply(message, {"error": "Room not found"}))
                    continue

                current_room = code
                manager.send(
                    connection_id,
                    _reply(message, {"code": code, "state": state.model_dump()})
                )

            elif current_room is None:
                logger.debug(f"Ignoring {message.type} from {connection_id}: not in a room")

            elif message.type == "vote":
                session.vote(current_room, connection_id, message.value)

            elif message.type == "reveal":
                session.reveal(current_room, connection_id)

            elif message.type == "clear":
                session.clear(current_room, connection_id)

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected for connection {connection_id}")
    except Exception as e:
        logger.error(f"WebSocket error for connection {connection_id}: {e}", exc_info=True)
    finally:
        if current_room is not None:
            session.leave(current_room, connection_id)
        await manager.disconnect(connection_id)
