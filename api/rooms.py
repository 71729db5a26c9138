"""
Room API Endpoints

職責：
1. 建立房間（只拿代碼，加入要走 WebSocket）
2. 查詢房間目前的 view（票面依翻牌狀態遮蔽）
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
import logging

from schemas import CreateRoomRequest, CreateRoomResponse, RoomState
from core.room_registry import RoomRegistry
from core.locks import with_room_lock
from core.exceptions import RoomNotFound
from services.view_service import get_room_state
from dependencies import get_registry

router = APIRouter(prefix="/api/rooms", tags=["rooms"])
logger = logging.getLogger(__name__)


@router.post("", response_model=CreateRoomResponse, status_code=201)
def create_room(
    room_data: Optional[CreateRoomRequest] = None,
    registry: RoomRegistry = Depends(get_registry)
):
    """
    建立房間

    返回：
        - code: 4 碼房間代碼

    注意：
        - 建立後房間沒有任何參與者，第一個加入者成為主持人
    """
    try:
        room = registry.create_room(creator_name=room_data.name if room_data else None)
        return CreateRoomResponse(code=room.code)

    except Exception as e:
        logger.error(f"Failed to create room: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/{code}", response_model=RoomState)
def get_room(code: str, registry: RoomRegistry = Depends(get_registry)):
    """
    取得房間目前狀態

    參數：
        code: 房間代碼（大小寫、前後空白不拘）
    """
    try:
        room = registry.get_room(code)
        with with_room_lock(room):
            if room.closed:
                raise RoomNotFound(room.code)
            return get_room_state(room)

    except RoomNotFound:
        raise HTTPException(status_code=404, detail="Room not found")
    except Exception as e:
        logger.error(f"Failed to get room: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")
