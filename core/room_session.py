"""
Room Session：單一房間的狀態機

狀態：
- OPEN：可以加入、可以投票，票面隱藏
- REVEALED：票面公開、計算平均，停止投票

轉換：
- reveal（主持人）：OPEN -> REVEALED
- clear（主持人）：任何狀態 -> OPEN，並清空所有票

每個會改變狀態的操作都會重新計算 view 並廣播給房內連線。
廣播透過注入的 Broadcaster 送出（fire-and-forget），核心邏輯不依賴真正的 transport。
"""
from typing import Iterable, Optional, Protocol
import logging

from models import Room, Participant, RoomStatus
from schemas import RoomState
from core.locks import with_room_lock
from core.room_registry import RoomRegistry
from core.exceptions import (
    RoomNotFound,
    ParticipantNotFound,
    Unauthorized,
    NotFacilitator,
    VotingClosed
)
from services.view_service import get_room_state

logger = logging.getLogger(__name__)

ROOM_UPDATE = "room-update"


class Broadcaster(Protocol):
    """單向送訊能力：不等待回應、不重試"""

    def send(self, connection_id: str, message: dict) -> None:
        ...


class RoomSession:
    """房間狀態機，所有操作都以房間代碼與連線 ID 為參數"""

    def __init__(self, registry: RoomRegistry, broadcaster: Broadcaster):
        self.registry = registry
        self.broadcaster = broadcaster

    # ============ 操作 ============

    def join(self, code: str, connection_id: str, name: str) -> RoomState:
        """
        加入房間

        流程：
        1. 找到並鎖定 Room
        2. 若房間還沒有主持人，這條連線成為主持人
        3. 新增（或覆蓋）參與者紀錄，vote=None
        4. 廣播給「其他」連線，加入者直接拿回傳值

        返回：
            加入後的 RoomState

        異常：
            RoomNotFound: Room 不存在（或剛好被刪除）
        """
        room = self.registry.get_room(code)
        with with_room_lock(room):
            if room.closed:
                raise RoomNotFound(room.code)

            if room.facilitator_id is None:
                room.facilitator_id = connection_id

            room.participants[connection_id] = Participant(name=name)
            logger.info(
                f"Connection {connection_id} ({name!r}) joined room {room.code} "
                f"({len(room.participants)} participants)"
            )

            state = get_room_state(room)
            self._broadcast(room, state, exclude=connection_id)
            return state

    def vote(self, code: str, connection_id: str, value: Optional[str]) -> None:
        """
        投票（value=None 代表收回）

        房間已翻牌、房間不存在、或連線不在房內時靜默忽略
        成功時廣播給所有連線（包含投票者），讓「已投票」標記即時更新
        """
        room = self.registry.find_room(code)
        if room is None:
            logger.debug(f"Ignoring vote from {connection_id}: room {code} not found")
            return

        with with_room_lock(room):
            try:
                participant = self._require_participant(room, connection_id)
                if room.status == RoomStatus.REVEALED:
                    raise VotingClosed(f"Room {room.code} is already revealed")
            except (RoomNotFound, ParticipantNotFound, Unauthorized) as e:
                logger.debug(f"Ignoring vote from {connection_id}: {e}")
                return

            participant.vote = value
            self._broadcast(room, get_room_state(room))

    def reveal(self, code: str, connection_id: str) -> None:
        """翻牌（僅主持人）：OPEN -> REVEALED，廣播包含票面與平均"""
        room = self.registry.find_room(code)
        if room is None:
            logger.debug(f"Ignoring reveal from {connection_id}: room {code} not found")
            return

        with with_room_lock(room):
            try:
                self._require_facilitator(room, connection_id)
            except (RoomNotFound, Unauthorized) as e:
                logger.debug(f"Ignoring reveal from {connection_id}: {e}")
                return

            room.revealed = True
            logger.info(f"Room {room.code} revealed")
            self._broadcast(room, get_room_state(room))

    def clear(self, code: str, connection_id: str) -> None:
        """清除（僅主持人）：回到 OPEN，所有人的票設為 None"""
        room = self.registry.find_room(code)
        if room is None:
            logger.debug(f"Ignoring clear from {connection_id}: room {code} not found")
            return

        with with_room_lock(room):
            try:
                self._require_facilitator(room, connection_id)
            except (RoomNotFound, Unauthorized) as e:
                logger.debug(f"Ignoring clear from {connection_id}: {e}")
                return

            room.revealed = False
            for participant in room.participants.values():
                participant.vote = None
            logger.info(f"Room {room.code} cleared")
            self._broadcast(room, get_room_state(room))

    def leave(self, code: str, connection_id: str) -> None:
        """
        離開房間（連線中斷時呼叫）

        流程：
        1. 移除參與者
        2. 房間清空 -> 從 registry 刪除，不廣播（已無接收者）
        3. 主持人離開 -> 交給最早加入的剩餘參與者
        4. 廣播給剩餘連線
        """
        room = self.registry.find_room(code)
        if room is None:
            return

        with with_room_lock(room):
            if room.closed or room.participants.pop(connection_id, None) is None:
                return

            if not room.participants:
                self.registry.delete_room(room.code)
                return

            if room.facilitator_id == connection_id:
                room.facilitator_id = next(iter(room.participants))
                logger.info(
                    f"Facilitator of room {room.code} moved from {connection_id} "
                    f"to {room.facilitator_id}"
                )

            logger.info(
                f"Connection {connection_id} left room {room.code} "
                f"({len(room.participants)} participants)"
            )
            self._broadcast(room, get_room_state(room))

    # ============ 內部工具 ============

    @staticmethod
    def _require_participant(room: Room, connection_id: str) -> Participant:
        if room.closed:
            raise RoomNotFound(room.code)
        participant = room.participants.get(connection_id)
        if participant is None:
            raise ParticipantNotFound(connection_id)
        return participant

    @staticmethod
    def _require_facilitator(room: Room, connection_id: str) -> None:
        if room.closed:
            raise RoomNotFound(room.code)
        if room.facilitator_id != connection_id:
            raise NotFacilitator(
                f"{connection_id} is not the facilitator of room {room.code}"
            )

    def _broadcast(self, room: Room, state: RoomState, exclude: Optional[str] = None) -> None:
        message = {"type": ROOM_UPDATE, "state": state.model_dump()}
        for connection_id in self._recipients(room, exclude):
            self.broadcaster.send(connection_id, message)

    @staticmethod
    def _recipients(room: Room, exclude: Optional[str]) -> Iterable[str]:
        return [cid for cid in room.participants if cid != exclude]
