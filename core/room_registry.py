"""
Room Registry：管理 Room 的生命週期

職責：
1. 建立 Room（產生不重複的房間代碼）
2. 以代碼查詢 Room
3. 刪除 Room（只由 RoomSession 在最後一人離開時呼叫）

原則：
- 單一職責：只管代碼與 Room 的對應，不管投票
- 建立與加入分開：建立者先拿到代碼，再透過 join 佔用連線
"""
from threading import RLock
from typing import Dict, Optional
import logging

from models import Room
from core.exceptions import RoomNotFound
from services.naming_service import (
    generate_room_code,
    normalize_room_code,
    is_valid_room_code
)

logger = logging.getLogger(__name__)


class RoomRegistry:
    """Process 內唯一的 code -> Room 對應表"""

    def __init__(self):
        self._rooms: Dict[str, Room] = {}
        self._lock = RLock()

    def create_room(self, creator_name: Optional[str] = None) -> Room:
        """
        建立新房間（尚無參與者）

        流程：
        1. 生成房間代碼，若與現存房間碰撞就重新生成
        2. 建立空的 Room（facilitator_id=None, revealed=False）

        參數：
            creator_name: 建立者名稱（僅供記錄）

        返回：
            新建立的 Room

        注意：
            - 產生代碼與登記在同一把鎖內，不會有兩個存活房間拿到同一個代碼
        """
        with self._lock:
            code = generate_room_code()
            while code in self._rooms:
                logger.warning(f"Room code collision detected, regenerating: {code}")
                code = generate_room_code()

            room = Room(code=code, creator_name=creator_name)
            self._rooms[code] = room

        logger.info(f"Created room {code} (creator={creator_name!r})")
        return room

    def find_room(self, code: str) -> Optional[Room]:
        """
        透過房間代碼取得 Room，找不到回傳 None

        參數：
            code: 使用者輸入的代碼（大小寫、前後空白不拘）
        """
        code = normalize_room_code(code)
        if not is_valid_room_code(code):
            return None
        with self._lock:
            return self._rooms.get(code)

    def get_room(self, code: str) -> Room:
        """
        透過房間代碼取得 Room

        異常：
            RoomNotFound: Room 不存在或代碼格式錯誤
        """
        room = self.find_room(code)
        if room is None:
            raise RoomNotFound(normalize_room_code(code))
        return room

    def delete_room(self, code: str) -> None:
        """
        刪除房間

        只應由 RoomSession 在參與者清空時呼叫（呼叫時已持有該 Room 的鎖）
        """
        with self._lock:
            room = self._rooms.pop(code, None)
        if room is not None:
            room.closed = True
            logger.info(f"Deleted room {code}")

    def room_count(self) -> int:
        with self._lock:
            return len(self._rooms)
