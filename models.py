"""
記憶體內的資料模型

Room 與 Participant 只存在於單一 process 的記憶體中，不做持久化
"""
from dataclasses import dataclass, field
from enum import Enum
from threading import RLock
from typing import Dict, Optional


class RoomStatus(str, Enum):
    OPEN = "OPEN"            # 投票中，票面隱藏
    REVEALED = "REVEALED"    # 已翻牌，票面公開，停止投票


@dataclass
class Participant:
    name: str
    vote: Optional[str] = None


@dataclass
class Room:
    """
    一個估點房間

    欄位：
        code: 4 碼房間代碼，建立後不可變
        facilitator_id: 可以翻牌 / 清除的連線 ID（第一位加入者）
        participants: connection_id -> Participant，依加入順序排列
        revealed: 是否已翻牌
        creator_name: 建立房間時提供的名稱（僅供記錄）
        closed: 已從 registry 移除，舊的參照不可再被寫入
    """
    code: str
    facilitator_id: Optional[str] = None
    participants: Dict[str, Participant] = field(default_factory=dict)
    revealed: bool = False
    creator_name: Optional[str] = None
    closed: bool = False
    lock: RLock = field(default_factory=RLock, repr=False, compare=False)

    @property
    def status(self) -> RoomStatus:
        return RoomStatus.REVEALED if self.revealed else RoomStatus.OPEN
