"""
並發控制工具

所有房間狀態都在同一個 process 的記憶體中。WebSocket handler 在 event loop 上
同步呼叫 RoomSession，本身就不會交錯；但 FastAPI 會把一般 def endpoint 丟進
thread pool 執行，所以 Room 與 RoomRegistry 各自帶一把 RLock。

鎖的順序固定為：Room -> Registry（避免 deadlock）
"""
from contextlib import contextmanager
from typing import Iterator

from models import Room


@contextmanager
def with_room_lock(room: Room) -> Iterator[Room]:
    """
    鎖定一個 Room

    使用場景：
    - 讀取 / 修改 / 廣播整段流程必須是原子的（例如：投票 -> 重算 view -> 送出）

    範例：
        with with_room_lock(room) as locked:
            if locked.closed:
                raise RoomNotFound(locked.code)
            locked.revealed = True

    注意：
        - RLock 可重入，同一個 thread 內巢狀呼叫不會卡住
        - 持有 Room 鎖時可以再取 Registry 鎖，反過來不行
    """
    with room.lock:
        yield room
