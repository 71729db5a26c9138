"""
Connection Manager：WebSocket 連線與對外送訊

每條連線有自己的 outbound queue 與 writer task：
- send() 只是把訊息放進 queue，不等待送達（fire-and-forget）
- 同一條連線的訊息依放入順序送出
- 透過 loop.call_soon_threadsafe 放入，從 thread pool 呼叫也安全

實作 RoomSession 所需的 Broadcaster 介面
"""
import asyncio
import logging
import uuid
from typing import Dict, Tuple

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """connection_id -> (event loop, outbound queue, writer task)"""

    def __init__(self):
        self._connections: Dict[str, Tuple[asyncio.AbstractEventLoop, asyncio.Queue, asyncio.Task]] = {}

    async def connect(self, websocket: WebSocket) -> str:
        """
        接受 WebSocket 並配發一個新的 connection_id

        返回：
            connection_id（uuid4 hex，只在這條連線存活期間有效）
        """
        await websocket.accept()
        connection_id = uuid.uuid4().hex
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()
        task = asyncio.create_task(self._writer(connection_id, websocket, queue))
        self._connections[connection_id] = (loop, queue, task)
        logger.debug(f"Connection {connection_id} accepted ({len(self._connections)} open)")
        return connection_id

    async def disconnect(self, connection_id: str) -> None:
        entry = self._connections.pop(connection_id, None)
        if entry is None:
            return
        _, _, task = entry
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug(f"Connection {connection_id} closed ({len(self._connections)} open)")

    def send(self, connection_id: str, message: dict) -> None:
        """放入 outbound queue；連線已關閉則直接丟棄"""
        entry = self._connections.get(connection_id)
        if entry is None:
            logger.debug(f"Dropping message for closed connection {connection_id}")
            return
        loop, queue, _ = entry
        loop.call_soon_threadsafe(queue.put_nowait, message)

    def connection_count(self) -> int:
        return len(self._connections)

    @staticmethod
    async def _writer(connection_id: str, websocket: WebSocket, queue: asyncio.Queue) -> None:
        while True:
            message = await queue.get()
            try:
                await websocket.send_json(message)
            except Exception as e:
                # 對方已斷線；receive 端會收到 disconnect 並走 leave 流程
                logger.warning(f"Error sending to connection {connection_id}: {e}")
                return
