"""
FastAPI dependencies：提供 process 內唯一的 Registry / ConnectionManager / RoomSession

測試時可用 app.dependency_overrides 換掉
"""
from functools import lru_cache

from core.connection_manager import ConnectionManager
from core.room_registry import RoomRegistry
from core.room_session import RoomSession


@lru_cache()
def get_registry() -> RoomRegistry:
    return RoomRegistry()


@lru_cache()
def get_connection_manager() -> ConnectionManager:
    return ConnectionManager()


@lru_cache()
def get_room_session() -> RoomSession:
    return RoomSession(get_registry(), get_connection_manager())
