from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional, Union


# ============ Room View ============

class ParticipantView(BaseModel):
    id: str
    name: str
    vote: Optional[str] = None
    hasVoted: bool


class RoomState(BaseModel):
    """廣播給所有連線的房間快照"""
    scrumMaster: Optional[str] = None
    revealed: bool
    participants: List[ParticipantView]
    average: Optional[float] = None


# ============ HTTP ============

class CreateRoomRequest(BaseModel):
    name: Optional[str] = None


class CreateRoomResponse(BaseModel):
    code: str


# ============ WebSocket ============

ClientMessageType = Literal["create-room", "join-room", "vote", "reveal", "clear"]


class ClientMessage(BaseModel):
    """
    客戶端透過 WebSocket 送來的動作

    範例：
        {"type": "join-room", "code": "AB2C", "name": "Alice", "requestId": "1"}
        {"type": "vote", "value": "5"}
        {"type": "reveal"}
    """
    model_config = ConfigDict(populate_by_name=True)

    type: ClientMessageType
    name: str = ""
    code: Optional[str] = None
    value: Optional[str] = None
    request_id: Optional[Union[str, int]] = Field(default=None, alias="requestId")

    @field_validator("value", mode="before")
    @classmethod
    def coerce_card_value(cls, v):
        # 卡片值可能是數字，統一存成字串
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v
