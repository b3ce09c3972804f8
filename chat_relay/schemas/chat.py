from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SendMessageRequest(BaseModel):
    # presence is checked by the service so that blanks answer 400 like missing fields
    model_config = ConfigDict(populate_by_name=True)

    from_: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    message: Optional[str] = None
    messageType: Optional[str] = None


class MessagePublic(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    from_: str = Field(alias="from")
    to: str
    message: str
    messageType: str = "text"
    timestamp: str
    read: bool = False


class AvailableUser(BaseModel):

    walletAddress: str
    displayName: Optional[str] = None
    handles: Any = None
    unreadCount: int = 0


class AvailableUsersResponse(BaseModel):

    users: List[AvailableUser]
    count: int


class ConversationResponse(BaseModel):

    conversationId: str
    messages: List[MessagePublic]
    participants: List[str]


class SendMessageResponse(BaseModel):

    message: str = "Message sent successfully"
    messageData: MessagePublic


class UnreadCountResponse(BaseModel):

    unreadCount: int


class HealthResponse(BaseModel):

    status: str = "OK"
    timestamp: str
