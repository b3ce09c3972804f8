from fastapi import APIRouter, Depends, Request

from chat_relay.repositories.conversation_repository import ConversationRepository
from chat_relay.schemas.chat import (
    AvailableUsersResponse,
    ConversationResponse,
    SendMessageRequest,
    SendMessageResponse,
    UnreadCountResponse,
)
from chat_relay.services.chat_service import ChatService
from chat_relay.services.roster_gateway import RosterGateway
from chat_relay.services.unread_index import UnreadIndex


router = APIRouter(prefix="/chat", tags=["chat"])


def get_conversation_repo(request: Request) -> ConversationRepository:
    return request.app.state.conversation_repo


def get_roster_gateway(request: Request) -> RosterGateway:
    return request.app.state.roster_gateway


def get_chat_service(
    conversation_repo: ConversationRepository = Depends(get_conversation_repo),
    roster: RosterGateway = Depends(get_roster_gateway),
) -> ChatService:
    return ChatService(conversation_repo, UnreadIndex(conversation_repo), roster)


@router.get("/available-users/{wallet_address}", response_model=AvailableUsersResponse)
async def available_users(wallet_address: str, service: ChatService = Depends(get_chat_service)):
    users = await service.list_available_peers(wallet_address)
    return {"users": users, "count": len(users)}


@router.get("/conversation/{viewer}/{other}", response_model=ConversationResponse)
async def get_conversation(viewer: str, other: str, service: ChatService = Depends(get_chat_service)):
    return await service.get_conversation(viewer, other)


@router.post("/send", response_model=SendMessageResponse)
async def send_message(body: SendMessageRequest, service: ChatService = Depends(get_chat_service)):
    saved = await service.send_message(body.from_, body.to, body.message, body.messageType)
    return {"message": "Message sent successfully", "messageData": saved}


@router.get("/unread/{wallet_address}", response_model=UnreadCountResponse)
async def get_unread(wallet_address: str, service: ChatService = Depends(get_chat_service)):
    return {"unreadCount": await service.get_unread_count(wallet_address)}
