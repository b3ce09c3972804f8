from typing import Dict, List, TypedDict

from chat_relay.models.message import MessageDocument


class ConversationDocument(TypedDict, total=False):
    # [from, to] of the first message, never changes
    participants: List[str]
    # oldest first, capped at the history limit
    messages: List[MessageDocument]
    createdAt: str
    lastMessageAt: str


class ConversationStoreDocument(TypedDict):
    conversations: Dict[str, ConversationDocument]
