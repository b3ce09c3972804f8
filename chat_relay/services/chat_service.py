from typing import Any, Dict, List, Optional

from chat_relay.exceptions import ValidationError
from chat_relay.models.message import MessageDocument
from chat_relay.repositories.conversation_repository import ConversationRepository
from chat_relay.services.roster_gateway import RosterGateway
from chat_relay.services.unread_index import UnreadIndex
from chat_relay.utils.wallet import canonical_wallet, conversation_id


def _require(**fields: Optional[str]) -> None:
    missing = [name for name, value in fields.items() if not value or not value.strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


class ChatService:

    def __init__(self, conversation_repo: ConversationRepository, unread_index: UnreadIndex, roster: RosterGateway) -> None:
        self._conversation_repo = conversation_repo
        self._unread_index = unread_index
        self._roster = roster

    async def list_available_peers(self, wallet: str) -> List[Dict[str, Any]]:
        """Players sharing an unfinished tournament with ``wallet``, with their unread counts."""
        _require(wallet=wallet)
        user_wallet = canonical_wallet(wallet)
        peers: Dict[str, Dict[str, Any]] = {}
        for participant in await self._roster.co_participants(user_wallet):
            peer_wallet = canonical_wallet(participant["walletAddress"])
            if peer_wallet == user_wallet or peer_wallet in peers:
                continue
            peers[peer_wallet] = {
                "walletAddress": participant["walletAddress"],
                "displayName": participant.get("platformUsername"),
                "handles": participant.get("gamertags"),
            }
        for peer_wallet, peer in peers.items():
            peer["unreadCount"] = await self._unread_index.count_for_pair(conversation_id(user_wallet, peer_wallet), user_wallet)
        return list(peers.values())

    async def get_conversation(self, viewer: str, other: str) -> Dict[str, Any]:
        """Return the thread between two wallets; the viewer's incoming messages become read."""
        _require(viewer=viewer, other=other)
        convo_id = conversation_id(viewer, other)
        convo = await self._conversation_repo.get(convo_id)
        if convo is None:
            return {
                "conversationId": convo_id,
                "messages": [],
                "participants": [canonical_wallet(viewer), canonical_wallet(other)],
            }
        if await self._conversation_repo.mark_read_for(convo_id, viewer):
            convo = await self._conversation_repo.get(convo_id) or convo
        return {
            "conversationId": convo_id,
            "messages": convo.get("messages", []),
            "participants": convo.get("participants", []),
        }

    async def send_message(self, sender: Optional[str], receiver: Optional[str], body: Optional[str], message_type: Optional[str] = None) -> MessageDocument:
        if not all(value and value.strip() for value in (sender, receiver, body)):
            raise ValidationError("From, to, and message are required")
        return await self._conversation_repo.append(sender, receiver, body, message_type)  # type: ignore[arg-type]

    async def get_unread_count(self, wallet: str) -> int:
        _require(wallet=wallet)
        return await self._unread_index.count_for(wallet)
