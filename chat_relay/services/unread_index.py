from typing import Iterable

from chat_relay.models.conversation import ConversationDocument
from chat_relay.repositories.conversation_repository import ConversationRepository
from chat_relay.utils.wallet import canonical_wallet


def _unread_in(convo: ConversationDocument, wallet: str) -> int:
    return sum(
        1
        for msg in convo.get("messages", [])
        if canonical_wallet(msg.get("to")) == wallet and not msg.get("read")
    )


class UnreadIndex:
    """Unread counts derived from the current store contents.

    Recomputed on each call; conversations hold at most a handful of
    messages so a scan is cheap.
    """

    def __init__(self, conversation_repo: ConversationRepository) -> None:
        self._conversation_repo = conversation_repo

    async def count_for(self, wallet: str) -> int:
        wallet = canonical_wallet(wallet)
        conversations: Iterable[ConversationDocument] = (await self._conversation_repo.snapshot()).values()
        return sum(
            _unread_in(convo, wallet)
            for convo in conversations
            if wallet in {canonical_wallet(p) for p in convo.get("participants", [])}
        )

    async def count_for_pair(self, conversation_id: str, wallet: str) -> int:
        convo = await self._conversation_repo.get(conversation_id)
        if convo is None:
            return 0
        return _unread_in(convo, canonical_wallet(wallet))
