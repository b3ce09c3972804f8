import asyncio
import copy
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from bson import ObjectId

from chat_relay.exceptions import PersistenceError, ValidationError
from chat_relay.models.conversation import ConversationDocument, ConversationStoreDocument
from chat_relay.models.message import DEFAULT_MESSAGE_TYPE, MessageDocument
from chat_relay.repositories.json_file import JsonDocumentFile
from chat_relay.utils.wallet import canonical_wallet, conversation_id


logger = logging.getLogger(__name__)

MAX_HISTORY_LIMIT = 3
DEFAULT_HISTORY_LIMIT = MAX_HISTORY_LIMIT


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ConversationRepository:
    """Single writer of the conversation store.

    The whole store lives in memory and is written back in full after each
    mutation. Mutations run under one lock and are copy-on-write: the new
    state only replaces the current one once it has been persisted.
    """

    def __init__(self, file: JsonDocumentFile, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if not 1 <= history_limit <= MAX_HISTORY_LIMIT:
            raise ValueError(f"history_limit must be between 1 and {MAX_HISTORY_LIMIT}, got {history_limit}")
        self._file = file
        self._history_limit = history_limit
        self._lock = asyncio.Lock()
        self._data: Optional[ConversationStoreDocument] = None

    async def open_or_initialize(self) -> None:
        async with self._lock:
            if self._data is not None:
                return
            data = await self._file.open_or_initialize({"conversations": {}})
            if not isinstance(data.get("conversations"), dict):
                raise PersistenceError(f"{self._file.path.name} has no conversations mapping")
            self._data = data  # type: ignore[assignment]
            logger.info("Loaded %d conversations from %s", len(self._data["conversations"]), self._file.path)

    @property
    def _conversations(self) -> Dict[str, ConversationDocument]:
        if self._data is None:
            raise PersistenceError("Conversation store has not been opened")
        return self._data["conversations"]

    async def get(self, convo_id: str) -> Optional[ConversationDocument]:
        convo = self._conversations.get(convo_id)
        return copy.deepcopy(convo) if convo is not None else None

    async def snapshot(self) -> Dict[str, ConversationDocument]:
        return copy.deepcopy(self._conversations)

    async def append(self, sender: str, receiver: str, body: str, message_type: Optional[str] = None) -> MessageDocument:
        sender_wallet = canonical_wallet(sender)
        receiver_wallet = canonical_wallet(receiver)
        if not sender_wallet or not receiver_wallet or not body or not body.strip():
            raise ValidationError("From, to, and message are required")

        convo_id = conversation_id(sender_wallet, receiver_wallet)
        async with self._lock:
            if self._data is None:
                raise PersistenceError("Conversation store has not been opened")
            data = copy.deepcopy(self._data)

            now = _utcnow_iso()
            convo = data["conversations"].get(convo_id)
            if convo is None:
                convo = {
                    "participants": [sender_wallet, receiver_wallet],
                    "messages": [],
                    "createdAt": now,
                }
                data["conversations"][convo_id] = convo

            message: MessageDocument = {
                "id": f"msg_{ObjectId()}",
                "from": sender_wallet,
                "to": receiver_wallet,
                "message": body,
                "messageType": (message_type or "").strip() or DEFAULT_MESSAGE_TYPE,
                "timestamp": now,
                "read": False,
            }
            messages = convo.setdefault("messages", [])
            messages.append(message)
            # drop the oldest
            convo["messages"] = messages[-self._history_limit:]
            convo["lastMessageAt"] = now

            await self._file.write(data)  # type: ignore[arg-type]
            self._data = data

        logger.info("Message %s appended to %s", message["id"], convo_id)
        return copy.deepcopy(message)

    async def mark_read_for(self, convo_id: str, recipient: str) -> int:
        """Mark every unread message addressed to ``recipient`` as read.

        Returns the number of messages that changed; nothing is written
        when that number is zero.
        """
        recipient_wallet = canonical_wallet(recipient)
        async with self._lock:
            if convo_id not in self._conversations:
                return 0
            data = copy.deepcopy(self._data)
            modified = 0
            for msg in data["conversations"][convo_id].get("messages", []):
                if canonical_wallet(msg.get("to")) == recipient_wallet and not msg.get("read"):
                    msg["read"] = True
                    modified += 1
            if modified:
                await self._file.write(data)  # type: ignore[arg-type]
                self._data = data
        if modified:
            logger.info("Marked %d messages read for %s in %s", modified, recipient_wallet, convo_id)
        return modified
