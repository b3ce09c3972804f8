import copy
from typing import Any, Dict, Optional

from chat_relay.exceptions import PersistenceError
from chat_relay.models.user import ChatUsersDocument
from chat_relay.repositories.json_file import JsonDocumentFile


class ChatUserRepository:
    """The ``{"users": {}}`` record.

    Created on first start and kept for per-user chat data; no chat
    operation reads or writes it yet.
    """

    def __init__(self, file: JsonDocumentFile) -> None:
        self._file = file
        self._data: Optional[ChatUsersDocument] = None

    async def open_or_initialize(self) -> None:
        if self._data is not None:
            return
        data = await self._file.open_or_initialize({"users": {}})
        if not isinstance(data.get("users"), dict):
            raise PersistenceError(f"{self._file.path.name} has no users mapping")
        self._data = data  # type: ignore[assignment]

    async def get_users(self) -> Dict[str, Any]:
        if self._data is None:
            raise PersistenceError("Chat users record has not been opened")
        return copy.deepcopy(self._data["users"])
