from typing import Any, Dict, TypedDict


class ChatUsersDocument(TypedDict):

    users: Dict[str, Any]
