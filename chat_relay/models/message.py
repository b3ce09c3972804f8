from typing import TypedDict


DEFAULT_MESSAGE_TYPE = "text"


# "from" is a keyword, hence the functional form
MessageDocument = TypedDict(
    "MessageDocument",
    {
        "id": str,
        "from": str,
        "to": str,
        "message": str,
        # open set; "text" unless the client says otherwise
        "messageType": str,
        "timestamp": str,
        "read": bool,
    },
)
