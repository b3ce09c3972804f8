class ChatRelayError(Exception):

    code = "CHAT_RELAY_ERROR"
    http_status = 500

    def __init__(self, message: str, code: str | None = None, http_status: int | None = None):
        self.message = message
        if code is not None:
            self.code = code
        if http_status is not None:
            self.http_status = http_status
        super().__init__(message)


class ValidationError(ChatRelayError):
    """A required field is missing or blank."""

    code = "VALIDATION_ERROR"
    http_status = 400


class UpstreamUnavailable(ChatRelayError):
    """The tournament backend could not be reached or answered with an error."""

    code = "UPSTREAM_UNAVAILABLE"
    http_status = 502


class PersistenceError(ChatRelayError):
    """Reading or writing a JSON record failed; the outcome of the request is unknown."""

    code = "PERSISTENCE_ERROR"
    http_status = 500
