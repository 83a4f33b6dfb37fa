"""Error taxonomy shared by the pipeline stages and the HTTP layer."""


class CoachError(Exception):
    """Base class for every failure the session controller reports to the user."""

    http_status = 500
    default_stage = "unknown"

    def __init__(self, message: str, stage: str = None):
        super().__init__(message)
        self.message = message
        self.stage = stage or self.default_stage

    def to_dict(self) -> dict:
        return {"stage": self.stage, "error": self.message, "kind": type(self).__name__}


class ValidationError(CoachError):
    """Missing or empty required input, caught before any external call."""

    http_status = 400
    default_stage = "validation"


class DocumentNotFound(ValidationError):
    default_stage = "documents"


class SessionStateError(CoachError):
    """Operation not allowed in the current wizard step."""

    http_status = 409
    default_stage = "session"


class SessionBusyError(SessionStateError):
    """Another call for the same session is still in flight."""


class UpstreamTransportError(CoachError):
    """Generation or storage service unreachable, rate limited or failing."""

    http_status = 502
    default_stage = "llm"


class MalformedResponseError(CoachError):
    """Service answered, but not with the shape the stage requires."""

    http_status = 502
    default_stage = "llm"


class StorageFailure(CoachError):
    http_status = 500
    default_stage = "storage"
