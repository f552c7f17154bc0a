"""Error taxonomy shared by the room services and the HTTP layer.

Services raise these; the rooms blueprint turns them into
``{"error": message, "kind": kind}`` responses. Nothing here retries.
"""


class RoomError(Exception):
    kind = 'internal'
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {'error': self.message, 'kind': self.kind}


class InputMissing(RoomError):
    """A required parameter was absent or empty."""
    kind = 'input_missing'
    status_code = 400


class RoomNotFound(RoomError):
    kind = 'not_found'
    status_code = 404


class RoomConflict(RoomError):
    """The operation is not valid for the room's current state."""
    kind = 'conflict'
    status_code = 409


class RoomInternalError(RoomError):
    kind = 'internal'
    status_code = 500


class RoomIdTaken(RoomInternalError):
    """Raised by the store when a new room's id already exists."""
