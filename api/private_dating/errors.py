"""Engine error kinds.

Every public engine operation either applies fully or raises one of these
before mutating anything. ``status_code`` is the HTTP status the API layer
answers with.
"""


class EngineError(Exception):
    code = "engine_error"
    status_code = 400

    def __init__(self, detail: str = ""):
        self.detail = detail or self.code
        super().__init__(self.detail)


class AlreadyRegistered(EngineError):
    code = "already_registered"
    status_code = 409


class NotRegistered(EngineError):
    code = "not_registered"
    status_code = 404


class InvalidAttribute(EngineError):
    code = "invalid_attribute"
    status_code = 400


class SelfMatch(EngineError):
    code = "self_match"
    status_code = 400


class TargetUnavailable(EngineError):
    code = "target_unavailable"
    status_code = 409


class DuplicateRequest(EngineError):
    code = "duplicate_request"
    status_code = 409


class Unauthorized(EngineError):
    code = "unauthorized"
    status_code = 403


class AlreadyProcessed(EngineError):
    code = "already_processed"
    status_code = 409


class AccessDenied(EngineError):
    code = "access_denied"
    status_code = 403


class InvalidRevealProof(EngineError):
    code = "invalid_reveal_proof"
    status_code = 400


class RevealNotRequested(EngineError):
    code = "reveal_not_requested"
    status_code = 409


class MatchNotFound(EngineError):
    code = "match_not_found"
    status_code = 404


class RoomNotFound(EngineError):
    code = "room_not_found"
    status_code = 404


class RoomInactive(EngineError):
    code = "room_inactive"
    status_code = 409
