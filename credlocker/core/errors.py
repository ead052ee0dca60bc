"""
Domain errors.

Every error carries the HTTP status the API answers with; main.py maps
them to a {"detail": ...} body, same shape as HTTPException.
"""


class CredLockerError(Exception):
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class ValidationError(CredLockerError):
    """Malformed input, rejected before anything is mutated."""
    status_code = 400


class NotFoundError(CredLockerError):
    status_code = 404


class ConflictError(CredLockerError):
    """Username or email already taken."""
    status_code = 409


class PersistenceError(CredLockerError):
    """
    The users file could not be read or written.

    Write failures are logged and kept on the store (in-memory state stays
    authoritative). A corrupt file at load time is raised.
    """
    status_code = 500


class ReputationError(CredLockerError):
    """The IPQS API could not be reached or answered garbage."""
    status_code = 502


class ReputationUnavailable(ReputationError):
    """No IPQS key configured."""
    status_code = 503
