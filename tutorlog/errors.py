"""
Student Interaction Log — Error Taxonomy
Every failure the service reports maps to one of these.
The HTTP layer turns them into {"error": message} bodies.
"""


class InteractionLogError(Exception):
    """Base class. status_code is the HTTP status the error maps to."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(InteractionLogError):
    """Payload is missing a required field or has the wrong shape."""
    status_code = 400


class NotFoundError(InteractionLogError):
    """Requested export does not exist (file backend before first write)."""
    status_code = 404


class StorageError(InteractionLogError):
    """Backing file or database failed on read or write."""
    status_code = 500
