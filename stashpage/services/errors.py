from __future__ import annotations


class StashError(Exception):
    status_code = 400
    default_message = "Request failed."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def as_dict(self) -> dict:
        return {"ok": False, "error": self.message}


class Unauthorized(StashError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(StashError):
    status_code = 403
    default_message = "Demo account cannot modify stash data."


class InvalidInput(StashError):
    status_code = 400
    default_message = "Invalid input."


class InvalidFormat(InvalidInput):
    default_message = "Invalid JSON file format."


class InvalidStructure(InvalidInput):
    default_message = 'Invalid stash data structure. Missing or malformed "stashes" key.'


class NotFound(StashError):
    status_code = 404
    default_message = "Not found."


class Conflict(StashError):
    status_code = 409
    default_message = "Already exists."


class StorageFailure(StashError):
    status_code = 500
    default_message = "Failed to save stash data."
