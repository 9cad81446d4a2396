# app/utils/errors.py

from fastapi import HTTPException

class BadRequestError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)

class UnauthorizedRequestError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})

class ForbiddenError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=403, detail=detail)

class NotFoundError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=404, detail=detail)


# Pictogram search conditions. These stay inside the service layer.

class SearchUnavailable(Exception):
    """The symbol search service could not be reached or answered garbage."""

class MalformedUpstreamRecord(ValueError):
    """An upstream pictogram record carries no usable id."""
