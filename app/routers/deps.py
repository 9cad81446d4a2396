# app/routers/deps.py

from typing import Optional
from bson import ObjectId
from fastapi import Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.jwt import decode_jwt_token
from app.services.conversation_service import to_object_id
from app.utils.errors import UnauthorizedRequestError

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user_id(
    token: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> ObjectId:
    if token is None:
        raise UnauthorizedRequestError("Not authenticated")

    user_id = to_object_id(decode_jwt_token(token.credentials))
    if user_id is None:
        raise UnauthorizedRequestError("Invalid token")
    return user_id
