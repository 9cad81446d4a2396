# app/models/conversation.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Optional


class ConversationCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, validate_by_name=True)

    other_user_id: Optional[Any] = None


def pair_key(user_a, user_b) -> str:
    """Canonical key for an unordered participant pair."""
    return ":".join(sorted([str(user_a), str(user_b)]))
