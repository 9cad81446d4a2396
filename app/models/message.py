# app/models/message.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, List, Literal, Optional
from app.core.config import settings
from app.models.pictogram import Pictogram


def language_or_default(value: Any) -> str:
    return value if isinstance(value, str) and value.strip() else settings.DEFAULT_LANGUAGE


class ChatMessageCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, validate_by_name=True, validate_default=True)

    role: Literal["user", "assistant"]
    text: Optional[str] = ""
    pictograms: Optional[List[Pictogram]] = Field(default_factory=list)
    language: Any = None
    session_id: Optional[str] = None

    @field_validator("language")
    @classmethod
    def _language(cls, value):
        return language_or_default(value)

    @field_validator("text", "pictograms")
    @classmethod
    def _empty_if_missing(cls, value, info):
        if value is None:
            return "" if info.field_name == "text" else []
        return value


class DirectMessageCreate(BaseModel):
    model_config = ConfigDict(validate_default=True)

    text: Optional[str] = ""
    pictograms: Optional[List[Pictogram]] = Field(default_factory=list)
    language: Any = None

    @field_validator("language")
    @classmethod
    def _language(cls, value):
        return language_or_default(value)

    @field_validator("text", "pictograms")
    @classmethod
    def _empty_if_missing(cls, value, info):
        if value is None:
            return "" if info.field_name == "text" else []
        return value
