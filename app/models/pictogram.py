# app/models/pictogram.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional


class Pictogram(BaseModel):
    """A symbol image record. Two pictograms with the same ``id`` are the same symbol."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        validate_by_name=True,
        frozen=True,
    )

    id: int
    search_text: str = ""
    language: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    image_url: str = ""
    description: Optional[str] = None

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class PictogramSearchResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, validate_by_name=True)

    pictograms: List[Pictogram] = Field(default_factory=list)
    used_queries: List[str] = Field(default_factory=list)
    message: Optional[str] = None
