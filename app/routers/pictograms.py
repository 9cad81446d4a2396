# app/routers/pictograms.py

from typing import Any
from fastapi import APIRouter
from pydantic import BaseModel
from app.models.message import language_or_default
from app.services.pictogram_engine import generate_pictograms
from app.utils.errors import BadRequestError
from app.utils.responses import format_response

router = APIRouter(tags=["pictograms"])


class GeneratePictogramsRequest(BaseModel):
    text: str
    language: Any = None


@router.post("/generate", summary="Turn text into a small set of pictograms")
async def generate(req: GeneratePictogramsRequest):
    if not req.text.strip():
        raise BadRequestError("Missing text")

    result = await generate_pictograms(req.text, language_or_default(req.language))
    return format_response(**result.model_dump(by_alias=True, exclude_none=True))
