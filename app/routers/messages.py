# app/routers/messages.py

from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from app.core.config import settings
from app.db.mongo import get_db
from app.models.message import ChatMessageCreate
from app.services.message_service import create_chat_message, list_chat_messages
from app.services.realtime import registry
from app.utils.responses import format_response, serialize_doc

router = APIRouter(tags=["messages"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Post a message to the broadcast room")
async def post_message(
    req: ChatMessageCreate,
    background_tasks: BackgroundTasks,
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    message = serialize_doc(await create_chat_message(db, req))
    background_tasks.add_task(registry.broadcast, "new_message", message)
    return format_response(message=message)


@router.get("", summary="Latest broadcast room messages, newest first")
async def get_messages(
    limit: int = Query(settings.MESSAGES_DEFAULT_LIMIT, ge=1, le=settings.MESSAGES_MAX_LIMIT),
    session_id: Optional[str] = Query(None, alias="sessionId"),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    messages = await list_chat_messages(db, limit=limit, session_id=session_id)
    return format_response(messages=[serialize_doc(m) for m in messages])
