# app/services/message_service.py

from datetime import datetime
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING

from app.db.mongo import CHAT_MESSAGES
from app.models.message import ChatMessageCreate


async def create_chat_message(db: AsyncIOMotorDatabase, payload: ChatMessageCreate) -> dict:
    now = datetime.utcnow()
    doc = {
        "role": payload.role,
        "text": payload.text,
        "pictograms": [p.to_document() for p in payload.pictograms],
        "language": payload.language,
        "createdAt": now,
        "updatedAt": now,
    }
    if payload.session_id is not None:
        doc["sessionId"] = payload.session_id

    result = await db[CHAT_MESSAGES].insert_one(doc)
    doc["_id"] = result.inserted_id
    return doc


async def list_chat_messages(
    db: AsyncIOMotorDatabase,
    limit: int,
    session_id: Optional[str] = None,
) -> List[dict]:
    """Newest first. Messages created in the same millisecond fall back to insertion order."""
    query = {"sessionId": session_id} if session_id else {}
    cursor = (
        db[CHAT_MESSAGES]
        .find(query)
        .sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
        .limit(limit)
    )
    return await cursor.to_list(length=limit)
