# app/services/conversation_service.py

from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError

from app.core.logger import logger
from app.db.mongo import CONVERSATIONS, DIRECT_MESSAGES, USERS
from app.models.conversation import pair_key
from app.models.message import DirectMessageCreate
from app.utils.errors import BadRequestError, ForbiddenError, NotFoundError


def to_object_id(value) -> Optional[ObjectId]:
    """Parse an id coming from a client; None when it is not a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str):
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


async def _find_conversation(db: AsyncIOMotorDatabase, user_a: ObjectId, user_b: ObjectId) -> Optional[dict]:
    return await db[CONVERSATIONS].find_one(
        {"participants": {"$all": [user_a, user_b], "$size": 2}}
    )


async def _insert_conversation(db: AsyncIOMotorDatabase, doc: dict):
    return await db[CONVERSATIONS].insert_one(doc)


async def resolve_or_create_conversation(db: AsyncIOMotorDatabase, user_a: ObjectId, user_b: ObjectId) -> dict:
    """
    Return the single conversation between two users, creating it on first use.

    Argument order does not matter. Concurrent callers for the same pair converge
    on one document: the unique ``pairKey`` index rejects the second insert and
    the loser re-reads the winner.
    """
    if user_a == user_b:
        raise BadRequestError("A conversation needs two different participants")

    existing = await _find_conversation(db, user_a, user_b)
    if existing:
        return existing

    now = datetime.utcnow()
    doc = {
        "participants": [user_a, user_b],
        "pairKey": pair_key(user_a, user_b),
        "lastMessageAt": now,
        "createdAt": now,
        "updatedAt": now,
    }
    try:
        result = await _insert_conversation(db, doc)
    except DuplicateKeyError:
        logger.info(f"Conversation {doc['pairKey']} created concurrently, reusing it")
        winner = await db[CONVERSATIONS].find_one({"pairKey": doc["pairKey"]})
        if winner is None:
            raise
        return winner

    doc["_id"] = result.inserted_id
    return doc


async def get_conversation_for_user(db: AsyncIOMotorDatabase, conversation_id, user_id: ObjectId) -> dict:
    oid = to_object_id(conversation_id)
    conversation = await db[CONVERSATIONS].find_one({"_id": oid}) if oid else None
    if not conversation:
        raise NotFoundError("Conversation not found")
    if user_id not in conversation["participants"]:
        raise ForbiddenError("You are not a participant in this conversation")
    return conversation


async def list_conversations(db: AsyncIOMotorDatabase, user_id: ObjectId) -> List[dict]:
    conversations = (
        await db[CONVERSATIONS]
        .find({"participants": user_id})
        .sort([("lastMessageAt", DESCENDING), ("_id", DESCENDING)])
        .to_list(length=None)
    )

    participant_ids = {p for c in conversations for p in c["participants"]}
    users = await db[USERS].find(
        {"_id": {"$in": list(participant_ids)}},
        {"name": 1, "email": 1},
    ).to_list(length=None)
    by_id = {u["_id"]: u for u in users}

    for conversation in conversations:
        conversation["participants"] = [
            by_id.get(p, {"_id": p}) for p in conversation["participants"]
        ]
    return conversations


async def list_direct_messages(db: AsyncIOMotorDatabase, conversation_id: ObjectId) -> List[dict]:
    return (
        await db[DIRECT_MESSAGES]
        .find({"conversationId": conversation_id})
        .sort([("createdAt", ASCENDING), ("_id", ASCENDING)])
        .to_list(length=None)
    )


async def create_direct_message(
    db: AsyncIOMotorDatabase,
    conversation: dict,
    sender_id: ObjectId,
    payload: DirectMessageCreate,
) -> dict:
    now = datetime.utcnow()
    doc = {
        "conversationId": conversation["_id"],
        "senderId": sender_id,
        "text": payload.text,
        "pictograms": [p.to_document() for p in payload.pictograms],
        "language": payload.language,
        "createdAt": now,
        "updatedAt": now,
    }
    result = await db[DIRECT_MESSAGES].insert_one(doc)
    doc["_id"] = result.inserted_id

    # Not atomic with the insert: a failure here only leaves lastMessageAt stale.
    await db[CONVERSATIONS].update_one(
        {"_id": conversation["_id"]},
        {"$set": {"lastMessageAt": now, "updatedAt": now}},
    )
    return doc
