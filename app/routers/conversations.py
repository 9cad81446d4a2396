# app/routers/conversations.py

from fastapi import APIRouter, BackgroundTasks, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from bson import ObjectId
from app.db.mongo import get_db, USERS
from app.models.conversation import ConversationCreate
from app.models.message import DirectMessageCreate
from app.routers.deps import get_current_user_id
from app.services.conversation_service import (
    create_direct_message,
    get_conversation_for_user,
    list_conversations,
    list_direct_messages,
    resolve_or_create_conversation,
    to_object_id,
)
from app.services.realtime import registry
from app.utils.errors import BadRequestError, NotFoundError
from app.utils.responses import format_response, serialize_doc

router = APIRouter(tags=["conversations"])


@router.post("", summary="Find or create the 1:1 conversation with another user")
async def start_conversation(
    req: ConversationCreate,
    user_id: ObjectId = Depends(get_current_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    if not req.other_user_id:
        raise BadRequestError("Missing otherUserId")

    other_user_id = to_object_id(req.other_user_id)
    if other_user_id is None:
        raise BadRequestError("Invalid otherUserId")
    if not await db[USERS].find_one({"_id": other_user_id}, {"_id": 1}):
        raise NotFoundError("User not found")

    conversation = await resolve_or_create_conversation(db, user_id, other_user_id)
    return format_response(conversation=serialize_doc(conversation))


@router.get("", summary="Conversations of the current user, most recent first")
async def get_conversations(
    user_id: ObjectId = Depends(get_current_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    conversations = await list_conversations(db, user_id)
    return format_response(conversations=[serialize_doc(c) for c in conversations])


@router.get("/{conversation_id}/messages", summary="Message history, oldest first")
async def get_conversation_messages(
    conversation_id: str,
    user_id: ObjectId = Depends(get_current_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    conversation = await get_conversation_for_user(db, conversation_id, user_id)
    messages = await list_direct_messages(db, conversation["_id"])
    return format_response(messages=[serialize_doc(m) for m in messages])


@router.post("/{conversation_id}/messages", status_code=status.HTTP_201_CREATED, summary="Send a direct message")
async def post_conversation_message(
    conversation_id: str,
    req: DirectMessageCreate,
    background_tasks: BackgroundTasks,
    user_id: ObjectId = Depends(get_current_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    conversation = await get_conversation_for_user(db, conversation_id, user_id)
    message = serialize_doc(await create_direct_message(db, conversation, user_id, req))
    background_tasks.add_task(
        registry.send_to_users,
        [str(p) for p in conversation["participants"]],
        "dm:new",
        message,
    )
    return format_response(message=message)
