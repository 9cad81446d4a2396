# app/routers/auth.py

from datetime import datetime
from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from bson import ObjectId
from pymongo.errors import DuplicateKeyError
from app.core.jwt import create_jwt_token
from app.core.logger import logger
from app.core.security import hash_password, verify_password
from app.db.mongo import get_db, USERS
from app.models.user import UserCreate, UserLogin, public_user
from app.routers.deps import get_current_user_id
from app.utils.errors import BadRequestError, NotFoundError
from app.utils.responses import format_response

router = APIRouter(tags=["auth"])


def _token_for(user: dict) -> str:
    return create_jwt_token(data={"sub": str(user["_id"]), "email": user["email"]})


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Create a new user")
async def register(user: UserCreate, db: AsyncIOMotorDatabase = Depends(get_db)):
    email = user.email.strip().lower()

    existing = await db[USERS].find_one({"email": email})
    if existing:
        raise BadRequestError("Email already registered")

    now = datetime.utcnow()
    user_doc = {
        "email": email,
        "passwordHash": hash_password(user.password),
        "name": user.name.strip(),
        "createdAt": now,
        "updatedAt": now,
    }
    try:
        result = await db[USERS].insert_one(user_doc)
    except DuplicateKeyError:
        raise BadRequestError("Email already registered")
    user_doc["_id"] = result.inserted_id

    logger.info(f"Registered user {email}")
    return format_response(user=public_user(user_doc), token=_token_for(user_doc))


@router.post("/login", summary="Log in with email and password")
async def login(user: UserLogin, db: AsyncIOMotorDatabase = Depends(get_db)):
    email = user.email.strip().lower()
    existing_user = await db[USERS].find_one({"email": email})

    if not existing_user or not verify_password(user.password, existing_user.get("passwordHash", "")):
        logger.warning(f"Failed login for: {email}")
        raise BadRequestError("Invalid credentials")

    return format_response(user=public_user(existing_user), token=_token_for(existing_user))


@router.get("/me", summary="Get current user info")
async def whoami(
    user_id: ObjectId = Depends(get_current_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    user = await db[USERS].find_one({"_id": user_id})
    if not user:
        raise NotFoundError("User not found")
    return format_response(user=public_user(user))
