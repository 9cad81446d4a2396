# app/db/mongo.py
from motor.motor_asyncio import AsyncIOMotorClient
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from app.core.config import settings
from app.core.logger import logger


client = AsyncIOMotorClient(settings.MONGODB_URI)
db = client[settings.MONGODB_DB]

# Collection names
USERS = "users"
CHAT_MESSAGES = "chat_messages"
CONVERSATIONS = "conversations"
DIRECT_MESSAGES = "direct_messages"


# Function to check DB connection
async def verify_mongodb_connection():
    try:
        await client.server_info()
        logger.info("MongoDB connection established")
    except Exception as e:
        logger.error(f"MongoDB connection failed: {str(e)}")


async def ensure_indexes(database: AsyncIOMotorDatabase):
    """Create the indexes the store relies on for uniqueness and ordering."""
    await database[USERS].create_index("email", unique=True)
    await database[CHAT_MESSAGES].create_index("sessionId")
    await database[CHAT_MESSAGES].create_index([("createdAt", DESCENDING)])
    await database[CONVERSATIONS].create_index("pairKey", unique=True)
    await database[CONVERSATIONS].create_index([("participants", ASCENDING), ("lastMessageAt", DESCENDING)])
    await database[DIRECT_MESSAGES].create_index([("conversationId", ASCENDING), ("createdAt", ASCENDING)])


async def get_db() -> AsyncIOMotorDatabase:
    return db
