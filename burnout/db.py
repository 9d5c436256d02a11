import os
import threading
from typing import Any, Dict, Optional

from pymongo import MongoClient, ASCENDING, DESCENDING
from motor.motor_asyncio import AsyncIOMotorClient
from dotenv import load_dotenv

load_dotenv()

MONGODB_URI = os.getenv("MONGODB_URI")
DB_NAME = os.getenv("DB_NAME", "burnout")
BAT_COLLECTION = os.getenv("BAT_COLLECTION", "bat_responses")

_client: Optional[MongoClient] = None
_async_client: Optional[AsyncIOMotorClient] = None
# Guards client creation; health checks and startup build clients from worker threads
_client_lock = threading.Lock()


def _require_uri() -> str:
    if not MONGODB_URI:
        raise ValueError("MONGODB_URI is missing in .env")
    return MONGODB_URI


# ==================== CLIENTS ====================
def get_client() -> MongoClient:
    """Sync client, used for index management and health checks"""
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                _client = MongoClient(_require_uri(), tz_aware=True)
                print(f"✅ Connected to MongoDB: {DB_NAME}")
    return _client


def get_async_client() -> AsyncIOMotorClient:
    """Async client, used by the request handlers"""
    global _async_client
    if _async_client is None:
        with _client_lock:
            if _async_client is None:
                _async_client = AsyncIOMotorClient(_require_uri(), tz_aware=True)
    return _async_client


def get_db():
    return get_client()[DB_NAME]


def get_async_db():
    return get_async_client()[DB_NAME]


def get_bat_collection():
    return get_db()[BAT_COLLECTION]


def get_async_bat_collection():
    return get_async_db()[BAT_COLLECTION]


def close_clients() -> None:
    global _client, _async_client
    with _client_lock:
        if _client is not None:
            _client.close()
            _client = None
        if _async_client is not None:
            _async_client.close()
            _async_client = None


# ==================== CREATE INDEXES ====================
def create_indexes():
    """Create all necessary database indexes"""
    print("📊 Creating database indexes...")

    bat_responses = get_bat_collection()
    bat_responses.create_index([("user_id", ASCENDING), ("timestamp", DESCENDING)])
    bat_responses.create_index([("id", ASCENDING)], unique=True)
    bat_responses.create_index([("timestamp", DESCENDING)])

    print("✅ All indexes created successfully")


# ==================== DATABASE INITIALIZATION ====================
def init_database():
    """Initialize database with required setup"""
    try:
        count = get_bat_collection().count_documents({})

        print(f"📊 Database Status:")
        print(f"   BAT assessments: {count}")

        create_indexes()
        print(f"✅ Database '{DB_NAME}' initialized successfully")

    except Exception as e:
        print(f"❌ Database initialization error: {e}")
        raise


# ==================== DATABASE HEALTH CHECK ====================
def check_database_health() -> Dict[str, Any]:
    """Check database connection and collections"""
    try:
        get_client().admin.command("ping")

        return {
            "status": "healthy",
            "database": DB_NAME,
            "collections": {
                BAT_COLLECTION: get_bat_collection().count_documents({}),
            },
        }

    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e)
        }
