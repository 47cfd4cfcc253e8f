import logging

from motor.motor_asyncio import AsyncIOMotorClient

from .config import get_db_name, get_mongo_uri

logger = logging.getLogger(__name__)

client = AsyncIOMotorClient(get_mongo_uri())
db = client[get_db_name()]


def get_db():
    return db


async def ensure_indexes(database=None):
    database = database if database is not None else db
    await database["sessions"].create_index([("id", 1)], unique=True)
    await database["sessions"].create_index([("date", 1), ("start_time", 1)])
    await database["participants"].create_index([("id", 1)], unique=True)
    await database["feedback"].create_index([("id", 1)], unique=True)
    await database["feedback"].create_index([("session_id", 1), ("submitted_at", -1)])
    logger.info("Indexes ensured on %s", database.name)
