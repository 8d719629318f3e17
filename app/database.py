# app/database.py
import re
from typing import Any, Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from app.config import MONGO_URI, MONGO_DB_NAME
from app.errors import UpstreamLookupError
from app.logging_setup import logger

class Database:
    client: AsyncIOMotorClient = None

db = Database()

async def connect_to_mongo():
    """Establishes the connection to MongoDB and checks that it answers."""
    logger.info("Connecting to MongoDB...")
    db.client = AsyncIOMotorClient(MONGO_URI)
    await db.client.admin.command("ping")
    logger.info("MongoDB connection established.")

async def close_mongo_connection():
    """Closes the connection to the MongoDB database."""
    if db.client is None:
        return
    logger.info("Closing MongoDB connection...")
    db.client.close()
    db.client = None
    logger.info("MongoDB connection closed.")

def get_database() -> AsyncIOMotorDatabase:
    """Returns the database client instance."""
    if db.client is None:
        raise RuntimeError("Database is not connected. Call connect_to_mongo() first.")
    return db.client[MONGO_DB_NAME]


class MongoDataSource:
    """
    Table-style filter-and-fetch access to the catalog collections.

    Every collection is treated as a table of flat rows; the Mongo `_id`
    is never returned. Driver failures surface as UpstreamLookupError.
    """

    def __init__(self, database: AsyncIOMotorDatabase):
        self.database = database

    async def select(
        self,
        table: str,
        columns: Optional[Iterable[str]] = None,
        *,
        eq: Optional[Dict[str, Any]] = None,
        in_: Optional[Dict[str, Iterable[Any]]] = None,
        ilike: Optional[Dict[str, str]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        query: Dict[str, Any] = {}
        for column, value in (eq or {}).items():
            query[column] = value
        for column, values in (in_ or {}).items():
            query[column] = {"$in": list(values)}
        for column, fragment in (ilike or {}).items():
            # Substring match; the fragment is literal text, not a pattern.
            query[column] = {"$regex": re.escape(fragment), "$options": "i"}

        projection: Dict[str, int] = {"_id": 0}
        if columns:
            projection.update({column: 1 for column in columns})

        try:
            cursor = self.database[table].find(query, projection)
            if order_by:
                cursor = cursor.sort(order_by, ASCENDING if ascending else DESCENDING)
            if limit:
                cursor = cursor.limit(limit)
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Lookup on '{table}' failed: {e}")
            raise UpstreamLookupError(str(e)) from e

    async def ping(self) -> bool:
        try:
            await self.database.command("ping")
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False
        return True


def get_data_source() -> MongoDataSource:
    """FastAPI dependency yielding the catalog data source."""
    return MongoDataSource(get_database())
