"""
MongoDB persistence for per-user analysis history
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING
from pymongo.errors import OperationFailure
from loguru import logger

from ..models.schemas import AnalysisRecord, AnalysisResult


def utcnow() -> datetime:
    # MongoDB stores milliseconds; trim so records round-trip unchanged
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


class HistoryService:
    """
    Append, list and clear the saved analyses of one user.

    Records are immutable once written. ``clear`` removes every record
    created up to the moment it runs; a save that commits after that
    moment is kept.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def ensure_indexes(self):
        """Create the index that backs per-user, newest-first listing"""
        try:
            await self.collection.create_index([("user_id", 1), ("created_at", DESCENDING)])
            logger.info("History indexes created successfully")
        except OperationFailure as e:
            logger.warning(f"Index creation failed (may already exist): {e}")

    async def save(self, user_id: str, file_name: str, result: AnalysisResult) -> AnalysisRecord:
        """Append one analysis with a server-assigned id and timestamp"""
        record = AnalysisRecord(
            id=f"analysis_{uuid.uuid4().hex}",
            file_name=file_name,
            created_at=utcnow(),
            **result.model_dump()
        )

        doc = record.model_dump(exclude={"id"})
        doc["_id"] = record.id
        doc["user_id"] = user_id
        await self.collection.insert_one(doc)

        logger.info(f"Saved analysis {record.id} for user {user_id}")
        return record

    async def list(self, user_id: str) -> List[AnalysisRecord]:
        """All records of a user, newest first"""
        cursor = self.collection.find({"user_id": user_id}).sort("created_at", DESCENDING)
        docs = await cursor.to_list(length=None)
        return [AnalysisRecord.from_document(doc) for doc in docs]

    async def get(self, user_id: str, record_id: str) -> Optional[AnalysisRecord]:
        doc = await self.collection.find_one({"_id": record_id, "user_id": user_id})
        if doc:
            return AnalysisRecord.from_document(doc)
        return None

    async def clear(self, user_id: str) -> int:
        """Delete a user's history in one operation; returns the number removed"""
        cutoff = utcnow()
        result = await self.collection.delete_many({
            "user_id": user_id,
            "created_at": {"$lte": cutoff}
        })
        logger.info(f"Cleared {result.deleted_count} analyses for user {user_id}")
        return result.deleted_count
