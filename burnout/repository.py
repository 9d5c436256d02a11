"""
Storage access for BAT assessment records.
Records are insert-only; reads never re-score.
"""
from typing import Any, Callable, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING

# Mongo's own key never leaves the repository
_HIDE_OBJECT_ID = {"_id": 0}
_TREND_FIELDS = {"_id": 0, "total_bat_score": 1, "timestamp": 1, "risk_level": 1}

# _id breaks ties between records written within the same timestamp tick
NEWEST_FIRST = [("timestamp", DESCENDING), ("_id", DESCENDING)]
OLDEST_FIRST = [("timestamp", ASCENDING), ("_id", ASCENDING)]


class AssessmentRepo:
    def __init__(self, collection=None, get_collection: Optional[Callable[[], Any]] = None) -> None:
        if collection is None and get_collection is None:
            raise ValueError("AssessmentRepo needs a collection or a way to get one")
        self._col = collection
        self._get_collection = get_collection

    @property
    def col(self):
        if self._col is None:
            self._col = self._get_collection()
        return self._col

    async def save(self, record: Dict[str, Any]) -> Dict[str, Any]:
        doc = dict(record)
        await self.col.insert_one(doc)
        doc.pop("_id", None)
        return doc

    async def latest(self, user_id: str) -> Optional[Dict[str, Any]]:
        cursor = self.col.find({"user_id": user_id}, _HIDE_OBJECT_ID).sort(NEWEST_FIRST).limit(1)
        docs = await cursor.to_list(length=1)
        return docs[0] if docs else None

    async def history(self, user_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        cursor = self.col.find({"user_id": user_id}, _HIDE_OBJECT_ID).sort(NEWEST_FIRST).limit(limit)
        return await cursor.to_list(length=limit)

    async def trend(self, user_id: str) -> List[Dict[str, Any]]:
        cursor = self.col.find({"user_id": user_id}, _TREND_FIELDS).sort(OLDEST_FIRST)
        return await cursor.to_list(length=None)

    async def get(self, user_id: str, assessment_id: str) -> Optional[Dict[str, Any]]:
        return await self.col.find_one({"user_id": user_id, "id": assessment_id}, _HIDE_OBJECT_ID)
